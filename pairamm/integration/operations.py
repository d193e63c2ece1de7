"""
Operation envelopes for the pair engine.

An operation is a JSON object:

    {
        "kind": "SWAP_FIXED_INPUT",
        "caller": "erd1alice",
        "payments": [{"asset": "WEGLD-abcdef", "amount": 1000}],
        "args": {"min_amount_out": 1}
    }

`parse_operation` checks structure and types only; pool-level validation
(asset ids, amounts against reserves) happens in the engine.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum, unique
from typing import Any, Dict, List, Tuple

from .ledger import Payment


@unique
class OperationKind(Enum):
    INIT_POOL = "INIT_POOL"
    ISSUE_SHARE_ASSET = "ISSUE_SHARE_ASSET"
    ADD_INITIAL_LIQUIDITY = "ADD_INITIAL_LIQUIDITY"
    CONFIGURE_LP_FEE = "CONFIGURE_LP_FEE"
    CONFIGURE_PLATFORM_FEE = "CONFIGURE_PLATFORM_FEE"
    ADD_LIQUIDITY = "ADD_LIQUIDITY"
    ADD_LIQUIDITY_SINGLE = "ADD_LIQUIDITY_SINGLE"
    REMOVE_LIQUIDITY = "REMOVE_LIQUIDITY"
    REMOVE_LIQUIDITY_SINGLE = "REMOVE_LIQUIDITY_SINGLE"
    SWAP_FIXED_INPUT = "SWAP_FIXED_INPUT"
    SWAP_FIXED_OUTPUT = "SWAP_FIXED_OUTPUT"


# kind -> (number of payments, {arg name: expected type})
_SHAPES: Dict[OperationKind, Tuple[int, Dict[str, type]]] = {
    OperationKind.INIT_POOL: (0, {"asset_a": str, "asset_b": str}),
    OperationKind.ISSUE_SHARE_ASSET: (1, {}),
    OperationKind.ADD_INITIAL_LIQUIDITY: (2, {}),
    OperationKind.CONFIGURE_LP_FEE: (0, {"bps": int}),
    OperationKind.CONFIGURE_PLATFORM_FEE: (0, {"bps": int, "receiver": str}),
    OperationKind.ADD_LIQUIDITY: (2, {"min_amount_b": int}),
    OperationKind.ADD_LIQUIDITY_SINGLE: (1, {"min_amount_a": int, "min_amount_b": int}),
    OperationKind.REMOVE_LIQUIDITY: (1, {"min_amount_a": int, "min_amount_b": int}),
    OperationKind.REMOVE_LIQUIDITY_SINGLE: (1, {"token_out": str, "min_amount_a": int, "min_amount_b": int}),
    OperationKind.SWAP_FIXED_INPUT: (1, {"min_amount_out": int}),
    OperationKind.SWAP_FIXED_OUTPUT: (1, {"amount_out": int}),
}


def _require_str(value: Any, *, name: str, non_empty: bool = True, max_len: int = 256) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{name} must be a string")
    if non_empty and not value:
        raise ValueError(f"{name} must be non-empty")
    if max_len > 0 and len(value) > max_len:
        raise ValueError(f"{name} too large")
    return value


def _require_int(value: Any, *, name: str, non_negative: bool = True) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"{name} must be an int")
    if non_negative and value < 0:
        raise ValueError(f"{name} must be non-negative")
    return int(value)


@dataclass(frozen=True)
class PairOperation:
    kind: OperationKind
    caller: str
    payments: Tuple[Payment, ...] = ()
    args: Dict[str, Any] = field(default_factory=dict)


def _parse_payments(value: Any) -> List[Payment]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError("payments must be a list")
    out: List[Payment] = []
    for i, item in enumerate(value):
        if not isinstance(item, Mapping):
            raise ValueError(f"payments[{i}] must be an object")
        out.append(
            Payment(
                asset=_require_str(item.get("asset"), name=f"payments[{i}].asset"),
                amount=_require_int(item.get("amount"), name=f"payments[{i}].amount"),
            )
        )
    return out


def parse_operation(data: Any) -> PairOperation:
    """
    Parse and shape-check one operation envelope.

    Raises:
        ValueError: If the structure, kind, payment count or argument types are invalid
    """
    if not isinstance(data, Mapping):
        raise ValueError(f"operation must be an object, got {type(data).__name__}")

    raw_kind = _require_str(data.get("kind"), name="kind")
    try:
        kind = OperationKind(raw_kind)
    except ValueError as exc:
        raise ValueError(f"unknown operation kind: {raw_kind!r}") from exc

    caller = _require_str(data.get("caller"), name="caller")
    payments = _parse_payments(data.get("payments"))
    n_payments, arg_types = _SHAPES[kind]
    if len(payments) != n_payments:
        raise ValueError(f"{kind.value} expects {n_payments} payment(s), got {len(payments)}")

    raw_args = data.get("args", {})
    if not isinstance(raw_args, Mapping):
        raise ValueError("args must be an object")
    unknown = sorted(set(raw_args) - set(arg_types))
    if unknown:
        raise ValueError(f"unexpected args for {kind.value}: {unknown}")

    args: Dict[str, Any] = {}
    for name, typ in arg_types.items():
        if name not in raw_args:
            raise ValueError(f"missing arg {name!r} for {kind.value}")
        if typ is int:
            args[name] = _require_int(raw_args[name], name=name)
        else:
            args[name] = _require_str(raw_args[name], name=name)

    return PairOperation(kind=kind, caller=caller, payments=tuple(payments), args=args)
