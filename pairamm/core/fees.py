"""
Fee configuration and fee splitting (deterministic, integer-only).

Two independent rates, both in basis points of 10_000 (100 = 1%):
- `lp_fee_bps` stays in the reserves (liquidity providers' share),
- `platform_fee_bps` is cut from the gross input and paid to
  `platform_fee_receiver`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..state.balances import Address
from .errors import InvalidAmount


BPS_DENOM = 10_000


def _require_bps(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidAmount(f"{name} must be an int")
    if not (0 <= value < BPS_DENOM):
        raise InvalidAmount(f"{name} must be in [0, {BPS_DENOM}): {value}")


@dataclass(frozen=True)
class FeeConfig:
    lp_fee_bps: int = 0
    platform_fee_bps: int = 0
    platform_fee_receiver: Optional[Address] = None

    def __post_init__(self) -> None:
        _require_bps("lp_fee_bps", self.lp_fee_bps)
        _require_bps("platform_fee_bps", self.platform_fee_bps)
        if self.total_fee_bps >= BPS_DENOM:
            raise InvalidAmount(f"total fee must be below {BPS_DENOM} bps, got {self.total_fee_bps}")
        if self.platform_fee_bps > 0 and not self.platform_fee_receiver:
            raise InvalidAmount("platform_fee_receiver is required when platform_fee_bps > 0")

    @property
    def total_fee_bps(self) -> int:
        return self.lp_fee_bps + self.platform_fee_bps

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lp_fee_bps": self.lp_fee_bps,
            "platform_fee_bps": self.platform_fee_bps,
            "platform_fee_receiver": self.platform_fee_receiver,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FeeConfig":
        return cls(
            lp_fee_bps=data.get("lp_fee_bps", 0),
            platform_fee_bps=data.get("platform_fee_bps", 0),
            platform_fee_receiver=data.get("platform_fee_receiver"),
        )


@dataclass(frozen=True)
class FeeSplit:
    lp_fee_amount: int
    platform_fee_amount: int
    net_amount: int


def split_fee(amount_in: int, lp_fee_bps: int, platform_fee_bps: int) -> FeeSplit:
    """
    Split a gross input into (lp fee, platform fee, net amount).

    platform_fee_amount = floor(amount_in * platform_fee_bps / 10_000)
    net_amount          = amount_in - platform_fee_amount
    lp_fee_amount       = net_amount - floor(net_amount * (10_000 - total_bps) / 10_000)

    Only `net_amount` reaches the reserves; `lp_fee_amount` is the part of it the
    curve does not price, so it stays with the liquidity providers.
    """
    if not isinstance(amount_in, int) or isinstance(amount_in, bool) or amount_in < 0:
        raise InvalidAmount(f"amount_in must be a non-negative int, got {amount_in}")
    _require_bps("lp_fee_bps", lp_fee_bps)
    _require_bps("platform_fee_bps", platform_fee_bps)
    total_bps = lp_fee_bps + platform_fee_bps
    if total_bps >= BPS_DENOM:
        raise InvalidAmount(f"total fee must be below {BPS_DENOM} bps, got {total_bps}")

    platform_fee_amount = (amount_in * platform_fee_bps) // BPS_DENOM
    net_amount = amount_in - platform_fee_amount
    lp_fee_amount = net_amount - (net_amount * (BPS_DENOM - total_bps)) // BPS_DENOM
    return FeeSplit(
        lp_fee_amount=lp_fee_amount,
        platform_fee_amount=platform_fee_amount,
        net_amount=net_amount,
    )
