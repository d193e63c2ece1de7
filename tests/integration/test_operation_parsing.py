# [TESTER] v1

from __future__ import annotations

import pytest

from pairamm.integration.ledger import Payment
from pairamm.integration.operations import OperationKind, parse_operation


def test_parse_swap() -> None:
    op = parse_operation(
        {
            "kind": "SWAP_FIXED_INPUT",
            "caller": "erd1alice",
            "payments": [{"asset": "WEGLD-abcdef", "amount": 1000}],
            "args": {"min_amount_out": 1},
        }
    )
    assert op.kind is OperationKind.SWAP_FIXED_INPUT
    assert op.payments == (Payment("WEGLD-abcdef", 1000),)
    assert op.args == {"min_amount_out": 1}


def test_parse_without_payments() -> None:
    op = parse_operation({"kind": "CONFIGURE_LP_FEE", "caller": "erd1owner", "args": {"bps": 30}})
    assert op.payments == ()


@pytest.mark.parametrize(
    "data, match",
    [
        ([], "must be an object"),
        ({"kind": "FLASH_LOAN", "caller": "x"}, "unknown operation kind"),
        ({"kind": "SWAP_FIXED_INPUT", "caller": ""}, "caller must be non-empty"),
        ({"kind": "SWAP_FIXED_INPUT", "caller": "x", "payments": {}}, "payments must be a list"),
        ({"kind": "ADD_LIQUIDITY", "caller": "x", "payments": [{"asset": "A", "amount": 1}]}, "expects 2"),
        (
            {"kind": "SWAP_FIXED_INPUT", "caller": "x", "payments": [{"asset": "A", "amount": -1}]},
            "non-negative",
        ),
        (
            {"kind": "SWAP_FIXED_INPUT", "caller": "x", "payments": [{"asset": "A", "amount": 1}], "args": {}},
            "missing arg",
        ),
        (
            {
                "kind": "SWAP_FIXED_INPUT",
                "caller": "x",
                "payments": [{"asset": "A", "amount": 1}],
                "args": {"min_amount_out": 1, "deadline": 5},
            },
            "unexpected args",
        ),
        (
            {"kind": "CONFIGURE_LP_FEE", "caller": "x", "args": {"bps": True}},
            "must be an int",
        ),
    ],
)
def test_parse_rejects_malformed(data, match: str) -> None:
    with pytest.raises(ValueError, match=match):
        parse_operation(data)
