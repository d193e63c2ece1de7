# [TESTER] v1

from __future__ import annotations

import pytest

from pairamm.core.cpmm import (
    amount_in_for_fixed_output,
    amount_out_for_fixed_input,
    gross_input_for_net,
    quote_fixed_input,
    quote_fixed_output,
)
from pairamm.core.errors import InsufficientLiquidity, InvalidAmount, PoolNotInitialized
from pairamm.core.fees import FeeConfig


def test_fixed_input_no_fee_scenario() -> None:
    assert amount_out_for_fixed_input(1000, 1_000_000, 2_000_000, 0) == 1998


def test_fixed_input_zero_amount_yields_zero() -> None:
    assert amount_out_for_fixed_input(0, 1_000_000, 2_000_000, 30) == 0


def test_fixed_output_rounds_in_favor_of_pool() -> None:
    amount_in = amount_in_for_fixed_output(1998, 1_000_000, 2_000_000, 0)
    assert amount_in == 1000
    assert amount_out_for_fixed_input(amount_in, 1_000_000, 2_000_000, 0) >= 1998


def test_fixed_output_cannot_drain_reserve() -> None:
    with pytest.raises(InsufficientLiquidity):
        amount_in_for_fixed_output(2_000_000, 1_000_000, 2_000_000, 0)


def test_empty_reserves_are_not_initialized() -> None:
    with pytest.raises(PoolNotInitialized):
        amount_out_for_fixed_input(10, 0, 0, 0)


def test_out_of_range_fee_is_invalid_amount() -> None:
    with pytest.raises(InvalidAmount):
        amount_out_for_fixed_input(10, 100, 100, 10_000)


def test_gross_input_for_net() -> None:
    assert gross_input_for_net(0, 10) == 0
    # 9999 - floor(9999 * 10 / 10_000) == 9990
    assert gross_input_for_net(9990, 10) == 9999
    assert gross_input_for_net(9990, 0) == 9990


def test_quote_fixed_input_scenario_with_two_fees() -> None:
    fees = FeeConfig(lp_fee_bps=30, platform_fee_bps=10, platform_fee_receiver="erd1treasury")
    quote = quote_fixed_input(10_000, (500_000, 500_000), fees)
    assert quote.platform_fee == 10
    assert quote.net_in == 9990
    assert quote.amount_out == 9755
    assert quote.new_reserve_in == 500_000 + 9990
    assert quote.new_reserve_out == 500_000 - 9755


def test_quote_fixed_output_reports_gross_input() -> None:
    fees = FeeConfig(lp_fee_bps=30, platform_fee_bps=10, platform_fee_receiver="erd1treasury")
    quote = quote_fixed_output(9755, (500_000, 500_000), fees)
    assert quote.amount_out == 9755
    assert quote.amount_in == quote.net_in + quote.platform_fee
    assert quote_fixed_input(quote.amount_in, (500_000, 500_000), fees).amount_out >= 9755


def test_quote_rejects_non_positive_amount() -> None:
    with pytest.raises(InvalidAmount):
        quote_fixed_input(0, (100, 100), FeeConfig())
    with pytest.raises(InvalidAmount):
        quote_fixed_output(0, (100, 100), FeeConfig())
