# [TESTER] v1

from __future__ import annotations

import math

import pytest

from pairamm.kernels.python.lp_math import burn, mint_fixed_a, mint_initial, mint_optimal, zap_swap_amount


def test_mint_initial_uses_integer_isqrt() -> None:
    # Values where float sqrt would lose precision.
    n = (1 << 70) + 12345
    assert mint_initial(amount_a=n, amount_b=n) == n
    assert mint_initial(amount_a=1_000_000, amount_b=2_000_000) == math.isqrt(2 * 10**12)


def test_mint_initial_rejects_zero() -> None:
    with pytest.raises(ValueError, match="positive"):
        mint_initial(amount_a=0, amount_b=10)


def test_mint_fixed_a_refunds_excess_b() -> None:
    res = mint_fixed_a(reserve_a=1000, reserve_b=2000, share_supply=1414, amount_a_in=100, amount_b_in=250)
    assert res.amount_b_used == 200
    assert res.amount_b_refund == 50
    assert res.shares_minted == 141


def test_mint_fixed_a_rejects_short_b() -> None:
    with pytest.raises(ValueError, match="amount_b_used"):
        mint_fixed_a(reserve_a=1000, reserve_b=2000, share_supply=1414, amount_a_in=100, amount_b_in=199)


def test_mint_optimal_fixes_limiting_side() -> None:
    res = mint_optimal(reserve_a=1000, reserve_b=2000, share_supply=1000, amount_a_desired=100, amount_b_desired=100)
    assert res.amount_b_used == 100
    assert res.amount_a_used == 50
    assert res.amount_a_refund == 50
    assert res.shares_minted == 50


def test_burn_whole_supply_returns_whole_reserves() -> None:
    res = burn(shares=1414, reserve_a=1000, reserve_b=2000, share_supply=1414)
    assert (res.amount_a_out, res.amount_b_out) == (1000, 2000)


def test_burn_rejects_more_than_supply() -> None:
    with pytest.raises(ValueError, match="share_supply"):
        burn(shares=11, reserve_a=10, reserve_b=10, share_supply=10)


def test_zap_is_zero_at_pool_ratio() -> None:
    assert (
        zap_swap_amount(
            amount_in=1000,
            amount_paired=2000,
            reserve_in=1_000_000,
            reserve_out=2_000_000,
            lp_fee_bps=30,
            platform_fee_bps=10,
        )
        == 0
    )


def test_zap_without_fees_matches_closed_form() -> None:
    # With no fees the root is isqrt(r * (r + d)) - r.
    r, d = 1_000_000, 2000
    x = zap_swap_amount(amount_in=d, amount_paired=0, reserve_in=r, reserve_out=r, lp_fee_bps=0, platform_fee_bps=0)
    assert abs(x - (math.isqrt(r * (r + d)) - r)) <= 1


def test_zap_with_fees_swaps_a_bit_more_than_half() -> None:
    x = zap_swap_amount(
        amount_in=10_000, amount_paired=0, reserve_in=1_000_000, reserve_out=1_000_000, lp_fee_bps=30, platform_fee_bps=0
    )
    assert 4990 < x < 5050
