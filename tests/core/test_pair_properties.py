"""Property tests for the pair engines: pricing laws and pool invariants under
random operation sequences."""

from __future__ import annotations

import math
from dataclasses import replace

import hypothesis.strategies as st
from hypothesis import assume, given, settings

from pairamm.core.cpmm import amount_in_for_fixed_output, amount_out_for_fixed_input
from pairamm.core.errors import InvalidAmount, PairError
from pairamm.core.fees import FeeConfig
from pairamm.core.liquidity import add_initial_liquidity, add_liquidity, add_liquidity_single, remove_liquidity
from pairamm.core.swap import swap_fixed_input, swap_fixed_output
from pairamm.state.pools import IssuanceStatus, PoolState


reserves = st.integers(min_value=1, max_value=10**24)
amounts = st.integers(min_value=0, max_value=10**24)
fee_bps = st.integers(min_value=0, max_value=9_999)


@st.composite
def fee_configs(draw) -> FeeConfig:
    lp = draw(st.integers(min_value=0, max_value=1_000))
    platform = draw(st.integers(min_value=0, max_value=1_000))
    return FeeConfig(lp_fee_bps=lp, platform_fee_bps=platform, platform_fee_receiver="erd1treasury")


@given(a=amounts, b=amounts, r_in=reserves, r_out=reserves, fee=fee_bps)
@settings(max_examples=300, deadline=2000)
def test_fixed_input_is_monotone(a: int, b: int, r_in: int, r_out: int, fee: int) -> None:
    lo, hi = sorted((a, b))
    assert amount_out_for_fixed_input(lo, r_in, r_out, fee) <= amount_out_for_fixed_input(hi, r_in, r_out, fee)


@given(x=amounts, r_in=reserves, r_out=reserves, fee=fee_bps)
@settings(max_examples=300, deadline=2000)
def test_output_never_drains_reserve(x: int, r_in: int, r_out: int, fee: int) -> None:
    assert amount_out_for_fixed_input(x, r_in, r_out, fee) < r_out


@given(x=amounts, r_in=reserves, r_out=reserves, fee=fee_bps)
@settings(max_examples=300, deadline=2000)
def test_fixed_output_round_trip_never_overcharges(x: int, r_in: int, r_out: int, fee: int) -> None:
    out = amount_out_for_fixed_input(x, r_in, r_out, fee)
    assume(out > 0)
    assert amount_in_for_fixed_output(out, r_in, r_out, fee) <= x


# One step of a random pool history: (op, amount, direction flag)
ops = st.lists(
    st.tuples(
        st.sampled_from(["swap_in", "swap_out", "add", "zap", "remove"]),
        st.integers(min_value=1, max_value=10**12),
        st.booleans(),
    ),
    min_size=1,
    max_size=25,
)


@given(
    seed_a=st.integers(min_value=1, max_value=10**12),
    seed_b=st.integers(min_value=1, max_value=10**12),
    fees=fee_configs(),
    steps=ops,
)
@settings(max_examples=200, deadline=5000)
def test_pool_invariants_hold_across_histories(seed_a: int, seed_b: int, fees: FeeConfig, steps) -> None:
    state = PoolState(asset_a="A", asset_b="B", share_asset_id="LP", issuance=IssuanceStatus.READY)
    add_initial_liquidity(state, seed_a, seed_b)

    for op, amount, flag in steps:
        before = replace(state)
        try:
            if op == "swap_in":
                swap_fixed_input(state, fees, amount, flag)
            elif op == "swap_out":
                swap_fixed_output(state, fees, amount, flag)
            elif op == "add":
                add_liquidity(state, amount, amount * 2 + state.reserve_b)
            elif op == "zap":
                add_liquidity_single(state, fees, amount, flag)
            else:
                remove_liquidity(state, min(amount, state.share_supply))
        except PairError:
            # A rejected call leaves the pool exactly as it was.
            assert state == before
            continue

        assert state.invariant_violations() == []
        assert (state.reserve_a == 0) == (state.reserve_b == 0) == (state.share_supply == 0)
        if op in ("swap_in", "swap_out"):
            assert state.constant_product() >= before.constant_product()
            assert state.share_supply == before.share_supply
        if state.is_empty:
            break


@given(x=st.integers(min_value=2, max_value=10**12), y=st.integers(min_value=1, max_value=10**12), data=st.data())
@settings(max_examples=300, deadline=2000)
def test_remove_then_add_restores_share_supply(x: int, y: int, data) -> None:
    # At most one share per unit of asset A, and at most half the supply burned,
    # keeps the floor losses of both legs within two shares.
    seed_b, seed_a = sorted((x, y))
    state = PoolState(asset_a="A", asset_b="B", share_asset_id="LP", issuance=IssuanceStatus.READY)
    add_initial_liquidity(state, seed_a, seed_b)
    supply_before = state.share_supply
    assume(supply_before >= 2)
    shares = data.draw(st.integers(min_value=1, max_value=supply_before // 2), label="shares")

    out = remove_liquidity(state, shares)
    assert out.amount_a > 0
    try:
        add_liquidity(state, out.amount_a, out.amount_b + state.reserve_b)
    except InvalidAmount:
        assert shares <= 2

    assert abs(state.share_supply - supply_before) <= 2
    assert state.share_supply <= supply_before
    assert state.invariant_violations() == []


@given(seed_a=st.integers(min_value=1, max_value=10**15), seed_b=st.integers(min_value=1, max_value=10**15))
@settings(max_examples=200, deadline=2000)
def test_initial_shares_are_integer_geometric_mean(seed_a: int, seed_b: int) -> None:
    state = PoolState(asset_a="A", asset_b="B", share_asset_id="LP", issuance=IssuanceStatus.READY)
    shares = add_initial_liquidity(state, seed_a, seed_b)
    assert shares == math.isqrt(seed_a * seed_b)
    assert shares > 0
    out = remove_liquidity(state, shares)
    assert out == (seed_a, seed_b)
    assert state.is_empty
