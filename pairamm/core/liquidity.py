"""
Liquidity management: initial seed, deposits (two-sided and single-sided),
withdrawals (pro-rata and to a single asset).

Each entry point validates, computes the complete post-state, and commits it in
one step; estimates run the same code against a copy of the state.
"""

from dataclasses import dataclass, replace
from typing import NamedTuple, Optional

from ..kernels.python.lp_math import burn, mint_fixed_a, mint_initial, mint_optimal, zap_swap_amount
from ..state.balances import Amount
from ..state.pools import PoolState
from .cpmm import SwapQuote
from .errors import (
    AlreadyInitialized,
    InsufficientLiquidity,
    InvalidAmount,
    PoolNotInitialized,
    RatioMismatch,
)
from .fees import FeeConfig
from .guards import commit, require_seeded, require_share_asset
from .swap import swap_fixed_input


class AmountPair(NamedTuple):
    amount_a: Amount
    amount_b: Amount


@dataclass(frozen=True)
class AddLiquidityResult:
    shares_minted: Amount
    amount_b_used: Amount
    amount_b_refund: Amount


@dataclass(frozen=True)
class AddLiquiditySingleResult:
    shares_minted: Amount
    swap_amount_in: Amount
    swap_amount_out: Amount
    platform_fee_amount: Amount
    amount_a_used: Amount
    amount_b_used: Amount
    amount_a_refund: Amount
    amount_b_refund: Amount


@dataclass(frozen=True)
class RemoveLiquiditySingleResult:
    removed: AmountPair
    swap: Optional[SwapQuote]
    amount_out: Amount


def _require_positive(name: str, value: Amount) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidAmount(f"{name} must be an int")
    if value <= 0:
        raise InvalidAmount(f"{name} must be positive: {value}")


def add_initial_liquidity(state: PoolState, amount_a: Amount, amount_b: Amount) -> Amount:
    """
    Seed an empty pool.

    shares = isqrt(amount_a * amount_b)

    Raises:
        PoolNotInitialized: If the share asset is not issued yet
        AlreadyInitialized: If the pool already holds liquidity
        InvalidAmount: If either amount is not positive
    """
    require_share_asset(state)
    if state.share_supply != 0:
        raise AlreadyInitialized(f"Pool already seeded: share_supply={state.share_supply}")
    _require_positive("amount_a", amount_a)
    _require_positive("amount_b", amount_b)

    shares = mint_initial(amount_a=amount_a, amount_b=amount_b)
    commit(state, reserve_a=amount_a, reserve_b=amount_b, share_supply=shares)
    return shares


def add_liquidity(state: PoolState, amount_a_in: Amount, amount_b_in: Amount) -> AddLiquidityResult:
    """
    Deposit a fixed `amount_a_in` plus the matching share of asset B.

    amount_b_used = floor(amount_a_in * reserve_b / reserve_a)
    shares        = floor(amount_a_in * share_supply / reserve_a)

    The unused part of `amount_b_in` is returned as `amount_b_refund`.

    Raises:
        RatioMismatch: If `amount_b_in` does not cover `amount_b_used`
        InvalidAmount: If an amount is not positive or the deposit mints no shares
    """
    require_seeded(state)
    _require_positive("amount_a_in", amount_a_in)
    _require_positive("amount_b_in", amount_b_in)

    try:
        mint = mint_fixed_a(
            reserve_a=state.reserve_a,
            reserve_b=state.reserve_b,
            share_supply=state.share_supply,
            amount_a_in=amount_a_in,
            amount_b_in=amount_b_in,
        )
    except ValueError as exc:
        raise RatioMismatch(str(exc)) from exc
    if mint.shares_minted == 0:
        raise InvalidAmount(f"Deposit too small to mint shares: amount_a_in={amount_a_in}")

    commit(
        state,
        reserve_a=state.reserve_a + mint.amount_a_used,
        reserve_b=state.reserve_b + mint.amount_b_used,
        share_supply=state.share_supply + mint.shares_minted,
    )
    return AddLiquidityResult(
        shares_minted=mint.shares_minted,
        amount_b_used=mint.amount_b_used,
        amount_b_refund=mint.amount_b_refund,
    )


def add_liquidity_single(
    state: PoolState,
    fees: FeeConfig,
    amount_in: Amount,
    is_token_a_in: bool,
    *,
    amount_paired: Amount = 0,
) -> AddLiquiditySingleResult:
    """
    Deposit one asset (optionally with some of the other one).

    The part `x` of `amount_in` that must be sold so that the leftovers sit at the
    post-swap pool ratio is the positive root of the zap quadratic (see
    `lp_math.zap_swap_amount`). `x` is swapped through the regular fixed-input
    path, fees included, then the balanced amounts are deposited. Integer dust that
    cannot be deposited at the post-swap ratio is refunded.
    """
    require_seeded(state)
    _require_positive("amount_in", amount_in)
    if not isinstance(amount_paired, int) or isinstance(amount_paired, bool) or amount_paired < 0:
        raise InvalidAmount(f"amount_paired must be a non-negative int: {amount_paired}")

    reserve_in, reserve_out = state.reserves(is_token_a_in)
    swap_in = zap_swap_amount(
        amount_in=amount_in,
        amount_paired=amount_paired,
        reserve_in=reserve_in,
        reserve_out=reserve_out,
        lp_fee_bps=fees.lp_fee_bps,
        platform_fee_bps=fees.platform_fee_bps,
    )

    work = replace(state)
    swap_out = 0
    platform_fee = 0
    if swap_in > 0:
        quote = swap_fixed_input(work, fees, swap_in, is_token_a_in, allow_zero_out=True)
        swap_out = quote.amount_out
        platform_fee = quote.platform_fee

    deposit_a, deposit_b = work.ab_reserves(is_token_a_in, amount_in - swap_in, amount_paired + swap_out)
    mint = mint_optimal(
        reserve_a=work.reserve_a,
        reserve_b=work.reserve_b,
        share_supply=work.share_supply,
        amount_a_desired=deposit_a,
        amount_b_desired=deposit_b,
    )
    if mint.shares_minted == 0:
        raise InvalidAmount(f"Deposit too small to mint shares: amount_in={amount_in}")

    commit(
        state,
        reserve_a=work.reserve_a + mint.amount_a_used,
        reserve_b=work.reserve_b + mint.amount_b_used,
        share_supply=work.share_supply + mint.shares_minted,
    )
    return AddLiquiditySingleResult(
        shares_minted=mint.shares_minted,
        swap_amount_in=swap_in,
        swap_amount_out=swap_out,
        platform_fee_amount=platform_fee,
        amount_a_used=mint.amount_a_used,
        amount_b_used=mint.amount_b_used,
        amount_a_refund=mint.amount_a_refund,
        amount_b_refund=mint.amount_b_refund,
    )


def remove_liquidity(state: PoolState, shares_burned: Amount) -> AmountPair:
    """
    Burn shares for the pro-rata reserves (floor rounding, pool keeps the dust).

    Burning the whole supply empties both reserves exactly.

    Raises:
        InvalidAmount: If `shares_burned <= 0`
        InsufficientLiquidity: If `shares_burned > share_supply`
    """
    require_share_asset(state)
    if state.share_supply == 0:
        raise PoolNotInitialized("Pool has no liquidity yet")
    _require_positive("shares_burned", shares_burned)
    if shares_burned > state.share_supply:
        raise InsufficientLiquidity(
            f"Cannot burn more shares than supply: {shares_burned} > {state.share_supply}"
        )

    out = burn(
        shares=shares_burned,
        reserve_a=state.reserve_a,
        reserve_b=state.reserve_b,
        share_supply=state.share_supply,
    )
    commit(
        state,
        reserve_a=state.reserve_a - out.amount_a_out,
        reserve_b=state.reserve_b - out.amount_b_out,
        share_supply=state.share_supply - shares_burned,
    )
    return AmountPair(out.amount_a_out, out.amount_b_out)


def remove_liquidity_single(
    state: PoolState,
    fees: FeeConfig,
    shares_burned: Amount,
    is_token_a_out: bool,
) -> RemoveLiquiditySingleResult:
    """
    Withdraw, then sell the unwanted side against the post-withdrawal reserves.

    At most half the supply can leave this way; past that the remaining pool is
    too thin to price the second leg.

    Raises:
        InsufficientLiquidity: If `2 * shares_burned > share_supply`
    """
    require_seeded(state)
    _require_positive("shares_burned", shares_burned)
    if 2 * shares_burned > state.share_supply:
        raise InsufficientLiquidity(
            f"Cannot remove that much liquidity to one asset: {shares_burned} of {state.share_supply}"
        )

    work = replace(state)
    removed = remove_liquidity(work, shares_burned)
    if is_token_a_out:
        kept, sold = removed.amount_a, removed.amount_b
    else:
        kept, sold = removed.amount_b, removed.amount_a

    quote = None
    if sold > 0:
        quote = swap_fixed_input(work, fees, sold, not is_token_a_out, allow_zero_out=True)
    amount_out = kept + (quote.amount_out if quote is not None else 0)

    commit(state, reserve_a=work.reserve_a, reserve_b=work.reserve_b, share_supply=work.share_supply)
    return RemoveLiquiditySingleResult(removed=removed, swap=quote, amount_out=amount_out)


def estimate_add_liquidity(state: PoolState, amount_a_in: Amount, amount_b_in: Amount) -> AddLiquidityResult:
    return add_liquidity(replace(state), amount_a_in, amount_b_in)


def estimate_add_liquidity_single(
    state: PoolState,
    fees: FeeConfig,
    amount_in: Amount,
    is_token_a_in: bool,
    *,
    amount_paired: Amount = 0,
) -> AddLiquiditySingleResult:
    return add_liquidity_single(replace(state), fees, amount_in, is_token_a_in, amount_paired=amount_paired)


def estimate_remove_liquidity(state: PoolState, shares_burned: Amount) -> AmountPair:
    return remove_liquidity(replace(state), shares_burned)


def estimate_remove_liquidity_single(
    state: PoolState,
    fees: FeeConfig,
    shares_burned: Amount,
    is_token_a_out: bool,
) -> RemoveLiquiditySingleResult:
    """Withdrawal at pre-withdrawal reserves, then the swap at post-withdrawal reserves."""
    return remove_liquidity_single(replace(state), fees, shares_burned, is_token_a_out)
