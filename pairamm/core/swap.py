"""
Swap engine: applies constant-product trades to the pool state.

The platform fee never touches the reserves; it is reported in the returned
quote so the boundary layer can pay `platform_fee_receiver` directly.
Estimates run the same functions against a copy of the state.
"""

from __future__ import annotations

from dataclasses import replace

from ..state.balances import Amount
from ..state.pools import PoolState
from .cpmm import SwapQuote, quote_fixed_input, quote_fixed_output
from .errors import InvalidAmount
from .fees import FeeConfig
from .guards import commit, require_seeded


def _apply(state: PoolState, quote: SwapQuote, is_token_a_in: bool) -> None:
    reserve_a, reserve_b = state.ab_reserves(is_token_a_in, quote.new_reserve_in, quote.new_reserve_out)
    commit(state, reserve_a=reserve_a, reserve_b=reserve_b)


def swap_fixed_input(
    state: PoolState,
    fees: FeeConfig,
    amount_in: Amount,
    is_token_a_in: bool,
    *,
    allow_zero_out: bool = False,
) -> SwapQuote:
    """
    Swap a fixed `amount_in` of one asset for the other.

    Reserves move by `(+net_in, -amount_out)`; `net_in` excludes the platform fee.

    Raises:
        PoolNotInitialized: Before the share asset exists or before initial liquidity
        InvalidAmount: If `amount_in <= 0` or the trade is too small to yield output
    """
    require_seeded(state)
    quote = quote_fixed_input(amount_in, state.reserves(is_token_a_in), fees)
    if quote.amount_out == 0 and not allow_zero_out:
        raise InvalidAmount(f"amount_out is zero (trade too small): amount_in={amount_in}")
    _apply(state, quote, is_token_a_in)
    return quote


def swap_fixed_output(
    state: PoolState,
    fees: FeeConfig,
    amount_out_exact: Amount,
    is_token_a_out: bool,
) -> SwapQuote:
    """
    Swap for an exact `amount_out_exact`; the quote's `amount_in` is the gross
    input required, both fee components included.

    Raises:
        InsufficientLiquidity: If `amount_out_exact >= reserve_out`
    """
    require_seeded(state)
    is_token_a_in = not is_token_a_out
    quote = quote_fixed_output(amount_out_exact, state.reserves(is_token_a_in), fees)
    _apply(state, quote, is_token_a_in)
    return quote


def estimate_amount_out(state: PoolState, fees: FeeConfig, amount_in: Amount, is_token_a_in: bool) -> SwapQuote:
    return swap_fixed_input(replace(state), fees, amount_in, is_token_a_in)


def estimate_amount_in(state: PoolState, fees: FeeConfig, amount_out: Amount, is_token_a_out: bool) -> SwapQuote:
    return swap_fixed_output(replace(state), fees, amount_out, is_token_a_out)
