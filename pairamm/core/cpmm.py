"""
Constant-product pricing for the pair.

This module implements the pricing rules with deterministic rounding:

- fixed input:  after_fee = floor(amount_in * (10_000 - fee) / 10_000)
                amount_out = floor(after_fee * reserve_out / (reserve_in + after_fee))
- fixed output: after_fee = ceil(reserve_in * amount_out / (reserve_out - amount_out))
                amount_in = ceil(after_fee * 10_000 / (10_000 - fee))

Every rounding step favors the pool. Functions here are pure; they validate
their inputs, delegate the arithmetic to the integer kernel and translate
failures into the pair error taxonomy.
"""

from typing import Tuple

from ..kernels.python.cpmm_swap import SwapResult
from ..kernels.python.cpmm_swap import compute_amount_in as _kernel_amount_in
from ..kernels.python.cpmm_swap import compute_amount_out as _kernel_amount_out
from ..kernels.python.cpmm_swap import compute_gross_for_net as _kernel_gross_for_net
from ..kernels.python.cpmm_swap import swap_fixed_input as _kernel_swap_fixed_input
from ..kernels.python.cpmm_swap import swap_fixed_output as _kernel_swap_fixed_output
from ..state.balances import Amount
from .errors import InsufficientLiquidity, InvalidAmount, InvariantViolation, PoolNotInitialized
from .fees import BPS_DENOM, FeeConfig, FeeSplit, split_fee

SwapQuote = SwapResult

__all__ = [
    "SwapQuote",
    "FeeSplit",
    "split_fee",
    "amount_out_for_fixed_input",
    "amount_in_for_fixed_output",
    "gross_input_for_net",
    "quote_fixed_input",
    "quote_fixed_output",
]


def _require_amount(name: str, value: int, *, positive: bool) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidAmount(f"{name} must be an int")
    if value < 0 or (positive and value == 0):
        raise InvalidAmount(f"{name} must be {'positive' if positive else 'non-negative'}: {value}")


def _require_reserves(reserve_in: Amount, reserve_out: Amount) -> None:
    _require_amount("reserve_in", reserve_in, positive=False)
    _require_amount("reserve_out", reserve_out, positive=False)
    if reserve_in == 0 or reserve_out == 0:
        raise PoolNotInitialized(f"Cannot price against empty reserves: ({reserve_in}, {reserve_out})")


def _require_fee(fee_bps_total: int) -> None:
    if not isinstance(fee_bps_total, int) or isinstance(fee_bps_total, bool):
        raise InvalidAmount("fee_bps_total must be an int")
    if not (0 <= fee_bps_total < BPS_DENOM):
        raise InvalidAmount(f"fee_bps_total must be in [0, {BPS_DENOM}): {fee_bps_total}")


def amount_out_for_fixed_input(
    amount_in: Amount,
    reserve_in: Amount,
    reserve_out: Amount,
    fee_bps_total: int,
) -> Amount:
    """
    Output amount for a fixed input.

    Guarantees `amount_out < reserve_out` and is monotonically non-decreasing
    in `amount_in`.

    Raises:
        InvalidAmount: On a negative amount or out-of-range fee
        PoolNotInitialized: If either reserve is empty
    """
    _require_amount("amount_in", amount_in, positive=False)
    _require_reserves(reserve_in, reserve_out)
    _require_fee(fee_bps_total)
    return _kernel_amount_out(
        amount_in=amount_in, reserve_in=reserve_in, reserve_out=reserve_out, fee_bps=fee_bps_total
    )


def amount_in_for_fixed_output(
    amount_out: Amount,
    reserve_in: Amount,
    reserve_out: Amount,
    fee_bps_total: int,
) -> Amount:
    """
    Input amount required for a fixed output (both divisions round up).

    Raises:
        InsufficientLiquidity: If `amount_out >= reserve_out`
    """
    _require_amount("amount_out", amount_out, positive=False)
    _require_reserves(reserve_in, reserve_out)
    _require_fee(fee_bps_total)
    if amount_out >= reserve_out:
        raise InsufficientLiquidity(
            f"Cannot drain full reserve: amount_out ({amount_out}) >= reserve_out ({reserve_out})"
        )
    return _kernel_amount_in(
        amount_out=amount_out, reserve_in=reserve_in, reserve_out=reserve_out, fee_bps=fee_bps_total
    )


def gross_input_for_net(net_required: Amount, platform_fee_bps: int) -> Amount:
    """Smallest gross input whose net amount after the platform cut covers `net_required`."""
    _require_amount("net_required", net_required, positive=False)
    _require_fee(platform_fee_bps)
    return _kernel_gross_for_net(net_in=net_required, platform_fee_bps=platform_fee_bps)


def _check_k(quote: SwapQuote) -> SwapQuote:
    if quote.k_after < quote.k_before:
        raise InvariantViolation([f"k_decreased({quote.k_before}->{quote.k_after})"])
    return quote


def quote_fixed_input(
    amount_in: Amount,
    reserves: Tuple[Amount, Amount],
    fees: FeeConfig,
) -> SwapQuote:
    """
    Full fixed-input quote: platform cut, curve output, post-swap reserves.

    Args:
        amount_in: Gross input paid by the trader
        reserves: (reserve_in, reserve_out)
        fees: Current fee configuration

    Returns:
        SwapQuote with `new_reserve_in = reserve_in + net_in`
    """
    reserve_in, reserve_out = reserves
    _require_amount("amount_in", amount_in, positive=True)
    _require_reserves(reserve_in, reserve_out)
    quote = _kernel_swap_fixed_input(
        reserve_in=reserve_in,
        reserve_out=reserve_out,
        amount_in=amount_in,
        lp_fee_bps=fees.lp_fee_bps,
        platform_fee_bps=fees.platform_fee_bps,
    )
    return _check_k(quote)


def quote_fixed_output(
    amount_out: Amount,
    reserves: Tuple[Amount, Amount],
    fees: FeeConfig,
) -> SwapQuote:
    """
    Full fixed-output quote: gross input including both fee components.

    Raises:
        InsufficientLiquidity: If `amount_out >= reserve_out`
    """
    reserve_in, reserve_out = reserves
    _require_amount("amount_out", amount_out, positive=True)
    _require_reserves(reserve_in, reserve_out)
    if amount_out >= reserve_out:
        raise InsufficientLiquidity(
            f"Cannot drain full reserve: amount_out ({amount_out}) >= reserve_out ({reserve_out})"
        )
    quote = _kernel_swap_fixed_output(
        reserve_in=reserve_in,
        reserve_out=reserve_out,
        amount_out=amount_out,
        lp_fee_bps=fees.lp_fee_bps,
        platform_fee_bps=fees.platform_fee_bps,
    )
    return _check_k(quote)
