"""
Constant-product swap kernel for a two-fee pair.

Semantics:
- The platform fee is taken from the *gross* input with floor rounding and
  never reaches the reserves.
- The remaining `net_in` enters the curve discounted by the *total* fee
  (`lp_fee_bps + platform_fee_bps`), floor rounding.
- `net_in` is added to `reserve_in` in full, so the LP fee stays in the pool.
- Fixed-output quotes round every division up; the trader never underpays.

Small, integer-only and auditable: every intermediate is an explicit variable.
"""

from __future__ import annotations

from dataclasses import dataclass


BPS_DENOM = 10_000


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


def _ceil_div_nonneg(numerator: int, denominator: int) -> int:
    if denominator <= 0:
        raise ValueError("denominator must be positive")
    if numerator < 0:
        raise ValueError("numerator must be non-negative")
    return (numerator + denominator - 1) // denominator


def checked_sub(a: int, b: int, *, what: str = "value") -> int:
    """`a - b`, raising instead of going negative."""
    out = a - b
    if out < 0:
        raise ValueError(f"{what} underflow: {a} - {b} < 0")
    return out


def _require_fee_bps(name: str, fee_bps: int) -> None:
    _require_int(name, fee_bps)
    if not (0 <= fee_bps < BPS_DENOM):
        raise ValueError(f"{name} must be in [0, {BPS_DENOM})")


@dataclass(frozen=True)
class SwapResult:
    amount_in: int
    amount_out: int
    platform_fee: int
    lp_fee: int
    net_in: int
    new_reserve_in: int
    new_reserve_out: int
    k_before: int
    k_after: int


def compute_amount_out(*, amount_in: int, reserve_in: int, reserve_out: int, fee_bps: int) -> int:
    """
    `after_fee = floor(amount_in * (10_000 - fee_bps) / 10_000)`
    `amount_out = floor(after_fee * reserve_out / (reserve_in + after_fee))`
    """
    for name, v in (("amount_in", amount_in), ("reserve_in", reserve_in), ("reserve_out", reserve_out)):
        _require_int(name, v)
    _require_fee_bps("fee_bps", fee_bps)
    if amount_in < 0:
        raise ValueError("amount_in must be non-negative")
    if reserve_in <= 0 or reserve_out <= 0:
        raise ValueError("cannot price against an empty reserve")

    after_fee = (amount_in * (BPS_DENOM - fee_bps)) // BPS_DENOM
    amount_out = (after_fee * reserve_out) // (reserve_in + after_fee)
    if amount_out >= reserve_out:
        raise AssertionError("amount_out must stay below reserve_out")
    return amount_out


def compute_amount_in(*, amount_out: int, reserve_in: int, reserve_out: int, fee_bps: int) -> int:
    """
    `after_fee = ceil(reserve_in * amount_out / (reserve_out - amount_out))`
    `amount_in = ceil(after_fee * 10_000 / (10_000 - fee_bps))`
    """
    for name, v in (("amount_out", amount_out), ("reserve_in", reserve_in), ("reserve_out", reserve_out)):
        _require_int(name, v)
    _require_fee_bps("fee_bps", fee_bps)
    if amount_out < 0:
        raise ValueError("amount_out must be non-negative")
    if reserve_in <= 0 or reserve_out <= 0:
        raise ValueError("cannot price against an empty reserve")
    if amount_out >= reserve_out:
        raise ValueError("cannot drain full reserve_out")

    after_fee = _ceil_div_nonneg(reserve_in * amount_out, reserve_out - amount_out)
    return _ceil_div_nonneg(after_fee * BPS_DENOM, BPS_DENOM - fee_bps)


def compute_platform_fee(*, gross_in: int, platform_fee_bps: int) -> int:
    """`platform_fee = floor(gross_in * platform_fee_bps / 10_000)`."""
    _require_int("gross_in", gross_in)
    _require_fee_bps("platform_fee_bps", platform_fee_bps)
    if gross_in < 0:
        raise ValueError("gross_in must be non-negative")
    return (gross_in * platform_fee_bps) // BPS_DENOM


def compute_gross_for_net(*, net_in: int, platform_fee_bps: int) -> int:
    """
    Smallest `gross_in` with `gross_in - platform_fee(gross_in) >= net_in`.

    `gross - floor(gross * p / D) = ceil(gross * (D - p) / D)`, which reaches
    `net_in` first at `floor((net_in - 1) * D / (D - p)) + 1`.
    """
    _require_int("net_in", net_in)
    _require_fee_bps("platform_fee_bps", platform_fee_bps)
    if net_in < 0:
        raise ValueError("net_in must be non-negative")
    if net_in == 0:
        return 0
    return ((net_in - 1) * BPS_DENOM) // (BPS_DENOM - platform_fee_bps) + 1


def swap_fixed_input(
    *,
    reserve_in: int,
    reserve_out: int,
    amount_in: int,
    lp_fee_bps: int,
    platform_fee_bps: int,
) -> SwapResult:
    """Fixed-input quote + post-state. A zero `amount_out` is returned, not rejected."""
    _require_fee_bps("lp_fee_bps", lp_fee_bps)
    _require_fee_bps("platform_fee_bps", platform_fee_bps)
    fee_bps = lp_fee_bps + platform_fee_bps
    if fee_bps >= BPS_DENOM:
        raise ValueError("total fee must be below 100%")
    if amount_in <= 0:
        raise ValueError("amount_in must be positive")

    k_before = reserve_in * reserve_out

    platform_fee = compute_platform_fee(gross_in=amount_in, platform_fee_bps=platform_fee_bps)
    net_in = checked_sub(amount_in, platform_fee, what="net_in")
    amount_out = compute_amount_out(
        amount_in=net_in, reserve_in=reserve_in, reserve_out=reserve_out, fee_bps=fee_bps
    )
    lp_fee = net_in - (net_in * (BPS_DENOM - fee_bps)) // BPS_DENOM

    new_reserve_in = reserve_in + net_in
    new_reserve_out = checked_sub(reserve_out, amount_out, what="reserve_out")

    return SwapResult(
        amount_in=amount_in,
        amount_out=amount_out,
        platform_fee=platform_fee,
        lp_fee=lp_fee,
        net_in=net_in,
        new_reserve_in=new_reserve_in,
        new_reserve_out=new_reserve_out,
        k_before=k_before,
        k_after=new_reserve_in * new_reserve_out,
    )


def swap_fixed_output(
    *,
    reserve_in: int,
    reserve_out: int,
    amount_out: int,
    lp_fee_bps: int,
    platform_fee_bps: int,
) -> SwapResult:
    """
    Fixed-output quote + post-state.

    The curve input (`net_in`) is priced with the total fee; the gross input then
    adds the platform fee on top so the split on the way in is the same as for a
    fixed-input swap of `amount_in`.
    """
    _require_fee_bps("lp_fee_bps", lp_fee_bps)
    _require_fee_bps("platform_fee_bps", platform_fee_bps)
    fee_bps = lp_fee_bps + platform_fee_bps
    if fee_bps >= BPS_DENOM:
        raise ValueError("total fee must be below 100%")
    if amount_out <= 0:
        raise ValueError("amount_out must be positive")

    k_before = reserve_in * reserve_out

    net_required = compute_amount_in(
        amount_out=amount_out, reserve_in=reserve_in, reserve_out=reserve_out, fee_bps=fee_bps
    )
    amount_in = compute_gross_for_net(net_in=net_required, platform_fee_bps=platform_fee_bps)
    platform_fee = compute_platform_fee(gross_in=amount_in, platform_fee_bps=platform_fee_bps)
    net_in = checked_sub(amount_in, platform_fee, what="net_in")
    if net_in < net_required:
        raise AssertionError("gross input does not cover the required net input")
    lp_fee = net_in - (net_in * (BPS_DENOM - fee_bps)) // BPS_DENOM

    new_reserve_in = reserve_in + net_in
    new_reserve_out = checked_sub(reserve_out, amount_out, what="reserve_out")

    return SwapResult(
        amount_in=amount_in,
        amount_out=amount_out,
        platform_fee=platform_fee,
        lp_fee=lp_fee,
        net_in=net_in,
        new_reserve_in=new_reserve_in,
        new_reserve_out=new_reserve_out,
        k_before=k_before,
        k_after=new_reserve_in * new_reserve_out,
    )
