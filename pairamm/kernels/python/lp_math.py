"""
Liquidity math kernel for a two-asset constant-product pair.

Pure functions with explicit rounding rules:
- initial mint is the integer geometric mean of the two deposits,
- proportional mints and burns round down (the pool keeps the dust),
- the single-sided split is the closed-form root of the zap quadratic.
"""

from __future__ import annotations

import math
from dataclasses import dataclass


BPS_DENOM = 10_000


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


@dataclass(frozen=True)
class MintResult:
    shares_minted: int
    amount_a_used: int
    amount_b_used: int
    amount_a_refund: int
    amount_b_refund: int


@dataclass(frozen=True)
class BurnResult:
    amount_a_out: int
    amount_b_out: int


def mint_initial(*, amount_a: int, amount_b: int) -> int:
    """`shares = isqrt(amount_a * amount_b)` for the first deposit."""
    _require_int("amount_a", amount_a)
    _require_int("amount_b", amount_b)
    if amount_a <= 0 or amount_b <= 0:
        raise ValueError("initial amounts must be positive")
    return math.isqrt(amount_a * amount_b)


def mint_fixed_a(
    *,
    reserve_a: int,
    reserve_b: int,
    share_supply: int,
    amount_a_in: int,
    amount_b_in: int,
) -> MintResult:
    """
    Deposit driven by a fixed `amount_a_in`.

    `amount_b_used = floor(amount_a_in * reserve_b / reserve_a)`
    `shares = floor(amount_a_in * share_supply / reserve_a)`

    Raises ValueError if `amount_b_used > amount_b_in`.
    """
    for name, v in (
        ("reserve_a", reserve_a),
        ("reserve_b", reserve_b),
        ("share_supply", share_supply),
        ("amount_a_in", amount_a_in),
        ("amount_b_in", amount_b_in),
    ):
        _require_int(name, v)
    if reserve_a <= 0 or reserve_b <= 0 or share_supply <= 0:
        raise ValueError("cannot mint proportionally into an empty pool")
    if amount_a_in <= 0 or amount_b_in < 0:
        raise ValueError("deposit amounts must be positive")

    amount_b_used = (amount_a_in * reserve_b) // reserve_a
    if amount_b_used > amount_b_in:
        raise ValueError(f"amount_b_used ({amount_b_used}) > amount_b_in ({amount_b_in})")
    shares = (amount_a_in * share_supply) // reserve_a

    return MintResult(
        shares_minted=shares,
        amount_a_used=amount_a_in,
        amount_b_used=amount_b_used,
        amount_a_refund=0,
        amount_b_refund=amount_b_in - amount_b_used,
    )


def mint_optimal(
    *,
    reserve_a: int,
    reserve_b: int,
    share_supply: int,
    amount_a_desired: int,
    amount_b_desired: int,
) -> MintResult:
    """
    Ratio-preserving deposit of whichever side is limiting.

    Tries the fixed-A rule first; if the B side cannot cover it, fixes B instead:
    `amount_a_used = floor(amount_b_desired * reserve_a / reserve_b)`,
    `shares = floor(amount_b_desired * share_supply / reserve_b)`.
    """
    for name, v in (
        ("reserve_a", reserve_a),
        ("reserve_b", reserve_b),
        ("share_supply", share_supply),
        ("amount_a_desired", amount_a_desired),
        ("amount_b_desired", amount_b_desired),
    ):
        _require_int(name, v)
    if reserve_a <= 0 or reserve_b <= 0 or share_supply <= 0:
        raise ValueError("cannot mint proportionally into an empty pool")
    if amount_a_desired < 0 or amount_b_desired < 0:
        raise ValueError("desired amounts must be non-negative")

    amount_b_from_a = (amount_a_desired * reserve_b) // reserve_a
    if amount_b_from_a <= amount_b_desired:
        amount_a_used = amount_a_desired
        amount_b_used = amount_b_from_a
        shares = (amount_a_used * share_supply) // reserve_a
    else:
        amount_a_used = (amount_b_desired * reserve_a) // reserve_b
        amount_b_used = amount_b_desired
        shares = (amount_b_used * share_supply) // reserve_b

    if amount_a_used > amount_a_desired or amount_b_used > amount_b_desired:
        raise AssertionError("used amounts exceed desired amounts")

    return MintResult(
        shares_minted=shares,
        amount_a_used=amount_a_used,
        amount_b_used=amount_b_used,
        amount_a_refund=amount_a_desired - amount_a_used,
        amount_b_refund=amount_b_desired - amount_b_used,
    )


def burn(*, shares: int, reserve_a: int, reserve_b: int, share_supply: int) -> BurnResult:
    """Burn shares for the pro-rata underlying amounts (floor rounding)."""
    for name, v in (
        ("shares", shares),
        ("reserve_a", reserve_a),
        ("reserve_b", reserve_b),
        ("share_supply", share_supply),
    ):
        _require_int(name, v)

    if shares <= 0:
        raise ValueError("shares must be positive")
    if reserve_a < 0 or reserve_b < 0:
        raise ValueError("reserves must be non-negative")
    if share_supply <= 0:
        raise ValueError("share_supply must be positive")
    if shares > share_supply:
        raise ValueError("cannot burn more than share_supply")

    return BurnResult(
        amount_a_out=(shares * reserve_a) // share_supply,
        amount_b_out=(shares * reserve_b) // share_supply,
    )


def zap_swap_amount(
    *,
    amount_in: int,
    amount_paired: int,
    reserve_in: int,
    reserve_out: int,
    lp_fee_bps: int,
    platform_fee_bps: int,
) -> int:
    """
    Portion `x` of `amount_in` to swap so the leftovers match the post-swap ratio.

    With `P = 10_000 - platform_fee_bps`, `F = 10_000 - (lp_fee_bps + platform_fee_bps)`,
    `D = 10_000`, the swapped `x` adds `x*P/D` to `reserve_in` and feeds `x*P*F/D^2`
    through the curve. Requiring

        (amount_in - x) / (amount_paired + out(x)) == reserve_in' / reserve_out'

    gives `a*x^2 + b*x + c = 0` with (scaled by D^3)

        a = P^2 * F * (e + R)
        b = e*r*P*D^2 + P*F*(e + R)*r*D + R*r*D^3
        c = (e*r^2 - R*r*d) * D^3

    where `d = amount_in`, `e = amount_paired`, `r = reserve_in`, `R = reserve_out`.
    The positive root is taken with `isqrt` and floored; a deposit already at or
    below the pool ratio on the input side swaps nothing.
    """
    for name, v in (
        ("amount_in", amount_in),
        ("amount_paired", amount_paired),
        ("reserve_in", reserve_in),
        ("reserve_out", reserve_out),
        ("lp_fee_bps", lp_fee_bps),
        ("platform_fee_bps", platform_fee_bps),
    ):
        _require_int(name, v)
    if amount_in < 0 or amount_paired < 0:
        raise ValueError("amounts must be non-negative")
    if reserve_in <= 0 or reserve_out <= 0:
        raise ValueError("cannot zap into an empty pool")
    if lp_fee_bps < 0 or platform_fee_bps < 0 or lp_fee_bps + platform_fee_bps >= BPS_DENOM:
        raise ValueError("fees must be non-negative and total below 100%")

    d, e, r, big_r = amount_in, amount_paired, reserve_in, reserve_out
    if e * r >= big_r * d:
        return 0

    denom = BPS_DENOM
    p = denom - platform_fee_bps
    f = denom - (lp_fee_bps + platform_fee_bps)

    a = p * p * f * (e + big_r)
    b = e * r * p * denom**2 + p * f * (e + big_r) * r * denom + big_r * r * denom**3
    neg_c = (big_r * r * d - e * r * r) * denom**3

    x = (math.isqrt(b * b + 4 * a * neg_c) - b) // (2 * a)
    if x < 0:
        return 0
    return min(x, d)
