"""Preconditions and the commit step shared by the liquidity and swap engines.

Engines compute a full post-state first and call ``commit`` last, so a failed
guard or a failed computation leaves ``PoolState`` untouched.
"""

from __future__ import annotations

from dataclasses import fields, replace
from typing import Any

from ..state.pools import IssuanceStatus, PoolState
from .errors import InvariantViolation, PoolNotInitialized


def require_share_asset(state: PoolState) -> None:
    if state.issuance != IssuanceStatus.READY:
        raise PoolNotInitialized(f"Share asset not issued (issuance={state.issuance.value})")


def require_seeded(state: PoolState) -> None:
    require_share_asset(state)
    if state.share_supply == 0:
        raise PoolNotInitialized("Pool has no liquidity yet")


def commit(state: PoolState, **changes: Any) -> PoolState:
    """Validate the post-state built from ``changes`` and write it into ``state``."""
    nxt = replace(state, **changes)
    violations = nxt.invariant_violations()
    if violations:
        raise InvariantViolation(violations)
    for f in fields(PoolState):
        setattr(state, f.name, getattr(nxt, f.name))
    return state
