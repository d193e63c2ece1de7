"""
Pool state for a single two-asset pair.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .balances import AssetId, Amount


class IssuanceStatus(Enum):
    """Lifecycle of the pool-share asset."""
    UNINITIALIZED = "UNINITIALIZED"
    PENDING = "PENDING"
    READY = "READY"
    FAILED = "FAILED"


@dataclass
class PoolState:
    """
    State of the pair's liquidity pool.

    Attributes:
        asset_a: First pooled asset (set once at pool init)
        asset_b: Second pooled asset
        reserve_a: Pool holdings of asset_a
        reserve_b: Pool holdings of asset_b
        share_supply: Total minted pool-share units
        share_asset_id: Identity of the pool-share asset, once issued
        issuance: Pool-share asset lifecycle
    """
    asset_a: AssetId
    asset_b: AssetId
    reserve_a: Amount = 0
    reserve_b: Amount = 0
    share_supply: Amount = 0
    share_asset_id: Optional[AssetId] = None
    issuance: IssuanceStatus = IssuanceStatus.UNINITIALIZED

    def __post_init__(self):
        if not isinstance(self.asset_a, str) or not self.asset_a:
            raise ValueError("asset_a must be a non-empty string")
        if not isinstance(self.asset_b, str) or not self.asset_b:
            raise ValueError("asset_b must be a non-empty string")
        if self.asset_a == self.asset_b:
            raise ValueError(f"Pair assets must differ: {self.asset_a}")
        for name, v in (
            ("reserve_a", self.reserve_a),
            ("reserve_b", self.reserve_b),
            ("share_supply", self.share_supply),
        ):
            if not isinstance(v, int) or isinstance(v, bool):
                raise TypeError(f"{name} must be an int")
            if v < 0:
                raise ValueError(f"{name} must be non-negative: {v}")
        if (self.share_asset_id is None) != (self.issuance != IssuanceStatus.READY):
            raise ValueError("share_asset_id must be set exactly when issuance is READY")

    @property
    def is_empty(self) -> bool:
        return self.share_supply == 0

    def has_asset(self, asset: AssetId) -> bool:
        return asset == self.asset_a or asset == self.asset_b

    def reserves(self, is_token_a_in: bool) -> Tuple[Amount, Amount]:
        """(reserve_in, reserve_out) for a trade in the given direction."""
        if is_token_a_in:
            return self.reserve_a, self.reserve_b
        return self.reserve_b, self.reserve_a

    def ab_reserves(self, is_token_a_in: bool, reserve_in: Amount, reserve_out: Amount) -> Tuple[Amount, Amount]:
        """Map (reserve_in, reserve_out) back onto (reserve_a, reserve_b)."""
        if is_token_a_in:
            return reserve_in, reserve_out
        return reserve_out, reserve_in

    def constant_product(self) -> int:
        """k = reserve_a * reserve_b."""
        return self.reserve_a * self.reserve_b

    def invariant_violations(self) -> List[str]:
        out: List[str] = []
        if self.reserve_a < 0 or self.reserve_b < 0 or self.share_supply < 0:
            out.append("negative_balance")
        empties = {self.reserve_a == 0, self.reserve_b == 0, self.share_supply == 0}
        if len(empties) != 1:
            out.append("partially_empty_pool")
        if self.share_supply > 0 and self.issuance != IssuanceStatus.READY:
            out.append("shares_without_share_asset")
        return out

    def __repr__(self) -> str:
        return (
            f"PoolState(assets=({self.asset_a}, {self.asset_b}), "
            f"reserves=({self.reserve_a}, {self.reserve_b}), "
            f"share_supply={self.share_supply}, issuance={self.issuance.value})"
        )
