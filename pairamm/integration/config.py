"""
Engine configuration.

Sources, later ones win:
1. dataclass defaults,
2. a YAML mapping (`load_config(path)`),
3. `PAIRAMM_*` environment variables.

Example YAML:

    owner: erd1owner
    asset_a: WEGLD-abcdef
    asset_b: USDC-123456
    lp_fee_bps: 30
    platform_fee_bps: 10
    platform_fee_receiver: erd1treasury
    wrap_sc_address: erd1wrapper
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from ..core.fees import BPS_DENOM, FeeConfig


def _env_int(name: str, default: int, *, lo: int, hi: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return int(default)
    try:
        v = int(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
    if v < lo or v > hi:
        raise ValueError(f"{name} must be in [{lo}, {hi}], got {v}")
    return v


def _env_str(name: str, default: Optional[str]) -> Optional[str]:
    raw = os.environ.get(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


@dataclass(frozen=True)
class PairEngineConfig:
    owner: str = "owner"
    asset_a: Optional[str] = None
    asset_b: Optional[str] = None
    lp_fee_bps: int = 0
    platform_fee_bps: int = 0
    platform_fee_receiver: Optional[str] = None
    share_display_name: str = "PairShare"
    share_ticker: str = "PAIRLP"
    # Asset the share-issuance payment is made in (the chain's native asset).
    issue_payment_asset: str = "EGLD"
    # Address of the native-asset wrapping contract, recorded for off-chain readers.
    wrap_sc_address: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.owner, str) or not self.owner:
            raise ValueError("owner must be a non-empty string")
        if (self.asset_a is None) != (self.asset_b is None):
            raise ValueError("asset_a and asset_b must be configured together")
        if self.asset_a is not None and self.asset_a == self.asset_b:
            raise ValueError("asset_a and asset_b must differ")
        if self.wrap_sc_address is not None and not self.wrap_sc_address:
            raise ValueError("wrap_sc_address must be a non-empty string")
        # Fee bounds are enforced by FeeConfig.
        self.fee_config()

    def fee_config(self) -> FeeConfig:
        return FeeConfig(
            lp_fee_bps=self.lp_fee_bps,
            platform_fee_bps=self.platform_fee_bps,
            platform_fee_receiver=self.platform_fee_receiver,
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PairEngineConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"unknown config keys: {unknown}")
        return cls(**dict(data))


def _apply_env(cfg: PairEngineConfig) -> PairEngineConfig:
    return replace(
        cfg,
        owner=_env_str("PAIRAMM_OWNER", cfg.owner) or cfg.owner,
        asset_a=_env_str("PAIRAMM_ASSET_A", cfg.asset_a),
        asset_b=_env_str("PAIRAMM_ASSET_B", cfg.asset_b),
        lp_fee_bps=_env_int("PAIRAMM_LP_FEE_BPS", cfg.lp_fee_bps, lo=0, hi=BPS_DENOM - 1),
        platform_fee_bps=_env_int("PAIRAMM_PLATFORM_FEE_BPS", cfg.platform_fee_bps, lo=0, hi=BPS_DENOM - 1),
        platform_fee_receiver=_env_str("PAIRAMM_PLATFORM_FEE_RECEIVER", cfg.platform_fee_receiver),
        wrap_sc_address=_env_str("PAIRAMM_WRAP_SC_ADDRESS", cfg.wrap_sc_address),
    )


def load_config(path: Optional[Union[str, Path]] = None) -> PairEngineConfig:
    """Load config from an optional YAML file, then apply environment overrides."""
    data: Dict[str, Any] = {}
    if path is not None:
        obj = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
        if obj is None:
            obj = {}
        if not isinstance(obj, Mapping):
            raise TypeError("config YAML must be a mapping")
        data = dict(obj)
    return _apply_env(PairEngineConfig.from_mapping(data))
