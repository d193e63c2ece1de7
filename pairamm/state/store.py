"""
Persisted key-value storage for the pair's fields.

The boundary layer owns the real storage; the core only needs get/set and
set-if-empty semantics. `InMemoryStore` is the reference implementation used by
tests and the offline demo.

Values are stored as canonical JSON bytes so a snapshot of the store is
deterministic and can be committed to (`commitment_hex`).
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional, Protocol

from .canonical import CANONICAL_ENCODING_VERSION, canonical_json_bytes, sha256_hex
from .pools import IssuanceStatus, PoolState


KEY_FIRST_TOKEN = "first_token"
KEY_SECOND_TOKEN = "second_token"
KEY_POOL = "pool"
KEY_FEES = "fees"
KEY_WRAP_SC_ADDRESS = "wrap_sc_address"


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[bytes]: ...

    def set(self, key: str, value: bytes) -> None: ...

    def set_if_empty(self, key: str, value: bytes) -> bool: ...

    def is_empty(self, key: str) -> bool: ...


class InMemoryStore:
    """Dict-backed `KeyValueStore`."""

    def __init__(self) -> None:
        self._data: Dict[str, bytes] = {}

    def get(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        if not isinstance(value, bytes):
            raise TypeError("store values must be bytes")
        self._data[key] = value

    def set_if_empty(self, key: str, value: bytes) -> bool:
        """Store `value` unless `key` already holds one. Returns True if written."""
        if key in self._data:
            return False
        self.set(key, value)
        return True

    def is_empty(self, key: str) -> bool:
        return key not in self._data

    def commitment_hex(self) -> str:
        """Hash over all (key, value) pairs in key order."""
        entries = [[k, self._data[k].decode("utf-8")] for k in sorted(self._data)]
        payload = canonical_json_bytes({"version": CANONICAL_ENCODING_VERSION, "entries": entries})
        return sha256_hex(payload)

    def __repr__(self) -> str:
        return f"InMemoryStore({len(self._data)} keys)"


def _require_int(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0:
        raise ValueError(f"{name} must be non-negative")
    return int(value)


def pool_to_dict(pool: PoolState) -> Dict[str, Any]:
    return {
        "asset_a": pool.asset_a,
        "asset_b": pool.asset_b,
        "reserve_a": int(pool.reserve_a),
        "reserve_b": int(pool.reserve_b),
        "share_supply": int(pool.share_supply),
        "share_asset_id": pool.share_asset_id,
        "issuance": pool.issuance.value,
    }


def pool_from_dict(data: Dict[str, Any]) -> PoolState:
    share_asset_id = data.get("share_asset_id")
    if share_asset_id is not None and not isinstance(share_asset_id, str):
        raise TypeError("share_asset_id must be a string or null")
    return PoolState(
        asset_a=data["asset_a"],
        asset_b=data["asset_b"],
        reserve_a=_require_int(data["reserve_a"], name="reserve_a"),
        reserve_b=_require_int(data["reserve_b"], name="reserve_b"),
        share_supply=_require_int(data["share_supply"], name="share_supply"),
        share_asset_id=share_asset_id,
        issuance=IssuanceStatus(data["issuance"]),
    )


def save_json(store: KeyValueStore, key: str, value: Dict[str, Any]) -> None:
    store.set(key, canonical_json_bytes(value))


def load_json(store: KeyValueStore, key: str) -> Optional[Dict[str, Any]]:
    raw = store.get(key)
    if raw is None:
        return None
    obj = json.loads(raw.decode("utf-8"))
    if not isinstance(obj, dict):
        raise ValueError(f"stored {key!r} must decode to a JSON object")
    return obj


def save_pool(store: KeyValueStore, pool: PoolState) -> None:
    save_json(store, KEY_POOL, pool_to_dict(pool))


def load_pool(store: KeyValueStore) -> Optional[PoolState]:
    obj = load_json(store, KEY_POOL)
    if obj is None:
        return None
    return pool_from_dict(obj)
