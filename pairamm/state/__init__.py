"""
State for the pair: balances, pool state, persisted storage
"""

from .balances import BalanceTable
from .pools import IssuanceStatus, PoolState
from .store import InMemoryStore, KeyValueStore

__all__ = [
    "BalanceTable",
    "IssuanceStatus",
    "PoolState",
    "InMemoryStore",
    "KeyValueStore",
]
