"""
Integration layer: the pair engine and the boundary primitives it consumes
"""

from .config import PairEngineConfig, load_config
from .issuance import DeferredIssuer, IssueOutcome, IssueRequest, ShareIssuer
from .ledger import AssetTransfer, InMemoryLedger, PairLedger, Payment, ShareSupply, Transfer
from .operations import OperationKind, PairOperation, parse_operation
from .pair_engine import PairCallResult, PairEngine, PairTxResult

__all__ = [
    "PairEngineConfig",
    "load_config",
    "DeferredIssuer",
    "IssueOutcome",
    "IssueRequest",
    "ShareIssuer",
    "AssetTransfer",
    "InMemoryLedger",
    "PairLedger",
    "Payment",
    "ShareSupply",
    "Transfer",
    "OperationKind",
    "PairOperation",
    "parse_operation",
    "PairCallResult",
    "PairEngine",
    "PairTxResult",
]
