"""Exception types for the pair engine.

Every failure carries a stable ``code`` so the boundary layer (and
``PairEngine.apply_operation``) can report a distinguishable kind without
parsing messages. All types derive from ``ValueError``, matching the kernels,
which reject bad inputs with plain ``ValueError``.
"""

from __future__ import annotations

from typing import List


class PairError(ValueError):
    """Base class for pair failures."""

    code = "PAIR_ERROR"


class InvalidAsset(PairError):
    """Payment token is not one of the pool's two assets."""

    code = "INVALID_ASSET"


class InvalidAmount(PairError):
    """Zero, negative or out-of-range amount where a valid one is required."""

    code = "INVALID_AMOUNT"


class PoolNotInitialized(PairError):
    """Share asset not issued yet, or no initial liquidity."""

    code = "POOL_NOT_INITIALIZED"


class SlippageExceeded(PairError):
    """Resulting amount violates the caller-supplied bound."""

    code = "SLIPPAGE_EXCEEDED"


class RatioMismatch(SlippageExceeded):
    """Second-asset payment does not cover the pool ratio for the first asset."""

    code = "RATIO_MISMATCH"


class InsufficientLiquidity(PairError):
    """Requested output exceeds what the reserves can provide."""

    code = "INSUFFICIENT_LIQUIDITY"


class AlreadyInitialized(PairError):
    """Share asset already issued, or pool already seeded."""

    code = "ALREADY_INITIALIZED"


class Unauthorized(PairError):
    """Privileged entry point called by someone other than the owner."""

    code = "UNAUTHORIZED"


class InvariantViolation(PairError):
    """A post-state violates one or more pool invariants."""

    code = "INVARIANT_VIOLATION"

    def __init__(self, violations: List[str]) -> None:
        self.violations = violations
        super().__init__(f"invariant violations: {', '.join(violations)}")


class TransferFailed(PairError):
    """The ledger rejected a transfer, mint or burn the call depends on."""

    code = "TRANSFER_FAILED"


class UnknownTicket(PairError):
    """Completion signal for an issuance ticket that is not pending."""

    code = "UNKNOWN_TICKET"
