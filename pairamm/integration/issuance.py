"""
Asynchronous pool-share issuance primitive.

Issuance is requested by the engine and resolved later by an external
completion signal (success with the new asset id, or failure). The engine keeps
the pool in `PENDING` in between.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Protocol

from ..state.balances import Address, Amount, AssetId


@dataclass(frozen=True)
class IssueRequest:
    ticket: int
    display_name: str
    ticker: str
    payer: Address
    payment_asset: AssetId
    payment_amount: Amount


@dataclass(frozen=True)
class IssueOutcome:
    """Completion signal: `asset_id` on success, `error` on failure."""

    ok: bool
    asset_id: Optional[AssetId] = None
    error: Optional[str] = None

    def __post_init__(self) -> None:
        if self.ok and not self.asset_id:
            raise ValueError("successful issuance must carry asset_id")
        if not self.ok and self.asset_id is not None:
            raise ValueError("failed issuance must not carry asset_id")

    @classmethod
    def success(cls, asset_id: AssetId) -> "IssueOutcome":
        return cls(ok=True, asset_id=asset_id)

    @classmethod
    def failure(cls, error: str) -> "IssueOutcome":
        return cls(ok=False, error=error)


class ShareIssuer(Protocol):
    def request_issue(
        self,
        *,
        display_name: str,
        ticker: str,
        payer: Address,
        payment_asset: AssetId,
        payment_amount: Amount,
    ) -> IssueRequest: ...


class DeferredIssuer:
    """
    Records issue requests; the caller resolves them via
    `PairEngine.complete_share_asset_issuance`.
    """

    def __init__(self) -> None:
        self._next_ticket = 1
        self.requests: Dict[int, IssueRequest] = {}

    def request_issue(
        self,
        *,
        display_name: str,
        ticker: str,
        payer: Address,
        payment_asset: AssetId,
        payment_amount: Amount,
    ) -> IssueRequest:
        if not display_name or not ticker:
            raise ValueError("display_name and ticker must be non-empty")
        req = IssueRequest(
            ticket=self._next_ticket,
            display_name=display_name,
            ticker=ticker,
            payer=payer,
            payment_asset=payment_asset,
            payment_amount=payment_amount,
        )
        self.requests[req.ticket] = req
        self._next_ticket += 1
        return req
