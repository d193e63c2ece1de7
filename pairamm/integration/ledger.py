"""
Asset-transfer primitive consumed by the pair engine.

The engine never moves assets itself; it asks an `AssetTransfer` to send what the
core computed. `InMemoryLedger` is a complete in-process implementation: it keeps
balances for every account (the pair contract included), so tests can check
conservation end to end.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Protocol

from ..state.balances import Address, Amount, AssetId, BalanceTable


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Transfer:
    asset: AssetId
    amount: Amount
    recipient: Address


class AssetTransfer(Protocol):
    def send(self, asset: AssetId, amount: Amount, recipient: Address) -> None: ...


class InMemoryLedger:
    """
    Balance-table ledger.

    `send` pays out of the contract account; `pay` moves a caller's payment into
    it (what the boundary layer does before invoking a payable entry point).
    """

    def __init__(self, contract: Address) -> None:
        self.contract = contract
        self.balances = BalanceTable()
        self.transfers: List[Transfer] = []

    def mint(self, address: Address, asset: AssetId, amount: Amount) -> None:
        if amount < 0:
            raise ValueError(f"mint amount must be non-negative: {amount}")
        self.balances.add(address, asset, amount)

    def burn(self, address: Address, asset: AssetId, amount: Amount) -> None:
        self.balances.subtract(address, asset, amount)

    def mint_shares(self, asset: AssetId, amount: Amount) -> None:
        """Mint pool shares into the contract account."""
        self.mint(self.contract, asset, amount)

    def burn_shares(self, asset: AssetId, amount: Amount) -> None:
        """Burn pool shares held by the contract account."""
        self.burn(self.contract, asset, amount)

    def pay(self, payer: Address, asset: AssetId, amount: Amount) -> None:
        """Move a payment from `payer` into the contract account."""
        if amount < 0:
            raise ValueError(f"payment must be non-negative: {amount}")
        self.balances.subtract(payer, asset, amount)
        self.balances.add(self.contract, asset, amount)

    def send(self, asset: AssetId, amount: Amount, recipient: Address) -> None:
        if amount <= 0:
            raise ValueError(f"transfer amount must be positive: {amount}")
        self.balances.subtract(self.contract, asset, amount)
        self.balances.add(recipient, asset, amount)
        self.transfers.append(Transfer(asset=asset, amount=amount, recipient=recipient))
        logger.debug("sent %d %s to %s", amount, asset, recipient)

    def balance_of(self, address: Address, asset: AssetId) -> Amount:
        return self.balances.get(address, asset)


@dataclass(frozen=True)
class Payment:
    """Funds the boundary layer already received with a call."""

    asset: AssetId
    amount: Amount


class ShareSupply(Protocol):
    def mint_shares(self, asset: AssetId, amount: Amount) -> None: ...

    def burn_shares(self, asset: AssetId, amount: Amount) -> None: ...


class PairLedger(AssetTransfer, ShareSupply, Protocol):
    """Everything the engine needs from the boundary's asset layer."""
