"""
Pair execution adapter: the imperative shell around the functional core.

`PairEngine` owns the single `PoolState` and `FeeConfig` of one pair and exposes
one method per public entry point. Every mutating call:

1. checks caller/payment identities (owner, pool assets),
2. runs the core engine on a working copy of the pool state,
3. checks the caller's slippage bounds against the computed amounts,
4. asks the ledger to burn, mint and send what the core computed,
5. only then adopts the working copy and persists it.

A failure in steps 1-4 raises a `PairError` and leaves state and store untouched;
a ledger rejection in step 4 surfaces as `TransferFailed`. Steps are ordered so
that the burn of paid-in shares, the only step that depends on the caller, runs
first. `apply_operation` is the step-style entry: it never raises for pair
failures and reports `ok/error/code` instead.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, replace
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, TypeVar, Union

from ..core import liquidity, swap
from ..core.cpmm import SwapQuote
from ..core.errors import (
    AlreadyInitialized,
    InvalidAmount,
    InvalidAsset,
    PairError,
    PoolNotInitialized,
    SlippageExceeded,
    TransferFailed,
    Unauthorized,
    UnknownTicket,
)
from ..core.fees import FeeConfig
from ..core.guards import require_share_asset
from ..core.liquidity import AddLiquidityResult, AddLiquiditySingleResult, AmountPair, RemoveLiquiditySingleResult
from ..state.balances import Address, Amount, AssetId
from ..state.pools import IssuanceStatus, PoolState
from ..state.store import (
    KEY_FEES,
    KEY_FIRST_TOKEN,
    KEY_SECOND_TOKEN,
    KEY_WRAP_SC_ADDRESS,
    InMemoryStore,
    KeyValueStore,
    load_json,
    load_pool,
    save_json,
    save_pool,
)
from .config import PairEngineConfig
from .issuance import IssueOutcome, IssueRequest, ShareIssuer
from .ledger import PairLedger, Payment, Transfer
from .operations import OperationKind, PairOperation, parse_operation


logger = logging.getLogger(__name__)

KEY_PENDING_ISSUE = "pending_issue"

T = TypeVar("T")


@dataclass(frozen=True)
class PairCallResult:
    value: Any
    transfers: Tuple[Transfer, ...] = ()


@dataclass(frozen=True)
class PairTxResult:
    ok: bool
    result: Optional[PairCallResult] = None
    error: Optional[str] = None
    code: Optional[str] = None


class PairEngine:
    """
    One pair, one pool.

    Construction follows initialize-if-empty semantics: fees, pool and any pending
    issuance are restored from `store` when present, otherwise taken from `config`.
    """

    def __init__(
        self,
        config: PairEngineConfig,
        *,
        ledger: PairLedger,
        issuer: ShareIssuer,
        store: Optional[KeyValueStore] = None,
    ) -> None:
        self.config = config
        self._ledger = ledger
        self._issuer = issuer
        self._store: KeyValueStore = store if store is not None else InMemoryStore()
        self._outbox: List[Transfer] = []

        stored_fees = load_json(self._store, KEY_FEES)
        if stored_fees is not None:
            self._fees = FeeConfig.from_dict(stored_fees)
        else:
            self._fees = config.fee_config()
            save_json(self._store, KEY_FEES, self._fees.to_dict())

        stored_pending = load_json(self._store, KEY_PENDING_ISSUE)
        self._pending: Optional[IssueRequest] = IssueRequest(**stored_pending) if stored_pending else None

        self._pool: Optional[PoolState] = load_pool(self._store)
        if self._pool is None and config.asset_a is not None and config.asset_b is not None:
            self.init_pool(config.owner, config.asset_a, config.asset_b)

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    def _require_owner(self, caller: Address) -> None:
        if caller != self.config.owner:
            raise Unauthorized(f"{caller} is not the owner")

    def _require_pool(self) -> PoolState:
        if self._pool is None:
            raise PoolNotInitialized("Pool assets not set (init_pool not called)")
        return self._pool

    def _is_token_a(self, asset: AssetId) -> bool:
        pool = self._require_pool()
        if asset == pool.asset_a:
            return True
        if asset == pool.asset_b:
            return False
        raise InvalidAsset(f"Invalid token {asset!r}: pool holds {pool.asset_a} and {pool.asset_b}")

    @staticmethod
    def _require_payment(payment: Payment, asset: Optional[AssetId], what: str) -> None:
        if asset is None or payment.asset != asset:
            raise InvalidAsset(f"Invalid payment for {what}: {payment.asset!r}")
        if not isinstance(payment.amount, int) or isinstance(payment.amount, bool) or payment.amount <= 0:
            raise InvalidAmount(f"Invalid payment amount for {what}: {payment.amount}")

    @staticmethod
    def _require_min(value: Amount, minimum: Amount, what: str) -> None:
        if value < minimum:
            raise SlippageExceeded(f"Max slippage exceeded for {what}: {value} < {minimum}")

    def _transact(self, fn: Callable[[PoolState], T], effects: Optional[Callable[[T], None]] = None) -> T:
        work = replace(self._require_pool())
        value = fn(work)
        if effects is not None:
            try:
                effects(value)
            except PairError:
                self._outbox = []
                raise
            except ValueError as exc:
                self._outbox = []
                raise TransferFailed(f"Ledger rejected transfer: {exc}") from exc
        self._pool = work
        save_pool(self._store, work)
        return value

    def _send(self, asset: AssetId, amount: Amount, recipient: Address) -> None:
        if amount <= 0:
            return
        self._ledger.send(asset, amount, recipient)
        self._outbox.append(Transfer(asset=asset, amount=amount, recipient=recipient))

    def _pay_platform_fee(self, asset: AssetId, amount: Amount) -> None:
        if amount > 0:
            if self._fees.platform_fee_receiver is None:
                raise AssertionError("platform fee collected without a receiver")
            self._send(asset, amount, self._fees.platform_fee_receiver)

    def _mint_shares_to(self, recipient: Address, shares: Amount) -> None:
        share_asset = self._require_pool().share_asset_id
        assert share_asset is not None
        self._ledger.mint_shares(share_asset, shares)
        self._send(share_asset, shares, recipient)

    def _done(self, value: Any) -> PairCallResult:
        out = PairCallResult(value=value, transfers=tuple(self._outbox))
        self._outbox = []
        return out

    # ------------------------------------------------------------------
    # setup and owner entry points
    # ------------------------------------------------------------------

    def init_pool(self, caller: Address, asset_a: AssetId, asset_b: AssetId) -> PairCallResult:
        """Set the two pooled assets. Can only happen once."""
        self._require_owner(caller)
        if self._pool is not None:
            raise AlreadyInitialized(f"Pool assets already set: ({self._pool.asset_a}, {self._pool.asset_b})")
        if asset_a == asset_b:
            raise InvalidAsset(f"Pool assets must differ: {asset_a!r}")
        pool = PoolState(asset_a=asset_a, asset_b=asset_b)
        self._store.set_if_empty(KEY_FIRST_TOKEN, asset_a.encode("utf-8"))
        self._store.set_if_empty(KEY_SECOND_TOKEN, asset_b.encode("utf-8"))
        if self.config.wrap_sc_address is not None:
            self._store.set_if_empty(KEY_WRAP_SC_ADDRESS, self.config.wrap_sc_address.encode("utf-8"))
        self._pool = pool
        save_pool(self._store, pool)
        logger.info("pool initialized: asset_a=%s asset_b=%s", asset_a, asset_b)
        return self._done(None)

    def issue_share_asset(
        self,
        caller: Address,
        payment: Payment,
        *,
        display_name: Optional[str] = None,
        ticker: Optional[str] = None,
    ) -> PairCallResult:
        """
        Request issuance of the pool-share asset (UNINITIALIZED -> PENDING).

        The payment is held until the completion signal; it is refunded if
        issuance fails.
        """
        self._require_owner(caller)
        pool = self._require_pool()
        if pool.issuance != IssuanceStatus.UNINITIALIZED:
            raise AlreadyInitialized(f"Share asset issuance already {pool.issuance.value}")
        self._require_payment(payment, self.config.issue_payment_asset, "share issuance")

        request = self._issuer.request_issue(
            display_name=display_name or self.config.share_display_name,
            ticker=ticker or self.config.share_ticker,
            payer=caller,
            payment_asset=payment.asset,
            payment_amount=payment.amount,
        )
        self._transact(lambda work: setattr(work, "issuance", IssuanceStatus.PENDING))
        self._pending = request
        save_json(self._store, KEY_PENDING_ISSUE, asdict(request))
        logger.info("share asset issuance requested: ticket=%d ticker=%s", request.ticket, request.ticker)
        return self._done(request)

    def complete_share_asset_issuance(self, ticket: int, outcome: IssueOutcome) -> PairCallResult:
        """
        Completion signal for a pending issuance.

        Success stores the share asset id (PENDING -> READY); failure refunds the
        issuance payment to its payer (PENDING -> FAILED, terminal).
        """
        pool = self._require_pool()
        if pool.issuance != IssuanceStatus.PENDING or self._pending is None:
            raise PoolNotInitialized(f"No pending share issuance (issuance={pool.issuance.value})")
        if ticket != self._pending.ticket:
            raise UnknownTicket(f"Unknown issuance ticket {ticket} (pending {self._pending.ticket})")

        request = self._pending
        if outcome.ok:
            self._transact(
                lambda work: (
                    setattr(work, "share_asset_id", outcome.asset_id),
                    setattr(work, "issuance", IssuanceStatus.READY),
                )
            )
            logger.info("share asset issued: %s", outcome.asset_id)
        else:
            self._transact(
                lambda work: setattr(work, "issuance", IssuanceStatus.FAILED),
                lambda _: self._send(request.payment_asset, request.payment_amount, request.payer),
            )
            logger.warning(
                "share asset issuance failed (%s); refunded %d %s to %s",
                outcome.error,
                request.payment_amount,
                request.payment_asset,
                request.payer,
            )

        self._pending = None
        save_json(self._store, KEY_PENDING_ISSUE, {})
        return self._done(outcome)

    def add_initial_liquidity(self, caller: Address, payment_a: Payment, payment_b: Payment) -> PairCallResult:
        """Seed the pool; the owner receives `isqrt(amount_a * amount_b)` shares."""
        self._require_owner(caller)
        pool = self._require_pool()
        self._require_payment(payment_a, pool.asset_a, "first token")
        self._require_payment(payment_b, pool.asset_b, "second token")

        shares = self._transact(
            lambda work: liquidity.add_initial_liquidity(work, payment_a.amount, payment_b.amount),
            lambda minted: self._mint_shares_to(caller, minted),
        )
        logger.info(
            "initial liquidity added: amount_a=%d amount_b=%d shares=%d", payment_a.amount, payment_b.amount, shares
        )
        return self._done(shares)

    def configure_lp_fee(self, caller: Address, bps: int) -> PairCallResult:
        """Set the liquidity-provider fee (100 = 1%)."""
        self._require_owner(caller)
        fees = replace(self._fees, lp_fee_bps=bps)
        self._fees = fees
        save_json(self._store, KEY_FEES, fees.to_dict())
        logger.info("lp fee set to %d bps", bps)
        return self._done(fees)

    def configure_platform_fee(self, caller: Address, bps: int, receiver: Address) -> PairCallResult:
        """Set the platform fee (100 = 1%) and its receiver."""
        self._require_owner(caller)
        fees = replace(self._fees, platform_fee_bps=bps, platform_fee_receiver=receiver)
        self._fees = fees
        save_json(self._store, KEY_FEES, fees.to_dict())
        logger.info("platform fee set to %d bps, receiver=%s", bps, receiver)
        return self._done(fees)

    # ------------------------------------------------------------------
    # public entry points
    # ------------------------------------------------------------------

    def add_liquidity(
        self,
        caller: Address,
        payment_a: Payment,
        payment_b: Payment,
        min_amount_b: Amount,
    ) -> PairCallResult:
        """Two-sided deposit; the unused part of `payment_b` is refunded."""
        pool = self._require_pool()
        self._require_payment(payment_a, pool.asset_a, "first token")
        self._require_payment(payment_b, pool.asset_b, "second token")

        def run(work: PoolState) -> AddLiquidityResult:
            res = liquidity.add_liquidity(work, payment_a.amount, payment_b.amount)
            self._require_min(res.amount_b_used, min_amount_b, "second token")
            return res

        def effects(res: AddLiquidityResult) -> None:
            self._mint_shares_to(caller, res.shares_minted)
            self._send(pool.asset_b, res.amount_b_refund, caller)

        res = self._transact(run, effects)
        logger.info(
            "liquidity added: amount_a=%d amount_b=%d shares=%d", payment_a.amount, res.amount_b_used, res.shares_minted
        )
        return self._done(res)

    def add_liquidity_single(
        self,
        caller: Address,
        payment: Payment,
        min_amount_a: Amount,
        min_amount_b: Amount,
    ) -> PairCallResult:
        """Single-sided deposit; part of the payment is swapped before minting."""
        is_a = self._is_token_a(payment.asset)
        self._require_payment(payment, payment.asset, "single-sided deposit")
        pool = self._require_pool()

        def run(work: PoolState) -> AddLiquiditySingleResult:
            res = liquidity.add_liquidity_single(work, self._fees, payment.amount, is_a)
            self._require_min(res.amount_a_used, min_amount_a, "first token")
            self._require_min(res.amount_b_used, min_amount_b, "second token")
            return res

        def effects(res: AddLiquiditySingleResult) -> None:
            self._mint_shares_to(caller, res.shares_minted)
            self._pay_platform_fee(payment.asset, res.platform_fee_amount)
            self._send(pool.asset_a, res.amount_a_refund, caller)
            self._send(pool.asset_b, res.amount_b_refund, caller)

        res = self._transact(run, effects)
        logger.info(
            "single-sided liquidity added: asset=%s amount=%d swapped=%d shares=%d",
            payment.asset,
            payment.amount,
            res.swap_amount_in,
            res.shares_minted,
        )
        return self._done(res)

    def remove_liquidity(
        self,
        caller: Address,
        payment: Payment,
        min_amount_a: Amount,
        min_amount_b: Amount,
    ) -> PairCallResult:
        """Burn pool shares for both assets."""
        pool = self._require_pool()
        require_share_asset(pool)
        self._require_payment(payment, pool.share_asset_id, "pool shares")

        def run(work: PoolState) -> AmountPair:
            out = liquidity.remove_liquidity(work, payment.amount)
            self._require_min(out.amount_a, min_amount_a, "first token")
            self._require_min(out.amount_b, min_amount_b, "second token")
            return out

        def effects(out: AmountPair) -> None:
            self._ledger.burn_shares(payment.asset, payment.amount)
            self._send(pool.asset_a, out.amount_a, caller)
            self._send(pool.asset_b, out.amount_b, caller)

        out = self._transact(run, effects)
        logger.info("liquidity removed: shares=%d amount_a=%d amount_b=%d", payment.amount, out.amount_a, out.amount_b)
        return self._done(out)

    def remove_liquidity_single(
        self,
        caller: Address,
        payment: Payment,
        token_out: AssetId,
        min_amount_a: Amount,
        min_amount_b: Amount,
    ) -> PairCallResult:
        """Burn pool shares and receive everything in `token_out`."""
        pool = self._require_pool()
        require_share_asset(pool)
        self._require_payment(payment, pool.share_asset_id, "pool shares")
        is_a_out = self._is_token_a(token_out)

        def run(work: PoolState) -> RemoveLiquiditySingleResult:
            res = liquidity.remove_liquidity_single(work, self._fees, payment.amount, is_a_out)
            if is_a_out:
                self._require_min(res.amount_out, min_amount_a, "first token")
            else:
                self._require_min(res.amount_out, min_amount_b, "second token")
            return res

        def effects(res: RemoveLiquiditySingleResult) -> None:
            self._ledger.burn_shares(payment.asset, payment.amount)
            if res.swap is not None:
                sold_asset = pool.asset_b if is_a_out else pool.asset_a
                self._pay_platform_fee(sold_asset, res.swap.platform_fee)
            self._send(token_out, res.amount_out, caller)

        res = self._transact(run, effects)
        logger.info("liquidity removed to %s: shares=%d amount_out=%d", token_out, payment.amount, res.amount_out)
        return self._done(res)

    def swap_fixed_input(self, caller: Address, payment: Payment, min_amount_out: Amount) -> PairCallResult:
        """Sell the whole payment; fails if the output is below `min_amount_out`."""
        is_a_in = self._is_token_a(payment.asset)
        self._require_payment(payment, payment.asset, "swap")
        pool = self._require_pool()
        token_out = pool.asset_b if is_a_in else pool.asset_a

        def run(work: PoolState) -> SwapQuote:
            quote = swap.swap_fixed_input(work, self._fees, payment.amount, is_a_in)
            self._require_min(quote.amount_out, min_amount_out, "swap output")
            return quote

        def effects(quote: SwapQuote) -> None:
            self._pay_platform_fee(payment.asset, quote.platform_fee)
            self._send(token_out, quote.amount_out, caller)

        quote = self._transact(run, effects)
        logger.info(
            "swap fixed input: %d %s -> %d %s (platform_fee=%d)",
            quote.amount_in,
            payment.asset,
            quote.amount_out,
            token_out,
            quote.platform_fee,
        )
        return self._done(quote)

    def swap_fixed_output(self, caller: Address, payment: Payment, amount_out: Amount) -> PairCallResult:
        """Buy exactly `amount_out`; the payment is the maximum input, the rest is refunded."""
        is_a_in = self._is_token_a(payment.asset)
        self._require_payment(payment, payment.asset, "swap")
        pool = self._require_pool()
        token_out = pool.asset_b if is_a_in else pool.asset_a

        def run(work: PoolState) -> SwapQuote:
            quote = swap.swap_fixed_output(work, self._fees, amount_out, not is_a_in)
            if quote.amount_in > payment.amount:
                raise SlippageExceeded(f"Max slippage exceeded: amount_in {quote.amount_in} > {payment.amount}")
            return quote

        def effects(quote: SwapQuote) -> None:
            self._pay_platform_fee(payment.asset, quote.platform_fee)
            self._send(token_out, quote.amount_out, caller)
            self._send(payment.asset, payment.amount - quote.amount_in, caller)

        quote = self._transact(run, effects)
        logger.info(
            "swap fixed output: %d %s -> %d %s (platform_fee=%d)",
            quote.amount_in,
            payment.asset,
            quote.amount_out,
            token_out,
            quote.platform_fee,
        )
        return self._done(quote)

    # ------------------------------------------------------------------
    # views
    # ------------------------------------------------------------------

    def estimate_amount_out(self, token_in: AssetId, amount_in: Amount) -> SwapQuote:
        quote = swap.estimate_amount_out(self._require_pool(), self._fees, amount_in, self._is_token_a(token_in))
        logger.debug("estimate_amount_out %s %d -> %d", token_in, amount_in, quote.amount_out)
        return quote

    def estimate_amount_in(self, token_out: AssetId, amount_out: Amount) -> SwapQuote:
        quote = swap.estimate_amount_in(self._require_pool(), self._fees, amount_out, self._is_token_a(token_out))
        logger.debug("estimate_amount_in %s %d -> %d", token_out, amount_out, quote.amount_in)
        return quote

    def estimate_add_liquidity(self, amount_a: Amount, amount_b: Amount) -> AddLiquidityResult:
        return liquidity.estimate_add_liquidity(self._require_pool(), amount_a, amount_b)

    def estimate_add_liquidity_single(self, token_in: AssetId, amount_in: Amount) -> AddLiquiditySingleResult:
        return liquidity.estimate_add_liquidity_single(
            self._require_pool(), self._fees, amount_in, self._is_token_a(token_in)
        )

    def estimate_remove_liquidity(self, shares: Amount) -> AmountPair:
        return liquidity.estimate_remove_liquidity(self._require_pool(), shares)

    def estimate_remove_liquidity_single(self, shares: Amount, token_out: AssetId) -> RemoveLiquiditySingleResult:
        return liquidity.estimate_remove_liquidity_single(
            self._require_pool(), self._fees, shares, self._is_token_a(token_out)
        )

    def get_first_token(self) -> AssetId:
        return self._require_pool().asset_a

    def get_second_token(self) -> AssetId:
        return self._require_pool().asset_b

    def get_share_asset(self) -> Optional[AssetId]:
        return self._require_pool().share_asset_id

    def get_reserves(self) -> AmountPair:
        pool = self._require_pool()
        return AmountPair(pool.reserve_a, pool.reserve_b)

    def get_share_supply(self) -> Amount:
        return self._require_pool().share_supply

    def get_fees(self) -> FeeConfig:
        return self._fees

    def get_issuance_status(self) -> IssuanceStatus:
        return self._require_pool().issuance

    def get_wrap_sc_address(self) -> Optional[Address]:
        raw = self._store.get(KEY_WRAP_SC_ADDRESS)
        return raw.decode("utf-8") if raw is not None else None

    @property
    def pool(self) -> Optional[PoolState]:
        """Copy of the current pool state (mutating it does not affect the engine)."""
        return replace(self._pool) if self._pool is not None else None

    # ------------------------------------------------------------------
    # step-style entry
    # ------------------------------------------------------------------

    def _dispatch(self, op: PairOperation) -> PairCallResult:
        a = op.args
        p = op.payments
        handlers: Dict[OperationKind, Callable[[], PairCallResult]] = {
            OperationKind.INIT_POOL: lambda: self.init_pool(op.caller, a["asset_a"], a["asset_b"]),
            OperationKind.ISSUE_SHARE_ASSET: lambda: self.issue_share_asset(op.caller, p[0]),
            OperationKind.ADD_INITIAL_LIQUIDITY: lambda: self.add_initial_liquidity(op.caller, p[0], p[1]),
            OperationKind.CONFIGURE_LP_FEE: lambda: self.configure_lp_fee(op.caller, a["bps"]),
            OperationKind.CONFIGURE_PLATFORM_FEE: lambda: self.configure_platform_fee(
                op.caller, a["bps"], a["receiver"]
            ),
            OperationKind.ADD_LIQUIDITY: lambda: self.add_liquidity(op.caller, p[0], p[1], a["min_amount_b"]),
            OperationKind.ADD_LIQUIDITY_SINGLE: lambda: self.add_liquidity_single(
                op.caller, p[0], a["min_amount_a"], a["min_amount_b"]
            ),
            OperationKind.REMOVE_LIQUIDITY: lambda: self.remove_liquidity(
                op.caller, p[0], a["min_amount_a"], a["min_amount_b"]
            ),
            OperationKind.REMOVE_LIQUIDITY_SINGLE: lambda: self.remove_liquidity_single(
                op.caller, p[0], a["token_out"], a["min_amount_a"], a["min_amount_b"]
            ),
            OperationKind.SWAP_FIXED_INPUT: lambda: self.swap_fixed_input(op.caller, p[0], a["min_amount_out"]),
            OperationKind.SWAP_FIXED_OUTPUT: lambda: self.swap_fixed_output(op.caller, p[0], a["amount_out"]),
        }
        return handlers[op.kind]()

    def apply_operation(self, op: Union[PairOperation, Mapping[str, Any]]) -> PairTxResult:
        """Parse and execute one operation; failures are reported, not raised."""
        try:
            parsed = op if isinstance(op, PairOperation) else parse_operation(op)
        except ValueError as exc:
            return PairTxResult(ok=False, error=str(exc), code="MALFORMED_OPERATION")
        try:
            result = self._dispatch(parsed)
        except PairError as exc:
            self._outbox = []
            logger.info("%s rejected for %s: %s", parsed.kind.value, parsed.caller, exc)
            return PairTxResult(ok=False, error=str(exc), code=exc.code)
        return PairTxResult(ok=True, result=result)
