#!/usr/bin/env python3

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from pairamm.integration import (
    DeferredIssuer,
    InMemoryLedger,
    IssueOutcome,
    PairEngine,
    PairEngineConfig,
    Payment,
    load_config,
)
from pairamm.state.store import InMemoryStore


CONTRACT = "erd1pair"
TRADER = "erd1trader"
ISSUE_COST = 50_000_000_000_000_000


def _fund(ledger: InMemoryLedger, who: str, asset: str, amount: int) -> None:
    ledger.mint(who, asset, amount)
    ledger.pay(who, asset, amount)


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Seed a pair in memory and run one fixed-input swap.")
    p.add_argument("--config", type=Path, default=None, help="Optional YAML engine config")
    p.add_argument("--amount-a", type=int, default=1_000_000, help="Initial reserve of the first token")
    p.add_argument("--amount-b", type=int, default=2_000_000, help="Initial reserve of the second token")
    p.add_argument("--swap-in", type=int, default=1000, help="Amount of the first token to sell")
    p.add_argument("-v", "--verbose", action="store_true", help="Log engine activity")
    args = p.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    cfg = load_config(args.config)
    if cfg.asset_a is None:
        cfg = PairEngineConfig(
            owner=cfg.owner,
            asset_a="WEGLD-abcdef",
            asset_b="USDC-123456",
            lp_fee_bps=cfg.lp_fee_bps,
            platform_fee_bps=cfg.platform_fee_bps,
            platform_fee_receiver=cfg.platform_fee_receiver,
        )
    asset_a, asset_b = cfg.asset_a, cfg.asset_b
    assert asset_a is not None and asset_b is not None

    ledger = InMemoryLedger(CONTRACT)
    issuer = DeferredIssuer()
    store = InMemoryStore()
    engine = PairEngine(cfg, ledger=ledger, issuer=issuer, store=store)

    _fund(ledger, cfg.owner, cfg.issue_payment_asset, ISSUE_COST)
    issued = engine.issue_share_asset(cfg.owner, Payment(cfg.issue_payment_asset, ISSUE_COST))
    engine.complete_share_asset_issuance(issued.value.ticket, IssueOutcome.success("PAIRLP-000001"))
    print(f"[offline-demo] share asset={engine.get_share_asset()} status={engine.get_issuance_status().value}")

    _fund(ledger, cfg.owner, asset_a, args.amount_a)
    _fund(ledger, cfg.owner, asset_b, args.amount_b)
    seeded = engine.add_initial_liquidity(
        cfg.owner, Payment(asset_a, args.amount_a), Payment(asset_b, args.amount_b)
    )
    reserves = engine.get_reserves()
    print(f"[offline-demo] seeded: reserve_a={reserves.amount_a} reserve_b={reserves.amount_b} shares={seeded.value}")

    quote = engine.estimate_amount_out(asset_a, args.swap_in)
    print(f"[offline-demo] estimate: {args.swap_in} {asset_a} -> {quote.amount_out} {asset_b}")

    ledger.mint(TRADER, asset_a, args.swap_in)
    before_b = ledger.balance_of(TRADER, asset_b)
    ledger.pay(TRADER, asset_a, args.swap_in)
    tx = engine.apply_operation(
        {
            "kind": "SWAP_FIXED_INPUT",
            "caller": TRADER,
            "payments": [{"asset": asset_a, "amount": args.swap_in}],
            "args": {"min_amount_out": quote.amount_out},
        }
    )
    if not tx.ok:
        print(f"[offline-demo] FAIL (swap): {tx.code}: {tx.error}")
        return 1

    reserves2 = engine.get_reserves()
    print(f"[offline-demo] reserves after swap: reserve_a={reserves2.amount_a} reserve_b={reserves2.amount_b}")
    print(f"[offline-demo] trader received: {ledger.balance_of(TRADER, asset_b) - before_b} {asset_b}")
    print(f"[offline-demo] store commitment: {store.commitment_hex()}")
    print("[offline-demo] OK: swap executed")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
