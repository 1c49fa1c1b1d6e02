"""
Main entry point for the swap settlement runner.

Wires config → context → collaborators → orchestrator and runs one
settlement attempt.
"""

import sys
import argparse
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from swap_settlement.core.config import Config
from swap_settlement.core.context import TradingContext
from swap_settlement.core.errors import ChainError, ConfigError, QuoteServiceError
from swap_settlement.core.models import SettlementResult, TradeIntent
from swap_settlement.execution.allowance import AllowanceManager
from swap_settlement.execution.orchestrator import SettlementOrchestrator
from swap_settlement.execution.signer import SignatureProvider
from swap_settlement.monitoring.logging import setup_logging
from swap_settlement.quotes.client import QuoteServiceClient
from swap_settlement.reporting.transparency import TransparencyReporter
from swap_settlement.utils.state_store import StateStore
from swap_settlement.utils.units import parse_units

logger = logging.getLogger(__name__)


class SwapSettlementSystem:
    """
    Builds every component from config and runs settlements.
    """

    def __init__(self, config: Config, context: Optional[TradingContext] = None):
        """
        Args:
            config: Runner configuration (already validated)
            context: Pre-built trading context (tests); built from config otherwise
        """
        self.config = config
        self.context = context or TradingContext.from_config(config)

        self.quote_client = QuoteServiceClient(config.zero_ex, self.context.chain_id)
        self.allowance_manager = AllowanceManager(
            self.context,
            gas_limit_multiplier=config.chain.gas_limit_multiplier,
            receipt_timeout_sec=config.chain.receipt_timeout_sec,
            receipt_poll_interval_sec=config.chain.receipt_poll_interval_sec,
        )
        self.signer = SignatureProvider(self.context.account)
        self.reporter = TransparencyReporter()
        self.state_store = StateStore(config.monitoring.journal_dir)
        self.orchestrator = SettlementOrchestrator(
            self.quote_client,
            self.allowance_manager,
            self.signer,
            reporter=self.reporter,
            state_store=self.state_store,
        )

        logger.info("[Init] Trading account %s on %s", self.context.address, self.context.chain.name)

    def build_intent(self) -> TradeIntent:
        """Trade intent from config; sell amount scaled by on-chain decimals."""
        trade = self.config.trade
        sell = self.context.token(trade.sell_token)
        buy_address = self.context.chain.token(trade.buy_token)
        decimals = sell.decimals()
        return TradeIntent(
            sell_token=sell.address,
            buy_token=buy_address,
            sell_amount=parse_units(trade.sell_amount, decimals),
            taker=self.context.address,
            affiliate_fee_bps=trade.affiliate_fee_bps,
            collect_surplus=trade.collect_surplus,
        )

    def show_sources(self):
        """Print every liquidity source the aggregator uses on this chain."""
        sources = self.quote_client.list_liquidity_sources(self.context.chain_id)
        self.reporter.report_sources(self.context.chain.name, sources)

    def settle(self, dry_run: bool = False) -> SettlementResult:
        intent = self.build_intent()
        print(f"Swapping {self.config.trade.sell_amount} {self.config.trade.sell_token} for {self.config.trade.buy_token}")
        result = self.orchestrator.run(intent, dry_run=dry_run)

        if result.failure is not None:
            print(f"Settlement failed at {result.failure.stage}: {result.failure}")
        elif result.dry_run:
            print("Dry run complete: quote fetched, nothing signed or submitted")
        else:
            print(f"Swap transaction hash: {result.transaction_hash}")
            print(f"Track the transaction: {self.context.chain.tx_url(result.transaction_hash)}")
        return result


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Permit2 swap settlement via the 0x Swap API")
    parser.add_argument("--config", type=str, default="", help="Path to YAML config file")
    parser.add_argument("--dry-run", action="store_true", help="Fetch price and quote only; no approval, signature or execute")
    parser.add_argument("--list-sources", action="store_true", help="Print the chain's liquidity sources before trading")
    parser.add_argument("--sources-only", action="store_true", help="Print the chain's liquidity sources and exit")
    args = parser.parse_args()

    # Load .env if present (before Config) to populate secrets
    load_dotenv(dotenv_path=Path.cwd() / ".env")

    if args.config:
        config = Config.from_yaml(args.config)
    else:
        config = Config()

    setup_logging(config.monitoring.log_level, config.monitoring.log_dir)

    # Missing secrets are fatal at startup
    errors = config.validate()
    if errors:
        print("[ERROR] Configuration validation failed:")
        for err in errors:
            print(f"  - {err}")
        sys.exit(1)

    try:
        system = SwapSettlementSystem(config)
        system.context.verify_chain()
        if args.list_sources or args.sources_only:
            system.show_sources()
            if args.sources_only:
                return
        result = system.settle(dry_run=args.dry_run)
    except (ConfigError, QuoteServiceError, ChainError, KeyError, ValueError) as e:
        print(f"[ERROR] {e}")
        sys.exit(1)

    if not result.ok:
        sys.exit(1)


if __name__ == "__main__":
    main()
