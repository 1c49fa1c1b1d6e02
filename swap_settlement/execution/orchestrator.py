"""
Settlement Orchestrator

Runs one swap settlement end to end:

    Idle -> PriceFetched -> AllowanceVerified -> Quoted
         -> (Signed | NoSignatureNeeded) -> Executed

Any stage failure moves to Failed and stops the attempt. Nothing is
retried: a caller that wants another try starts a new attempt, which
fetches a fresh quote and signature.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from swap_settlement.core.errors import (
    ApprovalFailed,
    ExecutionFailed,
    PriceUnavailable,
    QuoteServiceError,
    QuoteUnavailable,
    SettlementError,
    SignatureDenied,
)
from swap_settlement.core.models import SettlementResult, SettlementState, TradeIntent
from swap_settlement.execution.allowance import AllowanceManager
from swap_settlement.execution.signer import SignatureProvider
from swap_settlement.quotes.client import QuoteServiceClient
from swap_settlement.reporting.transparency import TransparencyReporter
from swap_settlement.utils.state_store import StateStore

logger = logging.getLogger(__name__)


class SettlementOrchestrator:
    """
    Sequences price, allowance, quote, signature and execute.

    One attempt at a time per trading account and token pair; concurrent
    attempts would race on the allowance.
    """

    def __init__(
        self,
        quote_client: QuoteServiceClient,
        allowance_manager: AllowanceManager,
        signer: SignatureProvider,
        reporter: Optional[TransparencyReporter] = None,
        state_store: Optional[StateStore] = None,
    ):
        """
        Args:
            quote_client: 0x Swap API client
            allowance_manager: Reads/bootstraps the Permit2 allowance
            signer: Signs Permit2 payloads
            reporter: Prints quote transparency data (optional)
            state_store: Journal for finished attempts (optional)
        """
        self.quote_client = quote_client
        self.allowance_manager = allowance_manager
        self.signer = signer
        self.reporter = reporter
        self.state_store = state_store

    def run(self, intent: TradeIntent, dry_run: bool = False) -> SettlementResult:
        """
        Execute one settlement attempt.

        Args:
            intent: What to trade
            dry_run: Stop after the quote; no approval, signature or execute

        Returns:
            SettlementResult; failures are returned, not raised
        """
        result = SettlementResult(states=[SettlementState.IDLE])

        # Step 1: Price
        logger.info("[Settlement] Step 1: Fetching price...")
        try:
            price = self.quote_client.get_price(intent)
        except QuoteServiceError as exc:
            return self._fail(result, intent, PriceUnavailable("price request failed", exc))
        if not price.liquidity_available:
            return self._fail(result, intent, PriceUnavailable("no liquidity available for this pair"))
        result.states.append(SettlementState.PRICE_FETCHED)

        # Step 2: Allowance
        issue = price.allowance_issue
        if issue is None:
            logger.info("[Settlement] Step 2: Sell token already approved")
            result.states.append(SettlementState.ALLOWANCE_VERIFIED)
        elif dry_run:
            # Allowance still short; not recorded as verified
            logger.info("[Settlement] Step 2: Approval for %s needed (dry run, not submitting)", issue.spender)
        else:
            logger.info("[Settlement] Step 2: Approving %s for sell token...", issue.spender)
            try:
                result.approval_receipt = self.allowance_manager.ensure_allowance(
                    intent.taker,
                    intent.sell_token,
                    issue.spender,
                    intent.sell_amount,
                )
            except ApprovalFailed as exc:
                return self._fail(result, intent, exc)
            result.states.append(SettlementState.ALLOWANCE_VERIFIED)

        # Step 3: Quote (same intent as the price request)
        logger.info("[Settlement] Step 3: Fetching quote...")
        try:
            quote = self.quote_client.get_quote(intent)
        except QuoteServiceError as exc:
            return self._fail(result, intent, QuoteUnavailable("quote request failed", exc))
        result.quote = quote
        result.states.append(SettlementState.QUOTED)
        self._report(quote)

        if dry_run:
            logger.info("[Settlement] Dry run: stopping before signature and execution")
            result.dry_run = True
            self._journal(result, intent)
            return result

        # Step 4: Signature
        signature = ""
        if quote.needs_signature:
            logger.info("[Settlement] Step 4: Signing Permit2 payload...")
            try:
                signature = self.signer.sign(quote.authorization)
            except SignatureDenied as exc:
                return self._fail(result, intent, exc)
            result.states.append(SettlementState.SIGNED)
        else:
            logger.info("[Settlement] Step 4: No signature required")
            result.states.append(SettlementState.NO_SIGNATURE_NEEDED)

        # Step 5: Execute
        logger.info("[Settlement] Step 5: Submitting settlement...")
        try:
            executed = self.quote_client.execute(intent, signature)
        except QuoteServiceError as exc:
            return self._fail(result, intent, ExecutionFailed("execute request failed", exc))
        result.transaction_hash = executed.transaction_hash
        result.states.append(SettlementState.EXECUTED)
        logger.info("[Settlement] Executed: %s", result.transaction_hash)

        self._journal(result, intent)
        return result

    # ------------------------
    # Helpers
    # ------------------------
    def _fail(self, result: SettlementResult, intent: TradeIntent, error: SettlementError) -> SettlementResult:
        logger.error("[Settlement] Failed at %s: %s", error.stage, error)
        result.failure = error
        result.states.append(SettlementState.FAILED)
        self._journal(result, intent)
        return result

    def _report(self, quote):
        if self.reporter is None:
            return
        try:
            self.reporter.report(quote)
        except Exception as e:
            logger.warning("[Settlement] Transparency report failed: %s", e)

    def _journal(self, result: SettlementResult, intent: TradeIntent):
        if self.state_store is None:
            return
        record = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "sell_token": intent.sell_token,
            "buy_token": intent.buy_token,
            "sell_amount": str(intent.sell_amount),
            "taker": intent.taker,
            "state": result.final_state.value,
            "tx_hash": result.transaction_hash,
            "failure": result.failure_reason.value if result.failure_reason else None,
            "error": str(result.failure) if result.failure else None,
            "dry_run": result.dry_run,
        }
        try:
            self.state_store.append_jsonl("settlements", record)
        except OSError as e:
            logger.warning("[Settlement] Journal write failed: %s", e)
