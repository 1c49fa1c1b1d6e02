"""
Allowance Manager

Reads the trading account's ERC-20 allowance for the settlement spender
(Permit2) and bootstraps it with an unlimited approval when short.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from eth_utils import to_checksum_address

from swap_settlement.chain.erc20 import Erc20Token
from swap_settlement.core.chains import MAX_UINT256
from swap_settlement.core.context import TradingContext
from swap_settlement.core.errors import ApprovalFailed, ChainError
from swap_settlement.utils.units import to_int

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AllowanceState:
    """Approved amount for (owner, token, spender) at read time."""

    owner: str
    token: str
    spender: str
    amount: int

    def is_sufficient(self, min_amount: int) -> bool:
        return self.amount >= min_amount


class AllowanceManager:
    """
    Inspect and establish token allowances.

    Approvals are always for MAX_UINT256 so later trades of the same
    token need no further approval.
    """

    def __init__(
        self,
        context: TradingContext,
        gas_limit_multiplier: float = 1.2,
        receipt_timeout_sec: float = 120.0,
        receipt_poll_interval_sec: float = 2.0,
        token_factory: Optional[Callable[[str], Erc20Token]] = None,
    ):
        self.context = context
        self.gas_limit_multiplier = gas_limit_multiplier
        self.receipt_timeout_sec = receipt_timeout_sec
        self.receipt_poll_interval_sec = receipt_poll_interval_sec
        self.token_factory = token_factory or context.token

    def check_allowance(self, owner: str, token: str, spender: str) -> AllowanceState:
        """Read the current on-chain allowance."""
        amount = self.token_factory(token).allowance(owner, spender)
        return AllowanceState(owner=owner, token=token, spender=spender, amount=amount)

    def ensure_allowance(self, owner: str, token: str, spender: str, min_amount: int) -> Optional[Dict[str, Any]]:
        """
        Make sure ``spender`` may move at least ``min_amount`` of ``token``.

        Args:
            owner: Token holder (must be the trading account)
            token: Token address
            spender: Contract to approve
            min_amount: Required allowance in base units

        Returns:
            The approval receipt, or None when the allowance was already sufficient

        Raises:
            ApprovalFailed: on any read/simulate/submit/confirm failure or revert
        """
        try:
            state = self.check_allowance(owner, token, spender)
        except (ChainError, ValueError) as exc:
            raise ApprovalFailed("could not read allowance", exc) from exc

        if state.is_sufficient(min_amount):
            logger.info("[Allowance] %s already approved for %s (%d)", token, spender, state.amount)
            return None

        if to_checksum_address(owner) != to_checksum_address(self.context.address):
            raise ApprovalFailed(f"cannot approve on behalf of {owner}; trading account is {self.context.address}")

        logger.info("[Allowance] Approving %s to spend %s (current=%d, needed=%d)", spender, token, state.amount, min_amount)
        try:
            tx_hash = self.token_factory(token).approve(
                self.context.account,
                spender,
                MAX_UINT256,
                gas_limit_multiplier=self.gas_limit_multiplier,
            )
            receipt = self.context.rpc.wait_for_receipt(
                tx_hash,
                timeout_sec=self.receipt_timeout_sec,
                poll_interval_sec=self.receipt_poll_interval_sec,
            )
        except (ChainError, ValueError) as exc:
            raise ApprovalFailed("approval transaction failed", exc) from exc

        if to_int(receipt.get("status", 0)) != 1:
            raise ApprovalFailed(f"approval transaction {tx_hash} reverted")

        logger.info("[Allowance] Approval confirmed: %s", tx_hash)
        return receipt
