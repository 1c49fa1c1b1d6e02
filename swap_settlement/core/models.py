"""
Core data structures (TradeIntent, SettlementState, SettlementResult).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from swap_settlement.core.errors import FailureReason, SettlementError

if TYPE_CHECKING:
    from swap_settlement.quotes.models import ExecutableQuote


@dataclass(frozen=True)
class TradeIntent:
    """
    One settlement attempt: what to sell, what to buy, for whom.

    Price, quote and execute requests are all built from the same intent.
    """

    sell_token: str
    buy_token: str
    sell_amount: int  # Base units
    taker: str
    affiliate_fee_bps: int = 0
    collect_surplus: bool = False

    def __post_init__(self):
        if self.sell_amount <= 0:
            raise ValueError(f"sell_amount must be > 0, got {self.sell_amount}")
        if not (0 <= self.affiliate_fee_bps <= 10_000):
            raise ValueError(f"affiliate_fee_bps must be in [0, 10000], got {self.affiliate_fee_bps}")

    def to_params(self, chain_id: int) -> Dict[str, str]:
        """Query parameters shared by price, quote and execute."""
        return {
            "chainId": str(chain_id),
            "sellToken": self.sell_token,
            "buyToken": self.buy_token,
            "sellAmount": str(self.sell_amount),
            "taker": self.taker,
            "affiliateFee": str(self.affiliate_fee_bps),
            "surplusCollection": "true" if self.collect_surplus else "false",
        }


class SettlementState(str, Enum):
    IDLE = "Idle"
    PRICE_FETCHED = "PriceFetched"
    ALLOWANCE_VERIFIED = "AllowanceVerified"
    QUOTED = "Quoted"
    SIGNED = "Signed"
    NO_SIGNATURE_NEEDED = "NoSignatureNeeded"
    EXECUTED = "Executed"
    FAILED = "Failed"


@dataclass
class SettlementResult:
    """
    Outcome of a settlement attempt.

    Exactly one of ``transaction_hash`` / ``failure`` is set, except for
    dry runs, which stop at QUOTED with neither.
    """

    transaction_hash: Optional[str] = None
    failure: Optional[SettlementError] = None
    states: List[SettlementState] = field(default_factory=list)
    quote: Optional["ExecutableQuote"] = None
    approval_receipt: Optional[Dict[str, Any]] = None
    dry_run: bool = False

    @classmethod
    def executed(cls, transaction_hash: str) -> "SettlementResult":
        return cls(transaction_hash=transaction_hash, states=[SettlementState.EXECUTED])

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def final_state(self) -> SettlementState:
        return self.states[-1] if self.states else SettlementState.IDLE

    @property
    def failure_reason(self) -> Optional[FailureReason]:
        return self.failure.reason if self.failure is not None else None
