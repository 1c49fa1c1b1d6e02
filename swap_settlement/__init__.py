"""
Permit2 Swap Settlement

Settles token swaps through the 0x Swap API using a Permit2 allowance
and an EIP-712 signature instead of a per-swap approval transaction.

Components:
- Quote Service Client: price / quote / execute / liquidity sources
- Allowance Manager: reads and bootstraps the Permit2 allowance
- Signature Provider: signs the quote's Permit2 typed data
- Transparency Reporter: liquidity split, token taxes, affiliate fee, surplus
- Settlement Orchestrator: the price → allowance → quote → sign → execute state machine
"""

__version__ = "0.1.0"

from swap_settlement.core.config import Config
from swap_settlement.core.models import SettlementResult, SettlementState, TradeIntent
from swap_settlement.execution.orchestrator import SettlementOrchestrator

__all__ = [
    "Config",
    "SettlementOrchestrator",
    "SettlementResult",
    "SettlementState",
    "TradeIntent",
]
