"""Core system components: config, chain registry, context, errors, models."""

from swap_settlement.core.config import Config
from swap_settlement.core.models import SettlementResult, SettlementState, TradeIntent

__all__ = [
    "Config",
    "SettlementResult",
    "SettlementState",
    "TradeIntent",
]
