"""Settlement execution: allowance, signature, orchestration."""

from swap_settlement.execution.allowance import AllowanceManager, AllowanceState
from swap_settlement.execution.signer import SignatureProvider
from swap_settlement.execution.orchestrator import SettlementOrchestrator

__all__ = ["AllowanceManager", "AllowanceState", "SignatureProvider", "SettlementOrchestrator"]
