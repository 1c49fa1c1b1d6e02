"""Quote transparency reporting."""

from swap_settlement.reporting.transparency import (
    TransparencyReporter,
    liquidity_breakdown,
    monetization_summary,
    tax_breakdown,
)

__all__ = ["TransparencyReporter", "liquidity_breakdown", "monetization_summary", "tax_breakdown"]
