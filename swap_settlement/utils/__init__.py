"""Utilities: unit conversion, state store."""

from swap_settlement.utils.units import parse_units, format_units, bps_to_percent
from swap_settlement.utils.state_store import StateStore

__all__ = [
    "parse_units",
    "format_units",
    "bps_to_percent",
    "StateStore",
]
