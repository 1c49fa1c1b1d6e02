"""Monitoring: logging setup."""

from swap_settlement.monitoring.logging import setup_logging

__all__ = ["setup_logging"]
