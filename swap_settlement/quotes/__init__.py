"""0x Swap API client and response models."""

from swap_settlement.quotes.client import QuoteServiceClient
from swap_settlement.quotes.models import PriceQuote, ExecutableQuote, AuthorizationPayload

__all__ = ["QuoteServiceClient", "PriceQuote", "ExecutableQuote", "AuthorizationPayload"]
