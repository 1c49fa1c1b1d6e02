"""
Error taxonomy.

Collaborator errors (quote service, chain, config) are raised by the leaf
components. The orchestrator maps them onto one SettlementError per stage.
"""

from enum import Enum
from typing import Optional


class ConfigError(Exception):
    """Invalid or missing process configuration."""


class QuoteServiceError(Exception):
    """Base for quote-aggregation service failures."""


class ServiceUnavailable(QuoteServiceError):
    """Transport failure or non-success HTTP status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedResponse(QuoteServiceError):
    """Response body could not be decoded into the expected shape."""


class ChainError(Exception):
    """Base for blockchain client failures."""


class RpcError(ChainError):
    """JSON-RPC call failed or returned an error object."""


class ReceiptTimeout(ChainError):
    """Transaction receipt did not appear in time."""


class FailureReason(str, Enum):
    """Stage at which a settlement attempt stopped."""

    PRICE_UNAVAILABLE = "PriceUnavailable"
    APPROVAL_FAILED = "ApprovalFailed"
    QUOTE_UNAVAILABLE = "QuoteUnavailable"
    SIGNATURE_DENIED = "SignatureDenied"
    EXECUTION_FAILED = "ExecutionFailed"


class SettlementError(Exception):
    """
    A settlement stage failure.

    The underlying transport/library error is kept as ``cause`` (and as
    ``__cause__`` when raised with ``from``).
    """

    reason: FailureReason = FailureReason.EXECUTION_FAILED

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause

    @property
    def stage(self) -> str:
        return self.reason.value

    def __str__(self) -> str:
        base = super().__str__()
        if self.cause is not None:
            return f"{base}: {self.cause}"
        return base


class PriceUnavailable(SettlementError):
    reason = FailureReason.PRICE_UNAVAILABLE


class ApprovalFailed(SettlementError):
    reason = FailureReason.APPROVAL_FAILED


class QuoteUnavailable(SettlementError):
    reason = FailureReason.QUOTE_UNAVAILABLE


class SignatureDenied(SettlementError):
    reason = FailureReason.SIGNATURE_DENIED


class ExecutionFailed(SettlementError):
    reason = FailureReason.EXECUTION_FAILED
