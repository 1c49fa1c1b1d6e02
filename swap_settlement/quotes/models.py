"""
Typed views of 0x Swap API (Permit2) responses.

Only the fields the settlement flow reads are modelled; the full
decoded body is kept on ``raw``.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from swap_settlement.core.errors import MalformedResponse
from swap_settlement.utils.units import to_int


def _int_field(obj: Dict[str, Any], key: str, default: Optional[int] = None) -> Optional[int]:
    value = obj.get(key)
    if value is None:
        return default
    try:
        return to_int(value)
    except (TypeError, ValueError, ArithmeticError) as exc:
        raise MalformedResponse(f"field {key!r} is not an integer: {value!r}") from exc


def _object_field(obj: Dict[str, Any], key: str) -> Optional[Dict[str, Any]]:
    value = obj.get(key)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise MalformedResponse(f"field {key!r} is not an object")
    return value


@dataclass(frozen=True)
class AllowanceIssue:
    """Taker has not approved ``spender`` for enough of the sell token."""

    spender: str
    actual: int = 0


@dataclass
class PriceQuote:
    """Non-binding price (GET /swap/permit2/price)."""

    allowance_issue: Optional[AllowanceIssue] = None
    liquidity_available: bool = True
    buy_amount: Optional[int] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_json(cls, data: Any) -> "PriceQuote":
        if not isinstance(data, dict):
            raise MalformedResponse("price response is not an object")
        issues = _object_field(data, "issues") or {}
        allowance = _object_field(issues, "allowance")
        issue = None
        if allowance is not None:
            spender = allowance.get("spender")
            if not spender:
                raise MalformedResponse("allowance issue without spender")
            issue = AllowanceIssue(spender=str(spender), actual=_int_field(allowance, "actual", 0))
        return cls(
            allowance_issue=issue,
            liquidity_available=bool(data.get("liquidityAvailable", True)),
            buy_amount=_int_field(data, "buyAmount"),
            raw=data,
        )


@dataclass(frozen=True)
class Fill:
    """One liquidity source's share of the route."""

    source: str
    proportion_bps: int
    from_token: Optional[str] = None
    to_token: Optional[str] = None


@dataclass(frozen=True)
class TokenTax:
    """Transfer taxes of one token, in basis points."""

    buy_tax_bps: int = 0
    sell_tax_bps: int = 0

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "TokenTax":
        return cls(
            buy_tax_bps=_int_field(data, "buyTaxBps", 0),
            sell_tax_bps=_int_field(data, "sellTaxBps", 0),
        )


@dataclass(frozen=True)
class TokenMetadata:
    buy_token: Optional[TokenTax] = None
    sell_token: Optional[TokenTax] = None


@dataclass
class AuthorizationPayload:
    """EIP-712 typed data the taker must sign (Permit2)."""

    domain: Dict[str, Any]
    message: Dict[str, Any]
    types: Dict[str, Any] = field(default_factory=dict)
    primary_type: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.domain) and bool(self.message)

    def to_typed_data(self) -> Dict[str, Any]:
        """Full EIP-712 message as accepted by eth_account."""
        return {
            "types": self.types,
            "primaryType": self.primary_type,
            "domain": self.domain,
            "message": self.message,
        }

    @classmethod
    def from_json(cls, permit2: Dict[str, Any]) -> Optional["AuthorizationPayload"]:
        # v2 nests the typed data under "eip712"; older responses inline it
        typed = permit2.get("eip712") if isinstance(permit2.get("eip712"), dict) else permit2
        domain = typed.get("domain")
        message = typed.get("message") or typed.get("permitData")
        if not domain or not message:
            return None
        if not isinstance(domain, dict) or not isinstance(message, dict):
            raise MalformedResponse("permit2 domain/message must be objects")
        return cls(
            domain=domain,
            message=message,
            types=typed.get("types") or {},
            primary_type=str(typed.get("primaryType") or ""),
        )


@dataclass
class ExecutableQuote:
    """Binding quote (GET /swap/permit2/quote)."""

    fills: List[Fill] = field(default_factory=list)
    token_metadata: Optional[TokenMetadata] = None
    affiliate_fee_bps: Optional[int] = None
    trade_surplus: Optional[str] = None  # Verbatim from the service
    authorization: Optional[AuthorizationPayload] = None
    buy_amount: Optional[int] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def needs_signature(self) -> bool:
        return self.authorization is not None and self.authorization.is_complete

    @classmethod
    def from_json(cls, data: Any) -> "ExecutableQuote":
        if not isinstance(data, dict):
            raise MalformedResponse("quote response is not an object")

        fills: List[Fill] = []
        route = _object_field(data, "route")
        if route is not None:
            raw_fills = route.get("fills") or []
            if not isinstance(raw_fills, list):
                raise MalformedResponse("route.fills is not a list")
            for f in raw_fills:
                if not isinstance(f, dict) or "source" not in f:
                    raise MalformedResponse(f"bad fill entry: {f!r}")
                fills.append(
                    Fill(
                        source=str(f["source"]),
                        proportion_bps=_int_field(f, "proportionBps", 0),
                        from_token=f.get("from"),
                        to_token=f.get("to"),
                    )
                )

        metadata = None
        tm = _object_field(data, "tokenMetadata")
        if tm is not None:
            buy = _object_field(tm, "buyToken")
            sell = _object_field(tm, "sellToken")
            metadata = TokenMetadata(
                buy_token=TokenTax.from_json(buy) if buy is not None else None,
                sell_token=TokenTax.from_json(sell) if sell is not None else None,
            )

        authorization = None
        permit2 = _object_field(data, "permit2")
        if permit2:
            authorization = AuthorizationPayload.from_json(permit2)

        surplus = data.get("tradeSurplus")
        return cls(
            fills=fills,
            token_metadata=metadata,
            affiliate_fee_bps=_int_field(data, "affiliateFeeBps"),
            trade_surplus=str(surplus) if surplus is not None else None,
            authorization=authorization,
            buy_amount=_int_field(data, "buyAmount"),
            raw=data,
        )
