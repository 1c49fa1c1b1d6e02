"""
Transparency Reporter

Pure derivations over a quote (liquidity split, token taxes, affiliate
fee, surplus) plus a console printer. Nothing here touches the network.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Callable, Iterable, List, Optional, Tuple

from swap_settlement.quotes.models import ExecutableQuote, Fill, TokenMetadata
from swap_settlement.utils.units import bps_to_percent


@dataclass(frozen=True)
class TaxLine:
    """Taxes of one leg, in percent."""

    leg: str  # "buyToken" or "sellToken"
    buy_tax_percent: float
    sell_tax_percent: float


LEG_LABELS = {
    "buyToken": "token to buy",
    "sellToken": "token to sell",
}


def liquidity_breakdown(fills: Iterable[Fill]) -> List[Tuple[str, float]]:
    """
    Per-source share of the route in percent, in the service's order.

    Shares are rounded to 0.01% and need not add up to exactly 100.
    """
    return [(f.source, bps_to_percent(f.proportion_bps)) for f in fills]


def tax_breakdown(token_metadata: Optional[TokenMetadata]) -> List[TaxLine]:
    """Legs with a strictly positive buy or sell tax."""
    if token_metadata is None:
        return []
    lines = []
    for leg, tax in (("buyToken", token_metadata.buy_token), ("sellToken", token_metadata.sell_token)):
        if tax is None:
            continue
        buy_pct = bps_to_percent(tax.buy_tax_bps)
        sell_pct = bps_to_percent(tax.sell_tax_bps)
        if buy_pct > 0 or sell_pct > 0:
            lines.append(TaxLine(leg=leg, buy_tax_percent=buy_pct, sell_tax_percent=sell_pct))
    return lines


def _is_positive(amount: Optional[str]) -> bool:
    if amount is None:
        return False
    try:
        return Decimal(amount) > 0
    except InvalidOperation:
        return False


def monetization_summary(quote: ExecutableQuote) -> Tuple[Optional[float], Optional[str]]:
    """
    Returns:
        (affiliate fee in percent or None, trade surplus verbatim or None)
    """
    fee_pct = bps_to_percent(quote.affiliate_fee_bps) if quote.affiliate_fee_bps is not None else None
    surplus = quote.trade_surplus if _is_positive(quote.trade_surplus) else None
    return fee_pct, surplus


class TransparencyReporter:
    """Writes the transparency lines for a quote to the console."""

    def __init__(self, write: Callable[[str], None] = print):
        self.write = write

    def report(self, quote: ExecutableQuote):
        if quote.fills:
            breakdown = liquidity_breakdown(quote.fills)
            self.write(f"{len(breakdown)} liquidity sources")
            for source, pct in breakdown:
                self.write(f"{source}: {pct:.2f}%")

        for line in tax_breakdown(quote.token_metadata):
            label = LEG_LABELS.get(line.leg, line.leg)
            self.write(f"Buy tax on {label}: {line.buy_tax_percent:.2f}%")
            self.write(f"Sell tax on {label}: {line.sell_tax_percent:.2f}%")

        fee_pct, surplus = monetization_summary(quote)
        if fee_pct is not None:
            self.write(f"Affiliate fee: {fee_pct:.2f}%")
        if surplus is not None:
            self.write(f"Trade surplus collected: {surplus}")

    def report_sources(self, chain_name: str, sources: List[str]):
        self.write(f"Liquidity sources on {chain_name}:")
        self.write(", ".join(sources))
