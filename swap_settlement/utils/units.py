"""
Unit helpers: decimal token amounts and basis points.

Token amounts travel as integers in base units; humans type decimals.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union

Number = Union[int, str, Decimal]


def parse_units(amount: Union[str, Decimal], decimals: int) -> int:
    """
    Convert a human amount to base units.

    Args:
        amount: Decimal amount, e.g. "0.1"
        decimals: Token decimals, e.g. 18

    Returns:
        Integer base units (0.1 WETH -> 100000000000000000)
    """
    if decimals < 0:
        raise ValueError(f"decimals must be >= 0, got {decimals}")
    try:
        value = Decimal(str(amount))
    except InvalidOperation as exc:
        raise ValueError(f"not a decimal amount: {amount!r}") from exc
    if value < 0:
        raise ValueError(f"amount must be >= 0, got {amount}")

    scaled = value.scaleb(decimals)
    if scaled != scaled.to_integral_value():
        raise ValueError(f"{amount} has more than {decimals} decimal places")
    return int(scaled)


def format_units(value: int, decimals: int) -> str:
    """Convert base units back to a decimal string without trailing zeros."""
    q = Decimal(value).scaleb(-decimals)
    text = f"{q:f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def to_int(value: Number) -> int:
    """Parse an integer from int, decimal string or 0x-hex string.

    Fractional values ("33.5") are rejected rather than truncated.
    """
    if isinstance(value, bool):
        raise ValueError("bool is not a number")
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if text.lower().startswith("0x"):
        return int(text, 16)
    try:
        number = Decimal(text)
    except InvalidOperation as exc:
        raise ValueError(f"not a number: {value!r}") from exc
    if not number.is_finite() or number != number.to_integral_value():
        raise ValueError(f"not an integer: {value!r}")
    return int(number)


def bps_to_percent(bps: Number) -> float:
    """Basis points to percent at two-decimal precision (150 -> 1.5)."""
    pct = (Decimal(to_int(bps)) / Decimal(100)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return float(pct)
