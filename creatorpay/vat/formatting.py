"""
Display and transfer rounding for monetary values.

The classifier and the stored records keep exact decimals; rounding to
cents only happens in these helpers.
"""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from creatorpay.vat.classifier import to_decimal

CENT = Decimal("0.01")

CURRENCY_SYMBOLS = {
    "EUR": "€",
    "USD": "$",
    "GBP": "£",
}


def round_currency(amount: Decimal | int | str | float) -> Decimal:
    return to_decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def format_currency(amount: Decimal | int | str | float, currency: str = "EUR") -> str:
    """``1210`` -> ``"€1,210.00"``; unknown currencies use the ISO code as prefix."""
    rounded = round_currency(amount)
    code = currency.upper()
    symbol = CURRENCY_SYMBOLS.get(code, f"{code} ")
    sign = "-" if rounded < 0 else ""
    return f"{sign}{symbol}{abs(rounded):,.2f}"


def to_percent(rate: Decimal | int | str | float) -> Decimal:
    """Fraction to percentage: ``0.21`` -> ``21``."""
    return to_decimal(rate) * 100


def format_percent(rate: Decimal | int | str | float) -> str:
    """``0.21`` -> ``"21%"``, ``0.055`` -> ``"5.5%"`` (at most one fraction digit)."""
    percent = to_percent(rate).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    if percent == percent.to_integral_value():
        return f"{percent.to_integral_value()}%"
    return f"{percent}%"


def to_minor_units(amount: Decimal | int | str | float) -> int:
    """Amount in cents, as payment processors expect it."""
    return int(round_currency(amount) * 100)
