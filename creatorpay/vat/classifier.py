"""
Rule-based VAT classifier.

Maps (amount, country, business category) to a VAT determination. Three
rules, first match wins:

1. NL + vat_registered          -> 21 % Dutch VAT
2. other EU + vat_registered    -> reverse charge, 0 %
3. everything else              -> no VAT

Pure and total over its inputs: unknown country codes land on rule 3.
No rounding happens here; see ``creatorpay.vat.formatting``.
"""
from __future__ import annotations

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict

from creatorpay.vat.countries import EU_MEMBER_STATES

HOME_COUNTRY = "NL"
HOME_VAT_RATE = Decimal("0.21")
ZERO = Decimal("0")

EXPLANATION_DUTCH_VAT = "Dutch VAT (21%) applied."
EXPLANATION_REVERSE_CHARGE = "EU VAT reverse charge (VAT shifted)."
EXPLANATION_NO_VAT = "No VAT applicable."


class BusinessCategory(str, Enum):
    INDIVIDUAL = "individual"
    VAT_REGISTERED = "vat_registered"
    VAT_EXEMPT = "vat_exempt"


class VATResult(BaseModel):
    """Outcome of a VAT determination. ``rate`` is a fraction (0.21), not a percentage."""
    model_config = ConfigDict(frozen=True)

    rate: Decimal
    vat_amount: Decimal
    total: Decimal
    reverse_charged: bool
    explanation: str


def to_decimal(value: Decimal | int | str | float) -> Decimal:
    """Exact conversion; floats go through ``str`` so 0.1 stays 0.1."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def classify(
    amount: Decimal | int | str | float,
    country_code: str,
    business_category: BusinessCategory | str,
) -> VATResult:
    """Return the VAT determination for a payout of ``amount``."""
    base = to_decimal(amount)
    category = BusinessCategory(business_category)

    if category is BusinessCategory.VAT_REGISTERED:
        if country_code == HOME_COUNTRY:
            vat_amount = base * HOME_VAT_RATE
            return VATResult(
                rate=HOME_VAT_RATE,
                vat_amount=vat_amount,
                total=base + vat_amount,
                reverse_charged=False,
                explanation=EXPLANATION_DUTCH_VAT,
            )
        if country_code in EU_MEMBER_STATES:
            return VATResult(
                rate=ZERO,
                vat_amount=ZERO,
                total=base,
                reverse_charged=True,
                explanation=EXPLANATION_REVERSE_CHARGE,
            )

    return VATResult(
        rate=ZERO,
        vat_amount=ZERO,
        total=base,
        reverse_charged=False,
        explanation=EXPLANATION_NO_VAT,
    )
