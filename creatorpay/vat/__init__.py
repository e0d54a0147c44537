"""
VAT determination and money formatting.
"""
from creatorpay.vat.classifier import BusinessCategory, VATResult, classify, to_decimal
from creatorpay.vat.countries import COUNTRIES, EU_MEMBER_STATES, is_eu_member, normalize_country_code
from creatorpay.vat.formatting import (
    format_currency,
    format_percent,
    round_currency,
    to_minor_units,
    to_percent,
)

__all__ = [
    "BusinessCategory",
    "COUNTRIES",
    "EU_MEMBER_STATES",
    "VATResult",
    "classify",
    "format_currency",
    "format_percent",
    "is_eu_member",
    "normalize_country_code",
    "round_currency",
    "to_decimal",
    "to_minor_units",
    "to_percent",
]
