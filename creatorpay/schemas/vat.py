"""
VAT preview and country list schemas
"""
from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel


class VATQuoteResponse(BaseModel):
    amount: Decimal
    country: str
    business_type: str
    rate: Decimal
    rate_percent: str
    vat_amount: Decimal
    total: Decimal
    reverse_charged: bool
    explanation: str
    formatted_amount: str
    formatted_vat_amount: str
    formatted_total: str


class CountryResponse(BaseModel):
    code: str
    name: str
