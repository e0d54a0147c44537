"""
VAT preview and country list.

GET /api/vat/quote   — what a payment request of this amount would carry
GET /api/countries   — display list for country pickers
"""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import List

from fastapi import APIRouter, HTTPException, Query

from creatorpay.config import settings
from creatorpay.schemas import CountryResponse, VATQuoteResponse
from creatorpay.vat import (
    COUNTRIES,
    BusinessCategory,
    classify,
    format_currency,
    format_percent,
    normalize_country_code,
)

logger = logging.getLogger(__name__)
router = APIRouter()


# ── GET /api/vat/quote ───────────────────────────────────────────────────
@router.get("/vat/quote", response_model=VATQuoteResponse)
def vat_quote(
    amount: Decimal = Query(..., ge=0),
    country: str = Query(..., description="ISO 3166-1 alpha-2"),
    business_type: BusinessCategory = Query(...),
):
    try:
        country_code = normalize_country_code(country)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    result = classify(amount, country_code, business_type)
    currency = settings.DEFAULT_CURRENCY
    return VATQuoteResponse(
        amount=amount,
        country=country_code,
        business_type=business_type.value,
        rate=result.rate,
        rate_percent=format_percent(result.rate),
        vat_amount=result.vat_amount,
        total=result.total,
        reverse_charged=result.reverse_charged,
        explanation=result.explanation,
        formatted_amount=format_currency(amount, currency),
        formatted_vat_amount=format_currency(result.vat_amount, currency),
        formatted_total=format_currency(result.total, currency),
    )


# ── GET /api/countries ───────────────────────────────────────────────────
@router.get("/countries", response_model=List[CountryResponse])
def list_countries():
    return [CountryResponse(code=code, name=name) for code, name in COUNTRIES]
