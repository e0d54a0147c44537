"""
Payment request schemas.

Monetary fields are ``Decimal`` and serialize as strings; ``vat_rate`` is a
fraction. ``display`` carries the rounded, formatted variants.
"""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from creatorpay.schemas.creator import CreatorResponse, CreatorSummary


class PaymentRequestCreate(BaseModel):
    creator_id: str
    amount: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2, description="Base amount before VAT")
    description: Optional[str] = None
    due_date: Optional[datetime] = None


class MoneyDisplay(BaseModel):
    """Two-decimal presentation strings, e.g. ``€1,210.00`` / ``21%``"""
    amount: str
    vat_amount: str
    total_amount: str
    vat_rate: str


class PaymentRequestResponse(BaseModel):
    id: str
    creator_id: str
    amount: Decimal
    vat_rate: Decimal
    vat_amount: Decimal
    total_amount: Decimal
    reverse_charged: bool
    vat_note: Optional[str] = None
    description: Optional[str] = None
    status: str
    claim_token: str
    claim_url: str
    due_date: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    failure_reason: Optional[str] = None
    transfer_id: Optional[str] = None
    display: MoneyDisplay
    creator: Optional[CreatorSummary] = None
    created_at: datetime
    updated_at: datetime


class MarkFailedRequest(BaseModel):
    reason: Optional[str] = None


class MarkPaidRequest(BaseModel):
    transfer_id: Optional[str] = Field(default=None, description="Reference of a transfer made outside this service")


class PaymentProcessResponse(BaseModel):
    payment_request: PaymentRequestResponse
    transfer_id: Optional[str] = None
    message: str


class ClaimView(BaseModel):
    """What the public claim page needs"""
    payment_request: PaymentRequestResponse
    creator: CreatorResponse


class ClaimResult(BaseModel):
    message: str
    payment_request: PaymentRequestResponse
