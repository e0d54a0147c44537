"""
Payment request lifecycle.

    pending ──claim──▶ claimed ──mark_paid──▶ paid
       │                  │
       └──mark_paid───────┤
       └──mark_failed─────┴──▶ failed

``paid`` and ``failed`` are terminal. VAT is classified once in
``create_payment_request`` and copied onto the row; later edits to the
creator do not touch existing requests. Transitions are conditional updates
(see ``storage.transition_status``) and are never retried here; payout
retries belong to whoever drives ``mark_paid`` / ``mark_failed``.
"""
from __future__ import annotations

import logging
import secrets
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from creatorpay import storage
from creatorpay.config import settings
from creatorpay.errors import NotFound, ValidationError
from creatorpay.models import PaymentRequestModel, PaymentStatus
from creatorpay.vat import classify, to_decimal

logger = logging.getLogger(__name__)

CLAIMABLE_FROM = (PaymentStatus.PENDING,)
PAYABLE_FROM = (PaymentStatus.PENDING, PaymentStatus.CLAIMED)
FAILABLE_FROM = (PaymentStatus.PENDING, PaymentStatus.CLAIMED)

# Largest base amount the API accepts; its 21% total still fits Numeric(14, 4)
MAX_AMOUNT = Decimal("99999999.99")


def generate_claim_token() -> str:
    """URL-safe random token for the public claim link."""
    return secrets.token_urlsafe(settings.CLAIM_TOKEN_BYTES)


def create_payment_request(
    db: Session,
    creator_id: str,
    amount: Decimal | int | str,
    description: Optional[str] = None,
    due_date: Optional[datetime] = None,
) -> PaymentRequestModel:
    """Create a pending request with VAT frozen from the creator's current profile."""
    base = to_decimal(amount)
    if base < 0:
        raise ValidationError("Amount must not be negative", field="amount")
    if base > MAX_AMOUNT:
        raise ValidationError(f"Amount must not exceed {MAX_AMOUNT}", field="amount")

    creator = storage.get_creator(db, creator_id)
    if creator is None:
        raise NotFound("Creator", creator_id)

    vat = classify(base, creator.country, creator.business_type)

    request = PaymentRequestModel(
        id=str(uuid.uuid4()),
        creator_id=creator.id,
        amount=base,
        vat_rate=vat.rate,
        vat_amount=vat.vat_amount,
        total_amount=vat.total,
        reverse_charged=vat.reverse_charged,
        vat_note=vat.explanation,
        description=description,
        status=PaymentStatus.PENDING.value,
        claim_token=generate_claim_token(),
        due_date=due_date,
    )
    db.add(request)
    db.commit()
    db.refresh(request)
    logger.info(
        "Created payment request %s for creator %s: amount=%s vat_rate=%s total=%s",
        request.id, creator.id, base, vat.rate, vat.total,
    )
    return request


def claim(db: Session, token: str) -> PaymentRequestModel:
    """pending -> claimed, addressed by claim token."""
    return storage.transition_status(
        db,
        PaymentRequestModel.claim_token == token,
        PaymentStatus.CLAIMED,
        CLAIMABLE_FROM,
        entity_key=token,
    )


def mark_paid(
    db: Session,
    request_id: str,
    transfer_id: Optional[str] = None,
) -> PaymentRequestModel:
    """pending|claimed -> paid. Call only after the transfer has gone through."""
    values = {"paid_at": datetime.now(timezone.utc)}
    if transfer_id is not None:
        values["transfer_id"] = transfer_id
    return storage.transition_status(
        db,
        PaymentRequestModel.id == request_id,
        PaymentStatus.PAID,
        PAYABLE_FROM,
        entity_key=request_id,
        **values,
    )


def mark_failed(
    db: Session,
    request_id: str,
    reason: Optional[str] = None,
) -> PaymentRequestModel:
    """pending|claimed -> failed."""
    return storage.transition_status(
        db,
        PaymentRequestModel.id == request_id,
        PaymentStatus.FAILED,
        FAILABLE_FROM,
        entity_key=request_id,
        failure_reason=reason,
    )
