"""
Payment request API endpoints.

POST /api/payment-requests                    — create (VAT frozen from the creator)
GET  /api/payment-requests                    — list, optional ?status=
GET  /api/payment-requests/{id}               — get one
POST /api/payment-requests/{id}/mark-paid     — record an external payout
POST /api/payment-requests/{id}/mark-failed   — abandon the request
POST /api/payment-requests/{id}/process       — transfer the total, then mark paid / failed
"""
from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from creatorpay import lifecycle, storage
from creatorpay.auth import require_admin
from creatorpay.config import settings
from creatorpay.database import get_db
from creatorpay.errors import InvalidState
from creatorpay.gateway import PayoutGateway, get_gateway
from creatorpay.models import PaymentRequestModel, PaymentStatus, TERMINAL_STATUSES
from creatorpay.schemas import (
    CreatorSummary,
    MarkFailedRequest,
    MarkPaidRequest,
    MoneyDisplay,
    PaymentProcessResponse,
    PaymentRequestCreate,
    PaymentRequestResponse,
)
from creatorpay.vat import format_currency, format_percent, to_minor_units

logger = logging.getLogger(__name__)
router = APIRouter()


def transform_payment_request(
    model: PaymentRequestModel, include_creator: bool = False
) -> PaymentRequestResponse:
    currency = settings.DEFAULT_CURRENCY
    creator = None
    if include_creator and model.creator is not None:
        creator = CreatorSummary(
            id=model.creator.id,
            email=model.creator.email,
            full_name=model.creator.full_name,
            country=model.creator.country,
            business_type=model.creator.business_type,
        )

    return PaymentRequestResponse(
        id=model.id,
        creator_id=model.creator_id,
        amount=model.amount,
        vat_rate=model.vat_rate,
        vat_amount=model.vat_amount,
        total_amount=model.total_amount,
        reverse_charged=model.reverse_charged,
        vat_note=model.vat_note,
        description=model.description,
        status=model.status,
        claim_token=model.claim_token,
        claim_url=f"{settings.PUBLIC_BASE_URL}/claim/{model.claim_token}",
        due_date=model.due_date,
        paid_at=model.paid_at,
        failure_reason=model.failure_reason,
        transfer_id=model.transfer_id,
        display=MoneyDisplay(
            amount=format_currency(model.amount, currency),
            vat_amount=format_currency(model.vat_amount, currency),
            total_amount=format_currency(model.total_amount, currency),
            vat_rate=format_percent(model.vat_rate),
        ),
        creator=creator,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


def _get_or_404(db: Session, request_id: str) -> PaymentRequestModel:
    request = storage.get_payment_request(db, request_id)
    if not request:
        logger.warning("Payment request not found: %s", request_id)
        raise HTTPException(status_code=404, detail="Payment request not found")
    return request


# ── POST /api/payment-requests ───────────────────────────────────────────
@router.post(
    "/payment-requests",
    response_model=PaymentRequestResponse,
    dependencies=[Depends(require_admin)],
)
def create_payment_request(
    req: PaymentRequestCreate,
    db: Session = Depends(get_db),
):
    request = lifecycle.create_payment_request(
        db,
        creator_id=req.creator_id,
        amount=req.amount,
        description=req.description,
        due_date=req.due_date,
    )
    return transform_payment_request(request, include_creator=True)


# ── GET /api/payment-requests ────────────────────────────────────────────
@router.get("/payment-requests", response_model=List[PaymentRequestResponse])
def list_payment_requests(
    status: Optional[PaymentStatus] = None,
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    requests = storage.list_payment_requests(
        db,
        status=status.value if status else None,
        limit=limit,
        offset=offset,
    )
    return [transform_payment_request(r, include_creator=True) for r in requests]


# ── GET /api/payment-requests/{request_id} ───────────────────────────────
@router.get("/payment-requests/{request_id}", response_model=PaymentRequestResponse)
def get_payment_request(request_id: str, db: Session = Depends(get_db)):
    return transform_payment_request(_get_or_404(db, request_id), include_creator=True)


# ── POST /api/payment-requests/{request_id}/mark-paid ────────────────────
@router.post(
    "/payment-requests/{request_id}/mark-paid",
    response_model=PaymentRequestResponse,
    dependencies=[Depends(require_admin)],
)
def mark_paid(
    request_id: str,
    req: Optional[MarkPaidRequest] = None,
    db: Session = Depends(get_db),
):
    request = lifecycle.mark_paid(db, request_id, transfer_id=req.transfer_id if req else None)
    return transform_payment_request(request)


# ── POST /api/payment-requests/{request_id}/mark-failed ──────────────────
@router.post(
    "/payment-requests/{request_id}/mark-failed",
    response_model=PaymentRequestResponse,
    dependencies=[Depends(require_admin)],
)
def mark_failed(
    request_id: str,
    req: Optional[MarkFailedRequest] = None,
    db: Session = Depends(get_db),
):
    request = lifecycle.mark_failed(db, request_id, reason=req.reason if req else None)
    return transform_payment_request(request)


# ── POST /api/payment-requests/{request_id}/process ──────────────────────
@router.post(
    "/payment-requests/{request_id}/process",
    response_model=PaymentProcessResponse,
    dependencies=[Depends(require_admin)],
)
def process_payment(
    request_id: str,
    db: Session = Depends(get_db),
    gateway: PayoutGateway = Depends(get_gateway),
):
    """Pay the creator through the processor; the outcome drives the status.

    The row stays locked from the status check until the outcome is committed,
    and the transfer is keyed on the request id so a replay cannot pay twice.
    """
    request = storage.lock_payment_request(db, request_id)
    if not request:
        logger.warning("Payment request not found: %s", request_id)
        raise HTTPException(status_code=404, detail="Payment request not found")
    if PaymentStatus(request.status) in TERMINAL_STATUSES:
        raise InvalidState(request.status, PaymentStatus.PAID.value)

    creator = request.creator
    if not creator.payout_account_id:
        raise HTTPException(status_code=400, detail="Creator payout account not found")

    account = gateway.get_account_status(creator.payout_account_id)
    if not account.ready:
        logger.warning("Payout account %s not ready for creator %s", creator.payout_account_id, creator.id)
        raise HTTPException(status_code=400, detail="Creator payout account not ready for payments")

    amount_minor = to_minor_units(request.total_amount)
    logger.info("Transferring %d minor units for payment request %s", amount_minor, request.id)
    transfer = gateway.create_transfer(
        amount_minor=amount_minor,
        currency=settings.DEFAULT_CURRENCY.lower(),
        destination=creator.payout_account_id,
        description=request.description or f"Payment to {creator.full_name}",
        idempotency_key=f"payment-request-{request.id}",
    )

    if not transfer.success:
        lifecycle.mark_failed(db, request_id, reason=transfer.failure_reason)
        logger.warning("Transfer failed for payment request %s: %s", request_id, transfer.failure_reason)
        raise HTTPException(status_code=502, detail=f"Transfer failed: {transfer.failure_reason}")

    try:
        paid = lifecycle.mark_paid(db, request_id, transfer_id=transfer.transfer_id)
    except InvalidState:
        current = storage.get_payment_request(db, request_id)
        if current.status != PaymentStatus.PAID.value or current.transfer_id != transfer.transfer_id:
            logger.error(
                "Transfer %s went out but payment request %s is %s",
                transfer.transfer_id, request_id, current.status,
            )
            raise
        logger.info("Transfer %s already recorded for payment request %s", transfer.transfer_id, request_id)
        return PaymentProcessResponse(
            payment_request=transform_payment_request(current),
            transfer_id=transfer.transfer_id,
            message="Payment already processed",
        )

    return PaymentProcessResponse(
        payment_request=transform_payment_request(paid),
        transfer_id=transfer.transfer_id,
        message="Payment processed successfully",
    )
