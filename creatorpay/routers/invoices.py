"""
Invoice endpoints.

POST /api/payment-requests/{id}/invoices  — attach a stored invoice and validate it
GET  /api/payment-requests/{id}/invoices  — list invoices, newest first
"""
from __future__ import annotations

import logging
import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from creatorpay import storage
from creatorpay.database import get_db
from creatorpay.models import InvoiceModel
from creatorpay.schemas import InvoiceCreate, InvoiceResponse
from creatorpay.validation import DocumentValidator, ValidationVerdict, get_validator

logger = logging.getLogger(__name__)
router = APIRouter()


def transform_invoice(model: InvoiceModel) -> InvoiceResponse:
    return InvoiceResponse(
        id=model.id,
        payment_request_id=model.payment_request_id,
        type=model.type,
        filename=model.filename,
        file_url=model.file_url,
        validation_status=model.validation_status,
        validation_notes=model.validation_notes,
        created_at=model.created_at,
    )


def _request_or_404(db: Session, request_id: str):
    request = storage.get_payment_request(db, request_id)
    if not request:
        raise HTTPException(status_code=404, detail="Payment request not found")
    return request


# ── POST /api/payment-requests/{request_id}/invoices ─────────────────────
@router.post("/payment-requests/{request_id}/invoices", response_model=InvoiceResponse)
def create_invoice(
    request_id: str,
    req: InvoiceCreate,
    db: Session = Depends(get_db),
    validator: DocumentValidator = Depends(get_validator),
):
    request = _request_or_404(db, request_id)

    if req.type == "generated":
        verdict = ValidationVerdict("valid", "Generated from payment request")
    else:
        verdict = validator.validate(req.file_url, request.total_amount)

    invoice = InvoiceModel(
        id=str(uuid.uuid4()),
        payment_request_id=request.id,
        type=req.type,
        filename=req.filename,
        file_url=req.file_url,
        validation_status=verdict.status,
        validation_notes=verdict.notes,
    )
    db.add(invoice)
    db.commit()
    db.refresh(invoice)
    logger.info("Stored %s invoice %s for payment request %s (%s)",
                invoice.type, invoice.id, request.id, invoice.validation_status)
    return transform_invoice(invoice)


# ── GET /api/payment-requests/{request_id}/invoices ──────────────────────
@router.get("/payment-requests/{request_id}/invoices", response_model=List[InvoiceResponse])
def list_invoices(request_id: str, db: Session = Depends(get_db)):
    _request_or_404(db, request_id)
    return [transform_invoice(i) for i in storage.list_invoices(db, request_id)]
