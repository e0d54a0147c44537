"""
Public claim-link endpoints (no admin credentials; the token is the secret).

GET  /api/claim/{token}  — payment request + creator for the claim page
POST /api/claim/{token}  — accept the payment request (pending -> claimed)
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from creatorpay import lifecycle, storage
from creatorpay.database import get_db
from creatorpay.routers.creators import transform_creator
from creatorpay.routers.payment_requests import transform_payment_request
from creatorpay.schemas import ClaimResult, ClaimView

logger = logging.getLogger(__name__)
router = APIRouter()


# ── GET /api/claim/{token} ───────────────────────────────────────────────
@router.get("/claim/{token}", response_model=ClaimView)
def get_claim(token: str, db: Session = Depends(get_db)):
    request = storage.get_payment_request_by_token(db, token)
    if not request:
        logger.warning("Unknown claim token")
        raise HTTPException(status_code=404, detail="Payment request not found")
    return ClaimView(
        payment_request=transform_payment_request(request),
        creator=transform_creator(request.creator),
    )


# ── POST /api/claim/{token} ──────────────────────────────────────────────
@router.post("/claim/{token}", response_model=ClaimResult)
def claim_payment(token: str, db: Session = Depends(get_db)):
    request = lifecycle.claim(db, token)
    return ClaimResult(
        message="Payment claimed successfully",
        payment_request=transform_payment_request(request),
    )
