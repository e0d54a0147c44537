"""
Creator API endpoints.

POST  /api/creators               — onboard a creator (opens a payout account)
POST  /api/creators/quick-create  — admin shortcut: name + email only
GET   /api/creators               — list creators, newest first
GET   /api/creators/{id}          — get one creator, refreshing payout readiness
PATCH /api/creators/{id}          — partial update of the profile
"""
from __future__ import annotations

import logging
import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from creatorpay import storage
from creatorpay.auth import require_admin
from creatorpay.config import settings
from creatorpay.database import get_db
from creatorpay.errors import ValidationError
from creatorpay.gateway import GatewayError, PayoutGateway, get_gateway
from creatorpay.models import CreatorModel
from creatorpay.schemas import (
    CreatorCreate,
    CreatorQuickCreate,
    CreatorResponse,
    CreatorUpdate,
    QuickCreateResponse,
)
from creatorpay.vat import BusinessCategory

logger = logging.getLogger(__name__)
router = APIRouter()


def transform_creator(model: CreatorModel) -> CreatorResponse:
    return CreatorResponse(
        id=model.id,
        email=model.email,
        full_name=model.full_name,
        country=model.country,
        business_type=model.business_type,
        vat_id=model.vat_id,
        company_name=model.company_name,
        invoice_method=model.invoice_method,
        payout_account_id=model.payout_account_id,
        charges_enabled=bool(model.charges_enabled),
        payouts_enabled=bool(model.payouts_enabled),
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


def ensure_vat_id(business_type: str, vat_id: str | None) -> None:
    """vat_registered creators must carry a VAT number."""
    if business_type == BusinessCategory.VAT_REGISTERED.value and not (vat_id or "").strip():
        raise ValidationError("vat_id is required for vat_registered creators", field="vat_id")


def _reject_duplicate_email(db: Session, email: str) -> None:
    if storage.get_creator_by_email(db, email):
        raise HTTPException(status_code=400, detail="Creator with this email already exists")


def _commit_new_creator(db: Session, creator: CreatorModel) -> None:
    """Insert ``creator``; a racing signup that took the email first yields a 400."""
    db.add(creator)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning(
            "Duplicate email %s; payout account %s left unused", creator.email, creator.payout_account_id
        )
        raise HTTPException(status_code=400, detail="Creator with this email already exists")
    db.refresh(creator)


def _get_or_404(db: Session, creator_id: str) -> CreatorModel:
    creator = storage.get_creator(db, creator_id)
    if not creator:
        logger.warning("Creator not found: %s", creator_id)
        raise HTTPException(status_code=404, detail="Creator not found")
    return creator


# ── POST /api/creators ──────────────────────────────────────────────────
@router.post("/creators", response_model=CreatorResponse)
def create_creator(
    req: CreatorCreate,
    db: Session = Depends(get_db),
    gateway: PayoutGateway = Depends(get_gateway),
):
    _reject_duplicate_email(db, req.email)

    account = gateway.create_account(
        email=req.email,
        country=req.country,
        business_type=req.business_type.value,
        company_name=req.company_name,
    )
    status = gateway.get_account_status(account.account_id)

    creator = CreatorModel(
        id=str(uuid.uuid4()),
        email=req.email,
        full_name=req.full_name,
        country=req.country,
        business_type=req.business_type.value,
        vat_id=req.vat_id,
        company_name=req.company_name,
        invoice_method=req.invoice_method,
        payout_account_id=account.account_id,
        charges_enabled=status.charges_enabled,
        payouts_enabled=status.payouts_enabled,
    )
    _commit_new_creator(db, creator)
    logger.info("Created creator %s (%s, %s)", creator.id, creator.country, creator.business_type)
    return transform_creator(creator)


# ── POST /api/creators/quick-create ──────────────────────────────────────
@router.post(
    "/creators/quick-create",
    response_model=QuickCreateResponse,
    dependencies=[Depends(require_admin)],
)
def quick_create_creator(
    req: CreatorQuickCreate,
    db: Session = Depends(get_db),
    gateway: PayoutGateway = Depends(get_gateway),
):
    """Placeholder profile (NL / individual) that the creator completes during onboarding"""
    _reject_duplicate_email(db, req.email)

    account = gateway.create_account(
        email=req.email,
        country="NL",
        business_type=BusinessCategory.INDIVIDUAL.value,
        company_name=None,
    )

    creator = CreatorModel(
        id=str(uuid.uuid4()),
        email=req.email,
        full_name=req.full_name,
        country="NL",
        business_type=BusinessCategory.INDIVIDUAL.value,
        invoice_method="auto",
        payout_account_id=account.account_id,
    )
    _commit_new_creator(db, creator)
    logger.info("Quick-created creator %s", creator.id)

    onboarding_url = f"{settings.PUBLIC_BASE_URL}/creator-onboarding?creator={creator.id}"
    return QuickCreateResponse(creator=transform_creator(creator), onboarding_url=onboarding_url)


# ── GET /api/creators ────────────────────────────────────────────────────
@router.get("/creators", response_model=List[CreatorResponse])
def list_creators(
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    creators = storage.list_creators(db, limit=limit, offset=offset)
    return [transform_creator(c) for c in creators]


# ── GET /api/creators/{creator_id} ───────────────────────────────────────
@router.get("/creators/{creator_id}", response_model=CreatorResponse)
def get_creator(
    creator_id: str,
    db: Session = Depends(get_db),
    gateway: PayoutGateway = Depends(get_gateway),
):
    creator = _get_or_404(db, creator_id)

    if creator.payout_account_id:
        try:
            status = gateway.get_account_status(creator.payout_account_id)
        except GatewayError as e:
            # stored flags are still a valid answer
            logger.warning("Could not refresh payout account %s: %s", creator.payout_account_id, e)
        else:
            if (status.charges_enabled, status.payouts_enabled) != (
                creator.charges_enabled, creator.payouts_enabled
            ):
                creator.charges_enabled = status.charges_enabled
                creator.payouts_enabled = status.payouts_enabled
                db.commit()
                db.refresh(creator)
                logger.info("Updated payout readiness for creator %s", creator.id)

    return transform_creator(creator)


# ── PATCH /api/creators/{creator_id} ─────────────────────────────────────
@router.patch("/creators/{creator_id}", response_model=CreatorResponse)
def update_creator(
    creator_id: str,
    req: CreatorUpdate,
    db: Session = Depends(get_db),
):
    """Existing payment requests keep the VAT values they were created with."""
    creator = _get_or_404(db, creator_id)
    # only vat_id and company_name can be cleared
    updates = {
        key: value
        for key, value in req.model_dump(exclude_unset=True).items()
        if value is not None or key in ("vat_id", "company_name")
    }
    if "business_type" in updates:
        updates["business_type"] = updates["business_type"].value

    ensure_vat_id(
        updates.get("business_type") or creator.business_type,
        updates["vat_id"] if "vat_id" in updates else creator.vat_id,
    )

    for key, value in updates.items():
        setattr(creator, key, value)
    db.commit()
    db.refresh(creator)
    logger.info("Updated creator %s: %s", creator.id, sorted(updates))
    return transform_creator(creator)
