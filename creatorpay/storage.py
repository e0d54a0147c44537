"""
Query helpers over the SQLAlchemy session.

Status changes go through ``transition_status``: a single
``UPDATE ... WHERE <key> AND status IN (<allowed>)`` so two writers racing on
the same row cannot both win.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy.orm import Session

from creatorpay.errors import InvalidState, NotFound
from creatorpay.models import CreatorModel, InvoiceModel, PaymentRequestModel, PaymentStatus

logger = logging.getLogger(__name__)


# ── Creators ─────────────────────────────────────────────────────────────
def get_creator(db: Session, creator_id: str) -> Optional[CreatorModel]:
    return db.query(CreatorModel).filter(CreatorModel.id == creator_id).first()


def get_creator_by_email(db: Session, email: str) -> Optional[CreatorModel]:
    return db.query(CreatorModel).filter(CreatorModel.email == email).first()


def list_creators(db: Session, limit: int = 50, offset: int = 0) -> list[CreatorModel]:
    return (
        db.query(CreatorModel)
        .order_by(CreatorModel.created_at.desc())
        .limit(limit)
        .offset(offset)
        .all()
    )


# ── Payment requests ─────────────────────────────────────────────────────
def get_payment_request(db: Session, request_id: str) -> Optional[PaymentRequestModel]:
    return db.query(PaymentRequestModel).filter(PaymentRequestModel.id == request_id).first()


def lock_payment_request(db: Session, request_id: str) -> Optional[PaymentRequestModel]:
    """Load the row with ``SELECT ... FOR UPDATE``; the lock lasts until commit or rollback."""
    return (
        db.query(PaymentRequestModel)
        .filter(PaymentRequestModel.id == request_id)
        .with_for_update()
        .populate_existing()
        .first()
    )


def get_payment_request_by_token(db: Session, token: str) -> Optional[PaymentRequestModel]:
    return db.query(PaymentRequestModel).filter(PaymentRequestModel.claim_token == token).first()


def list_payment_requests(
    db: Session,
    status: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
) -> list[PaymentRequestModel]:
    query = db.query(PaymentRequestModel)
    if status:
        query = query.filter(PaymentRequestModel.status == status)
    return (
        query.order_by(PaymentRequestModel.created_at.desc())
        .limit(limit)
        .offset(offset)
        .all()
    )


def transition_status(
    db: Session,
    criterion: Any,
    target: PaymentStatus,
    allowed_from: Iterable[PaymentStatus],
    entity_key: str,
    **values: Any,
) -> PaymentRequestModel:
    """Compare-and-set the status of the payment request matching ``criterion``.

    Raises ``NotFound`` when no row matches ``criterion`` and ``InvalidState``
    when one does but its status is not in ``allowed_from``. Commits on success.
    """
    allowed = [status.value for status in allowed_from]
    changes = {
        "status": target.value,
        "updated_at": datetime.now(timezone.utc),
        **values,
    }
    updated = (
        db.query(PaymentRequestModel)
        .filter(criterion, PaymentRequestModel.status.in_(allowed))
        .update(changes, synchronize_session=False)
    )

    if updated == 0:
        current = db.query(PaymentRequestModel).filter(criterion).first()
        if current is None:
            raise NotFound("Payment request", entity_key)
        # the in-memory copy may be stale after a concurrent writer
        db.refresh(current)
        logger.warning(
            "Rejected transition %s -> %s for payment request %s",
            current.status, target.value, current.id,
        )
        raise InvalidState(current.status, target.value)

    db.commit()
    record = db.query(PaymentRequestModel).filter(criterion).one()
    logger.info("Payment request %s -> %s", record.id, record.status)
    return record


# ── Invoices ─────────────────────────────────────────────────────────────
def list_invoices(db: Session, payment_request_id: str) -> list[InvoiceModel]:
    return (
        db.query(InvoiceModel)
        .filter(InvoiceModel.payment_request_id == payment_request_id)
        .order_by(InvoiceModel.created_at.desc())
        .all()
    )
