"""
Creator (payee) model
"""
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, String
from sqlalchemy.orm import relationship

from creatorpay.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CreatorModel(Base):
    """A payee profile"""
    __tablename__ = "creators"

    id = Column(String, primary_key=True)
    email = Column(String, nullable=False, unique=True, index=True)
    full_name = Column(String, nullable=False)

    # Tax profile; copied onto each payment request at creation
    country = Column(String(2), nullable=False)
    business_type = Column(String, nullable=False, default="individual")  # individual, vat_registered, vat_exempt
    vat_id = Column(String)
    company_name = Column(String)
    invoice_method = Column(String, nullable=False, default="auto")  # auto, manual

    # Payment processor account
    payout_account_id = Column(String, unique=True)
    charges_enabled = Column(Boolean, nullable=False, default=False)
    payouts_enabled = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    payment_requests = relationship(
        "PaymentRequestModel",
        back_populates="creator",
        cascade="all, delete-orphan",
    )
