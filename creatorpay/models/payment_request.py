"""
Payment request model
"""
import enum

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import relationship

from creatorpay.database import Base
from creatorpay.models.creator import _utcnow


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    CLAIMED = "claimed"
    PAID = "paid"
    FAILED = "failed"


TERMINAL_STATUSES = frozenset({PaymentStatus.PAID, PaymentStatus.FAILED})


class PaymentRequestModel(Base):
    """A payout owed to one creator"""
    __tablename__ = "payment_requests"

    id = Column(String, primary_key=True)
    creator_id = Column(String, ForeignKey("creators.id", ondelete="CASCADE"), nullable=False, index=True)

    # Frozen at creation from the creator's tax profile; never recomputed
    amount = Column(Numeric(14, 4), nullable=False)
    vat_rate = Column(Numeric(6, 4), nullable=False)
    vat_amount = Column(Numeric(14, 4), nullable=False)
    total_amount = Column(Numeric(14, 4), nullable=False)
    reverse_charged = Column(Boolean, nullable=False, default=False)
    vat_note = Column(String)

    description = Column(Text)
    status = Column(String, nullable=False, default=PaymentStatus.PENDING.value, index=True)
    claim_token = Column(String, nullable=False, unique=True, index=True)
    due_date = Column(DateTime(timezone=True))
    paid_at = Column(DateTime(timezone=True))
    failure_reason = Column(Text)
    transfer_id = Column(String)

    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    creator = relationship("CreatorModel", back_populates="payment_requests")
    invoices = relationship(
        "InvoiceModel",
        back_populates="payment_request",
        cascade="all, delete-orphan",
    )
