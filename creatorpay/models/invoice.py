"""
Invoice model
"""
from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from creatorpay.database import Base
from creatorpay.models.creator import _utcnow


class InvoiceModel(Base):
    """Invoice attached to a payment request"""
    __tablename__ = "invoices"

    id = Column(String, primary_key=True)
    payment_request_id = Column(
        String, ForeignKey("payment_requests.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type = Column(String, nullable=False)  # uploaded, generated
    filename = Column(String)
    file_url = Column(String)  # storage reference
    validation_status = Column(String, nullable=False, default="pending")  # pending, valid, invalid
    validation_notes = Column(Text)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    payment_request = relationship("PaymentRequestModel", back_populates="invoices")
