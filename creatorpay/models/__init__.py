from creatorpay.models.creator import CreatorModel
from creatorpay.models.invoice import InvoiceModel
from creatorpay.models.payment_request import PaymentRequestModel, PaymentStatus, TERMINAL_STATUSES

__all__ = [
    "CreatorModel",
    "InvoiceModel",
    "PaymentRequestModel",
    "PaymentStatus",
    "TERMINAL_STATUSES",
]
