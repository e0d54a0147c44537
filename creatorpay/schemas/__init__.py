from creatorpay.schemas.creator import (
    CreatorCreate,
    CreatorQuickCreate,
    CreatorResponse,
    CreatorSummary,
    CreatorUpdate,
    QuickCreateResponse,
)
from creatorpay.schemas.invoice import InvoiceCreate, InvoiceResponse
from creatorpay.schemas.payment_request import (
    ClaimResult,
    ClaimView,
    MarkFailedRequest,
    MarkPaidRequest,
    MoneyDisplay,
    PaymentProcessResponse,
    PaymentRequestCreate,
    PaymentRequestResponse,
)
from creatorpay.schemas.vat import CountryResponse, VATQuoteResponse
