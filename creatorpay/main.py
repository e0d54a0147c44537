"""
creatorpay — FastAPI application entry-point.
"""
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from creatorpay import __version__
from creatorpay.config import settings
from creatorpay.database import Base, engine
from creatorpay.errors import InvalidState, NotFound, ValidationError
from creatorpay.gateway import GatewayError, get_gateway

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s  %(name)-30s  %(levelname)-5s  %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: ensure data dirs + tables exist
    os.makedirs(settings.DATA_DIR, exist_ok=True)
    os.makedirs(settings.INVOICE_DIR, exist_ok=True)
    # Import models so Base.metadata knows about them
    import creatorpay.models  # noqa: F401
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready (%s)", settings.DATABASE_URL)
    try:
        logger.info("Payout gateway: %s", type(get_gateway()).__name__)
    except GatewayError:
        logger.error("No payout gateway installed; payouts will fail with 502")
    yield
    logger.info("Shutting down")


app = FastAPI(
    title="creatorpay",
    description="Creator onboarding, VAT-aware payment requests and payouts",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Domain errors → HTTP ─────────────────────────────────────────────────
@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound):
    logger.warning("%s", exc)
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(InvalidState)
async def invalid_state_handler(request: Request, exc: InvalidState):
    return JSONResponse(
        status_code=409,
        content={"detail": str(exc), "current_status": exc.current_status},
    )


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=422, content={"detail": str(exc), "field": exc.field})


@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError):
    logger.error("Payment processor error: %s", exc)
    return JSONResponse(status_code=502, content={"detail": f"Payment processor error: {exc}"})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error: %s", exc)
    detail = str(exc) if settings.DEBUG else "An internal error occurred"
    return JSONResponse(status_code=500, content={"detail": detail})


@app.get("/")
async def root():
    return {"service": "creatorpay", "version": __version__, "status": "running"}


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


# ── Register API routers ─────────────────────────────────────────────────
from creatorpay.routers.creators import router as creators_router  # noqa: E402
from creatorpay.routers.payment_requests import router as payment_requests_router  # noqa: E402
from creatorpay.routers.claims import router as claims_router  # noqa: E402
from creatorpay.routers.invoices import router as invoices_router  # noqa: E402
from creatorpay.routers.vat import router as vat_router  # noqa: E402

app.include_router(creators_router, prefix="/api", tags=["Creators"])
app.include_router(payment_requests_router, prefix="/api", tags=["Payment Requests"])
app.include_router(claims_router, prefix="/api", tags=["Claims"])
app.include_router(invoices_router, prefix="/api", tags=["Invoices"])
app.include_router(vat_router, prefix="/api", tags=["VAT"])
