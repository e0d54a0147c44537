"""Payout gateway factory.

``get_gateway()`` returns the active adapter. Outside development and test
environments an adapter must be installed with ``set_gateway()``; the
``FakeGateway`` is only used as an implicit default where no money can move.
Routes take it through ``Depends``.
"""
import logging

from creatorpay.config import settings
from creatorpay.gateway.fake_adapter import FakeGateway
from creatorpay.gateway.port import (
    AccountResult,
    AccountStatus,
    GatewayError,
    PayoutGateway,
    TransferResult,
)

logger = logging.getLogger(__name__)

FAKE_GATEWAY_ENVIRONMENTS = frozenset({"development", "test"})

_current_gateway: PayoutGateway | None = None


def get_gateway() -> PayoutGateway:
    """Return the current payout gateway.

    Raises ``GatewayError`` when none is installed and the environment does
    not allow falling back to ``FakeGateway``.
    """
    global _current_gateway
    if _current_gateway is None:
        if settings.ENVIRONMENT not in FAKE_GATEWAY_ENVIRONMENTS:
            logger.error("No payout gateway installed for environment %r", settings.ENVIRONMENT)
            raise GatewayError("No payout gateway configured")
        logger.warning("Using FakeGateway: payouts are simulated")
        _current_gateway = FakeGateway()
    return _current_gateway


def set_gateway(gateway: PayoutGateway) -> None:
    """Install a payout gateway (tests, production wiring)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    global _current_gateway
    _current_gateway = None


__all__ = [
    "AccountResult",
    "AccountStatus",
    "FakeGateway",
    "GatewayError",
    "PayoutGateway",
    "TransferResult",
    "get_gateway",
    "reset_gateway",
    "set_gateway",
]
