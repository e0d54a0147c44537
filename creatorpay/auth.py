"""
Admin guard for privileged routes.
"""
import hmac
import logging
from typing import Optional

from fastapi import Header, HTTPException

from creatorpay.config import settings

logger = logging.getLogger(__name__)


def require_admin(x_admin_key: Optional[str] = Header(default=None)) -> None:
    """Reject the request unless ``X-Admin-Key`` matches ``ADMIN_API_KEY``.

    An empty ``ADMIN_API_KEY`` turns the check off (local development).
    """
    expected = settings.ADMIN_API_KEY
    if not expected:
        return
    if x_admin_key is None or not hmac.compare_digest(x_admin_key, expected):
        logger.warning("Rejected admin request: missing or wrong X-Admin-Key")
        raise HTTPException(status_code=401, detail="Admin credentials required")
