"""
Typed failures raised by the lifecycle and storage helpers.

The HTTP layer maps them in ``creatorpay.main``:
NotFound -> 404, InvalidState -> 409, ValidationError -> 422.
"""
from __future__ import annotations


class CreatorPayError(Exception):
    """Base class for domain failures."""


class NotFound(CreatorPayError):
    def __init__(self, entity: str, key: str):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found: {key}")


class InvalidState(CreatorPayError):
    """A status transition that the current status does not allow."""

    def __init__(self, current_status: str, target_status: str):
        self.current_status = current_status
        self.target_status = target_status
        super().__init__(
            f"Cannot move payment request from {current_status} to {target_status}"
        )


class ValidationError(CreatorPayError):
    """Malformed input caught at the service boundary."""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)
