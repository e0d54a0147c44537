"""Payout gateway port (abstract interface).

The contract every payment processor adapter implements. The lifecycle
never calls it; the payout route does, then reports the outcome through
``mark_paid`` / ``mark_failed``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


class GatewayError(Exception):
    """The processor could not be reached or rejected the call outright."""


@dataclass(frozen=True)
class AccountResult:
    account_id: str


@dataclass(frozen=True)
class AccountStatus:
    charges_enabled: bool
    payouts_enabled: bool

    @property
    def ready(self) -> bool:
        return self.charges_enabled and self.payouts_enabled


@dataclass(frozen=True)
class TransferResult:
    """Result of a transfer attempt."""

    success: bool
    transfer_id: str | None = None
    failure_reason: str | None = None


class PayoutGateway(ABC):
    """Abstract payment processor interface."""

    @abstractmethod
    def create_account(
        self,
        email: str,
        country: str,
        business_type: str,
        company_name: str | None,
    ) -> AccountResult:
        """Open a payee account for a creator."""
        ...

    @abstractmethod
    def get_account_status(self, account_id: str) -> AccountStatus:
        """Report whether the payee account can receive money."""
        ...

    @abstractmethod
    def create_transfer(
        self,
        amount_minor: int,
        currency: str,
        destination: str,
        description: str,
        idempotency_key: str,
    ) -> TransferResult:
        """Move ``amount_minor`` (cents) to the payee account.

        A repeated ``idempotency_key`` must return the first attempt's result
        without moving money again.
        """
        ...
