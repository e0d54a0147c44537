"""Configurable fake payout gateway for development and testing.

Simulates a payment processor without external calls. Accounts open ready
by default; transfers succeed or fail according to ``configure``.
"""

from uuid import uuid4

from creatorpay.gateway.port import AccountResult, AccountStatus, GatewayError, PayoutGateway, TransferResult


class FakeGateway(PayoutGateway):
    """Configurable fake payout gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Transfer declined"
        self.accounts_ready: bool = True
        self.unavailable: bool = False
        self.accounts: dict[str, AccountStatus] = {}
        self.transfers: dict[str, TransferResult] = {}
        self.calls: list[dict] = []

    def configure(
        self,
        should_succeed: bool = True,
        failure_reason: str = "Transfer declined",
        accounts_ready: bool = True,
        unavailable: bool = False,
    ) -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.accounts_ready = accounts_ready
        self.unavailable = unavailable

    def _check_available(self) -> None:
        if self.unavailable:
            raise GatewayError("Payment processor unavailable")

    def create_account(
        self,
        email: str,
        country: str,
        business_type: str,
        company_name: str | None,
    ) -> AccountResult:
        self.calls.append({
            "method": "create_account",
            "email": email,
            "country": country,
            "business_type": business_type,
            "company_name": company_name,
        })
        self._check_available()
        account_id = f"fake_acct_{uuid4().hex[:12]}"
        self.accounts[account_id] = AccountStatus(
            charges_enabled=self.accounts_ready,
            payouts_enabled=self.accounts_ready,
        )
        return AccountResult(account_id=account_id)

    def get_account_status(self, account_id: str) -> AccountStatus:
        self.calls.append({"method": "get_account_status", "account_id": account_id})
        self._check_available()
        if account_id not in self.accounts:
            raise GatewayError(f"Unknown account: {account_id}")
        return self.accounts[account_id]

    def set_account_status(self, account_id: str, charges_enabled: bool, payouts_enabled: bool) -> None:
        self.accounts[account_id] = AccountStatus(
            charges_enabled=charges_enabled,
            payouts_enabled=payouts_enabled,
        )

    def create_transfer(
        self,
        amount_minor: int,
        currency: str,
        destination: str,
        description: str,
        idempotency_key: str,
    ) -> TransferResult:
        self.calls.append({
            "method": "create_transfer",
            "amount_minor": amount_minor,
            "currency": currency,
            "destination": destination,
            "description": description,
            "idempotency_key": idempotency_key,
        })
        self._check_available()

        # Replays return the stored result, like a processor's idempotency cache
        if idempotency_key in self.transfers:
            return self.transfers[idempotency_key]

        if self.should_succeed:
            result = TransferResult(
                success=True,
                transfer_id=f"fake_tr_{uuid4().hex[:12]}",
            )
        else:
            result = TransferResult(
                success=False,
                failure_reason=self.failure_reason,
            )
        self.transfers[idempotency_key] = result
        return result
