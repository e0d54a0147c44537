"""
Integration tests for the creatorpay HTTP endpoints.
"""
from decimal import Decimal

import pytest

from creatorpay import storage
from creatorpay.config import settings
from creatorpay.gateway import FakeGateway, GatewayError, get_gateway, reset_gateway, set_gateway
from creatorpay.main import app
from creatorpay.validation import LocalFileValidator, ValidationVerdict, get_validator

DUTCH_CREATOR = {
    "email": "anna@example.nl",
    "full_name": "Anna de Vries",
    "country": "nl",
    "business_type": "vat_registered",
    "vat_id": "NL123456789B01",
    "company_name": "Anna Studio",
}


def _create_creator(client, **overrides):
    payload = {**DUTCH_CREATOR, **overrides}
    resp = client.post("/api/creators", json=payload)
    assert resp.status_code == 200, resp.text
    return resp.json()


def _create_request(client, creator_id, amount="100.00", **extra):
    resp = client.post(
        "/api/payment-requests",
        json={"creator_id": creator_id, "amount": amount, **extra},
    )
    assert resp.status_code == 200, resp.text
    return resp.json()


class TestService:
    def test_root(self, client):
        assert client.get("/").json()["service"] == "creatorpay"

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}


class TestCreators:
    def test_create(self, client, gateway):
        body = _create_creator(client)
        assert body["country"] == "NL"
        assert body["business_type"] == "vat_registered"
        assert body["payout_account_id"].startswith("fake_acct_")
        assert body["payouts_enabled"] is True
        assert gateway.calls[0]["method"] == "create_account"

    def test_duplicate_email(self, client):
        _create_creator(client)
        resp = client.post("/api/creators", json=DUTCH_CREATOR)
        assert resp.status_code == 400

    def test_duplicate_email_lost_race(self, client, monkeypatch):
        _create_creator(client)
        # both signups passed the lookup before either committed
        monkeypatch.setattr(storage, "get_creator_by_email", lambda db, email: None)
        resp = client.post("/api/creators", json=DUTCH_CREATOR)
        assert resp.status_code == 400
        assert len(client.get("/api/creators").json()) == 1

    def test_vat_registered_requires_vat_id(self, client):
        resp = client.post("/api/creators", json={**DUTCH_CREATOR, "vat_id": None})
        assert resp.status_code == 422

    def test_invalid_country(self, client):
        resp = client.post("/api/creators", json={**DUTCH_CREATOR, "country": "Netherlands"})
        assert resp.status_code == 422

    def test_unknown_business_type(self, client):
        resp = client.post("/api/creators", json={**DUTCH_CREATOR, "business_type": "company"})
        assert resp.status_code == 422

    def test_quick_create(self, client):
        resp = client.post(
            "/api/creators/quick-create",
            json={"email": "quick@example.com", "full_name": "Quick"},
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["creator"]["country"] == "NL"
        assert body["creator"]["business_type"] == "individual"
        assert body["onboarding_url"].endswith(body["creator"]["id"])

    def test_list_and_get(self, client):
        created = _create_creator(client)
        assert len(client.get("/api/creators").json()) == 1
        resp = client.get(f"/api/creators/{created['id']}")
        assert resp.status_code == 200
        assert resp.json()["email"] == DUTCH_CREATOR["email"]

    def test_get_refreshes_readiness(self, client, gateway):
        created = _create_creator(client)
        gateway.set_account_status(created["payout_account_id"], True, False)
        body = client.get(f"/api/creators/{created['id']}").json()
        assert body["charges_enabled"] is True
        assert body["payouts_enabled"] is False

    def test_get_falls_back_when_processor_down(self, client, gateway):
        created = _create_creator(client)
        gateway.configure(unavailable=True)
        resp = client.get(f"/api/creators/{created['id']}")
        assert resp.status_code == 200
        assert resp.json()["payouts_enabled"] is True

    def test_get_not_found(self, client):
        assert client.get("/api/creators/nonexistent").status_code == 404

    def test_patch(self, client):
        created = _create_creator(client)
        resp = client.patch(
            f"/api/creators/{created['id']}",
            json={"country": "de", "company_name": "Anna GmbH"},
        )
        assert resp.status_code == 200
        assert resp.json()["country"] == "DE"
        assert resp.json()["company_name"] == "Anna GmbH"

    def test_patch_to_vat_registered_without_vat_id(self, client):
        created = _create_creator(client, business_type="individual", vat_id=None)
        resp = client.patch(f"/api/creators/{created['id']}", json={"business_type": "vat_registered"})
        assert resp.status_code == 422
        assert resp.json()["field"] == "vat_id"

    def test_patch_clearing_vat_id_of_registered_creator(self, client):
        created = _create_creator(client)
        resp = client.patch(f"/api/creators/{created['id']}", json={"vat_id": None})
        assert resp.status_code == 422

    def test_processor_down_on_create(self, client, gateway):
        gateway.configure(unavailable=True)
        resp = client.post("/api/creators", json=DUTCH_CREATOR)
        assert resp.status_code == 502


class TestPaymentRequests:
    def test_create_dutch_vat(self, client):
        creator = _create_creator(client)
        body = _create_request(client, creator["id"], amount="100")
        assert Decimal(body["vat_rate"]) == Decimal("0.21")
        assert Decimal(body["vat_amount"]) == Decimal("21")
        assert Decimal(body["total_amount"]) == Decimal("121")
        assert body["status"] == "pending"
        assert body["display"]["total_amount"] == "€121.00"
        assert body["display"]["vat_rate"] == "21%"
        assert body["claim_url"].endswith(body["claim_token"])
        assert body["creator"]["id"] == creator["id"]

    def test_create_reverse_charge(self, client):
        creator = _create_creator(client, country="DE")
        body = _create_request(client, creator["id"], amount="1000")
        assert Decimal(body["total_amount"]) == Decimal("1000")
        assert body["reverse_charged"] is True

    def test_create_unknown_creator(self, client):
        resp = client.post("/api/payment-requests", json={"creator_id": "missing", "amount": "10"})
        assert resp.status_code == 404

    def test_largest_amount_fits(self, client):
        creator = _create_creator(client)
        body = _create_request(client, creator["id"], amount="99999999.99")
        assert Decimal(body["total_amount"]) == Decimal("120999999.9879")

        resp = client.post("/api/payment-requests", json={"creator_id": creator["id"], "amount": "100000000.00"})
        assert resp.status_code == 422

    def test_create_negative_amount(self, client):
        creator = _create_creator(client)
        resp = client.post("/api/payment-requests", json={"creator_id": creator["id"], "amount": "-5"})
        assert resp.status_code == 422

    def test_frozen_after_creator_edit(self, client):
        creator = _create_creator(client)
        body = _create_request(client, creator["id"])
        client.patch(f"/api/creators/{creator['id']}", json={"country": "US"})
        again = client.get(f"/api/payment-requests/{body['id']}").json()
        assert Decimal(again["total_amount"]) == Decimal("121")

    def test_list_with_status_filter(self, client):
        creator = _create_creator(client)
        first = _create_request(client, creator["id"])
        _create_request(client, creator["id"])
        client.post(f"/api/claim/{first['claim_token']}")

        assert len(client.get("/api/payment-requests").json()) == 2
        claimed = client.get("/api/payment-requests", params={"status": "claimed"}).json()
        assert [r["id"] for r in claimed] == [first["id"]]

    def test_list_rejects_unknown_status(self, client):
        assert client.get("/api/payment-requests", params={"status": "lost"}).status_code == 422

    def test_get_not_found(self, client):
        assert client.get("/api/payment-requests/nonexistent").status_code == 404

    def test_mark_paid_then_rejected(self, client):
        creator = _create_creator(client)
        body = _create_request(client, creator["id"])
        resp = client.post(f"/api/payment-requests/{body['id']}/mark-paid", json={"transfer_id": "ext_1"})
        assert resp.status_code == 200
        assert resp.json()["status"] == "paid"
        assert resp.json()["paid_at"] is not None

        again = client.post(f"/api/payment-requests/{body['id']}/mark-paid")
        assert again.status_code == 409
        assert again.json()["current_status"] == "paid"

    def test_mark_failed(self, client):
        creator = _create_creator(client)
        body = _create_request(client, creator["id"])
        resp = client.post(f"/api/payment-requests/{body['id']}/mark-failed", json={"reason": "cancelled"})
        assert resp.status_code == 200
        assert resp.json()["status"] == "failed"
        assert resp.json()["failure_reason"] == "cancelled"

        assert client.post(f"/api/payment-requests/{body['id']}/mark-paid").status_code == 409

    def test_mark_paid_unknown(self, client):
        assert client.post("/api/payment-requests/missing/mark-paid").status_code == 404


class TestClaims:
    def test_claim_flow(self, client):
        creator = _create_creator(client)
        token = _create_request(client, creator["id"])["claim_token"]

        view = client.get(f"/api/claim/{token}")
        assert view.status_code == 200
        assert view.json()["creator"]["id"] == creator["id"]

        resp = client.post(f"/api/claim/{token}")
        assert resp.status_code == 200
        assert resp.json()["payment_request"]["status"] == "claimed"

        again = client.post(f"/api/claim/{token}")
        assert again.status_code == 409
        assert again.json()["current_status"] == "claimed"

    def test_unknown_token(self, client):
        assert client.get("/api/claim/bogus").status_code == 404
        assert client.post("/api/claim/bogus").status_code == 404


class TestProcess:
    def test_success(self, client, gateway):
        creator = _create_creator(client)
        body = _create_request(client, creator["id"], amount="10.05")

        resp = client.post(f"/api/payment-requests/{body['id']}/process")
        assert resp.status_code == 200
        result = resp.json()
        assert result["payment_request"]["status"] == "paid"
        assert result["transfer_id"].startswith("fake_tr_")

        transfer = [c for c in gateway.calls if c["method"] == "create_transfer"][0]
        assert transfer["amount_minor"] == 1216
        assert transfer["currency"] == "eur"
        assert transfer["destination"] == creator["payout_account_id"]

    def test_transfer_failure_marks_failed(self, client, gateway):
        creator = _create_creator(client)
        body = _create_request(client, creator["id"])
        gateway.configure(should_succeed=False, failure_reason="Insufficient funds")

        resp = client.post(f"/api/payment-requests/{body['id']}/process")
        assert resp.status_code == 502
        after = client.get(f"/api/payment-requests/{body['id']}").json()
        assert after["status"] == "failed"
        assert after["failure_reason"] == "Insufficient funds"

    def test_account_not_ready(self, client, gateway):
        creator = _create_creator(client)
        body = _create_request(client, creator["id"])
        gateway.set_account_status(creator["payout_account_id"], True, False)

        resp = client.post(f"/api/payment-requests/{body['id']}/process")
        assert resp.status_code == 400
        assert client.get(f"/api/payment-requests/{body['id']}").json()["status"] == "pending"

    def test_gateway_down_leaves_request_untouched(self, client, gateway):
        creator = _create_creator(client)
        body = _create_request(client, creator["id"])
        gateway.configure(unavailable=True)

        resp = client.post(f"/api/payment-requests/{body['id']}/process")
        assert resp.status_code == 502
        assert client.get(f"/api/payment-requests/{body['id']}").json()["status"] == "pending"

    def test_overlapping_process_calls_transfer_once(self, client, gateway):
        creator = _create_creator(client)
        body = _create_request(client, creator["id"])
        url = f"/api/payment-requests/{body['id']}/process"

        transfer = gateway.create_transfer
        overlapping = {}

        def transfer_then_overlap(**kwargs):
            result = transfer(**kwargs)
            if "resp" not in overlapping:
                overlapping["resp"] = None
                overlapping["resp"] = client.post(url)
            return result

        gateway.create_transfer = transfer_then_overlap
        first = client.post(url)
        second = overlapping["resp"]

        assert first.status_code == 200
        assert second.status_code == 200
        assert first.json()["transfer_id"] == second.json()["transfer_id"]
        assert len(gateway.transfers) == 1
        keys = {c["idempotency_key"] for c in gateway.calls if c["method"] == "create_transfer"}
        assert keys == {f"payment-request-{body['id']}"}

        after = client.get(f"/api/payment-requests/{body['id']}").json()
        assert after["status"] == "paid"
        assert after["transfer_id"] == first.json()["transfer_id"]

    def test_already_paid(self, client, gateway):
        creator = _create_creator(client)
        body = _create_request(client, creator["id"])
        client.post(f"/api/payment-requests/{body['id']}/mark-paid")

        resp = client.post(f"/api/payment-requests/{body['id']}/process")
        assert resp.status_code == 409
        assert not [c for c in gateway.calls if c["method"] == "create_transfer"]


class TestInvoices:
    @pytest.fixture()
    def invoice_dir(self, tmp_path):
        root = tmp_path / "invoices"
        root.mkdir()
        app.dependency_overrides[get_validator] = lambda: LocalFileValidator(root=root)
        yield root
        app.dependency_overrides.pop(get_validator, None)

    def test_uploaded_pdf_is_valid(self, client, invoice_dir):
        (invoice_dir / "invoice.pdf").write_bytes(b"%PDF-1.4\n")
        creator = _create_creator(client)
        body = _create_request(client, creator["id"])

        resp = client.post(
            f"/api/payment-requests/{body['id']}/invoices",
            json={"type": "uploaded", "filename": "invoice.pdf", "file_url": "invoice.pdf"},
        )
        assert resp.status_code == 200
        assert resp.json()["validation_status"] == "valid"

        listed = client.get(f"/api/payment-requests/{body['id']}/invoices").json()
        assert len(listed) == 1

    def test_missing_file_is_invalid(self, client, invoice_dir):
        creator = _create_creator(client)
        body = _create_request(client, creator["id"])
        resp = client.post(
            f"/api/payment-requests/{body['id']}/invoices",
            json={"type": "uploaded", "file_url": str(invoice_dir / "gone.pdf")},
        )
        assert resp.json()["validation_status"] == "invalid"
        assert resp.json()["validation_notes"] == "File not found or corrupted"

    def test_absolute_path_outside_invoice_dir_is_invalid(self, client, invoice_dir):
        outside = invoice_dir.parent / "elsewhere.pdf"
        outside.write_bytes(b"%PDF-1.4\n")
        creator = _create_creator(client)
        body = _create_request(client, creator["id"])
        resp = client.post(
            f"/api/payment-requests/{body['id']}/invoices",
            json={"type": "uploaded", "file_url": str(outside)},
        )
        assert resp.json()["validation_status"] == "invalid"
        assert resp.json()["validation_notes"] == "File must be stored in the invoice directory"

    def test_relative_escape_is_invalid(self, invoice_dir):
        (invoice_dir.parent / "elsewhere.pdf").write_bytes(b"%PDF-1.4\n")
        verdict = LocalFileValidator(root=invoice_dir).validate("../elsewhere.pdf", Decimal("121"))
        assert verdict.status == "invalid"
        assert verdict.notes == "File must be stored in the invoice directory"

    def test_uploaded_requires_file_url(self, client):
        creator = _create_creator(client)
        body = _create_request(client, creator["id"])
        resp = client.post(f"/api/payment-requests/{body['id']}/invoices", json={"type": "uploaded"})
        assert resp.status_code == 422

    def test_validator_receives_total(self, client):
        seen = {}

        class RecordingValidator:
            def validate(self, file_url, expected_total):
                seen["total"] = expected_total
                return ValidationVerdict("valid", "ok")

        app.dependency_overrides[get_validator] = lambda: RecordingValidator()
        creator = _create_creator(client)
        body = _create_request(client, creator["id"])
        client.post(
            f"/api/payment-requests/{body['id']}/invoices",
            json={"type": "uploaded", "file_url": "s3://bucket/inv.pdf"},
        )
        assert seen["total"] == Decimal("121")

    def test_generated(self, client):
        creator = _create_creator(client)
        body = _create_request(client, creator["id"])
        resp = client.post(f"/api/payment-requests/{body['id']}/invoices", json={"type": "generated"})
        assert resp.json()["validation_status"] == "valid"

    def test_unknown_request(self, client):
        resp = client.post("/api/payment-requests/missing/invoices", json={"type": "generated"})
        assert resp.status_code == 404


class TestVatQuote:
    def test_quote(self, client):
        resp = client.get(
            "/api/vat/quote",
            params={"amount": "1000", "country": "nl", "business_type": "vat_registered"},
        )
        assert resp.status_code == 200
        body = resp.json()
        assert Decimal(body["rate"]) == Decimal("0.21")
        assert body["rate_percent"] == "21%"
        assert body["formatted_total"] == "€1,210.00"
        assert body["explanation"] == "Dutch VAT (21%) applied."

    def test_quote_bad_country(self, client):
        resp = client.get(
            "/api/vat/quote",
            params={"amount": "10", "country": "XYZ", "business_type": "individual"},
        )
        assert resp.status_code == 422

    def test_countries(self, client):
        body = client.get("/api/countries").json()
        assert {"code": "NL", "name": "Netherlands"} in body


class TestAdminGuard:
    @pytest.fixture()
    def admin_key(self, monkeypatch):
        monkeypatch.setattr(settings, "ADMIN_API_KEY", "s3cret")
        return "s3cret"

    def test_rejected_without_key(self, client, admin_key):
        creator = _create_creator(client)
        resp = client.post("/api/payment-requests", json={"creator_id": creator["id"], "amount": "10"})
        assert resp.status_code == 401

    def test_accepted_with_key(self, client, admin_key):
        creator = _create_creator(client)
        resp = client.post(
            "/api/payment-requests",
            json={"creator_id": creator["id"], "amount": "10"},
            headers={"X-Admin-Key": admin_key},
        )
        assert resp.status_code == 200

    def test_claim_stays_public(self, client, admin_key):
        creator = _create_creator(client)
        resp = client.post(
            "/api/payment-requests",
            json={"creator_id": creator["id"], "amount": "10"},
            headers={"X-Admin-Key": admin_key},
        )
        assert client.post(f"/api/claim/{resp.json()['claim_token']}").status_code == 200


class TestGatewayWiring:
    def test_fake_is_refused_outside_development(self, monkeypatch):
        monkeypatch.setattr(settings, "ENVIRONMENT", "production")
        reset_gateway()
        with pytest.raises(GatewayError):
            get_gateway()

    def test_installed_gateway_is_used_in_production(self, monkeypatch):
        monkeypatch.setattr(settings, "ENVIRONMENT", "production")
        installed = FakeGateway()
        set_gateway(installed)
        assert get_gateway() is installed

    def test_process_without_gateway_is_502(self, client, monkeypatch):
        creator = _create_creator(client)
        body = _create_request(client, creator["id"])
        monkeypatch.setattr(settings, "ENVIRONMENT", "production")
        reset_gateway()

        resp = client.post(f"/api/payment-requests/{body['id']}/process")
        assert resp.status_code == 502
        assert client.get(f"/api/payment-requests/{body['id']}").json()["status"] == "pending"
