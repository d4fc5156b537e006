"""
Tests for the payments and shipping proxy routes.
"""

import json

from connectors.payments import PaymentsClient
from connectors.shipping import ShippingClient
from connectors.token_cache import OAuthTokenCache
from tests.helpers import unique


class TestPaymentIntents:
    def test_proxies_to_merchant_account(self, client, merchant, provider):
        provider.respond(
            "/v1/payment-intents",
            200,
            {"id": "pi_1", "amount": 2500, "currency": "usd", "status": "requires_payment_method"},
        )
        resp = client.post(
            "/api/v1/payments/payment-intents",
            json={"tenantId": merchant["tenantId"], "amount": 2500, "metadata": {"order": "42"}},
        )

        assert resp.status_code == 201
        assert resp.json()["data"]["id"] == "pi_1"

        sent = provider.calls("/v1/payment-intents")[0]
        assert sent.headers["tilled-api-key"] == "sk_test_platform"
        assert sent.headers["tilled-account"] == merchant["accountId"]
        assert json.loads(sent.content) == {
            "amount": 2500,
            "currency": "usd",
            "payment_method_types": ["card"],
            "metadata": {"order": "42"},
        }

    def test_unknown_merchant(self, client, provider):
        resp = client.post(
            "/api/v1/payments/payment-intents",
            json={"tenantId": unique("missing"), "amount": 100},
        )
        assert resp.status_code == 404
        assert provider.requests == []

    def test_merchant_without_account(self, client, provider):
        tenant = unique("tenant")
        client.post("/api/v1/merchants", json={"tenantId": tenant, "name": "N", "email": "n@x.test"})

        resp = client.post("/api/v1/payments/payment-intents", json={"tenantId": tenant, "amount": 100})
        assert resp.status_code == 409
        assert provider.requests == []

    def test_invalid_amount(self, client, merchant):
        resp = client.post(
            "/api/v1/payments/payment-intents",
            json={"tenantId": merchant["tenantId"], "amount": 0},
        )
        assert resp.status_code == 400

    def test_provider_client_error_passed_through(self, client, merchant, provider):
        provider.respond("/v1/payment-intents", 400, {"message": "currency not supported"})
        resp = client.post(
            "/api/v1/payments/payment-intents",
            json={"tenantId": merchant["tenantId"], "amount": 100, "currency": "xyz"},
        )
        assert resp.status_code == 400
        assert resp.json()["message"] == {"message": "currency not supported"}

    def test_provider_server_error_is_bad_gateway(self, client, merchant, provider):
        provider.respond("/v1/payment-intents", 500, {"message": "oops"})
        resp = client.post(
            "/api/v1/payments/payment-intents",
            json={"tenantId": merchant["tenantId"], "amount": 100},
        )
        assert resp.status_code == 502


class TestCheckoutSessions:
    def test_creates_checkout_session(self, client, merchant, provider):
        provider.respond("/v1/checkout-sessions", 200, {"id": "cs_1", "status": "open", "url": "https://pay.test/cs_1"})
        resp = client.post(
            "/api/v1/payments/checkout-sessions",
            json={
                "tenantId": merchant["tenantId"],
                "line_items": [{"price_data": {"unit_amount": 500, "currency": "usd"}, "quantity": 1}],
                "success_url": "https://shop.test/ok",
            },
        )
        assert resp.status_code == 201
        assert resp.json()["data"]["url"] == "https://pay.test/cs_1"
        sent = json.loads(provider.calls("/v1/checkout-sessions")[0].content)
        assert "tenantId" not in sent and "tenant_id" not in sent
        assert sent["success_url"] == "https://shop.test/ok"

    def test_line_items_required(self, client, merchant):
        resp = client.post(
            "/api/v1/payments/checkout-sessions",
            json={"tenantId": merchant["tenantId"], "line_items": []},
        )
        assert resp.status_code == 400


class TestShipperAccounts:
    PATH = "/registration/v2/customerkeys"

    def test_registers_with_bearer_token(self, client, provider):
        provider.respond(self.PATH, 200, {"transactionId": "tx_1", "output": {"child_Key": "ck", "child_secret": "cs"}})
        tenant = unique("tenant")

        resp = client.post(
            "/api/v1/shipping/shipper-accounts",
            json={"tenantId": tenant, "accountNumber": "123456789", "customerName": "Acme"},
        )

        assert resp.status_code == 201
        data = resp.json()["data"]
        assert data["tenantId"] == tenant
        assert data["providerReference"] == "tx_1"
        assert data["payload"] == {"transactionId": "tx_1", "output": {}}

        sent = provider.calls(self.PATH)[0]
        assert sent.headers["Authorization"] == "Bearer ship_token"
        assert json.loads(sent.content) == {"accountNumber": "123456789", "customerName": "Acme"}

    def test_token_reused_across_registrations(self, client, provider):
        provider.respond(self.PATH, 200, {"transactionId": "tx"})
        for _ in range(3):
            client.post(
                "/api/v1/shipping/shipper-accounts",
                json={"tenantId": unique("tenant"), "accountNumber": "1"},
            )
        assert len(provider.calls("/oauth/token")) == 1
        assert len(provider.calls(self.PATH)) == 3

    def test_token_failure_is_bad_gateway(self, client, provider):
        provider.respond("/oauth/token", 500, {"error": "down"})
        resp = client.post(
            "/api/v1/shipping/shipper-accounts",
            json={"tenantId": unique("tenant"), "accountNumber": "1"},
        )
        assert resp.status_code == 502
        assert resp.json()["message"] == "Shipping provider authentication failed"
        assert provider.calls(self.PATH) == []


class TestUnconfiguredProviders:
    def test_payments_without_secret_key(self, client, merchant, provider):
        client.app.state.payments_client = PaymentsClient("https://payments.test", "")
        resp = client.post(
            "/api/v1/payments/payment-intents",
            json={"tenantId": merchant["tenantId"], "amount": 100},
        )
        assert resp.status_code == 503
        assert resp.json() == {"success": False, "message": "Payments provider not configured"}
        assert provider.requests == []

    def test_shipping_without_client_credentials(self, client, provider):
        client.app.state.shipping_client = ShippingClient(
            "https://shipping.test",
            OAuthTokenCache("https://shipping.test/oauth/token", "", ""),
        )
        resp = client.post(
            "/api/v1/shipping/shipper-accounts",
            json={"tenantId": unique("tenant"), "accountNumber": "1"},
        )
        assert resp.status_code == 503
        assert resp.json() == {"success": False, "message": "Shipping provider not configured"}
        assert provider.requests == []
