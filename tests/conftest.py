"""
Shared fixtures.

Environment is set before any application module is imported so that
``config.settings.config`` picks up test secrets and a throwaway SQLite
database.
"""

import os
import tempfile

_DB_DIR = tempfile.mkdtemp(prefix="merchant-gateway-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_DIR}/test.db"
os.environ["MERCHANT_STATUS_WEBHOOK_SECRET"] = "whsec_test"
os.environ["PAYMENT_INTENT_WEBHOOK_SECRET"] = "whsec_payments"
os.environ["TILLED_SECRET_KEY"] = "sk_test_platform"
os.environ["SHIPPING_CLIENT_ID"] = "ship_client"
os.environ["SHIPPING_CLIENT_SECRET"] = "ship_secret"

import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from connectors.payments import PaymentsClient  # noqa: E402
from connectors.shipping import ShippingClient  # noqa: E402
from connectors.token_cache import OAuthTokenCache  # noqa: E402
from tests.helpers import ProviderStub, unique  # noqa: E402

PAYMENTS_URL = "https://payments.test"
SHIPPING_URL = "https://shipping.test"
TOKEN_URL = "https://shipping.test/oauth/token"


@pytest.fixture
def provider() -> ProviderStub:
    stub = ProviderStub()
    stub.respond("/oauth/token", 200, {"access_token": "ship_token", "expires_in": 3600})
    return stub


@pytest.fixture
def client(provider):
    from main import create_app

    app = create_app()
    transport = httpx.MockTransport(provider)
    app.state.payments_client = PaymentsClient(PAYMENTS_URL, "sk_test_platform", transport=transport)
    app.state.shipping_client = ShippingClient(
        SHIPPING_URL,
        OAuthTokenCache(TOKEN_URL, "ship_client", "ship_secret", transport=transport),
        register_path="/registration/v2/customerkeys",
        transport=transport,
    )
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def merchant(client):
    """A stored merchant profile linked to a provider account."""
    payload = {
        "tenantId": unique("tenant"),
        "name": "Acme Stores",
        "email": "Owner@Acme.test",
        "accountId": unique("acct"),
    }
    resp = client.post("/api/v1/merchants", json=payload)
    assert resp.status_code == 201
    return resp.json()["data"]
