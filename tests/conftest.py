"""Pytest configuration and fixtures for the webhook gate test suite.

Provides:
- Test settings with a known webhook secret
- Application and lightweight async clients (httpx + ASGITransport)
- Disabled rate limiting
- Shopify signature/header factories
"""

import base64
import hashlib
import hmac
from collections.abc import AsyncGenerator, Callable

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from webhook_gate.core.config import Settings
from webhook_gate.core.rate_limit import limiter
from webhook_gate.main import create_app

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
SHOPIFY_TEST_WEBHOOK_SECRET = "test-shopify-webhook-secret"
SHOPIFY_TEST_SHOP = "test-store.myshopify.com"
WEBHOOK_URL = "/api/v1/webhooks/shopify/orders-create"

# ---------------------------------------------------------------------------
# Disable rate limiting globally for tests
# ---------------------------------------------------------------------------
limiter.enabled = False


# ---------------------------------------------------------------------------
# Settings & application
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def set_shopify_test_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Point the module-level settings at the test secret for every test."""
    monkeypatch.setattr(
        "webhook_gate.core.config.settings.shopify_webhook_secret",
        SHOPIFY_TEST_WEBHOOK_SECRET,
    )


@pytest.fixture
def test_settings() -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        environment="development",
        debug=False,
        shopify_webhook_secret=SHOPIFY_TEST_WEBHOOK_SECRET,
    )


@pytest.fixture
def app(test_settings: Settings) -> FastAPI:
    """Fully wired application with the default failure handler."""
    return create_app(test_settings)


@pytest_asyncio.fixture
async def plain_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Async test client bound to the application."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# ---------------------------------------------------------------------------
# Shopify signing fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def shopify_webhook_signature() -> Callable[[bytes], str]:
    """Generate a valid Shopify webhook HMAC signature for a given body.

    Computed independently of webhook_gate so tests check against Shopify's
    documented scheme, not against the code under test.

    Usage:
        signature = shopify_webhook_signature(b'{"id": 123}')
        headers = {"X-Shopify-Hmac-Sha256": signature, ...}
    """

    def _sign(body: bytes) -> str:
        return base64.b64encode(
            hmac.new(
                SHOPIFY_TEST_WEBHOOK_SECRET.encode(),
                body,
                hashlib.sha256,
            ).digest()
        ).decode()

    return _sign


@pytest.fixture
def shopify_webhook_headers(
    shopify_webhook_signature: Callable[[bytes], str],
) -> Callable[..., dict[str, str]]:
    """Generate complete Shopify webhook headers for a given body and shop.

    Usage:
        body = b'{"id": 123}'
        headers = shopify_webhook_headers(body, "my-store.myshopify.com")
        response = await client.post(WEBHOOK_URL, content=body, headers=headers)
    """

    def _headers(body: bytes, shop: str = SHOPIFY_TEST_SHOP) -> dict[str, str]:
        return {
            "X-Shopify-Hmac-Sha256": shopify_webhook_signature(body),
            "X-Shopify-Shop-Domain": shop,
            "X-Shopify-Topic": "orders/create",
            "Content-Type": "application/json",
        }

    return _headers
