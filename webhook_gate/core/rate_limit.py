"""Rate limiting configuration using slowapi."""

from slowapi import Limiter
from starlette.requests import Request

from webhook_gate.integrations.shopify.webhooks import SHOPIFY_SHOP_DOMAIN_HEADER


def _get_real_client_ip(request: Request) -> str:
    """Extract the real client IP behind a reverse proxy."""
    return (
        request.headers.get("X-Forwarded-For", "").split(",")[0].strip()
        or (request.client.host if request.client else "127.0.0.1")
    )


def _get_webhook_sender(request: Request) -> str:
    """Key webhook deliveries by shop domain, falling back to the client IP.

    Only used on routes behind the signature gate, so every counted request
    was signed with the app secret.
    """
    shop = request.headers.get(SHOPIFY_SHOP_DOMAIN_HEADER, "").strip().lower()
    return f"shop:{shop}" if shop else f"ip:{_get_real_client_ip(request)}"


limiter = Limiter(key_func=_get_webhook_sender)
