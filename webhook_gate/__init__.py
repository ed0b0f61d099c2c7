"""Shopify webhook signature verification for FastAPI and Starlette."""

from webhook_gate.core.signing import (
    InvalidInputError,
    UnsupportedAlgorithmError,
    compute_hmac,
    timing_safe_equal,
)
from webhook_gate.integrations.shopify.webhooks import verify_shopify_webhook
from webhook_gate.middleware import (
    RawBodyMiddleware,
    ShopifyWebhookMiddleware,
    ShopifyWebhookOptions,
    shopify_webhook_guard,
)

__all__ = [
    "InvalidInputError",
    "RawBodyMiddleware",
    "ShopifyWebhookMiddleware",
    "ShopifyWebhookOptions",
    "UnsupportedAlgorithmError",
    "compute_hmac",
    "shopify_webhook_guard",
    "timing_safe_equal",
    "verify_shopify_webhook",
]
