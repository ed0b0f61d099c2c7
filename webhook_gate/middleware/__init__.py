"""ASGI middleware for capturing raw bodies and gating on webhook signatures."""

from webhook_gate.middleware.raw_body import (
    RawBodyMiddleware,
    WebhookRequestContext,
    get_raw_body,
    get_request_context,
)
from webhook_gate.middleware.shopify import (
    CustomFailureHandler,
    DefaultRejection,
    FailureHandler,
    ShopifyWebhookMiddleware,
    ShopifyWebhookOptions,
    WebhookRejected,
    shopify_webhook_guard,
    webhook_rejected_handler,
)

__all__ = [
    "CustomFailureHandler",
    "DefaultRejection",
    "FailureHandler",
    "RawBodyMiddleware",
    "ShopifyWebhookMiddleware",
    "ShopifyWebhookOptions",
    "WebhookRejected",
    "WebhookRequestContext",
    "get_raw_body",
    "get_request_context",
    "shopify_webhook_guard",
    "webhook_rejected_handler",
]
