"""API v1 router combining all route modules."""

from fastapi import APIRouter

from webhook_gate.api.v1 import health
from webhook_gate.api.v1.webhooks import shopify as shopify_webhooks

api_router = APIRouter()

# Include health check routes (no prefix)
api_router.include_router(health.router)

# Shopify webhooks (no auth - verified via HMAC middleware)
api_router.include_router(
    shopify_webhooks.router,
    prefix="/webhooks/shopify",
    tags=["webhooks"],
)
