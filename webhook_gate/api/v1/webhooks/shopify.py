"""Shopify webhook receiver.

Requests only reach these handlers after ShopifyWebhookMiddleware has verified
their signature. Payloads are acknowledged, not interpreted.
"""

import logging

from fastapi import APIRouter, Request

from webhook_gate.core.config import settings
from webhook_gate.core.deps import VerifiedBody
from webhook_gate.core.rate_limit import limiter
from webhook_gate.integrations.shopify.webhooks import (
    SHOPIFY_SHOP_DOMAIN_HEADER,
    SHOPIFY_TOPIC_HEADER,
)
from webhook_gate.schemas.common import WebhookAcceptedResponse

logger = logging.getLogger(__name__)

router = APIRouter()


def _webhook_rate_limit() -> str:
    return settings.webhook_rate_limit


@router.post("/{topic}", response_model=WebhookAcceptedResponse)
@limiter.limit(_webhook_rate_limit)
async def receive_webhook(
    topic: str,
    request: Request,
    body: VerifiedBody,
) -> WebhookAcceptedResponse:
    """Acknowledge a verified Shopify webhook delivery."""
    # Header topics use "orders/create", paths use "orders-create"
    header_topic = request.headers.get(SHOPIFY_TOPIC_HEADER)
    shop = request.headers.get(SHOPIFY_SHOP_DOMAIN_HEADER)

    logger.info(
        "Accepted Shopify webhook topic=%s shop=%s bytes=%d",
        header_topic or topic,
        shop,
        len(body),
    )
    return WebhookAcceptedResponse(topic=header_topic or topic, shop=shop, size=len(body))
