"""Shopify webhook HMAC verification."""

import logging
from dataclasses import dataclass

from webhook_gate.core.signing import (
    HmacEncoding,
    InvalidInputError,
    compute_hmac,
    timing_safe_equal,
)

logger = logging.getLogger(__name__)

SHOPIFY_HMAC_HEADER = "X-Shopify-Hmac-Sha256"
SHOPIFY_TOPIC_HEADER = "X-Shopify-Topic"
SHOPIFY_SHOP_DOMAIN_HEADER = "X-Shopify-Shop-Domain"


@dataclass(frozen=True)
class WebhookConvention:
    """How a provider signs its webhook deliveries."""

    name: str
    algorithm: str
    encoding: HmacEncoding
    header_name: str


SHOPIFY = WebhookConvention(
    name="shopify",
    algorithm="sha256",
    encoding="base64",
    header_name=SHOPIFY_HMAC_HEADER,
)


def verify_shopify_webhook(raw_body: bytes, secret: str, hmac_header: str | None) -> bool:
    """Verify a Shopify webhook's HMAC-SHA256 signature.

    Args:
        raw_body: The raw request body bytes, captured before any parsing.
        secret: The Shopify app's webhook secret.
        hmac_header: The X-Shopify-Hmac-Sha256 header value, or None if absent.

    Returns:
        True if the signature is valid. Missing and mismatched signatures both
        return False; this function never raises.
    """
    if not hmac_header:
        logger.warning("Shopify webhook rejected: missing signature header")
        return False

    try:
        expected = compute_hmac(raw_body, secret, SHOPIFY.algorithm, SHOPIFY.encoding)
    except InvalidInputError as exc:
        logger.error("Shopify webhook verification misconfigured: %s", exc)
        return False

    is_valid = timing_safe_equal(expected, hmac_header.strip())
    if not is_valid:
        logger.warning("Shopify webhook rejected: signature mismatch")
    else:
        logger.debug("Shopify webhook signature verified")
    return is_valid

