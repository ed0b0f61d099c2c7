"""Pydantic schemas for request/response validation."""

from webhook_gate.schemas.common import (
    HealthResponse,
    WebhookAcceptedResponse,
    WebhookErrorResponse,
)

__all__ = [
    "HealthResponse",
    "WebhookAcceptedResponse",
    "WebhookErrorResponse",
]
