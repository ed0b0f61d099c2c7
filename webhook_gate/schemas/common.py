"""Common Pydantic schemas used across the API."""

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )


class HealthResponse(BaseSchema):
    """Health check response schema."""

    status: str
    version: str
    environment: str
    checks: dict[str, str]


class WebhookErrorResponse(BaseSchema):
    """Body returned when the webhook gate rejects a request."""

    ok: bool = False
    error: str
    message: str | None = None


class WebhookAcceptedResponse(BaseSchema):
    """Acknowledgement for a verified webhook delivery."""

    status: str = "accepted"
    topic: str
    shop: str | None = None
    size: int
