"""Health check endpoints."""

from fastapi import APIRouter, HTTPException, status

from webhook_gate.core.deps import AppSettings
from webhook_gate.schemas.common import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: AppSettings) -> HealthResponse:
    """
    Health check endpoint.

    Reports whether webhook verification is configured. Never echoes the secret.
    """
    errors = settings.validate_webhook_config()
    return HealthResponse(
        status="unhealthy" if errors else "healthy",
        version=settings.version,
        environment=settings.environment,
        checks={
            "webhook_secret": "configured" if settings.shopify_webhook_secret else "missing",
            "signature_header": settings.shopify_hmac_header,
        },
    )


@router.get("/health/live")
async def liveness_check() -> dict[str, str]:
    """
    Liveness probe for Kubernetes/container orchestration.

    Simple check that the service is running.
    """
    return {"status": "alive"}


@router.get("/health/ready")
async def readiness_check(settings: AppSettings) -> dict[str, str]:
    """
    Readiness probe for Kubernetes/container orchestration.

    Not ready until a webhook secret is configured.
    """
    if settings.validate_webhook_config():
        raise HTTPException(status.HTTP_503_SERVICE_UNAVAILABLE, "Webhook secret not configured")
    return {"status": "ready"}
