"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from webhook_gate.api.v1.router import api_router
from webhook_gate.core.config import Settings
from webhook_gate.core.config import settings as default_settings
from webhook_gate.core.logging_config import (
    generate_request_id,
    request_id_var,
    setup_logging,
)
from webhook_gate.core.rate_limit import limiter
from webhook_gate.middleware.raw_body import RawBodyMiddleware
from webhook_gate.middleware.shopify import (
    FailureCallback,
    ShopifyWebhookMiddleware,
    ShopifyWebhookOptions,
    WebhookRejected,
    webhook_rejected_handler,
)

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    *,
    on_error: FailureCallback | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Raises:
        RuntimeError: If webhook verification is not configured. A receiver
            without a secret must not start.
    """
    settings = settings or default_settings

    errors = settings.validate_webhook_config()
    if errors:
        for error in errors:
            logger.error("Configuration error: %s", error)
        raise RuntimeError(f"Invalid webhook configuration: {'; '.join(errors)}")

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan manager."""
        setup_logging(debug=settings.debug, secrets=[settings.shopify_webhook_secret])
        logger.info("Starting %s v%s", settings.project_name, settings.version)
        logger.info("Environment: %s", settings.environment)
        logger.info(
            "Verifying Shopify webhooks under %s via %s",
            settings.webhook_path_prefix,
            settings.shopify_hmac_header,
        )
        yield
        logger.info("Shutting down...")

    # Sentry/GlitchTip init (before middleware)
    if settings.sentry_dsn:
        import sentry_sdk

        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.environment,
            traces_sample_rate=0.1,
            send_default_pii=False,
        )

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        openapi_url=f"{settings.api_v1_prefix}/openapi.json",
        docs_url=f"{settings.api_v1_prefix}/docs",
        redoc_url=f"{settings.api_v1_prefix}/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]
    app.add_exception_handler(WebhookRejected, webhook_rejected_handler)  # type: ignore[arg-type]

    # Signature gate. Middleware added last runs first, so the raw body is
    # captured before the gate reads it.
    app.add_middleware(
        ShopifyWebhookMiddleware,
        options=ShopifyWebhookOptions(
            secret=settings.shopify_webhook_secret,
            header_name=settings.shopify_hmac_header,
            on_error=on_error,
        ),
        path_prefix=settings.webhook_path_prefix,
    )
    app.add_middleware(RawBodyMiddleware, path_prefix=settings.webhook_path_prefix)

    # Request ID middleware
    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next: Any) -> Response:
        rid = request.headers.get("X-Request-ID") or generate_request_id()
        request_id_var.set(rid)
        response: Response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response

    # Include API routes
    app.include_router(api_router, prefix=settings.api_v1_prefix)

    @app.exception_handler(Exception)
    async def global_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
        """Handle unhandled exceptions with proper JSON response."""
        logger.exception("Unhandled exception: %s", type(exc).__name__)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    # Root endpoint
    @app.get("/")
    async def root() -> dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": settings.project_name,
            "version": settings.version,
            "docs": f"{settings.api_v1_prefix}/docs",
            "health": f"{settings.api_v1_prefix}/health",
            "webhooks": settings.webhook_path_prefix,
        }

    return app


def serve() -> None:
    """Run the webhook receiver with uvicorn."""
    import uvicorn

    uvicorn.run(
        "webhook_gate.main:create_app",
        factory=True,
        host=default_settings.host,
        port=default_settings.port,
        log_config=None,
    )
