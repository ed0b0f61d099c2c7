"""Gate requests on a valid Shopify webhook signature.

Two entry points share the same decision:

- ``ShopifyWebhookMiddleware`` guards every request under a path prefix. It
  expects ``RawBodyMiddleware`` to run first and answers 400 when it did not.
- ``shopify_webhook_guard`` is a FastAPI dependency for guarding single routes.

Failures go through a ``FailureHandler``: the default answers 401, a custom
callback can replace it.
"""

import inspect
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum

from fastapi import HTTPException, Request, status
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from webhook_gate.core.signing import InvalidInputError
from webhook_gate.integrations.shopify.webhooks import (
    SHOPIFY_HMAC_HEADER,
    verify_shopify_webhook,
)
from webhook_gate.middleware.raw_body import get_raw_body
from webhook_gate.schemas.common import WebhookErrorResponse

logger = logging.getLogger(__name__)

FailureCallback = Callable[[Request], Response | Awaitable[Response]]

RAW_BODY_MISSING_MESSAGE = (
    "Raw body is missing. Install RawBodyMiddleware ahead of ShopifyWebhookMiddleware."
)


class GateOutcome(StrEnum):
    PASSED = "PASSED"
    RAW_BODY_MISSING = "RAW_BODY_MISSING"
    INVALID_SIGNATURE = "INVALID_SIGNATURE"


@dataclass(frozen=True)
class ShopifyWebhookOptions:
    """Settings for the Shopify webhook gate.

    Attributes:
        secret: The Shopify app's webhook secret.
        header_name: Header carrying the signature.
        on_error: Called instead of the default 401 response when verification fails.
    """

    secret: str
    header_name: str = SHOPIFY_HMAC_HEADER
    on_error: FailureCallback | None = None

    def __post_init__(self) -> None:
        if not self.secret:
            raise InvalidInputError("Shopify webhook secret must not be empty")
        if not self.header_name.strip():
            raise InvalidInputError("Signature header name must not be blank")


class FailureHandler(ABC):
    """Builds the response for a request that failed verification."""

    @abstractmethod
    async def handle(self, request: Request) -> Response: ...


class DefaultRejection(FailureHandler):
    """Answers 401 with ``{"ok": false, "error": "INVALID_SIGNATURE"}``."""

    async def handle(self, request: Request) -> Response:  # noqa: ARG002
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content=WebhookErrorResponse(error=GateOutcome.INVALID_SIGNATURE.value).model_dump(
                exclude_none=True
            ),
        )


class CustomFailureHandler(FailureHandler):
    """Delegates to a user callback, sync or async."""

    def __init__(self, callback: FailureCallback) -> None:
        self._callback = callback

    async def handle(self, request: Request) -> Response:
        result = self._callback(request)
        if inspect.isawaitable(result):
            result = await result
        return result


def select_failure_handler(on_error: FailureCallback | None) -> FailureHandler:
    """Pick the failure handler variant for the configured callback."""
    if on_error is None:
        return DefaultRejection()
    return CustomFailureHandler(on_error)


def raw_body_missing_response() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=WebhookErrorResponse(
            error=GateOutcome.RAW_BODY_MISSING.value,
            message=RAW_BODY_MISSING_MESSAGE,
        ).model_dump(),
    )


def evaluate_request(
    request: Request, options: ShopifyWebhookOptions, raw_body: bytes | None
) -> GateOutcome:
    """Decide whether a request carries a valid signature over ``raw_body``."""
    if raw_body is None:
        logger.error(
            "Raw body unavailable for %s; webhook verification is misconfigured",
            request.url.path,
        )
        return GateOutcome.RAW_BODY_MISSING

    hmac_header = request.headers.get(options.header_name)
    if verify_shopify_webhook(raw_body, options.secret, hmac_header):
        return GateOutcome.PASSED

    client = request.client.host if request.client else "unknown"
    logger.debug("Rejected webhook from %s on %s", client, request.url.path)
    return GateOutcome.INVALID_SIGNATURE


class ShopifyWebhookMiddleware(BaseHTTPMiddleware):
    """Reject requests under ``path_prefix`` whose Shopify signature does not verify."""

    def __init__(
        self,
        app: ASGIApp,
        options: ShopifyWebhookOptions,
        path_prefix: str = "/",
    ) -> None:
        super().__init__(app)
        self.options = options
        self.path_prefix = path_prefix
        self.failure_handler = select_failure_handler(options.on_error)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not request.url.path.startswith(self.path_prefix):
            return await call_next(request)

        outcome = evaluate_request(request, self.options, get_raw_body(request))
        if outcome is GateOutcome.RAW_BODY_MISSING:
            return raw_body_missing_response()
        if outcome is GateOutcome.INVALID_SIGNATURE:
            return await self.failure_handler.handle(request)
        return await call_next(request)


class WebhookRejected(Exception):
    """Carries a custom failure response out of a route dependency."""

    def __init__(self, response: Response) -> None:
        super().__init__("Webhook rejected")
        self.response = response


async def webhook_rejected_handler(_request: Request, exc: WebhookRejected) -> Response:
    """Exception handler returning the response attached to WebhookRejected."""
    return exc.response


def shopify_webhook_guard(
    options: ShopifyWebhookOptions,
) -> Callable[[Request], Awaitable[bytes]]:
    """Build a FastAPI dependency that verifies the request and yields its raw body.

    Usage:
        guard = shopify_webhook_guard(ShopifyWebhookOptions(secret=...))

        @router.post("/orders-create")
        async def orders_create(body: bytes = Depends(guard)) -> dict[str, str]:
            ...

    With a custom ``on_error`` callback, register ``webhook_rejected_handler`` for
    ``WebhookRejected`` on the application.
    """
    failure_handler = select_failure_handler(options.on_error)

    async def _guard(request: Request) -> bytes:
        raw_body = get_raw_body(request)
        if raw_body is None:
            raw_body = await request.body()

        outcome = evaluate_request(request, options, raw_body)
        if outcome is GateOutcome.PASSED:
            return raw_body
        if isinstance(failure_handler, DefaultRejection):
            raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Invalid webhook signature")
        raise WebhookRejected(await failure_handler.handle(request))

    return _guard
