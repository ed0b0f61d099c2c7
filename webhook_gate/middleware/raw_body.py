"""Capture the exact request body before anything downstream parses it.

Signature verification has to run over the bytes as they arrived on the wire.
``RawBodyMiddleware`` drains the ASGI ``receive`` channel once, stores the bytes
on a typed per-request context, and replays them so route handlers still see an
untouched body.
"""

from dataclasses import dataclass

from starlette.requests import HTTPConnection
from starlette.types import ASGIApp, Message, Receive, Scope, Send

RAW_BODY_STATE_KEY = "webhook_context"


@dataclass(frozen=True)
class WebhookRequestContext:
    """Per-request data the webhook gate needs."""

    raw_body: bytes | None = None


class RawBodyMiddleware:
    """Pure ASGI middleware buffering the body of requests under ``path_prefix``."""

    def __init__(self, app: ASGIApp, path_prefix: str = "/") -> None:
        self.app = app
        self.path_prefix = path_prefix

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or not scope["path"].startswith(self.path_prefix):
            await self.app(scope, receive, send)
            return

        chunks: list[bytes] = []
        more_body = True
        while more_body:
            message = await receive()
            if message["type"] == "http.disconnect":
                return
            chunks.append(message.get("body", b""))
            more_body = message.get("more_body", False)

        raw_body = b"".join(chunks)
        scope.setdefault("state", {})[RAW_BODY_STATE_KEY] = WebhookRequestContext(
            raw_body=raw_body
        )

        replayed = False

        async def replay() -> Message:
            nonlocal replayed
            if not replayed:
                replayed = True
                return {"type": "http.request", "body": raw_body, "more_body": False}
            return await receive()

        await self.app(scope, replay, send)


def get_request_context(conn: HTTPConnection) -> WebhookRequestContext | None:
    """Return the context stored by RawBodyMiddleware, if it ran for this request."""
    context = conn.scope.get("state", {}).get(RAW_BODY_STATE_KEY)
    if isinstance(context, WebhookRequestContext):
        return context
    return None


def get_raw_body(conn: HTTPConnection) -> bytes | None:
    """Return the captured raw body, or None when it was never captured."""
    context = get_request_context(conn)
    return context.raw_body if context else None
