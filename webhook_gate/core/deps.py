"""Dependency injection for FastAPI routes."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from webhook_gate.core.config import Settings, settings
from webhook_gate.middleware.raw_body import get_raw_body


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was created with."""
    return getattr(request.app.state, "settings", settings)


def get_verified_body(request: Request) -> bytes:
    """Raw body of a request that already passed the webhook gate.

    Only meaningful on routes under the gated path prefix.
    """
    raw_body = get_raw_body(request)
    if raw_body is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Raw body is missing",
        )
    return raw_body


AppSettings = Annotated[Settings, Depends(get_app_settings)]
VerifiedBody = Annotated[bytes, Depends(get_verified_body)]


__all__ = [
    "AppSettings",
    "VerifiedBody",
    "get_app_settings",
    "get_verified_body",
]
