"""Structured JSON logging with request ids and secret redaction."""

import contextvars
import logging
import uuid
from collections.abc import Iterable

from pythonjsonlogger.json import JsonFormatter

REDACTED = "[REDACTED]"

_TRACEBACK_FORMATTER = logging.Formatter()

request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("request_id", default="")


class RequestIdFilter(logging.Filter):
    """Inject request_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get("")  # type: ignore[attr-defined]
        return True


class SecretRedactionFilter(logging.Filter):
    """Mask known secret values wherever they would appear in a log line.

    The webhook secret must never reach log output, even when a third-party
    library or an exception message happens to include it.
    """

    def __init__(self, secrets: Iterable[str] = ()) -> None:
        super().__init__()
        self._secrets = tuple(s for s in secrets if s)

    def _redact(self, text: str) -> str:
        for secret in self._secrets:
            text = text.replace(secret, REDACTED)
        return text

    def filter(self, record: logging.LogRecord) -> bool:
        if not self._secrets:
            return True
        message = record.getMessage()
        redacted = self._redact(message)
        if redacted != message:
            record.msg = redacted
            record.args = None

        # Formatters fall back to exc_text once exc_info is cleared
        if record.exc_info and not record.exc_text:
            record.exc_text = _TRACEBACK_FORMATTER.formatException(record.exc_info)
        if record.exc_text:
            exc_text = self._redact(record.exc_text)
            if exc_text != record.exc_text:
                record.exc_text = exc_text
                record.exc_info = None
        if record.stack_info:
            record.stack_info = self._redact(record.stack_info)
        return True


def setup_logging(*, debug: bool = False, secrets: Iterable[str] = ()) -> None:
    """Configure root logger with JSON formatter, request-id and redaction filters."""
    handler = logging.StreamHandler()
    formatter = JsonFormatter(
        fmt="%(asctime)s %(levelname)s %(name)s %(message)s %(request_id)s",
        rename_fields={"asctime": "timestamp", "levelname": "level"},
    )
    handler.setFormatter(formatter)
    handler.addFilter(RequestIdFilter())
    handler.addFilter(SecretRedactionFilter(secrets))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if debug else logging.INFO)


def generate_request_id() -> str:
    """Generate a new request ID."""
    return uuid.uuid4().hex[:16]
