"""HMAC signing primitives for webhook verification."""

import base64
import hashlib
import hmac
from typing import Literal, get_args

HmacEncoding = Literal["hex", "base64"]

DEFAULT_ALGORITHM = "sha256"
DEFAULT_ENCODING: HmacEncoding = "base64"


class InvalidInputError(ValueError):
    """Raised for configuration-class mistakes (bad secret, body type or encoding)."""


class UnsupportedAlgorithmError(InvalidInputError):
    """Raised when the requested hash algorithm cannot be used for HMAC."""


def _resolve_algorithm(algorithm: str) -> str:
    # SHAKE digests are variable-length and cannot back an HMAC
    if not algorithm or algorithm.lower().startswith("shake"):
        raise UnsupportedAlgorithmError(f"Unsupported HMAC algorithm: {algorithm!r}")
    try:
        hashlib.new(algorithm)
    except (ValueError, TypeError) as exc:
        raise UnsupportedAlgorithmError(f"Unsupported HMAC algorithm: {algorithm!r}") from exc
    return algorithm


def compute_hmac(
    raw_body: bytes,
    secret: str,
    algorithm: str = DEFAULT_ALGORITHM,
    encoding: HmacEncoding = DEFAULT_ENCODING,
) -> str:
    """Compute a keyed hash of the raw request body.

    Args:
        raw_body: The exact, unparsed request body bytes. May be empty.
        secret: The shared webhook secret. Must not be empty.
        algorithm: A hashlib digest name, e.g. ``"sha256"``.
        encoding: ``"hex"`` or ``"base64"``.

    Returns:
        The digest rendered in the requested encoding.

    Raises:
        InvalidInputError: If the body is not bytes, the secret is empty or the
            encoding is unknown.
        UnsupportedAlgorithmError: If ``algorithm`` is not a usable digest.
    """
    if not isinstance(raw_body, (bytes, bytearray, memoryview)):
        raise InvalidInputError(
            f"raw_body must be the raw request bytes, got {type(raw_body).__name__}"
        )
    if not secret:
        raise InvalidInputError("Webhook secret must not be empty")
    if encoding not in get_args(HmacEncoding):
        raise InvalidInputError(f"Unsupported digest encoding: {encoding!r}")

    # Lone surrogates are kept as bytes rather than raising
    key = secret.encode("utf-8", "surrogatepass")
    mac = hmac.new(key, bytes(raw_body), _resolve_algorithm(algorithm))

    if encoding == "hex":
        return mac.hexdigest()
    return base64.b64encode(mac.digest()).decode("ascii")


def timing_safe_equal(a: str, b: str) -> bool:
    """Compare two strings without leaking where they first differ."""
    a_bytes = a.encode("utf-8", "surrogatepass")
    b_bytes = b.encode("utf-8", "surrogatepass")
    if len(a_bytes) != len(b_bytes):
        return False
    return hmac.compare_digest(a_bytes, b_bytes)
