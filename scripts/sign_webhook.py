"""HMAC signing helper for simulating Shopify webhooks.

Reads a raw body from stdin and prints its base64-encoded HMAC-SHA256 signature
using SHOPIFY_WEBHOOK_SECRET from the environment (or .env file).

Usage:
    echo -n '{"id":1}' | python -m scripts.sign_webhook

    # Hex output, for providers that sign that way:
    cat payload.json | python -m scripts.sign_webhook --encoding hex

    # Full curl example:
    BODY='{"id":99001,"email":"test@example.com"}'
    HMAC=$(echo -n "$BODY" | python -m scripts.sign_webhook)
    curl -X POST http://localhost:8000/api/v1/webhooks/shopify/orders-create \\
      -H "Content-Type: application/json" \\
      -H "X-Shopify-Hmac-Sha256: $HMAC" \\
      -H "X-Shopify-Shop-Domain: test-store.myshopify.com" \\
      -d "$BODY"
"""

import argparse
import sys

from webhook_gate.core.config import settings
from webhook_gate.core.signing import InvalidInputError, compute_hmac


def sign(body: bytes, secret: str, encoding: str = "base64") -> str:
    """Compute the HMAC-SHA256 signature Shopify would send for ``body``."""
    return compute_hmac(body, secret, "sha256", encoding)  # type: ignore[arg-type]


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--encoding", choices=["base64", "hex"], default="base64")
    args = parser.parse_args(argv)

    secret = settings.shopify_webhook_secret
    if not secret:
        print("ERROR: SHOPIFY_WEBHOOK_SECRET is not set in .env", file=sys.stderr)
        return 1

    body = sys.stdin.buffer.read()
    if not body:
        print("ERROR: No input received on stdin", file=sys.stderr)
        return 1

    try:
        signature = sign(body, secret, args.encoding)
    except InvalidInputError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    print(signature, end="")
    return 0


if __name__ == "__main__":
    sys.exit(main())
