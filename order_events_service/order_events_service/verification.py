"""Shopify webhook signature verification.

Shopify signs the exact raw body with HMAC-SHA256 and sends the base64
digest in the X-Shopify-Hmac-Sha256 header. The body must be verified
before it is parsed; re-serialized JSON will not match.
"""

import base64
import hashlib
import hmac

from .logger import logger

SIGNATURE_HEADER = "x-shopify-hmac-sha256"


def compute_signature(secret: str, body: bytes | str) -> str:
    """Return the base64 HMAC-SHA256 of body under secret."""
    if isinstance(body, str):
        body = body.encode("utf-8")
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("utf-8")


def verify_signature(secret: str, body: bytes | str, signature_header: str | None) -> bool:
    """Check a webhook signature.

    Args:
        secret: Shared webhook secret
        body: Raw request body
        signature_header: Claimed signature from the request

    Returns:
        bool: True if the signature matches; False if it does not, or if the
        secret or header is missing
    """
    if not secret:
        logger.warning("SHOPIFY_WEBHOOK_SECRET not set, rejecting webhook")
        return False
    if not signature_header:
        return False

    expected = compute_signature(secret, body).encode("utf-8")
    return hmac.compare_digest(expected, signature_header.encode("utf-8"))


def get_signature_header(headers: dict[str, str] | None) -> str | None:
    """Find the signature header regardless of the casing used by the sender."""
    for name, value in (headers or {}).items():
        if name.lower() == SIGNATURE_HEADER:
            return value
    return None
