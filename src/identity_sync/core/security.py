"""Security utilities for authenticating inbound webhooks."""

import base64
import hashlib
import hmac
import secrets

from loguru import logger


def generate_secure_token(length: int = 32) -> str:
    """Generate a cryptographically secure random token.

    Args:
        length: Number of random bytes to generate (default 32)

    Returns:
        URL-safe base64 encoded token
    """
    return (
        base64.urlsafe_b64encode(secrets.token_bytes(length))
        .decode("utf-8")
        .rstrip("=")
    )


def _digest(value: str) -> bytes:
    return hashlib.sha256(value.encode("utf-8")).digest()


def verify_webhook_secret(provided: str | None, configured: str | None) -> bool:
    """Compare a caller-supplied secret with the configured one in constant time.

    Both sides are reduced to fixed-length SHA-256 digests before the
    comparison, so neither the position of the first differing byte nor a
    length mismatch affects how long the check takes.

    Args:
        provided: Secret from the request header (may be missing)
        configured: Secret configured for the provider

    Returns:
        True only if both secrets are non-empty and equal
    """
    if not configured:
        logger.error("Webhook secret is not configured; rejecting request")
        return False

    provided_digest = _digest(provided or "")
    matches = hmac.compare_digest(provided_digest, _digest(configured))
    return matches and bool(provided)
