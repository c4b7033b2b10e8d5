"""
Slack request signing.

Slack signs every Events API request with HMAC-SHA256 over
``v0:{timestamp}:{raw body}`` using the app's signing secret and sends the
result in ``X-Slack-Signature``. Requests older than the replay window are
rejected even when the signature is valid.
"""

import hashlib
import hmac
import logging
import time
from typing import Any

from chatbridge.settings import settings

logger = logging.getLogger(__name__)

SIGNATURE_VERSION = "v0"


class SignatureError(Exception):
    """Raised when a webhook request fails signature verification."""

    def __init__(self, code: str, message: str | None = None):
        self.code = code
        super().__init__(message or code)


def compute_slack_signature(signing_secret: str, timestamp: str, body: bytes | str) -> str:
    """Compute the ``v0=<hex>`` signature Slack would send for this body."""
    if isinstance(body, str):
        body = body.encode("utf-8")
    basestring = f"{SIGNATURE_VERSION}:{timestamp}:".encode() + body
    digest = hmac.new(
        signing_secret.encode(),
        basestring,
        hashlib.sha256,
    ).hexdigest()
    return f"{SIGNATURE_VERSION}={digest}"


def verify_slack_signature(
    signing_secret: str,
    signature: str | None,
    timestamp: str | None,
    body: bytes | str,
    now: float | None = None,
    window_seconds: int | None = None,
) -> None:
    """Verify a Slack webhook signature.

    Raises:
        SignatureError: ``invalid_signature`` for missing headers, a malformed
            timestamp or a mismatch; ``stale_timestamp`` when the request is
            outside the replay window.
    """
    if not signature or not timestamp:
        raise SignatureError("invalid_signature", "Missing Slack signature headers")

    try:
        request_timestamp = int(timestamp)
    except ValueError:
        raise SignatureError("invalid_signature", "Malformed Slack request timestamp")

    if now is None:
        now = time.time()
    if window_seconds is None:
        window_seconds = settings.slack_replay_window_seconds

    if abs(now - request_timestamp) > window_seconds:
        logger.warning(f"Slack webhook timestamp outside replay window: {timestamp}")
        raise SignatureError("stale_timestamp", "Slack request timestamp too old")

    expected = compute_slack_signature(signing_secret, timestamp, body)
    if not hmac.compare_digest(expected, signature):
        raise SignatureError("invalid_signature", "Slack signature mismatch")


def is_url_verification(payload: Any) -> bool:
    """True for the one-time ``url_verification`` handshake payload."""
    return (
        isinstance(payload, dict)
        and payload.get("type") == "url_verification"
        and isinstance(payload.get("challenge"), str)
    )
