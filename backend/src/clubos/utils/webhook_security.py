"""
Webhook Security
Signature verification for Stripe webhook deliveries
"""

import hashlib
import hmac
import logging
import time
from typing import Optional

logger = logging.getLogger(__name__)


class WebhookSignatureError(Exception):
    """Raised when webhook signature verification fails"""

    pass


def compute_hmac_sha256(secret: str, payload: bytes) -> str:
    """Compute HMAC-SHA256 signature of payload"""
    return hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()


def parse_stripe_signature_header(header: str) -> tuple[Optional[str], list[str]]:
    """
    Split a Stripe-Signature header ("t=<timestamp>,v1=<sig>[,v1=<sig>...]")

    Returns:
        (timestamp, list of v1 signatures)
    """
    timestamp = None
    signatures = []
    for item in header.split(","):
        key, _, value = item.strip().partition("=")
        if key == "t":
            timestamp = value
        elif key == "v1" and value:
            signatures.append(value)
    return timestamp, signatures


def verify_stripe_signature(payload: bytes, header: Optional[str], secret: str, tolerance: int = 300) -> None:
    """
    Verify a Stripe webhook payload against its Stripe-Signature header

    Stripe signs "<timestamp>.<raw body>" with the endpoint secret. Any v1
    signature may match (secrets roll over with two active signatures).

    Raises:
        WebhookSignatureError: If the header is missing, malformed, stale, or does not match
    """
    if not header:
        raise WebhookSignatureError("Missing signature")

    timestamp, signatures = parse_stripe_signature_header(header)
    if not timestamp or not signatures:
        raise WebhookSignatureError("Invalid signature format")

    try:
        signed_at = int(timestamp)
    except ValueError:
        raise WebhookSignatureError("Invalid signature timestamp")

    if abs(time.time() - signed_at) > tolerance:
        raise WebhookSignatureError("Webhook timestamp outside tolerance")

    expected = compute_hmac_sha256(secret, f"{timestamp}.".encode("utf-8") + payload)
    if not any(hmac.compare_digest(expected, signature) for signature in signatures):
        logger.warning("Stripe webhook signature mismatch")
        raise WebhookSignatureError("Invalid signature")


def create_stripe_signature(secret: str, payload: bytes, timestamp: Optional[int] = None) -> str:
    """Build a Stripe-Signature header value for a payload (used by tests and local tooling)"""
    timestamp = int(time.time()) if timestamp is None else timestamp
    signature = compute_hmac_sha256(secret, f"{timestamp}.".encode("utf-8") + payload)
    return f"t={timestamp},v1={signature}"
