# payments/services/signatures.py

"""
WEBHOOK SIGNATURE VERIFICATION (Stripe scheme)

Header format:
    Stripe-Signature: t=<unix ts>,v1=<hex hmac>[,v1=<hex hmac>...]

Signed payload:
    "<t>.<raw request body>"  HMAC-SHA256 with the endpoint secret

Rules:
- Verify against the RAW body bytes, never a re-serialized JSON.
- Any v1 entry may match (secret rotation sends several).
- Timestamps older (or newer) than the tolerance are rejected (replay).
- Constant-time comparison.
"""

from __future__ import annotations

import hashlib
import hmac
import time

from core.exceptions import SignatureInvalidError

DEFAULT_TOLERANCE_SECONDS = 300


def compute_signature(*, timestamp: int, raw_body: bytes, secret: str) -> str:
    signed = f"{int(timestamp)}.".encode("utf-8") + (raw_body or b"")
    return hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()


def build_signature_header(*, raw_body: bytes, secret: str, timestamp: int | None = None) -> str:
    ts = int(time.time()) if timestamp is None else int(timestamp)
    return f"t={ts},v1={compute_signature(timestamp=ts, raw_body=raw_body, secret=secret)}"


def _parse_header(header: str) -> tuple[int, list[str]]:
    timestamp = None
    signatures = []
    for part in str(header).split(","):
        key, sep, value = part.strip().partition("=")
        if not sep:
            continue
        if key == "t":
            try:
                timestamp = int(value)
            except ValueError:
                raise SignatureInvalidError("Malformed signature timestamp")
        elif key == "v1":
            signatures.append(value.strip())

    if timestamp is None or not signatures:
        raise SignatureInvalidError("Malformed signature header")
    return timestamp, signatures


def verify_signature(
    *,
    raw_body: bytes,
    header: str | None,
    secret: str | None,
    tolerance: int = DEFAULT_TOLERANCE_SECONDS,
    now: int | None = None,
) -> int:
    """
    Raise SignatureInvalidError unless `header` signs `raw_body`.
    Returns the verified timestamp.
    """
    if not secret:
        raise SignatureInvalidError("Webhook secret is not configured")
    if not header:
        raise SignatureInvalidError("Missing signature header")

    timestamp, signatures = _parse_header(header)

    expected = compute_signature(timestamp=timestamp, raw_body=raw_body, secret=secret)
    if not any(hmac.compare_digest(expected, sig) for sig in signatures):
        raise SignatureInvalidError("Signature mismatch")

    current = int(time.time()) if now is None else int(now)
    if tolerance and abs(current - timestamp) > int(tolerance):
        raise SignatureInvalidError("Signature timestamp outside tolerance")

    return timestamp
