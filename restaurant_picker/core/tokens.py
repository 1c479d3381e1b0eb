"""Signed session tokens (compact JWT, HS256).

Tokens are ``base64url(header).base64url(payload).base64url(signature)``
where the signature is HMAC-SHA256 over the first two segments. Padding is
stripped on encode and restored on decode.

Nothing here touches a session store: a token is valid when its signature
matches and its ``exp`` claim has not passed.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import json
import time
import uuid
from dataclasses import dataclass
from typing import Any

TOKEN_HEADER: dict[str, str] = {"alg": "HS256", "typ": "JWT"}

DEFAULT_TTL_SECONDS = 3600


@dataclass(frozen=True)
class DecodedToken:
    """Header and payload of a token, read without checking the signature."""

    header: dict[str, Any]
    payload: dict[str, Any]


def b64url_encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def b64url_decode(segment: str) -> bytes:
    """Decode an unpadded base64url segment.

    Raises:
        ValueError: If the segment holds characters outside the alphabet.
    """
    padded = segment + "=" * (-len(segment) % 4)
    try:
        return base64.b64decode(padded.encode("ascii"), altchars=b"-_", validate=True)
    except binascii.Error as exc:
        raise ValueError(f"invalid base64url segment: {exc}") from exc


def _json_segment(value: dict[str, Any]) -> str:
    return b64url_encode(json.dumps(value, separators=(",", ":")).encode("utf-8"))


def _signature(signing_input: str, secret: str) -> bytes:
    return hmac.new(secret.encode("utf-8"), signing_input.encode("ascii"), hashlib.sha256).digest()


def new_session_claims(ttl_seconds: int = DEFAULT_TTL_SECONDS, *, now: float | None = None) -> dict[str, Any]:
    """Build the claims for a fresh admin session.

    ``sessionId`` is a random nonce; it is never stored or looked up.

    Args:
        ttl_seconds: Token lifetime.
        now: Override for the current UNIX time (tests).

    Returns:
        dict with ``sessionId``, ``iat`` and ``exp`` (``iat + ttl_seconds``).
    """
    issued_at = int(time.time() if now is None else now)
    return {
        "sessionId": str(uuid.uuid4()),
        "iat": issued_at,
        "exp": issued_at + ttl_seconds,
    }


def issue(claims: dict[str, Any], secret: str) -> str:
    """Sign ``claims`` with ``secret`` and return the compact token."""

    signing_input = f"{_json_segment(TOKEN_HEADER)}.{_json_segment(claims)}"
    return f"{signing_input}.{b64url_encode(_signature(signing_input, secret))}"


def verify(token: str, secret: str, *, now: float | None = None) -> bool:
    """Check a token's structure, signature and expiry.

    Never raises for bad input: malformed segments, bad JSON, a wrong
    signature or an ``exp`` in the past all return False.

    Args:
        token: Compact token as received in the Authorization header.
        secret: Server signing secret.
        now: Override for the current UNIX time (tests).
    """
    try:
        parts = token.split(".")
        if len(parts) != 3:
            return False

        encoded_header, encoded_payload, encoded_signature = parts
        expected = _signature(f"{encoded_header}.{encoded_payload}", secret)
        if not hmac.compare_digest(expected, b64url_decode(encoded_signature)):
            return False

        payload = json.loads(b64url_decode(encoded_payload))
        if not isinstance(payload, dict):
            return False

        exp = payload.get("exp")
        current = int(time.time() if now is None else now)
        if exp is not None and exp < current:
            return False

        return True
    except (ValueError, TypeError, AttributeError):
        return False


def decode(token: str) -> DecodedToken | None:
    """Read a token's header and payload without verifying it.

    Only for inspection and tests; never use the result to authorize.
    """
    try:
        parts = token.split(".")
        if len(parts) != 3:
            return None

        header = json.loads(b64url_decode(parts[0]))
        payload = json.loads(b64url_decode(parts[1]))
    except (ValueError, TypeError, AttributeError):
        return None

    if not isinstance(header, dict) or not isinstance(payload, dict):
        return None
    return DecodedToken(header=header, payload=payload)
