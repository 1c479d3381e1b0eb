"""Administrator authentication.

One shared admin password is exchanged at ``POST /auth`` for a signed
session token (see ``restaurant_picker.core.tokens``). Write endpoints
require that token as ``Authorization: Bearer <token>``.

The signing secret is required configuration: when it is missing, both
login and token checks fail with a configuration error (500) instead of
silently treating every token as invalid.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
from typing import Annotated

from fastapi import Header

from restaurant_picker.core import tokens
from restaurant_picker.core.config import settings
from restaurant_picker.core.errors import AuthenticationAppError, ConfigurationAppError

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def _fingerprint(value: str) -> str:
    return hashlib.sha256(value.encode()).hexdigest()[:16]


def require_signing_secret(*, payload: dict | None = None) -> str:
    """Return the configured signing secret.

    Raises:
        ConfigurationAppError: If JWT_SECRET is not set.
    """
    secret = settings.auth.jwt_secret
    if not secret:
        logger.error(
            "auth.misconfigured",
            extra={"missing_setting": "JWT_SECRET"},
        )
        raise ConfigurationAppError(
            code="jwt_secret_not_configured",
            message="Server configuration error: JWT_SECRET not set",
            details={"missing_setting": "JWT_SECRET"},
            payload=payload,
        )
    return secret


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token from an ``Authorization: Bearer`` header value.

    Examples:
        >>> extract_bearer_token("Bearer abc.def.ghi")
        'abc.def.ghi'
        >>> extract_bearer_token("Basic dXNlcg==") is None
        True
        >>> extract_bearer_token(None) is None
        True
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    return authorization[len(BEARER_PREFIX):] or None


def check_admin_password(provided: str) -> None:
    """Compare ``provided`` with the admin password in constant time.

    Raises:
        ConfigurationAppError: If ADMIN_PASSWORD is not set.
        AuthenticationAppError: If the password does not match.
    """
    expected = settings.auth.admin_password
    if not expected:
        logger.error(
            "auth.misconfigured",
            extra={"missing_setting": "ADMIN_PASSWORD"},
        )
        raise ConfigurationAppError(
            code="admin_password_not_configured",
            message="Server configuration error: ADMIN_PASSWORD not set",
            details={"missing_setting": "ADMIN_PASSWORD"},
            payload={"authenticated": False},
        )

    if not hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8")):
        logger.warning("auth.invalid_password")
        raise AuthenticationAppError(
            code="invalid_password",
            message="Invalid password",
            payload={"authenticated": False},
        )


def create_session_token() -> str:
    """Issue a signed token for a new admin session.

    Raises:
        ConfigurationAppError: If JWT_SECRET is not set.
    """
    secret = require_signing_secret(payload={"authenticated": False})
    claims = tokens.new_session_claims(settings.auth.token_ttl_seconds)
    logger.info(
        "auth.success",
        extra={"session_fingerprint": _fingerprint(claims["sessionId"]), "exp": claims["exp"]},
    )
    return tokens.issue(claims, secret)


async def require_admin(
    authorization: Annotated[str | None, Header()] = None,
) -> None:
    """FastAPI dependency guarding write endpoints.

    Usage:
        @router.post("/restaurants", dependencies=[Depends(require_admin)])

    Raises:
        AuthenticationAppError: 401 for a missing, malformed, forged or expired token.
        ConfigurationAppError: 500 when the signing secret is not configured.
    """
    token = extract_bearer_token(authorization)
    if token is None:
        logger.info(
            "auth.missing_token",
            extra={"authorization_present": authorization is not None},
        )
        raise AuthenticationAppError(code="unauthorized", message="Unauthorized")

    secret = require_signing_secret()
    if not tokens.verify(token, secret):
        logger.warning(
            "auth.invalid_token",
            extra={"token_fingerprint": _fingerprint(token)},
        )
        raise AuthenticationAppError(code="unauthorized", message="Unauthorized")
