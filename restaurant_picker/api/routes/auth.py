from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from restaurant_picker.api.dependencies import read_json_object
from restaurant_picker.core.auth import check_admin_password, create_session_token, require_signing_secret
from restaurant_picker.core.errors import ValidationAppError
from restaurant_picker.core.rate_limit import enforce_auth_rate_limit
from restaurant_picker.schemas.catalog import AuthRequest, AuthResponse

router = APIRouter(tags=["Auth"])

_NOT_AUTHENTICATED = {"authenticated": False}


@router.post(
    "/auth",
    response_model=AuthResponse,
    dependencies=[Depends(enforce_auth_rate_limit)],
)
async def authenticate(request: Request) -> AuthResponse:
    """Exchange the admin password for a one-hour session token.

    Rate limited per client address (5 attempts per minute by default).

    Raises:
        ValidationAppError: 400 for a malformed body.
        AuthenticationAppError: 401 for a wrong password.
        ConfigurationAppError: 500 when JWT_SECRET or ADMIN_PASSWORD is unset.
    """
    body = await read_json_object(request, error_message="Invalid request", error_payload=_NOT_AUTHENTICATED)
    try:
        credentials = AuthRequest.model_validate(body)
    except ValidationError as exc:
        raise ValidationAppError(
            code="invalid_json",
            message="Invalid request",
            payload=_NOT_AUTHENTICATED,
        ) from exc

    require_signing_secret(payload=_NOT_AUTHENTICATED)
    check_admin_password(credentials.password)
    return AuthResponse(authenticated=True, token=create_session_token())
