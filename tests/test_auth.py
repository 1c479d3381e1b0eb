"""Tests for admin authentication: password check, session tokens and the /auth endpoint."""

import time
from unittest.mock import patch

import pytest

from restaurant_picker.core import tokens
from restaurant_picker.core.auth import (
    check_admin_password,
    create_session_token,
    extract_bearer_token,
    require_admin,
)
from restaurant_picker.core.config import settings
from restaurant_picker.core.errors import AuthenticationAppError, ConfigurationAppError

SECRET = "unit-test-secret"


class TestExtractBearerToken:
    """Test Authorization header parsing."""

    def test_extracts_token(self) -> None:
        assert extract_bearer_token("Bearer abc.def.ghi") == "abc.def.ghi"

    @pytest.mark.parametrize("value", [None, "", "Basic dXNlcg==", "bearer abc", "Bearer", "Bearer "])
    def test_rejects_other_schemes_and_empty_tokens(self, value) -> None:
        assert extract_bearer_token(value) is None


class TestCheckAdminPassword:
    """Test constant-time admin password comparison."""

    @patch("restaurant_picker.core.auth.settings")
    def test_accepts_matching_password(self, mock_settings) -> None:
        mock_settings.auth.admin_password = "hunter2"

        # Should not raise
        check_admin_password("hunter2")

    @patch("restaurant_picker.core.auth.settings")
    def test_rejects_wrong_password(self, mock_settings) -> None:
        """A wrong password is a 401 carrying ``authenticated: false``."""
        mock_settings.auth.admin_password = "hunter2"

        with pytest.raises(AuthenticationAppError) as exc_info:
            check_admin_password("hunter3")

        assert exc_info.value.message == "Invalid password"
        assert exc_info.value.payload == {"authenticated": False}

    @patch("restaurant_picker.core.auth.settings")
    def test_missing_admin_password_is_configuration_error(self, mock_settings) -> None:
        mock_settings.auth.admin_password = None

        with pytest.raises(ConfigurationAppError) as exc_info:
            check_admin_password("anything")

        assert "ADMIN_PASSWORD" in exc_info.value.message


class TestCreateSessionToken:
    @patch("restaurant_picker.core.auth.settings")
    def test_token_is_valid_for_configured_ttl(self, mock_settings) -> None:
        mock_settings.auth.jwt_secret = SECRET
        mock_settings.auth.token_ttl_seconds = 3600

        token = create_session_token()

        assert tokens.verify(token, SECRET)
        payload = tokens.decode(token).payload
        assert payload["exp"] - payload["iat"] == 3600

    @patch("restaurant_picker.core.auth.settings")
    def test_missing_secret_is_configuration_error(self, mock_settings) -> None:
        mock_settings.auth.jwt_secret = None

        with pytest.raises(ConfigurationAppError) as exc_info:
            create_session_token()

        assert exc_info.value.message == "Server configuration error: JWT_SECRET not set"


class TestRequireAdminDependency:
    """Test the FastAPI dependency guarding write endpoints."""

    @pytest.mark.asyncio
    @patch("restaurant_picker.core.auth.settings")
    async def test_accepts_valid_token(self, mock_settings) -> None:
        mock_settings.auth.jwt_secret = SECRET
        token = tokens.issue(tokens.new_session_claims(), SECRET)

        # Should not raise
        await require_admin(authorization=f"Bearer {token}")

    @pytest.mark.asyncio
    @patch("restaurant_picker.core.auth.settings")
    @pytest.mark.parametrize("authorization", [None, "", "Basic abc", "Bearer not-a-token"])
    async def test_rejects_missing_or_malformed_header(self, mock_settings, authorization) -> None:
        mock_settings.auth.jwt_secret = SECRET

        with pytest.raises(AuthenticationAppError) as exc_info:
            await require_admin(authorization=authorization)

        assert exc_info.value.message == "Unauthorized"

    @pytest.mark.asyncio
    @patch("restaurant_picker.core.auth.settings")
    async def test_rejects_expired_token(self, mock_settings) -> None:
        mock_settings.auth.jwt_secret = SECRET
        claims = tokens.new_session_claims(3600, now=int(time.time()) - 7200)
        token = tokens.issue(claims, SECRET)

        with pytest.raises(AuthenticationAppError):
            await require_admin(authorization=f"Bearer {token}")

    @pytest.mark.asyncio
    @patch("restaurant_picker.core.auth.settings")
    async def test_rejects_token_signed_with_other_secret(self, mock_settings) -> None:
        mock_settings.auth.jwt_secret = SECRET
        token = tokens.issue(tokens.new_session_claims(), "another-secret")

        with pytest.raises(AuthenticationAppError):
            await require_admin(authorization=f"Bearer {token}")

    @pytest.mark.asyncio
    @patch("restaurant_picker.core.auth.settings")
    async def test_missing_secret_is_configuration_error(self, mock_settings) -> None:
        mock_settings.auth.jwt_secret = None
        token = tokens.issue(tokens.new_session_claims(), SECRET)

        with pytest.raises(ConfigurationAppError):
            await require_admin(authorization=f"Bearer {token}")

    @pytest.mark.asyncio
    @patch("restaurant_picker.core.auth.settings")
    async def test_missing_header_checked_before_secret(self, mock_settings) -> None:
        """Without a bearer header the answer is 401 even when the secret is unset."""
        mock_settings.auth.jwt_secret = None

        with pytest.raises(AuthenticationAppError):
            await require_admin(authorization=None)


class TestAuthEndpoint:
    """Test POST /auth end to end."""

    def test_correct_password_returns_token(self, client) -> None:
        resp = client.post("/auth", json={"password": settings.auth.admin_password})

        assert resp.status_code == 200
        body = resp.json()
        assert body["authenticated"] is True
        assert tokens.verify(body["token"], settings.auth.jwt_secret)
        payload = tokens.decode(body["token"]).payload
        assert payload["exp"] == payload["iat"] + 3600
        assert payload["sessionId"]

    def test_wrong_password(self, client) -> None:
        resp = client.post("/auth", json={"password": "wrong"})

        assert resp.status_code == 401
        body = resp.json()
        assert body["authenticated"] is False
        assert body["error"] == "Invalid password"

    @pytest.mark.parametrize("content", [b"{not json", b"[1, 2]", b'{"pass": "x"}', b""])
    def test_malformed_body(self, client, content: bytes) -> None:
        resp = client.post("/auth", content=content, headers={"Content-Type": "application/json"})

        assert resp.status_code == 400
        assert resp.json()["error"] == "Invalid request"
        assert resp.json()["authenticated"] is False

    def test_missing_signing_secret(self, client, monkeypatch) -> None:
        monkeypatch.setattr(settings.auth, "jwt_secret", None)

        resp = client.post("/auth", json={"password": settings.auth.admin_password})

        assert resp.status_code == 500
        assert "JWT_SECRET" in resp.json()["error"]
        assert resp.json()["authenticated"] is False

    def test_rate_limited_after_five_attempts(self, client) -> None:
        for _ in range(5):
            assert client.post("/auth", json={"password": "wrong"}).status_code == 401

        resp = client.post("/auth", json={"password": settings.auth.admin_password})

        assert resp.status_code == 429
        body = resp.json()
        assert "Too many" in body["error"]
        assert body["authenticated"] is False
        assert body["retryAfter"]
        assert 0 < int(resp.headers["Retry-After"]) <= 60

    def test_rate_limit_is_per_client_address(self, client) -> None:
        for _ in range(5):
            client.post("/auth", json={"password": "wrong"}, headers={"CF-Connecting-IP": "203.0.113.7"})

        blocked = client.post("/auth", json={"password": "wrong"}, headers={"CF-Connecting-IP": "203.0.113.7"})
        other = client.post("/auth", json={"password": "wrong"}, headers={"CF-Connecting-IP": "203.0.113.8"})

        assert blocked.status_code == 429
        assert other.status_code == 401
