"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file

Secrets (admin password, signing secret, GitHub token) are optional at
startup. Requests that need a missing secret fail loudly with a
configuration error instead of the whole process refusing to boot.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename
_env_file = str(_env_path) if _env_path.is_file() else None


# Nested BaseSettings don't inherit env_file, so populate os.environ first.
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="Log format: json or plain")
    output: str = Field("stdout", description="Log destination: stdout or file")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int = Field(
        10 * 1024 * 1024,
        description="Rotate the log file after this many bytes (0 disables rotation)",
    )
    backup_count: int = Field(5, description="Number of rotated log files to keep")
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to read and echo the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class AuthSettings(BaseSettings):
    """Administrator authentication and session token configuration."""

    admin_password: str | None = Field(
        None,
        validation_alias=AliasChoices("ADMIN_PASSWORD", "AUTH_ADMIN_PASSWORD"),
        description="Administrative credential accepted by POST /auth",
    )
    jwt_secret: str | None = Field(
        None,
        validation_alias=AliasChoices("JWT_SECRET", "AUTH_JWT_SECRET"),
        description="HMAC-SHA256 signing secret for session tokens (32+ chars recommended)",
    )
    token_ttl_seconds: int = Field(
        3600,
        description="Session token lifetime in seconds",
        ge=1,
    )
    rate_limit_requests: int = Field(
        5,
        description="Maximum authentication attempts per window and client",
        ge=1,
    )
    rate_limit_window_seconds: int = Field(
        60,
        description="Authentication rate limit window in seconds",
        ge=1,
    )
    client_ip_header: str = Field(
        "CF-Connecting-IP",
        description="Header carrying the client address set by the edge proxy",
    )

    model_config = SettingsConfigDict(
        env_prefix="AUTH_",
        case_sensitive=False,
        populate_by_name=True,
    )


class StoreSettings(BaseSettings):
    """Versioned document store configuration."""

    backend: str = Field(
        "github",
        description="Document store backend: github or memory",
    )
    github_token: str | None = Field(
        None,
        validation_alias=AliasChoices("GITHUB_TOKEN", "STORE_GITHUB_TOKEN"),
        description="Personal access token with contents write scope",
    )
    github_repo: str | None = Field(
        None,
        validation_alias=AliasChoices("GITHUB_REPO", "STORE_GITHUB_REPO"),
        description="Repository holding the document, in owner/name form",
    )
    github_branch: str = Field(
        "main",
        validation_alias=AliasChoices("GITHUB_BRANCH", "STORE_GITHUB_BRANCH"),
        description="Branch the document is read from and committed to",
    )
    data_file: str = Field(
        "restaurants.json",
        description="Path of the JSON document inside the repository",
    )
    api_url: str = Field(
        "https://api.github.com",
        description="GitHub REST API base URL",
    )
    timeout_seconds: float = Field(
        10.0,
        description="Timeout for each store request in seconds",
        gt=0,
    )
    user_agent: str = Field(
        "Restaurant-Picker-App",
        description="User-Agent sent to the GitHub API",
    )
    seed_file: str | None = Field(
        None,
        description="Optional JSON file used to seed the memory backend",
    )

    model_config = SettingsConfigDict(
        env_prefix="STORE_",
        case_sensitive=False,
        populate_by_name=True,
    )


class AppSettings(BaseSettings):
    """HTTP surface configuration."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )
    allowed_origin: str = Field(
        "*",
        validation_alias=AliasChoices("ALLOWED_ORIGIN", "APP_ALLOWED_ORIGIN"),
        description="Value of Access-Control-Allow-Origin on every response",
    )
    cache_max_age_seconds: int = Field(
        60,
        description="Cache-Control max-age advertised on public read endpoints",
        ge=0,
    )
    read_cache_ttl_seconds: int = Field(
        30,
        description="Server-side cache TTL for the fetched document (0 disables)",
        ge=0,
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
        populate_by_name=True,
    )


def _build_log_settings() -> LogSettings:
    return LogSettings()


def _build_auth_settings() -> AuthSettings:
    return AuthSettings()  # type: ignore[call-arg]


def _build_store_settings() -> StoreSettings:
    return StoreSettings()  # type: ignore[call-arg]


def _build_app_settings() -> AppSettings:
    return AppSettings()  # type: ignore[call-arg]


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.

    Environments:
    - development: Local development
    - testing: Automated tests (uses .env.testing)
    - staging: Pre-production (uses .env.staging)
    - production: Production deployment (uses .env.production)
    """

    app_env: str = APP_ENV
    log: LogSettings = Field(default_factory=_build_log_settings)
    auth: AuthSettings = Field(default_factory=_build_auth_settings)
    store: StoreSettings = Field(default_factory=_build_store_settings)
    app: AppSettings = Field(default_factory=_build_app_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


settings = Settings()
