"""Application-level exception types.

Every failure the API can report is expressed as an ``AppError`` subclass.
The global exception handlers map each subclass to one HTTP status, so
services and adapters never build HTTP responses themselves.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    hint: str
    http_status: int
    upstream_body: str
    retry_after: int
    record_id: str
    errors: list[str]
    missing_setting: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message, returned as ``error``.
        details: Optional structured details for logs.
        payload: Extra top-level fields merged into the error response body.
    """

    code: str
    message: str
    details: ErrorDetails | None = None
    payload: dict[str, Any] | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when a request body or path parameter is rejected."""


class AuthenticationAppError(AppError):
    """Raised when a password or bearer token is missing or invalid."""


class NotFoundAppError(AppError):
    """Raised when an update/delete targets an unknown record."""


class RateLimitAppError(AppError):
    """Raised when a client exhausted its request budget."""


class StoreAppError(AppError):
    """Raised when the document store fails or rejects a write."""


class ConfigurationAppError(AppError):
    """Raised when a required setting (e.g. the signing secret) is absent."""
