"""CORS headers shared by the middleware and the fallback error handler."""

from __future__ import annotations

from restaurant_picker.core.config import settings

ALLOWED_METHODS = "GET, POST, PUT, DELETE, OPTIONS"
ALLOWED_HEADERS = "Content-Type, Authorization"


def build_cors_headers() -> dict[str, str]:
    return {
        "Access-Control-Allow-Origin": settings.app.allowed_origin or "*",
        "Access-Control-Allow-Methods": ALLOWED_METHODS,
        "Access-Control-Allow-Headers": ALLOWED_HEADERS,
    }
