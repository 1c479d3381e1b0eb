"""OpenAPI customization.

Adds an HTTP bearer security scheme and marks which operations need it:
writes to ``/restaurants`` and ``/profiles`` are protected; reads,
``/auth`` and ``/health`` are public.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

PROTECTED_METHODS = frozenset({"post", "put", "delete"})
PUBLIC_PATHS = frozenset({"/auth", "/health"})

TAGS_METADATA = [
    {"name": "Auth", "description": "Exchange the admin password for a session token."},
    {"name": "Restaurants", "description": "Restaurant records."},
    {"name": "Profiles", "description": "Dining profiles used to filter restaurants."},
    {"name": "Health", "description": "Liveness check."},
]


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation to add bearer auth and tags."""

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        schema = original_openapi()

        components = schema.setdefault("components", {})
        security_schemes = components.setdefault("securitySchemes", {})
        security_schemes.setdefault(
            "BearerAuth",
            {
                "type": "http",
                "scheme": "bearer",
                "bearerFormat": "JWT",
                "description": "Session token returned by POST /auth.",
            },
        )

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        for tag in TAGS_METADATA:
            if tag["name"] not in existing_tag_names:
                tags.append(tag)

        for path, methods in schema.get("paths", {}).items():
            for method, operation in methods.items():
                if not isinstance(operation, dict):
                    continue
                if method in PROTECTED_METHODS and path not in PUBLIC_PATHS:
                    operation["security"] = [{"BearerAuth": []}]
                else:
                    operation["security"] = []

        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
