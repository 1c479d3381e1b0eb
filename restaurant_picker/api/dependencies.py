"""Shared FastAPI dependencies for the route modules."""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import Request

from restaurant_picker.adapters.store.factory import create_document_store
from restaurant_picker.core.config import settings
from restaurant_picker.core.errors import ValidationAppError
from restaurant_picker.services.catalog_service import CatalogService
from restaurant_picker.utils.simple_cache import SimpleTTLCache

logger = logging.getLogger(__name__)

_catalog_service: CatalogService | None = None


def get_catalog_service() -> CatalogService:
    """Return the process-wide catalog service.

    Built lazily so a misconfigured store only fails the requests that need
    it (with a configuration error) rather than the whole process.
    """

    global _catalog_service
    if _catalog_service is None:
        _catalog_service = CatalogService(
            store=create_document_store(),
            cache=SimpleTTLCache(ttl_seconds=settings.app.read_cache_ttl_seconds),
        )
    return _catalog_service


async def read_json_object(
    request: Request,
    *,
    error_message: str = "Invalid request body",
    error_payload: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Parse the request body as a JSON object.

    Raises:
        ValidationAppError: If the body is not valid JSON or not an object.
    """
    try:
        body = json.loads(await request.body())
    except (ValueError, UnicodeDecodeError) as exc:
        logger.info("request.invalid_json", extra={"request_path": request.url.path})
        raise ValidationAppError(code="invalid_json", message=error_message, payload=error_payload) from exc

    if not isinstance(body, dict):
        raise ValidationAppError(code="invalid_json", message=error_message, payload=error_payload)
    return body
