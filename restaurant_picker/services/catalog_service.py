"""Catalog service: restaurants and profiles over the versioned document.

Every write follows the same pipeline:

1. validate the raw payload (no store access on bad input)
2. fetch the current document and its version tag
3. apply one change with ``restaurant_picker.services.mutations``
4. write the whole document back, guarded by the fetched version tag

A failed write (including a version conflict) is propagated unchanged; the
mutated copy is discarded and nothing is retried. Clients retry from a
fresh fetch.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from pydantic import ValidationError

from restaurant_picker.adapters.store.base import AbstractDocumentStore
from restaurant_picker.core.errors import ValidationAppError
from restaurant_picker.schemas.catalog import ProfilePayload, RestaurantPayload
from restaurant_picker.services import mutations
from restaurant_picker.utils.simple_cache import SimpleTTLCache
from restaurant_picker.utils.validation import validate_profile_id, validate_restaurant_data

logger = logging.getLogger(__name__)

DOCUMENT_CACHE_KEY = "document"

Mutation = Callable[[dict[str, Any]], tuple[dict[str, Any], str]]


def _pydantic_messages(exc: ValidationError) -> str:
    # Union members add their tag to the location; report the field only.
    return ", ".join(f"{error['loc'][0]}: {error['msg']}" if error["loc"] else error["msg"] for error in exc.errors())


def parse_restaurant(raw: dict[str, Any]) -> RestaurantPayload:
    """Validate a raw restaurant body and build the typed payload.

    Raises:
        ValidationAppError: With every validation error joined by ", ".
    """
    validation = validate_restaurant_data(raw)
    if not validation.valid:
        raise ValidationAppError(
            code="invalid_restaurant",
            message=", ".join(validation.errors),
            details={"errors": validation.errors},
        )

    try:
        return RestaurantPayload.model_validate(raw)
    except ValidationError as exc:
        raise ValidationAppError(code="invalid_restaurant", message=_pydantic_messages(exc)) from exc


def parse_profile(raw: dict[str, Any], *, check_id_format: bool) -> ProfilePayload:
    """Validate a raw profile body.

    Raises:
        ValidationAppError: On missing fields or a malformed id.
    """
    if not raw.get("id") or not raw.get("name"):
        raise ValidationAppError(
            code="missing_profile_fields",
            message="Missing required fields: id and name",
        )

    if check_id_format and not validate_profile_id(raw["id"]):
        raise ValidationAppError(
            code="invalid_profile_id",
            message="Profile ID must contain only lowercase letters, numbers, and hyphens",
        )

    try:
        return ProfilePayload.model_validate(raw)
    except ValidationError as exc:
        raise ValidationAppError(code="invalid_profile", message=_pydantic_messages(exc)) from exc


class CatalogService:
    """Reads and writes the restaurant/profile document.

    Attributes:
        store: Versioned document store.
        cache: Short-lived cache for public reads, cleared after each write.
    """

    def __init__(self, store: AbstractDocumentStore, cache: SimpleTTLCache | None = None) -> None:
        self.store = store
        self.cache = cache if cache is not None else SimpleTTLCache(ttl_seconds=0)

    async def get_document(self) -> dict[str, Any]:
        """Return the whole document, possibly from the read cache."""

        cached = self.cache.get(DOCUMENT_CACHE_KEY)
        if cached is not None:
            return cached

        fetched = await self.store.fetch_document()
        self.cache.set(DOCUMENT_CACHE_KEY, fetched.document)
        return fetched.document

    async def list_profiles(self) -> list[dict[str, Any]]:
        document = await self.get_document()
        return document.get("profiles") or []

    async def _commit(self, event: str, mutate: Mutation) -> dict[str, Any]:
        fetched = await self.store.fetch_document()
        record, message = mutate(fetched.document)
        await self.store.write_document(fetched.document, fetched.version, message)
        self.cache.clear()

        logger.info(
            event,
            extra={"record_id": str(record.get("id")), "base_version": fetched.version},
        )
        return record

    async def create_restaurant(self, raw: dict[str, Any]) -> dict[str, Any]:
        record = parse_restaurant(raw).to_record()

        def mutate(document: dict[str, Any]) -> tuple[dict[str, Any], str]:
            added = mutations.add_restaurant(document, record)
            return added, f"Add restaurant: {added['name']}"

        return await self._commit("catalog.restaurant_created", mutate)

    async def update_restaurant(self, raw: dict[str, Any]) -> dict[str, Any]:
        record = parse_restaurant(raw).to_record()
        if not record.get("id"):
            raise ValidationAppError(
                code="missing_restaurant_id",
                message="Restaurant ID is required for updates",
            )

        def mutate(document: dict[str, Any]) -> tuple[dict[str, Any], str]:
            replaced = mutations.replace_restaurant(document, record)
            return replaced, f"Update restaurant: {replaced['name']}"

        return await self._commit("catalog.restaurant_updated", mutate)

    async def delete_restaurant(self, restaurant_id: str) -> dict[str, Any]:
        def mutate(document: dict[str, Any]) -> tuple[dict[str, Any], str]:
            deleted = mutations.remove_restaurant(document, restaurant_id)
            return deleted, f"Delete restaurant: {deleted.get('name')}"

        return await self._commit("catalog.restaurant_deleted", mutate)

    async def create_profile(self, raw: dict[str, Any]) -> dict[str, Any]:
        record = parse_profile(raw, check_id_format=True).to_record()
        if record["id"] == mutations.RESERVED_PROFILE_ID:
            raise ValidationAppError(
                code="reserved_profile",
                message="Profile ID is reserved and cannot be used",
            )

        def mutate(document: dict[str, Any]) -> tuple[dict[str, Any], str]:
            added = mutations.add_profile(document, record)
            return added, f"Add profile: {added['name']}"

        return await self._commit("catalog.profile_created", mutate)

    async def update_profile(self, raw: dict[str, Any]) -> dict[str, Any]:
        payload = parse_profile(raw, check_id_format=False)
        if payload.id == mutations.RESERVED_PROFILE_ID:
            raise ValidationAppError(
                code="reserved_profile",
                message='Cannot edit the default "All Restaurants" profile',
            )

        def mutate(document: dict[str, Any]) -> tuple[dict[str, Any], str]:
            renamed = mutations.rename_profile(document, payload.id, payload.name)
            return renamed, f"Update profile: {payload.name}"

        return await self._commit("catalog.profile_updated", mutate)

    async def delete_profile(self, profile_id: str) -> dict[str, Any]:
        if profile_id == mutations.RESERVED_PROFILE_ID:
            raise ValidationAppError(
                code="reserved_profile",
                message='Cannot delete the default "All Restaurants" profile',
            )

        def mutate(document: dict[str, Any]) -> tuple[dict[str, Any], str]:
            deleted = mutations.remove_profile(document, profile_id)
            return deleted, f"Delete profile: {deleted.get('name')}"

        return await self._commit("catalog.profile_deleted", mutate)
