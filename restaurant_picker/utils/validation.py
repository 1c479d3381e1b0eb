"""Payload validation for restaurants and profiles.

These checks run before any document is fetched. They are pure and never
raise for bad input: each returns a result object so the caller can report
every problem at once.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any

import httpx
from pydantic import AnyUrl, TypeAdapter, ValidationError

logger = logging.getLogger(__name__)

SERVICE_TYPES: tuple[str, ...] = ("takeout", "delivery", "dine-in", "at-home")

PROFILE_ID_PATTERN = re.compile(r"^[a-z0-9-]+$")

_url_adapter: TypeAdapter[AnyUrl] = TypeAdapter(AnyUrl)


@dataclass(frozen=True)
class ServiceTypeValidation:
    valid: bool
    invalid_types: list[Any] = field(default_factory=list)


@dataclass(frozen=True)
class UrlValidation:
    valid: bool
    error: str | None = None


@dataclass(frozen=True)
class RestaurantValidation:
    valid: bool
    errors: list[str] = field(default_factory=list)


def validate_service_types(service_types: list[Any]) -> ServiceTypeValidation:
    """Return the entries of ``service_types`` outside the allowed set.

    Examples:
        >>> validate_service_types(["takeout", "invalid"]).invalid_types
        ['invalid']
    """
    invalid = [value for value in service_types if value not in SERVICE_TYPES]
    return ServiceTypeValidation(valid=not invalid, invalid_types=invalid)


def validate_profile_id(profile_id: Any) -> bool:
    """Profile ids are lowercase letters, digits and hyphens only."""

    return isinstance(profile_id, str) and PROFILE_ID_PATTERN.fullmatch(profile_id) is not None


def is_absolute_url(url: str) -> bool:
    try:
        _url_adapter.validate_python(url)
    except ValidationError:
        return False
    return True


async def validate_url(
    url: str | None,
    *,
    check_reachable: bool = False,
    client: httpx.AsyncClient | None = None,
    timeout_seconds: float = 5.0,
) -> UrlValidation:
    """Validate an optional URL field.

    An empty value is valid (the field is optional). Otherwise the value
    must be an absolute URL. With ``check_reachable`` a HEAD request must
    also return a success status.

    Args:
        url: Candidate URL.
        check_reachable: Probe the URL with a HEAD request.
        client: Optional client to issue the probe with.
        timeout_seconds: Probe timeout when no client is supplied.

    Returns:
        UrlValidation with ``error`` set when invalid.
    """
    if not url:
        return UrlValidation(valid=True)

    if not isinstance(url, str) or not is_absolute_url(url):
        return UrlValidation(valid=False, error="Invalid URL format")

    if not check_reachable:
        return UrlValidation(valid=True)

    try:
        if client is not None:
            response = await client.head(url)
        else:
            async with httpx.AsyncClient(timeout=timeout_seconds, follow_redirects=True) as probe:
                response = await probe.head(url)
    except httpx.HTTPError as exc:
        logger.info(
            "validation.url_probe_failed",
            extra={"error_type": type(exc).__name__},
        )
        return UrlValidation(valid=False, error="URL is not reachable")

    if not response.is_success:
        return UrlValidation(valid=False, error="URL is not reachable")
    return UrlValidation(valid=True)


def _is_non_empty_list(value: Any) -> bool:
    return isinstance(value, list) and len(value) > 0


def validate_restaurant_data(restaurant: dict[str, Any]) -> RestaurantValidation:
    """Check a restaurant payload, accumulating every error.

    Args:
        restaurant: Raw JSON object from the request body.

    Returns:
        RestaurantValidation; ``valid`` is True only when ``errors`` is empty.
    """
    errors: list[str] = []

    name = restaurant.get("name")
    if not isinstance(name, str) or not name.strip():
        errors.append("Restaurant name is required")

    if not _is_non_empty_list(restaurant.get("foodTypes")):
        errors.append("At least one food type is required")

    service_types = restaurant.get("serviceTypes")
    if not _is_non_empty_list(service_types):
        errors.append("At least one service type is required")

    if isinstance(service_types, list):
        result = validate_service_types(service_types)
        if not result.valid:
            errors.append(
                "Invalid service types: " + ", ".join(str(value) for value in result.invalid_types)
            )

    if restaurant.get("profiles") is not None and not isinstance(restaurant["profiles"], list):
        errors.append("Profiles must be an array")

    if restaurant.get("dietaryRestrictions") is not None and not isinstance(restaurant["dietaryRestrictions"], list):
        errors.append("Dietary restrictions must be an array")

    menu_link = restaurant.get("menuLink")
    if menu_link not in (None, "") and (not isinstance(menu_link, str) or not is_absolute_url(menu_link)):
        errors.append("Menu link must be a valid URL")

    return RestaurantValidation(valid=not errors, errors=errors)
