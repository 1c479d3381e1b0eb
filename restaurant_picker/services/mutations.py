"""Record mutation engine.

Each function applies exactly one change to a document that was just
fetched for the current request, and returns the affected record. The
caller writes the whole document back with a single compare-and-swap; if
that write fails the mutated copy is simply dropped.

Collection-level rules live here (existence, uniqueness, the reserved
``all`` profile, cascades). Field-level payload checks happen earlier in
``restaurant_picker.utils.validation``.
"""

from __future__ import annotations

import uuid
from typing import Any

from restaurant_picker.core.errors import NotFoundAppError, ValidationAppError

RESERVED_PROFILE_ID = "all"
RESERVED_PROFILE = {"id": RESERVED_PROFILE_ID, "name": "All Restaurants"}

Document = dict[str, Any]
Record = dict[str, Any]


def generate_restaurant_id() -> str:
    """Random UUID4 string: ``xxxxxxxx-xxxx-4xxx-[89ab]xxx-xxxxxxxxxxxx``."""

    return str(uuid.uuid4())


def _restaurants(document: Document) -> list[Record]:
    restaurants = document.get("restaurants")
    if not isinstance(restaurants, list):
        restaurants = []
        document["restaurants"] = restaurants
    return restaurants


def _find_restaurant_index(document: Document, restaurant_id: Any) -> int | None:
    # Legacy records use integer ids, generated ones are strings.
    wanted = str(restaurant_id)
    for index, restaurant in enumerate(_restaurants(document)):
        if str(restaurant.get("id")) == wanted:
            return index
    return None


def _find_profile_index(profiles: list[Record], profile_id: str) -> int | None:
    for index, profile in enumerate(profiles):
        if profile.get("id") == profile_id:
            return index
    return None


def _reject_reserved(profile_id: str, action: str) -> None:
    if profile_id == RESERVED_PROFILE_ID:
        raise ValidationAppError(
            code="reserved_profile",
            message=f'Cannot {action} the default "All Restaurants" profile',
            details={"record_id": profile_id},
        )


def add_restaurant(document: Document, restaurant: Record) -> Record:
    """Append ``restaurant``, generating an id when it has none.

    Raises:
        ValidationAppError: If a client-supplied id is already taken.
    """
    if not restaurant.get("id"):
        restaurant["id"] = generate_restaurant_id()
    elif _find_restaurant_index(document, restaurant["id"]) is not None:
        raise ValidationAppError(
            code="duplicate_restaurant_id",
            message="Restaurant with this ID already exists",
            details={"record_id": str(restaurant["id"])},
        )

    _restaurants(document).append(restaurant)
    return restaurant


def replace_restaurant(document: Document, restaurant: Record) -> Record:
    """Replace the stored restaurant with the same id, keeping its position.

    Raises:
        ValidationAppError: If ``restaurant`` has no id.
        NotFoundAppError: If no stored restaurant has that id.
    """
    if not restaurant.get("id"):
        raise ValidationAppError(
            code="missing_restaurant_id",
            message="Restaurant ID is required for updates",
        )

    index = _find_restaurant_index(document, restaurant["id"])
    if index is None:
        raise NotFoundAppError(
            code="restaurant_not_found",
            message="Restaurant not found",
            details={"record_id": str(restaurant["id"])},
        )

    _restaurants(document)[index] = restaurant
    return restaurant


def remove_restaurant(document: Document, restaurant_id: Any) -> Record:
    """Remove and return the restaurant with ``restaurant_id``.

    Raises:
        NotFoundAppError: If no stored restaurant has that id.
    """
    index = _find_restaurant_index(document, restaurant_id)
    if index is None:
        raise NotFoundAppError(
            code="restaurant_not_found",
            message="Restaurant not found",
            details={"record_id": str(restaurant_id)},
        )
    return _restaurants(document).pop(index)


def add_profile(document: Document, profile: Record) -> Record:
    """Append a new profile.

    The profiles collection is created with the reserved ``all`` entry when
    the document has none yet.

    Raises:
        ValidationAppError: If the id is reserved or already exists.
    """
    if profile["id"] == RESERVED_PROFILE_ID:
        raise ValidationAppError(
            code="reserved_profile",
            message="Profile ID is reserved and cannot be used",
            details={"record_id": profile["id"]},
        )

    profiles = document.get("profiles")
    if not isinstance(profiles, list):
        profiles = [dict(RESERVED_PROFILE)]
        document["profiles"] = profiles

    if _find_profile_index(profiles, profile["id"]) is not None:
        raise ValidationAppError(
            code="duplicate_profile_id",
            message="Profile with this ID already exists",
            details={"record_id": profile["id"]},
        )

    profiles.append(profile)
    return profile


def rename_profile(document: Document, profile_id: str, name: str) -> Record:
    """Change the name of an existing profile; its id never changes.

    Raises:
        ValidationAppError: For the reserved ``all`` profile.
        NotFoundAppError: If the profile does not exist.
    """
    _reject_reserved(profile_id, "edit")

    profiles = document.get("profiles")
    index = _find_profile_index(profiles, profile_id) if isinstance(profiles, list) else None
    if index is None:
        raise NotFoundAppError(
            code="profile_not_found",
            message="Profile not found",
            details={"record_id": profile_id},
        )

    profile = profiles[index]
    profile["name"] = name
    return profile


def remove_profile(document: Document, profile_id: str) -> Record:
    """Remove a profile and drop its id from every restaurant's ``profiles``.

    Both changes land in the same document so they are written together.

    Raises:
        ValidationAppError: For the reserved ``all`` profile.
        NotFoundAppError: If there is no profiles collection or no such profile.
    """
    _reject_reserved(profile_id, "delete")

    profiles = document.get("profiles")
    if not isinstance(profiles, list):
        raise NotFoundAppError(code="profiles_missing", message="No profiles found")

    index = _find_profile_index(profiles, profile_id)
    if index is None:
        raise NotFoundAppError(
            code="profile_not_found",
            message="Profile not found",
            details={"record_id": profile_id},
        )

    deleted = profiles.pop(index)

    for restaurant in document.get("restaurants") or []:
        tags = restaurant.get("profiles")
        if isinstance(tags, list):
            restaurant["profiles"] = [tag for tag in tags if tag != profile_id]

    return deleted
