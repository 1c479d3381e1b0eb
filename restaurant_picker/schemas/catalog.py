"""Pydantic schemas for catalog payloads and responses.

Request bodies are validated by ``restaurant_picker.utils.validation``
first; these models only run on payloads that already passed, and give the
service typed access while keeping unknown restaurant fields intact.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr

# Optional free-text fields; numbers are kept as submitted, never coerced.
FreeText = StrictStr | StrictInt | StrictFloat | None


class RestaurantPayload(BaseModel):
    """Restaurant as submitted by the admin UI (camelCase on the wire)."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: StrictStr | StrictInt | None = Field(
        default=None,
        description="Record id; generated on create when omitted. Legacy records use integers.",
    )
    name: str = Field(..., description="Display name.")
    food_types: list[Any] = Field(..., alias="foodTypes", description="Free-text cuisine labels.")
    service_types: list[str] = Field(
        ...,
        alias="serviceTypes",
        description="Any of takeout, delivery, dine-in, at-home.",
    )
    profiles: list[Any] | None = Field(default=None, description="Ids of the profiles this restaurant is tagged with.")
    dietary_restrictions: list[Any] | None = Field(default=None, alias="dietaryRestrictions")
    order_method: FreeText = Field(default=None, alias="orderMethod")
    menu_link: StrictStr | None = Field(default=None, alias="menuLink")
    address: FreeText = None
    phone: FreeText = None
    notes: FreeText = None

    def to_record(self) -> dict[str, Any]:
        """Stored form: exactly the submitted fields, camelCase keys."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class ProfilePayload(BaseModel):
    """Profile create/rename body."""

    id: str = Field(..., description="Lowercase letters, digits and hyphens.")
    name: str = Field(..., description="Display name.")

    def to_record(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name}


class AuthRequest(BaseModel):
    password: str


class AuthResponse(BaseModel):
    authenticated: bool
    token: str


class RestaurantResponse(BaseModel):
    success: bool = True
    restaurant: dict[str, Any]


class ProfileResponse(BaseModel):
    success: bool = True
    profile: dict[str, Any]


class DeletedResponse(BaseModel):
    success: bool = True
    deleted: dict[str, Any]


class ProfilesResponse(BaseModel):
    profiles: list[dict[str, Any]]
