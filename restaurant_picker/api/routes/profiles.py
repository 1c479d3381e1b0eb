from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response

from restaurant_picker.api.dependencies import get_catalog_service, read_json_object
from restaurant_picker.core.auth import require_admin
from restaurant_picker.core.config import settings
from restaurant_picker.schemas.catalog import DeletedResponse, ProfileResponse, ProfilesResponse
from restaurant_picker.services.catalog_service import CatalogService

router = APIRouter(tags=["Profiles"])


@router.get("/profiles", response_model=ProfilesResponse)
async def list_profiles(
    response: Response,
    catalog: CatalogService = Depends(get_catalog_service),
) -> ProfilesResponse:
    profiles = await catalog.list_profiles()
    response.headers["Cache-Control"] = f"public, max-age={settings.app.cache_max_age_seconds}"
    return ProfilesResponse(profiles=profiles)


@router.post(
    "/profiles",
    response_model=ProfileResponse,
    dependencies=[Depends(require_admin)],
)
async def create_profile(
    request: Request,
    catalog: CatalogService = Depends(get_catalog_service),
) -> ProfileResponse:
    """Add a profile. The id is chosen by the client and cannot change later."""

    body = await read_json_object(request)
    return ProfileResponse(profile=await catalog.create_profile(body))


@router.put(
    "/profiles",
    response_model=ProfileResponse,
    dependencies=[Depends(require_admin)],
)
async def update_profile(
    request: Request,
    catalog: CatalogService = Depends(get_catalog_service),
) -> ProfileResponse:
    """Rename a profile; only ``name`` is taken from the body."""

    body = await read_json_object(request)
    return ProfileResponse(profile=await catalog.update_profile(body))


@router.delete(
    "/profiles/{profile_id}",
    response_model=DeletedResponse,
    dependencies=[Depends(require_admin)],
)
async def delete_profile(
    profile_id: str,
    catalog: CatalogService = Depends(get_catalog_service),
) -> DeletedResponse:
    """Delete a profile and untag it from every restaurant in the same write."""

    return DeletedResponse(deleted=await catalog.delete_profile(profile_id))
