from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request, Response

from restaurant_picker.api.dependencies import get_catalog_service, read_json_object
from restaurant_picker.core.auth import require_admin
from restaurant_picker.core.config import settings
from restaurant_picker.schemas.catalog import DeletedResponse, RestaurantResponse
from restaurant_picker.services.catalog_service import CatalogService

router = APIRouter(tags=["Restaurants"])


@router.get("/restaurants")
async def list_restaurants(
    response: Response,
    catalog: CatalogService = Depends(get_catalog_service),
) -> dict[str, Any]:
    """Return the whole document: ``restaurants`` and ``profiles``.

    Public and cacheable for a short time; readers may briefly see a
    document that predates the latest write.
    """
    document = await catalog.get_document()
    response.headers["Cache-Control"] = f"public, max-age={settings.app.cache_max_age_seconds}"
    return document


@router.post(
    "/restaurants",
    response_model=RestaurantResponse,
    dependencies=[Depends(require_admin)],
)
async def create_restaurant(
    request: Request,
    catalog: CatalogService = Depends(get_catalog_service),
) -> RestaurantResponse:
    """Add a restaurant; an ``id`` is generated when the body has none."""

    body = await read_json_object(request)
    return RestaurantResponse(restaurant=await catalog.create_restaurant(body))


@router.put(
    "/restaurants",
    response_model=RestaurantResponse,
    dependencies=[Depends(require_admin)],
)
async def update_restaurant(
    request: Request,
    catalog: CatalogService = Depends(get_catalog_service),
) -> RestaurantResponse:
    """Replace the restaurant whose ``id`` matches the body."""

    body = await read_json_object(request)
    return RestaurantResponse(restaurant=await catalog.update_restaurant(body))


@router.delete(
    "/restaurants/{restaurant_id}",
    response_model=DeletedResponse,
    dependencies=[Depends(require_admin)],
)
async def delete_restaurant(
    restaurant_id: str,
    catalog: CatalogService = Depends(get_catalog_service),
) -> DeletedResponse:
    return DeletedResponse(deleted=await catalog.delete_restaurant(restaurant_id))
