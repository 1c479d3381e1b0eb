from __future__ import annotations

from restaurant_picker.api.routes.auth import router as auth_router
from restaurant_picker.api.routes.health import router as health_router
from restaurant_picker.api.routes.profiles import router as profiles_router
from restaurant_picker.api.routes.restaurants import router as restaurants_router

__all__ = ["auth_router", "health_router", "profiles_router", "restaurants_router"]
