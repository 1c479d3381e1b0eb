"""Application factory for the FastAPI app.

Centralizes app construction (metadata, middleware, handlers, routers) so
tests can build isolated instances.
"""

from __future__ import annotations

from fastapi import FastAPI

from restaurant_picker.api.routes import auth_router, health_router, profiles_router, restaurants_router
from restaurant_picker.core.config import settings
from restaurant_picker.core.exception_handlers import setup_exception_handlers
from restaurant_picker.core.logging import configure_logging
from restaurant_picker.core.middleware import cors_middleware, request_id_middleware
from restaurant_picker.core.openapi import apply_openapi_customizations


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance."""

    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Restaurant Picker API",
        description=(
            "Admin backend for the restaurant picker. Restaurants and dining "
            "profiles live in a single JSON document in a GitHub repository; "
            "writes require a session token from POST /auth and are guarded "
            "by the document's version tag."
        ),
        version="0.1.0",
        debug=settings.app.debug,
    )

    # Registered last runs first: request id wraps CORS.
    app.middleware("http")(cors_middleware)
    app.middleware("http")(request_id_middleware)

    setup_exception_handlers(app)

    app.include_router(auth_router)
    app.include_router(restaurants_router)
    app.include_router(profiles_router)
    app.include_router(health_router)

    apply_openapi_customizations(app)

    return app
