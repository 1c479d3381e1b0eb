"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before anything imports
``restaurant_picker.core.config`` so the global settings object is built
with test credentials and the in-memory document store.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["APP_ENV"] = "testing"
os.environ["ADMIN_PASSWORD"] = "test-admin-password"
os.environ["JWT_SECRET"] = "test-jwt-secret-0123456789abcdef0123"
os.environ["STORE_BACKEND"] = "memory"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from restaurant_picker.adapters.rate_limit.in_memory import InMemoryRateLimiter
from restaurant_picker.adapters.store.memory import InMemoryDocumentStore
from restaurant_picker.api.dependencies import get_catalog_service
from restaurant_picker.core import tokens
from restaurant_picker.core.app_factory import create_app
from restaurant_picker.core.config import settings
from restaurant_picker.core.rate_limit import get_rate_limiter
from restaurant_picker.services.catalog_service import CatalogService

UUID4_PATTERN = r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$"


@pytest.fixture
def seed_document() -> dict[str, Any]:
    """A small document with a legacy integer id and two tagged restaurants."""
    return {
        "profiles": [
            {"id": "all", "name": "All Restaurants"},
            {"id": "quick-lunch", "name": "Quick Lunch"},
            {"id": "date-night", "name": "Date Night"},
        ],
        "restaurants": [
            {
                "id": 1,
                "name": "Pizza Palace",
                "foodTypes": ["Italian", "Pizza"],
                "serviceTypes": ["takeout", "delivery"],
                "profiles": ["quick-lunch", "date-night"],
                "menuLink": "https://pizza.example.com/menu",
            },
            {
                "id": "0b5f2c7e-3a61-4f4e-9d1c-6a0e1f6f2b11",
                "name": "Taco Town",
                "foodTypes": ["Mexican"],
                "serviceTypes": ["dine-in"],
                "profiles": ["quick-lunch"],
            },
        ],
    }


@pytest.fixture
def store(seed_document: dict[str, Any]) -> InMemoryDocumentStore:
    return InMemoryDocumentStore(seed_document)


@pytest.fixture
def catalog(store: InMemoryDocumentStore) -> CatalogService:
    return CatalogService(store)


@pytest.fixture
def limiter() -> InMemoryRateLimiter:
    return InMemoryRateLimiter()


@pytest.fixture
def app(catalog: CatalogService, limiter: InMemoryRateLimiter) -> FastAPI:
    """Application wired to the in-memory store and a fresh rate limiter."""
    application = create_app()
    application.dependency_overrides[get_catalog_service] = lambda: catalog
    application.dependency_overrides[get_rate_limiter] = lambda: limiter
    return application


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Authorization header carrying a freshly issued session token."""
    token = tokens.issue(tokens.new_session_claims(), settings.auth.jwt_secret)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def restaurant_payload() -> dict[str, Any]:
    return {
        "name": "Sushi Spot",
        "foodTypes": ["Japanese", "Sushi"],
        "serviceTypes": ["dine-in", "takeout"],
        "profiles": ["date-night"],
        "address": "1 Main St",
        "notes": "Ask for the omakase",
    }
