"""
Products API - Test Configuration (conftest.py)
===============================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped, so no test sees another's writes):
    ├── test_settings: Settings with a known API key
    ├── store:         Freshly seeded ProductStore
    ├── test_app:      FastAPI app built around test_settings and store
    ├── test_client:   HTTPX AsyncClient talking to test_app
    └── auth_headers:  Headers carrying the valid API key
"""

import os

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set before any products_api import: main.py builds a module-level app
os.environ["API_KEY"] = "test-api-key"
os.environ["LOG_LEVEL"] = "WARNING"

from products_api.config import Settings  # noqa: E402
from products_api.main import create_app  # noqa: E402
from products_api.services.product_store import ProductStore  # noqa: E402

TEST_API_KEY = "test-api-key"


@pytest.fixture
def test_settings():
    return Settings(api_key=TEST_API_KEY, log_level="WARNING", _env_file=None)


@pytest.fixture
def store():
    """A store holding Laptop, Smartphone and Desk Chair, in that order."""
    return ProductStore.with_sample_data()


@pytest.fixture
def test_app(test_settings, store):
    return create_app(app_settings=test_settings, store=store)


@pytest_asyncio.fixture
async def test_client(test_app):
    """
    HTTPX AsyncClient configured to talk to the FastAPI app in-process.

    Usage:
        async def test_stats(test_client):
            response = await test_client.get("/api/products/stats")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def auth_headers():
    return {"X-API-Key": TEST_API_KEY}


@pytest.fixture
def new_product_body():
    return {
        "name": "Standing Desk",
        "description": "Height adjustable desk",
        "price": 349.5,
        "category": "Furniture",
    }
