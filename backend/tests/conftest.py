"""
Storefront Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every fixture works on pytest's tmp_path, so each test gets fresh
       collection files and an empty upload directory.

Fixtures:
    ├── test_settings:   Settings pointing at temporary files
    ├── products_store:  Opened DocumentStore for products
    ├── orders_store:    Opened DocumentStore for orders
    ├── test_app:        App from create_app() with its lifespan entered
    ├── test_client:     HTTPX AsyncClient bound to test_app
    └── sample_products: Product payloads with distinct prices
"""

import os
import tempfile

# Keep the module-level app (storefront.main:app) away from real data
# directories and quiet during tests. Must run before storefront imports.
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="storefront_test_uploads_"))

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from storefront.config import Settings
from storefront.database import DocumentStore


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        products_db_path=str(tmp_path / "db" / "products.db"),
        orders_db_path=str(tmp_path / "db" / "orders.db"),
        upload_dir=str(tmp_path / "uploads"),
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def products_store(tmp_path):
    store = DocumentStore("products", str(tmp_path / "products.db"))
    await store.connect()
    yield store
    await store.dispose()


@pytest_asyncio.fixture
async def orders_store(tmp_path):
    store = DocumentStore("orders", str(tmp_path / "orders.db"))
    await store.connect()
    yield store
    await store.dispose()


@pytest_asyncio.fixture
async def test_app(test_settings):
    """
    Application wired to temporary files.

    ASGITransport does not send lifespan events, so the lifespan context is
    entered here explicitly; it opens the stores and builds the services.
    """
    from storefront.main import create_app

    app = create_app(test_settings)
    async with app.router.lifespan_context(app):
        yield app


@pytest_asyncio.fixture
async def test_client(test_app):
    """
    HTTPX AsyncClient talking to the app in-process.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def sample_products():
    return [
        {"name": "Oak Desk", "price": 250.0, "category": "furniture", "description": "Solid oak writing desk"},
        {"name": "Desk Lamp", "price": 35.0, "category": "lighting", "description": "LED lamp with oak base"},
        {"name": "Bookshelf", "price": 120.0, "category": "furniture"},
        {"name": "Floor Lamp", "price": 80.0, "category": "lighting", "description": "Tall brass lamp"},
        {"name": "Office Chair", "price": 150.0, "category": "furniture", "description": "Ergonomic chair"},
        {"name": "Pendant Light", "price": 60.0, "category": "lighting", "description": "Glass pendant"},
        {"name": "Side Table", "price": 45.0, "category": "furniture", "description": "Small OAK side table"},
    ]
