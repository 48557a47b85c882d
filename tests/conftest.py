"""Pytest configuration and fixtures for the catalog engine."""

import pytest
import pytest_asyncio
from fakeredis import aioredis as fakeredis
from httpx import ASGITransport, AsyncClient

from storefront_catalog.api.dependencies import get_presenter
from storefront_catalog.services.catalog.registry import CatalogRegistry
from storefront_catalog.services.catalog.resolver import IdentityResolver
from storefront_catalog.services.catalog.search import FederatedSearch
from storefront_catalog.services.presentation.images import ImageUrlNormalizer
from storefront_catalog.services.presentation.presenter import ProductPresenter
from storefront_catalog.services.storage.catalog_store import (
    bootstrap_catalogs,
    build_catalog_stores,
)
from storefront_catalog.services.storage.redis_client import get_redis_client
from storefront_catalog.services.taxonomy.category_taxonomy import load_taxonomy

TEST_ORIGIN = "https://shop.example"
TEST_KEY_PREFIX = "test-catalog:"


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line("markers", "asyncio: marks tests as async tests")


@pytest.fixture()
def registry():
    return CatalogRegistry()


@pytest.fixture()
def taxonomy():
    return load_taxonomy()


@pytest.fixture()
def presenter():
    return ProductPresenter(ImageUrlNormalizer(TEST_ORIGIN, ("cloudinary.com", "cdn")))


@pytest_asyncio.fixture()
async def redis_client():
    """Provide a fake Redis client for each test."""
    from storefront_catalog.main import app

    client = fakeredis.FakeRedis(decode_responses=True)
    app.dependency_overrides[get_redis_client] = lambda: client
    try:
        yield client
    finally:
        await client.flushdb()
        await client.aclose()
        app.dependency_overrides.pop(get_redis_client, None)


@pytest_asyncio.fixture()
async def stores(redis_client, registry):
    """Bootstrapped catalog stores backed by the fake Redis client."""
    catalog_stores = build_catalog_stores(redis_client, registry, key_prefix=TEST_KEY_PREFIX)
    await bootstrap_catalogs(catalog_stores)
    return catalog_stores


@pytest.fixture()
def resolver(stores, presenter):
    return IdentityResolver(stores, presenter, concurrent_probes=False)


@pytest.fixture()
def search(registry, stores, taxonomy, presenter):
    return FederatedSearch(registry, stores, taxonomy, presenter)


@pytest_asyncio.fixture()
async def client(redis_client, presenter):
    """Return an HTTPX async client pointing at the FastAPI app."""
    from storefront_catalog.main import app

    await bootstrap_catalogs(build_catalog_stores(redis_client, CatalogRegistry()))
    app.dependency_overrides[get_presenter] = lambda: presenter
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://testserver",
    ) as test_client:
        yield test_client
    app.dependency_overrides.pop(get_presenter, None)
