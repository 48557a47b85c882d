"""Tests for the Redis-backed catalog store."""

from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from storefront_catalog.models.catalog import Domain
from storefront_catalog.services.catalog.exceptions import (
    CatalogNotInitializedError,
    CatalogUnavailableError,
    DuplicateProductIdError,
    InvalidProductIdError,
)
from storefront_catalog.services.catalog.predicates import Contains
from storefront_catalog.services.storage.catalog_store import CatalogStore
from tests.factories import make_record


@pytest.mark.asyncio
async def test_insert_and_get_round_trip(stores):
    store = stores[Domain.FOOTWEAR]
    await store.insert(make_record("f1", "Footwear", list_price=499))

    found = await store.get("f1")

    assert found is not None
    assert found.list_price == 499
    assert found.category == "Footwear"
    assert await store.get("nope") is None


@pytest.mark.asyncio
async def test_documents_are_stored_with_camel_case_keys(stores, redis_client):
    store = stores[Domain.TOYS]
    await store.insert(make_record("t1", "toys", discount_percent=5))

    raw = await redis_client.hget("test-catalog:toys", "t1")

    assert '"listPrice"' in raw
    assert '"discountPercent"' in raw


@pytest.mark.asyncio
async def test_duplicate_insert_is_rejected(stores):
    store = stores[Domain.TOYS]
    await store.insert(make_record("t1", "toys"))

    with pytest.raises(DuplicateProductIdError):
        await store.insert(make_record("t1", "toys"))


@pytest.mark.asyncio
async def test_write_requires_bootstrap(redis_client, registry):
    store = CatalogStore(redis_client, registry.get(Domain.TOYS), key_prefix="fresh:")

    with pytest.raises(CatalogNotInitializedError):
        await store.insert(make_record("t1", "toys"))

    assert await store.bootstrap() is True
    assert await store.bootstrap() is False
    await store.insert(make_record("t1", "toys"))
    assert await store.count() == 1


@pytest.mark.asyncio
async def test_find_filters_and_orders_newest_first(stores):
    store = stores[Domain.GENERIC]
    await store.insert(make_record("old", "Sandals", age_days=10))
    await store.insert(make_record("new", "Sandals", age_days=1))
    await store.insert(make_record("other", "Books", age_days=0))

    found = await store.find(Contains("category", "sandal"))

    assert [record.id for record in found] == ["new", "old"]
    assert [record.id for record in await store.all()] == ["other", "new", "old"]


@pytest.mark.asyncio
async def test_unreadable_documents_are_skipped(stores, redis_client):
    store = stores[Domain.GENERIC]
    await store.insert(make_record("ok", "Books"))
    await redis_client.hset("test-catalog:products", "broken", '{"title": 1}')

    assert [record.id for record in await store.all()] == ["ok"]
    assert await store.get("broken") is None


@pytest.mark.asyncio
async def test_id_pattern_rejects_malformed_ids(redis_client, registry):
    store = CatalogStore(
        redis_client,
        registry.get(Domain.FOOTWEAR),
        key_prefix="strict:",
        id_pattern=r"[0-9a-f]{24}",
    )

    with pytest.raises(InvalidProductIdError):
        await store.get("not-an-object-id")
    assert await store.get("0123456789abcdef01234567") is None


@pytest.mark.asyncio
async def test_redis_errors_become_catalog_unavailable(registry):
    client = AsyncMock()
    client.hget.side_effect = RedisConnectionError("connection refused")
    client.hvals.side_effect = RedisConnectionError("connection refused")
    store = CatalogStore(client, registry.get(Domain.TOYS), key_prefix="x:")

    with pytest.raises(CatalogUnavailableError):
        await store.get("t1")
    with pytest.raises(CatalogUnavailableError):
        await store.find()


@pytest.mark.asyncio
async def test_records_without_primary_image_are_skipped(stores):
    store = stores[Domain.TOYS]
    await store.insert(make_record("noimg", "toys", images={}))
    await store.insert(make_record("blank", "toys", images={"image1": "", "image2": "/b.jpg"}))
    await store.insert(make_record("listed", "toys", images=[{"url": "/a.jpg"}]))

    assert await store.get("noimg") is None
    assert [record.id for record in await store.all()] == ["listed"]


@pytest.mark.asyncio
async def test_legacy_documents_keep_missing_created_at(stores, redis_client):
    store = stores[Domain.GENERIC]
    await store.insert(make_record("dated", "Books", age_days=400))
    await redis_client.hset(
        "test-catalog:products",
        "undated",
        '{"id": "undated", "title": "Old", "listPrice": 10, "images": {"image1": "/u.jpg"}}',
    )

    records = await store.all()

    assert [record.id for record in records] == ["dated", "undated"]
    assert records[1].created_at is None


@pytest.mark.asyncio
async def test_out_of_range_stored_discount_is_still_readable(stores, redis_client):
    await redis_client.hset(
        "test-catalog:products",
        "odd",
        '{"id": "odd", "title": "Odd", "listPrice": 100, "discountPercent": 150,'
        ' "images": {"image1": "/o.jpg"}}',
    )

    record = await stores[Domain.GENERIC].get("odd")

    assert record is not None
    assert record.discount_percent == 150
