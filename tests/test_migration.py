"""Tests for copying legacy records into domain catalogs."""

import pytest

from storefront_catalog.models.catalog import Domain
from storefront_catalog.services.catalog.migration import LegacyMigrator
from tests.factories import make_record


@pytest.fixture()
def migrator(registry, stores):
    return LegacyMigrator(registry, stores)


@pytest.mark.asyncio
async def test_watches_are_rehomed_with_inferred_type(migrator, stores):
    legacy = stores[Domain.GENERIC]
    await legacy.insert(make_record("w1", "Gifts", attributes={"watchBrand": "Tick"}))
    await legacy.insert(make_record("s1", "Kids Sunglasses"))
    await legacy.insert(make_record("m1", "Mugs"))

    summary = await migrator.migrate(Domain.ACCESSORIES)

    assert (summary.found, summary.migrated, summary.skipped, summary.failed) == (2, 2, 0, 0)
    watch = await stores[Domain.ACCESSORIES].get("w1")
    assert watch.category == "kids-accessories"
    assert watch.subcategory == ""
    assert watch.domain_attributes["accessoryType"] == "Watch"
    assert watch.domain_attributes["watchBrand"] == "Tick"
    sunglasses = await stores[Domain.ACCESSORIES].get("s1")
    assert sunglasses.domain_attributes["accessoryType"] == "Accessory"
    assert await stores[Domain.ACCESSORIES].get("m1") is None


@pytest.mark.asyncio
async def test_legacy_originals_stay_in_place(migrator, stores):
    await stores[Domain.GENERIC].insert(make_record("s1", "Sandals", subcategory="Kids"))

    await migrator.migrate(Domain.FOOTWEAR)

    original = await stores[Domain.GENERIC].get("s1")
    copy = await stores[Domain.FOOTWEAR].get("s1")
    assert original.category == "Sandals"
    assert copy.category == "footwear"
    assert copy.subcategory == "Kids"
    assert copy.domain_attributes["footwearType"] == "Sandals"


@pytest.mark.asyncio
async def test_existing_ids_are_skipped(migrator, stores):
    await stores[Domain.GENERIC].insert(make_record("t1", "Puzzles"))
    await stores[Domain.TOYS].insert(make_record("t1", "toys", list_price=42))

    summary = await migrator.migrate(Domain.TOYS)

    assert (summary.found, summary.migrated, summary.skipped) == (1, 0, 1)
    assert (await stores[Domain.TOYS].get("t1")).list_price == 42


@pytest.mark.asyncio
async def test_second_run_migrates_nothing(migrator, stores):
    await stores[Domain.GENERIC].insert(make_record("d1", "Diapers"))

    first = await migrator.migrate(Domain.BABY_CARE)
    second = await migrator.migrate(Domain.BABY_CARE)

    assert first.migrated == 1
    assert (second.migrated, second.skipped) == (0, 1)


@pytest.mark.asyncio
async def test_generic_is_not_a_migration_target(migrator):
    with pytest.raises(ValueError):
        await migrator.migrate(Domain.GENERIC)
