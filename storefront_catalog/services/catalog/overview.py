"""Cross-catalog listing and counts for the admin console."""

from __future__ import annotations

import asyncio

from storefront_catalog.models.admin import CatalogStats
from storefront_catalog.models.product import ProductView
from storefront_catalog.services.presentation.presenter import ProductPresenter
from storefront_catalog.services.storage.catalog_store import CatalogStores, created_sort_key


class CatalogOverview:
    def __init__(self, stores: CatalogStores, presenter: ProductPresenter) -> None:
        self._stores = stores
        self._presenter = presenter

    async def list_all(self) -> list[ProductView]:
        """Every product from every catalog, newest first. Id collisions are kept."""
        stores = list(self._stores.values())
        batches = await asyncio.gather(*(store.all() for store in stores))
        views = [
            self._presenter.present(record, store.domain)
            for store, records in zip(stores, batches)
            for record in records
        ]
        return sorted(views, key=created_sort_key, reverse=True)

    async def stats(self) -> CatalogStats:
        stores = list(self._stores.values())
        counts = await asyncio.gather(*(store.count() for store in stores))
        per_catalog = {store.domain.value: count for store, count in zip(stores, counts)}
        return CatalogStats(per_catalog=per_catalog, total_products=sum(counts))
