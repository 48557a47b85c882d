"""Admin write path: place new products in the catalog their category maps to."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime

from storefront_catalog.models.product import PricingUpdate, ProductCreate, ProductRecord, ProductView
from storefront_catalog.services.catalog.exceptions import (
    CatalogUnavailableError,
    InvalidProductIdError,
)
from storefront_catalog.services.catalog.registry import CatalogRegistry
from storefront_catalog.services.presentation.presenter import ProductPresenter
from storefront_catalog.services.storage.catalog_store import CatalogStores

logger = logging.getLogger(__name__)


class CatalogWriter:
    """Creates and reprices products without ever writing across catalogs."""

    def __init__(
        self,
        registry: CatalogRegistry,
        stores: CatalogStores,
        presenter: ProductPresenter,
    ) -> None:
        self._registry = registry
        self._stores = stores
        self._presenter = presenter

    async def create_product(self, payload: ProductCreate) -> ProductView:
        """Route by category synonyms; unmatched categories go to the generic catalog."""
        descriptor = self._registry.route_category(payload.category)
        store = self._stores[descriptor.domain]
        record = ProductRecord(
            id=payload.id or uuid.uuid4().hex,
            title=payload.title,
            list_price=payload.list_price,
            discount_percent=payload.discount_percent,
            description=payload.description,
            category=payload.category,
            category_ref=payload.category_ref,
            subcategory=payload.subcategory,
            domain_attributes=payload.domain_attributes,
            images=payload.images.model_dump(exclude_none=True),
            created_at=datetime.now(UTC),
        )
        await store.insert(record)
        logger.info(
            "Created product %s in catalog %s (category=%r)",
            record.id,
            store.collection,
            payload.category,
        )
        return self._presenter.present(record, store.domain)

    async def update_pricing(self, product_id: str, update: PricingUpdate) -> ProductView | None:
        """Apply the update to the first catalog, in probe order, holding the id."""
        changes = update.model_dump(exclude_none=True)
        if not changes:
            raise ValueError("At least one of listPrice or discountPercent is required")

        for descriptor in self._registry.in_probe_order():
            store = self._stores[descriptor.domain]
            try:
                record = await store.get(product_id)
            except InvalidProductIdError:
                continue
            except CatalogUnavailableError as exc:
                logger.warning("Skipping catalog %s during repricing: %s", store.collection, exc)
                continue
            if record is None:
                continue

            updated = record.model_copy(update=changes)
            await store.replace(updated)
            logger.info("Repriced product %s in catalog %s: %s", product_id, store.collection, changes)
            return self._presenter.present(updated, store.domain)

        return None
