"""Copy pre-migration records out of the generic catalog into a domain catalog."""

from __future__ import annotations

import logging

from storefront_catalog.models.admin import MigrationSummary
from storefront_catalog.models.catalog import Domain
from storefront_catalog.models.product import ProductRecord
from storefront_catalog.services.catalog.exceptions import CatalogError, DuplicateProductIdError
from storefront_catalog.services.catalog.registry import CatalogDescriptor, CatalogRegistry
from storefront_catalog.services.storage.catalog_store import CatalogStores

logger = logging.getLogger(__name__)

_WATCH_MARKERS = ("watchType", "watchBrand")


class LegacyMigrator:
    """Copies legacy records claimed by a domain, preserving their ids.

    The legacy originals are left in place; the federated search and the
    resolver already prefer the domain copy, so the read path stays correct
    whether or not a migration has run.
    """

    def __init__(self, registry: CatalogRegistry, stores: CatalogStores) -> None:
        self._registry = registry
        self._stores = stores

    async def migrate(self, domain: Domain) -> MigrationSummary:
        descriptor = self._registry.get(domain)
        if descriptor.is_generic:
            raise ValueError("The generic catalog cannot be a migration target")

        legacy_store = self._stores[self._registry.generic.domain]
        target = self._stores[domain]
        candidates = await legacy_store.find(descriptor.legacy_predicate())
        summary = MigrationSummary(domain=domain.value, found=len(candidates))
        logger.info(
            "Found %d legacy products to migrate into %s", len(candidates), target.collection
        )

        for record in candidates:
            try:
                if await target.get(record.id) is not None:
                    summary.skipped += 1
                    continue
                await target.insert(_rehome(record, descriptor))
                summary.migrated += 1
            except DuplicateProductIdError:
                summary.skipped += 1
            except CatalogError as exc:
                logger.error("Failed migrating product %s: %s", record.id, exc)
                summary.failed += 1

        logger.info(
            "Migration into %s finished",
            target.collection,
            extra=summary.model_dump(),
        )
        return summary


def _rehome(record: ProductRecord, descriptor: CatalogDescriptor) -> ProductRecord:
    attributes = dict(record.domain_attributes)
    type_key = descriptor.type_attribute
    if type_key and not attributes.get(type_key):
        attributes[type_key] = _infer_type(descriptor, attributes, record.category)
    return record.model_copy(
        update={
            "category": descriptor.default_category,
            "subcategory": record.subcategory or "",
            "domain_attributes": attributes,
        }
    )


def _infer_type(descriptor: CatalogDescriptor, attributes: dict, category: str) -> str:
    if descriptor.domain is Domain.ACCESSORIES:
        if any(attributes.get(marker) for marker in _WATCH_MARKERS):
            return "Watch"
        return "Accessory"
    return category or descriptor.default_category
