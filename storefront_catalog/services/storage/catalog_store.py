"""Redis-backed document store for one catalog partition.

Each catalog is a Redis hash mapping product id to the record's JSON. A shared
set records which catalogs have been bootstrapped; writes to a catalog that
is not in the set are refused.
"""

from __future__ import annotations

import logging
import re
from datetime import UTC, datetime

import redis.asyncio as redis
from pydantic import ValidationError
from redis.exceptions import RedisError

from storefront_catalog.config import settings
from storefront_catalog.models.catalog import Domain
from storefront_catalog.models.product import ProductRecord
from storefront_catalog.services.catalog.exceptions import (
    CatalogNotInitializedError,
    CatalogUnavailableError,
    DuplicateProductIdError,
    InvalidProductIdError,
)
from storefront_catalog.services.catalog.predicates import MatchAll, Predicate
from storefront_catalog.services.catalog.registry import CatalogDescriptor, CatalogRegistry

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=UTC)


def created_sort_key(record: ProductRecord) -> datetime:
    """``createdAt`` as an aware datetime; naive timestamps count as UTC."""
    created = record.created_at or _EPOCH
    return created if created.tzinfo else created.replace(tzinfo=UTC)


def newest_first(records: list[ProductRecord]) -> list[ProductRecord]:
    """Stable sort on ``createdAt`` descending."""
    return sorted(records, key=created_sort_key, reverse=True)


class CatalogStore:
    """Document operations for a single catalog."""

    def __init__(
        self,
        client: redis.Redis,
        descriptor: CatalogDescriptor,
        key_prefix: str | None = None,
        id_pattern: str | None = None,
    ) -> None:
        self._client = client
        self.descriptor = descriptor
        prefix = settings.CATALOG_KEY_PREFIX if key_prefix is None else key_prefix
        self._key = f"{prefix}{descriptor.collection}"
        self._collections_key = f"{prefix}collections"
        self._id_pattern = re.compile(id_pattern) if id_pattern else None

    @property
    def domain(self) -> Domain:
        return self.descriptor.domain

    @property
    def collection(self) -> str:
        return self.descriptor.collection

    async def bootstrap(self) -> bool:
        """Register the catalog; returns True when it did not exist yet."""
        try:
            added = await self._client.sadd(self._collections_key, self.collection)
        except RedisError as exc:
            raise CatalogUnavailableError(self.collection, str(exc)) from exc
        if added:
            logger.info("Created catalog %s", self.collection)
        else:
            logger.debug("Catalog %s already exists", self.collection)
        return bool(added)

    async def is_bootstrapped(self) -> bool:
        try:
            return bool(await self._client.sismember(self._collections_key, self.collection))
        except RedisError as exc:
            raise CatalogUnavailableError(self.collection, str(exc)) from exc

    async def get(self, product_id: str) -> ProductRecord | None:
        """Indexed point lookup by id."""
        self._check_id(product_id)
        try:
            raw = await self._client.hget(self._key, product_id)
        except RedisError as exc:
            raise CatalogUnavailableError(self.collection, str(exc)) from exc
        if raw is None:
            return None
        return self._decode(raw)

    async def find(self, predicate: Predicate | None = None) -> list[ProductRecord]:
        """Return matching records, most recent first."""
        predicate = predicate or MatchAll()
        try:
            raw_documents = await self._client.hvals(self._key)
        except RedisError as exc:
            raise CatalogUnavailableError(self.collection, str(exc)) from exc

        records = []
        for raw in raw_documents:
            record = self._decode(raw)
            if record is not None and predicate.matches(record):
                records.append(record)
        return newest_first(records)

    async def all(self) -> list[ProductRecord]:
        return await self.find(MatchAll())

    async def count(self) -> int:
        try:
            return int(await self._client.hlen(self._key))
        except RedisError as exc:
            raise CatalogUnavailableError(self.collection, str(exc)) from exc

    async def insert(self, record: ProductRecord) -> ProductRecord:
        """Add a new record; the id must not exist in this catalog yet."""
        self._check_id(record.id)
        await self._require_bootstrapped()
        try:
            created = await self._client.hsetnx(self._key, record.id, self._encode(record))
        except RedisError as exc:
            raise CatalogUnavailableError(self.collection, str(exc)) from exc
        if not created:
            raise DuplicateProductIdError(self.collection, record.id)
        logger.info("Stored product %s in catalog %s", record.id, self.collection)
        return record

    async def replace(self, record: ProductRecord) -> ProductRecord:
        """Overwrite an existing record."""
        self._check_id(record.id)
        await self._require_bootstrapped()
        try:
            await self._client.hset(self._key, record.id, self._encode(record))
        except RedisError as exc:
            raise CatalogUnavailableError(self.collection, str(exc)) from exc
        logger.debug("Replaced product %s in catalog %s", record.id, self.collection)
        return record

    async def _require_bootstrapped(self) -> None:
        if not await self.is_bootstrapped():
            raise CatalogNotInitializedError(self.collection)

    def _check_id(self, product_id: str) -> None:
        if not product_id or (
            self._id_pattern is not None and not self._id_pattern.fullmatch(product_id)
        ):
            raise InvalidProductIdError(self.collection, product_id)

    @staticmethod
    def _encode(record: ProductRecord) -> str:
        return record.model_dump_json(by_alias=True)

    def _decode(self, raw: str | bytes) -> ProductRecord | None:
        try:
            record = ProductRecord.model_validate_json(raw)
        except ValidationError as exc:
            logger.warning(
                "Skipping unreadable document in catalog %s: %s",
                self.collection,
                exc.errors()[:1],
            )
            return None
        if not record.has_primary_image:
            logger.warning(
                "Skipping product %s in catalog %s: no primary image",
                record.id,
                self.collection,
            )
            return None
        return record


CatalogStores = dict[Domain, CatalogStore]


def build_catalog_stores(
    client: redis.Redis,
    registry: CatalogRegistry,
    key_prefix: str | None = None,
) -> CatalogStores:
    """One store per registered catalog, keyed by domain."""
    return {
        descriptor.domain: CatalogStore(
            client,
            descriptor,
            key_prefix=key_prefix,
            id_pattern=settings.CATALOG_ID_PATTERN,
        )
        for descriptor in registry.in_probe_order()
    }


async def bootstrap_catalogs(stores: CatalogStores) -> list[str]:
    """Create every catalog that does not exist yet; returns the new ones."""
    created = []
    for store in stores.values():
        if await store.bootstrap():
            created.append(store.collection)
    return created
