"""Identity resolution: find the catalog that holds a bare product id."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable

from storefront_catalog.config import settings
from storefront_catalog.models.catalog import Domain
from storefront_catalog.models.product import ProductRecord, ProductView
from storefront_catalog.services.catalog.exceptions import (
    CatalogOutageError,
    CatalogUnavailableError,
    InvalidProductIdError,
)
from storefront_catalog.services.presentation.presenter import ProductPresenter
from storefront_catalog.services.storage.catalog_store import CatalogStore, CatalogStores

logger = logging.getLogger(__name__)

# Outcome of one probe: a record, None for "not here", or the failure.
_ProbeResult = ProductRecord | None | CatalogUnavailableError


class IdentityResolver:
    """Probes catalogs in registry priority order; the first hit wins.

    Every call re-probes. A catalog that rejects the id or fails is treated as
    holding no match; only when every probed catalog fails does the resolver
    raise ``CatalogOutageError``. ``None`` means no catalog holds the id.
    """

    def __init__(
        self,
        stores: CatalogStores,
        presenter: ProductPresenter,
        concurrent_probes: bool | None = None,
    ) -> None:
        self._stores = sorted(stores.values(), key=lambda store: store.descriptor.priority)
        self._by_domain = dict(stores)
        self._presenter = presenter
        self._concurrent = (
            settings.RESOLVER_CONCURRENT_PROBES if concurrent_probes is None else concurrent_probes
        )

    async def resolve_by_id(self, product_id: str | None) -> ProductView | None:
        if not product_id:
            return None

        if self._concurrent:
            results = await asyncio.gather(
                *(self._probe(store, product_id) for store in self._stores)
            )
        else:
            results = []
            for store in self._stores:
                result = await self._probe(store, product_id)
                results.append(result)
                if isinstance(result, ProductRecord):
                    break

        failed = []
        for store, result in zip(self._stores, results):
            if isinstance(result, ProductRecord):
                logger.debug("Resolved product %s in catalog %s", product_id, store.collection)
                return self._presenter.present(result, store.domain)
            if isinstance(result, CatalogUnavailableError):
                failed.append(store.collection)

        if failed and len(failed) == len(self._stores):
            raise CatalogOutageError(failed)

        logger.info("Product %s not found in any catalog", product_id)
        return None

    async def resolve_many(self, product_ids: Iterable[str]) -> dict[str, ProductView | None]:
        """Resolve each distinct id once, concurrently."""
        distinct = list(dict.fromkeys(pid for pid in product_ids if pid))
        resolved = await asyncio.gather(*(self.resolve_by_id(pid) for pid in distinct))
        return dict(zip(distinct, resolved))

    async def find_in_catalog(self, domain: Domain, product_id: str) -> ProductView | None:
        """Point lookup restricted to one catalog."""
        store = self._by_domain[domain]
        try:
            record = await store.get(product_id)
        except InvalidProductIdError:
            return None
        if record is None:
            return None
        return self._presenter.present(record, store.domain)

    async def _probe(self, store: CatalogStore, product_id: str) -> _ProbeResult:
        try:
            return await store.get(product_id)
        except InvalidProductIdError as exc:
            logger.debug("%s", exc)
            return None
        except CatalogUnavailableError as exc:
            logger.warning(
                "Catalog lookup failed, continuing with next catalog",
                extra={"collection": store.collection, "product_id": product_id, "error": str(exc)},
            )
            return exc
