"""FastAPI dependency factories wiring the engine components together."""

from __future__ import annotations

from typing import Annotated

import redis.asyncio as redis
from fastapi import Depends

from storefront_catalog.services.cart.line_items import LineItemPopulator
from storefront_catalog.services.catalog.migration import LegacyMigrator
from storefront_catalog.services.catalog.overview import CatalogOverview
from storefront_catalog.services.catalog.registry import CatalogRegistry, get_catalog_registry
from storefront_catalog.services.catalog.resolver import IdentityResolver
from storefront_catalog.services.catalog.search import FederatedSearch
from storefront_catalog.services.catalog.writer import CatalogWriter
from storefront_catalog.services.presentation.presenter import ProductPresenter
from storefront_catalog.services.storage.catalog_store import CatalogStores, build_catalog_stores
from storefront_catalog.services.storage.redis_client import get_redis_client
from storefront_catalog.services.taxonomy.category_taxonomy import (
    CategoryTaxonomy,
    get_taxonomy,
)

RedisDependency = Annotated[redis.Redis, Depends(get_redis_client)]
RegistryDependency = Annotated[CatalogRegistry, Depends(get_catalog_registry)]
TaxonomyDependency = Annotated[CategoryTaxonomy, Depends(get_taxonomy)]

_presenter: ProductPresenter | None = None


def get_presenter() -> ProductPresenter:
    global _presenter
    if _presenter is None:
        _presenter = ProductPresenter()
    return _presenter


PresenterDependency = Annotated[ProductPresenter, Depends(get_presenter)]


def get_catalog_stores(client: RedisDependency, registry: RegistryDependency) -> CatalogStores:
    return build_catalog_stores(client, registry)


StoresDependency = Annotated[CatalogStores, Depends(get_catalog_stores)]


def get_identity_resolver(
    stores: StoresDependency,
    presenter: PresenterDependency,
) -> IdentityResolver:
    return IdentityResolver(stores, presenter)


ResolverDependency = Annotated[IdentityResolver, Depends(get_identity_resolver)]


def get_federated_search(
    registry: RegistryDependency,
    stores: StoresDependency,
    taxonomy: TaxonomyDependency,
    presenter: PresenterDependency,
) -> FederatedSearch:
    return FederatedSearch(registry, stores, taxonomy, presenter)


SearchDependency = Annotated[FederatedSearch, Depends(get_federated_search)]


def get_line_item_populator(resolver: ResolverDependency) -> LineItemPopulator:
    return LineItemPopulator(resolver)


LineItemsDependency = Annotated[LineItemPopulator, Depends(get_line_item_populator)]


def get_catalog_writer(
    registry: RegistryDependency,
    stores: StoresDependency,
    presenter: PresenterDependency,
) -> CatalogWriter:
    return CatalogWriter(registry, stores, presenter)


WriterDependency = Annotated[CatalogWriter, Depends(get_catalog_writer)]


def get_legacy_migrator(registry: RegistryDependency, stores: StoresDependency) -> LegacyMigrator:
    return LegacyMigrator(registry, stores)


MigratorDependency = Annotated[LegacyMigrator, Depends(get_legacy_migrator)]


def get_catalog_overview(
    stores: StoresDependency,
    presenter: PresenterDependency,
) -> CatalogOverview:
    return CatalogOverview(stores, presenter)


OverviewDependency = Annotated[CatalogOverview, Depends(get_catalog_overview)]
