"""Admin routes: product creation, repricing, listing and legacy migration."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from storefront_catalog.api.dependencies import (
    MigratorDependency,
    OverviewDependency,
    WriterDependency,
)
from storefront_catalog.models.admin import CatalogStats, MigrationSummary
from storefront_catalog.models.catalog import Domain
from storefront_catalog.models.product import (
    NOT_FOUND_TITLE,
    PricingUpdate,
    ProductCreate,
    ProductView,
)
from storefront_catalog.services.catalog.exceptions import DuplicateProductIdError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post(
    "/products",
    response_model=ProductView,
    status_code=status.HTTP_201_CREATED,
    summary="Create a product in the catalog its category belongs to",
)
async def create_product(payload: ProductCreate, writer: WriterDependency) -> ProductView:
    try:
        return await writer.create_product(payload)
    except DuplicateProductIdError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc


@router.patch(
    "/products/{product_id}",
    response_model=ProductView,
    summary="Update the list price and/or discount of a product",
)
async def update_product_pricing(
    product_id: str,
    payload: PricingUpdate,
    writer: WriterDependency,
) -> ProductView:
    try:
        product = await writer.update_pricing(product_id, payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if product is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND_TITLE)
    return product


@router.get(
    "/products",
    response_model=list[ProductView],
    summary="List every product from every catalog, newest first",
)
async def list_all_products(overview: OverviewDependency) -> list[ProductView]:
    return await overview.list_all()


@router.get("/stats", response_model=CatalogStats, summary="Product counts per catalog")
async def catalog_stats(overview: OverviewDependency) -> CatalogStats:
    return await overview.stats()


@router.post(
    "/migrations/{domain}",
    response_model=MigrationSummary,
    summary="Copy legacy records claimed by a domain into its catalog",
)
async def migrate_legacy_products(domain: Domain, migrator: MigratorDependency) -> MigrationSummary:
    if domain is Domain.GENERIC:
        raise HTTPException(status_code=400, detail="The generic catalog cannot be a migration target")
    summary = await migrator.migrate(domain)
    logger.info("[legacy-migration]", extra={"target": domain.value, "migrated": summary.migrated})
    return summary
