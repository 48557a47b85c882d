"""Routes for browsing the generic catalog and resolving products by id."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query

from storefront_catalog.api.dependencies import ResolverDependency, SearchDependency
from storefront_catalog.models.catalog import Domain
from storefront_catalog.models.product import NOT_FOUND_TITLE, ProductView

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["products"])


@router.get(
    "",
    response_model=list[ProductView],
    summary="Browse the generic catalog by category or subcategory",
)
async def list_products(
    search: SearchDependency,
    category: str = Query("", description="Category label or slug"),
    subcategory: str = Query("", description="Preferred over category when both are sent"),
) -> list[ProductView]:
    # Older clients send the label they want as either parameter.
    label = subcategory or category
    logger.info("Generic browse request", extra={"category": label})
    return await search.search(Domain.GENERIC, label.replace("-", " "))


@router.get(
    "/{product_id}",
    response_model=ProductView,
    summary="Resolve a product by id across every catalog",
)
async def get_product(product_id: str, resolver: ResolverDependency) -> ProductView:
    product = await resolver.resolve_by_id(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND_TITLE)
    return product
