"""Routes for browsing one domain catalog merged with the legacy catalog."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, Request

from storefront_catalog.api.dependencies import (
    RegistryDependency,
    ResolverDependency,
    SearchDependency,
)
from storefront_catalog.models.catalog import Domain
from storefront_catalog.models.product import NOT_FOUND_TITLE, ProductView

router = APIRouter(prefix="/catalogs", tags=["catalogs"])

_RESERVED_PARAMS = {"category", "subcategory"}


@router.get(
    "/{domain}/products",
    response_model=list[ProductView],
    summary="Browse a domain catalog; extra query parameters act as attribute filters",
)
async def list_domain_products(
    domain: Domain,
    request: Request,
    search: SearchDependency,
    registry: RegistryDependency,
    category: str | None = Query(None, description="Defaults to the catalog's own label"),
    subcategory: str = Query("", description="Narrows by subcategory or category text"),
) -> list[ProductView]:
    if category is None:
        category = registry.get(domain).default_category
    filters = {
        key: value
        for key, value in request.query_params.items()
        if key not in _RESERVED_PARAMS
    }
    return await search.search(domain, category, subcategory, filters)


@router.get(
    "/{domain}/products/{product_id}",
    response_model=ProductView,
    summary="Fetch a product from one domain catalog only",
)
async def get_domain_product(
    domain: Domain,
    product_id: str,
    resolver: ResolverDependency,
) -> ProductView:
    product = await resolver.find_in_catalog(domain, product_id)
    if product is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND_TITLE)
    return product
