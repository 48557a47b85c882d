"""Routes pricing cart and order line items."""

from __future__ import annotations

from fastapi import APIRouter

from storefront_catalog.api.dependencies import LineItemsDependency
from storefront_catalog.models.cart import LineItemsRequest, PricedLineItems

router = APIRouter(prefix="/cart", tags=["cart"])


@router.post(
    "/lines",
    response_model=PricedLineItems,
    summary="Resolve and price stored line items",
)
async def price_line_items(
    payload: LineItemsRequest,
    populator: LineItemsDependency,
) -> PricedLineItems:
    return await populator.populate(payload.items)
