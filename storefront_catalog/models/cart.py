"""Schemas used when pricing cart and order line items."""

from __future__ import annotations

from pydantic import Field

from storefront_catalog.models.product import CamelModel, MissingProduct, ProductView


class LineItem(CamelModel):
    """A stored cart/order line: a product reference, quantity and optional size."""

    product_id: str | None = None
    quantity: int = Field(1, ge=1)
    size: str | None = None


class PricedLineItem(CamelModel):
    """A line with its product resolved and its total computed."""

    product_id: str | None = None
    quantity: int
    size: str | None = None
    product: ProductView | MissingProduct
    line_total: int = 0


class LineItemsRequest(CamelModel):
    """Incoming payload for POST /cart/lines."""

    items: list[LineItem] = Field(default_factory=list)


class PricedLineItems(CamelModel):
    """Response body for POST /cart/lines."""

    items: list[PricedLineItem] = Field(default_factory=list)
    total: int = 0
    missing: int = Field(0, description="Lines whose product could not be resolved")
