"""Resolve and price cart/order line items without failing on missing products."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from storefront_catalog.models.cart import LineItem, PricedLineItem, PricedLineItems
from storefront_catalog.models.product import MissingProduct
from storefront_catalog.services.catalog.resolver import IdentityResolver

logger = logging.getLogger(__name__)


class LineItemPopulator:
    """Attaches a priced product (or the not-found placeholder) to each line."""

    def __init__(self, resolver: IdentityResolver) -> None:
        self._resolver = resolver

    async def populate(self, lines: Sequence[LineItem]) -> PricedLineItems:
        resolved = await self._resolver.resolve_many(
            line.product_id for line in lines if line.product_id
        )

        priced = []
        missing = 0
        for line in lines:
            product = resolved.get(line.product_id) if line.product_id else None
            if product is None:
                if line.product_id:
                    logger.warning("Product not found for line item %s", line.product_id)
                else:
                    logger.warning("Line item missing product id")
                missing += 1
                priced.append(
                    PricedLineItem(
                        product_id=line.product_id,
                        quantity=line.quantity,
                        size=line.size,
                        product=MissingProduct(),
                    )
                )
                continue

            priced.append(
                PricedLineItem(
                    product_id=line.product_id,
                    quantity=line.quantity,
                    size=line.size,
                    product=product,
                    line_total=product.sale_price * line.quantity,
                )
            )

        return PricedLineItems(
            items=priced,
            total=sum(item.line_total for item in priced),
            missing=missing,
        )
