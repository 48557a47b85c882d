"""Tests for cart/order line item population."""

import pytest

from storefront_catalog.models.cart import LineItem
from storefront_catalog.models.catalog import Domain
from storefront_catalog.models.product import MissingProduct
from storefront_catalog.services.cart.line_items import LineItemPopulator
from tests.factories import make_record


@pytest.mark.asyncio
async def test_lines_are_priced_from_resolved_products(stores, resolver):
    await stores[Domain.FOOTWEAR].insert(
        make_record("shoe", "footwear", list_price=999, discount_percent=10)
    )
    await stores[Domain.GENERIC].insert(make_record("book", "Books", list_price=250))

    priced = await LineItemPopulator(resolver).populate(
        [
            LineItem(product_id="shoe", quantity=2, size="EU 30"),
            LineItem(product_id="book", quantity=1),
        ]
    )

    assert [item.line_total for item in priced.items] == [1798, 250]
    assert priced.total == 2048
    assert priced.missing == 0
    assert priced.items[0].size == "EU 30"
    assert priced.items[0].product.catalog is Domain.FOOTWEAR


@pytest.mark.asyncio
async def test_missing_product_becomes_placeholder(stores, resolver):
    await stores[Domain.TOYS].insert(make_record("toy", "toys", list_price=100))

    priced = await LineItemPopulator(resolver).populate(
        [
            LineItem(product_id="missing-id", quantity=3),
            LineItem(product_id="toy", quantity=1),
            LineItem(quantity=1),
        ]
    )

    placeholder = priced.items[0].product
    assert isinstance(placeholder, MissingProduct)
    assert placeholder.model_dump(by_alias=True) == {"id": None, "title": "Product not found"}
    assert priced.items[0].line_total == 0
    assert isinstance(priced.items[2].product, MissingProduct)
    assert priced.total == 100
    assert priced.missing == 2


@pytest.mark.asyncio
async def test_repeated_product_lines_are_priced_independently(stores, resolver):
    await stores[Domain.CLOTHING].insert(make_record("tee", "kids-clothing", list_price=300))

    priced = await LineItemPopulator(resolver).populate(
        [
            LineItem(product_id="tee", quantity=1, size="S"),
            LineItem(product_id="tee", quantity=2, size="M"),
        ]
    )

    assert [item.line_total for item in priced.items] == [300, 600]
    assert [item.size for item in priced.items] == ["S", "M"]


@pytest.mark.asyncio
async def test_empty_cart(resolver):
    priced = await LineItemPopulator(resolver).populate([])

    assert priced.items == []
    assert priced.total == 0
