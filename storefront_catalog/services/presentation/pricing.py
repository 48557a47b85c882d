"""Derived sale price, recomputed on every read."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from storefront_catalog.models.product import ProductRecord


def sale_price(list_price: float, discount_percent: float = 0) -> int:
    """``round(listPrice - listPrice * discountPercent / 100)``, halves rounded up.

    The discount is not clamped here; write paths keep it inside ``[0, 100]``.
    """
    price = Decimal(str(list_price))
    discount = price * Decimal(str(discount_percent or 0)) / Decimal(100)
    return int((price - discount).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def project(record: ProductRecord) -> dict[str, Any]:
    """Return the record's fields with ``sale_price`` attached."""
    data = record.model_dump()
    data["sale_price"] = sale_price(record.list_price, record.discount_percent)
    return data
