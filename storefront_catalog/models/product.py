"""Product records as stored in the catalogs and as returned to callers."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from storefront_catalog.models.catalog import Domain

IMAGE_SLOTS = ("image1", "image2", "image3")
NOT_FOUND_TITLE = "Product not found"

ImagesField = dict[str, Any] | list[Any]


class CamelModel(BaseModel):
    """Base model exposing camelCase aliases while accepting field names too."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProductImages(CamelModel):
    """The ``image1``..``image3`` map; the first slot is mandatory."""

    image1: str = Field(..., min_length=1)
    image2: str | None = None
    image3: str | None = None


class ProductRecord(CamelModel):
    """A product document owned by exactly one catalog."""

    id: str = Field(..., min_length=1, description="Unique only inside its catalog")
    title: str
    list_price: float = Field(..., ge=0)
    # Not range-checked on read; write payloads clamp it.
    discount_percent: float = 0
    description: str | None = None
    category: str = ""
    category_ref: str | None = None
    subcategory: str | None = None
    domain_attributes: dict[str, Any] = Field(default_factory=dict)
    images: ImagesField = Field(default_factory=dict)
    created_at: datetime | None = None

    @property
    def has_primary_image(self) -> bool:
        if isinstance(self.images, dict):
            return bool(self.images.get("image1"))
        if self.images and isinstance(self.images[0], dict):
            return bool(self.images[0].get("url"))
        return False


class ProductView(ProductRecord):
    """A display-ready product: images normalized and sale price attached."""

    sale_price: int
    catalog: Domain


class MissingProduct(CamelModel):
    """Placeholder substituted for a cart or order line whose product is gone."""

    id: str | None = None
    title: str = NOT_FOUND_TITLE


class ProductCreate(CamelModel):
    """Admin payload for creating a product in the catalog its category maps to."""

    id: str | None = Field(None, description="Optional id; generated when omitted")
    title: str = Field(..., min_length=1)
    list_price: float = Field(..., ge=0)
    discount_percent: float = 0
    description: str | None = None
    category: str = Field(..., min_length=1)
    category_ref: str | None = None
    subcategory: str | None = None
    domain_attributes: dict[str, Any] = Field(default_factory=dict)
    images: ProductImages

    @field_validator("discount_percent", mode="before")
    @classmethod
    def _clamp_discount(cls, value: Any) -> float:
        return clamp_discount(value)


class PricingUpdate(CamelModel):
    """Admin payload adjusting the list price and/or discount of a product."""

    list_price: float | None = Field(None, ge=0)
    discount_percent: float | None = None

    @field_validator("discount_percent", mode="before")
    @classmethod
    def _clamp_discount(cls, value: Any) -> float | None:
        if value is None:
            return None
        return clamp_discount(value)


def clamp_discount(value: Any) -> float:
    """Coerce a raw discount into ``[0, 100]``; unparseable values become 0."""
    try:
        discount = float(value)
    except (TypeError, ValueError):
        return 0.0
    if discount != discount:  # NaN
        return 0.0
    return min(max(discount, 0.0), 100.0)
