"""Single exit point turning stored records into display-ready products."""

from __future__ import annotations

from storefront_catalog.models.catalog import Domain
from storefront_catalog.models.product import ProductRecord, ProductView
from storefront_catalog.services.presentation.images import (
    ImageUrlNormalizer,
    create_image_normalizer,
)
from storefront_catalog.services.presentation.pricing import project


class ProductPresenter:
    """Applies image normalization and price projection to any record."""

    def __init__(self, images: ImageUrlNormalizer | None = None) -> None:
        self.images = images or create_image_normalizer()

    def present(self, record: ProductRecord, catalog: Domain) -> ProductView:
        data = project(record)
        data["images"] = self.images.normalize(record.images)
        data["catalog"] = catalog
        return ProductView.model_validate(data)
