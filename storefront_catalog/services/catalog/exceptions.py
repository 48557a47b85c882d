"""Catalog-level exceptions.

Single-catalog failures are recovered by the resolver and the federated
search; only ``CatalogOutageError`` is meant to reach the HTTP layer.
"""

from __future__ import annotations


class CatalogError(Exception):
    """Base class for all catalog errors."""


class InvalidProductIdError(CatalogError):
    """A catalog rejected the shape of a product id."""

    def __init__(self, collection: str, product_id: str) -> None:
        super().__init__(f"Catalog {collection} rejects product id {product_id!r}")
        self.collection = collection
        self.product_id = product_id


class CatalogUnavailableError(CatalogError):
    """A single catalog's storage call failed."""

    def __init__(self, collection: str, reason: str) -> None:
        super().__init__(f"Catalog {collection} unavailable: {reason}")
        self.collection = collection
        self.reason = reason


class CatalogOutageError(CatalogError):
    """Every catalog in a probe set failed."""

    def __init__(self, collections: list[str]) -> None:
        super().__init__("All catalogs unavailable: " + ", ".join(collections))
        self.collections = collections


class CatalogNotInitializedError(CatalogError):
    """A write targeted a catalog that was never bootstrapped."""

    def __init__(self, collection: str) -> None:
        super().__init__(f"Catalog {collection} has not been bootstrapped")
        self.collection = collection


class DuplicateProductIdError(CatalogError):
    """A catalog already holds a record under this id."""

    def __init__(self, collection: str, product_id: str) -> None:
        super().__init__(f"Catalog {collection} already holds product {product_id!r}")
        self.collection = collection
        self.product_id = product_id
