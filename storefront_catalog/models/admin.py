"""Schemas returned by the admin catalog routes."""

from __future__ import annotations

from pydantic import Field

from storefront_catalog.models.product import CamelModel


class CatalogStats(CamelModel):
    """Product counts per catalog plus the overall total."""

    per_catalog: dict[str, int] = Field(default_factory=dict)
    total_products: int = 0


class MigrationSummary(CamelModel):
    """Outcome of copying legacy records into a domain catalog."""

    domain: str
    found: int = 0
    migrated: int = 0
    skipped: int = 0
    failed: int = 0
