"""Catalog domain tags shared across the engine."""

from __future__ import annotations

from enum import Enum


class Domain(str, Enum):
    """Product family served by one catalog partition."""

    GENERIC = "generic"
    CLOTHING = "clothing"
    FOOTWEAR = "footwear"
    ACCESSORIES = "accessories"
    BABY_CARE = "baby-care"
    TOYS = "toys"

    @classmethod
    def parse(cls, value: str) -> Domain:
        """Accept the tag in any case, with spaces or underscores for hyphens."""
        cleaned = (value or "").strip().lower().replace("_", "-").replace(" ", "-")
        return cls(cleaned)
