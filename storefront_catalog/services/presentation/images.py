"""Rewrite stored image references into absolute URLs."""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Any

from storefront_catalog.config import settings
from storefront_catalog.models.product import IMAGE_SLOTS

_SCHEME = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")


class ImageUrlNormalizer:
    """Pure string transformation over a product's image slots.

    Accepts the ``{image1, image2, image3}`` map and the legacy list of
    ``{"url": ...}`` objects, always producing the map when any URL is found.
    Values it does not understand are returned untouched.
    """

    def __init__(self, base_origin: str = "", cdn_hosts: Iterable[str] = ()) -> None:
        self.base_origin = (base_origin or "").rstrip("/")
        self.cdn_hosts = tuple(host.lower() for host in cdn_hosts if host)

    def ensure_absolute(self, url: Any) -> Any:
        if not url or not isinstance(url, str):
            return url
        if _SCHEME.match(url) or url.startswith("//"):
            return url
        host = url.split("/", 1)[0].lower()
        if host and any(fragment in host for fragment in self.cdn_hosts):
            return f"https://{url}"
        if not self.base_origin:
            return url
        return f"{self.base_origin}/{url.lstrip('/')}"

    def normalize(self, images: Any) -> Any:
        if isinstance(images, list):
            return self._normalize_list(images)
        if isinstance(images, dict):
            return {
                slot: self.ensure_absolute(images[slot])
                for slot in IMAGE_SLOTS
                if images.get(slot)
            }
        return images

    def _normalize_list(self, images: list[Any]) -> Any:
        mapped = {}
        for index, image in enumerate(images[: len(IMAGE_SLOTS)]):
            if isinstance(image, dict) and image.get("url"):
                mapped[IMAGE_SLOTS[index]] = self.ensure_absolute(image["url"])
        return mapped or images


def create_image_normalizer() -> ImageUrlNormalizer:
    """Factory wiring the normalizer to the configured origin and CDN hosts."""
    return ImageUrlNormalizer(settings.image_base_origin, settings.cdn_hosts)
