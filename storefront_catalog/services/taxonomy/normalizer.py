"""Canonical form for free-form category and subcategory strings."""

from __future__ import annotations


def normalize(raw: str | None) -> str:
    """Lowercase, turn slug hyphens into spaces and trim.

    ``"Girls-Cloth "`` becomes ``"girls cloth"``. Non-string input yields an
    empty string, and applying the function twice changes nothing.
    """
    if not raw or not isinstance(raw, str):
        return ""
    return raw.replace("-", " ").strip().lower()
