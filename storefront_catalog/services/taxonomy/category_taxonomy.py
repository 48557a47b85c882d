"""Static category taxonomy: parent/child expansion, groups and legacy aliases."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, Field

from storefront_catalog.config import settings

logger = logging.getLogger(__name__)

DEFAULT_TAXONOMY_PATH = (
    Path(__file__).resolve().parent.parent.parent / "data" / "category_taxonomy.json"
)


class TaxonomyTable(BaseModel):
    """On-disk shape of the versioned taxonomy file."""

    version: str = "unversioned"
    parents: dict[str, list[str]] = Field(default_factory=dict)
    groups: dict[str, list[str]] = Field(default_factory=dict)
    aliases: dict[str, str] = Field(default_factory=dict)


def _key(label: str | None) -> str:
    return (label or "").strip().casefold()


class CategoryTaxonomy:
    """Read-only view over a taxonomy table.

    Labels are looked up case-insensitively against the display strings the
    table was authored with. They are not slug-normalized first, so
    ``"mens-shoes"`` is not an alias of anything while ``"MENS SHOES"`` is.
    """

    def __init__(self, table: TaxonomyTable) -> None:
        self.version = table.version
        self._parents = {_key(parent): list(children) for parent, children in table.parents.items()}
        self._groups = {_key(group): list(members) for group, members in table.groups.items()}
        self._aliases = {_key(variant): canonical for variant, canonical in table.aliases.items()}

    def alias(self, label: str | None) -> str:
        """Return the canonical label for a historical variant, else the label."""
        if label is None:
            return ""
        return self._aliases.get(_key(label), label)

    def children(self, label: str | None) -> list[str]:
        return list(self._parents.get(_key(label), []))

    def is_parent(self, label: str | None) -> bool:
        return _key(label) in self._parents

    def group_members(self, label: str | None) -> list[str]:
        return list(self._groups.get(_key(label), []))

    def expand(self, label: str | None) -> set[str]:
        """Return the label together with every label it stands for.

        Parents contribute their children; groups contribute their members and,
        for members that are themselves parents, those members' children.
        """
        if label is None:
            return set()
        expanded = {label}
        expanded.update(self.children(label))
        for member in self.group_members(label):
            expanded.add(member)
            expanded.update(self.children(member))
        return expanded


def load_taxonomy(path: str | Path | None = None) -> CategoryTaxonomy:
    """Read and validate the taxonomy file.

    Raises:
        FileNotFoundError: If the taxonomy file does not exist.
    """
    taxonomy_path = Path(path) if path else DEFAULT_TAXONOMY_PATH
    if not taxonomy_path.exists():
        raise FileNotFoundError(f"Category taxonomy file not found at: {taxonomy_path}")

    table = TaxonomyTable.model_validate_json(taxonomy_path.read_text(encoding="utf-8"))
    logger.info(
        "Loaded category taxonomy %s (%d parents, %d groups, %d aliases)",
        table.version,
        len(table.parents),
        len(table.groups),
        len(table.aliases),
    )
    return CategoryTaxonomy(table)


_taxonomy: CategoryTaxonomy | None = None


def get_taxonomy() -> CategoryTaxonomy:
    """Return the process-wide taxonomy, loading it on first use."""

    global _taxonomy
    if _taxonomy is None:
        _taxonomy = load_taxonomy(settings.TAXONOMY_PATH)
    return _taxonomy
