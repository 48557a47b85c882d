"""Static registry of the six catalog partitions and their matching rules."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Literal

from storefront_catalog.config import settings
from storefront_catalog.models.catalog import Domain
from storefront_catalog.services.catalog.predicates import (
    AnyOf,
    Contains,
    Equals,
    Exists,
    MatchAll,
    Predicate,
    attribute,
    contains_any,
)
from storefront_catalog.services.taxonomy.normalizer import normalize

logger = logging.getLogger(__name__)

FilterKind = Literal["str", "bool"]


@dataclass(frozen=True)
class CatalogDescriptor:
    """Everything the engine knows about one catalog partition.

    ``synonyms`` recognise free-text ``category`` values belonging to the
    domain. ``legacy_markers`` are attribute keys whose mere presence marks a
    generic-catalog record as belonging to the domain, and
    ``legacy_exclusions`` are category fragments that stop such a record from
    being claimed even when a synonym matches.

    ``browse_spill`` fragments in a generic browse label pull this catalog
    into the browse.
    """

    domain: Domain
    collection: str
    default_category: str
    synonyms: tuple[str, ...] = ()
    legacy_markers: tuple[str, ...] = ()
    legacy_exclusions: tuple[str, ...] = ()
    type_attribute: str | None = None
    filters: dict[str, FilterKind] = field(default_factory=dict)
    browse_spill: tuple[str, ...] = ()
    priority: int = 0

    @property
    def is_generic(self) -> bool:
        return self.domain is Domain.GENERIC

    def supports_filter(self, key: str) -> bool:
        return key in self.filters

    def names_domain(self, normalized_category: str) -> bool:
        """True when a normalized query term just names this catalog."""
        return normalized_category in {
            normalize(self.default_category),
            normalize(self.domain.value),
        }

    def domain_predicate(self) -> Predicate:
        """Predicate recognising this domain's records in its home catalog."""
        if self.is_generic:
            return MatchAll()
        return AnyOf(
            [
                Equals("category", self.default_category),
                contains_any(["category"], self.synonyms),
            ]
        )

    def legacy_predicate(self) -> Predicate:
        """Looser predicate claiming this domain's records in the generic catalog."""
        claimed = AnyOf(
            [
                contains_any(["category"], self.synonyms),
                *(Exists(attribute(marker)) for marker in self.legacy_markers),
            ]
        )
        if not self.legacy_exclusions:
            return claimed
        return claimed & ~contains_any(["category"], self.legacy_exclusions)

    def spill_fragment(self, normalized_label: str) -> str | None:
        """The browse-spill fragment a normalized generic label mentions, if any."""
        for fragment in self.browse_spill:
            if fragment in normalized_label:
                return fragment
        return None

    def claims_category(self, category: str | None) -> bool:
        """Whether a raw category label would be routed to this catalog."""
        if self.is_generic or not category:
            return False
        lowered = category.strip().casefold()
        if normalize(lowered) == normalize(self.default_category):
            return True
        if any(fragment in lowered for fragment in self.legacy_exclusions):
            return False
        spaced = normalize(lowered)
        return any(
            synonym in lowered or normalize(synonym) in spaced for synonym in self.synonyms
        )


_STR = "str"
_BOOL = "bool"

_DESCRIPTORS: tuple[CatalogDescriptor, ...] = (
    CatalogDescriptor(
        domain=Domain.CLOTHING,
        collection="kids_clothing",
        default_category="kids-clothing",
        synonyms=(
            "kids-clothing",
            "kids clothing",
            "clothing",
            "girls cloth",
            "boys cloth",
            "winterwear",
            "girl",
            "boy",
        ),
        type_attribute="clothingType",
        filters={"clothingType": _STR, "gender": _STR, "ageGroup": _STR, "fabric": _STR},
    ),
    CatalogDescriptor(
        domain=Domain.FOOTWEAR,
        collection="footwear",
        default_category="footwear",
        synonyms=("footwear", "shoe", "sandal", "slipper", "boot"),
        legacy_exclusions=("rack", "accessor"),
        type_attribute="footwearType",
        filters={"footwearType": _STR, "shoeMaterial": _STR, "soleMaterial": _STR},
    ),
    CatalogDescriptor(
        domain=Domain.ACCESSORIES,
        collection="kids_accessories",
        default_category="kids-accessories",
        synonyms=("kids-accessories", "accessories", "watch", "sunglass"),
        legacy_markers=("watchType", "watchBrand", "accessoryType"),
        type_attribute="accessoryType",
        filters={"accessoryType": _STR, "material": _STR},
        browse_spill=("watch", "accessor"),
    ),
    CatalogDescriptor(
        domain=Domain.BABY_CARE,
        collection="baby_care",
        default_category="baby-care",
        synonyms=(
            "baby-care",
            "babycare",
            "baby care",
            "diaper",
            "wipe",
            "baby gear",
            "baby proofing",
            "safety",
        ),
        legacy_markers=("babyCareType",),
        type_attribute="babyCareType",
        filters={"babyCareType": _STR, "ageRange": _STR, "safetyStandard": _STR},
    ),
    CatalogDescriptor(
        domain=Domain.TOYS,
        collection="toys",
        default_category="toys",
        synonyms=("toy", "game", "puzzle", "doll", "car", "action figure"),
        legacy_exclusions=("cardigan", "cargo", "scarf", "card holder"),
        type_attribute="toyType",
        filters={
            "toyType": _STR,
            "ageGroup": _STR,
            "batteryRequired": _BOOL,
            "batteryIncluded": _BOOL,
        },
    ),
    CatalogDescriptor(
        domain=Domain.GENERIC,
        collection="products",
        default_category="general",
    ),
)

# Most specific first: "girl"/"boy" would otherwise pull girls' shoes into clothing.
_ROUTING_ORDER = (
    Domain.FOOTWEAR,
    Domain.ACCESSORIES,
    Domain.BABY_CARE,
    Domain.TOYS,
    Domain.CLOTHING,
)


class CatalogRegistry:
    """Immutable, priority-ordered collection of catalog descriptors."""

    def __init__(
        self,
        descriptors: tuple[CatalogDescriptor, ...] = _DESCRIPTORS,
        probe_order: list[str] | None = None,
    ) -> None:
        by_domain = {descriptor.domain: descriptor for descriptor in descriptors}
        ordered = _resolve_probe_order(list(by_domain), probe_order or [])
        self._ordered: tuple[CatalogDescriptor, ...] = tuple(
            _with_priority(by_domain[domain], index) for index, domain in enumerate(ordered)
        )
        self._by_domain = {descriptor.domain: descriptor for descriptor in self._ordered}

    def get(self, domain: Domain | str) -> CatalogDescriptor:
        if not isinstance(domain, Domain):
            domain = Domain.parse(domain)
        return self._by_domain[domain]

    @property
    def generic(self) -> CatalogDescriptor:
        return self._by_domain[Domain.GENERIC]

    def in_probe_order(self) -> tuple[CatalogDescriptor, ...]:
        return self._ordered

    def specialised(self) -> tuple[CatalogDescriptor, ...]:
        return tuple(descriptor for descriptor in self._ordered if not descriptor.is_generic)

    def route_category(self, category: str | None) -> CatalogDescriptor:
        """Pick the catalog a new product with this category belongs in."""
        for domain in _ROUTING_ORDER:
            descriptor = self._by_domain.get(domain)
            if descriptor is not None and descriptor.claims_category(category):
                return descriptor
        return self.generic

    def __iter__(self):
        return iter(self._ordered)

    def __len__(self) -> int:
        return len(self._ordered)


def _resolve_probe_order(known: list[Domain], configured: list[str]) -> list[Domain]:
    """Configured domains first, then any remaining in their default order."""
    ordered: list[Domain] = []
    for value in configured:
        try:
            domain = Domain.parse(value)
        except ValueError:
            logger.warning("Ignoring unknown catalog %r in probe order", value)
            continue
        if domain in known and domain not in ordered:
            ordered.append(domain)
    ordered.extend(domain for domain in known if domain not in ordered)
    return ordered


def _with_priority(descriptor: CatalogDescriptor, priority: int) -> CatalogDescriptor:
    return replace(descriptor, filters=dict(descriptor.filters), priority=priority)


_registry: CatalogRegistry | None = None


def get_catalog_registry() -> CatalogRegistry:
    """FastAPI dependency returning the process-wide registry."""

    global _registry
    if _registry is None:
        _registry = CatalogRegistry(probe_order=settings.probe_order)
    return _registry
