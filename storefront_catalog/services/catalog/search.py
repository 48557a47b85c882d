"""Federated browse/search over a domain's home catalog and the legacy catalog."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from storefront_catalog.models.catalog import Domain
from storefront_catalog.models.product import ProductRecord, ProductView
from storefront_catalog.services.catalog.exceptions import (
    CatalogOutageError,
    CatalogUnavailableError,
)
from storefront_catalog.services.catalog.predicates import (
    AnyOf,
    Contains,
    Equals,
    Exists,
    Predicate,
    all_of,
    attribute,
    contains_any,
)
from storefront_catalog.services.catalog.registry import CatalogDescriptor, CatalogRegistry
from storefront_catalog.services.presentation.presenter import ProductPresenter
from storefront_catalog.services.storage.catalog_store import CatalogStores, created_sort_key
from storefront_catalog.services.taxonomy.category_taxonomy import CategoryTaxonomy
from storefront_catalog.services.taxonomy.normalizer import normalize

logger = logging.getLogger(__name__)

_LABEL_FIELDS = ("category", "subcategory")
_TRUE_VALUES = {"true", "1", "yes"}
_FALSE_VALUES = {"false", "0", "no"}


@dataclass(frozen=True)
class SearchPlan:
    """Predicates for one search; ``legacy`` is None when the legacy pass is skipped.

    ``spill`` is set only for generic browses whose label names a catalog
    that spills into the generic listing (watches and accessories).
    """

    home: Predicate
    legacy: Predicate | None
    spill: Predicate | None = None
    spill_domain: Domain | None = None


class FederatedSearch:
    """Builds tolerant predicates and merges home and legacy catalog results.

    The home catalog is queried with the domain predicate; the generic catalog
    is queried in parallel with a looser predicate that also recognises
    pre-migration records by their attributes. Home records win on id
    collisions and the merged list is ordered newest first.

    A generic browse whose label mentions a catalog's ``browse_spill``
    fragment (``watch``, ``accessor``) also lists that catalog's matching
    records and widens the generic query to its marker attributes.
    """

    def __init__(
        self,
        registry: CatalogRegistry,
        stores: CatalogStores,
        taxonomy: CategoryTaxonomy,
        presenter: ProductPresenter,
    ) -> None:
        self._registry = registry
        self._stores = stores
        self._taxonomy = taxonomy
        self._presenter = presenter

    def plan(
        self,
        domain: Domain,
        raw_category: str | None = "",
        raw_subcategory: str | None = "",
        attribute_filters: Mapping[str, Any] | None = None,
    ) -> SearchPlan:
        descriptor = self._registry.get(domain)
        raw_category = (raw_category or "").strip()
        category = self._taxonomy.alias(raw_category)
        norm_category = normalize(category)
        subcategory = normalize(raw_subcategory)

        filter_clauses = self._filter_clauses(descriptor, attribute_filters or {})
        labels = self._expanded_labels(raw_category, category)
        narrowing = None
        if norm_category and not descriptor.names_domain(norm_category):
            narrowing = contains_any(_LABEL_FIELDS, labels)

        spill = spill_domain = None
        if descriptor.is_generic and norm_category:
            for target in self._registry.specialised():
                fragment = target.spill_fragment(norm_category)
                if fragment is None:
                    continue
                if narrowing is not None:
                    narrowing = narrowing | _marker_widening(target, fragment)
                spill = self._spill_predicate(target, labels + [fragment], subcategory)
                spill_domain = target.domain
                break

        home_clauses: list[Predicate] = []
        if norm_category:
            home_clauses.append(descriptor.domain_predicate())
        if subcategory:
            home_clauses.append(contains_any(["subcategory", "category"], [subcategory]))
        if narrowing is not None:
            home_clauses.append(narrowing)
        home_clauses.extend(filter_clauses)

        legacy = None
        if norm_category and not descriptor.is_generic:
            legacy_clauses: list[Predicate] = [descriptor.legacy_predicate()]
            if subcategory:
                legacy_clauses.append(contains_any(_typed_paths(descriptor), [subcategory]))
            if narrowing is not None:
                legacy_clauses.append(narrowing)
            legacy_clauses.extend(filter_clauses)
            legacy = all_of(legacy_clauses)

        return SearchPlan(
            home=all_of(home_clauses),
            legacy=legacy,
            spill=spill,
            spill_domain=spill_domain,
        )

    async def search(
        self,
        domain: Domain,
        raw_category: str | None = "",
        raw_subcategory: str | None = "",
        attribute_filters: Mapping[str, Any] | None = None,
    ) -> list[ProductView]:
        plan = self.plan(domain, raw_category, raw_subcategory, attribute_filters)
        legacy_store = self._stores[self._registry.generic.domain]

        # Earlier sources win id collisions.
        sources = [(self._stores[domain], plan.home)]
        if plan.legacy is not None:
            sources.append((legacy_store, plan.legacy))
        if plan.spill is not None:
            sources.insert(0, (self._stores[plan.spill_domain], plan.spill))

        for store, predicate in sources:
            logger.debug("%s query: %s", store.collection, predicate.describe())
        outcomes = await asyncio.gather(
            *(store.find(predicate) for store, predicate in sources),
            return_exceptions=True,
        )
        results = [
            self._unwrap(store.collection, outcome)
            for (store, _), outcome in zip(sources, outcomes)
        ]
        if all(result is None for result in results):
            raise CatalogOutageError([store.collection for store, _ in sources])

        origin: dict[str, Domain] = {}
        for (store, _), records in zip(sources, results):
            logger.info("Found %d products in %s", len(records or []), store.collection)
            for record in records or []:
                origin.setdefault(record.id, store.domain)

        merged = merge_by_id(*(records or [] for records in results))
        ranked = sorted(merged, key=created_sort_key, reverse=True)
        return [self._presenter.present(record, origin[record.id]) for record in ranked]

    def _expanded_labels(self, raw_category: str, category: str) -> list[str]:
        if not category:
            return []
        expanded = {category} | self._taxonomy.expand(raw_category) | self._taxonomy.expand(category)
        labels = {normalize(label) for label in expanded}
        # Stored labels keep their hyphens ("kids-accessories"), so match the raw form too.
        labels.update(label.strip().lower() for label in expanded)
        labels.discard("")
        return sorted(labels)

    @staticmethod
    def _spill_predicate(
        target: CatalogDescriptor,
        labels: list[str],
        subcategory: str,
    ) -> Predicate:
        clauses = [
            target.domain_predicate(),
            contains_any([*_typed_paths(target), "title"], labels),
        ]
        if subcategory:
            clauses.append(contains_any(_typed_paths(target), [subcategory]))
        return all_of(clauses)

    def _filter_clauses(
        self,
        descriptor: CatalogDescriptor,
        attribute_filters: Mapping[str, Any],
    ) -> list[Predicate]:
        clauses: list[Predicate] = []
        for key, value in attribute_filters.items():
            if not descriptor.supports_filter(key):
                logger.debug("Ignoring unsupported %s filter %r", descriptor.domain.value, key)
                continue
            if value is None or value == "":
                continue
            if descriptor.filters[key] == "bool":
                flag = _parse_bool(value)
                if flag is None:
                    logger.debug("Ignoring non-boolean value %r for filter %r", value, key)
                    continue
                clauses.append(Equals(attribute(key), flag))
            else:
                clauses.append(Contains(attribute(key), str(value).strip()))
        return clauses

    @staticmethod
    def _unwrap(collection: str, outcome: Any) -> list[ProductRecord] | None:
        if isinstance(outcome, CatalogUnavailableError):
            logger.warning(
                "Catalog query failed, continuing without it",
                extra={"collection": collection, "error": str(outcome)},
            )
            return None
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


def merge_by_id(*batches: list[ProductRecord]) -> list[ProductRecord]:
    """Concatenate ``batches``, keeping only the first record seen for each id."""
    seen: set[str] = set()
    merged = []
    for batch in batches:
        for record in batch:
            if record.id not in seen:
                seen.add(record.id)
                merged.append(record)
    return merged


def _typed_paths(descriptor: CatalogDescriptor) -> list[str]:
    paths = ["subcategory", "category"]
    if descriptor.type_attribute:
        paths.insert(0, attribute(descriptor.type_attribute))
    return paths


def _marker_widening(target: CatalogDescriptor, fragment: str) -> Predicate:
    """``category`` mentions the fragment, or a marker attribute named after it is set."""
    markers = [marker for marker in target.legacy_markers if fragment in marker.casefold()]
    return AnyOf([Contains("category", fragment), *(Exists(attribute(m)) for m in markers)])


def _parse_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    lowered = str(value).strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return None
