"""Composable match predicates evaluated against product records.

Field paths name either a top-level record field (``category``,
``subcategory``, ``title``) or a domain attribute (``attributes.footwearType``).
String comparisons are always case-insensitive.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any

from storefront_catalog.models.product import ProductRecord

ATTRIBUTE_PREFIX = "attributes."

_MISSING = object()


def field_value(record: ProductRecord, path: str) -> Any:
    """Return the value at ``path`` or a sentinel when the field is absent."""
    if path.startswith(ATTRIBUTE_PREFIX):
        return record.domain_attributes.get(path[len(ATTRIBUTE_PREFIX) :], _MISSING)
    value = getattr(record, path, None)
    return _MISSING if value is None else value


def attribute(key: str) -> str:
    return f"{ATTRIBUTE_PREFIX}{key}"


class Predicate(ABC):
    """A boolean test over a single record."""

    @abstractmethod
    def matches(self, record: ProductRecord) -> bool:
        """Return True when the record satisfies the predicate."""

    @abstractmethod
    def describe(self) -> Any:
        """Return a JSON-friendly rendering used for query logging."""

    def __and__(self, other: Predicate) -> Predicate:
        return AllOf([self, other])

    def __or__(self, other: Predicate) -> Predicate:
        return AnyOf([self, other])

    def __invert__(self) -> Predicate:
        return Not(self)


class MatchAll(Predicate):
    def matches(self, record: ProductRecord) -> bool:
        return True

    def describe(self) -> Any:
        return {}


class Contains(Predicate):
    """Substring match; non-string field values never match."""

    def __init__(self, path: str, fragment: str) -> None:
        self.path = path
        self.fragment = fragment.casefold()

    def matches(self, record: ProductRecord) -> bool:
        value = field_value(record, self.path)
        return isinstance(value, str) and self.fragment in value.casefold()

    def describe(self) -> Any:
        return {self.path: {"contains": self.fragment}}


class Equals(Predicate):
    """Equality; strings compare case-insensitively, everything else exactly."""

    def __init__(self, path: str, expected: Any) -> None:
        self.path = path
        self.expected = expected

    def matches(self, record: ProductRecord) -> bool:
        value = field_value(record, self.path)
        if isinstance(self.expected, str):
            return isinstance(value, str) and value.casefold() == self.expected.casefold()
        if isinstance(self.expected, bool):
            return isinstance(value, bool) and value is self.expected
        return value == self.expected

    def describe(self) -> Any:
        return {self.path: self.expected}


class Exists(Predicate):
    """Field is present and not empty."""

    def __init__(self, path: str) -> None:
        self.path = path

    def matches(self, record: ProductRecord) -> bool:
        value = field_value(record, self.path)
        return value is not _MISSING and value != ""

    def describe(self) -> Any:
        return {self.path: {"exists": True}}


class AnyOf(Predicate):
    def __init__(self, predicates: Iterable[Predicate]) -> None:
        self.predicates = list(predicates)

    def matches(self, record: ProductRecord) -> bool:
        return any(predicate.matches(record) for predicate in self.predicates)

    def describe(self) -> Any:
        return {"or": [predicate.describe() for predicate in self.predicates]}


class AllOf(Predicate):
    def __init__(self, predicates: Iterable[Predicate]) -> None:
        self.predicates = list(predicates)

    def matches(self, record: ProductRecord) -> bool:
        return all(predicate.matches(record) for predicate in self.predicates)

    def describe(self) -> Any:
        return {"and": [predicate.describe() for predicate in self.predicates]}


class Not(Predicate):
    def __init__(self, predicate: Predicate) -> None:
        self.predicate = predicate

    def matches(self, record: ProductRecord) -> bool:
        return not self.predicate.matches(record)

    def describe(self) -> Any:
        return {"not": self.predicate.describe()}


def contains_any(paths: Iterable[str], fragments: Iterable[str]) -> AnyOf:
    """Match when any of ``paths`` contains any of ``fragments``."""
    fragments = [fragment for fragment in fragments if fragment]
    return AnyOf(Contains(path, fragment) for path in paths for fragment in fragments)


def all_of(predicates: Iterable[Predicate]) -> Predicate:
    """AND the given clauses, collapsing trivial cases."""
    clauses = [predicate for predicate in predicates if not isinstance(predicate, MatchAll)]
    if not clauses:
        return MatchAll()
    if len(clauses) == 1:
        return clauses[0]
    return AllOf(clauses)
