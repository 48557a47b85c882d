"""Tests for the category taxonomy."""

import json

import pytest

from storefront_catalog.services.taxonomy.category_taxonomy import (
    CategoryTaxonomy,
    TaxonomyTable,
    load_taxonomy,
)


def test_packaged_taxonomy_loads(taxonomy):
    assert taxonomy.version == "2024.1"
    assert taxonomy.is_parent("Men's Shoes")
    assert "Women Heels" in taxonomy.children("Women's Shoes")


def test_expand_parent_includes_children(taxonomy):
    expanded = taxonomy.expand("Men's Shoes")
    assert expanded >= {"Men's Shoes", "Men Sports Shoes", "Men Casual Shoes"}


def test_expand_is_case_insensitive(taxonomy):
    assert "Women Digital Watches" in taxonomy.expand("women watches")


def test_expand_unknown_label_returns_itself(taxonomy):
    assert taxonomy.expand("Kites") == {"Kites"}


def test_expand_empty_label_returns_itself(taxonomy):
    assert taxonomy.expand("") == {""}
    assert taxonomy.expand("   ") == {"   "}
    assert taxonomy.expand(None) == set()


def test_expand_group_reaches_members_and_their_children(taxonomy):
    expanded = taxonomy.expand("Shoes")
    assert "Sneakers" in expanded
    assert "Men's Shoes" in expanded
    assert "Men Running Shoes" in expanded


def test_alias_rewrites_historical_variants(taxonomy):
    assert taxonomy.alias("Womens Shoes") == "Women's Shoes"
    assert taxonomy.alias("mens shoes") == "Men's Shoes"
    assert taxonomy.alias("Girl Watches") == "Women Watches"


def test_alias_matches_display_form_not_slug(taxonomy):
    # Aliases are authored against display strings; slugs are not folded first.
    assert taxonomy.alias("mens-shoes") == "mens-shoes"


def test_alias_passes_unknown_labels_through(taxonomy):
    assert taxonomy.alias("Sandals") == "Sandals"
    assert taxonomy.alias(None) == ""


def test_custom_table():
    taxonomy = CategoryTaxonomy(
        TaxonomyTable(
            version="t1",
            parents={"Outdoor": ["Tents", "Sleeping Bags"]},
            aliases={"Camping": "Outdoor"},
        )
    )
    assert taxonomy.expand(taxonomy.alias("camping")) == {"Outdoor", "Tents", "Sleeping Bags"}


def test_load_taxonomy_from_path(tmp_path):
    path = tmp_path / "taxonomy.json"
    path.write_text(json.dumps({"version": "x", "parents": {"A": ["B"]}}), encoding="utf-8")

    taxonomy = load_taxonomy(path)

    assert taxonomy.version == "x"
    assert taxonomy.expand("a") == {"a", "B"}


def test_load_taxonomy_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_taxonomy(tmp_path / "missing.json")
