"""Tests for the dialect-aware substring matchers and search predicate."""

from sqlalchemy.dialects import postgresql, sqlite

from product_catalog.models.product import Product
from product_catalog.services.query import equals_ignore_case
from product_catalog.services.search import (
    IlikeMatcher,
    LowerContainsMatcher,
    escape_like,
    matcher_for_dialect,
    normalize_term,
    search_predicate,
)


def _compile(clause, dialect):
    return str(clause.compile(dialect=dialect, compile_kwargs={"literal_binds": True}))


def test_matcher_for_dialect():
    assert isinstance(matcher_for_dialect("postgresql"), IlikeMatcher)
    assert isinstance(matcher_for_dialect("sqlite"), LowerContainsMatcher)
    assert isinstance(matcher_for_dialect("mysql"), LowerContainsMatcher)


def test_postgresql_uses_ilike():
    clause = IlikeMatcher().contains(Product.name, "Apple")
    sql = _compile(clause, postgresql.dialect())

    assert "ILIKE" in sql
    assert "%Apple%" in sql


def test_other_dialects_lower_both_sides():
    clause = LowerContainsMatcher().contains(Product.name, "ApPLe")
    sql = _compile(clause, sqlite.dialect())

    assert "lower(products.name) LIKE" in sql
    assert "%apple%" in sql
    assert "ILIKE" not in sql


def test_escape_like_neutralises_wildcards():
    assert escape_like("50%_off") == "50\\%\\_off"
    assert escape_like("a\\b") == "a\\\\b"


def test_normalize_term():
    assert normalize_term(None) is None
    assert normalize_term("   ") is None
    assert normalize_term("  phone ") == "phone"


def test_blank_term_means_no_predicate():
    assert search_predicate("", LowerContainsMatcher()) is None
    assert search_predicate("  \t", LowerContainsMatcher()) is None


def test_predicate_covers_every_searchable_column():
    sql = _compile(search_predicate("x", LowerContainsMatcher()), sqlite.dialect())

    for column in (
        "name",
        "description",
        "category",
        "brand",
        "sku",
        "availability_status",
        "available_colors",
        "available_sizes",
    ):
        assert f"lower(products.{column})" in sql
    assert sql.count(" OR ") == 7


def test_search_against_store_is_literal(repository, db_session):
    db_session.add_all(
        [
            Product(name="Half price", sku="SKU-1", price=10, stock_quantity=1, description="50% off"),
            Product(name="Full price", sku="SKU-2", price=20, stock_quantity=1, description="500 off"),
        ]
    )
    db_session.commit()

    items, total = repository.get_paged(1, 10, search_predicate("50%", repository.matcher))

    assert total == 1
    assert items[0].sku == "SKU-1"


def test_fallback_matcher_folds_non_ascii_case(repository, db_session):
    db_session.add_all(
        [
            Product(name="CAFÉ Noir", sku="CAF-1", price=4, stock_quantity=1, category="ÉLECTRONIQUE"),
            Product(name="Cafe latte", sku="CAF-2", price=5, stock_quantity=1, category="Boissons"),
        ]
    )
    db_session.commit()

    items, total = repository.get_paged(1, 10, search_predicate("café", repository.matcher))
    assert total == 1
    assert items[0].sku == "CAF-1"

    items, total = repository.get_paged(1, 10, equals_ignore_case(Product.category, "électronique"))
    assert [p.sku for p in items] == ["CAF-1"]
