"""
Composition of product listing queries.

Every optional criterion of a ``ProductFilter`` is handled by one small rule
function that returns a SQL clause, or None when the criterion is absent.
``build_predicate`` runs all rules and AND-s whatever they produced, so a new
criterion only needs a new rule appended to ``FILTER_RULES``.
"""

import logging
from typing import Callable, List, Optional

from sqlalchemy import and_, func
from sqlalchemy.sql.elements import ColumnElement

from product_catalog.core.exceptions import InvalidArgumentError
from product_catalog.models.product import Product
from product_catalog.schemas.product import ProductFilter
from product_catalog.services.search import SubstringMatcher, search_predicate

logger = logging.getLogger(__name__)

FilterRule = Callable[[ProductFilter, SubstringMatcher], Optional[ColumnElement]]


def _present(value: Optional[str]) -> bool:
    return value is not None and value.strip() != ""


def equals_ignore_case(column, value: str) -> ColumnElement:
    return func.lower(column) == value.strip().lower()


def _category(criteria, matcher):
    if _present(criteria.category):
        return equals_ignore_case(Product.category, criteria.category)
    return None


def _brand(criteria, matcher):
    if _present(criteria.brand):
        return equals_ignore_case(Product.brand, criteria.brand)
    return None


def _min_price(criteria, matcher):
    if criteria.min_price is not None:
        return Product.price >= criteria.min_price
    return None


def _max_price(criteria, matcher):
    if criteria.max_price is not None:
        return Product.price <= criteria.max_price
    return None


def _min_rating(criteria, matcher):
    # NULL ratings never satisfy the comparison
    if criteria.min_rating is not None:
        return Product.customer_rating >= criteria.min_rating
    return None


def _in_stock(criteria, matcher):
    if criteria.in_stock_only:
        return Product.stock_quantity > 0
    return None


def _availability(criteria, matcher):
    if _present(criteria.availability_status):
        return equals_ignore_case(Product.availability_status, criteria.availability_status)
    return None


def _color(criteria, matcher):
    if _present(criteria.color):
        return matcher.contains(Product.available_colors, criteria.color.strip())
    return None


def _size(criteria, matcher):
    if _present(criteria.size):
        return matcher.contains(Product.available_sizes, criteria.size.strip())
    return None


def _released_from(criteria, matcher):
    if criteria.release_date_from is not None:
        return Product.release_date >= criteria.release_date_from
    return None


def _released_to(criteria, matcher):
    if criteria.release_date_to is not None:
        return Product.release_date <= criteria.release_date_to
    return None


def _search(criteria, matcher):
    return search_predicate(criteria.search_term, matcher)


FILTER_RULES: List[FilterRule] = [
    _category,
    _brand,
    _min_price,
    _max_price,
    _min_rating,
    _in_stock,
    _availability,
    _color,
    _size,
    _released_from,
    _released_to,
    _search,
]

SORTABLE_COLUMNS = {
    "name": Product.name,
    "price": Product.price,
    "category": Product.category,
    "brand": Product.brand,
    "rating": Product.customer_rating,
    "releasedate": Product.release_date,
    "stock": Product.stock_quantity,
}

DEFAULT_SORT_COLUMN = Product.name

# Text columns sort case-insensitively regardless of the database collation
TEXT_SORT_KEYS = {"name", "category", "brand"}


def sort_keys(column, descending: bool = False) -> List[ColumnElement]:
    """ORDER BY keys for one column; text columns get a lower() key first."""
    keys = [func.lower(column), column] if column.key in TEXT_SORT_KEYS else [column]
    return [key.desc() if descending else key.asc() for key in keys]


def validate_filter(criteria: ProductFilter) -> None:
    """Reject inverted ranges before any query runs."""
    if (
        criteria.min_price is not None
        and criteria.max_price is not None
        and criteria.min_price > criteria.max_price
    ):
        raise InvalidArgumentError("Minimum price cannot be greater than maximum price")

    if (
        criteria.release_date_from is not None
        and criteria.release_date_to is not None
        and criteria.release_date_from > criteria.release_date_to
    ):
        raise InvalidArgumentError("Release date from cannot be greater than release date to")


def build_predicate(
    criteria: ProductFilter,
    matcher: SubstringMatcher,
    rules: List[FilterRule] = None,
) -> Optional[ColumnElement]:
    """AND together the clauses of every rule whose criterion is present."""
    rules = FILTER_RULES if rules is None else rules
    clauses = []
    for rule in rules:
        clause = rule(criteria, matcher)
        if clause is not None:
            clauses.append(clause)

    if not clauses:
        return None
    return and_(*clauses)


def build_ordering(sort_by: Optional[str], descending: bool = False) -> List[ColumnElement]:
    """
    Map a sort field name to ORDER BY clauses.

    Unknown or missing names sort by name ascending. Id breaks ties so that
    pages never overlap.
    """
    column = None
    if _present(sort_by):
        column = SORTABLE_COLUMNS.get(sort_by.strip().lower())

    if column is None:
        return sort_keys(DEFAULT_SORT_COLUMN) + [Product.id.asc()]

    return sort_keys(column, descending) + [Product.id.asc()]
