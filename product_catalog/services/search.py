"""Free-text product search.

A term matches a product when it is a case-insensitive substring of any
searchable column. How the comparison is expressed depends on the database:
PostgreSQL has a native ILIKE, everything else gets both sides lower-cased.
The repository picks the matcher; callers only see ``SubstringMatcher``.
"""

import logging
from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.sql.elements import ColumnElement

from product_catalog.models.product import Product

logger = logging.getLogger(__name__)

SEARCHABLE_COLUMNS = [
    Product.name,
    Product.description,
    Product.category,
    Product.brand,
    Product.sku,
    Product.availability_status,
    Product.available_colors,
    Product.available_sizes,
]

_ESCAPE = "\\"


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term is matched literally."""
    return (
        term.replace(_ESCAPE, _ESCAPE * 2)
        .replace("%", _ESCAPE + "%")
        .replace("_", _ESCAPE + "_")
    )


class SubstringMatcher:
    """Case-insensitive substring comparison for one database dialect."""

    def contains(self, column, term: str) -> ColumnElement:
        raise NotImplementedError


class IlikeMatcher(SubstringMatcher):
    """Uses the native case-insensitive pattern operator."""

    def contains(self, column, term: str) -> ColumnElement:
        return column.ilike(f"%{escape_like(term)}%", escape=_ESCAPE)


class LowerContainsMatcher(SubstringMatcher):
    """Lower-cases both sides before a plain LIKE."""

    def contains(self, column, term: str) -> ColumnElement:
        return func.lower(column).like(f"%{escape_like(term.lower())}%", escape=_ESCAPE)


_NATIVE_ILIKE_DIALECTS = {"postgresql"}


def matcher_for_dialect(dialect_name: str) -> SubstringMatcher:
    if dialect_name in _NATIVE_ILIKE_DIALECTS:
        return IlikeMatcher()
    return LowerContainsMatcher()


def normalize_term(term: Optional[str]) -> Optional[str]:
    """Return the stripped term, or None when there is nothing to search for."""
    if term is None:
        return None
    term = term.strip()
    return term or None


def search_predicate(
    term: Optional[str],
    matcher: SubstringMatcher,
    columns: List = None,
) -> Optional[ColumnElement]:
    """
    Build the OR of substring matches over the searchable columns.

    Returns None for a blank term, meaning "no filtering".
    """
    term = normalize_term(term)
    if term is None:
        return None
    columns = SEARCHABLE_COLUMNS if columns is None else columns
    return or_(*[matcher.contains(column, term) for column in columns])
