"""Catalog error taxonomy.

Services raise these; the API layer maps each class to its HTTP status and
the uniform error envelope.
"""

from typing import Any, Optional


class CatalogError(Exception):
    """Base class for all catalog errors."""

    status_code: int = 500
    code: str = "internal_error"

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class InvalidArgumentError(CatalogError):
    """Bad filter, page, range or field value."""

    status_code = 400
    code = "invalid_argument"


class NotFoundError(CatalogError):
    """A requested product does not exist."""

    status_code = 404
    code = "not_found"


class ConflictError(CatalogError):
    """A SKU is already taken."""

    status_code = 409
    code = "conflict"
