import math

from product_catalog.core.config import settings
from product_catalog.core.exceptions import InvalidArgumentError


def validate_page(page: int) -> int:
    """Reject page numbers below 1."""
    if page is None or page < 1:
        raise InvalidArgumentError("Page must be greater than 0")
    return page


def clamp_page_size(page_size: int, maximum: int = None) -> int:
    """Cap the page size to [1, maximum] instead of rejecting it."""
    maximum = settings.MAX_PAGE_SIZE if maximum is None else maximum
    if page_size is None:
        return settings.DEFAULT_PAGE_SIZE
    return max(1, min(page_size, maximum))


def offset_for(page: int, page_size: int) -> int:
    return (page - 1) * page_size


def total_pages(total_count: int, page_size: int) -> int:
    return math.ceil(total_count / page_size) if page_size > 0 else 0


def has_previous(page: int) -> bool:
    return page > 1


def has_next(total_count: int, page: int, page_size: int) -> bool:
    return page < total_pages(total_count, page_size)


def first_item_on_page(page: int, page_size: int) -> int:
    return (page - 1) * page_size + 1


def last_item_on_page(total_count: int, page: int, page_size: int) -> int:
    return min(page * page_size, total_count)
