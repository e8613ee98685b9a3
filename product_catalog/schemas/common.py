from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

from product_catalog.services import pagination

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base schema serialised with camelCase keys; snake_case is accepted on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# Schema for a page of results plus the derived page math
class PagedResult(CamelModel, Generic[T]):
    items: List[T] = Field(default_factory=list)
    page: int
    page_size: int
    total_count: int

    @computed_field(alias="totalPages")
    @property
    def total_pages(self) -> int:
        return pagination.total_pages(self.total_count, self.page_size)

    @computed_field(alias="hasPrevious")
    @property
    def has_previous(self) -> bool:
        return pagination.has_previous(self.page)

    @computed_field(alias="hasNext")
    @property
    def has_next(self) -> bool:
        return pagination.has_next(self.total_count, self.page, self.page_size)

    @computed_field(alias="firstItemOnPage")
    @property
    def first_item_on_page(self) -> int:
        return pagination.first_item_on_page(self.page, self.page_size)

    @computed_field(alias="lastItemOnPage")
    @property
    def last_item_on_page(self) -> int:
        return pagination.last_item_on_page(self.total_count, self.page, self.page_size)


# Schema for the uniform error envelope
class ErrorResponse(CamelModel):
    message: str
    code: str
    correlation_id: Optional[str] = None
    details: Optional[Any] = None


class BulkCreateResponse(CamelModel):
    message: str
    count: int


class GenerateResponse(CamelModel):
    message: str
    count: int
    elapsed_ms: float
