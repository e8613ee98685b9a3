from datetime import date, datetime
from typing import List, Optional

from pydantic import Field, computed_field, field_validator

from product_catalog.schemas.common import CamelModel


def split_options(value: Optional[str]) -> List[str]:
    """Split a comma-separated option list, dropping blank entries."""
    if not value or not value.strip():
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def format_price(price: float) -> str:
    return f"${price:,.2f}"


# Base schema for Product shared properties
class ProductBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    category: Optional[str] = Field(None, max_length=100)
    brand: Optional[str] = Field(None, max_length=100)
    price: float = Field(..., gt=0, le=999999.99)
    stock_quantity: int = Field(0, ge=0)
    sku: str = Field(..., min_length=1, max_length=100)
    release_date: Optional[date] = None
    availability_status: Optional[str] = Field(None, max_length=50)
    customer_rating: Optional[float] = Field(None, ge=0, le=5)
    available_colors: Optional[str] = Field(None, max_length=500)
    available_sizes: Optional[str] = Field(None, max_length=500)

    @field_validator("name", "sku")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


# Schema for creating a new Product
class ProductCreate(ProductBase):
    pass


# Schema for replacing every field of an existing Product
class ProductUpdate(ProductBase):
    pass


# Optional seed values for the sample data generator
class ProductTemplate(CamelModel):
    name: Optional[str] = Field(None, max_length=150)
    description: Optional[str] = Field(None, max_length=1900)
    category: Optional[str] = Field(None, max_length=100)
    brand: Optional[str] = Field(None, max_length=100)
    price: Optional[float] = Field(None, gt=0, le=999999.99)
    stock_quantity: Optional[int] = Field(None, ge=0)
    sku: Optional[str] = Field(None, max_length=90)
    release_date: Optional[date] = None
    availability_status: Optional[str] = Field(None, max_length=50)
    customer_rating: Optional[float] = Field(None, ge=0, le=5)
    available_colors: Optional[str] = Field(None, max_length=500)
    available_sizes: Optional[str] = Field(None, max_length=500)


# Schema for a product in list views
class ProductListItem(CamelModel):
    id: str
    name: str
    category: Optional[str] = None
    brand: Optional[str] = None
    price: float
    sku: str
    availability_status: Optional[str] = None
    customer_rating: Optional[float] = None
    stock_quantity: int

    @computed_field(alias="isInStock")
    @property
    def is_in_stock(self) -> bool:
        return self.stock_quantity > 0

    @computed_field(alias="formattedPrice")
    @property
    def formatted_price(self) -> str:
        return format_price(self.price)


# Schema for a single product (returned to client)
class ProductResponse(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    brand: Optional[str] = None
    price: float
    stock_quantity: int
    sku: str
    release_date: Optional[date] = None
    availability_status: Optional[str] = None
    customer_rating: Optional[float] = None
    available_colors: Optional[str] = None
    available_sizes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @computed_field(alias="isInStock")
    @property
    def is_in_stock(self) -> bool:
        return self.stock_quantity > 0

    @computed_field(alias="formattedPrice")
    @property
    def formatted_price(self) -> str:
        return format_price(self.price)

    @computed_field(alias="colorOptions")
    @property
    def color_options(self) -> List[str]:
        return split_options(self.available_colors)

    @computed_field(alias="sizeOptions")
    @property
    def size_options(self) -> List[str]:
        return split_options(self.available_sizes)


# Filter, sort and pagination criteria for product listings
class ProductFilter(CamelModel):
    search_term: Optional[str] = Field(None, max_length=100)
    category: Optional[str] = Field(None, max_length=100)
    brand: Optional[str] = Field(None, max_length=100)
    min_price: Optional[float] = Field(None, ge=0)
    max_price: Optional[float] = Field(None, ge=0)
    availability_status: Optional[str] = Field(None, max_length=50)
    min_rating: Optional[float] = Field(None, ge=0, le=5)
    in_stock_only: Optional[bool] = None
    color: Optional[str] = Field(None, max_length=100)
    size: Optional[str] = Field(None, max_length=100)
    release_date_from: Optional[date] = None
    release_date_to: Optional[date] = None
    page: int = 1
    page_size: int = 10
    sort_by: Optional[str] = None
    sort_direction: str = "asc"

    @property
    def is_descending(self) -> bool:
        return (self.sort_direction or "").lower() == "desc"
