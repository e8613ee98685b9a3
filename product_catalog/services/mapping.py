"""Field-by-field conversion between Product rows and API schemas."""

import uuid

from product_catalog.models.product import Product, utcnow
from product_catalog.schemas.product import (
    ProductBase,
    ProductCreate,
    ProductListItem,
    ProductResponse,
    ProductUpdate,
)

DEFAULT_AVAILABILITY_STATUS = "Available"


def _copy_fields(data: ProductBase, product: Product) -> Product:
    product.name = data.name
    product.description = data.description
    product.category = data.category
    product.brand = data.brand
    product.price = round(data.price, 2)
    product.stock_quantity = data.stock_quantity
    product.sku = data.sku
    product.release_date = data.release_date or utcnow().date()
    product.availability_status = data.availability_status or DEFAULT_AVAILABILITY_STATUS
    product.customer_rating = (
        round(data.customer_rating, 2) if data.customer_rating is not None else None
    )
    product.available_colors = data.available_colors
    product.available_sizes = data.available_sizes
    return product


def product_from_create(data: ProductCreate) -> Product:
    """Build a new, unsaved Product with its audit timestamps set."""
    now = utcnow()
    product = _copy_fields(data, Product(id=str(uuid.uuid4())))
    product.created_at = now
    product.updated_at = now
    return product


def apply_update(product: Product, data: ProductUpdate) -> Product:
    """Overwrite every mutable field and refresh updated_at."""
    _copy_fields(data, product)
    product.updated_at = utcnow()
    return product


def to_response(product: Product) -> ProductResponse:
    return ProductResponse(
        id=product.id,
        name=product.name,
        description=product.description,
        category=product.category,
        brand=product.brand,
        price=product.price,
        stock_quantity=product.stock_quantity,
        sku=product.sku,
        release_date=product.release_date,
        availability_status=product.availability_status,
        customer_rating=product.customer_rating,
        available_colors=product.available_colors,
        available_sizes=product.available_sizes,
        created_at=product.created_at,
        updated_at=product.updated_at,
    )


def to_list_item(product: Product) -> ProductListItem:
    return ProductListItem(
        id=product.id,
        name=product.name,
        category=product.category,
        brand=product.brand,
        price=product.price,
        sku=product.sku,
        availability_status=product.availability_status,
        customer_rating=product.customer_rating,
        stock_quantity=product.stock_quantity,
    )
