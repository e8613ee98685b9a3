import logging
import time
import uuid
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query, Request, Response, status

from product_catalog.api.deps import get_product_service
from product_catalog.core.exceptions import InvalidArgumentError, NotFoundError
from product_catalog.schemas.common import BulkCreateResponse, GenerateResponse, PagedResult
from product_catalog.schemas.product import (
    ProductCreate,
    ProductFilter,
    ProductListItem,
    ProductResponse,
    ProductTemplate,
    ProductUpdate,
)
from product_catalog.services.product_service import ProductService

logger = logging.getLogger(__name__)

router = APIRouter()


def product_filter_params(
    search_term: Optional[str] = Query(None, alias="searchTerm", max_length=100),
    category: Optional[str] = Query(None, max_length=100),
    brand: Optional[str] = Query(None, max_length=100),
    min_price: Optional[float] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[float] = Query(None, alias="maxPrice", ge=0),
    availability_status: Optional[str] = Query(None, alias="availabilityStatus", max_length=50),
    min_rating: Optional[float] = Query(None, alias="minRating", ge=0, le=5),
    in_stock_only: Optional[bool] = Query(None, alias="inStockOnly"),
    color: Optional[str] = Query(None, max_length=100),
    size: Optional[str] = Query(None, max_length=100),
    release_date_from: Optional[date] = Query(None, alias="releaseDateFrom"),
    release_date_to: Optional[date] = Query(None, alias="releaseDateTo"),
    page: int = Query(1),
    page_size: int = Query(10, alias="pageSize"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_direction: str = Query("asc", alias="sortDirection"),
) -> ProductFilter:
    """Collect the listing criteria from the query string."""
    return ProductFilter(
        search_term=search_term,
        category=category,
        brand=brand,
        min_price=min_price,
        max_price=max_price,
        availability_status=availability_status,
        min_rating=min_rating,
        in_stock_only=in_stock_only,
        color=color,
        size=size,
        release_date_from=release_date_from,
        release_date_to=release_date_to,
        page=page,
        page_size=page_size,
        sort_by=sort_by,
        sort_direction=sort_direction,
    )


@router.get("", response_model=PagedResult[ProductListItem])
def list_products(
    criteria: ProductFilter = Depends(product_filter_params),
    service: ProductService = Depends(get_product_service),
):
    """Get a page of products matching the query-string filters."""
    return service.list_products(criteria)


@router.post("/filter", response_model=PagedResult[ProductListItem])
def filter_products(
    criteria: Optional[ProductFilter] = Body(None),
    service: ProductService = Depends(get_product_service),
):
    """Same as the listing, with the criteria sent as a JSON body."""
    return service.list_products(criteria or ProductFilter())


@router.get("/search", response_model=PagedResult[ProductListItem])
def search_products(
    search_term: Optional[str] = Query(None, alias="searchTerm", max_length=100),
    page: int = Query(1),
    page_size: int = Query(10, alias="pageSize"),
    service: ProductService = Depends(get_product_service),
):
    """Substring search over the text columns."""
    if not search_term or not search_term.strip():
        raise InvalidArgumentError("Search term cannot be empty")
    return service.search_products(search_term, page, page_size)


@router.get("/top-rated", response_model=List[ProductListItem])
def top_rated_products(
    minimum_rating: float = Query(4.0, alias="minimumRating"),
    count: int = Query(10),
    service: ProductService = Depends(get_product_service),
):
    return service.top_rated(minimum_rating, count)


@router.get("/price-range", response_model=PagedResult[ProductListItem])
def products_by_price_range(
    min_price: float = Query(..., alias="minPrice"),
    max_price: float = Query(..., alias="maxPrice"),
    page: int = Query(1),
    page_size: int = Query(10, alias="pageSize"),
    service: ProductService = Depends(get_product_service),
):
    return service.products_by_price_range(min_price, max_price, page, page_size)


@router.get("/by-sku/{sku}", response_model=ProductResponse)
def get_product_by_sku(
    sku: str,
    service: ProductService = Depends(get_product_service),
):
    return service.get_product_by_sku(sku)


@router.get("/category/{category}", response_model=PagedResult[ProductListItem])
def products_by_category(
    category: str,
    page: int = Query(1),
    page_size: int = Query(10, alias="pageSize"),
    service: ProductService = Depends(get_product_service),
):
    return service.products_by_category(category, page, page_size)


@router.get("/brand/{brand}", response_model=PagedResult[ProductListItem])
def products_by_brand(
    brand: str,
    page: int = Query(1),
    page_size: int = Query(10, alias="pageSize"),
    service: ProductService = Depends(get_product_service),
):
    return service.products_by_brand(brand, page, page_size)


@router.post("/bulk", response_model=BulkCreateResponse, status_code=status.HTTP_201_CREATED)
def bulk_create_products(
    products: List[ProductCreate],
    service: ProductService = Depends(get_product_service),
):
    """Create several products at once; the whole batch fails on any SKU clash."""
    count = service.bulk_create(products)
    return BulkCreateResponse(message=f"Successfully created {count} products", count=count)


@router.post("/generate/{count}", response_model=GenerateResponse)
def generate_products(
    count: int,
    template: Optional[ProductTemplate] = Body(None),
    service: ProductService = Depends(get_product_service),
):
    """Generate and store ``count`` sample products, optionally seeded from a template."""
    started = time.perf_counter()
    created = service.generate_products(count, template)
    elapsed_ms = round((time.perf_counter() - started) * 1000, 2)

    logger.info(f"Generated {created} products in {elapsed_ms}ms")
    return GenerateResponse(
        message=f"Successfully generated {created} products",
        count=created,
        elapsed_ms=elapsed_ms,
    )


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(
    product: ProductCreate,
    request: Request,
    response: Response,
    service: ProductService = Depends(get_product_service),
):
    """Create a new product."""
    created = service.create_product(product)
    response.headers["Location"] = str(request.url_for("get_product", product_id=created.id))
    return created


def canonical_product_id(product_id: str) -> Optional[str]:
    """Normalised UUID string, or None when the id cannot name a product."""
    try:
        return str(uuid.UUID(product_id))
    except ValueError:
        return None


def _require_product_id(product_id: str) -> str:
    canonical = canonical_product_id(product_id)
    if canonical is None:
        raise NotFoundError(f"Product with ID {product_id} not found")
    return canonical


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(
    product_id: str,
    service: ProductService = Depends(get_product_service),
):
    """Get a specific product by ID."""
    return service.get_product(_require_product_id(product_id))


@router.head("/{product_id}")
def product_exists(
    product_id: str,
    service: ProductService = Depends(get_product_service),
):
    """Existence check without a body."""
    canonical = canonical_product_id(product_id)
    if canonical is not None and service.product_exists(canonical):
        return Response(status_code=status.HTTP_200_OK)
    logger.warning(f"Product with ID {product_id} not found")
    return Response(status_code=status.HTTP_404_NOT_FOUND)


@router.put("/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: str,
    product: ProductUpdate,
    service: ProductService = Depends(get_product_service),
):
    """Replace every field of an existing product."""
    return service.update_product(_require_product_id(product_id), product)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: str,
    service: ProductService = Depends(get_product_service),
):
    service.delete_product(_require_product_id(product_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
