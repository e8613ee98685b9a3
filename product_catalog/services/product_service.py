import logging
from typing import List, Optional, Set

from product_catalog.core.config import settings
from product_catalog.core.exceptions import ConflictError, InvalidArgumentError, NotFoundError
from product_catalog.models.product import Product
from product_catalog.repositories.product_repository import ProductRepository
from product_catalog.schemas.common import PagedResult
from product_catalog.schemas.product import (
    ProductCreate,
    ProductFilter,
    ProductListItem,
    ProductResponse,
    ProductTemplate,
    ProductUpdate,
)
from product_catalog.services import mapping, query
from product_catalog.services.generator import ProductGenerator
from product_catalog.services.pagination import clamp_page_size, validate_page
from product_catalog.services.search import search_predicate

logger = logging.getLogger(__name__)


class ProductService:
    """
    Product use cases: filtered listing, search, lookups and mutations.

    Errors are raised as ``CatalogError`` subclasses and translated to HTTP
    responses by the API layer.
    """

    MAX_GENERATE_ATTEMPTS = 5

    def __init__(self, repository: ProductRepository, generator: Optional[ProductGenerator] = None):
        self.repository = repository
        self.generator = generator or ProductGenerator()

    # --- Queries ----------------------------------------------------------------

    def list_products(self, criteria: ProductFilter) -> PagedResult[ProductListItem]:
        """Return one page of products matching every present criterion."""
        page = validate_page(criteria.page)
        page_size = clamp_page_size(criteria.page_size)
        query.validate_filter(criteria)

        predicate = query.build_predicate(criteria, self.repository.matcher)
        ordering = query.build_ordering(criteria.sort_by, criteria.is_descending)

        products, total_count = self.repository.get_paged(page, page_size, predicate, ordering)
        logger.info(f"Retrieved {len(products)} products out of {total_count}")
        return self._paged(products, total_count, page, page_size)

    def search_products(self, search_term: Optional[str], page: int = 1, page_size: int = 10) -> PagedResult[ProductListItem]:
        """Substring search ordered by name; a blank term returns everything."""
        page = validate_page(page)
        page_size = clamp_page_size(page_size)

        predicate = search_predicate(search_term, self.repository.matcher)
        products, total_count = self.repository.get_paged(
            page, page_size, predicate, query.build_ordering("name")
        )
        logger.info(f"Found {len(products)} products out of {total_count} matching '{search_term}'")
        return self._paged(products, total_count, page, page_size)

    def get_product(self, product_id: str) -> ProductResponse:
        product = self.repository.get_by_id(product_id)
        if product is None:
            raise NotFoundError(f"Product with ID {product_id} not found")
        return mapping.to_response(product)

    def get_product_by_sku(self, sku: str) -> ProductResponse:
        if not sku or not sku.strip():
            raise InvalidArgumentError("SKU cannot be null or empty")
        product = self.repository.get_by_sku(sku.strip())
        if product is None:
            raise NotFoundError(f"Product with SKU {sku} not found")
        return mapping.to_response(product)

    def products_by_category(self, category: str, page: int = 1, page_size: int = 10) -> PagedResult[ProductListItem]:
        if not category or not category.strip():
            raise InvalidArgumentError("Category cannot be null or empty")
        return self.list_products(ProductFilter.model_construct(category=category, page=page, page_size=page_size))

    def products_by_brand(self, brand: str, page: int = 1, page_size: int = 10) -> PagedResult[ProductListItem]:
        if not brand or not brand.strip():
            raise InvalidArgumentError("Brand cannot be null or empty")
        return self.list_products(ProductFilter.model_construct(brand=brand, page=page, page_size=page_size))

    def products_by_price_range(
        self, min_price: float, max_price: float, page: int = 1, page_size: int = 10
    ) -> PagedResult[ProductListItem]:
        if min_price < 0:
            raise InvalidArgumentError("Minimum price cannot be negative")
        if max_price < min_price:
            raise InvalidArgumentError("Maximum price cannot be less than minimum price")
        return self.list_products(
            ProductFilter.model_construct(
                min_price=min_price,
                max_price=max_price,
                page=page,
                page_size=page_size,
                sort_by="price",
            )
        )

    def top_rated(self, minimum_rating: float = 4.0, count: int = 10) -> List[ProductListItem]:
        if minimum_rating < 0 or minimum_rating > 5:
            raise InvalidArgumentError("Rating must be between 0 and 5")
        if count <= 0:
            raise InvalidArgumentError("Count must be greater than 0")
        products = self.repository.get_top_rated(minimum_rating, count)
        return [mapping.to_list_item(p) for p in products]

    def product_exists(self, product_id: str) -> bool:
        return self.repository.exists(product_id)

    # --- Mutations --------------------------------------------------------------

    def create_product(self, data: ProductCreate) -> ProductResponse:
        if self.repository.exists_by_sku(data.sku):
            raise ConflictError(f"A product with SKU '{data.sku}' already exists")

        product = self.repository.add(mapping.product_from_create(data))
        self.repository.commit()
        self.repository.refresh(product)

        logger.info(f"Product created successfully with ID: {product.id}")
        return mapping.to_response(product)

    def update_product(self, product_id: str, data: ProductUpdate) -> ProductResponse:
        product = self.repository.get_by_id(product_id)
        if product is None:
            raise NotFoundError(f"Product with ID {product_id} not found")

        if product.sku != data.sku and self.repository.exists_by_sku(data.sku):
            raise ConflictError(f"A product with SKU '{data.sku}' already exists")

        product = self.repository.update(mapping.apply_update(product, data))
        self.repository.commit()
        self.repository.refresh(product)

        logger.info(f"Product updated successfully with ID: {product.id}")
        return mapping.to_response(product)

    def delete_product(self, product_id: str) -> None:
        product = self.repository.get_by_id(product_id)
        if product is None:
            raise NotFoundError(f"Product with ID {product_id} not found")

        self.repository.remove(product)
        self.repository.commit()
        logger.info(f"Product deleted successfully with ID: {product_id}")

    def bulk_create(self, items: List[ProductCreate]) -> int:
        """Create every product in one commit; any SKU clash rejects the whole batch."""
        if not items:
            raise InvalidArgumentError("Product list cannot be null or empty")

        skus = [item.sku for item in items]
        if len(skus) != len(set(skus)):
            raise ConflictError("Duplicate SKUs found in the batch")

        taken = self.repository.existing_skus(skus)
        if taken:
            raise ConflictError(f"A product with SKU '{taken[0]}' already exists", details={"skus": taken})

        self.repository.add_all(mapping.product_from_create(item) for item in items)
        self.repository.commit()

        logger.info(f"Bulk created {len(items)} products successfully")
        return len(items)

    def generate_products(self, count: int, template: Optional[ProductTemplate] = None) -> int:
        """Generate and persist ``count`` sample products."""
        self.validate_generate_count(count)

        # Template SKUs are "{sku}-{variant}"; earlier runs occupy the same variants
        reserved: Set[str] = set()
        if template is not None and template.sku:
            reserved.update(self.repository.skus_with_prefix(f"{template.sku}-"))

        taken: List[str] = []
        for attempt in range(1, self.MAX_GENERATE_ATTEMPTS + 1):
            products: List[Product] = self.generator.generate(count, template, reserved)
            taken = self.repository.existing_skus(p.sku for p in products)
            if not taken:
                break
            logger.warning(
                f"{len(taken)} generated SKUs already exist, regenerating (attempt {attempt}/{self.MAX_GENERATE_ATTEMPTS})"
            )
            reserved.update(taken)
        else:
            raise ConflictError("Could not generate unique SKUs", details={"skus": taken})

        self.repository.add_all(products)
        self.repository.commit()

        logger.info(f"Successfully generated {len(products)} products")
        return len(products)

    # --- Helpers ----------------------------------------------------------------

    @staticmethod
    def validate_generate_count(count: int, maximum: int = None) -> None:
        maximum = settings.GENERATE_MAX_COUNT if maximum is None else maximum
        if count <= 0 or count > maximum:
            raise InvalidArgumentError(f"Count must be between 1 and {maximum}")

    @staticmethod
    def _paged(products: List[Product], total_count: int, page: int, page_size: int) -> PagedResult[ProductListItem]:
        return PagedResult[ProductListItem](
            items=[mapping.to_list_item(p) for p in products],
            total_count=total_count,
            page=page,
            page_size=page_size,
        )
