"""SQLAlchemy-backed storage for products.

One object per request session. It offers only what the service uses and
owns the commit, so a unique-index violation raised by the database is
turned into a ``ConflictError`` here.
"""

import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from product_catalog.core.exceptions import ConflictError
from product_catalog.models.product import Product
from product_catalog.services.pagination import offset_for
from product_catalog.services.query import sort_keys
from product_catalog.services.search import SubstringMatcher, escape_like, matcher_for_dialect

logger = logging.getLogger(__name__)


class ProductRepository:

    # Keeps IN lists under SQLite's bound-parameter limit
    SKU_LOOKUP_CHUNK = 500

    def __init__(self, db: Session):
        self.db = db
        self._matcher = None

    @property
    def matcher(self) -> SubstringMatcher:
        """Case-insensitive substring matcher for the bound database."""
        if self._matcher is None:
            self._matcher = matcher_for_dialect(self.db.get_bind().dialect.name)
        return self._matcher

    # --- Lookups ----------------------------------------------------------------

    def get_by_id(self, product_id: str) -> Optional[Product]:
        return self.db.get(Product, product_id)

    def get_by_sku(self, sku: str) -> Optional[Product]:
        return self.db.execute(select(Product).where(Product.sku == sku)).scalar_one_or_none()

    def exists(self, product_id: str) -> bool:
        stmt = select(Product.id).where(Product.id == product_id).limit(1)
        return self.db.execute(stmt).first() is not None

    def exists_by_sku(self, sku: str) -> bool:
        stmt = select(Product.id).where(Product.sku == sku).limit(1)
        return self.db.execute(stmt).first() is not None

    def existing_skus(self, skus: Iterable[str]) -> List[str]:
        """Return which of the given SKUs are already stored."""
        skus = list(skus)
        found: List[str] = []
        for start in range(0, len(skus), self.SKU_LOOKUP_CHUNK):
            chunk = skus[start:start + self.SKU_LOOKUP_CHUNK]
            stmt = select(Product.sku).where(Product.sku.in_(chunk))
            found.extend(self.db.execute(stmt).scalars())
        return found

    def skus_with_prefix(self, prefix: str) -> List[str]:
        stmt = select(Product.sku).where(Product.sku.like(f"{escape_like(prefix)}%", escape="\\"))
        return list(self.db.execute(stmt).scalars())

    def count(self, predicate: Optional[ColumnElement] = None) -> int:
        stmt = select(func.count(Product.id))
        if predicate is not None:
            stmt = stmt.where(predicate)
        return self.db.execute(stmt).scalar_one()

    def get_paged(
        self,
        page: int,
        page_size: int,
        predicate: Optional[ColumnElement] = None,
        order_by: Optional[Sequence[ColumnElement]] = None,
    ) -> Tuple[List[Product], int]:
        """Return one page of matching products and the total match count."""
        total_count = self.count(predicate)

        stmt = select(Product)
        if predicate is not None:
            stmt = stmt.where(predicate)
        if order_by:
            stmt = stmt.order_by(*order_by)
        stmt = stmt.offset(offset_for(page, page_size)).limit(page_size)

        items = list(self.db.execute(stmt).scalars())
        return items, total_count

    def get_top_rated(self, minimum_rating: float, count: int) -> List[Product]:
        stmt = (
            select(Product)
            .where(Product.customer_rating >= minimum_rating)
            .order_by(Product.customer_rating.desc(), *sort_keys(Product.name), Product.id.asc())
            .limit(count)
        )
        return list(self.db.execute(stmt).scalars())

    # --- Mutations --------------------------------------------------------------

    def add(self, product: Product) -> Product:
        self.db.add(product)
        return product

    def add_all(self, products: Iterable[Product]) -> None:
        self.db.add_all(list(products))

    def update(self, product: Product) -> Product:
        # Loaded instances are already tracked; merge covers detached ones
        if product not in self.db:
            product = self.db.merge(product)
        return product

    def remove(self, product: Product) -> None:
        self.db.delete(product)

    def commit(self) -> None:
        """Commit the session, surfacing unique-index violations as conflicts."""
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Integrity error on commit: {str(e.orig)}")
            raise ConflictError("A product with the same SKU already exists") from e
        except Exception:
            self.db.rollback()
            raise

    def refresh(self, product: Product) -> Product:
        self.db.refresh(product)
        return product
