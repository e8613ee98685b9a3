from fastapi import Depends
from sqlalchemy.orm import Session

from product_catalog.database.session import get_db
from product_catalog.repositories.product_repository import ProductRepository
from product_catalog.services.product_service import ProductService


def get_product_repository(db: Session = Depends(get_db)) -> ProductRepository:
    return ProductRepository(db)


def get_product_service(
    repository: ProductRepository = Depends(get_product_repository),
) -> ProductService:
    return ProductService(repository)
