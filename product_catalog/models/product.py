import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Text, Integer, Numeric, Date, DateTime

from product_catalog.database.session import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Product(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(200), nullable=False, index=True)
    description = Column(Text)
    category = Column(String(100), index=True)
    brand = Column(String(100), index=True)
    price = Column(Numeric(15, 2, asdecimal=False), nullable=False, index=True)
    stock_quantity = Column(Integer, nullable=False, default=0)
    sku = Column(String(100), nullable=False, unique=True, index=True)
    release_date = Column(Date, nullable=False, default=lambda: utcnow().date())
    availability_status = Column(String(50), nullable=False, default="Available")
    customer_rating = Column(Numeric(3, 2, asdecimal=False))
    available_colors = Column(String(500))
    available_sizes = Column(String(500))
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f'<Product(id="{self.id}", sku="{self.sku}", name="{self.name}")>'
