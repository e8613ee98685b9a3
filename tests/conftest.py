"""Pytest configuration and fixtures for the product catalog service."""

import os
import random

# Point the application at SQLite before any product_catalog module builds its engine
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from product_catalog.database.session import Base, get_db, init_db
from product_catalog.repositories.product_repository import ProductRepository
from product_catalog.services.generator import ProductGenerator
from product_catalog.services.product_service import ProductService


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "asyncio: marks tests as async tests")


@pytest.fixture()
def engine():
    """In-memory SQLite shared by every session of one test."""
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=test_engine, retries=1, delay=0)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture()
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def repository(db_session):
    return ProductRepository(db_session)


@pytest.fixture()
def service(repository):
    return ProductService(repository, ProductGenerator(random.Random(1234)))


@pytest_asyncio.fixture()
async def client(session_factory):
    """Return an HTTPX async client pointing at the FastAPI app."""
    from product_catalog.main import app

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://testserver",
        ) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.pop(get_db, None)


def product_payload(**overrides):
    """A valid create/update body in the wire (camelCase) format."""
    payload = {
        "name": "Apple iPhone",
        "description": "Flagship phone",
        "category": "Electronics",
        "brand": "Apple",
        "price": 999.99,
        "stockQuantity": 10,
        "sku": "APL-IPH-001",
        "releaseDate": "2024-09-20",
        "availabilityStatus": "Available",
        "customerRating": 4.7,
        "availableColors": "Black, White, Blue",
        "availableSizes": "128GB, 256GB",
    }
    payload.update(overrides)
    return payload
