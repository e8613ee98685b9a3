"""Tests for the health check, error envelope and cross-cutting headers."""

import asyncio

import pytest
from fastapi.routing import APIRoute
from httpx import ASGITransport, AsyncClient

from product_catalog.api.deps import get_product_service
from product_catalog.api.middleware import CORRELATION_HEADER, SECURITY_HEADERS
from product_catalog.database.session import get_db
from product_catalog.main import app


@pytest.mark.asyncio
async def test_root_banner(client):
    response = await client.get("/")

    assert response.status_code == 200
    assert response.json()["status"] == "running"


@pytest.mark.asyncio
async def test_health_reports_connected_database(client):
    response = await client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["database"] == "connected"
    assert "timestamp" in data


@pytest.mark.asyncio
async def test_health_reports_unreachable_database(client):
    class _BrokenSession:
        def execute(self, *args, **kwargs):
            raise RuntimeError("connection refused")

    app.dependency_overrides[get_db] = lambda: _BrokenSession()

    response = await client.get("/health")

    assert response.status_code == 503
    assert response.json()["status"] == "unhealthy"
    assert response.json()["database"] == "disconnected"


@pytest.mark.asyncio
async def test_correlation_id_is_echoed(client):
    response = await client.get("/api/Product/by-sku/MISSING", headers={CORRELATION_HEADER: "abc-123"})

    assert response.status_code == 404
    assert response.headers[CORRELATION_HEADER] == "abc-123"
    body = response.json()
    assert body["code"] == "not_found"
    assert body["correlationId"] == "abc-123"
    assert body["details"] is None


@pytest.mark.asyncio
async def test_correlation_id_is_generated_when_absent(client):
    response = await client.get("/api/Product")

    assert response.status_code == 200
    assert response.headers[CORRELATION_HEADER]


@pytest.mark.asyncio
async def test_security_headers_on_every_response(client):
    for response in (await client.get("/"), await client.get("/api/Product/by-sku/MISSING")):
        for name, value in SECURITY_HEADERS.items():
            assert response.headers[name] == value


@pytest.mark.asyncio
async def test_unexpected_errors_are_hidden(client):
    class _FailingService:
        def list_products(self, criteria):
            raise RuntimeError("database exploded")

    app.dependency_overrides[get_product_service] = lambda: _FailingService()
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app, raise_app_exceptions=False),
            base_url="http://testserver",
        ) as raw_client:
            response = await raw_client.get("/api/Product", headers={CORRELATION_HEADER: "err-1"})
    finally:
        app.dependency_overrides.pop(get_product_service, None)

    assert response.status_code == 500
    body = response.json()
    assert body["code"] == "internal_error"
    assert body["correlationId"] == "err-1"
    assert "exploded" not in body["message"]


def test_database_routes_run_in_threadpool():
    routes = [
        route
        for route in app.routes
        if isinstance(route, APIRoute) and (route.path.startswith("/api") or route.path == "/health")
    ]

    assert routes
    for route in routes:
        assert not asyncio.iscoroutinefunction(route.endpoint), route.path
