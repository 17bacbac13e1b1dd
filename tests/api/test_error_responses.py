"""Tests for standardized error responses."""

from collections.abc import AsyncIterator
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from stockledger.api.dependencies import get_catalog
from stockledger.api.main import app
from stockledger.api.middleware.error_handler import hint_for, status_for
from stockledger.core.exceptions import (
    CacheSignalError,
    DatabaseError,
    DuplicateProductError,
    InsufficientStockError,
    InvalidQuantityError,
    MissingBatchError,
    ProductNotFoundError,
)


@pytest.fixture
def broken_catalog():
    return AsyncMock()


@pytest.fixture
async def broken_client(broken_catalog) -> AsyncIterator[AsyncClient]:
    app.dependency_overrides[get_catalog] = lambda: broken_catalog
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.pop(get_catalog, None)


class TestStatusMapping:
    @pytest.mark.parametrize(
        ("exc", "expected"),
        [
            (InvalidQuantityError(0), 400),
            (MissingBatchError(1), 400),
            (InsufficientStockError(1, 5, 2), 400),
            (ProductNotFoundError(1), 404),
            (DuplicateProductError(1), 409),
            (DatabaseError("get_product", "locked"), 500),
            (ValueError("bad"), 400),
            (RuntimeError("boom"), 500),
        ],
    )
    def test_status_for_exception(self, exc, expected):
        assert status_for(exc) == expected

    def test_unmapped_inventory_error_is_500(self):
        assert status_for(CacheSignalError("product-cache", "down")) == 500

    def test_hint_prefers_error_code(self):
        assert "INBOUND" in hint_for("INSUFFICIENT_STOCK", 400)
        assert hint_for("SOMETHING_ELSE", 404) == hint_for("UNKNOWN", 404)


class TestServerErrors:
    async def test_database_error_hides_details(self, broken_client, broken_catalog):
        broken_catalog.get_product.side_effect = DatabaseError("get_product", "disk I/O error")

        response = await broken_client.get("/api/products/1")

        assert response.status_code == 500
        body = response.json()
        assert body["error_code"] == "DATABASE_ERROR"
        assert body["message"] == "Internal server error"
        assert body["detail"] is None
        assert "disk" not in response.text

    async def test_unexpected_exception_becomes_500(self, broken_client, broken_catalog):
        broken_catalog.list_products.side_effect = RuntimeError("unexpected")

        response = await broken_client.get("/api/products")

        assert response.status_code == 500
        body = response.json()
        assert body["error_code"] == "RuntimeError"
        assert body["message"] == "Internal server error"


class TestClientErrors:
    async def test_value_error_returns_400(self, broken_client, broken_catalog):
        broken_catalog.list_products.side_effect = ValueError("offset out of range")

        response = await broken_client.get("/api/products")

        assert response.status_code == 400
        assert response.json()["message"] == "offset out of range"

    async def test_unknown_route_returns_standard_404(self, broken_client):
        response = await broken_client.get("/api/nothing-here")

        assert response.status_code == 404
        assert response.json()["error_code"] == "NOT_FOUND"

    async def test_query_validation_returns_422(self, broken_client):
        response = await broken_client.get("/api/products", params={"limit": 0})

        assert response.status_code == 422
        assert "limit" in response.json()["detail"]
