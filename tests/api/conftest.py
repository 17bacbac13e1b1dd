"""Fixtures for API tests: the app wired to in-memory engines with a fixed clock."""

from collections.abc import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient

from stockledger.api.dependencies import (
    get_cache,
    get_catalog,
    get_ledger,
    get_reports,
    get_stock_reports_use_case,
)
from stockledger.api.main import app
from stockledger.application.use_cases import StockReportsUseCase

OVERRIDDEN = (get_catalog, get_ledger, get_reports, get_cache, get_stock_reports_use_case)


@pytest.fixture
def stock_reports_use_case(reports, report_cache, signal, clock) -> StockReportsUseCase:
    return StockReportsUseCase(reports=reports, cache=report_cache, signal=signal, clock=clock)


@pytest.fixture
async def client(
    catalog, ledger, reports, report_cache, stock_reports_use_case
) -> AsyncIterator[AsyncClient]:
    app.dependency_overrides[get_catalog] = lambda: catalog
    app.dependency_overrides[get_ledger] = lambda: ledger
    app.dependency_overrides[get_reports] = lambda: reports
    app.dependency_overrides[get_cache] = lambda: report_cache
    app.dependency_overrides[get_stock_reports_use_case] = lambda: stock_reports_use_case
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    for dependency in OVERRIDDEN:
        app.dependency_overrides.pop(dependency, None)


@pytest.fixture
def product_payload():
    def build(sku: int = 1, **overrides) -> dict:
        payload = {
            "sku": sku,
            "name": f"Product {sku}",
            "category": "STANDARD",
            "unit_price": "2.50",
            "quantity": 10,
            "minimum_quantity": 5,
        }
        payload.update(overrides)
        return payload

    return build
