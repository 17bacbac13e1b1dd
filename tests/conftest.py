"""Pytest configuration and fixtures."""

import os

# Keep the app import below off the filesystem and away from Redis.
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("CACHE_REDIS_URL", "")

from collections.abc import Callable, Iterator
from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest

from stockledger.api.dependencies import get_app_settings
from stockledger.application.services import reset_services
from stockledger.config import reset_settings
from stockledger.core.entities import Category, Product
from stockledger.core.services import (
    CacheInvalidationSignal,
    MovementLedger,
    ProductCatalog,
    ProductLocks,
    ReportEngine,
)
from stockledger.infrastructure.cache import InMemoryReportCache, reset_report_cache
from stockledger.infrastructure.storage import InMemoryInventoryStore, reset_inventory_store

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)


@pytest.fixture(autouse=True)
def reset_singletons() -> Iterator[None]:
    """Fresh settings and service singletons for every test."""
    reset_settings()
    reset_services()
    reset_inventory_store()
    reset_report_cache()
    get_app_settings.cache_clear()
    yield
    reset_settings()
    reset_services()
    reset_inventory_store()
    reset_report_cache()
    get_app_settings.cache_clear()


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def clock(now: datetime) -> Callable[[], datetime]:
    return lambda: now


@pytest.fixture
def memory_store() -> InMemoryInventoryStore:
    return InMemoryInventoryStore()


@pytest.fixture
def report_cache() -> InMemoryReportCache:
    return InMemoryReportCache()


@pytest.fixture
def signal(report_cache: InMemoryReportCache) -> CacheInvalidationSignal:
    return CacheInvalidationSignal(sink=report_cache)


@pytest.fixture
def locks() -> ProductLocks:
    return ProductLocks()


@pytest.fixture
def catalog(memory_store, signal, locks, clock) -> ProductCatalog:
    return ProductCatalog(memory_store, signal=signal, locks=locks, clock=clock)


@pytest.fixture
def ledger(memory_store, signal, locks, clock) -> MovementLedger:
    return MovementLedger(memory_store, signal=signal, locks=locks, clock=clock)


@pytest.fixture
def reports(memory_store, clock) -> ReportEngine:
    return ReportEngine(memory_store, clock=clock)


def make_product(
    sku: int = 1,
    *,
    quantity: int = 10,
    minimum_quantity: int = 5,
    unit_price: str = "2.50",
    category: Category = Category.STANDARD,
    lot_number: str | None = None,
    expiration_date: datetime | None = None,
    name: str | None = None,
) -> Product:
    """Build a product; perishables get a lot and a date a month after NOW."""
    if category == Category.PERISHABLE:
        lot_number = "LOT-1" if lot_number is None else lot_number
        expiration_date = expiration_date or NOW + timedelta(days=30)
    return Product(
        sku=sku,
        name=name or f"Product {sku}",
        category=category,
        unit_price=Decimal(unit_price),
        quantity=quantity,
        minimum_quantity=minimum_quantity,
        lot_number=lot_number,
        expiration_date=expiration_date,
    )


@pytest.fixture
def product_factory() -> Callable[..., Product]:
    return make_product
