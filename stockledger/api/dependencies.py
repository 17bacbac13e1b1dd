"""
Dependency injection container for FastAPI.

Provides service instances to route handlers.
"""

from functools import lru_cache

from fastapi import Depends

from stockledger.application.services import (
    get_cache_signal,
    get_movement_ledger,
    get_product_catalog,
    get_report_engine,
)
from stockledger.application.use_cases import (
    AddProductUseCase,
    RegisterMovementUseCase,
    RemoveProductUseCase,
    StockReportsUseCase,
    UpdateProductUseCase,
)
from stockledger.config import Settings, get_settings
from stockledger.core.interfaces import IReportCache
from stockledger.core.services import MovementLedger, ProductCatalog, ReportEngine


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


# Service dependencies
async def get_catalog() -> ProductCatalog:
    """Get product catalog."""
    return await get_product_catalog()


async def get_ledger() -> MovementLedger:
    """Get movement ledger."""
    return await get_movement_ledger()


async def get_reports() -> ReportEngine:
    """Get report engine."""
    return await get_report_engine()


def get_cache() -> IReportCache | None:
    """Get report cache, or None when caching is disabled."""
    if not get_settings().cache.enabled:
        return None

    from stockledger.infrastructure.cache import get_report_cache

    return get_report_cache()


# Use case dependencies
def get_add_product_use_case(
    catalog: ProductCatalog = Depends(get_catalog),
) -> AddProductUseCase:
    """Get add product use case."""
    return AddProductUseCase(catalog=catalog)


def get_update_product_use_case(
    catalog: ProductCatalog = Depends(get_catalog),
) -> UpdateProductUseCase:
    """Get update product use case."""
    return UpdateProductUseCase(catalog=catalog)


def get_remove_product_use_case(
    catalog: ProductCatalog = Depends(get_catalog),
) -> RemoveProductUseCase:
    """Get remove product use case."""
    return RemoveProductUseCase(catalog=catalog)


def get_register_movement_use_case(
    catalog: ProductCatalog = Depends(get_catalog),
    ledger: MovementLedger = Depends(get_ledger),
) -> RegisterMovementUseCase:
    """Get register movement use case."""
    return RegisterMovementUseCase(catalog=catalog, ledger=ledger)


def get_stock_reports_use_case(
    reports: ReportEngine = Depends(get_reports),
    cache: IReportCache | None = Depends(get_cache),
) -> StockReportsUseCase:
    """Get stock reports use case."""
    return StockReportsUseCase(reports=reports, cache=cache, signal=get_cache_signal())
