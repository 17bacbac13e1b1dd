"""
Service factory functions for dependency injection.

Wires infrastructure implementations to the core stock engine. The catalog,
ledger and report engine are process-wide singletons so that every request
shares the same product locks and invalidation signal.
"""

from typing import TYPE_CHECKING

from stockledger.config import get_settings
from stockledger.core.services import (
    CacheInvalidationSignal,
    MovementLedger,
    ProductCatalog,
    ProductLocks,
    ReportEngine,
)

if TYPE_CHECKING:
    from stockledger.core.interfaces import IInventoryStore, IReportCache


# Singleton service instances
_locks: ProductLocks | None = None
_signal: CacheInvalidationSignal | None = None
_catalog: ProductCatalog | None = None
_ledger: MovementLedger | None = None
_reports: ReportEngine | None = None


async def _default_store() -> "IInventoryStore":
    from stockledger.infrastructure.storage import get_inventory_store

    return await get_inventory_store()


def get_product_locks() -> ProductLocks:
    """Get or create the shared product lock registry."""
    global _locks
    if _locks is None:
        _locks = ProductLocks(scope=get_settings().inventory.lock_scope)
    return _locks


def get_cache_signal(cache: "IReportCache | None" = None) -> CacheInvalidationSignal:
    """
    Get or create the cache-invalidation signal.

    The sink is the configured report cache unless caching is disabled.
    """
    global _signal
    if _signal is None:
        settings = get_settings()
        sink = cache
        if sink is None and settings.cache.enabled:
            from stockledger.infrastructure.cache import get_report_cache

            sink = get_report_cache()
        _signal = CacheInvalidationSignal(sink=sink, key=settings.cache.report_key)
    return _signal


async def get_product_catalog(store: "IInventoryStore | None" = None) -> ProductCatalog:
    """Get or create the ProductCatalog instance."""
    global _catalog
    if _catalog is None:
        _catalog = ProductCatalog(
            store=store or await _default_store(),
            signal=get_cache_signal(),
            locks=get_product_locks(),
        )
    return _catalog


async def get_movement_ledger(store: "IInventoryStore | None" = None) -> MovementLedger:
    """Get or create the MovementLedger instance."""
    global _ledger
    if _ledger is None:
        _ledger = MovementLedger(
            store=store or await _default_store(),
            signal=get_cache_signal(),
            locks=get_product_locks(),
        )
    return _ledger


async def get_report_engine(store: "IInventoryStore | None" = None) -> ReportEngine:
    """Get or create the ReportEngine instance."""
    global _reports
    if _reports is None:
        _reports = ReportEngine(store=store or await _default_store())
    return _reports


def reset_services() -> None:
    """Reset all singleton services (for testing)."""
    global _locks, _signal, _catalog, _ledger, _reports
    _locks = None
    _signal = None
    _catalog = None
    _ledger = None
    _reports = None
