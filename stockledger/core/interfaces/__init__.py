"""Core interfaces (ports) for dependency injection."""

from stockledger.core.interfaces.inventory_store import IInventoryStore
from stockledger.core.interfaces.report_cache import IReportCache

__all__ = [
    "IInventoryStore",
    "IReportCache",
]
