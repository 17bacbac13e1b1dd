"""Storage infrastructure implementations."""

from stockledger.config import get_settings
from stockledger.core.interfaces.inventory_store import IInventoryStore
from stockledger.infrastructure.storage.memory import InMemoryInventoryStore
from stockledger.infrastructure.storage.sqlite import (
    SQLiteInventoryStore,
    close_pool,
    get_sqlite_inventory_store,
)

_memory_store: InMemoryInventoryStore | None = None


async def get_inventory_store() -> IInventoryStore:
    """Get the inventory store for the configured backend."""
    global _memory_store
    if get_settings().storage.backend == "memory":
        if _memory_store is None:
            _memory_store = InMemoryInventoryStore()
        return _memory_store
    return await get_sqlite_inventory_store()


def reset_inventory_store() -> None:
    """Drop the in-memory singleton (for testing)."""
    global _memory_store
    _memory_store = None


__all__ = [
    "InMemoryInventoryStore",
    "SQLiteInventoryStore",
    "get_inventory_store",
    "reset_inventory_store",
    "close_pool",
]
