"""SQLite storage implementations."""

from stockledger.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
    set_pool,
)
from stockledger.infrastructure.storage.sqlite.inventory_store import SQLiteInventoryStore

# Singleton instance
_inventory_store: SQLiteInventoryStore | None = None


async def get_sqlite_inventory_store() -> SQLiteInventoryStore:
    """Get singleton SQLite inventory store instance."""
    global _inventory_store
    if _inventory_store is None:
        _inventory_store = SQLiteInventoryStore()
    return _inventory_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "set_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # Store
    "SQLiteInventoryStore",
    "get_sqlite_inventory_store",
]
