"""Pytest fixtures for SQLite storage tests."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from stockledger.infrastructure.storage.sqlite import (
    ConnectionPool,
    SQLiteInventoryStore,
    close_pool,
    set_pool,
)
from stockledger.infrastructure.storage.sqlite.migrations import initialize_database


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
async def initialized_db(temp_db_path: Path) -> Path:
    """Temporary database with every migration applied."""
    await initialize_database(temp_db_path)
    return temp_db_path


@pytest.fixture
async def sqlite_pool(initialized_db: Path) -> AsyncGenerator[ConnectionPool, None]:
    """Install a pool on the migrated database as the global pool."""
    pool = ConnectionPool(initialized_db, pool_size=2, busy_timeout=5000)
    await pool.initialize()
    set_pool(pool)
    yield pool
    await close_pool()


@pytest.fixture
def sqlite_store(sqlite_pool: ConnectionPool) -> SQLiteInventoryStore:
    return SQLiteInventoryStore()
