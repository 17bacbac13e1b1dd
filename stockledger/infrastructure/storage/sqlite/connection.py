"""
Pooled aiosqlite connections for the inventory store.

Every connection runs in WAL mode so report reads see the last committed
state while a movement is being written. Writes go through ``transaction()``,
which opens ``BEGIN IMMEDIATE`` and so takes SQLite's write lock before the
first statement.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from stockledger.config import get_logger, get_settings
from stockledger.core.exceptions import DatabaseError

logger = get_logger(__name__)

# Applied to each new connection; busy_timeout is appended per pool
_PRAGMAS = (
    "journal_mode=WAL",
    "synchronous=NORMAL",
    "foreign_keys=ON",
)


class ConnectionPool:
    """A fixed number of open connections handed out through a queue."""

    def __init__(self, db_path: Path, pool_size: int = 5, busy_timeout: int = 30000):
        self.db_path = db_path
        self.pool_size = pool_size
        self.busy_timeout = busy_timeout

        self._pool: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue(maxsize=pool_size)
        self._connections: list[aiosqlite.Connection] = []
        self._initialized = False
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(cls) -> "ConnectionPool":
        storage = get_settings().storage
        return cls(storage.db_path, storage.pool_size, storage.busy_timeout)

    @property
    def available(self) -> int:
        """Connections currently idle in the pool."""
        return self._pool.qsize()

    async def initialize(self) -> None:
        """Open the pooled connections once. Later calls are no-ops."""
        async with self._lock:
            if self._initialized:
                return

            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            try:
                for _ in range(self.pool_size):
                    conn = await self._open()
                    self._connections.append(conn)
                    self._pool.put_nowait(conn)
            except aiosqlite.Error as e:
                raise DatabaseError("connect", str(e)) from e

            self._initialized = True
            logger.info(
                "connection_pool_initialized",
                db_path=str(self.db_path),
                pool_size=self.pool_size,
            )

    async def _open(self) -> aiosqlite.Connection:
        # Autocommit mode: transaction() issues BEGIN/COMMIT itself
        conn = await aiosqlite.connect(self.db_path, isolation_level=None)
        for pragma in (*_PRAGMAS, f"busy_timeout={self.busy_timeout}"):
            await conn.execute(f"PRAGMA {pragma}")
        conn.row_factory = aiosqlite.Row
        return conn

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """Borrow a connection; it goes back to the pool on exit."""
        if not self._initialized:
            await self.initialize()

        conn = await self._pool.get()
        try:
            yield conn
        finally:
            self._pool.put_nowait(conn)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Borrow a connection inside an immediate write transaction.

        Committed when the block exits normally, rolled back otherwise.
        """
        async with self.acquire() as conn:
            await conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except BaseException:
                await conn.execute("ROLLBACK")
                raise
            await conn.execute("COMMIT")

    async def close(self) -> None:
        """Close every connection and reset the pool."""
        async with self._lock:
            for conn in self._connections:
                await conn.close()
            self._connections.clear()
            self._pool = asyncio.Queue(maxsize=self.pool_size)
            self._initialized = False
            logger.info("connection_pool_closed", db_path=str(self.db_path))


_pool: ConnectionPool | None = None


async def get_pool() -> ConnectionPool:
    """Return the process-wide pool, opening it from settings on first use."""
    global _pool
    if _pool is None:
        _pool = ConnectionPool.from_settings()
        await _pool.initialize()
    return _pool


def set_pool(pool: ConnectionPool | None) -> None:
    """Install a specific pool (tests, alternate databases)."""
    global _pool
    _pool = pool


async def close_pool() -> None:
    """Close and forget the process-wide pool."""
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None


@asynccontextmanager
async def get_connection() -> AsyncIterator[aiosqlite.Connection]:
    """Read connection from the process-wide pool."""
    pool = await get_pool()
    async with pool.acquire() as conn:
        yield conn


@asynccontextmanager
async def get_transaction() -> AsyncIterator[aiosqlite.Connection]:
    """Write transaction on the process-wide pool."""
    pool = await get_pool()
    async with pool.transaction() as conn:
        yield conn
