"""Per-product mutual exclusion for read-modify-write sequences."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Literal


class ProductLocks:
    """
    Registry of asyncio locks keyed by SKU.

    With ``scope="global"`` every SKU shares one lock. A per-SKU lock exists
    only while some task holds or waits for it, so the registry does not grow
    with SKUs that were touched once or removed from the catalog.
    """

    def __init__(self, scope: Literal["product", "global"] = "product"):
        self.scope = scope
        self._global = asyncio.Lock()
        self._locks: dict[int, asyncio.Lock] = {}
        self._users: dict[int, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    def lock_for(self, sku: int) -> asyncio.Lock:
        if self.scope == "global":
            return self._global
        lock = self._locks.get(sku)
        if lock is None:
            lock = self._locks[sku] = asyncio.Lock()
        return lock

    @asynccontextmanager
    async def hold(self, sku: int) -> AsyncIterator[None]:
        """
        Hold the lock for a SKU.

        Usage:
            async with locks.hold(sku):
                ...
        """
        if self.scope == "global":
            async with self._global:
                yield
            return

        lock = self.lock_for(sku)
        self._users[sku] = self._users.get(sku, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[sku] -= 1
            if not self._users[sku]:
                del self._users[sku]
                self._locks.pop(sku, None)
