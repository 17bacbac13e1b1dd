"""In-process report cache with per-field TTL."""

import time
from typing import Any

from stockledger.core.interfaces.report_cache import IReportCache


class InMemoryReportCache(IReportCache):
    """Dict-backed cache used when no Redis URL is configured."""

    def __init__(self) -> None:
        self._store: dict[str, dict[str, tuple[float, Any]]] = {}
        self.invalidations = 0

    async def get(self, key: str, field: str) -> Any | None:
        entry = self._store.get(key, {}).get(field)
        if entry is None:
            return None
        expires_at, payload = entry
        if time.monotonic() >= expires_at:
            self._store[key].pop(field, None)
            return None
        return payload

    async def set(self, key: str, field: str, payload: Any, ttl: int) -> None:
        self._store.setdefault(key, {})[field] = (time.monotonic() + ttl, payload)

    async def invalidate(self, key: str) -> None:
        self.invalidations += 1
        self._store.pop(key, None)

    async def close(self) -> None:
        self._store.clear()
