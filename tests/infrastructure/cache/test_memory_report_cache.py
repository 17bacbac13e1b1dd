"""Tests for InMemoryReportCache."""

import pytest

from stockledger.infrastructure.cache import memory_cache
from stockledger.infrastructure.cache.memory_cache import InMemoryReportCache


@pytest.fixture
def fake_clock(monkeypatch):
    current = {"t": 1000.0}
    monkeypatch.setattr(memory_cache.time, "monotonic", lambda: current["t"])
    return current


class TestInMemoryReportCache:
    async def test_miss_returns_none(self):
        cache = InMemoryReportCache()
        assert await cache.get("product-cache", "stock_value") is None

    async def test_set_then_get(self):
        cache = InMemoryReportCache()
        await cache.set("product-cache", "low_stock", {"total": 2}, ttl=60)
        assert await cache.get("product-cache", "low_stock") == {"total": 2}

    async def test_entry_expires_after_ttl(self, fake_clock):
        cache = InMemoryReportCache()
        await cache.set("product-cache", "expired", {"total": 0}, ttl=30)

        fake_clock["t"] += 29
        assert await cache.get("product-cache", "expired") == {"total": 0}

        fake_clock["t"] += 1
        assert await cache.get("product-cache", "expired") is None

    async def test_invalidate_drops_every_field(self):
        cache = InMemoryReportCache()
        await cache.set("product-cache", "stock_value", {"v": 1}, ttl=60)
        await cache.set("product-cache", "expiring_soon:7", {"v": 2}, ttl=60)
        await cache.set("other", "stock_value", {"v": 3}, ttl=60)

        await cache.invalidate("product-cache")

        assert await cache.get("product-cache", "stock_value") is None
        assert await cache.get("product-cache", "expiring_soon:7") is None
        assert await cache.get("other", "stock_value") == {"v": 3}
        assert cache.invalidations == 1

    async def test_invalidate_unknown_key(self):
        cache = InMemoryReportCache()
        await cache.invalidate("missing")
        assert cache.invalidations == 1

    async def test_close_clears(self):
        cache = InMemoryReportCache()
        await cache.set("product-cache", "low_stock", {"v": 1}, ttl=60)
        await cache.close()
        assert await cache.get("product-cache", "low_stock") is None
