"""Tests for StockReportsUseCase."""

import asyncio
from datetime import timedelta
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from stockledger.application.use_cases import StockReportsUseCase
from stockledger.core.entities import Category, MovementType, StockMovement
from stockledger.core.exceptions import CacheSignalError
from stockledger.core.services import MovementLedger, ReportEngine
from stockledger.infrastructure.storage import InMemoryInventoryStore


class PausingStore(InMemoryInventoryStore):
    """Memory store that holds list_products after its snapshot until released."""

    def __init__(self):
        super().__init__()
        self.snapshot_taken = asyncio.Event()
        self.release = asyncio.Event()

    async def list_products(self, limit=None, offset=0):
        products = await super().list_products(limit, offset)
        self.snapshot_taken.set()
        await self.release.wait()
        return products


@pytest.fixture
def use_case(reports, report_cache, signal, clock):
    return StockReportsUseCase(
        reports=reports,
        cache=report_cache,
        cache_key="product-cache",
        ttl_seconds=60,
        clock=clock,
        signal=signal,
    )


class TestStockReportsUseCase:
    async def test_stock_value(self, use_case, memory_store, product_factory):
        await memory_store.add_product(product_factory(sku=1, quantity=4, unit_price="2.50"))

        response = await use_case.stock_value()

        assert response.total_stock_value == Decimal("10.00")
        assert response.product_count == 1

    async def test_result_is_memoized(self, use_case, memory_store, product_factory, report_cache):
        await memory_store.add_product(product_factory(sku=1, quantity=4, unit_price="2.50"))
        await use_case.stock_value()

        # Written behind the engine's back: the cached value is served
        await memory_store.add_product(product_factory(sku=2, quantity=1, unit_price="100"))
        cached = await use_case.stock_value()

        assert cached.total_stock_value == Decimal("10.00")
        assert await report_cache.get("product-cache", "stock_value") is not None

    async def test_invalidation_recomputes(
        self, use_case, catalog, signal, memory_store, product_factory
    ):
        await catalog.add_product(product_factory(sku=1, quantity=4, unit_price="2.50"))
        await signal.drain()
        await use_case.stock_value()

        await catalog.add_product(product_factory(sku=2, quantity=1, unit_price="100"))
        await signal.drain()

        assert (await use_case.stock_value()).total_stock_value == Decimal("110.00")

    async def test_expiring_soon_cached_per_window(
        self, use_case, memory_store, product_factory, now, report_cache
    ):
        await memory_store.add_product(
            product_factory(
                sku=5, category=Category.PERISHABLE, expiration_date=now + timedelta(days=3)
            )
        )

        week = await use_case.expiring_soon(7)
        day = await use_case.expiring_soon(1)

        assert [p.sku for p in week.items] == [5]
        assert week.window_days == 7
        assert day.total == 0
        assert await report_cache.get("product-cache", "expiring_soon:7") is not None

    async def test_expired_and_low_stock(self, use_case, memory_store, product_factory, now):
        await memory_store.add_product(
            product_factory(
                sku=1,
                category=Category.PERISHABLE,
                expiration_date=now - timedelta(days=2),
                quantity=1,
                minimum_quantity=5,
            )
        )

        expired = await use_case.expired()
        low = await use_case.low_stock()

        assert expired.report == "expired"
        assert [p.sku for p in expired.items] == [1]
        assert [p.sku for p in low.items] == [1]

    async def test_cache_failure_falls_back_to_engine(self, reports, memory_store, product_factory):
        cache = AsyncMock()
        cache.get.side_effect = CacheSignalError("product-cache", "down")
        cache.set.side_effect = CacheSignalError("product-cache", "down")
        use_case = StockReportsUseCase(reports=reports, cache=cache)
        await memory_store.add_product(product_factory(sku=1, quantity=2, unit_price="3"))

        response = await use_case.stock_value()

        assert response.total_stock_value == Decimal("6")

    async def test_without_cache(self, reports):
        use_case = StockReportsUseCase(reports=reports, cache=None)
        assert (await use_case.low_stock()).items == []


class TestCacheConsistency:
    async def test_report_built_across_a_movement_is_not_cached(
        self, report_cache, signal, clock, product_factory
    ):
        store = PausingStore()
        product = await store.add_product(product_factory(sku=1, quantity=10, unit_price="2"))
        ledger = MovementLedger(store, signal=signal, clock=clock)
        use_case = StockReportsUseCase(
            reports=ReportEngine(store, clock=clock),
            cache=report_cache,
            signal=signal,
            clock=clock,
        )

        pending = asyncio.create_task(use_case.stock_value())
        await store.snapshot_taken.wait()
        await ledger.register_movement(
            product, StockMovement(movement_type=MovementType.OUTBOUND, quantity=3)
        )
        await signal.drain()
        store.release.set()

        assert (await pending).total_stock_value == Decimal("20")
        assert await report_cache.get("product-cache", "stock_value") is None
        assert (await use_case.stock_value()).total_stock_value == Decimal("14")

    async def test_change_during_write_invalidates(self, reports, signal, clock):
        cache = AsyncMock()
        cache.get.return_value = None
        cache.set.side_effect = lambda *args: signal.on_state_changed(reason="concurrent")
        use_case = StockReportsUseCase(reports=reports, cache=cache, signal=signal, clock=clock)

        await use_case.low_stock()
        await signal.drain()

        cache.invalidate.assert_awaited_once_with("product-cache")

    async def test_unchanged_state_is_written_once(self, reports, signal, clock):
        cache = AsyncMock()
        cache.get.return_value = None
        use_case = StockReportsUseCase(reports=reports, cache=cache, signal=signal, clock=clock)

        await use_case.stock_value()

        cache.set.assert_awaited_once()
        cache.invalidate.assert_not_awaited()


class TestExpiryFieldTTL:
    @pytest.fixture
    def recording_cache(self) -> AsyncMock:
        cache = AsyncMock()
        cache.get.return_value = None
        return cache

    async def test_clock_dependent_fields_use_shorter_ttl(
        self, reports, signal, clock, recording_cache
    ):
        use_case = StockReportsUseCase(
            reports=reports,
            cache=recording_cache,
            ttl_seconds=300,
            expiry_ttl_seconds=60,
            clock=clock,
            signal=signal,
        )

        await use_case.expired()
        await use_case.expiring_soon(7)
        await use_case.low_stock()
        await use_case.stock_value()

        ttls = {call.args[1]: call.args[3] for call in recording_cache.set.await_args_list}
        assert ttls == {
            "expired": 60,
            "expiring_soon:7": 60,
            "low_stock": 300,
            "stock_value": 300,
        }

    async def test_expiry_ttl_never_exceeds_base_ttl(
        self, reports, signal, clock, recording_cache
    ):
        use_case = StockReportsUseCase(
            reports=reports,
            cache=recording_cache,
            ttl_seconds=30,
            expiry_ttl_seconds=60,
            clock=clock,
            signal=signal,
        )

        await use_case.expired()

        assert recording_cache.set.await_args.args[3] == 30
