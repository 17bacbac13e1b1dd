"""Tests for ReportEngine."""

from datetime import timedelta
from decimal import Decimal

import pytest

from stockledger.core.entities import Category


class TestTotalStockValue:
    async def test_empty_catalog(self, reports):
        assert await reports.total_stock_value() == Decimal("0")

    async def test_sum_of_quantity_times_price(self, reports, memory_store, product_factory):
        await memory_store.add_product(product_factory(sku=1, quantity=10, unit_price="2.50"))
        await memory_store.add_product(product_factory(sku=2, quantity=3, unit_price="0.10"))
        await memory_store.add_product(product_factory(sku=3, quantity=0, unit_price="99"))

        assert await reports.total_stock_value() == Decimal("25.30")

    async def test_summary_counts_products(self, reports, memory_store, product_factory):
        await memory_store.add_product(product_factory(sku=1, quantity=2, unit_price="1.5"))
        await memory_store.add_product(product_factory(sku=2, quantity=1, unit_price="1"))

        total, count = await reports.stock_value_summary()

        assert total == Decimal("4.0")
        assert count == 2


class TestBelowMinimum:
    async def test_only_products_below_threshold(self, reports, memory_store, product_factory):
        """SKU 3 (2 < 5) is listed, SKU 4 (10 >= 5) is not."""
        await memory_store.add_product(product_factory(sku=3, quantity=2, minimum_quantity=5))
        await memory_store.add_product(product_factory(sku=4, quantity=10, minimum_quantity=5))

        result = await reports.products_below_minimum_stock()

        assert [p.sku for p in result] == [3]

    async def test_equal_to_minimum_not_listed(self, reports, memory_store, product_factory):
        await memory_store.add_product(product_factory(quantity=5, minimum_quantity=5))
        assert await reports.products_below_minimum_stock() == []


class TestExpiringSoon:
    async def test_within_window_listed(self, reports, memory_store, product_factory, now):
        """Perishable SKU 5 expiring in 3 days is listed for a 7 day window."""
        await memory_store.add_product(
            product_factory(
                sku=5, category=Category.PERISHABLE, expiration_date=now + timedelta(days=3)
            )
        )

        result = await reports.products_expiring_soon(7, reference_time=now)

        assert [p.sku for p in result] == [5]

    async def test_already_expired_not_listed(self, reports, memory_store, product_factory, now):
        await memory_store.add_product(
            product_factory(
                sku=5, category=Category.PERISHABLE, expiration_date=now - timedelta(days=1)
            )
        )
        assert await reports.products_expiring_soon(7, reference_time=now) == []

    async def test_window_bounds(self, reports, memory_store, product_factory, now):
        await memory_store.add_product(
            product_factory(sku=1, category=Category.PERISHABLE, expiration_date=now)
        )
        await memory_store.add_product(
            product_factory(
                sku=2, category=Category.PERISHABLE, expiration_date=now + timedelta(days=7)
            )
        )
        await memory_store.add_product(
            product_factory(
                sku=3,
                category=Category.PERISHABLE,
                expiration_date=now + timedelta(days=7, seconds=1),
            )
        )

        result = await reports.products_expiring_soon(7, reference_time=now)

        assert [p.sku for p in result] == [2]

    async def test_standard_products_ignored(self, reports, memory_store, product_factory, now):
        await memory_store.add_product(
            product_factory(sku=1, expiration_date=now + timedelta(days=1))
        )
        assert await reports.products_expiring_soon(7, reference_time=now) == []

    async def test_defaults_to_engine_clock(self, reports, memory_store, product_factory, now):
        await memory_store.add_product(
            product_factory(
                sku=1, category=Category.PERISHABLE, expiration_date=now + timedelta(days=2)
            )
        )
        assert [p.sku for p in await reports.products_expiring_soon()] == [1]

    async def test_zero_window_is_empty(self, reports, memory_store, product_factory, now):
        await memory_store.add_product(
            product_factory(
                sku=1, category=Category.PERISHABLE, expiration_date=now + timedelta(hours=1)
            )
        )
        assert await reports.products_expiring_soon(0, reference_time=now) == []

    async def test_negative_window_rejected(self, reports):
        with pytest.raises(ValueError):
            await reports.products_expiring_soon(-1)


class TestExpired:
    async def test_lists_expired_perishables(self, reports, memory_store, product_factory, now):
        await memory_store.add_product(
            product_factory(
                sku=1, category=Category.PERISHABLE, expiration_date=now - timedelta(days=1)
            )
        )
        await memory_store.add_product(
            product_factory(
                sku=2, category=Category.PERISHABLE, expiration_date=now + timedelta(days=1)
            )
        )
        await memory_store.add_product(
            product_factory(sku=3, expiration_date=now - timedelta(days=1))
        )

        result = await reports.expired_products(reference_time=now)

        assert [p.sku for p in result] == [1]
