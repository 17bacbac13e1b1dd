"""Fixtures for stock engine service tests."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from stockledger.core.exceptions import CacheSignalError, DatabaseError
from stockledger.infrastructure.storage import InMemoryInventoryStore


class FailingAppendStore(InMemoryInventoryStore):
    """Memory store whose ledger write always fails."""

    async def append_movement(self, movement, new_quantity):
        raise DatabaseError("append_movement", "disk I/O error")


class YieldingStore(InMemoryInventoryStore):
    """Memory store that yields to the event loop after every product read."""

    async def get_product(self, sku):
        product = await super().get_product(sku)
        await asyncio.sleep(0)
        return product


@pytest.fixture
def failing_store() -> FailingAppendStore:
    return FailingAppendStore()


@pytest.fixture
def yielding_store() -> YieldingStore:
    return YieldingStore()


@pytest.fixture
def failing_sink() -> AsyncMock:
    sink = AsyncMock()
    sink.invalidate.side_effect = CacheSignalError("product-cache", "connection refused")
    return sink
