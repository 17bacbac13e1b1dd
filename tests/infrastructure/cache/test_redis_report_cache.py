"""Tests for RedisReportCache with a mocked client."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from stockledger.core.exceptions import CacheSignalError
from stockledger.infrastructure.cache.redis_cache import RedisReportCache


@pytest.fixture
def pipeline():
    pipe = MagicMock()
    pipe.execute = AsyncMock(return_value=[1, True])
    pipe.__aenter__ = AsyncMock(return_value=pipe)
    pipe.__aexit__ = AsyncMock(return_value=False)
    return pipe


@pytest.fixture
def redis_client(pipeline):
    client = MagicMock()
    client.hget = AsyncMock(return_value=None)
    client.delete = AsyncMock(return_value=1)
    client.aclose = AsyncMock()
    client.pipeline.return_value = pipeline
    return client


@pytest.fixture
def cache(redis_client) -> RedisReportCache:
    return RedisReportCache(redis_client)


class TestGet:
    async def test_miss(self, cache, redis_client):
        assert await cache.get("product-cache", "stock_value") is None
        redis_client.hget.assert_awaited_once_with("product-cache", "stock_value")

    async def test_hit_decodes_json(self, cache, redis_client):
        redis_client.hget.return_value = json.dumps({"total_stock_value": "25.00"})
        assert await cache.get("product-cache", "stock_value") == {"total_stock_value": "25.00"}

    async def test_redis_error_becomes_cache_signal_error(self, cache, redis_client):
        redis_client.hget.side_effect = RedisConnectionError("refused")
        with pytest.raises(CacheSignalError) as exc_info:
            await cache.get("product-cache", "stock_value")
        assert exc_info.value.details["key"] == "product-cache"


class TestSet:
    async def test_writes_field_and_ttl_in_one_pipeline(self, cache, redis_client, pipeline):
        await cache.set("product-cache", "low_stock", {"total": 1}, ttl=120)

        redis_client.pipeline.assert_called_once_with(transaction=True)
        pipeline.hset.assert_called_once_with("product-cache", "low_stock", '{"total": 1}')
        pipeline.expire.assert_called_once_with("product-cache", 120)
        pipeline.execute.assert_awaited_once()

    async def test_pipeline_failure(self, cache, pipeline):
        pipeline.execute.side_effect = RedisConnectionError("down")
        with pytest.raises(CacheSignalError):
            await cache.set("product-cache", "low_stock", {}, ttl=10)


class TestInvalidate:
    async def test_deletes_key(self, cache, redis_client):
        await cache.invalidate("product-cache")
        redis_client.delete.assert_awaited_once_with("product-cache")

    async def test_failure(self, cache, redis_client):
        redis_client.delete.side_effect = RedisConnectionError("down")
        with pytest.raises(CacheSignalError):
            await cache.invalidate("product-cache")


async def test_close_releases_client(cache, redis_client):
    await cache.close()
    redis_client.aclose.assert_awaited_once()


def test_from_url_builds_client():
    cache = RedisReportCache.from_url("redis://localhost:6379/0")
    assert isinstance(cache, RedisReportCache)
