"""
Redis-backed report cache.

Every report payload is a field of one Redis hash, so deleting the hash key
drops all memoized reports at once.
"""

import json
from typing import Any

import redis.asyncio as redis_async
from redis.exceptions import RedisError

from stockledger.config import get_logger
from stockledger.core.exceptions import CacheSignalError
from stockledger.core.interfaces.report_cache import IReportCache

logger = get_logger(__name__)


class RedisReportCache(IReportCache):
    """Report cache stored in a Redis hash per key."""

    def __init__(self, client: redis_async.Redis):
        self._redis = client

    @classmethod
    def from_url(cls, redis_url: str) -> "RedisReportCache":
        client = redis_async.from_url(redis_url, encoding="utf-8", decode_responses=True)
        return cls(client)

    async def get(self, key: str, field: str) -> Any | None:
        try:
            payload = await self._redis.hget(key, field)
        except RedisError as e:
            raise CacheSignalError(key, str(e)) from e
        if payload is None:
            return None
        return json.loads(payload)

    async def set(self, key: str, field: str, payload: Any, ttl: int) -> None:
        try:
            async with self._redis.pipeline(transaction=True) as pipe:
                pipe.hset(key, field, json.dumps(payload, default=str))
                pipe.expire(key, ttl)
                await pipe.execute()
        except RedisError as e:
            raise CacheSignalError(key, str(e)) from e

    async def invalidate(self, key: str) -> None:
        try:
            await self._redis.delete(key)
        except RedisError as e:
            raise CacheSignalError(key, str(e)) from e
        logger.info("report_cache_invalidated", key=key)

    async def close(self) -> None:
        await self._redis.aclose()
