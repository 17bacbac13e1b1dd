"""Report cache implementations."""

from stockledger.config import get_logger, get_settings
from stockledger.core.interfaces.report_cache import IReportCache
from stockledger.infrastructure.cache.memory_cache import InMemoryReportCache
from stockledger.infrastructure.cache.redis_cache import RedisReportCache

logger = get_logger(__name__)

_report_cache: IReportCache | None = None


def get_report_cache() -> IReportCache:
    """Get singleton report cache: Redis when configured, in-process otherwise."""
    global _report_cache
    if _report_cache is None:
        settings = get_settings()
        if settings.cache.redis_url:
            _report_cache = RedisReportCache.from_url(settings.cache.redis_url)
            logger.info("report_cache_ready", backend="redis")
        else:
            _report_cache = InMemoryReportCache()
            logger.info("report_cache_ready", backend="memory")
    return _report_cache


async def close_report_cache() -> None:
    """Close and drop the singleton cache."""
    global _report_cache
    if _report_cache is not None:
        await _report_cache.close()
        _report_cache = None


def reset_report_cache() -> None:
    """Drop the singleton without closing it (for testing)."""
    global _report_cache
    _report_cache = None


__all__ = [
    "InMemoryReportCache",
    "RedisReportCache",
    "get_report_cache",
    "close_report_cache",
    "reset_report_cache",
]
