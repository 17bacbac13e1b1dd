"""Abstract interface for the report cache."""

from abc import ABC, abstractmethod
from typing import Any


class IReportCache(ABC):
    """
    Keyed cache for derived report payloads.

    Payloads are stored as fields under a single key so that one
    ``invalidate(key)`` drops every memoized report at once. Backend failures
    raise CacheSignalError.
    """

    @abstractmethod
    async def get(self, key: str, field: str) -> Any | None:
        """Get a cached payload, or None on miss."""
        pass

    @abstractmethod
    async def set(self, key: str, field: str, payload: Any, ttl: int) -> None:
        """Store a JSON-serializable payload with a TTL in seconds."""
        pass

    @abstractmethod
    async def invalidate(self, key: str) -> None:
        """Drop every payload stored under key."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release backend resources."""
        pass
