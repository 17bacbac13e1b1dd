"""
Cache-invalidation signal.

Fired after every successful catalog or ledger mutation. Delivery to the cache
sink runs as a background task: the mutation never waits for it and a failing
sink is only logged.
"""

import asyncio
from typing import Any

from stockledger.config import get_logger
from stockledger.core.interfaces.report_cache import IReportCache

logger = get_logger(__name__)

DEFAULT_CACHE_KEY = "product-cache"


class CacheInvalidationSignal:
    """Best-effort notifier that drops the report cache key on state change."""

    def __init__(
        self,
        sink: IReportCache | None = None,
        key: str = DEFAULT_CACHE_KEY,
    ):
        self._sink = sink
        self._key = key
        self._pending: set[asyncio.Task[None]] = set()
        self.fired = 0

    @property
    def key(self) -> str:
        return self._key

    @property
    def generation(self) -> int:
        """Number of state changes seen so far; readers compare it across a computation."""
        return self.fired

    def on_state_changed(self, **context: Any) -> None:
        """Schedule invalidation of the cache key and return immediately."""
        self.fired += 1
        if self._sink is None:
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("cache_invalidation_skipped", key=self._key, reason="no_event_loop")
            return

        task = loop.create_task(self._deliver(context))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _deliver(self, context: dict[str, Any]) -> None:
        try:
            await self._sink.invalidate(self._key)  # type: ignore[union-attr]
        except Exception as e:
            logger.warning(
                "cache_invalidation_failed",
                key=self._key,
                error=str(e),
                **context,
            )
            return
        logger.debug("cache_invalidated", key=self._key, **context)

    async def drain(self) -> None:
        """Wait for in-flight deliveries (shutdown, tests)."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
