"""
Stock Reports Use Case.

Serves the report engine's results through the report cache. Payloads are
memoized as fields of the ``product-cache`` key, which the engine's
invalidation signal deletes on every state change. A cache that cannot be
reached degrades to computing the report directly.

A report is only written back when no state change was signalled while it
was being computed; otherwise an invalidation that already ran would be
undone by the stale write.

The ``expiring_soon:{N}`` and ``expired`` fields also age with the clock: a
product can cross its expiration date without any mutation. Those fields are
cached for at most ``CACHE_EXPIRY_TTL_SECONDS``, which bounds how late such a
crossing shows up in the reports.
"""

from collections.abc import Awaitable, Callable, Sequence
from datetime import datetime
from typing import TypeVar

from pydantic import BaseModel

from stockledger.application.dto.responses import (
    ProductReportResponse,
    ProductResponse,
    StockValueResponse,
)
from stockledger.config import get_logger, get_settings
from stockledger.core.clock import Clock, utcnow
from stockledger.core.entities.product import Product
from stockledger.core.exceptions import CacheSignalError
from stockledger.core.interfaces.report_cache import IReportCache
from stockledger.core.services.reports import ReportEngine
from stockledger.core.services.signal import CacheInvalidationSignal

logger = get_logger(__name__)

ResponseT = TypeVar("ResponseT", bound=BaseModel)


class StockReportsUseCase:
    """Total value, expiring-soon, expired and low-stock reports."""

    def __init__(
        self,
        reports: ReportEngine | None = None,
        cache: IReportCache | None = None,
        cache_key: str | None = None,
        ttl_seconds: int | None = None,
        clock: Clock = utcnow,
        signal: CacheInvalidationSignal | None = None,
        expiry_ttl_seconds: int | None = None,
    ):
        settings = get_settings()
        self._reports = reports
        self._cache = cache
        self._signal = signal
        self._cache_key = cache_key or settings.cache.report_key
        self._ttl = ttl_seconds if ttl_seconds is not None else settings.cache.ttl_seconds
        expiry_ttl = (
            expiry_ttl_seconds
            if expiry_ttl_seconds is not None
            else settings.cache.expiry_ttl_seconds
        )
        self._expiry_ttl = min(self._ttl, expiry_ttl)
        self._clock = clock

    async def _get_reports(self) -> ReportEngine:
        if self._reports is None:
            from stockledger.application.services import get_report_engine

            self._reports = await get_report_engine()
        return self._reports

    def _get_signal(self) -> CacheInvalidationSignal:
        if self._signal is None:
            from stockledger.application.services import get_cache_signal

            self._signal = get_cache_signal()
        return self._signal

    async def _cached(
        self,
        field: str,
        model: type[ResponseT],
        build: Callable[[], Awaitable[ResponseT]],
        ttl: int | None = None,
    ) -> ResponseT:
        if self._cache is None:
            return await build()

        try:
            payload = await self._cache.get(self._cache_key, field)
        except CacheSignalError as e:
            logger.warning("report_cache_read_failed", field=field, error=str(e))
            payload = None
        if payload is not None:
            logger.debug("report_cache_hit", field=field)
            return model.model_validate(payload)

        signal = self._get_signal()
        generation = signal.generation
        response = await build()

        if signal.generation != generation:
            logger.info("report_cache_write_skipped", field=field, reason="state_changed")
            return response

        try:
            await self._cache.set(
                self._cache_key, field, response.model_dump(mode="json"), ttl or self._ttl
            )
            # A mutation signalled during the write may have been invalidated first
            if signal.generation != generation:
                await self._cache.invalidate(self._cache_key)
        except CacheSignalError as e:
            logger.warning("report_cache_write_failed", field=field, error=str(e))
        return response

    async def stock_value(self) -> StockValueResponse:
        """Total stock value report."""

        async def build() -> StockValueResponse:
            reports = await self._get_reports()
            total, count = await reports.stock_value_summary()
            logger.info("stock_value_calculated", total_value=str(total), products=count)
            return StockValueResponse(
                total_stock_value=total,
                product_count=count,
                generated_at=self._clock(),
            )

        return await self._cached("stock_value", StockValueResponse, build)

    async def expiring_soon(self, window_days: int) -> ProductReportResponse:
        """Perishables expiring within the window."""

        async def build() -> ProductReportResponse:
            reports = await self._get_reports()
            now = self._clock()
            products = await reports.products_expiring_soon(window_days, reference_time=now)
            return self._product_report("expiring_soon", products, now, window_days)

        return await self._cached(
            f"expiring_soon:{window_days}", ProductReportResponse, build, ttl=self._expiry_ttl
        )

    async def expired(self) -> ProductReportResponse:
        """Perishables already past their expiration date."""

        async def build() -> ProductReportResponse:
            reports = await self._get_reports()
            now = self._clock()
            products = await reports.expired_products(reference_time=now)
            return self._product_report("expired", products, now)

        return await self._cached("expired", ProductReportResponse, build, ttl=self._expiry_ttl)

    async def low_stock(self) -> ProductReportResponse:
        """Products below their minimum quantity."""

        async def build() -> ProductReportResponse:
            reports = await self._get_reports()
            products = await reports.products_below_minimum_stock()
            return self._product_report("low_stock", products, self._clock())

        return await self._cached("low_stock", ProductReportResponse, build)

    @staticmethod
    def _product_report(
        report: str,
        products: Sequence[Product],
        generated_at: datetime,
        window_days: int | None = None,
    ) -> ProductReportResponse:
        return ProductReportResponse(
            report=report,
            items=[ProductResponse.from_entity(p) for p in products],
            total=len(products),
            generated_at=generated_at,
            window_days=window_days,
        )
