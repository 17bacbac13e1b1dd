"""
Report engine.

Read-only aggregations computed fresh from the store on every call. Each
report performs a single store read, so it reflects one consistent snapshot.
"""

from datetime import datetime, timedelta
from decimal import Decimal

from stockledger.core.clock import Clock, ensure_utc, utcnow
from stockledger.core.entities.product import Product
from stockledger.core.interfaces.inventory_store import IInventoryStore
from stockledger.core.services.category_policy import policy_for

DEFAULT_EXPIRING_WINDOW_DAYS = 7


class ReportEngine:
    """Stock value, expiration and low-stock reports."""

    def __init__(self, store: IInventoryStore, clock: Clock = utcnow):
        self._store = store
        self._clock = clock

    def _reference(self, reference_time: datetime | None) -> datetime:
        if reference_time is None:
            return self._clock()
        return ensure_utc(reference_time)  # type: ignore[return-value]

    async def total_stock_value(self) -> Decimal:
        """Sum of quantity * unit_price over all products (0 when empty)."""
        total, _ = await self.stock_value_summary()
        return total

    async def stock_value_summary(self) -> tuple[Decimal, int]:
        """Total stock value and the number of products it covers."""
        products = await self._store.list_products()
        return sum((p.total_value for p in products), Decimal("0")), len(products)

    async def products_expiring_soon(
        self,
        window_days: int = DEFAULT_EXPIRING_WINDOW_DAYS,
        reference_time: datetime | None = None,
    ) -> list[Product]:
        """
        Expiration-tracked products with reference < expiration <= reference + window.

        Already expired products are excluded; see ``expired_products``.
        """
        if window_days < 0:
            raise ValueError("window_days must be >= 0")

        now = self._reference(reference_time)
        limit = now + timedelta(days=window_days)
        products = await self._store.list_products()
        return [
            p
            for p in products
            if policy_for(p.category).tracks_expiration
            and p.expiration_date is not None
            and now < p.expiration_date <= limit
        ]

    async def expired_products(self, reference_time: datetime | None = None) -> list[Product]:
        """Expiration-tracked products whose expiration date has passed."""
        now = self._reference(reference_time)
        products = await self._store.list_products()
        return [
            p for p in products if policy_for(p.category).tracks_expiration and p.is_expired(now)
        ]

    async def products_below_minimum_stock(self) -> list[Product]:
        """Products with quantity < minimum_quantity, ordered by SKU."""
        return await self._store.list_below_minimum()
