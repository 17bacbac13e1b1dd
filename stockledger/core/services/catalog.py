"""
Product catalog service.

Adds, reads, updates and removes products. Quantity is set once at creation;
afterwards only the movement ledger may change it, so metadata updates go
through ``IInventoryStore.update_product`` which never writes quantity.
"""

from typing import Any

from stockledger.config import get_logger
from stockledger.core.clock import Clock, utcnow
from stockledger.core.entities.product import Product
from stockledger.core.exceptions import ProductNotFoundError
from stockledger.core.interfaces.inventory_store import IInventoryStore
from stockledger.core.services.locks import ProductLocks
from stockledger.core.services.signal import CacheInvalidationSignal
from stockledger.core.services.validation import check_product

logger = get_logger(__name__)

# Fields a metadata update may touch.
UPDATABLE_FIELDS = frozenset(
    {"name", "category", "unit_price", "minimum_quantity", "lot_number", "expiration_date"}
)


class ProductCatalog:
    """Product records and their category metadata."""

    def __init__(
        self,
        store: IInventoryStore,
        signal: CacheInvalidationSignal | None = None,
        locks: ProductLocks | None = None,
        clock: Clock = utcnow,
    ):
        self._store = store
        self._signal = signal or CacheInvalidationSignal()
        self._locks = locks or ProductLocks()
        self._clock = clock

    async def add_product(self, product: Product) -> Product:
        """
        Validate and insert a product, stamping its creation time.

        Raises:
            InvalidProductFieldsError: category rules not met
            DuplicateProductError: SKU already tracked
        """
        now = self._clock()
        error = check_product(product, now)
        if error is not None:
            logger.warning("product_rejected", sku=product.sku, field=error.field)
            raise error

        created = await self._store.add_product(product.model_copy(update={"created_at": now}))
        self._signal.on_state_changed(reason="product_added", sku=created.sku)
        logger.info("product_added", sku=created.sku, name=created.name)
        return created

    async def get_product(self, sku: int) -> Product:
        """Get a tracked product or raise ProductNotFoundError."""
        product = await self._store.get_product(sku)
        if product is None:
            raise ProductNotFoundError(sku)
        return product

    async def list_products(self, limit: int | None = None, offset: int = 0) -> list[Product]:
        return await self._store.list_products(limit=limit, offset=offset)

    async def update_product(self, sku: int, changes: dict[str, Any]) -> Product:
        """
        Apply metadata changes and re-validate the result.

        Quantity and SKU are not updatable here.
        """
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields not updatable: {', '.join(sorted(unknown))}")

        async with self._locks.hold(sku):
            current = await self.get_product(sku)
            candidate = Product.model_validate({**current.model_dump(), **changes})
            error = check_product(candidate, self._clock())
            if error is not None:
                logger.warning("product_update_rejected", sku=sku, field=error.field)
                raise error
            updated = await self._store.update_product(candidate)

        self._signal.on_state_changed(reason="product_updated", sku=sku)
        logger.info("product_updated", sku=sku, fields=sorted(changes))
        return updated

    async def remove_product(self, sku: int) -> None:
        """Remove a product from the catalog. Its movement history is kept."""
        async with self._locks.hold(sku):
            removed = await self._store.delete_product(sku)
        if not removed:
            raise ProductNotFoundError(sku)

        self._signal.on_state_changed(reason="product_removed", sku=sku)
        logger.info("product_removed", sku=sku)
