"""
Movement ledger.

The only component allowed to change a product's quantity. Each movement is
validated, checked for sufficient stock, timestamped and persisted together
with the new quantity while the product's lock is held, so concurrent
movements on one SKU can never apply against a stale quantity.
"""

from dataclasses import dataclass

from stockledger.config import get_logger
from stockledger.core.clock import Clock, utcnow
from stockledger.core.entities.movement import MovementType, StockMovement
from stockledger.core.entities.product import Product
from stockledger.core.exceptions import InsufficientStockError, ProductNotFoundError
from stockledger.core.interfaces.inventory_store import IInventoryStore
from stockledger.core.services.locks import ProductLocks
from stockledger.core.services.signal import CacheInvalidationSignal
from stockledger.core.services.validation import validate_movement

logger = get_logger(__name__)


@dataclass
class AppliedMovement:
    """Result of registering a movement."""

    product: Product
    movement: StockMovement

    @property
    def previous_quantity(self) -> int:
        return self.product.quantity - self.movement.signed_quantity


class MovementLedger:
    """Append-only log of applied stock movements."""

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

    async def register_movement(
        self, product: Product, movement: StockMovement
    ) -> AppliedMovement:
        """
        Validate and apply a movement to a tracked product.

        The product is re-read under its lock; the caller's copy only
        identifies the SKU. Any date supplied on the movement is replaced.

        Raises:
            ProductNotFoundError: product no longer tracked
            ValidationError: InvalidQuantity / MissingExpiration / MissingBatch
            InsufficientStockError: outbound quantity exceeds stock
            PersistenceError: store failure (nothing applied)
        """
        sku = product.sku
        async with self._locks.hold(sku):
            # 1. Fresh read inside the critical section
            current = await self._store.get_product(sku)
            if current is None:
                raise ProductNotFoundError(sku)

            # 2. Validation rules
            now = self._clock()
            error = validate_movement(current, movement, now)
            if error is not None:
                logger.warning(
                    "stock_movement_rejected",
                    sku=sku,
                    error_code=error.code,
                    field=error.field,
                )
                raise error

            # 3. Quantity arithmetic
            if movement.movement_type == MovementType.INBOUND:
                new_quantity = current.quantity + movement.quantity
            else:
                if movement.quantity > current.quantity:
                    logger.warning(
                        "insufficient_stock",
                        sku=sku,
                        requested=movement.quantity,
                        available=current.quantity,
                    )
                    raise InsufficientStockError(sku, movement.quantity, current.quantity)
                new_quantity = current.quantity - movement.quantity

            # 4. Stamp and persist quantity + ledger entry as one unit
            applied = movement.model_copy(update={"id": None, "product_sku": sku, "date": now})
            updated, recorded = await self._store.append_movement(applied, new_quantity)

        self._signal.on_state_changed(
            reason="stock_movement_registered",
            sku=sku,
            movement_id=recorded.id,
        )
        logger.info(
            "stock_movement_registered",
            sku=sku,
            movement_id=recorded.id,
            type=recorded.movement_type.value,
            qty=recorded.quantity,
            new_qty=updated.quantity,
        )
        return AppliedMovement(product=updated, movement=recorded)

    async def movement_history(
        self, sku: int, limit: int = 100, offset: int = 0
    ) -> list[StockMovement]:
        """Movements recorded for a SKU, newest first."""
        return await self._store.list_movements_by_product(sku, limit=limit, offset=offset)
