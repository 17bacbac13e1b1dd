"""In-memory implementation of inventory storage."""

import asyncio
import itertools

from stockledger.config import get_logger
from stockledger.core.entities.movement import StockMovement
from stockledger.core.entities.product import Product
from stockledger.core.exceptions import DuplicateProductError, ProductNotFoundError
from stockledger.core.interfaces.inventory_store import IInventoryStore

logger = get_logger(__name__)


class InMemoryInventoryStore(IInventoryStore):
    """
    Dict-backed store for tests and ephemeral runs.

    All state sits behind one asyncio lock and is copied on the way in and
    out, so callers never share mutable records with the store.
    """

    def __init__(self) -> None:
        self._products: dict[int, Product] = {}
        self._movements: list[StockMovement] = []
        self._ids = itertools.count(1)
        self._lock = asyncio.Lock()

    async def add_product(self, product: Product) -> Product:
        """Insert a new product."""
        async with self._lock:
            if product.sku in self._products:
                raise DuplicateProductError(product.sku)
            self._products[product.sku] = product.model_copy()
        logger.debug("product_stored", sku=product.sku)
        return product.model_copy()

    async def get_product(self, sku: int) -> Product | None:
        """Get product by SKU."""
        async with self._lock:
            product = self._products.get(sku)
            return product.model_copy() if product else None

    async def list_products(self, limit: int | None = None, offset: int = 0) -> list[Product]:
        """List products ordered by SKU."""
        async with self._lock:
            products = [self._products[sku].model_copy() for sku in sorted(self._products)]
        end = None if limit is None else offset + limit
        return products[offset:end]

    async def list_below_minimum(self) -> list[Product]:
        """List products whose quantity is below their minimum quantity."""
        async with self._lock:
            return [
                self._products[sku].model_copy()
                for sku in sorted(self._products)
                if self._products[sku].below_minimum
            ]

    async def update_product(self, product: Product) -> Product:
        """Update product metadata, keeping the stored quantity."""
        async with self._lock:
            current = self._products.get(product.sku)
            if current is None:
                raise ProductNotFoundError(product.sku)
            stored = product.model_copy(
                update={"quantity": current.quantity, "created_at": current.created_at}
            )
            self._products[product.sku] = stored
            return stored.model_copy()

    async def delete_product(self, sku: int) -> bool:
        """Delete a product."""
        async with self._lock:
            return self._products.pop(sku, None) is not None

    async def append_movement(
        self, movement: StockMovement, new_quantity: int
    ) -> tuple[Product, StockMovement]:
        """Set quantity and append the movement under one lock acquisition."""
        sku = movement.product_sku
        async with self._lock:
            current = self._products.get(sku)  # type: ignore[arg-type]
            if current is None:
                raise ProductNotFoundError(sku)  # type: ignore[arg-type]
            recorded = movement.model_copy(update={"id": next(self._ids)})
            updated = current.model_copy(update={"quantity": new_quantity})
            self._products[current.sku] = updated
            self._movements.append(recorded)
            return updated.model_copy(), recorded

    async def get_movement(self, movement_id: int) -> StockMovement | None:
        """Get movement by ID."""
        async with self._lock:
            return next((m for m in self._movements if m.id == movement_id), None)

    async def list_movements(self, limit: int = 100, offset: int = 0) -> list[StockMovement]:
        """List all movements, newest first."""
        async with self._lock:
            ordered = list(reversed(self._movements))
        return ordered[offset : offset + limit]

    async def list_movements_by_product(
        self, sku: int, limit: int = 100, offset: int = 0
    ) -> list[StockMovement]:
        """Get movements for a product, newest first."""
        async with self._lock:
            ordered = [m for m in reversed(self._movements) if m.product_sku == sku]
        return ordered[offset : offset + limit]

    @property
    def movement_count(self) -> int:
        return len(self._movements)
