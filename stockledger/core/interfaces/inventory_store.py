"""Abstract interface for inventory storage."""

from abc import ABC, abstractmethod

from stockledger.core.entities.movement import StockMovement
from stockledger.core.entities.product import Product


class IInventoryStore(ABC):
    """
    Interface for product and stock movement persistence.

    Implementations raise PersistenceError on connectivity or integrity
    problems and DuplicateProductError when a SKU is already taken.
    """

    @abstractmethod
    async def add_product(self, product: Product) -> Product:
        """Insert a new product."""
        pass

    @abstractmethod
    async def get_product(self, sku: int) -> Product | None:
        """Get product by SKU."""
        pass

    @abstractmethod
    async def list_products(self, limit: int | None = None, offset: int = 0) -> list[Product]:
        """List products ordered by SKU."""
        pass

    @abstractmethod
    async def list_below_minimum(self) -> list[Product]:
        """List products whose quantity is below their minimum quantity."""
        pass

    @abstractmethod
    async def update_product(self, product: Product) -> Product:
        """
        Update product metadata.

        Never writes the quantity: the stored quantity is kept and returned.
        """
        pass

    @abstractmethod
    async def delete_product(self, sku: int) -> bool:
        """Delete a product. Returns False when the SKU is unknown."""
        pass

    @abstractmethod
    async def append_movement(
        self, movement: StockMovement, new_quantity: int
    ) -> tuple[Product, StockMovement]:
        """
        Set the target product's quantity and append the movement atomically.

        Either both writes are visible or neither is. Raises
        ProductNotFoundError if the product vanished.
        """
        pass

    @abstractmethod
    async def get_movement(self, movement_id: int) -> StockMovement | None:
        """Get movement by ID."""
        pass

    @abstractmethod
    async def list_movements(self, limit: int = 100, offset: int = 0) -> list[StockMovement]:
        """List all movements, newest first."""
        pass

    @abstractmethod
    async def list_movements_by_product(
        self, sku: int, limit: int = 100, offset: int = 0
    ) -> list[StockMovement]:
        """Get movements for a product, newest first."""
        pass
