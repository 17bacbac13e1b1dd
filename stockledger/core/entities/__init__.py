"""Domain entities."""

from stockledger.core.entities.movement import MovementType, StockMovement
from stockledger.core.entities.product import Category, Product

__all__ = [
    "Category",
    "Product",
    "MovementType",
    "StockMovement",
]
