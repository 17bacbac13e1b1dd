"""
Category policies.

Each product category owns its required-field rules. Ledger, catalog and
reports ask the policy instead of branching on the category themselves, so a
new category only needs a new policy registered here.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from stockledger.core.entities.movement import StockMovement
from stockledger.core.entities.product import Category, Product
from stockledger.core.exceptions import (
    InvalidProductFieldsError,
    MissingBatchError,
    MissingExpirationError,
    ValidationError,
)


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


class CategoryPolicy(ABC):
    """Required-field rules for one product category."""

    category: Category
    tracks_expiration: bool = False

    @abstractmethod
    def product_error(self, product: Product, now: datetime) -> InvalidProductFieldsError | None:
        """Return the first missing/invalid category field on a product, if any."""

    @abstractmethod
    def movement_error(
        self, product: Product, movement: StockMovement, now: datetime
    ) -> ValidationError | None:
        """Return the first missing/invalid category field on a movement, if any."""

    def product_fields_present(self, product: Product, now: datetime) -> bool:
        return self.product_error(product, now) is None

    def movement_fields_present(
        self, product: Product, movement: StockMovement, now: datetime
    ) -> bool:
        return self.movement_error(product, movement, now) is None


class StandardPolicy(CategoryPolicy):
    """No category-specific fields."""

    category = Category.STANDARD

    def product_error(self, product: Product, now: datetime) -> InvalidProductFieldsError | None:
        return None

    def movement_error(
        self, product: Product, movement: StockMovement, now: datetime
    ) -> ValidationError | None:
        return None


class PerishablePolicy(CategoryPolicy):
    """Lot/batch and future expiration date are mandatory."""

    category = Category.PERISHABLE
    tracks_expiration = True

    def product_error(self, product: Product, now: datetime) -> InvalidProductFieldsError | None:
        if _blank(product.lot_number):
            return InvalidProductFieldsError(
                "lot_number", "Perishable products require a lot number", product.lot_number
            )
        if product.expiration_date is None or product.expiration_date <= now:
            return InvalidProductFieldsError(
                "expiration_date",
                "Perishable products require a future expiration date",
                product.expiration_date,
            )
        return None

    def movement_error(
        self, product: Product, movement: StockMovement, now: datetime
    ) -> ValidationError | None:
        if movement.expiration_date is None or movement.expiration_date <= now:
            return MissingExpirationError(product.sku, movement.expiration_date)
        if _blank(movement.batch):
            return MissingBatchError(product.sku)
        return None


_POLICIES: dict[Category, CategoryPolicy] = {
    policy.category: policy for policy in (StandardPolicy(), PerishablePolicy())
}


def policy_for(category: Category) -> CategoryPolicy:
    """Get the policy registered for a category."""
    return _POLICIES[category]
