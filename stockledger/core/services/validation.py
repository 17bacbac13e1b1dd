"""
Validation rules for products and stock movements.

Pure functions: they never raise for a rule violation and never mutate their
inputs. A failed rule is returned as the typed error so the caller decides
whether to raise it. Results depend only on the arguments and the reference
time ``now`` (defaults to the current UTC instant).
"""

from datetime import datetime

from stockledger.core.clock import ensure_utc, utcnow
from stockledger.core.entities.movement import StockMovement
from stockledger.core.entities.product import Product
from stockledger.core.exceptions import (
    InvalidProductFieldsError,
    InvalidQuantityError,
    ValidationError,
)
from stockledger.core.services.category_policy import policy_for


def _reference(now: datetime | None) -> datetime:
    return ensure_utc(now) if now is not None else utcnow()  # type: ignore[return-value]


def check_product(
    product: Product, now: datetime | None = None
) -> InvalidProductFieldsError | None:
    """Return why a product is invalid for its category, or None."""
    return policy_for(product.category).product_error(product, _reference(now))


def validate_product(product: Product, now: datetime | None = None) -> bool:
    """True when the product satisfies its category's required fields."""
    return check_product(product, now) is None


def validate_movement(
    product: Product,
    movement: StockMovement,
    now: datetime | None = None,
) -> ValidationError | None:
    """
    Check a movement against its target product.

    Returns:
        InvalidQuantityError when quantity <= 0, the category policy's error
        (MissingExpirationError / MissingBatchError for perishables), or None.
    """
    if movement.quantity <= 0:
        return InvalidQuantityError(movement.quantity)
    return policy_for(product.category).movement_error(product, movement, _reference(now))
