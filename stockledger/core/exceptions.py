"""
Domain exceptions for the stock ledger.

Each error kind carries a stable machine-readable code so the API layer can
map it to an HTTP status without inspecting the message.
"""

from typing import Any


class InventoryError(Exception):
    """Base exception for all stock ledger errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Validation Exceptions
class ValidationError(InventoryError):
    """Input validation failed."""

    def __init__(
        self,
        field: str,
        message: str,
        value: Any = None,
        code: str = "VALIDATION_ERROR",
    ):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code=code,
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )
        self.field = field


class InvalidQuantityError(ValidationError):
    """Movement quantity is zero or negative."""

    def __init__(self, quantity: int):
        super().__init__(
            field="quantity",
            message="Quantity must be positive",
            value=quantity,
            code="INVALID_QUANTITY",
        )


class MissingExpirationError(ValidationError):
    """Perishable movement without a future expiration date."""

    def __init__(self, sku: int, expiration_date: Any = None):
        super().__init__(
            field="expiration_date",
            message="Perishable products require a future expiration date",
            value=expiration_date,
            code="MISSING_EXPIRATION",
        )
        self.details["sku"] = sku


class MissingBatchError(ValidationError):
    """Perishable movement without a batch identifier."""

    def __init__(self, sku: int):
        super().__init__(
            field="batch",
            message="Perishable products require a batch",
            code="MISSING_BATCH",
        )
        self.details["sku"] = sku


class InvalidProductFieldsError(ValidationError):
    """Product is missing fields its category requires."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            field=field,
            message=message,
            value=value,
            code="INVALID_PRODUCT_FIELDS",
        )


# Business rule Exceptions
class InsufficientStockError(InventoryError):
    """Outbound movement exceeds the quantity on hand."""

    def __init__(self, sku: int, requested: int, available: int):
        super().__init__(
            f"Insufficient stock for SKU {sku}: requested {requested}, available {available}",
            code="INSUFFICIENT_STOCK",
            details={"sku": sku, "requested": requested, "available": available},
        )


class ProductNotFoundError(InventoryError):
    """Product not tracked by the catalog."""

    def __init__(self, sku: int):
        super().__init__(
            f"Product not found: {sku}",
            code="PRODUCT_NOT_FOUND",
            details={"sku": sku},
        )


class DuplicateProductError(InventoryError):
    """A product with the same SKU already exists."""

    def __init__(self, sku: int):
        super().__init__(
            f"Product already exists with SKU: {sku}",
            code="DUPLICATE_PRODUCT",
            details={"sku": sku},
        )


# Persistence Exceptions
class PersistenceError(InventoryError):
    """Base exception for storage operations."""

    pass


class DatabaseError(PersistenceError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


# Cache Exceptions
class CacheSignalError(InventoryError):
    """Cache backend could not be reached. Logged, never surfaced."""

    def __init__(self, key: str, reason: str):
        super().__init__(
            f"Cache operation failed for '{key}': {reason}",
            code="CACHE_SIGNAL_ERROR",
            details={"key": key, "reason": reason},
        )


class ConfigurationError(InventoryError):
    """Configuration error."""

    pass
