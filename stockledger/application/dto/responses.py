"""Outgoing JSON shapes. Routes never serialize entities directly."""

from datetime import datetime, timezone
from decimal import Decimal

from pydantic import BaseModel, Field

from stockledger.core.entities.movement import StockMovement
from stockledger.core.entities.product import Product


class ProductResponse(BaseModel):
    """Product response DTO."""

    sku: int
    name: str
    category: str
    unit_price: Decimal
    quantity: int
    minimum_quantity: int
    total_value: Decimal
    created_at: datetime | None = None
    lot_number: str | None = None
    expiration_date: datetime | None = None

    @classmethod
    def from_entity(cls, product: Product) -> "ProductResponse":
        return cls(
            sku=product.sku,
            name=product.name,
            category=product.category.value,
            unit_price=product.unit_price,
            quantity=product.quantity,
            minimum_quantity=product.minimum_quantity,
            total_value=product.total_value,
            created_at=product.created_at,
            lot_number=product.lot_number,
            expiration_date=product.expiration_date,
        )


class ProductListResponse(BaseModel):
    """Product list response."""

    items: list[ProductResponse]
    total: int


class StockMovementResponse(BaseModel):
    """One ledger row."""

    id: int
    product_sku: int
    movement_type: str
    quantity: int
    date: datetime
    batch: str | None = None
    expiration_date: datetime | None = None

    @classmethod
    def from_entity(cls, movement: StockMovement) -> "StockMovementResponse":
        return cls(
            id=movement.id,  # type: ignore[arg-type]
            product_sku=movement.product_sku,  # type: ignore[arg-type]
            movement_type=movement.movement_type.value,
            quantity=movement.quantity,
            date=movement.date,  # type: ignore[arg-type]
            batch=movement.batch,
            expiration_date=movement.expiration_date,
        )


class RegisterMovementResponse(BaseModel):
    """Response for a registered movement."""

    product: ProductResponse
    movement: StockMovementResponse
    previous_quantity: int


class StockValueResponse(BaseModel):
    """Total stock value report."""

    total_stock_value: Decimal
    product_count: int
    generated_at: datetime


class ProductReportResponse(BaseModel):
    """Report listing products (expiring soon, expired, low stock)."""

    report: str
    items: list[ProductResponse]
    total: int
    generated_at: datetime
    window_days: int | None = None


class HealthResponse(BaseModel):
    """Liveness plus the active storage backend."""

    status: str
    version: str
    uptime_seconds: float
    storage: str | None = None
    error: str | None = None


class ErrorResponse(BaseModel):
    """Body of every non-2xx response. ``error_code`` is stable; ``message`` is for people."""

    error_code: str = Field(..., description="Stable code, e.g. INSUFFICIENT_STOCK")
    message: str = Field(..., description="What went wrong")
    hint: str | None = Field(default=None, description="How the client can fix the request")
    detail: str | None = Field(default=None, description="Structured context as JSON text")
    path: str | None = Field(default=None, description="Path of the failing request")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
