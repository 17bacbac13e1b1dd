"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from stockledger.core.entities.movement import MovementType
from stockledger.core.entities.product import Category


class CreateProductRequest(BaseModel):
    """Request to add a product to the catalog."""

    sku: int = Field(..., gt=0, description="Unique SKU code")
    name: str = Field(..., min_length=1, max_length=200, description="Product name")
    category: Category = Field(default=Category.STANDARD, description="STANDARD or PERISHABLE")
    unit_price: Decimal = Field(..., ge=0, description="Price per unit")
    quantity: int = Field(default=0, ge=0, description="Initial quantity on hand")
    minimum_quantity: int = Field(default=0, ge=0, description="Low-stock threshold")
    lot_number: str | None = Field(default=None, description="Lot number (perishables)")
    expiration_date: datetime | None = Field(
        default=None,
        description="Expiration date in ISO format (perishables, must be future)",
    )


class UpdateProductRequest(BaseModel):
    """Request to update product metadata. Quantity changes go through movements."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    category: Category | None = None
    unit_price: Decimal | None = Field(default=None, ge=0)
    minimum_quantity: int | None = Field(default=None, ge=0)
    lot_number: str | None = None
    expiration_date: datetime | None = None


class RegisterMovementRequest(BaseModel):
    """
    Request to register an inbound or outbound movement.

    The movement date is assigned by the server; a client-supplied ``date``
    is ignored.
    """

    movement_type: MovementType = Field(..., description="INBOUND or OUTBOUND")
    quantity: int = Field(..., description="Units moved (must be positive)")
    batch: str | None = Field(default=None, description="Batch identifier (perishables)")
    expiration_date: datetime | None = Field(
        default=None,
        description="Batch expiration date in ISO format (perishables, must be future)",
    )
