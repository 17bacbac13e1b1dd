"""Product catalog entities."""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from stockledger.core.clock import ensure_utc


class Category(str, Enum):
    """Product categories with distinct validation requirements."""

    STANDARD = "STANDARD"
    PERISHABLE = "PERISHABLE"


class Product(BaseModel):
    """A catalog product and its quantity on hand."""

    sku: int = Field(..., gt=0)
    name: str = Field(..., min_length=1)
    category: Category = Category.STANDARD
    unit_price: Decimal = Field(default=Decimal("0"), ge=0)
    quantity: int = Field(default=0, ge=0)
    minimum_quantity: int = Field(default=0, ge=0)
    created_at: datetime | None = None

    # Perishable-only
    lot_number: str | None = None
    expiration_date: datetime | None = None

    @field_validator("created_at", "expiration_date")
    @classmethod
    def normalize_timezone(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v)

    @property
    def total_value(self) -> Decimal:
        """Stock value = quantity * unit_price."""
        return self.unit_price * self.quantity

    @property
    def below_minimum(self) -> bool:
        return self.quantity < self.minimum_quantity

    def is_expired(self, at: datetime) -> bool:
        """True when an expiration date is set and not after ``at``."""
        return self.expiration_date is not None and self.expiration_date <= at
