"""Stock movement entities."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator

from stockledger.core.clock import ensure_utc


class MovementType(str, Enum):
    """Direction of a stock movement."""

    INBOUND = "INBOUND"
    OUTBOUND = "OUTBOUND"


class StockMovement(BaseModel):
    """
    A single inbound or outbound movement.

    Immutable: the ledger derives the applied copy (date, product_sku, id)
    from the caller's draft instead of mutating it.
    """

    model_config = ConfigDict(frozen=True)

    id: int | None = None
    product_sku: int | None = None
    movement_type: MovementType
    quantity: int  # must be > 0, checked by validation rules
    date: datetime | None = None  # stamped by the ledger
    batch: str | None = None
    expiration_date: datetime | None = None

    @field_validator("date", "expiration_date")
    @classmethod
    def normalize_timezone(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v)

    @property
    def signed_quantity(self) -> int:
        """Quantity with the sign of its effect on stock."""
        if self.movement_type == MovementType.OUTBOUND:
            return -self.quantity
        return self.quantity
