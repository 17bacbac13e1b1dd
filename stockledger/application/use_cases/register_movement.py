"""Register Movement Use Case: INBOUND/OUTBOUND against an existing SKU."""

from stockledger.application.dto.requests import RegisterMovementRequest
from stockledger.application.dto.responses import (
    ProductResponse,
    RegisterMovementResponse,
    StockMovementResponse,
)
from stockledger.config import get_logger
from stockledger.core.entities.movement import StockMovement
from stockledger.core.services.catalog import ProductCatalog
from stockledger.core.services.ledger import AppliedMovement, MovementLedger

logger = get_logger(__name__)


class RegisterMovementUseCase:
    """Resolve the product, then hand the movement to the ledger."""

    def __init__(
        self,
        catalog: ProductCatalog | None = None,
        ledger: MovementLedger | None = None,
    ):
        self._catalog = catalog
        self._ledger = ledger

    async def _get_catalog(self) -> ProductCatalog:
        if self._catalog is None:
            from stockledger.application.services import get_product_catalog

            self._catalog = await get_product_catalog()
        return self._catalog

    async def _get_ledger(self) -> MovementLedger:
        if self._ledger is None:
            from stockledger.application.services import get_movement_ledger

            self._ledger = await get_movement_ledger()
        return self._ledger

    async def execute(self, sku: int, request: RegisterMovementRequest) -> AppliedMovement:
        """Execute register movement use case."""
        logger.info(
            "register_movement_started",
            sku=sku,
            type=request.movement_type.value,
            quantity=request.quantity,
        )

        # 1. Product must exist (404 otherwise)
        catalog = await self._get_catalog()
        product = await catalog.get_product(sku)

        # 2. Build the draft movement; the ledger stamps date and SKU
        movement = StockMovement(
            movement_type=request.movement_type,
            quantity=request.quantity,
            batch=request.batch,
            expiration_date=request.expiration_date,
        )

        # 3. Validate + apply
        ledger = await self._get_ledger()
        return await ledger.register_movement(product, movement)

    def to_response(self, result: AppliedMovement) -> RegisterMovementResponse:
        """Convert result to API response."""
        return RegisterMovementResponse(
            product=ProductResponse.from_entity(result.product),
            movement=StockMovementResponse.from_entity(result.movement),
            previous_quantity=result.previous_quantity,
        )
