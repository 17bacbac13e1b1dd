"""Update Product Use Case."""

from stockledger.application.dto.requests import UpdateProductRequest
from stockledger.application.dto.responses import ProductResponse
from stockledger.core.entities.product import Product
from stockledger.core.services.catalog import ProductCatalog

# Fields that may be cleared by sending null.
_NULLABLE = {"lot_number", "expiration_date"}


class UpdateProductUseCase:
    """Update product metadata (never quantity)."""

    def __init__(self, catalog: ProductCatalog | None = None):
        self._catalog = catalog

    async def _get_catalog(self) -> ProductCatalog:
        if self._catalog is None:
            from stockledger.application.services import get_product_catalog

            self._catalog = await get_product_catalog()
        return self._catalog

    async def execute(self, sku: int, request: UpdateProductRequest) -> Product:
        """Apply the fields present in the request."""
        changes = {
            k: v
            for k, v in request.model_dump(exclude_unset=True).items()
            if v is not None or k in _NULLABLE
        }
        catalog = await self._get_catalog()
        if not changes:
            return await catalog.get_product(sku)
        return await catalog.update_product(sku, changes)

    def to_response(self, product: Product) -> ProductResponse:
        """Convert result to API response."""
        return ProductResponse.from_entity(product)
