"""Add Product Use Case."""

from stockledger.application.dto.requests import CreateProductRequest
from stockledger.application.dto.responses import ProductResponse
from stockledger.config import get_logger
from stockledger.core.entities.product import Product
from stockledger.core.services.catalog import ProductCatalog

logger = get_logger(__name__)


class AddProductUseCase:
    """Validate and add a product to the catalog."""

    def __init__(self, catalog: ProductCatalog | None = None):
        self._catalog = catalog

    async def _get_catalog(self) -> ProductCatalog:
        if self._catalog is None:
            from stockledger.application.services import get_product_catalog

            self._catalog = await get_product_catalog()
        return self._catalog

    async def execute(self, request: CreateProductRequest) -> Product:
        """Execute add product use case."""
        logger.info("add_product_started", sku=request.sku, category=request.category.value)

        catalog = await self._get_catalog()
        product = Product(**request.model_dump())
        return await catalog.add_product(product)

    def to_response(self, product: Product) -> ProductResponse:
        """Convert result to API response."""
        return ProductResponse.from_entity(product)
