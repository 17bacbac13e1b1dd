"""Remove Product Use Case."""

from stockledger.config import get_logger
from stockledger.core.services.catalog import ProductCatalog

logger = get_logger(__name__)


class RemoveProductUseCase:
    """Remove a product from the catalog; its movement history stays."""

    def __init__(self, catalog: ProductCatalog | None = None):
        self._catalog = catalog

    async def _get_catalog(self) -> ProductCatalog:
        if self._catalog is None:
            from stockledger.application.services import get_product_catalog

            self._catalog = await get_product_catalog()
        return self._catalog

    async def execute(self, sku: int) -> None:
        """Execute remove product use case."""
        catalog = await self._get_catalog()
        await catalog.remove_product(sku)
        logger.info("remove_product_complete", sku=sku)
