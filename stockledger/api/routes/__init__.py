"""API route modules."""

from stockledger.api.routes.health import router as health_router
from stockledger.api.routes.products import router as products_router
from stockledger.api.routes.reports import router as reports_router

__all__ = [
    "health_router",
    "products_router",
    "reports_router",
]
