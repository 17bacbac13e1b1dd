"""
Application layer - Use cases, DTOs, and service factories.

This layer orchestrates the stock engine by:
1. Defining request/response DTOs for API contracts
2. Implementing use cases that coordinate core services
3. Providing factory functions for dependency injection

Use cases are the only entry point for API handlers.
"""

from stockledger.application.dto.requests import (
    CreateProductRequest,
    RegisterMovementRequest,
    UpdateProductRequest,
)
from stockledger.application.dto.responses import (
    ErrorResponse,
    HealthResponse,
    ProductListResponse,
    ProductReportResponse,
    ProductResponse,
    RegisterMovementResponse,
    StockMovementResponse,
    StockValueResponse,
)
from stockledger.application.services import (
    get_cache_signal,
    get_movement_ledger,
    get_product_catalog,
    get_product_locks,
    get_report_engine,
    reset_services,
)
from stockledger.application.use_cases import (
    AddProductUseCase,
    RegisterMovementUseCase,
    RemoveProductUseCase,
    StockReportsUseCase,
    UpdateProductUseCase,
)

__all__ = [
    # Request DTOs
    "CreateProductRequest",
    "UpdateProductRequest",
    "RegisterMovementRequest",
    # Response DTOs
    "ProductResponse",
    "ProductListResponse",
    "StockMovementResponse",
    "RegisterMovementResponse",
    "StockValueResponse",
    "ProductReportResponse",
    "HealthResponse",
    "ErrorResponse",
    # Use Cases
    "AddProductUseCase",
    "UpdateProductUseCase",
    "RemoveProductUseCase",
    "RegisterMovementUseCase",
    "StockReportsUseCase",
    # Service factories
    "get_product_locks",
    "get_cache_signal",
    "get_product_catalog",
    "get_movement_ledger",
    "get_report_engine",
    "reset_services",
]
