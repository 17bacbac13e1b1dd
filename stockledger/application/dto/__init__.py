"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.
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

__all__ = [
    # Requests
    "CreateProductRequest",
    "UpdateProductRequest",
    "RegisterMovementRequest",
    # Responses
    "ProductResponse",
    "ProductListResponse",
    "StockMovementResponse",
    "RegisterMovementResponse",
    "StockValueResponse",
    "ProductReportResponse",
    "HealthResponse",
    "ErrorResponse",
]
