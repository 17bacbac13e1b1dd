"""
Translation of stock engine errors into HTTP responses.

Every error leaves the API as an ``ErrorResponse`` body. The status code is
chosen by exception type, the hint by error code; message text is never
inspected.
"""

import json
import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from stockledger.application.dto.responses import ErrorResponse
from stockledger.config import get_logger
from stockledger.core.exceptions import (
    ConfigurationError,
    DuplicateProductError,
    InsufficientStockError,
    InventoryError,
    PersistenceError,
    ProductNotFoundError,
    ValidationError,
)

logger = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"

# Checked in order; the first isinstance match decides the status
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    InsufficientStockError: status.HTTP_400_BAD_REQUEST,
    ProductNotFoundError: status.HTTP_404_NOT_FOUND,
    DuplicateProductError: status.HTTP_409_CONFLICT,
    PersistenceError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ValueError: status.HTTP_400_BAD_REQUEST,
}

HINT_MAP: dict[str, str] = {
    "PRODUCT_NOT_FOUND": "Check the SKU and try GET /api/products to list tracked products.",
    "DUPLICATE_PRODUCT": "A product with this SKU already exists. Use PATCH to update it.",
    "INVALID_QUANTITY": "Movement quantity must be a positive integer.",
    "INSUFFICIENT_STOCK": "Register an INBOUND movement first or reduce the OUTBOUND quantity.",
    "MISSING_EXPIRATION": "Perishable movements need an expiration_date in the future.",
    "MISSING_BATCH": "Perishable movements need a non-blank batch.",
    "INVALID_PRODUCT_FIELDS": "Perishable products need a lot_number and a future expiration_date.",
    "VALIDATION_ERROR": "Compare the request fields and types with /docs.",
    "DATABASE_ERROR": "Storage is unavailable. Retry later; details are in the server log.",
    "ValueError": "One of the parameters has an invalid value.",
}

HTTP_ERROR_CODES: dict[int, str] = {
    400: "BAD_REQUEST",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    422: "UNPROCESSABLE_ENTITY",
}

# Used when the error code has no specific hint
STATUS_HINTS: dict[int, str] = {
    400: "The request was rejected by a business rule.",
    404: "Nothing exists at this path. Verify the SKU or URL.",
    409: "The resource already exists.",
    422: "The request body or query does not match the schema.",
    500: "The server failed to complete the request. Details are in the server log.",
}


def hint_for(error_code: str, status_code: int) -> str:
    return HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code, "")


def status_for(exc: Exception) -> int:
    """HTTP status for an exception raised while serving a request."""
    return next(
        (code for exc_type, code in EXCEPTION_STATUS_MAP.items() if isinstance(exc, exc_type)),
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def _json(request: Request, status_code: int, body: ErrorResponse) -> JSONResponse:
    body.path = request.url.path
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def error_response(request: Request, exc: Exception) -> JSONResponse:
    """Build the JSON error response for any exception."""
    status_code = status_for(exc)
    if isinstance(exc, InventoryError):
        error_code = exc.code
        detail = json.dumps(exc.details, default=str) if exc.details else None
    else:
        error_code = type(exc).__name__
        detail = None

    log_context = {
        "request_id": getattr(request.state, "request_id", None),
        "path": request.url.path,
        "error_type": error_code,
        "error": str(exc),
    }
    if status_code >= 500:
        logger.error("unhandled_exception", traceback=traceback.format_exc(), **log_context)
        message, detail = INTERNAL_ERROR_MESSAGE, None
    else:
        logger.warning("request_rejected", **log_context)
        message = str(exc)

    return _json(
        request,
        status_code,
        ErrorResponse(
            error_code=error_code,
            message=message,
            hint=hint_for(error_code, status_code),
            detail=detail,
        ),
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Last line of defence: exceptions no handler claimed become a 500 body."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            return error_response(request, e)


async def _domain_error(request: Request, exc: Exception) -> JSONResponse:
    return error_response(request, exc)


async def _request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    problems = "; ".join(
        f"{' -> '.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    logger.info("request_invalid", path=request.url.path, problems=problems)
    return _json(
        request,
        422,
        ErrorResponse(
            error_code="VALIDATION_ERROR",
            message="Request validation failed",
            hint=hint_for("VALIDATION_ERROR", 422),
            detail=problems,
        ),
    )


async def _http_error(request: Request, exc: HTTPException) -> JSONResponse:
    error_code = HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR")
    return _json(
        request,
        exc.status_code,
        ErrorResponse(
            error_code=error_code,
            message=str(exc.detail) if exc.detail else "An error occurred",
            hint=hint_for(error_code, exc.status_code),
        ),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register the handlers that produce ``ErrorResponse`` bodies."""
    app.add_exception_handler(InventoryError, _domain_error)
    app.add_exception_handler(ValueError, _domain_error)
    app.add_exception_handler(RequestValidationError, _request_validation_error)
    app.add_exception_handler(HTTPException, _http_error)
