"""API middleware."""

from stockledger.api.middleware.error_handler import (
    ErrorHandlerMiddleware,
    setup_exception_handlers,
)
from stockledger.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware", "setup_exception_handlers"]
