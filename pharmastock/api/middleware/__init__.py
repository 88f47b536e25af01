"""API middleware."""

from pharmastock.api.middleware.error_handler import ErrorHandlerMiddleware
from pharmastock.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware"]
