"""
Error handling for the HTTP API.

Every failure leaves the service as an ``ErrorResponse`` body with a
machine-readable ``error_code``, a human ``message`` and a recovery ``hint``.
Domain errors are mapped to status codes by type; request schema failures
and bare ``HTTPException``s are folded into the same shape.
"""

from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from pharmastock.application.dto.responses import ErrorResponse
from pharmastock.config import get_logger
from pharmastock.core.exceptions import (
    ConfigurationError,
    ConflictError,
    InsufficientStockError,
    NotFoundError,
    PharmaStockError,
    StorageError,
    UpstreamError,
    ValidationError,
)

logger = get_logger(__name__)

# First isinstance match wins.
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    InsufficientStockError: status.HTTP_409_CONFLICT,
    UpstreamError: status.HTTP_502_BAD_GATEWAY,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ValueError: status.HTTP_400_BAD_REQUEST,
}

HINT_MAP: dict[str, str] = {
    "MEDICINE_NOT_FOUND": "Check the medicine ID and try GET /api/medicines to list medicines.",
    "SALE_NOT_FOUND": "Check the sale ID and try GET /api/sales to list sales.",
    "DUPLICATE_BATCH": "A live medicine with this brand, strength and batch exists. Edit it instead.",
    "CONCURRENT_UPDATE": "The medicine kept changing while the request ran. Retry the request.",
    "INSUFFICIENT_STORE_STOCK": "Transfer no more than the current store quantity.",
    "INSUFFICIENT_DISPENSER_STOCK": "Transfer stock to the dispenser before selling.",
    "INVALID_QUANTITY": "Quantities must be positive whole numbers.",
    "INVALID_PRESCRIPTION_STATUS": "Use one of Prescription, OTC, Controlled.",
    "IMAGE_REQUIRED": "Attach the medicine image as the 'image' form field.",
    "INVALID_IMAGE": "Upload a non-empty JPEG, PNG or WebP within the size limit.",
    "IMAGE_UPLOAD_FAILED": "The image could not be stored. Retry later.",
    "VALIDATION_ERROR": "Check the request body against the API schema.",
    "DATABASE_ERROR": "A database operation failed. Check server logs.",
    "UNAUTHORIZED": "Send X-Actor-Id and X-Actor-Name headers.",
    "ValueError": "A parameter value is invalid. Check the request.",
}

STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    401: "Identify the acting user.",
    404: "The requested resource was not found. Verify the ID.",
    409: "The request conflicts with current stock or catalog state.",
    500: "An internal error occurred. Check server logs.",
    502: "An external dependency failed. Retry later.",
}

HTTP_ERROR_CODES: dict[int, str] = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


def status_for_exception(exc: Exception) -> int:
    for exc_type, code in EXCEPTION_STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    *,
    detail: str | None = None,
    details: dict | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Render the standard error body."""
    body = ErrorResponse(
        error_code=error_code,
        message=message,
        hint=HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code, ""),
        detail=detail,
        details=details,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json"),
        headers=headers,
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Turns exceptions escaping the routes into error responses."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            return self._handle_exception(request, e)

    def _handle_exception(self, request: Request, exc: Exception) -> JSONResponse:
        status_code = status_for_exception(exc)

        if isinstance(exc, PharmaStockError):
            error_code, message, details = exc.code, exc.message, exc.details or None
        else:
            error_code, message, details = type(exc).__name__, str(exc), None

        server_side = status_code >= 500
        (logger.error if server_side else logger.warning)(
            "request_error",
            request_id=getattr(request.state, "request_id", None),
            status=status_code,
            error_code=error_code,
            error=message,
            exc_info=server_side,
        )

        return error_response(request, status_code, error_code, message, details=details)


def setup_exception_handlers(app: FastAPI) -> None:
    """Register handlers for schema failures and bare HTTP exceptions."""

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        problems = "; ".join(
            f"{' -> '.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        return error_response(
            request,
            status.HTTP_400_BAD_REQUEST,
            "VALIDATION_ERROR",
            "Request validation failed",
            detail=problems,
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return error_response(
            request,
            exc.status_code,
            HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR"),
            exc.detail or "An error occurred",
            headers=getattr(exc, "headers", None),
        )
