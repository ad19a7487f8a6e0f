"""
Error handling middleware.

Standardizes all API error responses to include:
- error_code: machine-readable identifier
- message: human-readable description
- hint: suggested recovery action
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from src.application.dto.responses import ErrorResponse
from src.config import get_logger, get_settings
from src.core.exceptions import (
    ComplianceViolationError,
    ConfigurationError,
    InsufficientStockError,
    MalformedBundleError,
    NotFoundError,
    RxDeskError,
    StorageError,
    ValidationError,
)

logger = get_logger(__name__)


# Map exceptions to HTTP status codes
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    ComplianceViolationError: status.HTTP_400_BAD_REQUEST,
    InsufficientStockError: status.HTTP_400_BAD_REQUEST,
    MalformedBundleError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

# Hint messages per error code
HINT_MAP: dict[str, str] = {
    "MEDICINE_NOT_FOUND": "Check the medicine ID and try GET /api/medicines to list medicines.",
    "BATCH_NOT_FOUND": "Check the batch ID and try GET /api/medicines/{id}/stock.",
    "PRESCRIPTION_NOT_FOUND": "Upload the prescription first via POST /api/prescriptions/upload.",
    "SALE_NOT_FOUND": "Check the sale ID and try GET /api/sales to list sales.",
    "EMPTY_SALE": "Add at least one item to the sale.",
    "BATCH_MISMATCH": "Pick a batch that belongs to the requested medicine.",
    "COMPLIANCE_VIOLATION": "Attach a verified, unexpired prescription or reduce the quantity.",
    "INSUFFICIENT_STOCK": "Reduce the quantity or choose another batch.",
    "MALFORMED_BUNDLE": "Send a FHIR R4 Bundle with Patient, Practitioner and MedicationRequest.",
    "VALIDATION_ERROR": "Check the request body against the API schema.",
    "DATABASE_ERROR": "A database operation failed. Check server logs.",
}

# Default hints by HTTP status code
STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    404: "The requested resource was not found. Verify the ID.",
    500: "An internal error occurred. Check server logs.",
}


def _get_hint(error_code: str, status_code: int) -> str:
    """Resolve hint from error code, falling back to status-based hint."""
    return HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code, "")


def _status_for(exc: Exception) -> int:
    for exc_type, code in EXCEPTION_STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def build_error_response(request: Request, exc: Exception) -> JSONResponse:
    """Convert an exception to a standardized JSON response."""
    status_code = _status_for(exc)

    if isinstance(exc, RxDeskError):
        error_code = exc.code
        details = exc.details
    else:
        error_code = "INTERNAL_ERROR"
        details = {}

    request_id = getattr(request.state, "request_id", None)
    log = logger.error if status_code >= 500 else logger.warning
    log(
        "request_error",
        request_id=request_id,
        path=request.url.path,
        error_type=error_code,
        error=str(exc),
        traceback=traceback.format_exc() if status_code >= 500 else None,
    )

    message = str(exc)
    if status_code >= 500 and get_settings().environment != "development":
        message = "Internal server error"
        details = {}

    error_response = ErrorResponse(
        error_code=error_code,
        message=message,
        hint=_get_hint(error_code, status_code),
        details=details,
        path=request.url.path,
    )

    return JSONResponse(
        status_code=status_code,
        content=error_response.model_dump(mode="json", by_alias=True),
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Converts exceptions that escape the route handlers to standardized
    JSON error responses.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Handle request with error catching."""
        try:
            return await call_next(request)

        except Exception as e:
            return build_error_response(request, e)


def setup_exception_handlers(app: FastAPI) -> None:
    """Set up FastAPI exception handlers."""
    from fastapi.exceptions import RequestValidationError
    from starlette.exceptions import HTTPException

    @app.exception_handler(RxDeskError)
    async def domain_exception_handler(request: Request, exc: RxDeskError) -> JSONResponse:
        """Handle domain errors raised by services and use cases."""
        return build_error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Handle Pydantic validation errors."""
        errors = []
        for error in exc.errors():
            loc = " -> ".join(str(part) for part in error["loc"])
            errors.append(f"{loc}: {error['msg']}")

        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse(
                error_code="VALIDATION_ERROR",
                message="Request validation failed",
                hint=HINT_MAP["VALIDATION_ERROR"],
                detail="; ".join(errors),
                details={"errors": errors},
                path=request.url.path,
            ).model_dump(mode="json", by_alias=True),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request,
        exc: HTTPException,
    ) -> JSONResponse:
        """Handle HTTP exceptions with standardized format."""
        error_code = "NOT_FOUND" if exc.status_code == 404 else "HTTP_ERROR"

        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error_code=error_code,
                message=str(exc.detail) if exc.detail else "An error occurred",
                hint=_get_hint(error_code, exc.status_code),
                path=request.url.path,
            ).model_dump(mode="json", by_alias=True),
        )
