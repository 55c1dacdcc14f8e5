"""Exception handlers returning structured JSON errors.

Every error body carries the request's correlation id so a failed autosave
seen in the editor can be matched with the server logs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import structlog
from litestar import Response
from litestar.status_codes import (
    HTTP_404_NOT_FOUND,
    HTTP_422_UNPROCESSABLE_ENTITY,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_502_BAD_GATEWAY,
)

if TYPE_CHECKING:
    from litestar import Request
    from litestar.exceptions import HTTPException, ValidationException

    from sitebuildr_py.exceptions import PersistenceError, ValidationError

logger = structlog.get_logger(__name__)

_STATUS_CODES = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    413: "payload_too_large",
    422: "validation_error",
    429: "rate_limited",
    500: "internal_error",
    503: "service_unavailable",
}


@dataclass
class ErrorDetail:
    """Details about a specific error."""

    field: str | None = None
    message: str = ""
    code: str = "error"


@dataclass
class ErrorResponse:
    """Structured error response format."""

    status: str = "error"
    message: str = ""
    code: str = "internal_error"
    correlation_id: str | None = None
    details: list[ErrorDetail] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON response."""
        result: dict[str, Any] = {"status": self.status, "message": self.message, "code": self.code}
        if self.correlation_id:
            result["correlation_id"] = self.correlation_id
        if self.details:
            result["details"] = [{"field": d.field, "message": d.message, "code": d.code} for d in self.details]
        return result


def get_correlation_id(request: Request) -> str | None:
    """Correlation id set by the middleware, or the one the client sent."""
    correlation_id = request.scope.get("state", {}).get("correlation_id")
    if correlation_id:
        return correlation_id
    return request.headers.get("X-Correlation-ID") or request.headers.get("X-Request-ID")


def _respond(request: Request, status_code: int, body: ErrorResponse) -> Response[dict[str, Any]]:
    body.correlation_id = get_correlation_id(request)
    return Response(content=body.to_dict(), status_code=status_code, media_type="application/json")


def request_validation_handler(request: Request, exc: ValidationException) -> Response[dict[str, Any]]:
    """Handle request parsing errors raised by Litestar."""
    details: list[ErrorDetail] = []
    for error in exc.extra or []:
        if isinstance(error, dict):
            details.append(
                ErrorDetail(
                    field=error.get("key") or None,
                    message=str(error.get("message", error)),
                    code="validation_error",
                ),
            )
        else:
            details.append(ErrorDetail(message=str(error), code="validation_error"))
    if not details:
        details.append(ErrorDetail(message=str(exc.detail), code="validation_error"))

    logger.warning("Request validation failed", path=request.url.path, error_count=len(details))
    return _respond(
        request,
        HTTP_422_UNPROCESSABLE_ENTITY,
        ErrorResponse(message="Validation failed", code="validation_error", details=details),
    )


def document_validation_handler(request: Request, exc: ValidationError) -> Response[dict[str, Any]]:
    """Handle malformed documents and edits."""
    logger.warning("Invalid document", path=request.url.path, field=exc.field, error=str(exc))
    return _respond(
        request,
        HTTP_422_UNPROCESSABLE_ENTITY,
        ErrorResponse(
            message="Validation failed",
            code="validation_error",
            details=[ErrorDetail(field=exc.field, message=str(exc), code="invalid_document")],
        ),
    )


def not_found_handler(request: Request, exc: Exception) -> Response[dict[str, Any]]:
    """Handle ``ElementNotFoundError`` and ``DocumentNotFoundError``."""
    if hasattr(exc, "website_id"):
        field_name, code = "website_id", "document_not_found"
    else:
        field_name, code = "element_id", "element_not_found"
    logger.warning("Resource not found", path=request.url.path, code=code)
    return _respond(
        request,
        HTTP_404_NOT_FOUND,
        ErrorResponse(
            message=str(exc),
            code=code,
            details=[ErrorDetail(field=field_name, message=str(exc), code="not_found")],
        ),
    )


def persistence_error_handler(request: Request, exc: PersistenceError) -> Response[dict[str, Any]]:
    """Handle failures of the backing document store."""
    logger.error("Document store failed", path=request.url.path, error=str(exc), upstream_status=exc.status_code)
    return _respond(
        request,
        HTTP_502_BAD_GATEWAY,
        ErrorResponse(message="The document store is unavailable. Please try again.", code="persistence_error"),
    )


def http_exception_handler(request: Request, exc: HTTPException) -> Response[dict[str, Any]]:
    """Handle HTTP exceptions raised by handlers or the router."""
    code = _STATUS_CODES.get(exc.status_code, "error")
    log = logger.warning if exc.status_code < HTTP_500_INTERNAL_SERVER_ERROR else logger.error
    log("HTTP exception", path=request.url.path, status_code=exc.status_code, error_code=code)
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return _respond(request, exc.status_code, ErrorResponse(message=message, code=code))


def generic_exception_handler(request: Request, exc: Exception) -> Response[dict[str, Any]]:
    """Handle unexpected exceptions.

    Logs the full exception but returns a safe message to the client.
    """
    logger.exception("Unhandled exception", path=request.url.path, method=request.method, exc_info=exc)
    return _respond(
        request,
        HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorResponse(message="An unexpected error occurred. Please try again later.", code="internal_error"),
    )


def get_exception_handlers() -> dict:
    """Exception handlers for the content service.

    Note:
        Uses deferred imports to avoid circular dependencies.
    """
    from litestar.exceptions import HTTPException, ValidationException

    from sitebuildr_py.exceptions import (
        DocumentNotFoundError,
        ElementNotFoundError,
        PersistenceError,
        ValidationError,
    )

    return {
        ValidationException: request_validation_handler,
        ValidationError: document_validation_handler,
        DocumentNotFoundError: not_found_handler,
        ElementNotFoundError: not_found_handler,
        PersistenceError: persistence_error_handler,
        HTTPException: http_exception_handler,
        Exception: generic_exception_handler,
    }
