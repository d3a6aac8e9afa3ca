"""
JSON error envelope for the Resource Hub API.

Every failure leaving the app has the shape::

    {"error": {"status_code", "message", "type", "error_code", "details"?, "path"}}

Renderers swallow lookups that miss, so in practice this envelope is seen on
the metadata export, unknown block kinds and request validation.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from resource_hub.exceptions import ErrorCode, HubError

logger = logging.getLogger(__name__)

# status -> (reason, error code used for bare HTTP exceptions)
_STATUS_TABLE: dict[int, tuple[str, ErrorCode]] = {
    400: ("Bad Request", ErrorCode.VALIDATION_FAILED),
    404: ("Not Found", ErrorCode.RESOURCE_NOT_FOUND),
    405: ("Method Not Allowed", ErrorCode.UNKNOWN_ERROR),
    422: ("Validation Error", ErrorCode.VALIDATION_FAILED),
    500: ("Internal Server Error", ErrorCode.INTERNAL_ERROR),
    503: ("Service Unavailable", ErrorCode.SERVICE_UNAVAILABLE),
}


def get_error_type(status_code: int) -> str:
    entry = _STATUS_TABLE.get(status_code)
    return entry[0] if entry else "Error"


def create_error_response(
    status_code: int,
    message: str,
    error_code: str | ErrorCode | None = None,
    details: dict[str, Any] | None = None,
    path: str | None = None,
) -> JSONResponse:
    """Build the envelope; empty ``details`` and ``path`` are left out."""
    body: dict[str, Any] = {"status_code": status_code, "message": message, "type": get_error_type(status_code)}
    if error_code:
        body["error_code"] = error_code.value if isinstance(error_code, ErrorCode) else error_code
    if details:
        body["details"] = details
    if path:
        body["path"] = path
    return JSONResponse(status_code=status_code, content={"error": body})


def _http_error_code(status_code: int) -> ErrorCode:
    entry = _STATUS_TABLE.get(status_code)
    return entry[1] if entry else ErrorCode.UNKNOWN_ERROR


def _flatten_validation_errors(exc: RequestValidationError | PydanticValidationError) -> list[dict[str, str]]:
    flattened = []
    for error in exc.errors():
        location = [str(part) for part in error["loc"] if part != "body"]
        flattened.append({"field": ".".join(location), "message": error["msg"], "type": error["type"]})
    return flattened


# ── Handlers ──────────────────────────────────────────────────────────────


async def hub_exception_handler(request: Request, exc: HubError) -> JSONResponse:
    logger.warning(
        "%s on %s: %s",
        exc.error_code.value,
        request.url.path,
        exc.message,
        extra={"status_code": exc.status_code, "path": request.url.path},
    )
    return create_error_response(exc.status_code, exc.message, exc.error_code, exc.details or None, request.url.path)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.warning(
        "HTTP %s on %s: %s",
        exc.status_code,
        request.url.path,
        exc.detail,
        extra={"status_code": exc.status_code, "path": request.url.path},
    )
    return create_error_response(
        exc.status_code, str(exc.detail), _http_error_code(exc.status_code), path=request.url.path
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError | PydanticValidationError
) -> JSONResponse:
    errors = _flatten_validation_errors(exc)
    logger.warning("Rejected %d invalid field(s) on %s", len(errors), request.url.path)
    return create_error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "Validation error",
        ErrorCode.VALIDATION_FAILED,
        {"validation_errors": errors},
        request.url.path,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log the traceback and answer with a generic 500."""
    logger.error(
        "Unhandled %s during %s %s",
        type(exc).__name__,
        request.method,
        request.url.path,
        exc_info=exc,
        extra={"path": request.url.path, "method": request.method},
    )
    return create_error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An unexpected error occurred. Please try again later.",
        ErrorCode.INTERNAL_ERROR,
        path=request.url.path,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(HubError, hub_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    for validation_error in (RequestValidationError, PydanticValidationError):
        app.add_exception_handler(validation_error, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
