"""
Exception handlers for the FastAPI application.

Every failure leaves the service in the same envelope as a success:
{"success": false, "data": null, "message": "...", "error": "<code>"}
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from .schemas.common import failure
from .services.errors import (
    AppointmentNotFound,
    InvalidSchedule,
    InvalidState,
    SchedulingError,
    SlotConflict,
)

logger = logging.getLogger(__name__)

UNPROCESSABLE_ENTITY = 422

STATUS_BY_ERROR: dict[type[SchedulingError], int] = {
    InvalidSchedule: status.HTTP_400_BAD_REQUEST,
    SlotConflict: status.HTTP_409_CONFLICT,
    InvalidState: status.HTTP_400_BAD_REQUEST,
    AppointmentNotFound: status.HTTP_404_NOT_FOUND,
}


def status_for(exc: SchedulingError) -> int:
    for cls in type(exc).__mro__:
        if cls in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[cls]
    return status.HTTP_400_BAD_REQUEST


async def scheduling_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Map the scheduling error taxonomy 1:1 to HTTP status codes."""
    if not isinstance(exc, SchedulingError):
        return await global_exception_handler(request, exc)
    status_code = status_for(exc)
    logger.warning(f"{request.method} {request.url.path} → {status_code} {exc.code}: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content=failure(exc.message, exc.code),
    )


async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle HTTPException with the envelope format."""
    http_exc = exc if isinstance(exc, HTTPException) else HTTPException(status_code=500, detail=str(exc))
    return JSONResponse(
        status_code=http_exc.status_code,
        content=failure(str(http_exc.detail), "http_error"),
        headers=http_exc.headers,
    )


async def validation_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle request validation errors with a field list."""
    errors = []
    if isinstance(exc, RequestValidationError):
        for error in exc.errors():
            errors.append(
                {
                    "field": ".".join(str(loc) for loc in error["loc"]),
                    "message": error["msg"],
                    "type": error["type"],
                }
            )

    logger.warning(f"Validation error on {request.url.path}: {errors}")

    return JSONResponse(
        status_code=UNPROCESSABLE_ENTITY,
        content=failure("Validation error", "validation_error", details=errors),
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle all unhandled exceptions (store connectivity, timeouts, bugs).

    Logs the full exception with traceback and returns a safe error response.
    """
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}: {exc!s}",
        exc_info=True,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=failure("Internal server error", "internal_error"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SchedulingError, scheduling_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
