"""Exception handlers mapping the shared error taxonomy to HTTP responses.

Every domain error renders as ``{"code": ..., "detail": ...}`` with a
status chosen by its kind; validation errors add the offending ``field``.
Malformed request bodies use the same shape. Anything else is masked as a
500 ``internal_error`` so store and identity provider details never reach
clients.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import cast

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.responses import Response

from infrastructure.observability import DefaultRequestErrorProbe, RequestErrorProbe
from shared_kernel.exceptions import (
    ConcurrentModificationError,
    DomainError,
    InvalidTransitionError,
    NotAuthenticatedError,
    NotFoundError,
    PermissionDeniedError,
    UnknownEquipmentError,
    ValidationError,
)

ExceptionHandler = Callable[[Request, Exception], Awaitable[Response]]

STATUS_BY_ERROR: dict[type[DomainError], int] = {
    NotAuthenticatedError: status.HTTP_401_UNAUTHORIZED,
    PermissionDeniedError: status.HTTP_403_FORBIDDEN,
    ValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    UnknownEquipmentError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    InvalidTransitionError: status.HTTP_409_CONFLICT,
    ConcurrentModificationError: status.HTTP_409_CONFLICT,
    NotFoundError: status.HTTP_404_NOT_FOUND,
}


def status_for(error: DomainError) -> int:
    """Pick the HTTP status for a domain error, walking its class hierarchy."""
    for cls in type(error).__mro__:
        if cls in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[cls]
    return status.HTTP_400_BAD_REQUEST


def register_error_handlers(
    app: FastAPI, probe: RequestErrorProbe | None = None
) -> None:
    """Register the domain and fallback exception handlers on the app.

    Args:
        app: FastAPI application instance
        probe: Optional observability probe
    """
    error_probe = probe or DefaultRequestErrorProbe()

    async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
        status_code = status_for(exc)
        body: dict[str, str] = {"code": exc.code, "detail": str(exc)}
        if isinstance(exc, ValidationError):
            body["field"] = exc.field

        headers = None
        if isinstance(exc, NotAuthenticatedError):
            headers = {"WWW-Authenticate": "Bearer"}

        error_probe.domain_error_returned(
            code=exc.code,
            status_code=status_code,
            path=request.url.path,
            message=str(exc),
        )
        return JSONResponse(status_code=status_code, content=body, headers=headers)

    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = exc.errors()
        first = errors[0] if errors else {}
        location = [str(part) for part in first.get("loc", ()) if part != "body"]
        field = location[-1] if location else "request"
        message = first.get("msg", "Invalid request")

        error_probe.domain_error_returned(
            code=ValidationError.code,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            path=request.url.path,
            message=message,
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"code": ValidationError.code, "detail": message, "field": field},
        )

    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        error_probe.unhandled_error(path=request.url.path, error=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"code": "internal_error", "detail": "Internal server error"},
        )

    app.add_exception_handler(DomainError, cast(ExceptionHandler, domain_error_handler))
    app.add_exception_handler(
        RequestValidationError, cast(ExceptionHandler, request_validation_handler)
    )
    app.add_exception_handler(
        Exception, cast(ExceptionHandler, unhandled_error_handler)
    )
