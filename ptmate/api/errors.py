"""
Translation of errors into HTTP responses.

Every error leaves the API as {"error": "<message>"}. Domain errors map to
a status by class; request validation failures become 400 with the first
problem spelled out; anything unexpected is logged and becomes a generic 500.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..core.errors import (
    ConflictError,
    NotFoundError,
    PTMateError,
    StorageUnavailableError,
    UnauthorizedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: dict[type[PTMateError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    UnauthorizedError: status.HTTP_401_UNAUTHORIZED,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    StorageUnavailableError: status.HTTP_502_BAD_GATEWAY,
}

INTERNAL_ERROR = "Internal server error. Please contact support if this persists."


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def status_for(exc: PTMateError) -> int:
    for error_type in type(exc).__mro__:
        if error_type in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[error_type]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def describe_validation_error(exc: RequestValidationError) -> str:
    """One readable line for the first failed field, e.g. 'client_id: Input should be a valid UUID'."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(
        str(part) for part in first.get("loc", ())
        if part not in ("body", "query", "path", "header")
    )
    message = first.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(PTMateError)
    async def domain_error_handler(request: Request, exc: PTMateError):
        code = status_for(exc)
        if code == status.HTTP_401_UNAUTHORIZED:
            logger.warning(
                "Unauthorized request",
                extra={"path": request.url.path, "error": exc.message}
            )
        return error_response(code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return error_response(status.HTTP_400_BAD_REQUEST, describe_validation_error(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Catch-all exception handler.

        The full error is logged server-side; the client only sees a
        generic message.
        """
        logger.error(
            "Unhandled exception",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": str(exc),
            },
            exc_info=exc,
        )
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR)
