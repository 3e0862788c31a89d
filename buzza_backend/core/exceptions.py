"""Error taxonomy and exception handlers for the FastAPI application.

Every error raised by the stores or the handlers is a ``BuzzaError`` tagged
with an ``ErrorKind``. The HTTP layer turns the kind into a status code through
``STATUS_BY_KIND``; kinds missing from the table and exceptions that are not
``BuzzaError`` at all are answered as internal errors.
"""

import enum
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from buzza_backend.core.logging import get_logger, request_context

logger = get_logger(__name__)


class ErrorKind(str, enum.Enum):
    NOT_FOUND = "not_found"
    BAD_INPUT = "bad_input"
    UNAUTHENTICATED = "unauthenticated"
    INTERNAL = "internal"


STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.BAD_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class BuzzaError(Exception):
    """Base exception for the Buzza backend."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class NotFoundError(BuzzaError):
    """Resource not found."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, message: str = "Not found"):
        super().__init__(message)


class ProgramNotFoundError(NotFoundError):
    """No current program record for the requested identity."""

    def __init__(self, message: str = "program not found"):
        super().__init__(message)


class BadInputError(BuzzaError):
    """Malformed or missing caller input."""

    kind = ErrorKind.BAD_INPUT


class AuthenticationError(BuzzaError):
    """Authentication failed."""

    kind = ErrorKind.UNAUTHENTICATED

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class StoreError(BuzzaError):
    """A store query failed; ``message`` names the operation."""

    kind = ErrorKind.INTERNAL


class QueryTimeoutError(StoreError):
    """A store query exceeded the request deadline."""


class IntegrityViolationError(BuzzaError):
    """Stored data breaks an invariant the queries rely on."""

    kind = ErrorKind.INTERNAL


def status_for(exc: BaseException) -> int:
    """Map an exception to the HTTP status code it is answered with."""
    if isinstance(exc, BuzzaError):
        return STATUS_BY_KIND.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _request_id(request: Request) -> Optional[str]:
    # the context var is already reset when the outermost error middleware runs
    request_id = getattr(request.state, "request_id", None)
    if request_id is None:
        request_id = request_context.get().get("request_id")
    return request_id


def _error_response(
    request: Request, status_code: int, message: str, headers: Optional[Dict[str, str]] = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "detail": message,
            "error": {
                "code": f"E{status_code}0",
                "message": message,
                "request_id": _request_id(request),
            },
        },
        headers=headers,
    )


def _internal_error_response(request: Request) -> JSONResponse:
    return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers with FastAPI app."""

    @app.exception_handler(BuzzaError)
    async def buzza_exception_handler(request: Request, exc: BuzzaError) -> JSONResponse:
        status_code = status_for(exc)
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error(
                f"{type(exc).__name__}: {exc.message}",
                data={
                    "kind": exc.kind.value,
                    "cause": repr(exc.__cause__) if exc.__cause__ else None,
                    "details": exc.details,
                },
                exc_info=exc,
            )
            return _internal_error_response(request)

        headers = None
        if exc.kind is ErrorKind.UNAUTHENTICATED:
            headers = {"WWW-Authenticate": "Bearer"}
        logger.info(
            f"Request rejected: {exc.message}",
            data={"kind": exc.kind.value, "status_code": status_code},
        )
        return _error_response(request, status_code, exc.message, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Missing or malformed query fields are caller input errors."""
        logger.warning("Validation error", data={"errors": exc.errors()})
        fields = ", ".join(
            ".".join(str(part) for part in err.get("loc", ())[1:]) or "request"
            for err in exc.errors()
        )
        return _error_response(request, status.HTTP_400_BAD_REQUEST, f"invalid or missing field: {fields}")

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return _error_response(request, exc.status_code, exc.detail, headers=exc.headers)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.error(
            f"Unhandled exception: {type(exc).__name__}: {exc}",
            data={
                "request_id": _request_id(request),
                "method": request.method,
                "path": request.url.path,
            },
            exc_info=exc,
        )
        return _internal_error_response(request)
