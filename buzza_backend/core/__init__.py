"""Core module with logging, middleware, and exception handling."""

from buzza_backend.core.exceptions import (
    AuthenticationError,
    BadInputError,
    BuzzaError,
    ErrorKind,
    IntegrityViolationError,
    NotFoundError,
    ProgramNotFoundError,
    QueryTimeoutError,
    StoreError,
    setup_exception_handlers,
)
from buzza_backend.core.logging import get_logger, setup_logging
from buzza_backend.core.middleware import RequestContextMiddleware

__all__ = [
    "AuthenticationError",
    "BadInputError",
    "BuzzaError",
    "ErrorKind",
    "IntegrityViolationError",
    "NotFoundError",
    "ProgramNotFoundError",
    "QueryTimeoutError",
    "StoreError",
    "get_logger",
    "setup_logging",
    "RequestContextMiddleware",
    "setup_exception_handlers",
]
