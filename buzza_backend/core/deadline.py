"""Request-scoped deadline for store calls."""

from __future__ import annotations

import asyncio
from typing import Awaitable, TypeVar

from buzza_backend.core.exceptions import QueryTimeoutError

T = TypeVar("T")


async def with_deadline(awaitable: Awaitable[T], timeout_s: float, operation: str) -> T:
    """Await ``awaitable``, cancelling it once ``timeout_s`` elapses.

    Raises:
        QueryTimeoutError: the deadline passed before the store answered.
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout_s)
    except asyncio.TimeoutError as exc:
        raise QueryTimeoutError(
            f"{operation}: deadline of {timeout_s}s exceeded",
            details={"timeout_s": timeout_s},
        ) from exc
