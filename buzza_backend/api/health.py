"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from ..core.logging import get_logger

router = APIRouter(tags=["health"])
logger = get_logger(__name__)


@router.get("/health")
async def health(request: Request):
    db_ok = False
    try:
        session_factory = request.app.state.session_factory
        async with session_factory() as session:
            await session.execute(text("SELECT 1"))
            db_ok = True
    except (SQLAlchemyError, OSError) as exc:
        logger.warning("Database health check failed", data={"error": str(exc)})

    status = "ok" if db_ok else "degraded"
    return {"status": status, "db_ok": db_ok}
