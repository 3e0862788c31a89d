"""API router: aggregates all endpoint modules."""

from __future__ import annotations

from fastapi import APIRouter

from .activities import router as activities_router
from .health import router as health_router
from .programs import router as programs_router

router = APIRouter()
router.include_router(health_router)
router.include_router(programs_router)
router.include_router(activities_router)
