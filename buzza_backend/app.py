"""
Buzza Backend Application.

FastAPI application serving the latest program files per release line and
the per-user activity log.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from buzza_backend.api.router import router as api_router
from buzza_backend.config import get_settings
from buzza_backend.core import (
    RequestContextMiddleware,
    get_logger,
    setup_exception_handlers,
    setup_logging,
)
from buzza_backend.db import make_engine, make_session_factory, prepare_db

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()

    setup_logging(
        level=settings.log_level,
        json_output=not settings.debug,
        log_file=settings.log_file or None,
    )
    logger.info(
        "Starting Buzza backend",
        data={
            "host": settings.host,
            "port": settings.port,
            "environment": settings.environment,
            "debug": settings.debug,
        },
    )

    # Engine + session factory unless provided (useful in tests)
    engine_created = False
    if not hasattr(app.state, "session_factory"):
        engine = make_engine(settings.database_url, echo=settings.database_echo)
        app.state.engine = engine
        app.state.session_factory = make_session_factory(engine)
        engine_created = True

        if settings.auto_create_tables:
            await prepare_db(engine)
            logger.info("Database tables ensured")

    yield

    logger.info("Shutting down Buzza backend")
    if engine_created:
        await app.state.engine.dispose()
        del app.state.session_factory


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Buzza",
        description="Latest program files and user activity for BuzkaaClicker",
        version="0.1.0",
        lifespan=lifespan,
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None,
        openapi_url=None if settings.is_production else "/openapi.json",
    )

    # Setup exception handlers (must be before middleware)
    setup_exception_handlers(app)

    # Request context (inject request ID, log requests)
    app.add_middleware(RequestContextMiddleware)

    origins = settings.cors_origins_list
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["GET", "OPTIONS"],
            allow_headers=["Authorization", "Content-Type"],
            expose_headers=["X-Request-ID"],
        )

    app.include_router(api_router)
    return app
