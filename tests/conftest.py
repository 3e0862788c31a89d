"""Test fixtures: async SQLite in-memory database + ASGI client."""

from __future__ import annotations

import os

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient


def pytest_configure(config):
    """Point settings at the test environment before anything reads them."""
    os.environ["ENVIRONMENT"] = "test"
    os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
    os.environ.pop("QUERY_TIMEOUT_SECONDS", None)
    os.environ.pop("ACTIVITY_PAGE_SIZE", None)


@pytest.fixture(autouse=True)
def _fresh_settings():
    from buzza_backend.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest_asyncio.fixture
async def engine():
    """Create an async in-memory SQLite engine for tests."""
    from buzza_backend.db import make_engine, prepare_db

    eng = make_engine("sqlite+aiosqlite://")
    await prepare_db(eng)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    """Provide an async session factory."""
    from buzza_backend.db import make_session_factory

    return make_session_factory(engine)


@pytest_asyncio.fixture
async def session(session_factory):
    """Provide a single async session for test use."""
    async with session_factory() as sess:
        async with sess.begin():
            yield sess


@pytest.fixture
def app(session_factory):
    from buzza_backend.app import create_app

    application = create_app()
    application.state.session_factory = session_factory
    return application


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
