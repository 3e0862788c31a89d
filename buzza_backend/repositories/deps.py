"""FastAPI dependency factories for repository injection."""

from __future__ import annotations

from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from .activity_repo import SQLAlchemyActivityRepository
from .program_repo import SQLAlchemyProgramRepository
from .session_repo import SQLAlchemySessionRepository


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async session from the app's session factory."""
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        async with session.begin():
            yield session


async def get_program_repo(session: AsyncSession = Depends(get_session)) -> SQLAlchemyProgramRepository:
    return SQLAlchemyProgramRepository(session)


async def get_activity_repo(session: AsyncSession = Depends(get_session)) -> SQLAlchemyActivityRepository:
    return SQLAlchemyActivityRepository(session)


async def get_session_repo(session: AsyncSession = Depends(get_session)) -> SQLAlchemySessionRepository:
    return SQLAlchemySessionRepository(session)
