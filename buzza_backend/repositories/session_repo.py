"""Session repository backing bearer-token authentication."""

from __future__ import annotations

import hashlib
import secrets
from datetime import UTC, timedelta
from typing import Protocol, runtime_checkable

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import StoreError
from ..db.models import Session, User, utcnow


def hash_token(token: str) -> str:
    """Hash a session token."""
    return hashlib.sha256(token.encode()).hexdigest()


@runtime_checkable
class SessionRepository(Protocol):
    async def user_for_token(self, token: str) -> User | None: ...
    async def create(self, user_id: int, ttl_seconds: int) -> str: ...


class SQLAlchemySessionRepository:
    def __init__(self, session: AsyncSession):
        self._session = session

    async def user_for_token(self, token: str) -> User | None:
        """Active user owning an unexpired session for ``token``, else None."""
        stmt = (
            select(User, Session.expires_at)
            .join(Session, Session.user_id == User.id)
            .where(Session.token_hash == hash_token(token), User.is_active.is_(True))
        )
        try:
            result = await self._session.execute(stmt)
            row = result.first()
        except SQLAlchemyError as exc:
            raise StoreError("query session by token") from exc

        if row is None:
            return None
        user, expires_at = row
        if expires_at.tzinfo is None:
            # SQLite hands back naive datetimes
            expires_at = expires_at.replace(tzinfo=UTC)
        if expires_at <= utcnow():
            return None
        return user

    async def create(self, user_id: int, ttl_seconds: int) -> str:
        """Create a session and return the raw token (only its hash is stored)."""
        token = secrets.token_urlsafe(32)
        self._session.add(
            Session(
                user_id=user_id,
                token_hash=hash_token(token),
                expires_at=utcnow() + timedelta(seconds=ttl_seconds),
            )
        )
        await self._session.flush()
        return token
