"""Activity repository: per-user event log with id cursors."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import MAX_ACTIVITY_PAGE_SIZE
from ..core.exceptions import StoreError
from ..db.models import Activity

# Cursor value meaning "no upper bound".
NO_CURSOR = -1


@runtime_checkable
class ActivityRepository(Protocol):
    async def by_user_id(self, user_id: int, before_id: int, limit: int) -> list[Activity]: ...
    async def append(self, user_id: int, name: str, data: dict[str, Any] | None = None) -> Activity: ...


class SQLAlchemyActivityRepository:
    def __init__(self, session: AsyncSession):
        self._session = session

    async def by_user_id(self, user_id: int, before_id: int, limit: int) -> list[Activity]:
        """Newest-first page of a user's activity with ``id < before_id``.

        A negative ``before_id`` starts from the newest entry. ``limit`` is
        capped at ``MAX_ACTIVITY_PAGE_SIZE``.
        """
        limit = min(limit, MAX_ACTIVITY_PAGE_SIZE)
        if limit <= 0:
            return []

        stmt = select(Activity).where(Activity.user_id == user_id)
        if before_id >= 0:
            stmt = stmt.where(Activity.id < before_id)
        stmt = stmt.order_by(Activity.id.desc()).limit(limit)

        try:
            result = await self._session.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as exc:
            raise StoreError("query activities by user id") from exc

    async def append(self, user_id: int, name: str, data: dict[str, Any] | None = None) -> Activity:
        activity = Activity(user_id=user_id, name=name, data=data)
        self._session.add(activity)
        await self._session.flush()
        return activity
