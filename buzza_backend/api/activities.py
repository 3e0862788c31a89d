"""Activity log endpoint for the authenticated user."""

from __future__ import annotations

import re

from fastapi import APIRouter, Depends

from ..auth.dependencies import get_current_user
from ..config import get_settings
from ..core.deadline import with_deadline
from ..core.exceptions import BadInputError
from ..db.models import User
from ..repositories.activity_repo import NO_CURSOR, SQLAlchemyActivityRepository
from ..repositories.deps import get_activity_repo
from ..schemas import ActivityOut

router = APIRouter(prefix="/activities", tags=["activities"])

_CURSOR_RE = re.compile(r"[-+]?[0-9]+")

# ids are signed 64-bit integers
_CURSOR_MIN = -(2**63)
_CURSOR_MAX = 2**63 - 1


def parse_before_id(raw: str | None) -> int:
    """Parse the ``before`` cursor; absent or empty means no upper bound."""
    if raw is None or raw == "":
        return NO_CURSOR
    if not _CURSOR_RE.fullmatch(raw):
        raise BadInputError("invalid before id")
    before_id = int(raw)
    if not _CURSOR_MIN <= before_id <= _CURSOR_MAX:
        raise BadInputError("invalid before id")
    return before_id


@router.get("", response_model=list[ActivityOut], response_model_exclude_none=True)
async def last_activity(
    before: str | None = None,
    current_user: User = Depends(get_current_user),
    activities: SQLAlchemyActivityRepository = Depends(get_activity_repo),
):
    settings = get_settings()
    before_id = parse_before_id(before)
    rows = await with_deadline(
        activities.by_user_id(current_user.id, before_id, settings.activity_page_size),
        settings.query_timeout_seconds,
        "query activities by user id",
    )
    return [ActivityOut.from_row(row) for row in rows]
