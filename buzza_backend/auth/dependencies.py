"""FastAPI dependencies for authentication.

Handlers that need a user depend on ``get_current_user``. Deployments that
authenticate elsewhere (a gateway, another identity service) replace it with
``app.dependency_overrides[get_current_user]``.
"""

from typing import Optional

from fastapi import Depends, Request

from buzza_backend.config import get_settings
from buzza_backend.core.deadline import with_deadline
from buzza_backend.core.exceptions import AuthenticationError
from buzza_backend.core.logging import get_logger
from buzza_backend.db.models import User
from buzza_backend.repositories.deps import get_session_repo
from buzza_backend.repositories.session_repo import SQLAlchemySessionRepository

logger = get_logger(__name__)


def _token_from_request(request: Request) -> Optional[str]:
    """Bearer token from the Authorization header, falling back to the session cookie."""
    authorization = request.headers.get("authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return request.cookies.get(get_settings().session_cookie_name) or None


async def get_current_user(
    request: Request,
    sessions: SQLAlchemySessionRepository = Depends(get_session_repo),
) -> User:
    """Get the current authenticated user.

    Raises:
        AuthenticationError: no token, or the token maps to no live session.
    """
    token = _token_from_request(request)
    if not token:
        raise AuthenticationError()

    user = await with_deadline(
        sessions.user_for_token(token),
        get_settings().query_timeout_seconds,
        "query session by token",
    )
    if user is None:
        logger.info("Rejected session token", data={"path": request.url.path})
        raise AuthenticationError("Session expired or invalid")
    return user
