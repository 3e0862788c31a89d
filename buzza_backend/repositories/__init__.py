"""Repository layer: Protocol interfaces + SQLAlchemy implementations."""

from .activity_repo import NO_CURSOR, ActivityRepository, SQLAlchemyActivityRepository
from .program_repo import ProgramRepository, SQLAlchemyProgramRepository
from .session_repo import SessionRepository, SQLAlchemySessionRepository, hash_token

__all__ = [
    "NO_CURSOR",
    "ActivityRepository", "SQLAlchemyActivityRepository",
    "ProgramRepository", "SQLAlchemyProgramRepository",
    "SessionRepository", "SQLAlchemySessionRepository",
    "hash_token",
]
