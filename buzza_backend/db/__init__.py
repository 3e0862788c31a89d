"""Database module for the Buzza backend."""

from buzza_backend.db.models import Activity, Base, Program, Session, User
from buzza_backend.db.session import make_engine, make_session_factory, prepare_db

__all__ = [
    "Base",
    "make_engine",
    "make_session_factory",
    "prepare_db",
    "User",
    "Session",
    "Program",
    "Activity",
]
