"""SQLAlchemy ORM models, dual-dialect (Postgres/SQLite)."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import JSON, BigInteger, Boolean, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.dialects import postgresql
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


# BIGINT on Postgres; SQLite only autoincrements a plain INTEGER primary key.
BigIntId = BigInteger().with_variant(Integer, "sqlite")
# JSONB on Postgres, plain JSON elsewhere.
JSONDocument = JSON().with_variant(postgresql.JSONB(), "postgresql")


def utcnow() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    pass


# ---------------------------------------------------------------------------
# users
# ---------------------------------------------------------------------------
class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"<User {self.username}>"


# ---------------------------------------------------------------------------
# sessions
# ---------------------------------------------------------------------------
class Session(Base):
    """Opaque bearer session; only the sha256 of the token is stored."""

    __tablename__ = "sessions"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        BigIntId, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    token_hash: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)


# ---------------------------------------------------------------------------
# program
# ---------------------------------------------------------------------------
class Program(Base):
    """One published build of a release line.

    Rows sharing (type, os, arch, branch) form the history of that line; the
    current build is the one with the highest id whose ``destroyed_at`` is
    null. ``files`` holds the ordered ``{path, download_url, hash}`` entries.
    """

    __tablename__ = "program"
    __table_args__ = (
        Index("ix_program_identity_id", "type", "os", "arch", "branch", "id"),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    destroyed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    type: Mapped[str] = mapped_column(String(30), nullable=False)
    os: Mapped[str] = mapped_column(String(30), nullable=False)
    arch: Mapped[str] = mapped_column(String(10), nullable=False)
    branch: Mapped[str] = mapped_column(String(255), nullable=False)
    files: Mapped[list[dict[str, Any]]] = mapped_column(JSONDocument, nullable=False, default=list)

    def __repr__(self) -> str:
        return f"<Program {self.id} {self.type}/{self.os}/{self.arch}/{self.branch}>"


# ---------------------------------------------------------------------------
# activity
# ---------------------------------------------------------------------------
class Activity(Base):
    __tablename__ = "activity"
    __table_args__ = (
        Index("ix_activity_user_id_id", "user_id", "id"),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        BigIntId, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    name: Mapped[str] = mapped_column(String(64), nullable=False)
    data: Mapped[dict[str, Any] | None] = mapped_column(JSONDocument, nullable=True)

    def __repr__(self) -> str:
        return f"<Activity {self.id} user={self.user_id} {self.name}>"
