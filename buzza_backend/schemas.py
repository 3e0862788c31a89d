"""Pydantic models shared by the repositories and the HTTP layer."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ProgramFile(BaseModel):
    """Single program file, e.g. installer, config.yml, buzkaaclickeragent.dll."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    # Relative file path in the install directory.
    path: str = Field(min_length=1)
    download_url: str = Field(min_length=1)
    # sha256 hex digest of the file.
    hash: str = Field(min_length=1)


class ActivityOut(BaseModel):
    """One activity log entry as served to its owner."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    created_at: int = Field(alias="createdAt", description="Unix epoch seconds")
    name: str
    data: dict[str, Any] | None = None

    @classmethod
    def from_row(cls, row: Any) -> "ActivityOut":
        return cls(
            id=row.id,
            created_at=epoch_seconds(row.created_at),
            name=row.name,
            data=row.data or None,
        )


def epoch_seconds(value: datetime) -> int:
    """Unix seconds for ``value``; naive datetimes (SQLite) are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return int(value.timestamp())
