"""Program repository: latest file set per release line."""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from pydantic import ValidationError
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import IntegrityViolationError, ProgramNotFoundError, StoreError
from ..core.logging import get_logger
from ..db.models import Program, utcnow
from ..schemas import ProgramFile

logger = get_logger(__name__)


@runtime_checkable
class ProgramRepository(Protocol):
    async def latest_program_files(
        self, file_type: str, os: str, arch: str, branch: str
    ) -> list[ProgramFile]: ...
    async def create(
        self, file_type: str, os: str, arch: str, branch: str, files: Sequence[ProgramFile]
    ) -> Program: ...
    async def soft_delete(self, program_id: int) -> bool: ...


class SQLAlchemyProgramRepository:
    def __init__(self, session: AsyncSession):
        self._session = session

    async def latest_program_files(
        self, file_type: str, os: str, arch: str, branch: str
    ) -> list[ProgramFile]:
        """Return the files of the newest surviving build for the identity.

        Candidates are ranked with ``row_number() over (partition by type, os,
        arch, branch order by id desc)`` and only rank 1 is kept, so at most
        one row can come back per identity.

        Raises:
            ProgramNotFoundError: no non-deleted row matches.
            IntegrityViolationError: more than one rank-1 row came back.
            StoreError: the query itself failed.
        """
        row_number = (
            func.row_number()
            .over(
                partition_by=(Program.type, Program.os, Program.arch, Program.branch),
                order_by=Program.id.desc(),
            )
            .label("row_number")
        )
        ranked = (
            select(Program.id, Program.files, row_number)
            .where(
                Program.type == file_type,
                Program.os == os,
                Program.arch == arch,
                Program.branch == branch,
                Program.destroyed_at.is_(None),
            )
            .subquery("t")
        )
        stmt = select(ranked.c.id, ranked.c.files).where(ranked.c.row_number == 1)

        try:
            result = await self._session.execute(stmt)
            rows = result.all()
        except SQLAlchemyError as exc:
            raise StoreError("query latest program files") from exc

        if len(rows) == 0:
            raise ProgramNotFoundError()
        if len(rows) > 1:
            raise IntegrityViolationError(
                f"too many results ({len(rows)})",
                details={
                    "identity": [file_type, os, arch, branch],
                    "program_ids": [row.id for row in rows],
                },
            )

        program_id, files = rows[0]
        logger.debug(
            "Resolved latest program",
            data={"program_id": program_id, "identity": [file_type, os, arch, branch]},
        )
        try:
            return [ProgramFile.model_validate(entry) for entry in files or []]
        except ValidationError as exc:
            raise IntegrityViolationError(
                "malformed program files", details={"program_id": program_id}
            ) from exc

    async def create(
        self, file_type: str, os: str, arch: str, branch: str, files: Sequence[ProgramFile]
    ) -> Program:
        program = Program(
            type=file_type,
            os=os,
            arch=arch,
            branch=branch,
            files=[entry.model_dump() for entry in files],
        )
        self._session.add(program)
        await self._session.flush()
        return program

    async def soft_delete(self, program_id: int) -> bool:
        """Retire a build by stamping ``destroyed_at``; history is kept."""
        program = await self._session.get(Program, program_id)
        if not program or program.destroyed_at is not None:
            return False
        program.destroyed_at = utcnow()
        await self._session.flush()
        return True
