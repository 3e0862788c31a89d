"""Program download endpoints: latest file set per release line."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from ..config import get_settings
from ..core.deadline import with_deadline
from ..repositories.deps import get_program_repo
from ..repositories.program_repo import SQLAlchemyProgramRepository
from ..schemas import ProgramFile

router = APIRouter(prefix="/programs", tags=["programs"])

DEFAULT_FILE_TYPE = "installer"
DEFAULT_BRANCH = "stable"


async def _latest_files(
    programs: SQLAlchemyProgramRepository, file_type: str, os: str, arch: str, branch: str
) -> list[ProgramFile]:
    return await with_deadline(
        programs.latest_program_files(file_type, os, arch, branch),
        get_settings().query_timeout_seconds,
        "query latest program files",
    )


@router.get("/download", response_model=list[ProgramFile])
async def download_installer(
    os: str = Query(min_length=1),
    arch: str = Query(min_length=1),
    branch: str = Query(DEFAULT_BRANCH, min_length=1),
    programs: SQLAlchemyProgramRepository = Depends(get_program_repo),
):
    return await _latest_files(programs, DEFAULT_FILE_TYPE, os, arch, branch)


@router.get("/download/{file_type}", response_model=list[ProgramFile])
async def download(
    file_type: str,
    os: str = Query(min_length=1),
    arch: str = Query(min_length=1),
    branch: str = Query(DEFAULT_BRANCH, min_length=1),
    programs: SQLAlchemyProgramRepository = Depends(get_program_repo),
):
    return await _latest_files(programs, file_type, os, arch, branch)
