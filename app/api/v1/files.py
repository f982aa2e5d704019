"""파일 라우터 — 지점별 다중 파일 업로드 및 메타데이터 조회/삭제.

File Router — Multi-file upload to object storage and file metadata
endpoints. Admin only.
"""

from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, Query, Request, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import page_params, require_admin
from app.database import get_db, transaction
from app.models.member import Member
from app.schemas.common import AffectedRowsResponse, PaginatedResponse
from app.schemas.file import FileResponse, FileUploadResult
from app.services.file_service import file_service
from app.utils.pagination import PageParams
from app.utils.response import ApiResponse, ok

router: APIRouter = APIRouter()


@router.post("/s3", response_model=ApiResponse[list[FileUploadResult]], status_code=201)
async def upload_files(
    request: Request,
    branch_id: Annotated[int, Form(ge=1)],
    files: Annotated[list[UploadFile], File()],
    db: Annotated[AsyncSession, Depends(get_db)],
    current_member: Annotated[Member, Depends(require_admin)],
) -> ApiResponse[list[FileUploadResult]]:
    """지점에 파일들을 업로드합니다 (multipart: branch_id + files).

    Upload one or more files for a branch. Each file reports its own
    result; failed uploads carry an empty url.
    """
    async with transaction(db):
        result: list[FileUploadResult] = await file_service.upload_files(db, branch_id, files)
    return ok(request, result, 201)


@router.get("", response_model=ApiResponse[PaginatedResponse[FileResponse]])
async def list_files(
    request: Request,
    branch: Annotated[int, Query(ge=1)],
    db: Annotated[AsyncSession, Depends(get_db)],
    params: Annotated[PageParams, Depends(page_params)],
    current_member: Annotated[Member, Depends(require_admin)],
) -> ApiResponse[PaginatedResponse[FileResponse]]:
    """지점의 파일 목록을 페이지 단위로 조회합니다."""
    result: PaginatedResponse = await file_service.list_files(db, branch, params)
    return ok(request, result)


@router.get("/{file_id}", response_model=ApiResponse[FileResponse])
async def get_file(
    request: Request,
    file_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_member: Annotated[Member, Depends(require_admin)],
) -> ApiResponse[FileResponse]:
    """파일 메타데이터를 조회합니다 (마지막 조회 일시 갱신)."""
    async with transaction(db):
        result: FileResponse = await file_service.get_file(db, file_id)
    return ok(request, result)


@router.delete("/{file_id}", response_model=ApiResponse[AffectedRowsResponse])
async def remove_file(
    request: Request,
    file_id: int,
    background_tasks: BackgroundTasks,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_member: Annotated[Member, Depends(require_admin)],
) -> ApiResponse[AffectedRowsResponse]:
    """파일을 소프트 삭제하고, 커밋 후 저장소 객체를 지웁니다."""
    async with transaction(db):
        result, key = await file_service.remove_file(db, file_id)
    background_tasks.add_task(file_service.delete_stored_object, key)
    return ok(request, result)
