"""지점 라우터 — 지점 CRUD, 소프트 삭제/복구, 권한 기준 목록.

Branch Router — Branch administration endpoints. Admin only.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin
from app.database import get_db, transaction
from app.models.member import Member
from app.schemas.branch import (
    BranchCreate,
    BranchResponse,
    BranchUpdate,
    MemberBranchRequest,
    MemberBranchResponse,
)
from app.schemas.common import AffectedRowsResponse
from app.services.branch_service import branch_service
from app.utils.response import ApiResponse, ok

router: APIRouter = APIRouter()


@router.post("", response_model=ApiResponse[BranchResponse], status_code=201)
async def create_branch(
    request: Request,
    data: BranchCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_member: Annotated[Member, Depends(require_admin)],
) -> ApiResponse[BranchResponse]:
    """새 지점을 생성합니다.

    Create a new branch.
    """
    async with transaction(db):
        result: BranchResponse = await branch_service.create_branch(db, data)
    return ok(request, result, 201)


@router.get("", response_model=ApiResponse[list[BranchResponse]])
async def list_branches(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_member: Annotated[Member, Depends(require_admin)],
) -> ApiResponse[list[BranchResponse]]:
    """활성 지점 목록 (seq 오름차순)."""
    result: list[BranchResponse] = await branch_service.list_branches(db)
    return ok(request, result)


@router.get("/deleted", response_model=ApiResponse[list[BranchResponse]])
async def list_deleted_branches(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_member: Annotated[Member, Depends(require_admin)],
) -> ApiResponse[list[BranchResponse]]:
    """삭제된 지점 목록 (seq 오름차순)."""
    result: list[BranchResponse] = await branch_service.list_branches(db, deleted=True)
    return ok(request, result)


@router.post("/member", response_model=ApiResponse[list[MemberBranchResponse]])
async def list_member_branches(
    request: Request,
    data: MemberBranchRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_member: Annotated[Member, Depends(require_admin)],
) -> ApiResponse[list[MemberBranchResponse]]:
    """멤버가 권한을 가진 지점 목록을 조회합니다.

    List the live branches the member holds at least one grant in.
    """
    result: list[MemberBranchResponse] = await branch_service.list_member_branches(db, data.member_id)
    return ok(request, result)


@router.patch("/{branch_id}", response_model=ApiResponse[AffectedRowsResponse])
async def update_branch(
    request: Request,
    branch_id: int,
    data: BranchUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_member: Annotated[Member, Depends(require_admin)],
) -> ApiResponse[AffectedRowsResponse]:
    """지점 정보를 수정합니다."""
    async with transaction(db):
        result: AffectedRowsResponse = await branch_service.update_branch(db, branch_id, data)
    return ok(request, result)


@router.delete("/{branch_id}", response_model=ApiResponse[AffectedRowsResponse])
async def remove_branch(
    request: Request,
    branch_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_member: Annotated[Member, Depends(require_admin)],
) -> ApiResponse[AffectedRowsResponse]:
    """지점을 소프트 삭제합니다."""
    async with transaction(db):
        result: AffectedRowsResponse = await branch_service.remove_branch(db, branch_id)
    return ok(request, result)


@router.patch("/{branch_id}/restore", response_model=ApiResponse[AffectedRowsResponse])
async def restore_branch(
    request: Request,
    branch_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_member: Annotated[Member, Depends(require_admin)],
) -> ApiResponse[AffectedRowsResponse]:
    """소프트 삭제된 지점을 복구합니다."""
    async with transaction(db):
        result: AffectedRowsResponse = await branch_service.restore_branch(db, branch_id)
    return ok(request, result)
