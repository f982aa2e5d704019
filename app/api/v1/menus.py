"""메뉴 라우터 — 메뉴 CRUD, 소프트 삭제/복구, 권한 기준 목록.

Menu Router — Menu administration endpoints. Admin only.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin
from app.database import get_db, transaction
from app.models.member import Member
from app.schemas.branch import (
    MemberMenuRequest,
    MemberMenuResponse,
    MenuCreate,
    MenuResponse,
    MenuUpdate,
)
from app.schemas.common import AffectedRowsResponse
from app.services.menu_service import menu_service
from app.utils.response import ApiResponse, ok

router: APIRouter = APIRouter()


@router.post("", response_model=ApiResponse[MenuResponse], status_code=201)
async def create_menu(
    request: Request,
    data: MenuCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_member: Annotated[Member, Depends(require_admin)],
) -> ApiResponse[MenuResponse]:
    """새 메뉴를 생성합니다."""
    async with transaction(db):
        result: MenuResponse = await menu_service.create_menu(db, data)
    return ok(request, result, 201)


@router.get("", response_model=ApiResponse[list[MenuResponse]])
async def list_menus(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_member: Annotated[Member, Depends(require_admin)],
) -> ApiResponse[list[MenuResponse]]:
    result: list[MenuResponse] = await menu_service.list_menus(db)
    return ok(request, result)


@router.get("/deleted", response_model=ApiResponse[list[MenuResponse]])
async def list_deleted_menus(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_member: Annotated[Member, Depends(require_admin)],
) -> ApiResponse[list[MenuResponse]]:
    result: list[MenuResponse] = await menu_service.list_menus(db, deleted=True)
    return ok(request, result)


@router.post("/member", response_model=ApiResponse[list[MemberMenuResponse]])
async def list_member_menus(
    request: Request,
    data: MemberMenuRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_member: Annotated[Member, Depends(require_admin)],
) -> ApiResponse[list[MemberMenuResponse]]:
    """멤버가 특정 지점에서 권한을 가진 메뉴 목록을 조회합니다.

    List the live menus the member is granted within one branch.
    """
    result: list[MemberMenuResponse] = await menu_service.list_member_menus(
        db, data.member_id, data.branch_id
    )
    return ok(request, result)


@router.patch("/{menu_id}", response_model=ApiResponse[AffectedRowsResponse])
async def update_menu(
    request: Request,
    menu_id: int,
    data: MenuUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_member: Annotated[Member, Depends(require_admin)],
) -> ApiResponse[AffectedRowsResponse]:
    async with transaction(db):
        result: AffectedRowsResponse = await menu_service.update_menu(db, menu_id, data)
    return ok(request, result)


@router.delete("/{menu_id}", response_model=ApiResponse[AffectedRowsResponse])
async def remove_menu(
    request: Request,
    menu_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_member: Annotated[Member, Depends(require_admin)],
) -> ApiResponse[AffectedRowsResponse]:
    """메뉴를 소프트 삭제합니다."""
    async with transaction(db):
        result: AffectedRowsResponse = await menu_service.remove_menu(db, menu_id)
    return ok(request, result)


@router.patch("/{menu_id}/restore", response_model=ApiResponse[AffectedRowsResponse])
async def restore_menu(
    request: Request,
    menu_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_member: Annotated[Member, Depends(require_admin)],
) -> ApiResponse[AffectedRowsResponse]:
    async with transaction(db):
        result: AffectedRowsResponse = await menu_service.restore_menu(db, menu_id)
    return ok(request, result)
