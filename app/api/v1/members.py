"""멤버 라우터 — 가입, 이메일 인증, 토큰, 멤버 관리 엔드포인트.

Member Router — Sign-up, email validation, token and member admin endpoints.

Permission Matrix (역할별 권한 설계):
    - 가입/로그인/토큰 갱신/중복 확인/이메일 인증 링크: 공개
    - 인증 메일 발송: 차단되지 않은 로그인 멤버
    - 목록/상세/수정/삭제/복구/개수: admin만
"""

from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import page_params, require_admin, require_member
from app.config import settings
from app.database import get_db, transaction
from app.models.member import Member
from app.schemas.common import AffectedRowsResponse, CountResponse, PaginatedResponse
from app.schemas.member import (
    AccessTokenResponse,
    DuplicatedEmailRequest,
    DuplicatedIdRequest,
    DuplicatedResponse,
    EmailResultResponse,
    LoginRequest,
    MemberCreate,
    MemberDetailResponse,
    MemberResponse,
    MemberUpdate,
    RefreshRequest,
    SendValidationRequest,
    TokenResponse,
)
from app.services.member_service import member_service
from app.services.notification_service import notification_service
from app.utils.pagination import PageParams
from app.utils.response import ApiResponse, ok

router: APIRouter = APIRouter()


# --- 공개 엔드포인트 (Public endpoints) ---


@router.post("", response_model=ApiResponse[MemberResponse], status_code=201)
async def sign_up(
    request: Request,
    data: MemberCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[MemberResponse]:
    """회원 가입 — 멤버와 지점×메뉴 권한을 함께 생성합니다.

    Create a member together with its branch × menu grants.
    """
    async with transaction(db):
        result: MemberResponse = await member_service.sign_up(db, data)
    return ok(request, result, 201)


@router.post("/validation", response_model=ApiResponse[EmailResultResponse])
async def send_validation(
    request: Request,
    data: SendValidationRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_member: Annotated[Member, Depends(require_member)],
) -> ApiResponse[EmailResultResponse]:
    """이메일 인증 링크를 발송합니다."""
    base_url: str = settings.PUBLIC_BASE_URL or str(request.base_url)
    async with transaction(db):
        result: EmailResultResponse = await member_service.send_validation(db, data, base_url)
    return ok(request, result)


@router.get("/validate/{token}", response_model=ApiResponse[AffectedRowsResponse])
async def validate_email(
    request: Request,
    token: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[AffectedRowsResponse]:
    """이메일 인증 링크 — 토큰 확인 후 인증 상태로 전환합니다."""
    async with transaction(db):
        result: AffectedRowsResponse = await member_service.validate_email(db, token)
    return ok(request, result)


@router.post("/login", response_model=ApiResponse[TokenResponse])
async def login(
    request: Request,
    data: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[TokenResponse]:
    """로그인 — 액세스/리프레시 토큰을 발급합니다.

    Authenticate with login id and password.
    """
    async with transaction(db):
        result: TokenResponse = await member_service.login(db, data)
    return ok(request, result)


@router.post("/refresh", response_model=ApiResponse[AccessTokenResponse])
async def refresh(
    request: Request,
    data: RefreshRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[AccessTokenResponse]:
    """저장된 리프레시 토큰으로 액세스 토큰을 재발급합니다."""
    async with transaction(db):
        result: AccessTokenResponse = await member_service.refresh(db, data)
    return ok(request, result)


@router.post("/duplicated/id", response_model=ApiResponse[DuplicatedResponse])
async def duplicated_id(
    request: Request,
    data: DuplicatedIdRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[DuplicatedResponse]:
    """아이디 중복 여부 (삭제된 멤버 포함)."""
    result: DuplicatedResponse = await member_service.is_duplicated_login_id(db, data.login_id)
    return ok(request, result)


@router.post("/duplicated/email", response_model=ApiResponse[DuplicatedResponse])
async def duplicated_email(
    request: Request,
    data: DuplicatedEmailRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse[DuplicatedResponse]:
    """이메일 중복 여부 (삭제된 멤버 포함)."""
    result: DuplicatedResponse = await member_service.is_duplicated_email(db, data.email)
    return ok(request, result)


# --- 관리자 엔드포인트 (Admin endpoints) ---


@router.get("/count", response_model=ApiResponse[CountResponse])
async def count_members(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_member: Annotated[Member, Depends(require_admin)],
) -> ApiResponse[CountResponse]:
    result: CountResponse = await member_service.count_members(db)
    return ok(request, result)


@router.get("/count/deleted", response_model=ApiResponse[CountResponse])
async def count_deleted_members(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_member: Annotated[Member, Depends(require_admin)],
) -> ApiResponse[CountResponse]:
    result: CountResponse = await member_service.count_members(db, deleted=True)
    return ok(request, result)


@router.get("", response_model=ApiResponse[PaginatedResponse[MemberResponse]])
async def list_members(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    params: Annotated[PageParams, Depends(page_params)],
    current_member: Annotated[Member, Depends(require_admin)],
) -> ApiResponse[PaginatedResponse[MemberResponse]]:
    """활성 멤버 목록을 페이지 단위로 조회합니다.

    List live members, ``page`` / ``per_page`` query parameters.
    """
    result: PaginatedResponse = await member_service.list_members(db, params)
    return ok(request, result)


@router.get("/deleted", response_model=ApiResponse[PaginatedResponse[MemberResponse]])
async def list_deleted_members(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    params: Annotated[PageParams, Depends(page_params)],
    current_member: Annotated[Member, Depends(require_admin)],
) -> ApiResponse[PaginatedResponse[MemberResponse]]:
    """소프트 삭제된 멤버 목록을 페이지 단위로 조회합니다."""
    result: PaginatedResponse = await member_service.list_members(db, params, deleted=True)
    return ok(request, result)


@router.get("/{member_id}", response_model=ApiResponse[MemberDetailResponse])
async def get_member(
    request: Request,
    member_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_member: Annotated[Member, Depends(require_admin)],
) -> ApiResponse[MemberDetailResponse]:
    """멤버 상세 정보를 권한(지점/메뉴)과 함께 조회합니다."""
    result: MemberDetailResponse = await member_service.get_member(db, member_id)
    return ok(request, result)


@router.patch("/{member_id}", response_model=ApiResponse[AffectedRowsResponse])
async def update_member(
    request: Request,
    member_id: int,
    data: MemberUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_member: Annotated[Member, Depends(require_admin)],
) -> ApiResponse[AffectedRowsResponse]:
    """멤버 정보를 수정합니다. 지점/메뉴 ID를 보내면 권한 전체가 교체됩니다.

    Partially update a member. Supplying branch_ids or menu_ids replaces
    the whole grant set.
    """
    async with transaction(db):
        result: AffectedRowsResponse = await member_service.update_member(db, member_id, data)
    return ok(request, result)


@router.delete("/{member_id}", response_model=ApiResponse[AffectedRowsResponse])
async def remove_member(
    request: Request,
    member_id: int,
    background_tasks: BackgroundTasks,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_member: Annotated[Member, Depends(require_admin)],
) -> ApiResponse[AffectedRowsResponse]:
    """멤버를 소프트 삭제하고, 커밋 후 이메일/슬랙으로 알립니다.

    Soft-delete a member. The removal notice is sent after the response.
    """
    async with transaction(db):
        result, removed = await member_service.remove_member(db, member_id)
    background_tasks.add_task(
        notification_service.notify_member_removed,
        removed.id,
        removed.username,
        current_member.id,
        current_member.username,
    )
    return ok(request, result)


@router.patch("/{member_id}/restore", response_model=ApiResponse[AffectedRowsResponse])
async def restore_member(
    request: Request,
    member_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_member: Annotated[Member, Depends(require_admin)],
) -> ApiResponse[AffectedRowsResponse]:
    """소프트 삭제된 멤버를 복구합니다."""
    async with transaction(db):
        result: AffectedRowsResponse = await member_service.restore_member(db, member_id)
    return ok(request, result)
