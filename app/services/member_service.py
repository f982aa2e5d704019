"""멤버 서비스 — 가입, 이메일 인증, 로그인/토큰 갱신, 수정, 삭제/복구.

Member Service — Business logic for the member lifecycle.

States:
    - active: role admin / verified
    - emailUnverified: role user
    - banned: role deny — delete, restore and email change never touch it
    - softDeleted: deleted_at set

Every write runs inside the caller's transaction (see app.database.transaction);
the service itself never commits.
"""

import logging
from datetime import datetime, timezone
from typing import Any

import jwt
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.member import Member, MemberRole
from app.repositories.member_repository import member_repository
from app.schemas.common import AffectedRowsResponse, CountResponse, PaginatedResponse
from app.schemas.member import (
    AccessTokenResponse,
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
from app.services.authority_service import authority_service
from app.services.notification_service import notification_service
from app.utils import jwt as tokens
from app.utils.exceptions import (
    BadRequestError,
    DuplicateError,
    ForbiddenError,
    ServiceUnavailableError,
    UnauthorizedError,
)
from app.utils.pagination import PageParams, to_page
from app.utils.password import hash_password, verify_password

MEMBER_NOT_FOUND: str = "멤버가 존재하지 않습니다."
MEMBER_GONE: str = "멤버가 삭제되었거나 존재하지 않습니다."
UPDATE_FAILED: str = "멤버 정보 수정에 실패했습니다."


class MemberService:
    """멤버 관련 비즈니스 로직을 처리하는 서비스.

    Service handling the member lifecycle: sign-up with grants, email
    validation, token issuance, partial update, soft delete and restore.
    """

    def __init__(self, logger: logging.Logger) -> None:
        self.logger: logging.Logger = logger

    def _to_response(self, member: Member) -> MemberResponse:
        return MemberResponse.model_validate(member)

    def _baseline(self) -> dict[str, Any]:
        """역할을 기본(미인증) 상태로 되돌리는 값 (Reset to unverified baseline)."""
        return {"role": MemberRole.USER.value, "email_validate_at": None}

    async def _ensure_unique(
        self,
        db: AsyncSession,
        login_id: str | None,
        email: str | None,
        exclude_id: int | None = None,
    ) -> None:
        if login_id is not None and await member_repository.login_id_exists(db, login_id, exclude_id):
            raise DuplicateError("이미 사용 중인 아이디입니다.")
        if email is not None and await member_repository.email_exists(db, email, exclude_id):
            raise DuplicateError("이미 사용 중인 이메일입니다.")

    # --- 가입 / 인증 (Sign-up and email validation) ---

    async def sign_up(self, db: AsyncSession, data: MemberCreate) -> MemberResponse:
        """회원 가입 — 멤버 삽입과 권한 부여를 같은 트랜잭션에서 수행합니다.

        Create a member and its cross-product grants. If the grant step
        fails the caller's rollback removes the member row as well.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 가입 요청 데이터 (Sign-up payload)

        Returns:
            MemberResponse: 비밀번호가 제외된 멤버 (Member without password)

        Raises:
            DuplicateError: 아이디/이메일 중복 (Login id or email taken)
            BadRequestError: 권한 ID 검증 실패 (Invalid branch/menu selection)
        """
        await self._ensure_unique(db, data.login_id, data.email)

        member: Member = await member_repository.create(
            db,
            {
                "login_id": data.login_id,
                "email": data.email,
                "username": data.username,
                "password": hash_password(data.password),
                "role": MemberRole.USER.value,
            },
        )
        await authority_service.grant(db, member.id, data.branch_ids, data.menu_ids)

        self.logger.info("Member signed up: id=%d login_id=%s", member.id, member.login_id)
        return self._to_response(member)

    async def send_validation(
        self,
        db: AsyncSession,
        data: SendValidationRequest,
        base_url: str,
    ) -> EmailResultResponse:
        """이메일 인증 링크를 발송합니다.

        Look up the member by the exact (email, username) pair, sign an
        email validation token and mail the confirmation link.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 이메일과 이름 (Email and username)
            base_url: 링크에 사용할 외부 주소 (Public base URL for the link)

        Returns:
            EmailResultResponse: 발송 결과 (Delivery result)

        Raises:
            BadRequestError: 일치하는 멤버가 없을 때 (No matching member)
        """
        member: Member | None = await member_repository.get_by_email_and_username(
            db, data.email, data.username
        )
        if member is None:
            raise BadRequestError(MEMBER_NOT_FOUND)

        token: str = tokens.create_email_token(member.id)
        link: str = f"{base_url.rstrip('/')}/api/v1/members/validate/{token}"
        result = await notification_service.send_validation_email(member.email, member.username, link)
        return EmailResultResponse(accepted=result.accepted, rejected=result.rejected, response=result.response)

    async def validate_email(self, db: AsyncSession, token: str) -> AffectedRowsResponse:
        """이메일 인증 토큰을 확인하고 인증 상태로 전환합니다.

        Verify the email token, move the member to ``verified`` (banned
        members keep ``deny``) and stamp the validation time.

        Raises:
            UnauthorizedError: 토큰 만료/위조 (Expired or invalid token)
            BadRequestError: 멤버가 없을 때 (Member not found)
        """
        payload: dict[str, Any] = tokens.verify_token(token, tokens.EMAIL)
        member: Member | None = await member_repository.get_by_id(db, int(payload["id"]))
        if member is None:
            raise BadRequestError(MEMBER_NOT_FOUND)

        values: dict[str, Any] = {"email_validate_at": datetime.now(timezone.utc)}
        if member.role != MemberRole.DENY.value:
            values["role"] = MemberRole.VERIFIED.value
        affected: int = await member_repository.update_by_id(db, member.id, values)
        return AffectedRowsResponse(affectedRows=affected)

    # --- 토큰 (Tokens) ---

    async def login(self, db: AsyncSession, data: LoginRequest) -> TokenResponse:
        """로그인 — 액세스/리프레시 토큰을 발급하고 리프레시 토큰을 저장합니다.

        Issue an access token carrying id / username / role and a refresh
        token, which is persisted on the member row.

        Raises:
            BadRequestError: 멤버가 없을 때 (Member not found)
            UnauthorizedError: 비밀번호 불일치 (Wrong password)
            ForbiddenError: 차단된 멤버 (Banned member)
        """
        member: Member | None = await member_repository.get_by_login_id(db, data.login_id)
        if member is None:
            raise BadRequestError(MEMBER_NOT_FOUND)
        if not verify_password(data.password, member.password):
            raise UnauthorizedError("패스워드가 일치하지 않습니다.")
        if member.role == MemberRole.DENY.value:
            raise ForbiddenError()

        access_token: str = tokens.create_access_token(
            {"id": member.id, "username": member.username, "role": member.role}
        )
        refresh_token: str = tokens.create_refresh_token(member.id)
        await member_repository.update_by_id(db, member.id, {"refresh_token": refresh_token})

        self.logger.info("Member logged in: id=%d", member.id)
        return TokenResponse(access_token=access_token, refresh_token=refresh_token)

    async def refresh(self, db: AsyncSession, data: RefreshRequest) -> AccessTokenResponse:
        """리프레시 토큰으로 새 액세스 토큰을 발급합니다. 리프레시 토큰은 그대로 유지됩니다.

        The supplied token must equal the stored one exactly and still be
        valid; the stored refresh token is left untouched.

        Raises:
            BadRequestError: 멤버가 없을 때 (Member not found)
            UnauthorizedError: 저장된 토큰 없음/불일치/만료 (Missing, mismatched or expired token)
        """
        member: Member | None = await member_repository.get_by_id(db, data.id)
        if member is None:
            raise BadRequestError(MEMBER_NOT_FOUND)
        if not member.refresh_token:
            raise UnauthorizedError("리프레시 토큰이 존재하지 않습니다. 다시 로그인해주세요.")
        if member.refresh_token != data.refresh_token:
            raise UnauthorizedError("리프레시 토큰이 일치하지 않습니다.")

        try:
            payload: dict[str, Any] = tokens.decode_token(data.refresh_token, tokens.REFRESH)
        except jwt.ExpiredSignatureError as exc:
            raise UnauthorizedError("리프레시 토큰이 만료되었습니다. 다시 로그인해주세요.") from exc
        except jwt.PyJWTError as exc:
            raise UnauthorizedError(tokens.jwt_error_message(exc)) from exc
        if payload.get("id") != member.id:
            raise UnauthorizedError("리프레시 토큰이 일치하지 않습니다.")

        access_token: str = tokens.create_access_token(
            {"id": member.id, "username": member.username, "role": member.role}
        )
        return AccessTokenResponse(access_token=access_token)

    # --- 조회 (Queries) ---

    async def is_duplicated_login_id(self, db: AsyncSession, login_id: str) -> DuplicatedResponse:
        return DuplicatedResponse(isDuplicated=await member_repository.login_id_exists(db, login_id))

    async def is_duplicated_email(self, db: AsyncSession, email: str) -> DuplicatedResponse:
        return DuplicatedResponse(isDuplicated=await member_repository.email_exists(db, email))

    async def get_member(self, db: AsyncSession, member_id: int) -> MemberDetailResponse:
        """멤버 상세 — 권한과 각 권한의 지점/메뉴 포함 (삭제된 멤버도 조회 가능).

        Raises:
            BadRequestError: 멤버가 없을 때 (Member not found)
        """
        member: Member | None = await member_repository.get_detail(db, member_id)
        if member is None:
            raise BadRequestError(MEMBER_NOT_FOUND)
        return MemberDetailResponse.model_validate(member)

    async def count_members(self, db: AsyncSession, deleted: bool = False) -> CountResponse:
        return CountResponse(count=await member_repository.count(db, deleted=deleted))

    async def list_members(
        self,
        db: AsyncSession,
        params: PageParams,
        deleted: bool = False,
    ) -> PaginatedResponse:
        """활성(또는 삭제된) 멤버 목록을 페이지 단위로 조회합니다."""
        members, total = await member_repository.get_page(db, params, deleted=deleted)
        return to_page([self._to_response(m) for m in members], total, params)

    # --- 수정 / 삭제 / 복구 (Update, delete, restore) ---

    async def update_member(
        self,
        db: AsyncSession,
        member_id: int,
        data: MemberUpdate,
    ) -> AffectedRowsResponse:
        """멤버 정보를 부분 수정합니다.

        Partial update. Supplying branch_ids or menu_ids fully replaces the
        grant set. Changing the email of a non-banned member resets the
        role to ``user`` and clears the validation timestamp.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            member_id: 멤버 ID (Member id, may be soft-deleted)
            data: 수정 데이터 (Update payload)

        Returns:
            AffectedRowsResponse: 영향받은 행 수 (Affected rows)

        Raises:
            BadRequestError: 빈 요청 또는 멤버 없음 (Empty payload or member not found)
            DuplicateError: 아이디/이메일 중복 (Login id or email taken)
            ServiceUnavailableError: 수정 실패 (Update affected no rows)
        """
        fields: dict[str, Any] = data.model_dump(exclude_unset=True)
        if not fields:
            raise BadRequestError("요청 데이터가 없습니다.")

        member: Member | None = await member_repository.get_by_id(db, member_id, with_deleted=True)
        if member is None:
            raise BadRequestError(MEMBER_NOT_FOUND)

        branch_ids: list[int] | None = fields.pop("branch_ids", None)
        menu_ids: list[int] | None = fields.pop("menu_ids", None)
        # 나머지 멤버 컬럼은 모두 NOT NULL — 명시적 null은 무시
        values: dict[str, Any] = {k: v for k, v in fields.items() if v is not None}

        await self._ensure_unique(db, values.get("login_id"), values.get("email"), exclude_id=member_id)

        if branch_ids is not None or menu_ids is not None:
            await authority_service.replace(db, member_id, branch_ids or [], menu_ids or [])

        if "password" in values:
            values["password"] = hash_password(values["password"])
        if "role" in values:
            values["role"] = MemberRole(values["role"]).value

        # 현재 역할 기준: 차단 멤버는 요청한 역할이 그대로 적용됨
        if "email" in values and values["email"] != member.email and member.role != MemberRole.DENY.value:
            values.update(self._baseline())

        if not values:
            values["updated_at"] = datetime.now(timezone.utc)

        affected: int = await member_repository.update_by_id(db, member_id, values, with_deleted=True)
        if affected == 0:
            raise ServiceUnavailableError(UPDATE_FAILED)
        return AffectedRowsResponse(affectedRows=affected)

    async def remove_member(self, db: AsyncSession, member_id: int) -> tuple[AffectedRowsResponse, Member]:
        """멤버를 소프트 삭제합니다.

        Unless banned, the role is first reset to the unverified baseline;
        that step must change a row before the deletion stamp is written.

        Returns:
            tuple[AffectedRowsResponse, Member]: 결과와 삭제된 멤버 (Result and the removed member)

        Raises:
            BadRequestError: 활성 멤버가 없을 때 (No live member)
            ServiceUnavailableError: 역할 초기화 실패 (Role reset affected no rows)
        """
        member: Member | None = await member_repository.get_by_id(db, member_id)
        if member is None:
            raise BadRequestError(MEMBER_GONE)

        if member.role != MemberRole.DENY.value:
            reset: int = await member_repository.update_by_id(db, member_id, self._baseline())
            if reset == 0:
                raise ServiceUnavailableError(UPDATE_FAILED)

        affected: int = await member_repository.soft_delete(db, member_id)
        self.logger.info("Member soft-deleted: id=%d", member_id)
        return AffectedRowsResponse(affectedRows=affected), member

    async def restore_member(self, db: AsyncSession, member_id: int) -> AffectedRowsResponse:
        """소프트 삭제된 멤버를 복구합니다.

        Raises:
            BadRequestError: 삭제 상태가 아닌 경우 (Member is not soft-deleted)
        """
        member: Member | None = await member_repository.get_deleted_by_id(db, member_id)
        if member is None:
            raise BadRequestError("삭제된 멤버가 존재하지 않습니다.")

        if member.role != MemberRole.DENY.value:
            await member_repository.update_by_id(db, member_id, self._baseline(), with_deleted=True)

        affected: int = await member_repository.restore(db, member_id)
        self.logger.info("Member restored: id=%d", member_id)
        return AffectedRowsResponse(affectedRows=affected)


member_service: MemberService = MemberService(logging.getLogger("app.services.member"))
