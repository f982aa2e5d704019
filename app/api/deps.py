"""FastAPI 의존성 주입 모듈 — 인증 및 역할 검사.

FastAPI dependency injection module — Authentication and authorization.

Authentication Flow:
    1. 클라이언트가 Authorization: Bearer <token> 헤더를 전송
       (Client sends Authorization: Bearer <token> header)
    2. verify_token()이 액세스 토큰 서명/만료/종류를 검증
       (Access token signature, expiry and type are verified)
    3. 페이로드의 "id"로 삭제되지 않은 멤버를 조회
       (Live member is fetched using the payload "id")

Authorization Flow (require_roles):
    1. get_current_member로 멤버 인증 (Member authenticated via get_current_member)
    2. 멤버의 역할이 허용 목록에 없으면 403 Forbidden
       (Returns 403 when the role is not in the allowed set)
"""

from typing import Annotated, Awaitable, Callable

from fastapi import Depends, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models.member import Member, MemberRole
from app.repositories.member_repository import member_repository
from app.utils.exceptions import ForbiddenError, UnauthorizedError
from app.utils.jwt import ACCESS, verify_token
from app.utils.pagination import MAX_PER_PAGE, PageParams

# HTTP Bearer 토큰 추출기 — 헤더가 없으면 None (401은 직접 발생)
# Extracts the bearer token; missing header yields None so we raise our own 401
security: HTTPBearer = HTTPBearer(auto_error=False)


async def get_current_member(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Member:
    """JWT 액세스 토큰에서 현재 인증된 멤버를 추출합니다.

    Decode the access token from the Authorization header and return
    the live member it names.

    Args:
        credentials: HTTP Bearer 토큰 자격 증명 (Bearer token credentials from header)
        db: 비동기 DB 세션 (Async database session)

    Returns:
        Member: 인증된 멤버 (Authenticated member)

    Raises:
        UnauthorizedError: 토큰 없음/만료/위조 또는 멤버 없음
            (Missing, expired or invalid token, or member gone)
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError()

    payload: dict = verify_token(credentials.credentials, ACCESS)
    member_id = payload.get("id")
    if not isinstance(member_id, int):
        raise UnauthorizedError("유효하지 않은 jwt 토큰입니다.")

    member: Member | None = await member_repository.get_by_id(db, member_id)
    if member is None:
        raise UnauthorizedError("멤버가 삭제되었거나 존재하지 않습니다.")
    return member


def require_roles(*roles: MemberRole) -> Callable[..., Awaitable[Member]]:
    """역할 기반 권한 검사 의존성 팩토리.

    Dependency factory enforcing that the current member holds one of
    ``roles``.

    Args:
        roles: 허용 역할 (Allowed roles)

    Returns:
        FastAPI 의존성 함수 — 인증된 멤버 반환 또는 403 발생
        (Dependency returning the member or raising 403)
    """
    allowed: set[str] = {r.value for r in roles}

    async def _check(
        current_member: Annotated[Member, Depends(get_current_member)],
    ) -> Member:
        if current_member.role not in allowed:
            raise ForbiddenError()
        return current_member

    return _check


# 편의 의존성 — Pre-configured role dependencies
require_admin = require_roles(MemberRole.ADMIN)
# 차단(deny)을 제외한 모든 멤버 (Every member except banned ones)
require_member = require_roles(MemberRole.ADMIN, MemberRole.VERIFIED, MemberRole.USER)


def page_params(
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=MAX_PER_PAGE)] = 10,
) -> PageParams:
    """쿼리 문자열의 page / per_page를 페이지 파라미터로 변환합니다."""
    return PageParams(page=page, per_page=per_page)
