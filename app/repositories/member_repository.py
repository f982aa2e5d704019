"""멤버 레포지토리 — 멤버 조회, 중복 검사, 페이지 목록.

Member Repository — Lookups by login id / email, duplicate checks
across soft-deleted rows, and the detail query with authority grants.
"""

from typing import Sequence

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.authority import Authority
from app.models.member import Member
from app.repositories.base import BaseRepository
from app.utils.pagination import PageParams, paginate


class MemberRepository(BaseRepository[Member]):
    """members 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the members table.
    """

    def __init__(self) -> None:
        super().__init__(Member)

    async def get_by_login_id(self, db: AsyncSession, login_id: str) -> Member | None:
        """활성 멤버를 로그인 아이디로 조회합니다.

        Retrieve a live member by login id.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            login_id: 로그인 아이디 (Login id)

        Returns:
            Member | None: 조회된 멤버 또는 None (Found member or None)
        """
        query: Select = self._live(select(Member).where(Member.login_id == login_id))
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_by_email_and_username(
        self,
        db: AsyncSession,
        email: str,
        username: str,
    ) -> Member | None:
        """이메일과 이름이 모두 일치하는 활성 멤버를 조회합니다."""
        query: Select = self._live(
            select(Member).where(Member.email == email, Member.username == username)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def login_id_exists(self, db: AsyncSession, login_id: str, exclude_id: int | None = None) -> bool:
        """로그인 아이디 중복 여부 — 소프트 삭제된 행 포함.

        Check login id uniqueness across every row, including soft-deleted ones.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            login_id: 검사할 아이디 (Login id to check)
            exclude_id: 검사에서 제외할 멤버 ID (Member id to ignore, for updates)

        Returns:
            bool: 이미 사용 중이면 True (True if taken)
        """
        query: Select = select(func.count()).select_from(Member).where(Member.login_id == login_id)
        if exclude_id is not None:
            query = query.where(Member.id != exclude_id)
        return ((await db.execute(query)).scalar() or 0) > 0

    async def email_exists(self, db: AsyncSession, email: str, exclude_id: int | None = None) -> bool:
        """이메일 중복 여부 — 소프트 삭제된 행 포함."""
        query: Select = select(func.count()).select_from(Member).where(Member.email == email)
        if exclude_id is not None:
            query = query.where(Member.id != exclude_id)
        return ((await db.execute(query)).scalar() or 0) > 0

    async def get_detail(self, db: AsyncSession, member_id: int) -> Member | None:
        """멤버를 권한, 지점, 메뉴와 함께 조회합니다 (삭제된 멤버 포함).

        Retrieve a member, soft-deleted or not, with its authorities and
        each authority's branch and menu eagerly loaded.
        """
        query: Select = (
            select(Member)
            .options(
                selectinload(Member.authorities).selectinload(Authority.branch),
                selectinload(Member.authorities).selectinload(Authority.menu),
            )
            .where(Member.id == member_id)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_page(
        self,
        db: AsyncSession,
        params: PageParams,
        deleted: bool = False,
    ) -> tuple[Sequence[Member], int]:
        """활성(또는 삭제된) 멤버 한 페이지를 조회합니다."""
        query: Select = select(Member)
        query = self._deleted(query) if deleted else self._live(query)
        return await paginate(db, query.order_by(Member.id), params)


# 싱글턴 인스턴스 — Singleton instance
member_repository: MemberRepository = MemberRepository()
