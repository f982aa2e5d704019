"""지점/메뉴 레포지토리 — CRUD 및 권한 기준 목록 쿼리.

Branch and Menu Repositories — CRUD plus listings scoped through
live authority grants.
"""

from typing import Sequence

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.authority import Authority
from app.models.branch import Branch, Menu
from app.repositories.base import BaseRepository


class BranchRepository(BaseRepository[Branch]):
    """branches 테이블 레포지토리.

    Repository handling database queries for the branches table.
    """

    def __init__(self) -> None:
        super().__init__(Branch)

    async def get_by_member(self, db: AsyncSession, member_id: int) -> Sequence[Branch]:
        """멤버가 권한을 가진 활성 지점 목록을 조회합니다.

        Distinct live branches the member holds at least one grant in,
        ordered by seq.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            member_id: 멤버 ID (Member id)

        Returns:
            Sequence[Branch]: 지점 목록 (Branches ordered by seq)
        """
        granted = select(Authority.branch_id).where(Authority.member_id == member_id)
        query: Select = self._live(
            select(Branch).where(Branch.id.in_(granted)).order_by(Branch.seq, Branch.id)
        )
        result = await db.execute(query)
        return result.scalars().all()


class MenuRepository(BaseRepository[Menu]):
    """menus 테이블 레포지토리.

    Repository handling database queries for the menus table.
    """

    def __init__(self) -> None:
        super().__init__(Menu)

    async def get_by_member_branch(
        self,
        db: AsyncSession,
        member_id: int,
        branch_id: int,
    ) -> Sequence[Menu]:
        """멤버가 특정 지점에서 권한을 가진 활성 메뉴 목록을 조회합니다.

        Distinct live menus granted to the member within the branch,
        ordered by seq.
        """
        granted = select(Authority.menu_id).where(
            Authority.member_id == member_id,
            Authority.branch_id == branch_id,
        )
        query: Select = self._live(
            select(Menu).where(Menu.id.in_(granted)).order_by(Menu.seq, Menu.id)
        )
        result = await db.execute(query)
        return result.scalars().all()


# 싱글턴 인스턴스 — Singleton instances
branch_repository: BranchRepository = BranchRepository()
menu_repository: MenuRepository = MenuRepository()
