"""권한 레포지토리 — 멤버별 권한 삭제 및 일괄 삽입.

Authority Repository — Deletes a member's grants and bulk-inserts a new
set. Authority rows are never soft-deleted.
"""

from sqlalchemy import delete, insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.authority import Authority


class AuthorityRepository:
    """authorities 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the authorities table.
    """

    async def delete_by_member(self, db: AsyncSession, member_id: int) -> int:
        """멤버의 모든 권한을 삭제합니다.

        Delete every grant of the member.

        Returns:
            int: 삭제된 행 수 (Deleted row count)
        """
        result = await db.execute(delete(Authority).where(Authority.member_id == member_id))
        return result.rowcount

    async def bulk_create(self, db: AsyncSession, rows: list[dict[str, int]]) -> None:
        """권한 행을 일괄 삽입합니다 (Bulk insert grant rows)."""
        if not rows:
            return
        await db.execute(insert(Authority), rows)


# 싱글턴 인스턴스 — Singleton instance
authority_repository: AuthorityRepository = AuthorityRepository()
