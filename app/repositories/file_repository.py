"""파일 레포지토리 — 업로드 파일 메타데이터 쿼리.

File Repository — Queries for uploaded file metadata.
"""

from typing import Any, Sequence

from sqlalchemy import Select, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.file import File
from app.repositories.base import BaseRepository
from app.utils.pagination import PageParams, paginate


class FileRepository(BaseRepository[File]):
    """files 테이블 레포지토리.

    Repository handling database queries for the files table.
    """

    def __init__(self) -> None:
        super().__init__(File)

    async def get_page_by_branch(
        self,
        db: AsyncSession,
        branch_id: int,
        params: PageParams,
    ) -> tuple[Sequence[File], int]:
        """지점의 활성 파일 한 페이지를 업로드 순서대로 조회합니다."""
        query: Select = self._live(select(File).where(File.branch_id == branch_id)).order_by(File.id)
        return await paginate(db, query, params)

    async def bulk_create(self, db: AsyncSession, rows: list[dict[str, Any]]) -> None:
        """파일 메타데이터를 일괄 삽입합니다."""
        if not rows:
            return
        await db.execute(insert(File), rows)


# 싱글턴 인스턴스 — Singleton instance
file_repository: FileRepository = FileRepository()
