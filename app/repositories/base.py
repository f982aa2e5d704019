"""기본 CRUD 레포지토리 — 모든 레포지토리의 부모 클래스.

Base CRUD Repository — Parent class for all domain repositories.
Provides generic find / count / insert / update operations and the
soft-delete / restore pair shared by members, branches, menus and files.

Usage:
    class BranchRepository(BaseRepository[Branch]):
        def __init__(self) -> None:
            super().__init__(Branch)
"""

from datetime import datetime, timezone
from typing import Any, Generic, Sequence, TypeVar

from sqlalchemy import Select, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import Base

# 제네릭 타입 변수 — SQLAlchemy 모델을 나타냄
# Generic type variable representing a SQLAlchemy model
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """제네릭 CRUD 레포지토리.

    Generic CRUD repository. Every query excludes soft-deleted rows
    unless ``with_deleted=True`` is passed.

    Attributes:
        model: SQLAlchemy 모델 클래스 (The SQLAlchemy model class)
    """

    def __init__(self, model: type[ModelType]) -> None:
        self.model: type[ModelType] = model

    def _live(self, query: Select) -> Select:
        """소프트 삭제되지 않은 행만 남깁니다 (Keep rows without deleted_at)."""
        return query.where(self.model.deleted_at.is_(None))

    def _deleted(self, query: Select) -> Select:
        return query.where(self.model.deleted_at.is_not(None))

    async def get_by_id(
        self,
        db: AsyncSession,
        record_id: int,
        with_deleted: bool = False,
    ) -> ModelType | None:
        """ID로 단일 레코드를 조회합니다.

        Retrieve a single record by id.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            record_id: 조회할 레코드 ID (Record id)
            with_deleted: True이면 소프트 삭제된 행도 포함 (Include soft-deleted rows)

        Returns:
            ModelType | None: 조회된 레코드 또는 None (Found record or None)
        """
        query: Select = select(self.model).where(self.model.id == record_id)
        if not with_deleted:
            query = self._live(query)
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_deleted_by_id(self, db: AsyncSession, record_id: int) -> ModelType | None:
        """소프트 삭제된 상태인 레코드만 조회합니다."""
        query: Select = self._deleted(select(self.model).where(self.model.id == record_id))
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_all(
        self,
        db: AsyncSession,
        deleted: bool = False,
        order_by: Any | None = None,
    ) -> Sequence[ModelType]:
        """활성 또는 삭제된 레코드 전체를 조회합니다.

        Retrieve every live row, or every soft-deleted row when ``deleted``.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            deleted: True이면 삭제된 행만 조회 (List soft-deleted rows instead)
            order_by: 정렬 기준 컬럼 (Column to order by)

        Returns:
            Sequence[ModelType]: 조회된 레코드 목록 (List of matching records)
        """
        query: Select = select(self.model)
        query = self._deleted(query) if deleted else self._live(query)
        if order_by is not None:
            query = query.order_by(order_by)
        result = await db.execute(query)
        return result.scalars().all()

    async def count(self, db: AsyncSession, deleted: bool = False) -> int:
        """활성(또는 삭제된) 레코드 수를 셉니다."""
        query: Select = select(func.count()).select_from(self.model)
        query = self._deleted(query) if deleted else self._live(query)
        return (await db.execute(query)).scalar() or 0

    async def count_live_ids(self, db: AsyncSession, ids: list[int]) -> int:
        """주어진 ID 중 소프트 삭제되지 않은 행의 수를 셉니다.

        Count how many of ``ids`` reference live rows.
        """
        if not ids:
            return 0
        query: Select = self._live(
            select(func.count()).select_from(self.model).where(self.model.id.in_(ids))
        )
        return (await db.execute(query)).scalar() or 0

    async def create(
        self,
        db: AsyncSession,
        obj_data: dict[str, Any],
    ) -> ModelType:
        """새 레코드를 생성합니다.

        Create a new record in the database.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            obj_data: 생성할 레코드의 데이터 딕셔너리 (Column values)

        Returns:
            ModelType: 생성된 레코드 (The created record)
        """
        db_obj: ModelType = self.model(**obj_data)
        db.add(db_obj)
        await db.flush()
        await db.refresh(db_obj)
        return db_obj

    async def update_by_id(
        self,
        db: AsyncSession,
        record_id: int,
        update_data: dict[str, Any],
        with_deleted: bool = False,
    ) -> int:
        """UPDATE 문으로 레코드를 수정하고 영향받은 행 수를 반환합니다.

        Update a record with a single UPDATE statement.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            record_id: 수정할 레코드 ID (Record id)
            update_data: 변경할 컬럼과 값 (Columns to change)
            with_deleted: True이면 소프트 삭제된 행도 수정 대상 (Also match soft-deleted rows)

        Returns:
            int: 영향받은 행 수 (Affected row count)
        """
        stmt = update(self.model).where(self.model.id == record_id)
        if not with_deleted:
            stmt = stmt.where(self.model.deleted_at.is_(None))
        result = await db.execute(stmt.values(**update_data))
        return result.rowcount

    async def soft_delete(self, db: AsyncSession, record_id: int) -> int:
        """활성 행에 삭제 일시를 기록합니다 (Stamp deleted_at on a live row)."""
        return await self.update_by_id(db, record_id, {"deleted_at": datetime.now(timezone.utc)})

    async def restore(self, db: AsyncSession, record_id: int) -> int:
        """소프트 삭제된 행의 삭제 일시를 지웁니다 (Clear deleted_at on a deleted row)."""
        stmt = (
            update(self.model)
            .where(self.model.id == record_id, self.model.deleted_at.is_not(None))
            .values(deleted_at=None)
        )
        result = await db.execute(stmt)
        return result.rowcount
