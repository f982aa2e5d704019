"""지점 서비스 — 지점 CRUD, 소프트 삭제/복구, 권한 기준 목록.

Branch Service — Business logic for branch administration.
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.branch import Branch
from app.repositories.branch_repository import branch_repository
from app.schemas.branch import BranchCreate, BranchResponse, BranchUpdate, MemberBranchResponse
from app.schemas.common import AffectedRowsResponse
from app.utils.exceptions import BadRequestError

BRANCH_NOT_FOUND: str = "지점이 존재하지 않습니다."


class BranchService:
    """지점 관련 비즈니스 로직을 처리하는 서비스.

    Service handling branch CRUD. Every listing is ordered by ``seq``.
    """

    def __init__(self, logger: logging.Logger) -> None:
        self.logger: logging.Logger = logger

    async def create_branch(self, db: AsyncSession, data: BranchCreate) -> BranchResponse:
        """새 지점을 생성합니다.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 지점 생성 데이터 (Branch creation data)

        Returns:
            BranchResponse: 생성된 지점 (Created branch)
        """
        branch: Branch = await branch_repository.create(db, data.model_dump())
        self.logger.info("Branch created: id=%d name=%s", branch.id, branch.name)
        return BranchResponse.model_validate(branch)

    async def list_branches(self, db: AsyncSession, deleted: bool = False) -> list[BranchResponse]:
        """활성(또는 삭제된) 지점 목록을 seq 오름차순으로 조회합니다."""
        branches = await branch_repository.get_all(db, deleted=deleted, order_by=Branch.seq)
        return [BranchResponse.model_validate(b) for b in branches]

    async def update_branch(
        self,
        db: AsyncSession,
        branch_id: int,
        data: BranchUpdate,
    ) -> AffectedRowsResponse:
        """지점 정보를 부분 수정합니다.

        Raises:
            BadRequestError: 빈 요청 또는 지점 없음 (Empty payload or branch not found)
        """
        values: dict[str, Any] = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
        if not values:
            raise BadRequestError("요청 데이터가 없습니다.")
        if await branch_repository.get_by_id(db, branch_id) is None:
            raise BadRequestError(BRANCH_NOT_FOUND)

        affected: int = await branch_repository.update_by_id(db, branch_id, values)
        return AffectedRowsResponse(affectedRows=affected)

    async def remove_branch(self, db: AsyncSession, branch_id: int) -> AffectedRowsResponse:
        """지점을 소프트 삭제합니다. 기존 권한 행은 남지만 목록에서 제외됩니다."""
        if await branch_repository.get_by_id(db, branch_id) is None:
            raise BadRequestError(BRANCH_NOT_FOUND)
        affected: int = await branch_repository.soft_delete(db, branch_id)
        self.logger.info("Branch soft-deleted: id=%d", branch_id)
        return AffectedRowsResponse(affectedRows=affected)

    async def restore_branch(self, db: AsyncSession, branch_id: int) -> AffectedRowsResponse:
        """소프트 삭제된 지점을 복구합니다."""
        if await branch_repository.get_deleted_by_id(db, branch_id) is None:
            raise BadRequestError("삭제된 지점이 존재하지 않습니다.")
        affected: int = await branch_repository.restore(db, branch_id)
        return AffectedRowsResponse(affectedRows=affected)

    async def list_member_branches(self, db: AsyncSession, member_id: int) -> list[MemberBranchResponse]:
        """멤버가 권한을 가진 활성 지점 목록 (삭제 일시 제외)."""
        branches = await branch_repository.get_by_member(db, member_id)
        return [MemberBranchResponse.model_validate(b) for b in branches]

    async def is_branch_exists(self, db: AsyncSession, branch_id: int) -> bool:
        """지점이 존재하고 삭제되지 않았는지 확인합니다."""
        return await branch_repository.get_by_id(db, branch_id) is not None


branch_service: BranchService = BranchService(logging.getLogger("app.services.branch"))
