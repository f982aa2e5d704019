"""권한 서비스 — 지점 × 메뉴 교차 곱 권한 부여 및 교체.

Authority Service — Translates requested branch ids × menu ids into the
full cross product of grants, validates the referenced ids against live
rows, and writes the grant set. Never commits: it always runs inside
the caller's transaction.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.repositories.authority_repository import authority_repository
from app.repositories.branch_repository import branch_repository, menu_repository
from app.utils.exceptions import BadRequestError


def _unique(ids: list[int]) -> list[int]:
    """순서를 유지하며 중복 ID를 제거합니다."""
    return list(dict.fromkeys(ids))


class AuthorityService:
    """멤버 권한(Authority) 관련 비즈니스 로직을 처리하는 서비스.

    Service handling the member × branch × menu grant set.

    Rules:
        - 두 목록은 함께 비어 있거나 함께 채워져 있어야 함 (both-or-neither)
        - 모든 ID는 소프트 삭제되지 않은 행을 가리켜야 함 (ids must be live)
        - 교체 시 기존 권한 전체 삭제 후 새 교차 곱 삽입 (full replace, no diff)
    """

    def __init__(self, logger: logging.Logger) -> None:
        self.logger: logging.Logger = logger

    async def validate(
        self,
        db: AsyncSession,
        branch_ids: list[int],
        menu_ids: list[int],
    ) -> tuple[list[int], list[int]]:
        """요청된 지점/메뉴 ID 목록을 검증합니다.

        Validate the requested ids and return them de-duplicated.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            branch_ids: 지점 ID 목록 (Requested branch ids)
            menu_ids: 메뉴 ID 목록 (Requested menu ids)

        Returns:
            tuple[list[int], list[int]]: 중복 제거된 (지점, 메뉴) ID 목록

        Raises:
            BadRequestError: 한쪽만 비어 있거나 삭제/미존재 ID가 포함된 경우
                             (One list empty, or an id is missing or deleted)
        """
        branch_ids = _unique(branch_ids)
        menu_ids = _unique(menu_ids)

        if bool(branch_ids) != bool(menu_ids):
            raise BadRequestError("지점과 메뉴를 1개 이상 선택해주세요.")
        if not branch_ids:
            return [], []

        # 활성 행 수와 요청 ID 수가 다르면 삭제되었거나 없는 ID가 섞여 있음
        if await branch_repository.count_live_ids(db, branch_ids) != len(branch_ids):
            raise BadRequestError("삭제되었거나 존재하지 않는 지점을 선택하였습니다.")
        if await menu_repository.count_live_ids(db, menu_ids) != len(menu_ids):
            raise BadRequestError("삭제되었거나 존재하지 않는 메뉴를 선택하였습니다.")

        return branch_ids, menu_ids

    async def grant(
        self,
        db: AsyncSession,
        member_id: int,
        branch_ids: list[int],
        menu_ids: list[int],
    ) -> int:
        """교차 곱 권한을 삽입합니다.

        Insert one grant per (branch, menu) pair for the member.

        Returns:
            int: 삽입된 권한 수 (Number of grants inserted)
        """
        branch_ids, menu_ids = await self.validate(db, branch_ids, menu_ids)
        rows: list[dict[str, int]] = [
            {"member_id": member_id, "branch_id": branch_id, "menu_id": menu_id}
            for branch_id in branch_ids
            for menu_id in menu_ids
        ]
        await authority_repository.bulk_create(db, rows)
        if rows:
            self.logger.info("Granted %d authorities to member %d", len(rows), member_id)
        return len(rows)

    async def replace(
        self,
        db: AsyncSession,
        member_id: int,
        branch_ids: list[int],
        menu_ids: list[int],
    ) -> int:
        """멤버의 권한 전체를 새 교차 곱으로 교체합니다.

        Delete every existing grant of the member, then insert the new
        cross product. Validation runs before the delete.

        Returns:
            int: 새로 삽입된 권한 수 (Number of grants after the replace)
        """
        branch_ids, menu_ids = await self.validate(db, branch_ids, menu_ids)
        removed: int = await authority_repository.delete_by_member(db, member_id)
        self.logger.info("Removed %d authorities of member %d", removed, member_id)
        return await self.grant(db, member_id, branch_ids, menu_ids)


authority_service: AuthorityService = AuthorityService(logging.getLogger("app.services.authority"))
