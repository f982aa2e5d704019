"""메뉴 서비스 — 메뉴 CRUD, 소프트 삭제/복구, 권한 기준 목록.

Menu Service — Business logic for menu administration.
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.branch import Menu
from app.repositories.branch_repository import menu_repository
from app.schemas.branch import MemberMenuResponse, MenuCreate, MenuResponse, MenuUpdate
from app.schemas.common import AffectedRowsResponse
from app.utils.exceptions import BadRequestError

MENU_NOT_FOUND: str = "메뉴가 존재하지 않습니다."


class MenuService:
    """메뉴 관련 비즈니스 로직을 처리하는 서비스.

    Service handling menu CRUD. Every listing is ordered by ``seq``.
    """

    def __init__(self, logger: logging.Logger) -> None:
        self.logger: logging.Logger = logger

    async def create_menu(self, db: AsyncSession, data: MenuCreate) -> MenuResponse:
        """새 메뉴를 생성합니다."""
        menu: Menu = await menu_repository.create(db, data.model_dump())
        self.logger.info("Menu created: id=%d title=%s", menu.id, menu.title)
        return MenuResponse.model_validate(menu)

    async def list_menus(self, db: AsyncSession, deleted: bool = False) -> list[MenuResponse]:
        menus = await menu_repository.get_all(db, deleted=deleted, order_by=Menu.seq)
        return [MenuResponse.model_validate(m) for m in menus]

    async def update_menu(
        self,
        db: AsyncSession,
        menu_id: int,
        data: MenuUpdate,
    ) -> AffectedRowsResponse:
        """메뉴 정보를 부분 수정합니다.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            menu_id: 메뉴 ID (Menu id)
            data: 수정 데이터 (Update payload, at least one field)

        Returns:
            AffectedRowsResponse: 영향받은 행 수 (Affected rows)

        Raises:
            BadRequestError: 빈 요청 또는 메뉴 없음 (Empty payload or menu not found)
        """
        values: dict[str, Any] = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
        if not values:
            raise BadRequestError("요청 데이터가 없습니다.")
        if await menu_repository.get_by_id(db, menu_id) is None:
            raise BadRequestError(MENU_NOT_FOUND)

        affected: int = await menu_repository.update_by_id(db, menu_id, values)
        return AffectedRowsResponse(affectedRows=affected)

    async def remove_menu(self, db: AsyncSession, menu_id: int) -> AffectedRowsResponse:
        if await menu_repository.get_by_id(db, menu_id) is None:
            raise BadRequestError(MENU_NOT_FOUND)
        affected: int = await menu_repository.soft_delete(db, menu_id)
        self.logger.info("Menu soft-deleted: id=%d", menu_id)
        return AffectedRowsResponse(affectedRows=affected)

    async def restore_menu(self, db: AsyncSession, menu_id: int) -> AffectedRowsResponse:
        if await menu_repository.get_deleted_by_id(db, menu_id) is None:
            raise BadRequestError("삭제된 메뉴가 존재하지 않습니다.")
        affected: int = await menu_repository.restore(db, menu_id)
        return AffectedRowsResponse(affectedRows=affected)

    async def list_member_menus(
        self,
        db: AsyncSession,
        member_id: int,
        branch_id: int,
    ) -> list[MemberMenuResponse]:
        """멤버가 특정 지점에서 권한을 가진 활성 메뉴 목록 (삭제 일시 제외)."""
        menus = await menu_repository.get_by_member_branch(db, member_id, branch_id)
        return [MemberMenuResponse.model_validate(m) for m in menus]


menu_service: MenuService = MenuService(logging.getLogger("app.services.menu"))
