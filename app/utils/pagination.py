"""페이지네이션 유틸리티 모듈.

Pagination utility module for SQLAlchemy async queries.
Uses conventional offset/limit paging: ``offset = per_page * (page - 1)``.
"""

from typing import Any, Sequence

from pydantic import BaseModel, Field
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.schemas.common import PaginatedResponse

# 페이지 크기 상한 — Upper bound for per_page
MAX_PER_PAGE: int = 100


class PageParams(BaseModel):
    """페이지 요청 파라미터.

    Attributes:
        page: 요청 페이지 번호, 1부터 시작 (1-based page number)
        per_page: 페이지당 항목 수 (Items per page, 1..100)
    """

    page: int = Field(default=1, ge=1)
    per_page: int = Field(default=10, ge=1, le=MAX_PER_PAGE)

    @property
    def offset(self) -> int:
        return self.per_page * (self.page - 1)


async def paginate(
    db: AsyncSession,
    query: Select[Any],
    params: PageParams,
) -> tuple[Sequence[Any], int]:
    """SQLAlchemy 쿼리에 대한 페이지네이션을 수행합니다.

    Execute a paginated query, returning the page items and the total count.

    Args:
        db: 비동기 DB 세션 (Async database session)
        query: 정렬이 지정된 Select 쿼리 (Ordered base query)
        params: 페이지 파라미터 (Page parameters)

    Returns:
        tuple[Sequence[Any], int]: (항목 목록, 전체 개수)
    """
    # 전체 개수 조회 — 서브쿼리로 감싸서 COUNT 실행 (Count total via subquery)
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total: int = (await db.execute(count_query)).scalar() or 0

    result = await db.execute(query.offset(params.offset).limit(params.per_page))
    items: Sequence[Any] = result.scalars().all()
    return items, total


def to_page(items: list[Any], total: int, params: PageParams) -> PaginatedResponse:
    """항목 목록과 개수로 페이지 응답을 만듭니다."""
    pages: int = (total + params.per_page - 1) // params.per_page
    return PaginatedResponse(items=items, total=total, page=params.page, per_page=params.per_page, pages=pages)
