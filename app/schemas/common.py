"""공통 Pydantic 응답 스키마 정의.

Common Pydantic response schema definitions shared by the
member, branch, menu and file routers.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class AffectedRowsResponse(BaseModel):
    """UPDATE 결과 — 영향받은 행 수.

    Attributes:
        affectedRows: 변경된 행 수 (Number of changed rows)
    """

    affectedRows: int


class CountResponse(BaseModel):
    """개수 조회 응답."""

    count: int


class PaginatedResponse(BaseModel, Generic[T]):
    """페이지네이션 응답 스키마.

    Attributes:
        items: 항목 목록 (List of result items)
        total: 전체 항목 수 (Total count across all pages)
        page: 현재 페이지 번호 (Current page number, 1-based)
        per_page: 페이지당 항목 수 (Items per page)
        pages: 전체 페이지 수 (Total number of pages)
    """

    items: list[T]  # 결과 항목 목록 (List of items for the current page)
    total: int  # 전체 항목 수 (Total item count)
    page: int  # 현재 페이지 — 1부터 시작 (Current page, 1-indexed)
    per_page: int  # 페이지당 항목 수 (Items per page)
    pages: int  # 전체 페이지 수 (Total pages)
