"""지점/메뉴 관련 Pydantic 요청/응답 스키마 정의.

Branch and Menu Pydantic request/response schema definitions.
Both entities share the same admin shape: create, partial update,
soft delete, restore and an authority-scoped listing.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _check_url(value: str) -> str:
    if not value.startswith(("http://", "https://")):
        raise ValueError("URL은 https 를 포함한 전체 경로를 입력해주세요.")
    return value


# === 지점 (Branch) 스키마 ===

class BranchCreate(BaseModel):
    """지점 생성 요청 스키마.

    Attributes:
        name: 지점 코드명 (Branch code name, max 20)
        title: 표시 이름 (Display title, max 20)
        url: 지점 URL — 전체 경로 (Absolute URL, max 100)
        seq: 표시 순서 (Display order, default 99)
        is_show: 노출 여부 (Visibility flag, default False)
    """

    name: str = Field(min_length=1, max_length=20)
    title: str = Field(min_length=1, max_length=20)
    url: str = Field(max_length=100)
    seq: int = 99
    is_show: bool = False

    @field_validator("url")
    @classmethod
    def validate_url(cls, value: str) -> str:
        return _check_url(value)


class BranchUpdate(BaseModel):
    """지점 수정 요청 스키마 (부분 업데이트)."""

    name: str | None = Field(default=None, min_length=1, max_length=20)
    title: str | None = Field(default=None, min_length=1, max_length=20)
    url: str | None = Field(default=None, max_length=100)
    seq: int | None = None
    is_show: bool | None = None

    @field_validator("url")
    @classmethod
    def validate_url(cls, value: str | None) -> str | None:
        return value if value is None else _check_url(value)


class BranchResponse(BaseModel):
    """지점 응답 스키마."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    title: str
    url: str
    seq: int
    is_show: bool
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None


class MemberBranchRequest(BaseModel):
    """멤버 권한 기준 지점 목록 요청."""

    member_id: int = Field(ge=1)


class MemberBranchResponse(BaseModel):
    """권한 기준 지점 목록 항목 — 삭제 일시 제외.

    Authority-scoped branch entry; deletion timestamp is not exposed.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    title: str
    url: str
    seq: int
    is_show: bool


# === 메뉴 (Menu) 스키마 ===

class MenuCreate(BaseModel):
    """메뉴 생성 요청 스키마.

    Attributes:
        title: 메뉴 이름 (Menu title, max 20)
        link: 메뉴 경로 (Menu route, max 20)
        seq: 표시 순서 (Display order, default 99)
    """

    title: str = Field(min_length=1, max_length=20)
    link: str = Field(min_length=1, max_length=20)
    seq: int = 99


class MenuUpdate(BaseModel):
    """메뉴 수정 요청 스키마 (부분 업데이트)."""

    title: str | None = Field(default=None, min_length=1, max_length=20)
    link: str | None = Field(default=None, min_length=1, max_length=20)
    seq: int | None = None


class MenuResponse(BaseModel):
    """메뉴 응답 스키마."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    link: str
    seq: int
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None


class MemberMenuRequest(BaseModel):
    """멤버 + 지점 권한 기준 메뉴 목록 요청."""

    member_id: int = Field(ge=1)
    branch_id: int = Field(ge=1)


class MemberMenuResponse(BaseModel):
    """권한 기준 메뉴 목록 항목 — 삭제 일시 제외."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    link: str
    seq: int
