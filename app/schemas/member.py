"""멤버 관련 Pydantic 요청/응답 스키마 정의.

Member Pydantic request/response schema definitions.
Covers sign-up, email validation, login/refresh, duplicate checks,
partial update and the detail view with authority grants.
"""

import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.models.member import MemberRole
from app.utils.password import MAX_PASSWORD_BYTES

# 비밀번호 규칙 — 숫자, 특수문자, 소문자, 대문자 각각 1개 이상
_PASSWORD_RULES: tuple[re.Pattern[str], ...] = (
    re.compile(r"\d"),
    re.compile(r"[^A-Za-z0-9]"),
    re.compile(r"[a-z]"),
    re.compile(r"[A-Z]"),
)


def _check_login_id(value: str) -> str:
    if not value.isascii() or not value.isalnum():
        raise ValueError("아이디는 알파벳이나 숫자만 가능합니다.")
    if len(value) > 20:
        raise ValueError("아이디는 최대 20자 까지 가능합니다.")
    return value


def _check_password(value: str) -> str:
    if len(value) < 8:
        raise ValueError("패스워드는 최소 8자 이상 입력해주세요.")
    # bcrypt 입력 한도 (72 bytes, UTF-8 기준)
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError("패스워드가 너무 깁니다. 영문 기준 최대 72자 까지 가능합니다.")
    if not all(rule.search(value) for rule in _PASSWORD_RULES):
        raise ValueError("숫자, 특수문자, 소문자, 대문자 각각 1개 이상 입력해주세요.")
    return value


def _check_username(value: str) -> str:
    if not value.strip():
        raise ValueError("이름을 입력해주세요.")
    if len(value) > 20:
        raise ValueError("이름은 최대 20자 까지 가능합니다.")
    return value


def _check_email(value: str) -> str:
    if len(value) > 50:
        raise ValueError("이메일은 최대 50자 까지 가능합니다.")
    return value


# === 요청 (Request) 스키마 ===

class MemberCreate(BaseModel):
    """회원 가입 요청 스키마.

    Sign-up request schema. Branch and menu ids must be supplied together
    (both empty, or both non-empty).

    Attributes:
        login_id: 로그인 아이디 (Alphanumeric, max 20)
        email: 이메일 (Max 50)
        username: 이름 (Max 20)
        password: 비밀번호 — 평문, 서버에서 해싱 (Plain text, hashed server-side)
        branch_ids: 권한을 부여할 지점 ID 목록 (Branch ids to grant)
        menu_ids: 권한을 부여할 메뉴 ID 목록 (Menu ids to grant)
    """

    login_id: str
    email: EmailStr
    username: str
    password: str
    branch_ids: list[int] = []
    menu_ids: list[int] = []

    @field_validator("login_id")
    @classmethod
    def validate_login_id(cls, value: str) -> str:
        return _check_login_id(value)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _check_email(value)

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        return _check_username(value)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        return _check_password(value)


class MemberUpdate(BaseModel):
    """멤버 수정 요청 스키마 (부분 업데이트).

    Member update request schema (partial update). At least one field
    must be present. Supplying either id list replaces every grant of the
    member; a missing list counts as empty.

    Attributes:
        login_id: 변경할 아이디 (New login id, optional)
        email: 변경할 이메일 — 변경 시 인증 상태 초기화 (Resets validation when changed)
        username: 변경할 이름 (New display name, optional)
        password: 변경할 비밀번호 (New password, optional)
        role: 변경할 역할 (New role, optional)
        branch_ids: 새 지점 권한 목록 (Replacement branch ids, optional)
        menu_ids: 새 메뉴 권한 목록 (Replacement menu ids, optional)
    """

    login_id: str | None = None
    email: EmailStr | None = None
    username: str | None = None
    password: str | None = None
    role: MemberRole | None = None
    branch_ids: list[int] | None = None
    menu_ids: list[int] | None = None

    @field_validator("login_id")
    @classmethod
    def validate_login_id(cls, value: str | None) -> str | None:
        return value if value is None else _check_login_id(value)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str | None) -> str | None:
        return value if value is None else _check_email(value)

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str | None) -> str | None:
        return value if value is None else _check_username(value)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str | None) -> str | None:
        return value if value is None else _check_password(value)


class SendValidationRequest(BaseModel):
    """이메일 인증 메일 발송 요청 — 이메일과 이름이 정확히 일치해야 함."""

    email: EmailStr
    username: str


class LoginRequest(BaseModel):
    """로그인 요청 스키마."""

    login_id: str
    password: str


class RefreshRequest(BaseModel):
    """토큰 갱신 요청 스키마.

    Attributes:
        id: 멤버 ID (Member id)
        refresh_token: 로그인 시 발급받은 리프레시 토큰 (Refresh token issued at login)
    """

    id: int = Field(ge=1)
    refresh_token: str = Field(min_length=1)


class DuplicatedIdRequest(BaseModel):
    login_id: str


class DuplicatedEmailRequest(BaseModel):
    email: str


# === 응답 (Response) 스키마 ===

class MemberResponse(BaseModel):
    """멤버 응답 스키마 — 비밀번호와 리프레시 토큰은 포함하지 않음.

    Member response schema. Never carries the password hash or refresh token.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    login_id: str
    email: str
    username: str
    role: str
    email_validate_at: datetime | None
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None


class AuthorityBranch(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    title: str
    url: str
    seq: int


class AuthorityMenu(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    link: str
    seq: int


class AuthorityResponse(BaseModel):
    """권한 응답 — 지점과 메뉴 요약 포함."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    branch: AuthorityBranch
    menu: AuthorityMenu


class MemberDetailResponse(MemberResponse):
    """멤버 상세 응답 — 권한 목록 포함.

    Member detail with every authority grant and its branch/menu summary.
    """

    authorities: list[AuthorityResponse] = []


class TokenResponse(BaseModel):
    """로그인 응답 — 액세스 + 리프레시 토큰."""

    access_token: str
    refresh_token: str


class AccessTokenResponse(BaseModel):
    """토큰 갱신 응답 — 새 액세스 토큰만 발급."""

    access_token: str


class EmailResultResponse(BaseModel):
    """이메일 발송 결과."""

    accepted: list[str]
    rejected: list[str]
    response: str


class DuplicatedResponse(BaseModel):
    isDuplicated: bool
