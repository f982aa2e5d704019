"""멤버 관련 SQLAlchemy ORM 모델 정의.

Member SQLAlchemy ORM model definition.

Tables:
    - members: 관리자 콘솔 계정 (Admin console accounts with role and soft delete)
"""

import enum
from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String, Text, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class MemberRole(str, enum.Enum):
    """멤버 역할.

    - admin: 관리자 (full access to the admin API)
    - verified: 이메일 인증 완료 (email confirmed)
    - user: 기본 상태, 이메일 미인증 (baseline, email not confirmed)
    - deny: 차단 — 삭제/복구/이메일 변경으로도 바뀌지 않음 (banned, never changed implicitly)
    """

    ADMIN = "admin"
    VERIFIED = "verified"
    USER = "user"
    DENY = "deny"


class Member(Base):
    """멤버 모델 — 로그인 계정과 역할, 소프트 삭제 상태.

    Member model — Login account with role and soft-delete state.

    Attributes:
        id: 고유 식별자 (Auto-increment identifier)
        login_id: 로그인 아이디, 삭제된 행 포함 전역 고유 (Login id, unique across all rows)
        email: 이메일, 삭제된 행 포함 전역 고유 (Email, unique across all rows)
        username: 표시 이름 (Display name)
        password: bcrypt 해시 (Bcrypt hash)
        role: 역할 (admin / verified / user / deny)
        refresh_token: 마지막으로 발급한 리프레시 토큰 (Last issued refresh token)
        email_validate_at: 이메일 인증 일시 (Email validation timestamp)
        deleted_at: 소프트 삭제 일시 (Soft delete timestamp)

    Relationships:
        authorities: 권한 목록 (Authority grants, cascade delete)
    """

    __tablename__ = "members"

    # 멤버 고유 식별자 — Auto-increment primary key
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # 로그인 아이디 — 영문/숫자 20자 이내
    login_id: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    # 이메일 — 50자 이내
    email: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    # 이름 — 20자 이내
    username: Mapped[str] = mapped_column(String(20), nullable=False)
    # 비밀번호 해시 — 평문은 저장하지 않음 (Never stores plain text)
    password: Mapped[str] = mapped_column(String(100), nullable=False)
    # 역할 — admin, verified, user, deny
    role: Mapped[str] = mapped_column(String(10), nullable=False, default=MemberRole.USER.value)
    # 리프레시 토큰 — 로그인 시 갱신
    refresh_token: Mapped[str | None] = mapped_column(Text, nullable=True)
    # 이메일 인증 일시
    email_validate_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))
    # 소프트 삭제 일시 — NULL이면 활성
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # 관계 — 멤버 삭제 시 권한도 삭제 (Authorities removed with the member)
    authorities = relationship("Authority", back_populates="member", cascade="all, delete-orphan")

    __table_args__ = (
        Index("ix_members_role", "role"),
    )
