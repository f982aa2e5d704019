"""지점/메뉴 SQLAlchemy ORM 모델 정의.

Branch and Menu SQLAlchemy ORM model definitions.
Both are soft-deletable and ordered by ``seq`` in every listing.

Tables:
    - branches: 지점 (Branch sites)
    - menus: 관리자 메뉴 (Admin console menus)
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class Branch(Base):
    """지점 모델.

    Branch model.

    Attributes:
        id: 고유 식별자 (Auto-increment identifier)
        name: 지점 코드명 (Branch code name)
        title: 표시 이름 (Display title)
        url: 지점 URL
        seq: 표시 순서, 기본 99 (Display order)
        is_show: 노출 여부 (Visibility flag)
        deleted_at: 소프트 삭제 일시 (Soft delete timestamp)
    """

    __tablename__ = "branches"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # 지점 코드명 — 20자 이내
    name: Mapped[str] = mapped_column(String(20), nullable=False)
    # 표시 이름 — 20자 이내
    title: Mapped[str] = mapped_column(String(20), nullable=False)
    # 지점 URL — 100자 이내
    url: Mapped[str] = mapped_column(String(100), nullable=False)
    # 표시 순서 — 작을수록 먼저 (Ascending display order)
    seq: Mapped[int] = mapped_column(Integer, nullable=False, default=99)
    # 노출 여부
    is_show: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    authorities = relationship("Authority", back_populates="branch", cascade="all, delete-orphan")


class Menu(Base):
    """메뉴 모델.

    Menu model.

    Attributes:
        id: 고유 식별자 (Auto-increment identifier)
        title: 메뉴 이름 (Menu title)
        link: 메뉴 경로 (Menu route)
        seq: 표시 순서, 기본 99 (Display order)
        deleted_at: 소프트 삭제 일시 (Soft delete timestamp)
    """

    __tablename__ = "menus"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # 메뉴 이름 — 20자 이내
    title: Mapped[str] = mapped_column(String(20), nullable=False)
    # 메뉴 경로 — 20자 이내
    link: Mapped[str] = mapped_column(String(20), nullable=False)
    seq: Mapped[int] = mapped_column(Integer, nullable=False, default=99)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    authorities = relationship("Authority", back_populates="menu", cascade="all, delete-orphan")
