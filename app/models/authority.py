"""권한(Authority) SQLAlchemy ORM 모델 정의.

Authority join model: "this member may access this menu within this branch".

Tables:
    - authorities: 멤버 × 지점 × 메뉴 권한 (Member × branch × menu grants)
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class Authority(Base):
    """권한 모델 — (member_id, branch_id, menu_id) 삼중 키로 고유.

    Authority grant. Unique per (member_id, branch_id, menu_id).
    Rows are hard-deleted together with any of the three parents
    (FK ON DELETE CASCADE plus ORM delete-orphan cascade).

    Attributes:
        id: 고유 식별자 (Auto-increment identifier)
        member_id: 멤버 FK
        branch_id: 지점 FK
        menu_id: 메뉴 FK
    """

    __tablename__ = "authorities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    member_id: Mapped[int] = mapped_column(Integer, ForeignKey("members.id", ondelete="CASCADE"), nullable=False)
    branch_id: Mapped[int] = mapped_column(Integer, ForeignKey("branches.id", ondelete="CASCADE"), nullable=False)
    menu_id: Mapped[int] = mapped_column(Integer, ForeignKey("menus.id", ondelete="CASCADE"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    member = relationship("Member", back_populates="authorities")
    branch = relationship("Branch", back_populates="authorities")
    menu = relationship("Menu", back_populates="authorities")

    __table_args__ = (
        UniqueConstraint("member_id", "branch_id", "menu_id", name="uq_authority_member_branch_menu"),
        Index("ix_authorities_member", "member_id"),
        Index("ix_authorities_member_branch", "member_id", "branch_id"),
    )
