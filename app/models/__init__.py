"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for Alembic migrations and
relationship resolution.

Modules:
    member: 멤버 및 역할 (Member and MemberRole)
    branch: 지점과 메뉴 (Branch and Menu)
    authority: 멤버 × 지점 × 메뉴 권한 (Authority grants)
    file: 업로드 파일 메타데이터 (Uploaded file records)
"""

from app.models.member import Member, MemberRole
from app.models.branch import Branch, Menu
from app.models.authority import Authority
from app.models.file import File

__all__ = [
    "Member", "MemberRole",
    "Branch", "Menu",
    "Authority",
    "File",
]
