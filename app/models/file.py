"""업로드 파일 메타데이터 SQLAlchemy ORM 모델 정의.

Uploaded file metadata model. ``branch_id`` is intentionally not a
foreign key: files survive branch deletion for audit purposes.

Tables:
    - files: 업로드 파일 (Uploaded file records)
"""

from datetime import datetime, timezone

from sqlalchemy import BigInteger, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base

# 저장소 종류 — Storage kinds
STORAGE_S3: str = "s3"
STORAGE_DISK: str = "disk"


class File(Base):
    """업로드 파일 모델.

    Attributes:
        id: 고유 식별자 (Auto-increment identifier)
        branch_id: 소속 지점 ID (Owning branch id, not enforced)
        originalname: 업로드 원본 파일명 (Client-side file name)
        filename: 생성된 고유 파일명 (Generated unique file name)
        mimetype: MIME 타입
        size: 바이트 크기 (Size in bytes)
        storage: 저장소 종류 s3 / disk (Storage kind)
        path: 저장 경로 접두사 (Storage path prefix)
        url: 접근 URL (Access URL)
        last_accessed_at: 마지막 조회 일시 (Last access timestamp)
        deleted_at: 소프트 삭제 일시 (Soft delete timestamp)
    """

    __tablename__ = "files"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    branch_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    originalname: Mapped[str] = mapped_column(String(255), nullable=False)
    # 생성 파일명 — uuid4 hex + 원본 확장자
    filename: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    mimetype: Mapped[str] = mapped_column(String(100), nullable=False)
    size: Mapped[int] = mapped_column(BigInteger, nullable=False)
    storage: Mapped[str] = mapped_column(String(10), nullable=False, default=STORAGE_S3)  # s3, disk
    path: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str] = mapped_column(String(500), nullable=False)
    last_accessed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
