"""파일 서비스 — 지점별 다중 파일 업로드 및 메타데이터 관리.

File Service — Uploads files for a branch in parallel and records the
metadata of the successful ones. A failed upload is reported per file
and never aborts its siblings.
"""

import asyncio
import logging
import os
from datetime import datetime, timezone
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.file import File
from app.repositories.file_repository import file_repository
from app.schemas.common import AffectedRowsResponse, PaginatedResponse
from app.schemas.file import FileResponse, FileUploadResult
from app.services.branch_service import branch_service
from app.services.storage_service import storage_service
from app.utils.exceptions import BadRequestError, NotFoundError
from app.utils.pagination import PageParams, to_page

DEFAULT_MIMETYPE: str = "application/octet-stream"


class FileService:
    """파일 업로드 비즈니스 로직을 처리하는 서비스."""

    def __init__(self, logger: logging.Logger) -> None:
        self.logger: logging.Logger = logger

    async def _upload_one(self, path: str, upload: UploadFile) -> dict[str, Any] | None:
        """파일 하나를 저장소에 올립니다. 실패하면 None을 반환합니다.

        Upload one file. Returns the row values on success, None when the
        storage call raised or reported a non-200 status.
        """
        originalname: str = upload.filename or "file"
        filename: str = storage_service.generate_filename(originalname)
        key: str = f"{path}/{filename}"
        mimetype: str = upload.content_type or DEFAULT_MIMETYPE

        try:
            data: bytes = await upload.read()
            stored: dict[str, Any] = await storage_service.put_object(key, data, mimetype)
        except (ClientError, BotoCoreError, OSError):
            self.logger.exception("File upload failed: key=%s", key)
            return None

        if stored["status"] != 200:
            self.logger.warning("File upload rejected: key=%s status=%s", key, stored["status"])
            return None

        return {
            "originalname": originalname,
            "filename": filename,
            "mimetype": mimetype,
            "size": len(data),
            "storage": storage_service.kind,
            "path": path,
            "url": stored["url"],
        }

    async def upload_files(
        self,
        db: AsyncSession,
        branch_id: int,
        files: list[UploadFile],
    ) -> list[FileUploadResult]:
        """지점에 파일들을 업로드합니다.

        Upload every file concurrently, then persist metadata rows for the
        successful ones only.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            branch_id: 대상 지점 ID (Target branch id)
            files: 업로드 파일 목록 (Uploaded files)

        Returns:
            list[FileUploadResult]: 요청 순서대로의 파일별 결과 (Per-file results in request order)

        Raises:
            BadRequestError: 파일 없음 또는 지점 없음 (No files, or branch missing/deleted)
        """
        if not files:
            raise BadRequestError("업로드할 파일이 없습니다.")
        # 저장소 호출 전에 지점부터 확인
        if not await branch_service.is_branch_exists(db, branch_id):
            raise BadRequestError("지점이 삭제되었거나 존재하지 않습니다.")

        path: str = storage_service.branch_path(branch_id)
        uploaded: list[dict[str, Any] | None] = await asyncio.gather(
            *(self._upload_one(path, f) for f in files)
        )

        rows: list[dict[str, Any]] = [{"branch_id": branch_id, **row} for row in uploaded if row is not None]
        await file_repository.bulk_create(db, rows)
        self.logger.info(
            "Files uploaded: branch_id=%d ok=%d failed=%d", branch_id, len(rows), len(files) - len(rows)
        )

        return [
            FileUploadResult(
                originalname=row["originalname"] if row else (f.filename or "file"),
                url=row["url"] if row else "",
                result=row is not None,
            )
            for f, row in zip(files, uploaded)
        ]

    async def list_files(self, db: AsyncSession, branch_id: int, params: PageParams) -> PaginatedResponse:
        """지점의 활성 파일 목록을 페이지 단위로 조회합니다."""
        items, total = await file_repository.get_page_by_branch(db, branch_id, params)
        return to_page([FileResponse.model_validate(f) for f in items], total, params)

    async def get_file(self, db: AsyncSession, file_id: int) -> FileResponse:
        """파일 메타데이터를 조회하고 마지막 조회 일시를 갱신합니다.

        Raises:
            NotFoundError: 파일 없음 (File not found or deleted)
        """
        file: File | None = await file_repository.get_by_id(db, file_id)
        if file is None:
            raise NotFoundError("파일이 존재하지 않습니다.")
        file.last_accessed_at = datetime.now(timezone.utc)
        await db.flush()
        return FileResponse.model_validate(file)

    async def remove_file(self, db: AsyncSession, file_id: int) -> tuple[AffectedRowsResponse, str]:
        """파일을 소프트 삭제하고 지울 저장소 키를 돌려줍니다.

        Soft-delete the row. The stored object is removed by the caller
        with ``delete_stored_object`` once the transaction has committed.

        Returns:
            tuple[AffectedRowsResponse, str]: 결과와 저장소 키 (Result and storage key)
        """
        file: File | None = await file_repository.get_by_id(db, file_id)
        if file is None:
            raise NotFoundError("파일이 존재하지 않습니다.")

        affected: int = await file_repository.soft_delete(db, file_id)
        key: str = f"{file.path}/{os.path.basename(file.filename)}"
        return AffectedRowsResponse(affectedRows=affected), key

    async def delete_stored_object(self, key: str) -> None:
        """저장소 객체를 삭제합니다. 실패는 로그만 남기고 행은 삭제 상태로 둡니다."""
        try:
            await storage_service.delete_object(key)
        except (ClientError, BotoCoreError, OSError):
            self.logger.exception("Stored object delete failed: key=%s", key)


file_service: FileService = FileService(logging.getLogger("app.services.file"))
