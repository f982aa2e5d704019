"""스토리지 서비스 — S3 또는 로컬 파일 저장.

Storage Service — Object storage on S3, or on local disk when AWS keys
are empty. boto3 calls are blocking, so each one runs in a worker thread
to keep the event loop free.
"""

import asyncio
import logging
import os
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from app.config import settings
from app.models.file import STORAGE_DISK, STORAGE_S3

logger: logging.Logger = logging.getLogger(__name__)

# 로컬 업로드 디렉토리 — .env의 LOCAL_UPLOADS_DIR 또는 <project>/uploads/
_SERVER_ROOT: Path = Path(__file__).resolve().parent.parent.parent
UPLOADS_DIR: Path = Path(settings.LOCAL_UPLOADS_DIR) if settings.LOCAL_UPLOADS_DIR else _SERVER_ROOT / "uploads"


class StorageService:
    """파일 저장 서비스 — S3 또는 로컬 모드 자동 선택."""

    def __init__(self) -> None:
        self._client = None

    @property
    def is_local(self) -> bool:
        return not settings.AWS_ACCESS_KEY_ID or not settings.AWS_S3_BUCKET

    @property
    def kind(self) -> str:
        """저장소 종류 — s3 또는 disk (Storage kind recorded on file rows)."""
        return STORAGE_DISK if self.is_local else STORAGE_S3

    @property
    def client(self):
        if self.is_local:
            return None
        if self._client is None:
            import boto3
            from botocore.config import Config as BotoConfig

            self._client = boto3.client(
                "s3",
                region_name=settings.AWS_S3_REGION,
                aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
                aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
                config=BotoConfig(signature_version="s3v4"),
            )
        return self._client

    def branch_path(self, branch_id: int) -> str:
        """지점/날짜별 저장 경로 — <UPLOAD_S3_PATH>/<branch_id>/<YYYYMMDD>."""
        date_prefix: str = datetime.now(timezone.utc).strftime("%Y%m%d")
        return f"{settings.UPLOAD_S3_PATH.strip('/')}/{branch_id}/{date_prefix}"

    def generate_filename(self, originalname: str) -> str:
        """충돌 없는 파일명 — uuid4 hex + 원본 확장자."""
        ext: str = os.path.splitext(originalname)[1].lower()
        return f"{uuid.uuid4().hex}{ext}"

    def url_for(self, key: str) -> str:
        if self.is_local:
            return f"{settings.PUBLIC_BASE_URL.rstrip('/')}/uploads/{key}"
        return f"https://{settings.AWS_S3_BUCKET}.s3.{settings.AWS_S3_REGION}.amazonaws.com/{key}"

    # --- 로컬 디스크 (Local disk) ---

    def _save_local(self, key: str, data: bytes) -> None:
        path = UPLOADS_DIR / key
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    def _list_local(self, prefix: str, max_keys: int) -> list[str]:
        root = UPLOADS_DIR / prefix
        if not root.exists():
            return []
        keys = sorted(str(p.relative_to(UPLOADS_DIR)) for p in root.rglob("*") if p.is_file())
        return keys[:max_keys]

    def _delete_local(self, key: str) -> bool:
        path = UPLOADS_DIR / key
        if not path.exists():
            logger.warning("Local object not found: key=%s", key)
            return False
        path.unlink()
        return True

    # --- 공개 API (Public API) ---

    async def put_object(self, key: str, data: bytes, content_type: str) -> dict[str, Any]:
        """객체를 업로드하고 상태 코드와 URL을 반환합니다.

        Upload one object.

        Args:
            key: 저장 키 (Object key)
            data: 파일 바이트 (File bytes)
            content_type: MIME 타입 (Content type)

        Returns:
            dict[str, Any]: {"status": HTTP 상태 코드, "url": 접근 URL}

        Raises:
            botocore.exceptions.ClientError / BotoCoreError: S3 호출 실패
            OSError: 로컬 저장 실패 (Local write failed)
        """
        if self.is_local:
            await asyncio.to_thread(self._save_local, key, data)
            return {"status": 200, "url": self.url_for(key)}

        response = await asyncio.to_thread(
            self.client.put_object,
            Bucket=settings.AWS_S3_BUCKET,
            Key=key,
            Body=data,
            ContentType=content_type,
        )
        status: int = response["ResponseMetadata"]["HTTPStatusCode"]
        return {"status": status, "url": self.url_for(key)}

    async def list_objects(self, prefix: str, max_keys: int = 1000) -> list[str]:
        """접두사로 객체 키 목록을 조회합니다."""
        if self.is_local:
            return await asyncio.to_thread(self._list_local, prefix, max_keys)

        response = await asyncio.to_thread(
            self.client.list_objects_v2,
            Bucket=settings.AWS_S3_BUCKET,
            Prefix=prefix,
            MaxKeys=max_keys,
        )
        return [item["Key"] for item in response.get("Contents", [])]

    async def delete_object(self, key: str, version_id: str | None = None) -> dict[str, Any]:
        """객체를 삭제합니다.

        Returns:
            dict[str, Any]: {"status", "delete_marker", "version_id"}
        """
        if self.is_local:
            removed: bool = await asyncio.to_thread(self._delete_local, key)
            return {"status": 204 if removed else 404, "delete_marker": False, "version_id": None}

        params: dict[str, str] = {"Bucket": settings.AWS_S3_BUCKET, "Key": key}
        if version_id:
            params["VersionId"] = version_id
        response = await asyncio.to_thread(self.client.delete_object, **params)
        logger.info("S3 object deleted: key=%s version=%s", key, response.get("VersionId"))
        return {
            "status": response["ResponseMetadata"]["HTTPStatusCode"],
            "delete_marker": response.get("DeleteMarker", False),
            "version_id": response.get("VersionId"),
        }


storage_service: StorageService = StorageService()
