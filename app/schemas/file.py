"""파일 업로드 관련 Pydantic 응답 스키마 정의.

File upload response schemas. Each uploaded file reports its own
result so one failed upload does not hide the others.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class FileUploadResult(BaseModel):
    """파일별 업로드 결과.

    Attributes:
        originalname: 원본 파일명 (Client-side file name)
        url: 접근 URL — 실패 시 빈 문자열 (Access URL, empty on failure)
        result: 업로드 성공 여부 (Upload succeeded)
    """

    originalname: str
    url: str
    result: bool


class FileResponse(BaseModel):
    """파일 메타데이터 응답 스키마."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    branch_id: int
    originalname: str
    filename: str
    mimetype: str
    size: int
    storage: str
    path: str
    url: str
    last_accessed_at: datetime | None
    created_at: datetime
