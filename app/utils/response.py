"""응답 봉투(envelope) 유틸리티.

Response envelope helpers. Every success body is
``{result: true, statusCode, request: "<METHOD> <path>", timestamp, message}``
and every error body is ``{result: false, ..., message: {error}}``.
"""

from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """공통 응답 봉투.

    Attributes:
        result: 성공 여부 (Success flag)
        statusCode: HTTP 상태 코드 (HTTP status code)
        request: "<METHOD> <path>" 형태의 요청 식별자 (Request line)
        timestamp: 응답 생성 시각 ISO-8601 (Response timestamp)
        message: 실제 페이로드 (Payload)
    """

    model_config = ConfigDict(populate_by_name=True)

    result: bool
    statusCode: int
    request: str
    timestamp: str
    message: T


def _request_line(request: Request) -> str:
    return f"{request.method} {request.url.path}"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def ok(request: Request, message: T, status_code: int = 200) -> ApiResponse[T]:
    """성공 응답을 봉투로 감쌉니다.

    Args:
        request: 현재 요청 (Current request)
        message: 페이로드 (Payload)
        status_code: 라우트의 상태 코드와 같은 값 (Same code the route returns)
    """
    return ApiResponse[Any](
        result=True,
        statusCode=status_code,
        request=_request_line(request),
        timestamp=_now(),
        message=message,
    )


def error_response(request: Request, status_code: int, error: str, headers: dict[str, str] | None = None) -> JSONResponse:
    """오류 응답 봉투를 JSONResponse로 만듭니다."""
    body: dict[str, Any] = {
        "result": False,
        "statusCode": status_code,
        "request": _request_line(request),
        "timestamp": _now(),
        "message": {"error": error},
    }
    return JSONResponse(status_code=status_code, content=body, headers=headers)
