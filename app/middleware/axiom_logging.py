"""Axiom API 로깅 미들웨어.

Axiom API logging middleware.
Captures request/response data and sends structured logs to Axiom.
Logs: request line, query params, JSON body (or the size of a
multipart upload), status code, duration and the error reason taken from
the response envelope (message.error).
Sensitive fields (password, token, secret) are automatically masked.
"""

import json
import logging
import re
import time
from typing import Any

import jwt
from axiom_py import Client as AxiomClient
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.config import settings

logger: logging.Logger = logging.getLogger(__name__)

# 마스킹 대상 필드 패턴 — Fields to mask in request bodies
_SENSITIVE_KEYS = re.compile(
    r"(password|passwd|secret|token|authorization|api_key|apikey|credential)",
    re.IGNORECASE,
)

# 로깅 제외 경로 — Paths excluded from logging
_SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}

_MAX_ERROR_LEN: int = 500


def _mask_dict(data: Any, depth: int = 0) -> Any:
    """민감 필드 자동 마스킹 — Recursively mask sensitive fields in dicts/lists."""
    if depth > 5:
        return "..."
    if isinstance(data, dict):
        return {
            k: "***" if _SENSITIVE_KEYS.search(k) else _mask_dict(v, depth + 1)
            for k, v in data.items()
        }
    if isinstance(data, list):
        return [_mask_dict(item, depth + 1) for item in data[:20]]
    return data


def _error_from_envelope(data: Any) -> str:
    """오류 봉투에서 사유 추출 — Pull message.error out of the error envelope."""
    if isinstance(data, dict):
        message = data.get("message")
        if isinstance(message, dict) and "error" in message:
            return str(message["error"])
        if "detail" in data:
            return str(data["detail"])
    return str(data)


async def _read_request_body(request: Request) -> Any:
    """요청 본문 요약 — JSON은 마스킹, 멀티파트는 크기만 기록."""
    content_type: str = request.headers.get("content-type", "")
    if content_type.startswith("multipart/form-data"):
        # 업로드 스트림은 라우터가 읽어야 하므로 크기만 기록
        return {"multipart_bytes": int(request.headers.get("content-length", 0))}

    body_bytes: bytes = await request.body()
    if not body_bytes:
        return None
    try:
        return _mask_dict(json.loads(body_bytes))
    except (json.JSONDecodeError, UnicodeDecodeError):
        return "(non-json body)"


def _member_id_from(request: Request) -> int | None:
    """Bearer 토큰의 멤버 ID (검증 없이 식별 용도로만 사용)."""
    auth: str = request.headers.get("authorization", "")
    if not auth.lower().startswith("bearer "):
        return None
    try:
        payload = jwt.decode(auth[7:], options={"verify_signature": False})
    except jwt.PyJWTError:
        return None
    member_id = payload.get("id")
    return member_id if isinstance(member_id, int) else None


class AxiomLoggingMiddleware(BaseHTTPMiddleware):
    """모든 API 요청/응답을 Axiom에 로깅하는 미들웨어.

    Middleware that logs all API requests and responses to Axiom.
    Passes requests straight through when Axiom is not configured.
    """

    def __init__(self, app: Any) -> None:
        super().__init__(app)
        self._client: AxiomClient | None = None
        self._dataset: str = settings.AXIOM_DATASET

        if settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET:
            self._client = AxiomClient(token=settings.AXIOM_API_TOKEN)

    async def _error_detail(self, response: Response) -> tuple[Response, str]:
        """에러 응답 본문을 읽어 사유를 꺼내고, 소비한 본문으로 응답을 다시 만듭니다."""
        resp_body = b""
        async for chunk in response.body_iterator:
            resp_body += chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")

        try:
            detail: str = _error_from_envelope(json.loads(resp_body))
        except (json.JSONDecodeError, UnicodeDecodeError):
            detail = resp_body.decode("utf-8", errors="replace")
        if len(detail) > _MAX_ERROR_LEN:
            detail = detail[:_MAX_ERROR_LEN] + "..."

        rebuilt = Response(
            content=resp_body,
            status_code=response.status_code,
            headers=dict(response.headers),
            media_type=response.media_type,
        )
        return rebuilt, detail

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # 제외 경로 또는 Axiom 미설정시 패스스루 — Pass through skipped paths or when unconfigured
        if request.url.path in _SKIP_PATHS or not self._client:
            return await call_next(request)

        start_time: float = time.time()
        log_event: dict[str, Any] = {
            "request": f"{request.method} {request.url.path}",
            "method": request.method,
            "path": request.url.path,
            "status_code": 500,
        }
        if request.query_params:
            log_event["query_params"] = _mask_dict(dict(request.query_params))
        member_id: int | None = _member_id_from(request)
        if member_id is not None:
            log_event["member_id"] = member_id
        if request.method in ("POST", "PUT", "PATCH"):
            request_body: Any = await _read_request_body(request)
            if request_body is not None:
                log_event["request_body"] = request_body

        try:
            response = await call_next(request)
            log_event["status_code"] = response.status_code
            if response.status_code >= 400:
                response, log_event["error"] = await self._error_detail(response)
        except Exception as exc:
            log_event["error"] = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            log_event["duration_ms"] = round((time.time() - start_time) * 1000, 2)
            try:
                self._client.ingest_events(self._dataset, [log_event])
            except Exception:
                # 로깅 실패가 요청 처리에 영향주지 않도록 — Never break a request on log failure
                logger.exception("Axiom ingest failed")

        return response
