"""FastAPI 애플리케이션 엔트리포인트 — 미들웨어, 예외 처리기, 라우터 등록.

FastAPI application entry point — Middleware, exception handlers and
router registration. Every error leaves the app in the common envelope
``{result: false, statusCode, request, timestamp, message: {error}}``.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.middleware.axiom_logging import AxiomLoggingMiddleware
from app.utils.response import error_response

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger: logging.Logger = logging.getLogger("app")

app: FastAPI = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Axiom API 로깅 미들웨어 — Axiom API request/response logging
# CORS보다 먼저 등록하여 모든 요청을 캡처 (Registered before CORS to capture all requests)
app.add_middleware(AxiomLoggingMiddleware)

# CORS 미들웨어 — Cross-Origin Resource Sharing middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# 예외 처리기 — Exception handlers
# ---------------------------------------------------------------------------


def _validation_message(exc: RequestValidationError) -> str:
    """검증 오류 목록을 하나의 메시지로 합칩니다.

    Join pydantic error messages; custom validator messages lose the
    "Value error, " prefix pydantic adds.
    """
    messages: list[str] = []
    for error in exc.errors():
        msg: str = str(error.get("msg", ""))
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        else:
            field: str = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
            msg = f"{field}: {msg}" if field else msg
        messages.append(msg)
    return ", ".join(messages)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(request, exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """요청 검증 실패 — 400으로 응답합니다."""
    return error_response(request, 400, _validation_message(exc))


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return error_response(request, 503, "일시적인 오류로 요청을 처리할 수 없습니다.")


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """처리되지 않은 예외 — 스택 트레이스는 로그에만 남깁니다."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(request, 500, "서버 내부 오류가 발생했습니다.")


@app.get("/health")
async def health_check() -> dict[str, str]:
    """서버 상태 확인 엔드포인트.

    Health check endpoint for load balancers and monitoring.
    """
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# 라우터 등록 — Router registration
# ---------------------------------------------------------------------------
from app.api.v1 import api_router  # noqa: E402

app.include_router(api_router, prefix="/api/v1")
