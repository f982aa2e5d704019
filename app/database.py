"""데이터베이스 엔진 및 세션 설정 모듈.

Database engine and session configuration module.
Sets up the async SQLAlchemy engine, session factory, ORM base class
and the transaction helper shared by every multi-statement service call.
"""

import logging
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, AsyncEngine, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from app.config import settings
from app.utils.exceptions import DuplicateError, ServiceUnavailableError

logger: logging.Logger = logging.getLogger(__name__)

_engine_kwargs: dict[str, Any] = {"echo": settings.DEBUG, "pool_pre_ping": True}
if settings.DATABASE_URL.startswith("postgresql+asyncpg"):
    # 트랜잭션 모드 풀러에서 prepared statement 비활성화
    # Disable prepared statement caches for transaction-mode pooling
    _engine_kwargs.update(pool_size=5, max_overflow=10, connect_args={"statement_cache_size": 0})

# 비동기 데이터베이스 엔진 — Async database engine
engine: AsyncEngine = create_async_engine(settings.DATABASE_URL, **_engine_kwargs)

# 비동기 세션 팩토리 — Async session factory
# expire_on_commit=False: 커밋 후에도 객체 속성 접근 가능 (Allows attribute access after commit without refresh)
async_session: async_sessionmaker[AsyncSession] = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """SQLAlchemy 선언적 베이스 클래스.

    Declarative base class for all ORM models.
    """

    pass


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """비동기 데이터베이스 세션을 생성하고 요청 종료 시 닫습니다.

    FastAPI dependency that yields an async database session.
    The session is automatically closed after the request completes.

    Yields:
        AsyncSession: SQLAlchemy 비동기 세션 인스턴스 (Async session instance)
    """
    async with async_session() as session:
        try:
            yield session
        finally:
            await session.close()


@asynccontextmanager
async def transaction(db: AsyncSession) -> AsyncIterator[AsyncSession]:
    """블록 전체를 하나의 트랜잭션으로 묶습니다. 실패 시 롤백 후 오류 분류를 유지합니다.

    Run the enclosed block as one unit of work.
    Commits on success. On failure the session is rolled back and the error
    is re-raised with its classification preserved:

        - HTTPException (validation / not found / conflict): re-raised as is
        - IntegrityError: unique or FK violation, surfaced as 409
        - other SQLAlchemyError: re-raised for the global 503 handler
        - anything else: wrapped into ServiceUnavailableError

    Args:
        db: 비동기 DB 세션 (Async database session)

    Yields:
        AsyncSession: 같은 세션 (The same session)

    Raises:
        DuplicateError: 제약 조건 위반 (Constraint violation)
        ServiceUnavailableError: 예기치 못한 오류 (Unexpected failure)
    """
    try:
        yield db
        await db.commit()
    except HTTPException:
        await db.rollback()
        raise
    except IntegrityError as exc:
        await db.rollback()
        logger.warning("Integrity violation rolled back: %s", exc.orig)
        raise DuplicateError("이미 존재하는 데이터입니다.") from exc
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Database error inside transaction")
        raise
    except Exception as exc:
        await db.rollback()
        logger.exception("Unexpected error inside transaction")
        raise ServiceUnavailableError() from exc
