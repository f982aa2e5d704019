"""테스트 인프라 — 임시 SQLite DB, 세션, httpx 클라이언트 픽스처.

Test infrastructure — Temporary database, session and httpx client fixtures.
Each test gets its own SQLite file (aiosqlite) with the schema created from
ORM metadata; set TEST_DATABASE_URL to run against another database.
Every request opens its own session, like production; fixtures commit
their rows so the app sees them.
"""

import os
from collections.abc import AsyncGenerator
from datetime import datetime, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.database import Base, get_db
from app.main import app
from app.models import Authority, Branch, Member, MemberRole, Menu
from app.utils.jwt import create_access_token
from app.utils.password import hash_password

ADMIN_PASSWORD = "Admin123!"
USER_PASSWORD = "User1234!"


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진. 테스트마다 새 스키마를 만듭니다."""
    url = os.environ.get("TEST_DATABASE_URL") or f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"
    eng = create_async_engine(url, echo=False)

    if eng.dialect.name == "sqlite":
        # FK 제약(ON DELETE CASCADE)은 SQLite에서 연결마다 켜야 함
        @event.listens_for(eng.sync_engine, "connect")
        def _sqlite_pragmas(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.close()

    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """픽스처 데이터 생성/검증용 세션."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — 요청마다 새 세션을 주입합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼 픽스처: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
async def create_member(
    db: AsyncSession,
    login_id: str,
    role: MemberRole,
    password: str = USER_PASSWORD,
    deleted: bool = False,
) -> Member:
    """멤버를 직접 삽입하고 커밋합니다."""
    now = datetime.now(timezone.utc)
    member = Member(
        login_id=login_id,
        email=f"{login_id}@test.com",
        username=login_id,
        password=hash_password(password),
        role=role.value,
        email_validate_at=now if role in (MemberRole.ADMIN, MemberRole.VERIFIED) else None,
        deleted_at=now if deleted else None,
    )
    db.add(member)
    await db.commit()
    await db.refresh(member)
    return member


@pytest_asyncio.fixture
async def admin_member(db: AsyncSession) -> Member:
    """관리자 멤버를 생성합니다."""
    return await create_member(db, "admin", MemberRole.ADMIN, password=ADMIN_PASSWORD)


@pytest_asyncio.fixture
async def user_member(db: AsyncSession) -> Member:
    """이메일 미인증 일반 멤버를 생성합니다."""
    return await create_member(db, "user1", MemberRole.USER)


@pytest_asyncio.fixture
async def deny_member(db: AsyncSession) -> Member:
    """차단된 멤버를 생성합니다."""
    return await create_member(db, "banned", MemberRole.DENY)


@pytest_asyncio.fixture
async def branches(db: AsyncSession) -> list[Branch]:
    """지점 3개를 생성합니다 (seq 역순으로 삽입)."""
    rows = [
        Branch(name="gangnam", title="강남점", url="https://gangnam.example.com", seq=3),
        Branch(name="hongdae", title="홍대점", url="https://hongdae.example.com", seq=1),
        Branch(name="jamsil", title="잠실점", url="https://jamsil.example.com", seq=2),
    ]
    db.add_all(rows)
    await db.commit()
    for row in rows:
        await db.refresh(row)
    return rows


@pytest_asyncio.fixture
async def menus(db: AsyncSession) -> list[Menu]:
    """메뉴 2개를 생성합니다."""
    rows = [
        Menu(title="공지사항", link="notice", seq=2),
        Menu(title="매출", link="sales", seq=1),
    ]
    db.add_all(rows)
    await db.commit()
    for row in rows:
        await db.refresh(row)
    return rows


async def grant(db: AsyncSession, member: Member, branch_ids: list[int], menu_ids: list[int]) -> None:
    """권한 행을 직접 삽입합니다."""
    db.add_all(
        Authority(member_id=member.id, branch_id=b, menu_id=m)
        for b in branch_ids
        for m in menu_ids
    )
    await db.commit()


def make_token(member: Member) -> str:
    """테스트용 JWT 액세스 토큰을 생성합니다."""
    return create_access_token({
        "id": member.id,
        "username": member.username,
        "role": member.role,
    })


@pytest.fixture
def admin_token(admin_member) -> str:
    return make_token(admin_member)


@pytest.fixture
def user_token(user_member) -> str:
    return make_token(user_member)


@pytest.fixture
def deny_token(deny_member) -> str:
    return make_token(deny_member)


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


async def reload(db: AsyncSession, model, record_id: int):
    """요청 이후 DB 상태를 다시 읽습니다 (identity map 무시)."""
    return await db.get(model, record_id, populate_existing=True)
