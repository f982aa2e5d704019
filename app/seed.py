"""초기 데이터 시드 스크립트 — 테이블, 관리자 계정, 기본 지점/메뉴 생성.

Seed script — Creates tables, the first admin member and a default
branch/menu pair granted to it. Run this once to bootstrap a database.

Usage:
    python -m app.seed

Creates:
    - 1개 관리자 계정: admin / Admin123! (1 admin member, email validated)
    - 1개 지점: "main" (1 branch)
    - 1개 메뉴: "dashboard" (1 menu)
    - 관리자 권한 1건 (admin × main × dashboard)
"""

import asyncio
import logging
from datetime import datetime, timezone

from sqlalchemy import select

from app.database import Base, async_session, engine
from app.models import Authority, Branch, Member, MemberRole, Menu
from app.utils.password import hash_password

logger: logging.Logger = logging.getLogger("app.seed")

ADMIN_LOGIN_ID: str = "admin"
ADMIN_PASSWORD: str = "Admin123!"
ADMIN_EMAIL: str = "admin@example.com"


async def seed() -> None:
    """데이터베이스를 초기 데이터로 시드합니다.

    Create tables if missing, then insert the admin member with one grant.

    Idempotent: 관리자 아이디가 이미 있으면 건너뜁니다 (Skips when the admin login id exists).
    """
    # 테이블 생성 — Create all tables from ORM metadata
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as db:
        result = await db.execute(select(Member).where(Member.login_id == ADMIN_LOGIN_ID))
        if result.scalar_one_or_none():
            logger.info("Already seeded. Skipping.")
            return

        admin: Member = Member(
            login_id=ADMIN_LOGIN_ID,
            email=ADMIN_EMAIL,
            username="관리자",
            password=hash_password(ADMIN_PASSWORD),
            role=MemberRole.ADMIN.value,
            email_validate_at=datetime.now(timezone.utc),
        )
        branch: Branch = Branch(name="main", title="본점", url="https://example.com", seq=1, is_show=True)
        menu: Menu = Menu(title="대시보드", link="dashboard", seq=1)
        db.add_all([admin, branch, menu])
        await db.flush()  # ID 생성 (Flush to generate ids)

        db.add(Authority(member_id=admin.id, branch_id=branch.id, menu_id=menu.id))
        await db.commit()

    logger.info("Seeded admin member: %s / %s", ADMIN_LOGIN_ID, ADMIN_PASSWORD)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(seed())
