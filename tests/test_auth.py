"""인증 API 테스트 — 로그인, 토큰 갱신, 이메일 인증, 액세스 토큰 검사.

Auth API tests — Login, refresh, email validation and the bearer token
dependency, including expired and mismatched token edge cases.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import jwt
from httpx import AsyncClient

from app.config import settings
from app.models import Member, MemberRole
from app.utils import jwt as tokens
from app.utils.email import EmailResult
from tests.conftest import ADMIN_PASSWORD, USER_PASSWORD, auth_header, create_member, make_token, reload

URL = "/api/v1/members"


def _expired(payload: dict, secret: str, token_type: str) -> str:
    return jwt.encode(
        {**payload, "type": token_type, "exp": datetime.now(timezone.utc) - timedelta(minutes=1)},
        secret,
        algorithm=settings.JWT_ALGORITHM,
    )


# ===== Login =====

class TestLogin:
    """로그인 테스트."""

    async def test_login_success(self, client: AsyncClient, db, admin_member):
        res = await client.post(f"{URL}/login", json={"login_id": "admin", "password": ADMIN_PASSWORD})
        assert res.status_code == 200
        message = res.json()["message"]

        payload = tokens.decode_token(message["access_token"])
        assert payload["id"] == admin_member.id
        assert payload["username"] == "admin"
        assert payload["role"] == "admin"

        # 리프레시 토큰은 멤버 행에 저장됨
        assert (await reload(db, Member, admin_member.id)).refresh_token == message["refresh_token"]

    async def test_login_issues_distinct_refresh_tokens(self, client: AsyncClient, admin_member):
        body = {"login_id": "admin", "password": ADMIN_PASSWORD}
        first = (await client.post(f"{URL}/login", json=body)).json()["message"]["refresh_token"]
        second = (await client.post(f"{URL}/login", json=body)).json()["message"]["refresh_token"]
        assert first != second

    async def test_login_wrong_password(self, client: AsyncClient, admin_member):
        res = await client.post(f"{URL}/login", json={"login_id": "admin", "password": "Wrong123!"})
        assert res.status_code == 401
        assert res.json()["message"]["error"] == "패스워드가 일치하지 않습니다."

    async def test_login_password_over_byte_limit(self, client: AsyncClient, admin_member):
        """72바이트를 넘는 비밀번호는 불일치로 처리합니다."""
        res = await client.post(f"{URL}/login", json={"login_id": "admin", "password": "A" * 80})
        assert res.status_code == 401
        assert res.json()["message"]["error"] == "패스워드가 일치하지 않습니다."

    async def test_login_unknown_member(self, client: AsyncClient):
        res = await client.post(f"{URL}/login", json={"login_id": "nobody", "password": "Whatever1!"})
        assert res.status_code == 400
        assert res.json()["message"]["error"] == "멤버가 존재하지 않습니다."

    async def test_login_banned_member(self, client: AsyncClient, deny_member):
        res = await client.post(f"{URL}/login", json={"login_id": "banned", "password": USER_PASSWORD})
        assert res.status_code == 403


# ===== Refresh =====

class TestRefresh:
    """액세스 토큰 재발급 테스트."""

    async def test_refresh_success(self, client: AsyncClient, db, user_member):
        login = await client.post(f"{URL}/login", json={"login_id": "user1", "password": USER_PASSWORD})
        refresh_token = login.json()["message"]["refresh_token"]

        res = await client.post(f"{URL}/refresh", json={"id": user_member.id, "refresh_token": refresh_token})
        assert res.status_code == 200
        message = res.json()["message"]
        assert set(message) == {"access_token"}
        assert tokens.decode_token(message["access_token"])["id"] == user_member.id

        # 저장된 리프레시 토큰은 그대로
        assert (await reload(db, Member, user_member.id)).refresh_token == refresh_token

    async def test_refresh_mismatch(self, client: AsyncClient, user_member):
        await client.post(f"{URL}/login", json={"login_id": "user1", "password": USER_PASSWORD})
        other = tokens.create_refresh_token(user_member.id)

        res = await client.post(f"{URL}/refresh", json={"id": user_member.id, "refresh_token": other})
        assert res.status_code == 401
        assert res.json()["message"]["error"] == "리프레시 토큰이 일치하지 않습니다."

    async def test_refresh_without_stored_token(self, client: AsyncClient, user_member):
        token = tokens.create_refresh_token(user_member.id)
        res = await client.post(f"{URL}/refresh", json={"id": user_member.id, "refresh_token": token})
        assert res.status_code == 401

    async def test_refresh_expired(self, client: AsyncClient, db, user_member):
        expired = _expired({"id": user_member.id, "jti": "x"}, settings.JWT_REFRESH_SECRET, tokens.REFRESH)
        member = await reload(db, Member, user_member.id)
        member.refresh_token = expired
        await db.commit()

        res = await client.post(f"{URL}/refresh", json={"id": user_member.id, "refresh_token": expired})
        assert res.status_code == 401
        assert res.json()["message"]["error"] == "리프레시 토큰이 만료되었습니다. 다시 로그인해주세요."

    async def test_refresh_unknown_member(self, client: AsyncClient):
        res = await client.post(f"{URL}/refresh", json={"id": 9999, "refresh_token": "whatever"})
        assert res.status_code == 400


# ===== Email validation =====

class TestEmailValidation:
    """이메일 인증 메일 발송 및 링크 확인 테스트."""

    async def test_send_validation(self, client: AsyncClient, user_member, user_token):
        sent = EmailResult(accepted=["user1@test.com"], rejected=[], response="250 OK")
        with patch(
            "app.services.member_service.notification_service.send_validation_email",
            new_callable=AsyncMock,
            return_value=sent,
        ) as send:
            res = await client.post(
                f"{URL}/validation",
                json={"email": "user1@test.com", "username": "user1"},
                headers=auth_header(user_token),
            )

        assert res.status_code == 200
        assert res.json()["message"] == {"accepted": ["user1@test.com"], "rejected": [], "response": "250 OK"}
        email, username, link = send.await_args.args
        assert (email, username) == ("user1@test.com", "user1")
        assert "/api/v1/members/validate/" in link

        token = link.rsplit("/", 1)[1]
        assert tokens.decode_token(token, tokens.EMAIL)["id"] == user_member.id

    async def test_send_validation_without_smtp(self, client: AsyncClient, user_token, monkeypatch):
        """SMTP 미설정 시 발송을 건너뛰고 수신자를 거부 목록에 담습니다."""
        monkeypatch.setattr(settings, "SMTP_HOST", "")
        res = await client.post(
            f"{URL}/validation",
            json={"email": "user1@test.com", "username": "user1"},
            headers=auth_header(user_token),
        )
        assert res.status_code == 200
        assert res.json()["message"]["rejected"] == ["user1@test.com"]

    async def test_send_validation_unknown_pair(self, client: AsyncClient, user_token):
        res = await client.post(
            f"{URL}/validation",
            json={"email": "user1@test.com", "username": "someone"},
            headers=auth_header(user_token),
        )
        assert res.status_code == 400

    async def test_send_validation_banned(self, client: AsyncClient, deny_token):
        res = await client.post(
            f"{URL}/validation",
            json={"email": "banned@test.com", "username": "banned"},
            headers=auth_header(deny_token),
        )
        assert res.status_code == 403

    async def test_validate_email(self, client: AsyncClient, db, user_member):
        token = tokens.create_email_token(user_member.id)
        res = await client.get(f"{URL}/validate/{token}")
        assert res.status_code == 200
        assert res.json()["message"] == {"affectedRows": 1}

        member = await reload(db, Member, user_member.id)
        assert member.role == "verified"
        assert member.email_validate_at is not None

    async def test_validate_email_keeps_deny(self, client: AsyncClient, db, deny_member):
        token = tokens.create_email_token(deny_member.id)
        res = await client.get(f"{URL}/validate/{token}")
        assert res.status_code == 200

        member = await reload(db, Member, deny_member.id)
        assert member.role == "deny"
        assert member.email_validate_at is not None

    async def test_validate_email_rejects_access_token(self, client: AsyncClient, user_member):
        res = await client.get(f"{URL}/validate/{make_token(user_member)}")
        assert res.status_code == 401

    async def test_validate_email_expired(self, client: AsyncClient, user_member):
        token = _expired({"id": user_member.id}, settings.JWT_EMAIL_SECRET, tokens.EMAIL)
        res = await client.get(f"{URL}/validate/{token}")
        assert res.status_code == 401
        assert res.json()["message"]["error"] == "jwt 토큰이 만료되었습니다."


# ===== Bearer token dependency =====

class TestAccessToken:
    """액세스 토큰 검사 테스트."""

    async def test_expired_access_token(self, client: AsyncClient, admin_member):
        token = _expired(
            {"id": admin_member.id, "username": "admin", "role": "admin"},
            settings.JWT_ACCESS_SECRET,
            tokens.ACCESS,
        )
        res = await client.get(f"{URL}/count", headers=auth_header(token))
        assert res.status_code == 401
        assert res.json()["message"]["error"] == "jwt 토큰이 만료되었습니다."

    async def test_refresh_token_as_access_token(self, client: AsyncClient, admin_member):
        token = tokens.create_refresh_token(admin_member.id)
        res = await client.get(f"{URL}/count", headers=auth_header(token))
        assert res.status_code == 401

    async def test_malformed_token(self, client: AsyncClient):
        res = await client.get(f"{URL}/count", headers=auth_header("not-a-jwt"))
        assert res.status_code == 401
        assert res.json()["message"]["error"] == "jwt 토큰의 형식이 올바르지 않습니다."

    async def test_deleted_member_token(self, client: AsyncClient, db):
        ghost = await create_member(db, "ghost", MemberRole.ADMIN, deleted=True)
        res = await client.get(f"{URL}/count", headers=auth_header(make_token(ghost)))
        assert res.status_code == 401

    async def test_role_read_from_database(self, client: AsyncClient, db, admin_member, admin_token):
        """토큰 발급 후 강등된 관리자는 관리자 API를 쓸 수 없습니다."""
        member = await reload(db, Member, admin_member.id)
        member.role = MemberRole.USER.value
        await db.commit()

        res = await client.get(f"{URL}/count", headers=auth_header(admin_token))
        assert res.status_code == 403
