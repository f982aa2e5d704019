"""지점 API 테스트 — 생성, 목록, 수정, 소프트 삭제/복구, 권한 기준 목록.

Branch API tests — CRUD, soft delete / restore, authority-scoped listing
and the cascade of grants when a branch row is hard-deleted.
"""

from httpx import AsyncClient
from sqlalchemy import delete, func, select

from app.models import Authority, Branch
from tests.conftest import auth_header, grant, reload

URL = "/api/v1/branches"


class TestBranchCreate:
    """지점 생성 테스트."""

    async def test_create_branch(self, client: AsyncClient, admin_token):
        res = await client.post(URL, json={
            "name": "seongsu",
            "title": "성수점",
            "url": "https://seongsu.example.com",
        }, headers=auth_header(admin_token))
        assert res.status_code == 201
        branch = res.json()["message"]
        assert branch["name"] == "seongsu"
        assert branch["seq"] == 99
        assert branch["is_show"] is False
        assert branch["deleted_at"] is None

    async def test_create_branch_relative_url(self, client: AsyncClient, admin_token):
        res = await client.post(URL, json={
            "name": "seongsu", "title": "성수점", "url": "seongsu.example.com",
        }, headers=auth_header(admin_token))
        assert res.status_code == 400
        assert res.json()["message"]["error"] == "URL은 https 를 포함한 전체 경로를 입력해주세요."

    async def test_create_branch_name_too_long(self, client: AsyncClient, admin_token):
        res = await client.post(URL, json={
            "name": "x" * 21, "title": "성수점", "url": "https://seongsu.example.com",
        }, headers=auth_header(admin_token))
        assert res.status_code == 400

    async def test_create_branch_user_forbidden(self, client: AsyncClient, user_token):
        res = await client.post(URL, json={
            "name": "seongsu", "title": "성수점", "url": "https://seongsu.example.com",
        }, headers=auth_header(user_token))
        assert res.status_code == 403


class TestBranchList:
    """지점 목록 테스트."""

    async def test_list_sorted_by_seq(self, client: AsyncClient, admin_token, branches):
        res = await client.get(URL, headers=auth_header(admin_token))
        assert res.status_code == 200
        assert [b["name"] for b in res.json()["message"]] == ["hongdae", "jamsil", "gangnam"]

    async def test_list_deleted(self, client: AsyncClient, admin_token, branches):
        await client.delete(f"{URL}/{branches[1].id}", headers=auth_header(admin_token))

        res = await client.get(URL, headers=auth_header(admin_token))
        assert [b["name"] for b in res.json()["message"]] == ["jamsil", "gangnam"]

        res = await client.get(f"{URL}/deleted", headers=auth_header(admin_token))
        deleted = res.json()["message"]
        assert [b["name"] for b in deleted] == ["hongdae"]
        assert deleted[0]["deleted_at"] is not None


class TestBranchUpdate:
    """지점 수정 테스트."""

    async def test_update_branch(self, client: AsyncClient, db, admin_token, branches):
        res = await client.patch(
            f"{URL}/{branches[0].id}", json={"title": "강남본점", "is_show": True}, headers=auth_header(admin_token)
        )
        assert res.status_code == 200
        assert res.json()["message"] == {"affectedRows": 1}

        branch = await reload(db, Branch, branches[0].id)
        assert branch.title == "강남본점"
        assert branch.is_show is True

    async def test_update_empty_payload(self, client: AsyncClient, admin_token, branches):
        res = await client.patch(f"{URL}/{branches[0].id}", json={}, headers=auth_header(admin_token))
        assert res.status_code == 400

    async def test_update_missing_branch(self, client: AsyncClient, admin_token):
        res = await client.patch(f"{URL}/9999", json={"title": "없음"}, headers=auth_header(admin_token))
        assert res.status_code == 400
        assert res.json()["message"]["error"] == "지점이 존재하지 않습니다."

    async def test_update_deleted_branch(self, client: AsyncClient, admin_token, branches):
        await client.delete(f"{URL}/{branches[0].id}", headers=auth_header(admin_token))
        res = await client.patch(f"{URL}/{branches[0].id}", json={"title": "x"}, headers=auth_header(admin_token))
        assert res.status_code == 400


class TestBranchRemoveRestore:
    """지점 삭제/복구 테스트."""

    async def test_remove_and_restore(self, client: AsyncClient, db, admin_token, branches):
        res = await client.delete(f"{URL}/{branches[0].id}", headers=auth_header(admin_token))
        assert res.status_code == 200
        assert res.json()["message"] == {"affectedRows": 1}
        assert (await reload(db, Branch, branches[0].id)).deleted_at is not None

        res = await client.delete(f"{URL}/{branches[0].id}", headers=auth_header(admin_token))
        assert res.status_code == 400

        res = await client.patch(f"{URL}/{branches[0].id}/restore", headers=auth_header(admin_token))
        assert res.status_code == 200
        assert (await reload(db, Branch, branches[0].id)).deleted_at is None

    async def test_restore_live_branch(self, client: AsyncClient, admin_token, branches):
        res = await client.patch(f"{URL}/{branches[0].id}/restore", headers=auth_header(admin_token))
        assert res.status_code == 400
        assert res.json()["message"]["error"] == "삭제된 지점이 존재하지 않습니다."

    async def test_soft_delete_keeps_grants(self, client: AsyncClient, db, admin_token, user_member, branches, menus):
        await grant(db, user_member, [branches[0].id], [menus[0].id])
        await client.delete(f"{URL}/{branches[0].id}", headers=auth_header(admin_token))

        count = await db.execute(select(func.count()).select_from(Authority))
        assert count.scalar() == 1

    async def test_hard_delete_cascades_grants(self, db, user_member, branches, menus):
        await grant(db, user_member, [branches[0].id, branches[1].id], [menus[0].id])
        await db.execute(delete(Branch).where(Branch.id == branches[0].id))
        await db.commit()

        result = await db.execute(select(Authority.branch_id))
        assert result.scalars().all() == [branches[1].id]


class TestMemberBranches:
    """멤버 권한 기준 지점 목록 테스트."""

    async def test_member_without_grants(self, client: AsyncClient, admin_token, user_member, branches):
        res = await client.post(f"{URL}/member", json={"member_id": user_member.id}, headers=auth_header(admin_token))
        assert res.status_code == 200
        assert res.json()["message"] == []

    async def test_member_branches_distinct_and_sorted(
        self, client: AsyncClient, db, admin_token, user_member, branches, menus
    ):
        await grant(db, user_member, [branches[0].id, branches[2].id], [menus[0].id, menus[1].id])

        res = await client.post(f"{URL}/member", json={"member_id": user_member.id}, headers=auth_header(admin_token))
        assert res.status_code == 200
        listed = res.json()["message"]
        # 지점당 권한 2건이어도 지점은 한 번만, seq 오름차순
        assert [b["name"] for b in listed] == ["jamsil", "gangnam"]
        assert "deleted_at" not in listed[0]

    async def test_member_branches_exclude_deleted(
        self, client: AsyncClient, db, admin_token, user_member, branches, menus
    ):
        await grant(db, user_member, [branches[0].id, branches[2].id], [menus[0].id])
        await client.delete(f"{URL}/{branches[2].id}", headers=auth_header(admin_token))

        res = await client.post(f"{URL}/member", json={"member_id": user_member.id}, headers=auth_header(admin_token))
        assert [b["name"] for b in res.json()["message"]] == ["gangnam"]
