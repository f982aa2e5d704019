"""메뉴 API 테스트 — 생성, 목록, 수정, 소프트 삭제/복구, 권한 기준 목록.

Menu API tests — CRUD, soft delete / restore and the member × branch
scoped menu listing.
"""

from httpx import AsyncClient

from app.models import Menu
from tests.conftest import auth_header, grant, reload

URL = "/api/v1/menus"


class TestMenuCrud:
    """메뉴 CRUD 테스트."""

    async def test_create_menu(self, client: AsyncClient, admin_token):
        res = await client.post(URL, json={"title": "재고", "link": "stock"}, headers=auth_header(admin_token))
        assert res.status_code == 201
        menu = res.json()["message"]
        assert menu["link"] == "stock"
        assert menu["seq"] == 99

    async def test_create_menu_link_too_long(self, client: AsyncClient, admin_token):
        res = await client.post(URL, json={"title": "재고", "link": "s" * 21}, headers=auth_header(admin_token))
        assert res.status_code == 400

    async def test_list_sorted_by_seq(self, client: AsyncClient, admin_token, menus):
        res = await client.get(URL, headers=auth_header(admin_token))
        assert [m["link"] for m in res.json()["message"]] == ["sales", "notice"]

    async def test_update_menu(self, client: AsyncClient, db, admin_token, menus):
        res = await client.patch(f"{URL}/{menus[0].id}", json={"seq": 0}, headers=auth_header(admin_token))
        assert res.status_code == 200
        assert (await reload(db, Menu, menus[0].id)).seq == 0

    async def test_update_missing_menu(self, client: AsyncClient, admin_token):
        res = await client.patch(f"{URL}/9999", json={"seq": 1}, headers=auth_header(admin_token))
        assert res.status_code == 400
        assert res.json()["message"]["error"] == "메뉴가 존재하지 않습니다."

    async def test_remove_and_restore(self, client: AsyncClient, db, admin_token, menus):
        res = await client.delete(f"{URL}/{menus[0].id}", headers=auth_header(admin_token))
        assert res.status_code == 200

        res = await client.get(f"{URL}/deleted", headers=auth_header(admin_token))
        assert [m["link"] for m in res.json()["message"]] == ["notice"]

        res = await client.patch(f"{URL}/{menus[0].id}/restore", headers=auth_header(admin_token))
        assert res.status_code == 200
        assert (await reload(db, Menu, menus[0].id)).deleted_at is None

    async def test_restore_live_menu(self, client: AsyncClient, admin_token, menus):
        res = await client.patch(f"{URL}/{menus[0].id}/restore", headers=auth_header(admin_token))
        assert res.status_code == 400
        assert res.json()["message"]["error"] == "삭제된 메뉴가 존재하지 않습니다."

    async def test_menus_require_admin(self, client: AsyncClient, user_token):
        res = await client.get(URL, headers=auth_header(user_token))
        assert res.status_code == 403


class TestMemberMenus:
    """멤버 + 지점 권한 기준 메뉴 목록 테스트."""

    async def test_member_menus_scoped_to_branch(
        self, client: AsyncClient, db, admin_token, user_member, branches, menus
    ):
        await grant(db, user_member, [branches[0].id], [menus[0].id, menus[1].id])
        await grant(db, user_member, [branches[1].id], [menus[0].id])

        res = await client.post(
            f"{URL}/member",
            json={"member_id": user_member.id, "branch_id": branches[0].id},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 200
        listed = res.json()["message"]
        assert [m["link"] for m in listed] == ["sales", "notice"]
        assert "deleted_at" not in listed[0]

        res = await client.post(
            f"{URL}/member",
            json={"member_id": user_member.id, "branch_id": branches[1].id},
            headers=auth_header(admin_token),
        )
        assert [m["link"] for m in res.json()["message"]] == ["notice"]

    async def test_member_menus_exclude_deleted(
        self, client: AsyncClient, db, admin_token, user_member, branches, menus
    ):
        await grant(db, user_member, [branches[0].id], [menus[0].id, menus[1].id])
        await client.delete(f"{URL}/{menus[1].id}", headers=auth_header(admin_token))

        res = await client.post(
            f"{URL}/member",
            json={"member_id": user_member.id, "branch_id": branches[0].id},
            headers=auth_header(admin_token),
        )
        assert [m["link"] for m in res.json()["message"]] == ["notice"]
