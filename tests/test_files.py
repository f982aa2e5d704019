"""파일 API 테스트 — 다중 업로드, 부분 실패, 로컬 저장, 목록/조회/삭제.

File API tests — Multi-file upload with per-file results, partial storage
failure, local-disk fallback, listing, access stamping and removal.
"""

from unittest.mock import AsyncMock, patch

from botocore.exceptions import ClientError
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from app.config import settings
from app.models import File
from app.services.storage_service import storage_service
from tests.conftest import auth_header, reload

URL = "/api/v1/files"


def _upload(*names_and_bodies: tuple[str, bytes]) -> list:
    return [("files", (name, body, "text/plain")) for name, body in names_and_bodies]


async def _file_count(db) -> int:
    return (await db.execute(select(func.count()).select_from(File))).scalar()


async def _fake_put(key: str, data: bytes, content_type: str) -> dict:
    """본문이 bad면 S3 오류, slow면 500 상태를 흉내냅니다."""
    if data == b"bad":
        raise ClientError({"Error": {"Code": "InternalError", "Message": "boom"}}, "PutObject")
    if data == b"slow":
        return {"status": 500, "url": f"https://cdn.test/{key}"}
    return {"status": 200, "url": f"https://cdn.test/{key}"}


class TestFileUpload:
    """파일 업로드 테스트."""

    async def test_upload_to_missing_branch(self, client: AsyncClient, db, admin_token):
        """지점이 없으면 저장소 호출 전에 실패."""
        with patch("app.services.file_service.storage_service.put_object", new_callable=AsyncMock) as put:
            res = await client.post(
                f"{URL}/s3",
                data={"branch_id": "9999"},
                files=_upload(("a.txt", b"a"), ("b.txt", b"b"), ("c.txt", b"c")),
                headers=auth_header(admin_token),
            )
        assert res.status_code == 400
        assert res.json()["message"]["error"] == "지점이 삭제되었거나 존재하지 않습니다."
        put.assert_not_awaited()
        assert await _file_count(db) == 0

    async def test_upload_to_deleted_branch(self, client: AsyncClient, admin_token, branches):
        await client.delete(f"/api/v1/branches/{branches[0].id}", headers=auth_header(admin_token))
        with patch("app.services.file_service.storage_service.put_object", new_callable=AsyncMock) as put:
            res = await client.post(
                f"{URL}/s3",
                data={"branch_id": str(branches[0].id)},
                files=_upload(("a.txt", b"a")),
                headers=auth_header(admin_token),
            )
        assert res.status_code == 400
        put.assert_not_awaited()

    async def test_partial_failure(self, client: AsyncClient, db, admin_token, branches):
        """일부 실패해도 나머지는 저장되고, 성공한 파일만 메타데이터가 남습니다."""
        with patch("app.services.file_service.storage_service.put_object", side_effect=_fake_put):
            res = await client.post(
                f"{URL}/s3",
                data={"branch_id": str(branches[0].id)},
                files=_upload(("ok.txt", b"ok"), ("bad.txt", b"bad"), ("slow.txt", b"slow")),
                headers=auth_header(admin_token),
            )

        assert res.status_code == 201
        results = res.json()["message"]
        assert [r["originalname"] for r in results] == ["ok.txt", "bad.txt", "slow.txt"]
        assert [r["result"] for r in results] == [True, False, False]
        assert results[0]["url"].startswith("https://cdn.test/files/")
        assert results[1]["url"] == ""
        assert results[2]["url"] == ""

        rows = (await db.execute(select(File))).scalars().all()
        assert len(rows) == 1
        assert rows[0].originalname == "ok.txt"
        assert rows[0].branch_id == branches[0].id
        assert rows[0].size == 2
        assert rows[0].filename.endswith(".txt")
        assert rows[0].path.startswith(f"files/{branches[0].id}/")

    async def test_upload_local_disk(self, client: AsyncClient, db, admin_token, branches, tmp_path, monkeypatch):
        """AWS 키가 없으면 로컬 디스크에 저장."""
        monkeypatch.setattr(settings, "AWS_ACCESS_KEY_ID", "")
        monkeypatch.setattr("app.services.storage_service.UPLOADS_DIR", tmp_path)

        res = await client.post(
            f"{URL}/s3",
            data={"branch_id": str(branches[0].id)},
            files=_upload(("note.TXT", b"hello")),
            headers=auth_header(admin_token),
        )
        assert res.status_code == 201
        result = res.json()["message"][0]
        assert result["result"] is True
        assert result["url"].startswith(f"{settings.PUBLIC_BASE_URL}/uploads/files/{branches[0].id}/")

        row = (await db.execute(select(File))).scalar_one()
        assert row.storage == "disk"
        assert row.filename.endswith(".txt")
        assert (tmp_path / row.path / row.filename).read_bytes() == b"hello"
        assert await storage_service.list_objects(row.path) == [f"{row.path}/{row.filename}"]

    async def test_upload_requires_files(self, client: AsyncClient, admin_token, branches):
        res = await client.post(
            f"{URL}/s3",
            data={"branch_id": str(branches[0].id)},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 400

    async def test_upload_user_forbidden(self, client: AsyncClient, user_token, branches):
        res = await client.post(
            f"{URL}/s3",
            data={"branch_id": str(branches[0].id)},
            files=_upload(("a.txt", b"a")),
            headers=auth_header(user_token),
        )
        assert res.status_code == 403


class TestFileMetadata:
    """파일 목록/조회/삭제 테스트."""

    async def _upload_two(self, client: AsyncClient, admin_token: str, branch_id: int) -> None:
        with patch("app.services.file_service.storage_service.put_object", side_effect=_fake_put):
            res = await client.post(
                f"{URL}/s3",
                data={"branch_id": str(branch_id)},
                files=_upload(("one.txt", b"1"), ("two.txt", b"2")),
                headers=auth_header(admin_token),
            )
        assert res.status_code == 201

    async def test_list_files(self, client: AsyncClient, admin_token, branches):
        await self._upload_two(client, admin_token, branches[0].id)
        await self._upload_two(client, admin_token, branches[1].id)

        res = await client.get(
            URL, params={"branch": branches[0].id, "per_page": 1}, headers=auth_header(admin_token)
        )
        assert res.status_code == 200
        page = res.json()["message"]
        assert page["total"] == 2
        assert page["pages"] == 2
        assert [f["originalname"] for f in page["items"]] == ["one.txt"]

    async def test_get_file_stamps_access(self, client: AsyncClient, db, admin_token, branches):
        await self._upload_two(client, admin_token, branches[0].id)
        row = (await db.execute(select(File).order_by(File.id))).scalars().first()
        assert row.last_accessed_at is None

        res = await client.get(f"{URL}/{row.id}", headers=auth_header(admin_token))
        assert res.status_code == 200
        assert res.json()["message"]["last_accessed_at"] is not None
        assert (await reload(db, File, row.id)).last_accessed_at is not None

    async def test_get_missing_file(self, client: AsyncClient, admin_token):
        res = await client.get(f"{URL}/9999", headers=auth_header(admin_token))
        assert res.status_code == 404

    async def test_remove_file(self, client: AsyncClient, db, admin_token, branches):
        await self._upload_two(client, admin_token, branches[0].id)
        row = (await db.execute(select(File).order_by(File.id))).scalars().first()

        with patch(
            "app.services.file_service.storage_service.delete_object",
            new_callable=AsyncMock,
            return_value={"status": 204, "delete_marker": False, "version_id": None},
        ) as remove:
            res = await client.delete(f"{URL}/{row.id}", headers=auth_header(admin_token))

        assert res.status_code == 200
        assert res.json()["message"] == {"affectedRows": 1}
        remove.assert_awaited_once_with(f"{row.path}/{row.filename}")
        assert (await reload(db, File, row.id)).deleted_at is not None

        res = await client.get(f"{URL}/{row.id}", headers=auth_header(admin_token))
        assert res.status_code == 404

    async def test_remove_keeps_object_when_commit_fails(self, client: AsyncClient, db, admin_token, branches):
        """커밋이 실패하면 행은 그대로이고 저장소 객체도 지우지 않습니다."""
        await self._upload_two(client, admin_token, branches[0].id)
        row = (await db.execute(select(File).order_by(File.id))).scalars().first()

        with patch(
            "app.services.file_service.storage_service.delete_object", new_callable=AsyncMock
        ) as remove, patch(
            "sqlalchemy.ext.asyncio.AsyncSession.commit",
            new_callable=AsyncMock,
            side_effect=OperationalError("COMMIT", {}, Exception("disk I/O error")),
        ):
            res = await client.delete(f"{URL}/{row.id}", headers=auth_header(admin_token))

        assert res.status_code == 503
        remove.assert_not_awaited()
        assert (await reload(db, File, row.id)).deleted_at is None

    async def test_remove_survives_storage_failure(self, client: AsyncClient, db, admin_token, branches):
        await self._upload_two(client, admin_token, branches[0].id)
        row = (await db.execute(select(File).order_by(File.id))).scalars().first()

        with patch(
            "app.services.file_service.storage_service.delete_object",
            new_callable=AsyncMock,
            side_effect=ClientError({"Error": {"Code": "AccessDenied", "Message": "denied"}}, "DeleteObject"),
        ):
            res = await client.delete(f"{URL}/{row.id}", headers=auth_header(admin_token))

        assert res.status_code == 200
        assert (await reload(db, File, row.id)).deleted_at is not None

    async def test_remove_missing_local_object(
        self, client: AsyncClient, db, admin_token, branches, tmp_path, monkeypatch, caplog
    ):
        """로컬 파일이 이미 없으면 경고만 남기고 행은 삭제됩니다."""
        monkeypatch.setattr(settings, "AWS_ACCESS_KEY_ID", "")
        monkeypatch.setattr("app.services.storage_service.UPLOADS_DIR", tmp_path)
        await client.post(
            f"{URL}/s3",
            data={"branch_id": str(branches[0].id)},
            files=_upload(("gone.txt", b"gone")),
            headers=auth_header(admin_token),
        )
        row = (await db.execute(select(File))).scalar_one()
        (tmp_path / row.path / row.filename).unlink()

        res = await client.delete(f"{URL}/{row.id}", headers=auth_header(admin_token))
        assert res.status_code == 200
        assert (await reload(db, File, row.id)).deleted_at is not None
        assert any("Local object not found" in r.getMessage() for r in caplog.records)
