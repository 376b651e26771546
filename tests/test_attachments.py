"""첨부파일 API 테스트.

Attachment API tests — Upload validation (extension, size), storage layout
under UPLOAD_DIR, batch all-or-nothing, listing filters, rename and delete.
"""

import io
from pathlib import Path

import pytest
from fastapi import UploadFile
from httpx import AsyncClient

from app.config import settings
from app.services.attachment_service import attachment_type
from app.services.storage_service import storage_service
from app.utils.exceptions import BadRequestError, PayloadTooLargeError
from tests.conftest import auth_header

URL = "/api/v1/admin/attachments/"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


class RecordingFile(io.BytesIO):
    """read() 요청 크기를 기록하는 파일."""

    def __init__(self, data: bytes) -> None:
        super().__init__(data)
        self.requested: list[int] = []

    def read(self, size: int | None = -1) -> bytes:
        self.requested.append(size)
        return super().read(size)


class TestAttachmentType:
    """미디어 타입 분류 테스트."""

    @pytest.mark.parametrize(
        ("media_type", "expected"),
        [
            ("image/png", "image"),
            ("video/mp4", "video"),
            ("audio/mpeg", "audio"),
            ("application/pdf", "document"),
            ("application/zip", "other"),
            (None, "other"),
        ],
    )
    def test_classification(self, media_type, expected):
        assert attachment_type(media_type) == expected


class TestStorage:
    """로컬 스토리지 테스트."""

    def test_resolve_rejects_escape(self):
        with pytest.raises(BadRequestError):
            storage_service.resolve("../outside.txt")

    def test_save_layout(self, isolated_dirs):
        stored = storage_service.save("photo.JPG", b"data")
        parts = stored.path.split("/")
        assert len(parts) == 3
        assert parts[0].isdigit() and len(parts[0]) == 4
        assert parts[2].endswith(".jpg")
        assert stored.url == f"/uploads/{stored.path}"
        assert (isolated_dirs["uploads"] / stored.path).read_bytes() == b"data"

    async def test_read_upload_stops_past_limit(self):
        source = RecordingFile(b"x" * 1000)
        with pytest.raises(PayloadTooLargeError):
            await storage_service.read_upload(UploadFile(source, filename="big.png"), limit=10)
        assert source.requested == [11]
        assert source.tell() == 11

    async def test_read_upload_within_limit(self):
        content = await storage_service.read_upload(UploadFile(io.BytesIO(b"small"), filename="a.png"), limit=5)
        assert content == b"small"


class TestUpload:
    """업로드 엔드포인트 테스트."""

    async def test_upload_image(self, client: AsyncClient, author_token, author_user, isolated_dirs):
        res = await client.post(
            f"{URL}upload",
            files={"file": ("cover.png", PNG_BYTES, "image/png")},
            headers=auth_header(author_token),
        )
        assert res.status_code == 201
        data = res.json()
        assert data["name"] == "cover.png"
        assert data["type"] == "image"
        assert data["suffix"] == "png"
        assert data["size"] == len(PNG_BYTES)
        assert data["width"] is None
        assert data["uploader_id"] == str(author_user.id)
        assert (isolated_dirs["uploads"] / data["path"]).is_file()

    async def test_disallowed_extension(self, client: AsyncClient, author_token):
        res = await client.post(
            f"{URL}upload",
            files={"file": ("run.exe", b"MZ", "application/octet-stream")},
            headers=auth_header(author_token),
        )
        assert res.status_code == 400

    async def test_too_large(self, client: AsyncClient, author_token, monkeypatch):
        monkeypatch.setattr(settings, "UPLOAD_MAX_SIZE", 10)
        res = await client.post(
            f"{URL}upload",
            files={"file": ("big.png", PNG_BYTES, "image/png")},
            headers=auth_header(author_token),
        )
        assert res.status_code == 413

    async def test_batch_rejects_whole_request(self, client: AsyncClient, author_token, isolated_dirs):
        res = await client.post(
            f"{URL}upload/batch",
            files=[
                ("files", ("ok.png", PNG_BYTES, "image/png")),
                ("files", ("bad.exe", b"MZ", "application/octet-stream")),
            ],
            headers=auth_header(author_token),
        )
        assert res.status_code == 400
        uploads: Path = isolated_dirs["uploads"]
        assert not uploads.exists() or not any(p.is_file() for p in uploads.rglob("*"))

    async def test_batch_upload(self, client: AsyncClient, author_token):
        res = await client.post(
            f"{URL}upload/batch",
            files=[
                ("files", ("a.png", PNG_BYTES, "image/png")),
                ("files", ("b.gif", b"GIF89a", "image/gif")),
            ],
            headers=auth_header(author_token),
        )
        assert res.status_code == 201
        assert [a["name"] for a in res.json()] == ["a.png", "b.gif"]

    async def test_subscriber_cannot_upload(self, client: AsyncClient, subscriber_token):
        res = await client.post(
            f"{URL}upload",
            files={"file": ("cover.png", PNG_BYTES, "image/png")},
            headers=auth_header(subscriber_token),
        )
        assert res.status_code == 403


class TestAttachmentManage:
    """목록/수정/삭제 테스트."""

    async def _upload(self, client: AsyncClient, token: str, name: str = "cover.png") -> dict:
        res = await client.post(
            f"{URL}upload",
            files={"file": (name, PNG_BYTES, "image/png")},
            headers=auth_header(token),
        )
        return res.json()

    async def test_list_with_filters(self, client: AsyncClient, author_token, author_user):
        await self._upload(client, author_token)
        await self._upload(client, author_token, "second.png")

        res = await client.get(URL, params={"type": "image"}, headers=auth_header(author_token))
        assert res.json()["total"] == 2

        none = await client.get(URL, params={"type": "video"}, headers=auth_header(author_token))
        assert none.json()["total"] == 0

        mine = await client.get(URL, params={"uploader_id": str(author_user.id)}, headers=auth_header(author_token))
        assert mine.json()["total"] == 2

    async def test_rename(self, client: AsyncClient, author_token):
        attachment = await self._upload(client, author_token)
        res = await client.patch(f"{URL}{attachment['id']}", json={"name": "Header image"},
                                 headers=auth_header(author_token))
        assert res.status_code == 200
        assert res.json()["name"] == "Header image"
        assert res.json()["path"] == attachment["path"]

    async def test_delete_removes_file(self, client: AsyncClient, author_token, isolated_dirs):
        attachment = await self._upload(client, author_token)
        res = await client.delete(f"{URL}{attachment['id']}", headers=auth_header(author_token))
        assert res.status_code == 200
        assert not (isolated_dirs["uploads"] / attachment["path"]).exists()

        missing = await client.get(f"{URL}{attachment['id']}", headers=auth_header(author_token))
        assert missing.status_code == 404
