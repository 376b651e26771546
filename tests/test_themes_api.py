"""테마 관리 API 테스트 — 스캔, 활성화, 설정, 설치/삭제.

Theme admin API tests — Folder scan, activation, settings, ZIP install and
removal.
"""

import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.theme import Theme
from app.repositories.theme_repository import theme_repository
from app.services.theme_service import theme_service
from app.themes.registry import template_registry
from tests.conftest import MINIMAL_TEMPLATES, auth_header, theme_files, theme_zip, write_theme

ADMIN = "/api/v1/admin/themes/"


async def scan(db: AsyncSession) -> None:
    await theme_service.init(db)
    await db.commit()


@pytest_asyncio.fixture
async def themes_ready(db: AsyncSession, isolated_dirs) -> dict:
    """번들 기본 테마와 demo 테마를 등록합니다."""
    write_theme(isolated_dirs["themes"], "demo")
    await scan(db)
    return isolated_dirs


class TestScan:
    """테마 폴더 스캔 테스트."""

    async def test_registers_bundled_default_as_active(self, client: AsyncClient, admin_token, db, isolated_dirs):
        await scan(db)

        res = await client.get(ADMIN, headers=auth_header(admin_token))
        assert res.status_code == 200
        themes = res.json()
        assert [t["theme_id"] for t in themes] == ["default"]
        assert themes[0]["is_active"] is True
        assert themes[0]["status"] == "enabled"
        assert themes[0]["name"] == "Default Theme"
        assert (isolated_dirs["themes"] / "default" / "theme.yaml").is_file()

    async def test_scan_is_idempotent(self, client: AsyncClient, admin_token, db, themes_ready):
        await scan(db)

        res = await client.get(ADMIN, headers=auth_header(admin_token))
        assert [t["theme_id"] for t in res.json()] == ["default", "demo"]

    async def test_skips_mismatched_id(self, client: AsyncClient, admin_token, db, isolated_dirs):
        write_theme(isolated_dirs["themes"], "folder", {**theme_files("folder"), "theme.yaml": "id: other\n"})
        await scan(db)

        res = await client.get(ADMIN, headers=auth_header(admin_token))
        assert [t["theme_id"] for t in res.json()] == ["default"]

    async def test_broken_manifest_marks_error(self, client: AsyncClient, admin_token, db, themes_ready):
        (themes_ready["themes"] / "demo" / "theme.yaml").write_text("id: [broken\n", encoding="utf-8")
        await scan(db)

        res = await client.get(f"{ADMIN}demo", headers=auth_header(admin_token))
        assert res.json()["status"] == "error"

        activate = await client.post(f"{ADMIN}demo/activate", headers=auth_header(admin_token))
        assert activate.status_code == 400

    async def test_admin_only(self, client: AsyncClient, author_token, themes_ready):
        res = await client.get(ADMIN, headers=auth_header(author_token))
        assert res.status_code == 403


class TestActivation:
    """활성화/사용 중지 테스트."""

    async def test_activate_switches_flag(self, client: AsyncClient, admin_token, themes_ready):
        res = await client.post(f"{ADMIN}demo/activate", headers=auth_header(admin_token))
        assert res.status_code == 200
        assert res.json()["is_active"] is True
        assert template_registry.is_loaded("demo")

        listed = await client.get(ADMIN, headers=auth_header(admin_token))
        assert [(t["theme_id"], t["is_active"]) for t in listed.json()] == [("demo", True), ("default", False)]

        active = await client.get(f"{ADMIN}active", headers=auth_header(admin_token))
        assert active.json()["theme_id"] == "demo"

    async def test_broken_templates_keep_current_theme(self, client: AsyncClient, admin_token, db, isolated_dirs):
        templates = {k: v for k, v in MINIMAL_TEMPLATES.items() if k != "post.html"}
        write_theme(isolated_dirs["themes"], "broken", theme_files("broken", templates))
        await scan(db)

        res = await client.post(f"{ADMIN}broken/activate", headers=auth_header(admin_token))
        assert res.status_code == 400
        assert "post.html" in res.json()["detail"]

        active = await client.get(f"{ADMIN}active", headers=auth_header(admin_token))
        assert active.json()["theme_id"] == "default"

    async def test_disable_and_enable(self, client: AsyncClient, admin_token, themes_ready):
        disabled = await client.post(f"{ADMIN}demo/disable", headers=auth_header(admin_token))
        assert disabled.json()["status"] == "disabled"

        refused = await client.post(f"{ADMIN}demo/activate", headers=auth_header(admin_token))
        assert refused.status_code == 400

        enabled = await client.post(f"{ADMIN}demo/enable", headers=auth_header(admin_token))
        assert enabled.json()["status"] == "enabled"

    async def test_cannot_disable_active(self, client: AsyncClient, admin_token, themes_ready):
        res = await client.post(f"{ADMIN}default/disable", headers=auth_header(admin_token))
        assert res.status_code == 400

    async def test_unknown_theme(self, client: AsyncClient, admin_token, themes_ready):
        res = await client.post(f"{ADMIN}ghost/activate", headers=auth_header(admin_token))
        assert res.status_code == 404


class TestSingleActive:
    """활성 테마 단일성 테스트."""

    async def active_ids(self, db: AsyncSession) -> list[str]:
        return list((await db.execute(select(Theme.theme_id).where(Theme.is_active.is_(True)))).scalars().all())

    async def test_switching_keeps_one_active(self, db: AsyncSession, themes_ready):
        default = await theme_repository.get_by_theme_id(db, "default")
        demo = await theme_repository.get_by_theme_id(db, "demo")

        for theme in (demo, default, demo):
            await theme_repository.set_active(db, theme.id)
            await db.commit()

        assert await self.active_ids(db) == ["demo"]

    async def test_second_active_row_rejected(self, db: AsyncSession, themes_ready):
        demo = await theme_repository.get_by_theme_id(db, "demo")

        with pytest.raises(IntegrityError):
            await db.execute(update(Theme).where(Theme.id == demo.id).values(is_active=True))
        await db.rollback()

        assert await self.active_ids(db) == ["default"]


class TestSettings:
    """테마 설정 테스트."""

    async def test_defaults_then_update(self, client: AsyncClient, admin_token, themes_ready):
        res = await client.get(f"{ADMIN}default/settings", headers=auth_header(admin_token))
        assert res.json()["settings"]["postsPerPage"] == 10

        updated = await client.put(f"{ADMIN}default/settings",
                                   json={"settings": {"postsPerPage": 5, "primaryColor": "#fff"}},
                                   headers=auth_header(admin_token))
        assert updated.status_code == 200
        settings = updated.json()["settings"]
        assert settings["postsPerPage"] == 5
        assert settings["primaryColor"] == "#fff"
        assert settings["siteName"] == "My Blog"

        again = await client.put(f"{ADMIN}default/settings", json={"settings": {"darkMode": True}},
                                 headers=auth_header(admin_token))
        assert again.json()["settings"]["postsPerPage"] == 5
        assert again.json()["settings"]["darkMode"] is True

    async def test_rejects_invalid_values(self, client: AsyncClient, admin_token, themes_ready):
        unknown = await client.put(f"{ADMIN}default/settings", json={"settings": {"nope": 1}},
                                   headers=auth_header(admin_token))
        assert unknown.status_code == 400

        wrong = await client.put(f"{ADMIN}default/settings", json={"settings": {"postsPerPage": 500}},
                                 headers=auth_header(admin_token))
        assert wrong.status_code == 400

        res = await client.get(f"{ADMIN}default/settings", headers=auth_header(admin_token))
        assert res.json()["settings"]["postsPerPage"] == 10

    async def test_schema_and_locales(self, client: AsyncClient, admin_token, themes_ready):
        schema = await client.get(f"{ADMIN}default/schema", headers=auth_header(admin_token))
        assert [g["group"] for g in schema.json()["groups"]] == ["general", "appearance", "layout"]
        assert schema.json()["defaults"]["fontSize"] == "medium"

        locales = await client.get(f"{ADMIN}default/locales", headers=auth_header(admin_token))
        assert locales.json() == {"theme_id": "default", "default_locale": "en", "locales": ["en", "zh-CN"]}

        reloaded = await client.post(f"{ADMIN}default/locales/reload", headers=auth_header(admin_token))
        assert reloaded.json()["locales"] == ["en", "zh-CN"]


class TestInstall:
    """ZIP 설치 테스트."""

    async def upload(self, client: AsyncClient, token: str, data: bytes):
        return await client.post(f"{ADMIN}install", files={"file": ("theme.zip", data, "application/zip")},
                                 headers=auth_header(token))

    async def test_install(self, client: AsyncClient, admin_token, themes_ready):
        res = await self.upload(client, admin_token, theme_zip(theme_files("fresh")))
        assert res.status_code == 201
        data = res.json()
        assert data["theme"]["theme_id"] == "fresh"
        assert data["theme"]["is_active"] is False
        assert data["theme"]["status"] == "enabled"
        assert data["templates"] == sorted(MINIMAL_TEMPLATES)
        assert (themes_ready["themes"] / "fresh" / "templates" / "index.html").is_file()

    async def test_duplicate(self, client: AsyncClient, admin_token, themes_ready):
        res = await self.upload(client, admin_token, theme_zip(theme_files("demo")))
        assert res.status_code == 409

    async def test_unsafe_archive(self, client: AsyncClient, admin_token, themes_ready):
        data = theme_zip({**theme_files("evil"), "../../outside.txt": "x"})
        res = await self.upload(client, admin_token, data)
        assert res.status_code == 400
        assert not (themes_ready["themes"] / "evil").exists()

    async def test_not_a_zip(self, client: AsyncClient, admin_token, themes_ready):
        res = await self.upload(client, admin_token, b"not a zip")
        assert res.status_code == 400

    async def test_archive_too_large(self, client: AsyncClient, admin_token, themes_ready, monkeypatch):
        monkeypatch.setattr(settings, "THEME_MAX_SIZE", 64)
        res = await self.upload(client, admin_token, theme_zip(theme_files("huge")))
        assert res.status_code == 413
        assert not (themes_ready["themes"] / "huge").exists()


class TestDelete:
    """테마 삭제 테스트."""

    async def test_delete_removes_folder(self, client: AsyncClient, admin_token, themes_ready):
        res = await client.delete(f"{ADMIN}demo", headers=auth_header(admin_token))
        assert res.status_code == 200
        assert not (themes_ready["themes"] / "demo").exists()

        missing = await client.get(f"{ADMIN}demo", headers=auth_header(admin_token))
        assert missing.status_code == 404

    async def test_default_cannot_be_deleted(self, client: AsyncClient, admin_token, themes_ready):
        await client.post(f"{ADMIN}demo/activate", headers=auth_header(admin_token))
        res = await client.delete(f"{ADMIN}default", headers=auth_header(admin_token))
        assert res.status_code == 400

    async def test_active_cannot_be_deleted(self, client: AsyncClient, admin_token, themes_ready):
        await client.post(f"{ADMIN}demo/activate", headers=auth_header(admin_token))
        res = await client.delete(f"{ADMIN}demo", headers=auth_header(admin_token))
        assert res.status_code == 400
