"""앱 공통 테스트 — 헬스 체크, 요청 ID, 유틸리티.

Application-wide tests — Health check, request id header, log masking and
small utilities.
"""

import logging

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

import app.main as main_module
from app.config import settings
from app.middleware.axiom_logging import REQUEST_ID_HEADER, _is_skipped, _mask_dict
from app.themes.registry import template_registry
from app.utils.password import hash_password, verify_password
from app.utils.slug import slugify


class TestHealth:
    """헬스 체크와 요청 ID 테스트."""

    async def test_health(self, client: AsyncClient):
        res = await client.get("/health")
        assert res.status_code == 200
        assert res.json() == {"status": "ok"}

    async def test_request_id_generated(self, client: AsyncClient):
        res = await client.get("/health")
        assert len(res.headers[REQUEST_ID_HEADER]) == 36

    async def test_request_id_echoed(self, client: AsyncClient):
        res = await client.get("/api/v1/public/categories/", headers={REQUEST_ID_HEADER: "trace-123"})
        assert res.headers[REQUEST_ID_HEADER] == "trace-123"


class TestLogMasking:
    """로그 마스킹 테스트."""

    def test_masks_sensitive_keys(self):
        masked = _mask_dict({"username": "a", "password": "p", "nested": {"refresh_token": "t"}})
        assert masked == {"username": "a", "password": "***", "nested": {"refresh_token": "***"}}

    def test_skipped_paths(self):
        assert _is_skipped("/health")
        assert _is_skipped("/uploads/2024/01/a.png")
        assert _is_skipped("/themes/default/static/css/style.css")
        assert not _is_skipped("/api/v1/public/posts/")


class TestUtils:
    """유틸리티 테스트."""

    def test_slugify(self):
        assert slugify("Hello, World!  Again") == "hello-world-again"
        assert slugify("--Trim  me--") == "trim-me"
        assert slugify("技术") == ""

    def test_long_password_truncated_to_bcrypt_limit(self):
        long_password = "x" * 100
        hashed = hash_password(long_password)
        assert verify_password(long_password, hashed)
        assert verify_password("x" * 72, hashed)
        assert not verify_password("x" * 71, hashed)


class TestStartup:
    """시작 시 테마 초기화 테스트."""

    def use_engine(self, monkeypatch, engine: AsyncEngine) -> None:
        factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        monkeypatch.setattr(main_module, "async_session", factory)

    async def test_preloads_active_theme(self, monkeypatch, engine: AsyncEngine, isolated_dirs):
        self.use_engine(monkeypatch, engine)

        await main_module._init_themes()

        assert template_registry.is_loaded("default")

    async def test_missing_default_theme_still_starts(self, client: AsyncClient, monkeypatch, caplog,
                                                       engine: AsyncEngine, isolated_dirs):
        self.use_engine(monkeypatch, engine)
        monkeypatch.setattr(settings, "DEFAULT_THEME", "missing")

        with caplog.at_level(logging.WARNING, logger="app.main"):
            await main_module._init_themes()

        assert "No usable theme found" in caplog.text
        res = await client.get("/")
        assert res.status_code == 404
        assert "404 Not Found" in res.text
