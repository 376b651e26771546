"""테마 페이지 렌더링 테스트 — 목록, 상세, 미리보기, 정적 파일.

Theme page tests — Server-rendered index, post detail, preview, locale
selection and theme static files.
"""

import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.services.theme_service import theme_service
from tests.conftest import auth_header, write_theme
from tests.test_posts import create_post

ADMIN_THEMES = "/api/v1/admin/themes/"


@pytest_asyncio.fixture
async def site(client: AsyncClient, db: AsyncSession, author_token, isolated_dirs) -> dict:
    """기본 테마 + demo 테마, 발행글 2개와 초안 1개."""
    write_theme(isolated_dirs["themes"], "demo")
    await theme_service.init(db)
    await db.commit()

    await create_post(client, author_token, title="First Story", status="published", tags=["python"])
    await create_post(client, author_token, title="Second Story", status="published")
    await create_post(client, author_token, title="Hidden Draft")
    return isolated_dirs


class TestIndex:
    """목록 페이지 테스트."""

    async def test_home_renders_active_theme(self, client: AsyncClient, site):
        res = await client.get("/")
        assert res.status_code == 200
        assert res.headers["content-type"].startswith("text/html")
        body = res.text
        assert "First Story" in body
        assert "Second Story" in body
        assert "Hidden Draft" not in body
        assert "/themes/default/static/css/style.css" in body
        assert 'href="/themes/default/posts/first-story"' in body

    async def test_pagination_links(self, client: AsyncClient, site):
        res = await client.get("/", params={"size": 1})
        assert 'href="/?page=2&amp;size=1"' in res.text
        assert "Page 1 of 2" in res.text

        last = await client.get("/", params={"size": 1, "page": 2})
        assert 'href="/?page=1&amp;size=1"' in last.text
        assert "page=3" not in last.text

    async def test_theme_url_uses_posts_per_page(self, client: AsyncClient, admin_token, site):
        await client.put(f"{ADMIN_THEMES}default/settings", json={"settings": {"postsPerPage": 1}},
                         headers=auth_header(admin_token))

        res = await client.get("/themes/default")
        assert 'href="/themes/default?page=2&amp;size=1"' in res.text

    async def test_settings_flow_into_templates(self, client: AsyncClient, admin_token, site):
        await client.put(f"{ADMIN_THEMES}default/settings",
                         json={"settings": {"siteName": "Inkwell Notes", "darkMode": True}},
                         headers=auth_header(admin_token))

        body = (await client.get("/")).text
        assert "<title>Inkwell Notes</title>" in body
        assert 'class="dark"' in body

    async def test_locale(self, client: AsyncClient, site):
        english = await client.get("/themes/default")
        assert ">Home<" in english.text

        chinese = await client.get("/themes/default", params={"lang": "zh_CN"})
        assert 'lang="zh-CN"' in chinese.text
        assert ">首页<" in chinese.text

    async def test_other_enabled_theme(self, client: AsyncClient, site):
        res = await client.get("/themes/demo")
        assert res.status_code == 200
        assert "<h2>First Story</h2>" in res.text

    async def test_unknown_or_disabled_theme(self, client: AsyncClient, admin_token, site):
        unknown = await client.get("/themes/ghost")
        assert unknown.status_code == 404
        assert "404 Not Found" in unknown.text

        await client.post(f"{ADMIN_THEMES}demo/disable", headers=auth_header(admin_token))
        disabled = await client.get("/themes/demo")
        assert disabled.status_code == 404

    async def test_invalid_page(self, client: AsyncClient, site):
        res = await client.get("/themes/default", params={"page": 0})
        assert res.status_code == 422

    async def test_unknown_lang_renders_default_locale(self, client: AsyncClient, site):
        res = await client.get("/themes/default", params={"lang": "xx-YY"})
        assert res.status_code == 200
        assert 'lang="en"' in res.text
        assert ">Home<" in res.text


class TestPost:
    """게시글 상세 페이지 테스트."""

    async def test_renders_and_counts_views(self, client: AsyncClient, site):
        first = await client.get("/themes/default/posts/first-story")
        assert first.status_code == 200
        assert "<h1>First Story</h1>" in first.text
        assert "<p>Body</p>" in first.text
        assert "1 views" in first.text
        assert '<span class="tag">python</span>' in first.text

        second = await client.get("/themes/default/posts/first-story")
        assert "2 views" in second.text

    async def test_chinese_messages(self, client: AsyncClient, site):
        res = await client.get("/themes/default/posts/first-story", params={"lang": "zh-CN"})
        assert "1 次浏览" in res.text

    async def test_draft_is_not_found(self, client: AsyncClient, site):
        res = await client.get("/themes/default/posts/hidden-draft")
        assert res.status_code == 404
        assert "Post not found" in res.text


class TestPreview:
    """미리보기 테스트."""

    async def test_preview_banner(self, client: AsyncClient, site):
        res = await client.get("/themes/demo/preview")
        assert res.status_code == 200
        assert "First Story" in res.text

        default = await client.get("/themes/default/preview")
        assert "Theme preview: Default Theme" in default.text


class TestStatic:
    """정적 파일 테스트."""

    async def test_serves_theme_static(self, client: AsyncClient, site):
        res = await client.get("/themes/default/static/css/style.css")
        assert res.status_code == 200
        assert res.headers["content-type"].startswith("text/css")

    async def test_missing_or_escaping_path(self, client: AsyncClient, site):
        missing = await client.get("/themes/default/static/css/none.css")
        assert missing.status_code == 404

        escape = await client.get("/themes/default/static/..%2Ftheme.yaml")
        assert escape.status_code == 404

    async def test_screenshot_missing(self, client: AsyncClient, site):
        res = await client.get("/themes/default/screenshot")
        assert res.status_code == 404

