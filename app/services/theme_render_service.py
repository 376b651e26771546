"""테마 렌더링 서비스 — 템플릿 컨텍스트 구성과 HTML 렌더링.

Theme Render Service — Builds the template context and renders pages of a
theme through the template registry.

Context keys available to every template:
    site, user, settings, locale, theme, categories, tags, recent_posts,
    page_title, preview, t(key, *args), static(path)
Page-specific keys: posts and pagination (index), post (post detail).
"""

from typing import Any, Callable
from urllib.parse import urlencode

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.theme import Theme
from app.models.user import User
from app.schemas.post import PostListResponse
from app.services.category_service import category_service
from app.services.post_service import post_service
from app.services.tag_service import tag_service
from app.services.theme_service import theme_service
from app.services.translation_service import format_message, translation_service
from app.themes.registry import template_registry
from app.utils.pagination import MAX_PER_PAGE, PageParams, total_pages

DEFAULT_PAGE_SIZE: int = 10
RECENT_POSTS_LIMIT: int = 5


class ThemeRenderService:
    """테마 HTML 렌더링 서비스 (Renders theme pages to HTML)."""

    def theme_url(self, theme_id: str) -> str:
        return f"/themes/{theme_id}"

    def _post_context(self, theme_id: str, post: PostListResponse) -> dict[str, Any]:
        return {**post.model_dump(), "url": f"{self.theme_url(theme_id)}/posts/{post.slug}"}

    def _translator(self, theme_id: str, locale: str) -> Callable[..., str]:
        messages: dict[str, str] = translation_service.get_translations(theme_id, locale)

        def t(key: str, *args: Any) -> str:
            return format_message(messages.get(key, key), args)

        return t

    def _page_size(self, requested: int | None, theme_settings: dict[str, Any]) -> int:
        """요청 크기 또는 테마의 postsPerPage 설정 (Requested size or the theme setting)."""
        if requested is not None:
            return requested
        configured: Any = theme_settings.get("postsPerPage")
        if isinstance(configured, int) and not isinstance(configured, bool) and configured > 0:
            return min(configured, MAX_PER_PAGE)
        return DEFAULT_PAGE_SIZE

    async def _base_context(
        self,
        db: AsyncSession,
        theme: Theme,
        lang: str | None,
        user: User | None,
        preview: bool = False,
    ) -> dict[str, Any]:
        """모든 페이지 공통 컨텍스트 (Context shared by every page)."""
        theme_id: str = theme.theme_id
        locale: str = translation_service.resolve_locale(theme_id, lang)
        recent: list[PostListResponse] = await post_service.recent_published(db, RECENT_POSTS_LIMIT)

        return {
            "site": {
                "title": settings.SITE_TITLE,
                "url": settings.SITE_URL,
                "description": settings.SITE_DESCRIPTION,
            },
            "user": {
                "id": str(user.id),
                "username": user.username,
                "display_name": user.display_name,
                "role": user.role,
            } if user else None,
            "settings": theme_service.merged_settings(theme),
            "locale": locale,
            "theme": {
                "id": theme_id,
                "name": theme.name,
                "version": theme.version,
                "features": theme_service.manifest_of(theme).features.model_dump(),
            },
            "categories": [c.model_dump() for c in await category_service.list_categories(db)],
            "tags": [tag.model_dump() for tag in await tag_service.list_tags(db)],
            "recent_posts": [self._post_context(theme_id, p) for p in recent],
            "posts": [],
            "post": None,
            "pagination": None,
            "page_title": None,
            "preview": preview,
            "t": self._translator(theme_id, locale),
            "static": lambda path: f"{self.theme_url(theme_id)}/static/{path.lstrip('/')}",
        }

    async def render_index(
        self,
        db: AsyncSession,
        theme_id: str,
        page: int = 1,
        size: int | None = None,
        lang: str | None = None,
        user: User | None = None,
        base_url: str | None = None,
    ) -> str:
        """게시글 목록 페이지 (index.html) — 1부터 시작하는 페이지.

        Render the published post list with pagination links built on
        `base_url` (the theme URL by default).

        Raises:
            NotFoundError: 알 수 없거나 비활성화된 테마 (Unknown or disabled theme)
        """
        theme: Theme = await theme_service.get_renderable(db, theme_id)
        context: dict[str, Any] = await self._base_context(db, theme, lang, user)
        per_page: int = self._page_size(size, context["settings"])

        result = await post_service.list_published(db, PageParams(page=page, per_page=per_page))
        pages: int = total_pages(result.total, per_page)
        link_base: str = base_url or self.theme_url(theme_id)

        def page_url(number: int) -> str:
            query: dict[str, Any] = {"page": number, "size": per_page}
            if lang:
                query["lang"] = lang
            return f"{link_base}?{urlencode(query)}"

        context.update(
            posts=[self._post_context(theme_id, p) for p in result.items],
            pagination={
                "current": page,
                "size": per_page,
                "total": result.total,
                "pages": pages,
                "has_previous": page > 1,
                "has_next": page < pages,
                "previous_url": page_url(page - 1) if page > 1 else None,
                "next_url": page_url(page + 1) if page < pages else None,
            },
        )
        return template_registry.render(theme_id, "index.html", context)

    async def render_post(
        self,
        db: AsyncSession,
        theme_id: str,
        slug: str,
        lang: str | None = None,
        user: User | None = None,
    ) -> str:
        """게시글 상세 페이지 (post.html) — 발행글만, 조회수 증가."""
        theme: Theme = await theme_service.get_renderable(db, theme_id)
        post = await post_service.get_published_by_slug(db, slug)
        context: dict[str, Any] = await self._base_context(db, theme, lang, user)
        context.update(
            post={**post.model_dump(), "url": f"{self.theme_url(theme_id)}/posts/{post.slug}"},
            page_title=post.title,
        )
        return template_registry.render(theme_id, "post.html", context)

    async def render_preview(
        self,
        db: AsyncSession,
        theme_id: str,
        lang: str | None = None,
        user: User | None = None,
    ) -> str:
        """미리보기 — 최신 게시글 5개와 preview 플래그 (Latest 5 posts, preview=True)."""
        theme: Theme = await theme_service.get_renderable(db, theme_id)
        context: dict[str, Any] = await self._base_context(db, theme, lang, user, preview=True)
        context["posts"] = context["recent_posts"]
        return template_registry.render(theme_id, "index.html", context)


# 싱글턴 인스턴스 — Singleton instance
theme_render_service: ThemeRenderService = ThemeRenderService()
