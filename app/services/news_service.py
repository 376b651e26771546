"""뉴스 서비스 — 핫 뉴스 위젯 CRUD.

News Service — CRUD and read paths for the hot-news widget. Rows are
also written by app.fetchers.news_fetcher.
"""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.widget import News
from app.repositories.widget_repository import news_repository
from app.schemas.widget import NewsCreate, NewsResponse, NewsUpdate
from app.utils.exceptions import NotFoundError
from app.utils.pagination import Page, PageParams, build_page


class NewsService:
    """뉴스 비즈니스 로직 서비스 (News business logic)."""

    def _to_response(self, news: News) -> NewsResponse:
        return NewsResponse(
            id=str(news.id),
            title=news.title,
            summary=news.summary,
            content=news.content,
            source=news.source,
            source_url=news.source_url,
            thumbnail=news.thumbnail,
            category=news.category,
            view_count=news.view_count,
            is_hot=news.is_hot,
            hot_score=news.hot_score,
            published_at=news.published_at,
            created_at=news.created_at,
        )

    def to_responses(self, items: list[News]) -> list[NewsResponse]:
        return [self._to_response(n) for n in items]

    async def _get_or_404(self, db: AsyncSession, news_id: UUID) -> News:
        news: News | None = await news_repository.get_by_id(db, news_id)
        if news is None:
            raise NotFoundError("News not found")
        return news

    async def create_news(self, db: AsyncSession, data: NewsCreate) -> NewsResponse:
        values: dict = data.model_dump()
        values["published_at"] = data.published_at or datetime.now(timezone.utc)
        return self._to_response(await news_repository.create(db, values))

    async def get_news(self, db: AsyncSession, news_id: UUID, count_view: bool = False) -> NewsResponse:
        """뉴스 상세 — 공개 조회 시 조회수 1 증가 (Public reads count a view)."""
        news: News = await self._get_or_404(db, news_id)
        if count_view:
            await news_repository.increment_views(db, news)
        return self._to_response(news)

    async def list_news(
        self,
        db: AsyncSession,
        params: PageParams,
        category: str | None = None,
    ) -> Page[NewsResponse]:
        """발행일 내림차순 목록 — 카테고리 필터 (Newest first, by category)."""
        items, total = await news_repository.get_paginated(
            db, news_repository.list_query(category), params.page, params.per_page
        )
        return build_page(self.to_responses(list(items)), total, params)

    async def hot_news(self, db: AsyncSession, limit: int = 10) -> list[NewsResponse]:
        return self.to_responses(await news_repository.hot(db, limit))

    async def search(self, db: AsyncSession, keyword: str, params: PageParams) -> Page[NewsResponse]:
        """제목 또는 요약 검색 — Search title or summary."""
        items, total = await news_repository.get_paginated(
            db, news_repository.search_query(keyword), params.page, params.per_page
        )
        return build_page(self.to_responses(list(items)), total, params)

    async def update_news(self, db: AsyncSession, news_id: UUID, data: NewsUpdate) -> NewsResponse:
        await self._get_or_404(db, news_id)
        news: News | None = await news_repository.update(db, news_id, data.model_dump(exclude_unset=True))
        return self._to_response(news)

    async def set_hot(
        self,
        db: AsyncSession,
        news_id: UUID,
        is_hot: bool,
        hot_score: int | None = None,
    ) -> NewsResponse:
        await self._get_or_404(db, news_id)
        values: dict = {"is_hot": is_hot}
        if hot_score is not None:
            values["hot_score"] = hot_score
        return self._to_response(await news_repository.update(db, news_id, values))

    async def delete_news(self, db: AsyncSession, news_id: UUID) -> None:
        await self._get_or_404(db, news_id)
        await news_repository.delete(db, news_id)


# 싱글턴 인스턴스 — Singleton instance
news_service: NewsService = NewsService()
