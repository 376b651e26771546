"""페이지 서비스 — 독립 페이지 CRUD.

Page Service — Standalone page CRUD with slug generation and the public
read path (published only, view counting).
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.blog import Page as PageModel
from app.models.user import User
from app.repositories.page_repository import page_repository
from app.schemas.page import PageCreate, PageResponse, PageUpdate
from app.utils.exceptions import NotFoundError
from app.utils.pagination import Page, PageParams, build_page
from app.utils.slug import unique_slug


class PageService:
    """페이지 비즈니스 로직 서비스 (Standalone page business logic)."""

    def _to_response(self, page: PageModel) -> PageResponse:
        return PageResponse(
            id=str(page.id),
            title=page.title,
            slug=page.slug,
            content=page.content,
            original_content=page.original_content,
            author_id=str(page.author_id) if page.author_id else None,
            author_name=page.author.display_name if page.author else None,
            status=page.status,
            view_count=page.view_count,
            created_at=page.created_at,
            updated_at=page.updated_at,
        )

    async def _get_or_404(self, db: AsyncSession, page_id: UUID) -> PageModel:
        page: PageModel | None = await page_repository.get_detail(db, page_id)
        if page is None:
            raise NotFoundError("Page not found")
        return page

    async def create_page(self, db: AsyncSession, data: PageCreate, author: User) -> PageResponse:
        slug: str = await unique_slug(db, PageModel, data.title, "page")
        page: PageModel = await page_repository.create(
            db,
            {
                "title": data.title,
                "slug": slug,
                "content": data.content,
                "original_content": data.original_content,
                "status": data.status,
                "author_id": author.id,
            },
        )
        return self._to_response(await self._get_or_404(db, page.id))

    async def get_page(self, db: AsyncSession, page_id: UUID) -> PageResponse:
        return self._to_response(await self._get_or_404(db, page_id))

    async def get_published_by_slug(self, db: AsyncSession, slug: str) -> PageResponse:
        """공개 페이지 — 발행된 것만, 조회수 1 증가.

        Raises:
            NotFoundError: 발행된 페이지가 없을 때 (No published page)
        """
        page: PageModel | None = await page_repository.get_published_by_slug(db, slug)
        if page is None:
            raise NotFoundError("Page not found")
        await page_repository.increment_views(db, page)
        return self._to_response(page)

    async def list_pages(
        self,
        db: AsyncSession,
        params: PageParams,
        status: str | None = None,
    ) -> Page[PageResponse]:
        pages, total = await page_repository.get_paginated(
            db, page_repository.list_query(status), params.page, params.per_page
        )
        return build_page([self._to_response(p) for p in pages], total, params)

    async def list_published(self, db: AsyncSession) -> list[PageResponse]:
        return [self._to_response(p) for p in await page_repository.list_published(db)]

    async def update_page(self, db: AsyncSession, page_id: UUID, data: PageUpdate) -> PageResponse:
        """페이지 수정 — 제목이 바뀌면 슬러그 재생성 (Title change regenerates slug)."""
        page: PageModel = await self._get_or_404(db, page_id)
        update_data: dict = data.model_dump(exclude_unset=True)

        new_title: str | None = update_data.get("title")
        if new_title is not None and new_title != page.title:
            update_data["slug"] = await unique_slug(db, PageModel, new_title, "page", exclude_id=page_id)

        await page_repository.update(db, page_id, update_data)
        return self._to_response(await self._get_or_404(db, page_id))

    async def delete_page(self, db: AsyncSession, page_id: UUID) -> None:
        await self._get_or_404(db, page_id)
        await page_repository.delete(db, page_id)


# 싱글턴 인스턴스 — Singleton instance
page_service: PageService = PageService()
