"""페이지 레포지토리 — 독립 페이지 쿼리.

Page Repository — Standalone page queries.
"""

from uuid import UUID

from sqlalchemy import Select, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.orm.attributes import set_committed_value

from app.models.blog import Page
from app.repositories.base import BaseRepository


class PageRepository(BaseRepository[Page]):
    """페이지 테이블 레포지토리 (Repository for the pages table)."""

    def __init__(self) -> None:
        super().__init__(Page)

    async def get_detail(self, db: AsyncSession, page_id: UUID) -> Page | None:
        result = await db.execute(
            select(Page)
            .options(selectinload(Page.author))
            .where(Page.id == page_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_published_by_slug(self, db: AsyncSession, slug: str) -> Page | None:
        """발행된 페이지만 슬러그로 조회 — Published page by slug."""
        result = await db.execute(
            select(Page)
            .options(selectinload(Page.author))
            .where(Page.slug == slug, Page.status == "published")
        )
        return result.scalar_one_or_none()

    def list_query(self, status: str | None = None) -> Select:
        """관리자 목록 — 최신 생성순 (Admin list, newest first)."""
        query: Select = select(Page).options(selectinload(Page.author))
        if status is not None:
            query = query.where(Page.status == status)
        return query.order_by(Page.created_at.desc())

    async def list_published(self, db: AsyncSession) -> list[Page]:
        """발행된 페이지 전체 — 제목순 (Published pages by title)."""
        result = await db.execute(
            select(Page)
            .options(selectinload(Page.author))
            .where(Page.status == "published")
            .order_by(Page.title)
        )
        return list(result.scalars().all())

    async def increment_views(self, db: AsyncSession, page: Page) -> None:
        await db.execute(
            update(Page)
            .where(Page.id == page.id)
            .values(view_count=Page.view_count + 1, updated_at=Page.updated_at)
            .execution_options(synchronize_session=False)
        )
        set_committed_value(page, "view_count", (page.view_count or 0) + 1)


# 싱글턴 인스턴스 — Singleton instance
page_repository: PageRepository = PageRepository()
