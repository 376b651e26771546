"""카테고리 레포지토리 — 카테고리 조회 및 게시글 수 집계.

Category Repository — Category lookups and per-category post counts.
"""

from uuid import UUID

from sqlalchemy import Select, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.blog import Category, Post
from app.repositories.base import BaseRepository


class CategoryRepository(BaseRepository[Category]):
    """카테고리 테이블 레포지토리 (Repository for the categories table)."""

    def __init__(self) -> None:
        super().__init__(Category)

    async def get_by_slug(self, db: AsyncSession, slug: str) -> Category | None:
        return await self.get_one_by(db, "slug", slug)

    async def get_by_name(self, db: AsyncSession, name: str) -> Category | None:
        return await self.get_one_by(db, "name", name)

    async def list_by_name(self, db: AsyncSession) -> list[Category]:
        """이름순 전체 목록 — All categories ordered by name."""
        return list(await self.get_all(db, order_by=Category.name))

    def list_query(self) -> Select:
        """페이지네이션용 쿼리 — 최신 생성순 (Newest first)."""
        return select(Category).order_by(Category.created_at.desc())

    async def post_counts(self, db: AsyncSession, category_ids: list[UUID]) -> dict[UUID, int]:
        """카테고리별 게시글 수를 한 번의 GROUP BY로 계산합니다.

        Count posts per category in a single GROUP BY query. Categories
        without posts are absent from the result.
        """
        if not category_ids:
            return {}
        result = await db.execute(
            select(Post.category_id, func.count(Post.id))
            .where(Post.category_id.in_(category_ids))
            .group_by(Post.category_id)
        )
        return {category_id: count for category_id, count in result.all()}

    async def detach_posts(self, db: AsyncSession, category_id: UUID) -> None:
        """카테고리 삭제 전 게시글의 category_id를 NULL로 만듭니다.

        Clear category_id on every post of the category before deletion.
        """
        await db.execute(
            update(Post).where(Post.category_id == category_id).values(category_id=None)
        )
        await db.flush()


# 싱글턴 인스턴스 — Singleton instance
category_repository: CategoryRepository = CategoryRepository()
