"""태그 레포지토리 — 태그 조회, 게시글 수 집계, 연결 해제.

Tag Repository — Tag lookups, per-tag post counts and link removal.
"""

from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.blog import Tag, post_tags
from app.repositories.base import BaseRepository


class TagRepository(BaseRepository[Tag]):
    """태그 테이블 레포지토리 (Repository for the tags table)."""

    def __init__(self) -> None:
        super().__init__(Tag)

    async def get_by_slug(self, db: AsyncSession, slug: str) -> Tag | None:
        return await self.get_one_by(db, "slug", slug)

    async def get_by_name(self, db: AsyncSession, name: str) -> Tag | None:
        return await self.get_one_by(db, "name", name)

    async def get_by_names(self, db: AsyncSession, names: list[str]) -> list[Tag]:
        """이름 목록에 해당하는 태그들 — Tags whose name is in `names`."""
        if not names:
            return []
        result = await db.execute(select(Tag).where(Tag.name.in_(names)))
        return list(result.scalars().all())

    async def list_by_name(self, db: AsyncSession) -> list[Tag]:
        return list(await self.get_all(db, order_by=Tag.name))

    def list_query(self) -> Select:
        """페이지네이션용 쿼리 — 최신 생성순 (Newest first)."""
        return select(Tag).order_by(Tag.created_at.desc())

    async def post_counts(self, db: AsyncSession, tag_ids: list[UUID]) -> dict[UUID, int]:
        """태그별 게시글 수 — Post count per tag via the post_tags link table."""
        if not tag_ids:
            return {}
        result = await db.execute(
            select(post_tags.c.tag_id, func.count(post_tags.c.post_id))
            .where(post_tags.c.tag_id.in_(tag_ids))
            .group_by(post_tags.c.tag_id)
        )
        return {tag_id: count for tag_id, count in result.all()}

    async def get_with_posts(self, db: AsyncSession, tag_id: UUID) -> Tag | None:
        """게시글 컬렉션을 로드한 태그 — Tag with its posts collection loaded."""
        result = await db.execute(
            select(Tag)
            .options(selectinload(Tag.posts))
            .where(Tag.id == tag_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()


# 싱글턴 인스턴스 — Singleton instance
tag_repository: TagRepository = TagRepository()
