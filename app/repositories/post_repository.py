"""게시글 레포지토리 — 게시글 조회/필터 쿼리와 삭제 정리.

Post Repository — Post queries with eager-loaded author, category and tags,
admin/public list queries, and cleanup of links before deletion.
"""

from uuid import UUID

from sqlalchemy import Select, delete, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.orm.attributes import set_committed_value

from app.models.blog import Category, Comment, Post, Tag
from app.repositories.base import BaseRepository

PUBLISHED: str = "published"


def _with_relations(query: Select) -> Select:
    """응답 조립에 필요한 관계를 즉시 로드합니다 (Eager-load response relations)."""
    return query.options(
        selectinload(Post.author),
        selectinload(Post.category),
        selectinload(Post.tags),
    ).execution_options(populate_existing=True)


class PostRepository(BaseRepository[Post]):
    """게시글 테이블 레포지토리 (Repository for the posts table)."""

    def __init__(self) -> None:
        super().__init__(Post)

    async def get_detail(self, db: AsyncSession, post_id: UUID) -> Post | None:
        """관계가 로드된 게시글 — Post with author, category and tags loaded."""
        result = await db.execute(_with_relations(select(Post).where(Post.id == post_id)))
        return result.scalar_one_or_none()

    async def get_by_slug(
        self,
        db: AsyncSession,
        slug: str,
        published_only: bool = False,
    ) -> Post | None:
        """슬러그로 게시글 조회 — published_only이면 발행글만."""
        query: Select = select(Post).where(Post.slug == slug)
        if published_only:
            query = query.where(Post.status == PUBLISHED)
        result = await db.execute(_with_relations(query))
        return result.scalar_one_or_none()

    def admin_query(
        self,
        status: str | None = None,
        category_id: UUID | None = None,
        tag_id: UUID | None = None,
        keyword: str | None = None,
    ) -> Select:
        """관리자 목록 쿼리 — 필터 적용, 최신 생성순.

        Admin list query with optional filters, newest first.
        """
        query: Select = select(Post)
        if status is not None:
            query = query.where(Post.status == status)
        if category_id is not None:
            query = query.where(Post.category_id == category_id)
        if tag_id is not None:
            query = query.where(Post.tags.any(Tag.id == tag_id))
        if keyword:
            pattern: str = f"%{keyword}%"
            query = query.where(or_(Post.title.ilike(pattern), Post.summary.ilike(pattern)))
        return _with_relations(query.order_by(Post.created_at.desc()))

    def published_query(
        self,
        category_slug: str | None = None,
        tag_slug: str | None = None,
        keyword: str | None = None,
    ) -> Select:
        """공개 목록 쿼리 — 상단 고정 우선순위, 발행일 내림차순.

        Public list of published posts, pinned first then newest published.
        """
        query: Select = select(Post).where(Post.status == PUBLISHED)
        if category_slug is not None:
            query = query.where(Post.category.has(Category.slug == category_slug))
        if tag_slug is not None:
            query = query.where(Post.tags.any(Tag.slug == tag_slug))
        if keyword:
            query = query.where(Post.title.ilike(f"%{keyword}%"))
        return _with_relations(
            query.order_by(Post.top_priority.desc(), Post.published_at.desc(), Post.created_at.desc())
        )

    async def recent_published(self, db: AsyncSession, limit: int = 5) -> list[Post]:
        """최근 발행 게시글 — Latest published posts by publish date."""
        query: Select = (
            select(Post)
            .where(Post.status == PUBLISHED)
            .order_by(Post.published_at.desc(), Post.created_at.desc())
            .limit(limit)
        )
        result = await db.execute(_with_relations(query))
        return list(result.scalars().all())

    async def increment_views(self, db: AsyncSession, post: Post) -> None:
        """조회수 1 증가 — Atomic view counter increment."""
        await db.execute(
            update(Post)
            .where(Post.id == post.id)
            .values(view_count=Post.view_count + 1, updated_at=Post.updated_at)
            .execution_options(synchronize_session=False)
        )
        set_committed_value(post, "view_count", (post.view_count or 0) + 1)

    async def remove_links(self, db: AsyncSession, post: Post) -> None:
        """삭제 전 태그 연결과 댓글을 제거합니다.

        Remove tag links and comments of a post ahead of deleting it.
        The post must have its tags collection loaded.
        """
        post.tags.clear()
        await db.execute(delete(Comment).where(Comment.post_id == post.id))
        await db.flush()


# 싱글턴 인스턴스 — Singleton instance
post_repository: PostRepository = PostRepository()
