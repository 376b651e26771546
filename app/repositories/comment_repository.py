"""댓글 레포지토리 — 게시글별/관리자용 댓글 쿼리.

Comment Repository — Per-post and admin comment queries.
"""

from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.blog import Comment
from app.repositories.base import BaseRepository


class CommentRepository(BaseRepository[Comment]):
    """댓글 테이블 레포지토리 (Repository for the comments table)."""

    def __init__(self) -> None:
        super().__init__(Comment)

    def approved_by_post_query(self, post_id: UUID) -> Select:
        """게시글의 승인된 댓글 — 오래된 순 (Approved comments, oldest first)."""
        return (
            select(Comment)
            .options(selectinload(Comment.user))
            .where(Comment.post_id == post_id, Comment.status == "approved")
            .order_by(Comment.created_at.asc())
        )

    def admin_query(self, status: str | None = None, post_id: UUID | None = None) -> Select:
        """관리자 목록 — 상태/게시글 필터, 최신순 (Admin list, newest first)."""
        query: Select = select(Comment).options(selectinload(Comment.user))
        if status is not None:
            query = query.where(Comment.status == status)
        if post_id is not None:
            query = query.where(Comment.post_id == post_id)
        return query.order_by(Comment.created_at.desc())

    async def get_detail(self, db: AsyncSession, comment_id: UUID) -> Comment | None:
        """작성자가 로드된 댓글 — Comment with its user loaded."""
        result = await db.execute(
            select(Comment)
            .options(selectinload(Comment.user))
            .where(Comment.id == comment_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()


# 싱글턴 인스턴스 — Singleton instance
comment_repository: CommentRepository = CommentRepository()
