"""댓글 서비스 — 댓글 작성, 승인/스팸 처리, 삭제.

Comment Service — Public comment submission, moderation and deletion.
Keeps posts.comment_count in step with comment creation and deletion.
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.blog import Comment, Post
from app.models.user import User
from app.repositories.comment_repository import comment_repository
from app.repositories.post_repository import PUBLISHED, post_repository
from app.schemas.comment import CommentCreate, CommentResponse
from app.utils.exceptions import BadRequestError, NotFoundError
from app.utils.pagination import Page, PageParams, build_page


class CommentService:
    """댓글 비즈니스 로직을 처리하는 서비스 (Comment business logic)."""

    def _to_response(self, comment: Comment) -> CommentResponse:
        """댓글 모델을 응답으로 변환 — IP/User-Agent는 제외.

        Convert a Comment (user loaded) to a response. The IP address and
        user agent are never exposed.
        """
        author_name: str | None = comment.user.display_name if comment.user else comment.guest_name
        return CommentResponse(
            id=str(comment.id),
            post_id=str(comment.post_id),
            user_id=str(comment.user_id) if comment.user_id else None,
            author_name=author_name,
            guest_email=comment.guest_email,
            content=comment.content,
            parent_id=str(comment.parent_id) if comment.parent_id else None,
            status=comment.status,
            created_at=comment.created_at,
        )

    async def _get_or_404(self, db: AsyncSession, comment_id: UUID) -> Comment:
        comment: Comment | None = await comment_repository.get_detail(db, comment_id)
        if comment is None:
            raise NotFoundError("Comment not found")
        return comment

    async def create_comment(
        self,
        db: AsyncSession,
        data: CommentCreate,
        user: User | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> CommentResponse:
        """댓글을 작성합니다 — 승인 대기(pending) 상태로 저장.

        Submit a comment in "pending" status and bump the post's counter.

        Raises:
            NotFoundError: 게시글이 없을 때 (Unknown post)
            BadRequestError: 미발행/댓글 금지 게시글, 게스트 이름 누락,
                             다른 게시글의 부모 댓글
                             (Post not open for comments, missing guest
                             name, or parent on another post)
        """
        post: Post | None = await post_repository.get_by_id(db, data.post_id)
        if post is None:
            raise NotFoundError("Post not found")
        if post.status != PUBLISHED or not post.allow_comment:
            raise BadRequestError("Comments are not allowed on this post")

        if user is None and not (data.guest_name and data.guest_name.strip()):
            raise BadRequestError("Guest name is required for anonymous comments")

        if data.parent_id is not None:
            parent: Comment | None = await comment_repository.get_by_id(db, data.parent_id)
            if parent is None or parent.post_id != post.id:
                raise BadRequestError("Parent comment does not belong to this post")

        comment: Comment = await comment_repository.create(
            db,
            {
                "post_id": post.id,
                "user_id": user.id if user else None,
                "guest_name": None if user else data.guest_name.strip(),
                "guest_email": None if user else data.guest_email,
                "content": data.content,
                "parent_id": data.parent_id,
                "ip_address": ip_address,
                "user_agent": (user_agent or "")[:500] or None,
                "status": "pending",
            },
        )
        post.comment_count = (post.comment_count or 0) + 1
        await db.flush()

        return self._to_response(await self._get_or_404(db, comment.id))

    async def list_approved(
        self,
        db: AsyncSession,
        post_id: UUID,
        params: PageParams,
    ) -> Page[CommentResponse]:
        """게시글의 승인된 댓글 (오래된 순) — Approved comments of a post."""
        comments, total = await comment_repository.get_paginated(
            db, comment_repository.approved_by_post_query(post_id), params.page, params.per_page
        )
        return build_page([self._to_response(c) for c in comments], total, params)

    async def list_comments(
        self,
        db: AsyncSession,
        params: PageParams,
        status: str | None = None,
        post_id: UUID | None = None,
    ) -> Page[CommentResponse]:
        """관리자 댓글 목록 — 상태/게시글 필터 (Admin list with filters)."""
        comments, total = await comment_repository.get_paginated(
            db, comment_repository.admin_query(status, post_id), params.page, params.per_page
        )
        return build_page([self._to_response(c) for c in comments], total, params)

    async def get_comment(self, db: AsyncSession, comment_id: UUID) -> CommentResponse:
        return self._to_response(await self._get_or_404(db, comment_id))

    async def set_status(self, db: AsyncSession, comment_id: UUID, status: str) -> CommentResponse:
        """댓글 상태 변경 (pending/approved/spam/deleted)."""
        comment: Comment = await self._get_or_404(db, comment_id)
        comment.status = status
        await db.flush()
        return self._to_response(await self._get_or_404(db, comment_id))

    async def approve(self, db: AsyncSession, comment_id: UUID) -> CommentResponse:
        return await self.set_status(db, comment_id, "approved")

    async def mark_spam(self, db: AsyncSession, comment_id: UUID) -> CommentResponse:
        return await self.set_status(db, comment_id, "spam")

    async def delete_comment(self, db: AsyncSession, comment_id: UUID) -> None:
        """댓글을 삭제하고 게시글 댓글 수를 줄입니다 (0 미만 금지).

        Delete a comment and decrement the post's counter, never below zero.
        """
        comment: Comment = await self._get_or_404(db, comment_id)
        post: Post | None = await post_repository.get_by_id(db, comment.post_id)
        if post is not None:
            post.comment_count = max(0, (post.comment_count or 0) - 1)
        await db.delete(comment)
        await db.flush()


# 싱글턴 인스턴스 — Singleton instance
comment_service: CommentService = CommentService()
