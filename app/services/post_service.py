"""게시글 서비스 — 게시글 CRUD, 발행 처리, 태그 연결.

Post Service — Post CRUD, publishing rules, tag assignment and the public
read paths (published list, by category/tag, search, detail by slug).
"""

from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.blog import Post, Tag
from app.models.user import User
from app.repositories.category_repository import category_repository
from app.repositories.post_repository import PUBLISHED, post_repository
from app.schemas.post import PostCreate, PostListResponse, PostResponse, PostUpdate
from app.services.tag_service import tag_service
from app.utils.exceptions import NotFoundError
from app.utils.pagination import Page, PageParams, build_page
from app.utils.slug import unique_slug


class PostService:
    """게시글 비즈니스 로직을 처리하는 서비스.

    Service handling post business logic. Responses need the author,
    category and tags relationships loaded (see post_repository).
    """

    def _base_fields(self, post: Post) -> dict[str, Any]:
        return {
            "id": str(post.id),
            "title": post.title,
            "slug": post.slug,
            "summary": post.summary,
            "thumbnail": post.thumbnail,
            "status": post.status,
            "author_id": str(post.author_id) if post.author_id else None,
            "author_name": post.author.display_name if post.author else None,
            "category_id": str(post.category_id) if post.category_id else None,
            "category_name": post.category.name if post.category else None,
            "tags": sorted(tag.name for tag in post.tags),
            "allow_comment": post.allow_comment,
            "top_priority": post.top_priority,
            "view_count": post.view_count,
            "like_count": post.like_count,
            "comment_count": post.comment_count,
            "published_at": post.published_at,
            "created_at": post.created_at,
        }

    def _to_list_response(self, post: Post) -> PostListResponse:
        return PostListResponse(**self._base_fields(post))

    def _to_response(self, post: Post) -> PostResponse:
        """게시글 모델을 상세 응답 스키마로 변환합니다.

        Convert a Post with its relations loaded to a PostResponse.
        """
        return PostResponse(
            **self._base_fields(post),
            content=post.content,
            original_content=post.original_content,
            updated_at=post.updated_at,
        )

    async def _get_detail_or_404(self, db: AsyncSession, post_id: UUID) -> Post:
        post: Post | None = await post_repository.get_detail(db, post_id)
        if post is None:
            raise NotFoundError("Post not found")
        return post

    async def _check_category(self, db: AsyncSession, category_id: UUID | None) -> None:
        if category_id is not None and await category_repository.get_by_id(db, category_id) is None:
            raise NotFoundError("Category not found")

    async def create_post(
        self,
        db: AsyncSession,
        data: PostCreate,
        author: User,
    ) -> PostResponse:
        """게시글을 생성합니다.

        Create a post. The slug comes from the title, published_at is set
        when the post is created as published, and tags are looked up by
        name or created.

        Raises:
            NotFoundError: 카테고리가 없을 때 (Unknown category)
        """
        await self._check_category(db, data.category_id)

        slug: str = await unique_slug(db, Post, data.title, "post")
        tags: list[Tag] = await tag_service.get_or_create_many(db, data.tags)

        post: Post = Post(
            title=data.title,
            slug=slug,
            summary=data.summary,
            content=data.content,
            original_content=data.original_content,
            thumbnail=data.thumbnail,
            status=data.status,
            author_id=author.id,
            category_id=data.category_id,
            allow_comment=data.allow_comment,
            top_priority=data.top_priority,
            published_at=datetime.now(timezone.utc) if data.status == PUBLISHED else None,
            tags=tags,
        )
        db.add(post)
        await db.flush()

        return self._to_response(await self._get_detail_or_404(db, post.id))

    async def update_post(
        self,
        db: AsyncSession,
        post_id: UUID,
        data: PostUpdate,
    ) -> PostResponse:
        """게시글을 수정합니다 (부분 업데이트).

        Partial update. A new title regenerates the slug, moving to published
        stamps published_at once, and a given tag list replaces the old one.

        Raises:
            NotFoundError: 게시글 또는 카테고리가 없을 때 (Unknown post or category)
        """
        post: Post = await self._get_detail_or_404(db, post_id)
        update_data: dict[str, Any] = data.model_dump(exclude_unset=True)

        if "category_id" in update_data:
            await self._check_category(db, update_data["category_id"])

        tag_names: list[str] | None = update_data.pop("tags", None)
        if tag_names is not None:
            post.tags = await tag_service.get_or_create_many(db, tag_names)

        new_title: str | None = update_data.get("title")
        if new_title is not None and new_title != post.title:
            post.slug = await unique_slug(db, Post, new_title, "post", exclude_id=post.id)

        if update_data.get("status") == PUBLISHED and post.published_at is None:
            post.published_at = datetime.now(timezone.utc)

        for field, value in update_data.items():
            setattr(post, field, value)

        await db.flush()
        return self._to_response(await self._get_detail_or_404(db, post_id))

    async def get_post(self, db: AsyncSession, post_id: UUID) -> PostResponse:
        """관리자용 게시글 상세 — 상태 무관 (Any status, admin view)."""
        return self._to_response(await self._get_detail_or_404(db, post_id))

    async def get_published_by_slug(self, db: AsyncSession, slug: str) -> PostResponse:
        """공개 게시글 상세 — 발행글만, 조회수 1 증가.

        Public detail by slug. Only published posts are visible; every read
        increments the view count.

        Raises:
            NotFoundError: 발행된 게시글이 없을 때 (No published post with this slug)
        """
        post: Post | None = await post_repository.get_by_slug(db, slug, published_only=True)
        if post is None:
            raise NotFoundError("Post not found")
        await post_repository.increment_views(db, post)
        return self._to_response(post)

    async def list_posts(
        self,
        db: AsyncSession,
        params: PageParams,
        status: str | None = None,
        category_id: UUID | None = None,
        tag_id: UUID | None = None,
        keyword: str | None = None,
    ) -> Page[PostListResponse]:
        """관리자 게시글 목록 (필터, 최신순) — Admin list with filters."""
        query = post_repository.admin_query(status, category_id, tag_id, keyword)
        posts, total = await post_repository.get_paginated(db, query, params.page, params.per_page)
        return build_page([self._to_list_response(p) for p in posts], total, params)

    async def list_published(
        self,
        db: AsyncSession,
        params: PageParams,
        category_slug: str | None = None,
        tag_slug: str | None = None,
        keyword: str | None = None,
    ) -> Page[PostListResponse]:
        """공개 게시글 목록 — 상단 고정 우선, 발행일 내림차순.

        Published posts, pinned first then newest. Filters cover the
        by-category, by-tag and title-search paths.
        """
        query = post_repository.published_query(category_slug, tag_slug, keyword)
        posts, total = await post_repository.get_paginated(db, query, params.page, params.per_page)
        return build_page([self._to_list_response(p) for p in posts], total, params)

    async def recent_published(self, db: AsyncSession, limit: int = 5) -> list[PostListResponse]:
        return [self._to_list_response(p) for p in await post_repository.recent_published(db, limit)]

    async def delete_post(self, db: AsyncSession, post_id: UUID) -> None:
        """게시글을 삭제합니다 — 태그 연결과 댓글도 함께 제거.

        Delete a post together with its tag links and comments.
        """
        post: Post = await self._get_detail_or_404(db, post_id)
        await post_repository.remove_links(db, post)
        await db.delete(post)
        await db.flush()


# 싱글턴 인스턴스 — Singleton instance
post_service: PostService = PostService()
