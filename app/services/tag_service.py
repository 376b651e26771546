"""태그 서비스 — 태그 CRUD, 슬러그 처리, 게시글용 일괄 생성.

Tag Service — Tag CRUD, slug generation and get-or-create used by posts.
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.blog import Tag
from app.repositories.tag_repository import tag_repository
from app.schemas.taxonomy import TagCreate, TagResponse, TagUpdate
from app.utils.exceptions import DuplicateError, NotFoundError
from app.utils.pagination import Page, PageParams, build_page
from app.utils.slug import unique_slug


class TagService:
    """태그 비즈니스 로직 서비스 (Tag business logic)."""

    def _to_response(self, tag: Tag, post_count: int = 0) -> TagResponse:
        return TagResponse(
            id=str(tag.id),
            name=tag.name,
            slug=tag.slug,
            post_count=post_count,
            created_at=tag.created_at,
        )

    async def _with_counts(self, db: AsyncSession, tags: list[Tag]) -> list[TagResponse]:
        counts: dict[UUID, int] = await tag_repository.post_counts(db, [t.id for t in tags])
        return [self._to_response(t, counts.get(t.id, 0)) for t in tags]

    async def _get_or_404(self, db: AsyncSession, tag_id: UUID) -> Tag:
        tag: Tag | None = await tag_repository.get_by_id(db, tag_id)
        if tag is None:
            raise NotFoundError("Tag not found")
        return tag

    async def list_tags(self, db: AsyncSession) -> list[TagResponse]:
        return await self._with_counts(db, await tag_repository.list_by_name(db))

    async def list_tags_paginated(self, db: AsyncSession, params: PageParams) -> Page[TagResponse]:
        tags, total = await tag_repository.get_paginated(
            db, tag_repository.list_query(), params.page, params.per_page
        )
        return build_page(await self._with_counts(db, list(tags)), total, params)

    async def get_tag(self, db: AsyncSession, tag_id: UUID) -> TagResponse:
        return (await self._with_counts(db, [await self._get_or_404(db, tag_id)]))[0]

    async def get_by_slug(self, db: AsyncSession, slug: str) -> TagResponse:
        tag: Tag | None = await tag_repository.get_by_slug(db, slug)
        if tag is None:
            raise NotFoundError("Tag not found")
        return (await self._with_counts(db, [tag]))[0]

    async def get_by_name(self, db: AsyncSession, name: str) -> TagResponse:
        tag: Tag | None = await tag_repository.get_by_name(db, name)
        if tag is None:
            raise NotFoundError("Tag not found")
        return (await self._with_counts(db, [tag]))[0]

    async def create_tag(self, db: AsyncSession, data: TagCreate) -> TagResponse:
        """태그를 생성합니다.

        Raises:
            DuplicateError: 같은 이름의 태그가 존재 (Name taken)
        """
        if await tag_repository.get_by_name(db, data.name) is not None:
            raise DuplicateError("Tag name already exists")
        slug: str = await unique_slug(db, Tag, data.name, "tag")
        tag: Tag = await tag_repository.create(db, {"name": data.name, "slug": slug})
        return self._to_response(tag)

    async def update_tag(self, db: AsyncSession, tag_id: UUID, data: TagUpdate) -> TagResponse:
        """태그 이름 변경 — 슬러그 재생성 (Renaming regenerates the slug)."""
        tag: Tag = await self._get_or_404(db, tag_id)
        update_data: dict = {"name": data.name}
        if data.name != tag.name:
            if await tag_repository.exists(db, {"name": data.name}, exclude_id=tag_id):
                raise DuplicateError("Tag name already exists")
            update_data["slug"] = await unique_slug(db, Tag, data.name, "tag", exclude_id=tag_id)
        tag = await tag_repository.update(db, tag_id, update_data)
        return (await self._with_counts(db, [tag]))[0]

    async def delete_tag(self, db: AsyncSession, tag_id: UUID) -> None:
        """태그를 삭제합니다 — 게시글과의 연결도 함께 제거.

        Delete a tag together with its post links.
        """
        tag: Tag | None = await tag_repository.get_with_posts(db, tag_id)
        if tag is None:
            raise NotFoundError("Tag not found")
        tag.posts.clear()
        await db.flush()
        await db.delete(tag)
        await db.flush()

    async def get_or_create_many(self, db: AsyncSession, names: list[str]) -> list[Tag]:
        """이름 목록의 태그를 조회하고 없는 것은 생성합니다.

        Resolve tag names to Tag rows, creating the missing ones. Blank names
        and duplicates are dropped; input order is preserved.
        """
        cleaned: list[str] = []
        for name in names:
            stripped: str = name.strip()
            if stripped and stripped not in cleaned:
                cleaned.append(stripped)

        existing: dict[str, Tag] = {t.name: t for t in await tag_repository.get_by_names(db, cleaned)}
        tags: list[Tag] = []
        for name in cleaned:
            tag: Tag | None = existing.get(name)
            if tag is None:
                slug: str = await unique_slug(db, Tag, name, "tag")
                tag = await tag_repository.create(db, {"name": name, "slug": slug})
            tags.append(tag)
        return tags


# 싱글턴 인스턴스 — Singleton instance
tag_service: TagService = TagService()
