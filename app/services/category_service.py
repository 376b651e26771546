"""카테고리 서비스 — 카테고리 CRUD 및 슬러그/게시글 수 처리.

Category Service — Category CRUD, slug generation and dynamic post counts.
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.blog import Category
from app.repositories.category_repository import category_repository
from app.schemas.taxonomy import CategoryCreate, CategoryResponse, CategoryUpdate
from app.utils.exceptions import DuplicateError, NotFoundError
from app.utils.pagination import Page, PageParams, build_page
from app.utils.slug import unique_slug


class CategoryService:
    """카테고리 비즈니스 로직 서비스 (Category business logic)."""

    def _to_response(self, category: Category, post_count: int = 0) -> CategoryResponse:
        return CategoryResponse(
            id=str(category.id),
            name=category.name,
            slug=category.slug,
            description=category.description,
            post_count=post_count,
            created_at=category.created_at,
        )

    async def _with_counts(self, db: AsyncSession, categories: list[Category]) -> list[CategoryResponse]:
        """게시글 수를 붙여 응답으로 변환 — Attach post counts in one query."""
        counts: dict[UUID, int] = await category_repository.post_counts(db, [c.id for c in categories])
        return [self._to_response(c, counts.get(c.id, 0)) for c in categories]

    async def _get_or_404(self, db: AsyncSession, category_id: UUID) -> Category:
        category: Category | None = await category_repository.get_by_id(db, category_id)
        if category is None:
            raise NotFoundError("Category not found")
        return category

    async def list_categories(self, db: AsyncSession) -> list[CategoryResponse]:
        """이름순 전체 목록과 게시글 수 — All categories by name with post counts."""
        return await self._with_counts(db, await category_repository.list_by_name(db))

    async def list_categories_paginated(self, db: AsyncSession, params: PageParams) -> Page[CategoryResponse]:
        categories, total = await category_repository.get_paginated(
            db, category_repository.list_query(), params.page, params.per_page
        )
        return build_page(await self._with_counts(db, list(categories)), total, params)

    async def get_category(self, db: AsyncSession, category_id: UUID) -> CategoryResponse:
        category: Category = await self._get_or_404(db, category_id)
        return (await self._with_counts(db, [category]))[0]

    async def get_by_slug(self, db: AsyncSession, slug: str) -> CategoryResponse:
        category: Category | None = await category_repository.get_by_slug(db, slug)
        if category is None:
            raise NotFoundError("Category not found")
        return (await self._with_counts(db, [category]))[0]

    async def create_category(self, db: AsyncSession, data: CategoryCreate) -> CategoryResponse:
        """카테고리를 생성합니다 — 슬러그는 이름에서 생성.

        Raises:
            DuplicateError: 같은 이름의 카테고리가 존재 (Name taken)
        """
        if await category_repository.get_by_name(db, data.name) is not None:
            raise DuplicateError("Category name already exists")

        slug: str = await unique_slug(db, Category, data.name, "category")
        category: Category = await category_repository.create(
            db, {"name": data.name, "slug": slug, "description": data.description}
        )
        return self._to_response(category)

    async def update_category(
        self,
        db: AsyncSession,
        category_id: UUID,
        data: CategoryUpdate,
    ) -> CategoryResponse:
        """카테고리를 수정합니다 — 이름이 바뀌면 슬러그 재생성.

        Update a category. A name change regenerates the slug.
        """
        category: Category = await self._get_or_404(db, category_id)
        update_data: dict = data.model_dump(exclude_unset=True)

        new_name: str | None = update_data.get("name")
        if new_name is not None and new_name != category.name:
            if await category_repository.exists(db, {"name": new_name}, exclude_id=category_id):
                raise DuplicateError("Category name already exists")
            update_data["slug"] = await unique_slug(db, Category, new_name, "category", exclude_id=category_id)

        category = await category_repository.update(db, category_id, update_data)
        return (await self._with_counts(db, [category]))[0]

    async def delete_category(self, db: AsyncSession, category_id: UUID) -> None:
        """카테고리를 삭제합니다 — 게시글은 남고 category_id만 비워짐.

        Delete a category. Its posts remain with category_id cleared.
        """
        await self._get_or_404(db, category_id)
        await category_repository.detach_posts(db, category_id)
        await category_repository.delete(db, category_id)


# 싱글턴 인스턴스 — Singleton instance
category_service: CategoryService = CategoryService()
