"""관리자 카테고리 라우터 — 카테고리 CRUD.

Admin Category Router — Category management endpoints.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_author
from app.database import get_db
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.taxonomy import CategoryCreate, CategoryResponse, CategoryUpdate
from app.services.category_service import category_service
from app.utils.pagination import Page, PageParams, page_params

router: APIRouter = APIRouter()


@router.get("/", response_model=Page[CategoryResponse])
async def list_categories(
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_author)],
    params: Annotated[PageParams, Depends(page_params)],
) -> Page[CategoryResponse]:
    """카테고리 목록 (최신순, 게시글 수 포함)."""
    return await category_service.list_categories_paginated(db, params)


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(
    category_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_author)],
) -> CategoryResponse:
    return await category_service.get_category(db, category_id)


@router.post("/", response_model=CategoryResponse, status_code=201)
async def create_category(
    data: CategoryCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_author)],
) -> CategoryResponse:
    result: CategoryResponse = await category_service.create_category(db, data)
    await db.commit()
    return result


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: UUID,
    data: CategoryUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_author)],
) -> CategoryResponse:
    result: CategoryResponse = await category_service.update_category(db, category_id, data)
    await db.commit()
    return result


@router.delete("/{category_id}", response_model=MessageResponse)
async def delete_category(
    category_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_author)],
) -> dict[str, str]:
    """카테고리 삭제 — 게시글은 남고 카테고리만 해제됨.

    Delete a category. Its posts remain, uncategorized.
    """
    await category_service.delete_category(db, category_id)
    await db.commit()
    return {"message": "Category deleted successfully"}
