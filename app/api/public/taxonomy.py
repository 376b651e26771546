"""공개 카테고리/태그 라우터.

Public Category and Tag Routers — Name-ordered lists with post counts and
lookups by slug.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.taxonomy import CategoryResponse, TagResponse
from app.services.category_service import category_service
from app.services.tag_service import tag_service

categories_router: APIRouter = APIRouter()
tags_router: APIRouter = APIRouter()


@categories_router.get("/", response_model=list[CategoryResponse])
async def list_categories(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[CategoryResponse]:
    return await category_service.list_categories(db)


@categories_router.get("/{slug}", response_model=CategoryResponse)
async def get_category(
    slug: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CategoryResponse:
    return await category_service.get_by_slug(db, slug)


@tags_router.get("/", response_model=list[TagResponse])
async def list_tags(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[TagResponse]:
    return await tag_service.list_tags(db)


@tags_router.get("/{slug}", response_model=TagResponse)
async def get_tag(
    slug: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TagResponse:
    return await tag_service.get_by_slug(db, slug)
