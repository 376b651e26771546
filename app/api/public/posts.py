"""공개 게시글 라우터 — 발행된 게시글 목록과 상세.

Public Post Router — Published posts for site visitors.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.post import PostListResponse, PostResponse
from app.services.post_service import post_service
from app.utils.pagination import Page, PageParams, page_params

router: APIRouter = APIRouter()


@router.get("/", response_model=Page[PostListResponse])
async def list_published_posts(
    db: Annotated[AsyncSession, Depends(get_db)],
    params: Annotated[PageParams, Depends(page_params)],
    category: Annotated[str | None, Query(description="카테고리 슬러그")] = None,
    tag: Annotated[str | None, Query(description="태그 슬러그")] = None,
    keyword: Annotated[str | None, Query(description="제목 검색어")] = None,
) -> Page[PostListResponse]:
    """발행 게시글 목록 — 상단 고정 우선, 발행일 내림차순.

    Published posts, pinned first then newest. Optional filters by
    category slug, tag slug and title keyword.
    """
    return await post_service.list_published(db, params, category, tag, keyword)


@router.get("/{slug}", response_model=PostResponse)
async def get_published_post(
    slug: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PostResponse:
    """게시글 상세 — 조회수 1 증가 (Counts a view)."""
    result: PostResponse = await post_service.get_published_by_slug(db, slug)
    await db.commit()
    return result
