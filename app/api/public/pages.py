"""공개 페이지 라우터 — 발행된 독립 페이지.

Public Page Router — Published standalone pages.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.page import PageResponse
from app.services.page_service import page_service

router: APIRouter = APIRouter()


@router.get("/", response_model=list[PageResponse])
async def list_published_pages(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[PageResponse]:
    return await page_service.list_published(db)


@router.get("/{slug}", response_model=PageResponse)
async def get_published_page(
    slug: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PageResponse:
    """페이지 상세 — 조회수 1 증가."""
    result: PageResponse = await page_service.get_published_by_slug(db, slug)
    await db.commit()
    return result
