"""관리자 페이지 라우터 — 독립 페이지(About 등) CRUD.

Admin Page Router — Standalone page management endpoints.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_author
from app.database import get_db
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.page import PAGE_STATUS_PATTERN, PageCreate, PageResponse, PageUpdate
from app.services.page_service import page_service
from app.utils.pagination import Page, PageParams, page_params

router: APIRouter = APIRouter()


@router.get("/", response_model=Page[PageResponse])
async def list_pages(
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_author)],
    params: Annotated[PageParams, Depends(page_params)],
    status: Annotated[str | None, Query(pattern=PAGE_STATUS_PATTERN, description="상태 필터")] = None,
) -> Page[PageResponse]:
    return await page_service.list_pages(db, params, status)


@router.get("/{page_id}", response_model=PageResponse)
async def get_page(
    page_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_author)],
) -> PageResponse:
    return await page_service.get_page(db, page_id)


@router.post("/", response_model=PageResponse, status_code=201)
async def create_page(
    data: PageCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_author)],
) -> PageResponse:
    result: PageResponse = await page_service.create_page(db, data, current_user)
    await db.commit()
    return result


@router.put("/{page_id}", response_model=PageResponse)
async def update_page(
    page_id: UUID,
    data: PageUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_author)],
) -> PageResponse:
    result: PageResponse = await page_service.update_page(db, page_id, data)
    await db.commit()
    return result


@router.delete("/{page_id}", response_model=MessageResponse)
async def delete_page(
    page_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_author)],
) -> dict[str, str]:
    await page_service.delete_page(db, page_id)
    await db.commit()
    return {"message": "Page deleted successfully"}
