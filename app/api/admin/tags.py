"""관리자 태그 라우터 — 태그 CRUD.

Admin Tag Router — Tag management endpoints.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_author
from app.database import get_db
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.taxonomy import TagCreate, TagResponse, TagUpdate
from app.services.tag_service import tag_service
from app.utils.pagination import Page, PageParams, page_params

router: APIRouter = APIRouter()


@router.get("/", response_model=Page[TagResponse])
async def list_tags(
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_author)],
    params: Annotated[PageParams, Depends(page_params)],
) -> Page[TagResponse]:
    return await tag_service.list_tags_paginated(db, params)


@router.get("/{tag_id}", response_model=TagResponse)
async def get_tag(
    tag_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_author)],
) -> TagResponse:
    return await tag_service.get_tag(db, tag_id)


@router.post("/", response_model=TagResponse, status_code=201)
async def create_tag(
    data: TagCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_author)],
) -> TagResponse:
    result: TagResponse = await tag_service.create_tag(db, data)
    await db.commit()
    return result


@router.put("/{tag_id}", response_model=TagResponse)
async def update_tag(
    tag_id: UUID,
    data: TagUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_author)],
) -> TagResponse:
    result: TagResponse = await tag_service.update_tag(db, tag_id, data)
    await db.commit()
    return result


@router.delete("/{tag_id}", response_model=MessageResponse)
async def delete_tag(
    tag_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_author)],
) -> dict[str, str]:
    """태그 삭제 — 게시글 연결도 제거."""
    await tag_service.delete_tag(db, tag_id)
    await db.commit()
    return {"message": "Tag deleted successfully"}
