"""관리자 게시글 라우터 — 게시글 CRUD (작성자 이상).

Admin Post Router — Post management for authors and admins.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_author
from app.database import get_db
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.post import POST_STATUS_PATTERN, PostCreate, PostListResponse, PostResponse, PostUpdate
from app.services.post_service import post_service
from app.utils.pagination import Page, PageParams, page_params

router: APIRouter = APIRouter()


@router.get("/", response_model=Page[PostListResponse])
async def list_posts(
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_author)],
    params: Annotated[PageParams, Depends(page_params)],
    status: Annotated[str | None, Query(pattern=POST_STATUS_PATTERN, description="상태 필터")] = None,
    category_id: Annotated[UUID | None, Query(description="카테고리 ID 필터")] = None,
    tag_id: Annotated[UUID | None, Query(description="태그 ID 필터")] = None,
    keyword: Annotated[str | None, Query(description="제목/요약 검색어")] = None,
) -> Page[PostListResponse]:
    """게시글 목록 — 상태, 카테고리, 태그, 검색어 필터 (최신순).

    Admin post list with filters, newest first.
    """
    return await post_service.list_posts(db, params, status, category_id, tag_id, keyword)


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_author)],
) -> PostResponse:
    return await post_service.get_post(db, post_id)


@router.post("/", response_model=PostResponse, status_code=201)
async def create_post(
    data: PostCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_author)],
) -> PostResponse:
    """게시글 생성 — 현재 사용자가 작성자.

    Create a post authored by the current user.
    """
    result: PostResponse = await post_service.create_post(db, data, current_user)
    await db.commit()
    return result


@router.put("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: UUID,
    data: PostUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_author)],
) -> PostResponse:
    result: PostResponse = await post_service.update_post(db, post_id, data)
    await db.commit()
    return result


@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post(
    post_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_author)],
) -> dict[str, str]:
    """게시글 삭제 — 태그 연결과 댓글도 함께 삭제."""
    await post_service.delete_post(db, post_id)
    await db.commit()
    return {"message": "Post deleted successfully"}
