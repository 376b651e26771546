"""관리자 댓글 라우터 — 댓글 검토(승인/스팸)와 삭제.

Admin Comment Router — Comment moderation endpoints.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_author
from app.database import get_db
from app.models.user import User
from app.schemas.comment import COMMENT_STATUS_PATTERN, CommentResponse, CommentStatusUpdate
from app.schemas.common import MessageResponse
from app.services.comment_service import comment_service
from app.utils.pagination import Page, PageParams, page_params

router: APIRouter = APIRouter()


@router.get("/", response_model=Page[CommentResponse])
async def list_comments(
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_author)],
    params: Annotated[PageParams, Depends(page_params)],
    status: Annotated[str | None, Query(pattern=COMMENT_STATUS_PATTERN, description="상태 필터")] = None,
    post_id: Annotated[UUID | None, Query(description="게시글 ID 필터")] = None,
) -> Page[CommentResponse]:
    """전체 댓글 목록 — 상태/게시글 필터 (All comments, newest first)."""
    return await comment_service.list_comments(db, params, status, post_id)


@router.get("/{comment_id}", response_model=CommentResponse)
async def get_comment(
    comment_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_author)],
) -> CommentResponse:
    return await comment_service.get_comment(db, comment_id)


@router.patch("/{comment_id}/approve", response_model=CommentResponse)
async def approve_comment(
    comment_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_author)],
) -> CommentResponse:
    result: CommentResponse = await comment_service.approve(db, comment_id)
    await db.commit()
    return result


@router.patch("/{comment_id}/spam", response_model=CommentResponse)
async def mark_comment_spam(
    comment_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_author)],
) -> CommentResponse:
    result: CommentResponse = await comment_service.mark_spam(db, comment_id)
    await db.commit()
    return result


@router.patch("/{comment_id}/status", response_model=CommentResponse)
async def update_comment_status(
    comment_id: UUID,
    data: CommentStatusUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_author)],
) -> CommentResponse:
    result: CommentResponse = await comment_service.set_status(db, comment_id, data.status)
    await db.commit()
    return result


@router.delete("/{comment_id}", response_model=MessageResponse)
async def delete_comment(
    comment_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_author)],
) -> dict[str, str]:
    """댓글 삭제 — 게시글 댓글 수 감소 (0 미만으로 내려가지 않음)."""
    await comment_service.delete_comment(db, comment_id)
    await db.commit()
    return {"message": "Comment deleted successfully"}
