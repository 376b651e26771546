"""공개 댓글 라우터 — 승인된 댓글 조회와 댓글 작성.

Public Comment Router — Approved comments of a post and comment submission
by members or guests.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_optional_user
from app.database import get_db
from app.models.user import User
from app.schemas.comment import CommentCreate, CommentResponse
from app.services.comment_service import comment_service
from app.utils.pagination import Page, PageParams, page_params

router: APIRouter = APIRouter()


@router.get("/posts/{post_id}", response_model=Page[CommentResponse])
async def list_post_comments(
    post_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    params: Annotated[PageParams, Depends(page_params)],
) -> Page[CommentResponse]:
    """게시글의 승인된 댓글 — 오래된 순 (Approved comments, oldest first)."""
    return await comment_service.list_approved(db, post_id, params)


@router.post("/", response_model=CommentResponse, status_code=201)
async def create_comment(
    data: CommentCreate,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User | None, Depends(get_optional_user)],
) -> CommentResponse:
    """댓글 작성 — 승인 대기 상태로 저장.

    Submit a comment. Anonymous visitors must give a guest name. The
    client IP and user agent are recorded for moderation.
    """
    result: CommentResponse = await comment_service.create_comment(
        db,
        data,
        user=current_user,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    await db.commit()
    return result
