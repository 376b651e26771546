"""댓글 관련 Pydantic 요청/응답 스키마 정의.

Comment Pydantic request/response schema definitions.
IP address and user agent are stored but never returned.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

# 댓글 상태 — Moderation status
COMMENT_STATUS_PATTERN: str = r"^(pending|approved|spam|deleted)$"


class CommentCreate(BaseModel):
    """댓글 작성 요청 스키마.

    Comment creation request. Anonymous visitors must give guest_name.

    Attributes:
        post_id: 게시글 UUID (Target post)
        content: 댓글 내용 (Comment body)
        parent_id: 부모 댓글 UUID (Reply target, same post)
        guest_name: 게스트 이름 (Required when not logged in)
        guest_email: 게스트 이메일 (Optional)
    """

    post_id: UUID
    content: str = Field(min_length=1, max_length=5000)
    parent_id: UUID | None = None
    guest_name: str | None = Field(None, max_length=100)
    guest_email: str | None = Field(None, max_length=255)


class CommentStatusUpdate(BaseModel):
    status: str = Field(pattern=COMMENT_STATUS_PATTERN)


class CommentResponse(BaseModel):
    id: str
    post_id: str
    user_id: str | None
    author_name: str | None  # 회원 표시 이름 또는 게스트 이름 (Member or guest name)
    guest_email: str | None
    content: str
    parent_id: str | None
    status: str
    created_at: datetime
