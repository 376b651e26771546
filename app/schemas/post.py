"""게시글 관련 Pydantic 요청/응답 스키마 정의.

Post Pydantic request/response schema definitions.
Tags are exchanged by name; unknown names are created on save.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from app.schemas.common import reject_null

# 게시글 상태 — Post workflow status
POST_STATUS_PATTERN: str = r"^(draft|published|private|scheduled)$"


class PostCreate(BaseModel):
    """게시글 생성 요청 스키마.

    Post creation request schema.

    Attributes:
        title: 제목 (Title, max 200)
        summary: 요약 (Excerpt, max 500)
        content: 본문 (Rendered content, required)
        status: 상태 (draft / published / private / scheduled)
        category_id: 카테고리 UUID (Optional category)
        tags: 태그 이름 목록 (Tag names, created when missing)
    """

    title: str = Field(min_length=1, max_length=200)
    summary: str | None = Field(None, max_length=500)
    content: str = Field(min_length=1)
    original_content: str | None = None  # 원본 마크다운 (Source markdown)
    thumbnail: str | None = Field(None, max_length=500)
    status: str = Field("draft", pattern=POST_STATUS_PATTERN)
    category_id: UUID | None = None
    tags: list[str] = Field(default_factory=list)
    allow_comment: bool = True
    top_priority: int = Field(0, ge=0)  # 클수록 상단 고정 (Higher pins first)


class PostUpdate(BaseModel):
    """게시글 수정 요청 스키마 (부분 업데이트).

    Partial update. `tags`, when given, replaces the whole tag set.
    """

    title: str | None = Field(None, min_length=1, max_length=200)
    summary: str | None = Field(None, max_length=500)
    content: str | None = Field(None, min_length=1)
    original_content: str | None = None
    thumbnail: str | None = Field(None, max_length=500)
    status: str | None = Field(None, pattern=POST_STATUS_PATTERN)
    category_id: UUID | None = None
    tags: list[str] | None = None
    allow_comment: bool | None = None
    top_priority: int | None = Field(None, ge=0)

    @field_validator("title", "content", "status", "allow_comment", "top_priority")
    @classmethod
    def _not_null(cls, value: Any) -> Any:
        return reject_null(value)


class PostListResponse(BaseModel):
    """게시글 목록 항목 응답 — 본문 제외 (List item without the body)."""

    id: str
    title: str
    slug: str
    summary: str | None
    thumbnail: str | None
    status: str
    author_id: str | None
    author_name: str | None  # 닉네임, 없으면 username (Nickname or username)
    category_id: str | None
    category_name: str | None
    tags: list[str]
    allow_comment: bool
    top_priority: int
    view_count: int
    like_count: int
    comment_count: int
    published_at: datetime | None
    created_at: datetime


class PostResponse(PostListResponse):
    """게시글 상세 응답 스키마 (Post detail response)."""

    content: str
    original_content: str | None
    updated_at: datetime
