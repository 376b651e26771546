"""독립 페이지 Pydantic 요청/응답 스키마 정의.

Standalone page request/response schemas.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from app.schemas.common import reject_null

PAGE_STATUS_PATTERN: str = r"^(draft|published)$"


class PageCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1)
    original_content: str | None = None
    status: str = Field("draft", pattern=PAGE_STATUS_PATTERN)


class PageUpdate(BaseModel):
    """페이지 수정 요청 (부분 업데이트) — 제목 변경 시 슬러그 재생성."""

    title: str | None = Field(None, min_length=1, max_length=200)
    content: str | None = Field(None, min_length=1)
    original_content: str | None = None
    status: str | None = Field(None, pattern=PAGE_STATUS_PATTERN)

    @field_validator("title", "content", "status")
    @classmethod
    def _not_null(cls, value: Any) -> Any:
        return reject_null(value)


class PageResponse(BaseModel):
    id: str
    title: str
    slug: str
    content: str
    original_content: str | None
    author_id: str | None
    author_name: str | None
    status: str
    view_count: int
    created_at: datetime
    updated_at: datetime
