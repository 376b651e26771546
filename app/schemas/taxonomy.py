"""카테고리/태그 Pydantic 요청/응답 스키마 정의.

Category and tag request/response schemas. post_count is computed on read.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from app.schemas.common import reject_null


# === 카테고리 (Category) 스키마 ===

class CategoryCreate(BaseModel):
    """카테고리 생성 요청 스키마 — 슬러그는 이름에서 생성 (Slug derived from name)."""

    name: str = Field(min_length=1, max_length=100)
    description: str | None = None


class CategoryUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None

    @field_validator("name")
    @classmethod
    def _not_null(cls, value: Any) -> Any:
        return reject_null(value)


class CategoryResponse(BaseModel):
    id: str
    name: str
    slug: str
    description: str | None
    post_count: int  # 전체 게시글 수 — 상태 무관 (Every post in the category)
    created_at: datetime


# === 태그 (Tag) 스키마 ===

class TagCreate(BaseModel):
    name: str = Field(min_length=1, max_length=50)


class TagUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=50)


class TagResponse(BaseModel):
    id: str
    name: str
    slug: str
    post_count: int
    created_at: datetime
