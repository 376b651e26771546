"""첨부파일 Pydantic 요청/응답 스키마 정의.

Attachment request/response schemas. Files arrive as multipart uploads.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class AttachmentUpdate(BaseModel):
    """첨부파일 수정 — 표시 이름만 변경 가능 (Only the display name is editable)."""

    name: str = Field(min_length=1, max_length=255)


class AttachmentResponse(BaseModel):
    id: str
    name: str  # 원본 파일명 (Original file name)
    path: str  # UPLOAD_DIR 기준 상대 경로 (Path relative to UPLOAD_DIR)
    url: str  # 공개 URL (Public URL under UPLOAD_URL_PREFIX)
    media_type: str | None
    suffix: str | None
    size: int
    width: int | None
    height: int | None
    uploader_id: str | None
    type: str  # image / video / audio / document / other
    created_at: datetime
