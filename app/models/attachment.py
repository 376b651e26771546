"""첨부파일 모델 — 업로드된 파일의 메타데이터.

Attachment model — Metadata of files stored under UPLOAD_DIR.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import BigInteger, DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class Attachment(Base):
    """첨부파일 테이블.

    Attachment table. `path` is relative to UPLOAD_DIR, `url` is what clients use.

    Attributes:
        name: 표시 이름 (Display name, originally the uploaded file name)
        path: 저장 경로 (Storage path relative to UPLOAD_DIR)
        url: 공개 URL (Public URL under UPLOAD_URL_PREFIX)
        media_type: MIME 타입 (Content type)
        suffix: 확장자 (Lowercase extension without dot)
        size: 바이트 크기 (Size in bytes)
        width / height: 이미지 크기 (Image dimensions, optional)
        uploader_id: 업로더 FK (Uploader, SET NULL on user delete)
        type: 분류 (image / video / audio / document / other)
    """

    __tablename__ = "attachments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    path: Mapped[str] = mapped_column(String(500), unique=True, nullable=False)
    url: Mapped[str] = mapped_column(String(500), nullable=False)
    media_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    suffix: Mapped[str | None] = mapped_column(String(20), nullable=True)
    size: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)
    width: Mapped[int | None] = mapped_column(Integer, nullable=True)
    height: Mapped[int | None] = mapped_column(Integer, nullable=True)
    uploader_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    type: Mapped[str] = mapped_column(String(20), default="other", nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    uploader = relationship("User")
