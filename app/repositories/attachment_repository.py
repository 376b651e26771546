"""첨부파일 레포지토리 — 첨부파일 목록 필터 쿼리.

Attachment Repository — Filtered attachment list queries.
"""

from uuid import UUID

from sqlalchemy import Select, select

from app.models.attachment import Attachment
from app.repositories.base import BaseRepository


class AttachmentRepository(BaseRepository[Attachment]):
    """첨부파일 테이블 레포지토리 (Repository for the attachments table)."""

    def __init__(self) -> None:
        super().__init__(Attachment)

    def list_query(self, type: str | None = None, uploader_id: UUID | None = None) -> Select:
        """목록 쿼리 — 유형/업로더 필터, 최신 업로드순 (Newest first)."""
        query: Select = select(Attachment)
        if type is not None:
            query = query.where(Attachment.type == type)
        if uploader_id is not None:
            query = query.where(Attachment.uploader_id == uploader_id)
        return query.order_by(Attachment.created_at.desc())


# 싱글턴 인스턴스 — Singleton instance
attachment_repository: AttachmentRepository = AttachmentRepository()
