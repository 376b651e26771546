"""첨부파일 서비스 — 업로드, 목록, 이름 변경, 삭제.

Attachment Service — Upload (single and batch), listing, rename and
deletion of attachment rows together with their files.
"""

import logging
import mimetypes
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.attachment import Attachment
from app.models.user import User
from app.repositories.attachment_repository import attachment_repository
from app.schemas.attachment import AttachmentResponse
from app.services.storage_service import StoredFile, storage_service
from app.utils.exceptions import BadRequestError, NotFoundError
from app.utils.pagination import Page, PageParams, build_page

logger = logging.getLogger(__name__)

# 문서로 분류되는 미디어 타입 — Media types classified as documents
DOCUMENT_MEDIA_TYPES: frozenset[str] = frozenset({
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "application/vnd.ms-powerpoint",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "text/plain",
    "text/markdown",
    "text/csv",
})


def attachment_type(media_type: str | None) -> str:
    """미디어 타입으로 첨부파일 유형 결정 (image/video/audio/document/other)."""
    if not media_type:
        return "other"
    for prefix in ("image", "video", "audio"):
        if media_type.startswith(f"{prefix}/"):
            return prefix
    if media_type in DOCUMENT_MEDIA_TYPES:
        return "document"
    return "other"


@dataclass
class UploadItem:
    """업로드 요청 한 건 (One file of an upload request)."""

    filename: str
    content: bytes
    content_type: str | None = None


class AttachmentService:
    """첨부파일 비즈니스 로직 서비스 (Attachment business logic)."""

    def _to_response(self, attachment: Attachment) -> AttachmentResponse:
        return AttachmentResponse(
            id=str(attachment.id),
            name=attachment.name,
            path=attachment.path,
            url=attachment.url,
            media_type=attachment.media_type,
            suffix=attachment.suffix,
            size=attachment.size,
            width=attachment.width,
            height=attachment.height,
            uploader_id=str(attachment.uploader_id) if attachment.uploader_id else None,
            type=attachment.type,
            created_at=attachment.created_at,
        )

    async def _get_or_404(self, db: AsyncSession, attachment_id: UUID) -> Attachment:
        attachment: Attachment | None = await attachment_repository.get_by_id(db, attachment_id)
        if attachment is None:
            raise NotFoundError("Attachment not found")
        return attachment

    async def _store(self, db: AsyncSession, item: UploadItem, uploader: User) -> Attachment:
        stored: StoredFile = storage_service.save(item.filename, item.content)
        media_type: str | None = item.content_type or mimetypes.guess_type(item.filename)[0]
        return await attachment_repository.create(
            db,
            {
                "name": item.filename,
                "path": stored.path,
                "url": stored.url,
                "media_type": media_type,
                "suffix": stored.suffix,
                "size": stored.size,
                "uploader_id": uploader.id,
                "type": attachment_type(media_type),
            },
        )

    async def upload(self, db: AsyncSession, item: UploadItem, uploader: User) -> AttachmentResponse:
        """파일 하나를 업로드합니다.

        Raises:
            BadRequestError: 허용되지 않은 확장자 (Disallowed extension)
            PayloadTooLargeError: 크기 초과 (File too large)
        """
        return self._to_response(await self._store(db, item, uploader))

    async def upload_many(
        self,
        db: AsyncSession,
        items: list[UploadItem],
        uploader: User,
    ) -> list[AttachmentResponse]:
        """여러 파일 업로드 — 모두 검증한 뒤에만 기록.

        Batch upload. Every file is validated before any is written, so one
        bad file rejects the whole batch.
        """
        if not items:
            raise BadRequestError("No files uploaded")
        for item in items:
            storage_service.validate(item.filename, len(item.content))
        return [self._to_response(await self._store(db, item, uploader)) for item in items]

    async def get_attachment(self, db: AsyncSession, attachment_id: UUID) -> AttachmentResponse:
        return self._to_response(await self._get_or_404(db, attachment_id))

    async def list_attachments(
        self,
        db: AsyncSession,
        params: PageParams,
        type: str | None = None,
        uploader_id: UUID | None = None,
    ) -> Page[AttachmentResponse]:
        attachments, total = await attachment_repository.get_paginated(
            db, attachment_repository.list_query(type, uploader_id), params.page, params.per_page
        )
        return build_page([self._to_response(a) for a in attachments], total, params)

    async def rename(self, db: AsyncSession, attachment_id: UUID, name: str) -> AttachmentResponse:
        await self._get_or_404(db, attachment_id)
        attachment: Attachment | None = await attachment_repository.update(db, attachment_id, {"name": name})
        return self._to_response(attachment)

    async def delete_attachment(self, db: AsyncSession, attachment_id: UUID) -> None:
        """첨부파일 행과 디스크 파일을 함께 삭제합니다.

        Delete the row and its file. A file already missing from disk is
        logged and does not block the row deletion.
        """
        attachment: Attachment = await self._get_or_404(db, attachment_id)
        if not storage_service.delete(attachment.path):
            logger.warning("File for attachment %s was already missing: %s", attachment.id, attachment.path)
        await attachment_repository.delete(db, attachment_id)


# 싱글턴 인스턴스 — Singleton instance
attachment_service: AttachmentService = AttachmentService()
