"""관리자 첨부파일 라우터 — 파일 업로드(단일/다중), 조회, 이름 변경, 삭제.

Admin Attachment Router — Multipart uploads stored under UPLOAD_DIR and the
attachment records that describe them.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_author
from app.database import get_db
from app.models.user import User
from app.schemas.attachment import AttachmentResponse, AttachmentUpdate
from app.schemas.common import MessageResponse
from app.services.attachment_service import UploadItem, attachment_service
from app.services.storage_service import storage_service
from app.utils.pagination import Page, PageParams, page_params

router: APIRouter = APIRouter()


async def _read_upload(file: UploadFile) -> UploadItem:
    """UploadFile을 크기 제한 안에서 읽어 UploadItem으로 변환."""
    content: bytes = await storage_service.read_upload(file)
    return UploadItem(filename=file.filename or "", content=content, content_type=file.content_type)


@router.post("/upload", response_model=AttachmentResponse, status_code=201)
async def upload_file(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_author)],
    file: Annotated[UploadFile, File(description="업로드할 파일")],
) -> AttachmentResponse:
    """파일 하나를 업로드합니다.

    Upload a single file. Disallowed extension → 400, oversized → 413.
    """
    result: AttachmentResponse = await attachment_service.upload(db, await _read_upload(file), current_user)
    await db.commit()
    return result


@router.post("/upload/batch", response_model=list[AttachmentResponse], status_code=201)
async def upload_files(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_author)],
    files: Annotated[list[UploadFile], File(description="업로드할 파일 목록")],
) -> list[AttachmentResponse]:
    """여러 파일 업로드 — 하나라도 검증에 실패하면 전체 거부."""
    items: list[UploadItem] = [await _read_upload(f) for f in files]
    result: list[AttachmentResponse] = await attachment_service.upload_many(db, items, current_user)
    await db.commit()
    return result


@router.get("/", response_model=Page[AttachmentResponse])
async def list_attachments(
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_author)],
    params: Annotated[PageParams, Depends(page_params)],
    type: Annotated[
        str | None,
        Query(pattern=r"^(image|video|audio|document|other)$", description="파일 유형 필터"),
    ] = None,
    uploader_id: Annotated[UUID | None, Query(description="업로더 ID 필터")] = None,
) -> Page[AttachmentResponse]:
    return await attachment_service.list_attachments(db, params, type, uploader_id)


@router.get("/{attachment_id}", response_model=AttachmentResponse)
async def get_attachment(
    attachment_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_author)],
) -> AttachmentResponse:
    return await attachment_service.get_attachment(db, attachment_id)


@router.patch("/{attachment_id}", response_model=AttachmentResponse)
async def rename_attachment(
    attachment_id: UUID,
    data: AttachmentUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_author)],
) -> AttachmentResponse:
    result: AttachmentResponse = await attachment_service.rename(db, attachment_id, data.name)
    await db.commit()
    return result


@router.delete("/{attachment_id}", response_model=MessageResponse)
async def delete_attachment(
    attachment_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_author)],
) -> dict[str, str]:
    """첨부파일 삭제 — 행과 디스크 파일 모두 제거."""
    await attachment_service.delete_attachment(db, attachment_id)
    await db.commit()
    return {"message": "Attachment deleted successfully"}
