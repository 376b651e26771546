"""관리자 테마 라우터 — 테마 목록, 활성화, 설정, ZIP 설치/삭제.

Admin Theme Router — Theme management endpoints (admin only).
"""

from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin
from app.config import settings
from app.database import get_db
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.theme import (
    ThemeDetailResponse,
    ThemeInstallResponse,
    ThemeLocalesResponse,
    ThemeResponse,
    ThemeSchemaResponse,
    ThemeSettingsResponse,
    ThemeSettingsUpdate,
)
from app.services.storage_service import storage_service
from app.services.theme_service import theme_service
from app.services.translation_service import translation_service

router: APIRouter = APIRouter()


@router.get("/", response_model=list[ThemeResponse])
async def list_themes(
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_admin)],
) -> list[ThemeResponse]:
    """설치된 테마 목록 — 활성 테마 먼저 (Active theme first, then by name)."""
    return await theme_service.list_themes(db)


@router.get("/active", response_model=ThemeDetailResponse)
async def get_active_theme(
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_admin)],
) -> ThemeDetailResponse:
    return await theme_service.get_active(db)


@router.post("/install", response_model=ThemeInstallResponse, status_code=201)
async def install_theme(
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_admin)],
    file: Annotated[UploadFile, File(description="테마 ZIP 파일")],
) -> ThemeInstallResponse:
    """ZIP 테마 설치.

    Install a theme from a ZIP upload. Unsafe archives and invalid
    manifests or templates → 400; an already installed id → 409.
    Archives over THEME_MAX_SIZE → 413.
    """
    result: ThemeInstallResponse = await theme_service.install(
        db, await storage_service.read_upload(file, settings.THEME_MAX_SIZE)
    )
    await db.commit()
    return result


@router.get("/{theme_id}", response_model=ThemeDetailResponse)
async def get_theme(
    theme_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_admin)],
) -> ThemeDetailResponse:
    return await theme_service.get_theme(db, theme_id)


@router.post("/{theme_id}/activate", response_model=ThemeResponse)
async def activate_theme(
    theme_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_admin)],
) -> ThemeResponse:
    """테마 활성화 — 템플릿 검증 실패 시 400, 기존 활성 테마 유지.

    Activate a theme. The flag switch commits as one transaction.
    """
    result: ThemeResponse = await theme_service.activate(db, theme_id)
    await db.commit()
    return result


@router.post("/{theme_id}/enable", response_model=ThemeResponse)
async def enable_theme(
    theme_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_admin)],
) -> ThemeResponse:
    result: ThemeResponse = await theme_service.enable(db, theme_id)
    await db.commit()
    return result


@router.post("/{theme_id}/disable", response_model=ThemeResponse)
async def disable_theme(
    theme_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_admin)],
) -> ThemeResponse:
    """테마 사용 중지 — 활성 테마는 400."""
    result: ThemeResponse = await theme_service.disable(db, theme_id)
    await db.commit()
    return result


@router.get("/{theme_id}/settings", response_model=ThemeSettingsResponse)
async def get_theme_settings(
    theme_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_admin)],
) -> ThemeSettingsResponse:
    return await theme_service.get_settings(db, theme_id)


@router.put("/{theme_id}/settings", response_model=ThemeSettingsResponse)
async def update_theme_settings(
    theme_id: str,
    data: ThemeSettingsUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_admin)],
) -> ThemeSettingsResponse:
    """테마 설정 저장 — 스키마에 없는 키나 잘못된 타입은 400."""
    result: ThemeSettingsResponse = await theme_service.update_settings(db, theme_id, data.settings)
    await db.commit()
    return result


@router.get("/{theme_id}/schema", response_model=ThemeSchemaResponse)
async def get_theme_schema(
    theme_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_admin)],
) -> ThemeSchemaResponse:
    return await theme_service.get_schema(db, theme_id)


@router.get("/{theme_id}/locales", response_model=ThemeLocalesResponse)
async def get_theme_locales(
    theme_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_admin)],
) -> ThemeLocalesResponse:
    return await theme_service.get_locales(db, theme_id)


@router.post("/{theme_id}/locales/reload", response_model=ThemeLocalesResponse)
async def reload_theme_locales(
    theme_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_admin)],
) -> ThemeLocalesResponse:
    """번역 캐시 재로드 — 수정된 .properties 파일 반영."""
    theme = await theme_service.get_record(db, theme_id)
    locales: list[str] = translation_service.reload(theme.theme_id)
    return ThemeLocalesResponse(
        theme_id=theme.theme_id,
        default_locale=translation_service.default_locale(theme.theme_id),
        locales=locales,
    )


@router.delete("/{theme_id}", response_model=MessageResponse)
async def delete_theme(
    theme_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_admin)],
) -> dict[str, str]:
    """테마 삭제 — 기본 테마와 활성 테마는 400."""
    await theme_service.delete(db, theme_id)
    await db.commit()
    return {"message": "Theme deleted successfully"}
