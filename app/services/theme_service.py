"""테마 서비스 — 테마 등록, 활성화, 설정, 설치/삭제.

Theme Service — Theme registration from the themes folder, activation,
settings, ZIP install and removal.

Theme subsystem errors (app.themes.errors) are translated here to the
HTTP exceptions in app.utils.exceptions:
    - DuplicateThemeError → DuplicateError (409)
    - 그 외 ThemeError → BadRequestError (400)
"""

import logging
import re
import shutil
from pathlib import Path
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.theme import Theme
from app.repositories.theme_repository import theme_repository
from app.schemas.theme import (
    ThemeDetailResponse,
    ThemeInstallResponse,
    ThemeLocalesResponse,
    ThemeResponse,
    ThemeSchemaResponse,
    ThemeSettingsResponse,
)
from app.services.translation_service import translation_service
from app.themes.errors import DuplicateThemeError, ManifestError, ThemeError
from app.themes.installer import install_bundled, staged_archive
from app.themes.manifest import THEME_ID_PATTERN, ThemeManifest, find_manifest, load_manifest, manifest_from_snapshot
from app.themes.registry import template_registry
from app.utils.exceptions import BadRequestError, DuplicateError, NotFoundError

logger = logging.getLogger(__name__)

STATUS_ENABLED: str = "enabled"
STATUS_DISABLED: str = "disabled"
STATUS_ERROR: str = "error"

_THEME_ID_RE: re.Pattern[str] = re.compile(THEME_ID_PATTERN)


def _manifest_values(manifest: ThemeManifest) -> dict[str, Any]:
    """매니페스트 → themes 행 메타데이터 (Row metadata from a manifest)."""
    return {
        "name": manifest.display_name,
        "version": manifest.version,
        "author": manifest.author.name if manifest.author else None,
        "author_url": manifest.author.website if manifest.author else None,
        "description": manifest.description,
        "screenshot": manifest.screenshot,
        "config": manifest.snapshot(),
    }


class ThemeService:
    """테마 비즈니스 로직 서비스 (Theme business logic)."""

    # === 경로 (Paths) ===

    @property
    def themes_dir(self) -> Path:
        return Path(settings.THEMES_DIR)

    def theme_dir(self, theme_id: str) -> Path:
        """테마 폴더 경로 — 잘못된 ID는 404 (Invalid ids never reach the filesystem)."""
        if not _THEME_ID_RE.match(theme_id):
            raise NotFoundError("Theme not found")
        return self.themes_dir / theme_id

    def static_file(self, theme_id: str, relative: str) -> Path:
        """테마 static/ 안의 파일 — 밖을 가리키거나 없으면 404.

        Resolve a file under the theme's static/ folder. Paths escaping that
        folder are reported as missing.
        """
        static_root: Path = (self.theme_dir(theme_id) / "static").resolve()
        target: Path = (static_root / relative).resolve()
        if not target.is_relative_to(static_root) or not target.is_file():
            raise NotFoundError("Static file not found")
        return target

    def screenshot_file(self, theme: Theme) -> Path:
        if not theme.screenshot:
            raise NotFoundError("Theme has no screenshot")
        root: Path = self.theme_dir(theme.theme_id).resolve()
        target: Path = (root / theme.screenshot).resolve()
        if not target.is_relative_to(root) or not target.is_file():
            raise NotFoundError("Screenshot not found")
        return target

    # === 변환 (Conversion) ===

    def manifest_of(self, theme: Theme) -> ThemeManifest:
        """저장된 스냅샷에서 매니페스트 복원 (Manifest from themes.config)."""
        try:
            return manifest_from_snapshot(theme.config, theme.theme_id)
        except ManifestError as exc:
            raise BadRequestError(str(exc)) from exc

    def merged_settings(self, theme: Theme) -> dict[str, Any]:
        """스키마 기본값 위에 저장 값 병합 (Stored values over schema defaults)."""
        return {**self.manifest_of(theme).defaults(), **(theme.settings or {})}

    def _to_response(self, theme: Theme) -> ThemeResponse:
        return ThemeResponse(
            id=str(theme.id),
            theme_id=theme.theme_id,
            name=theme.name,
            version=theme.version,
            author=theme.author,
            author_url=theme.author_url,
            description=theme.description,
            screenshot=theme.screenshot,
            is_active=theme.is_active,
            status=theme.status,
            template_engine=theme.template_engine,
            features=self.manifest_of(theme).features.model_dump(by_alias=True),
            created_at=theme.created_at,
            updated_at=theme.updated_at,
        )

    def _to_detail(self, theme: Theme) -> ThemeDetailResponse:
        return ThemeDetailResponse(
            **self._to_response(theme).model_dump(),
            config=theme.config or {},
            settings=self.merged_settings(theme),
        )

    async def _get_or_404(self, db: AsyncSession, theme_id: str) -> Theme:
        theme: Theme | None = await theme_repository.get_by_theme_id(db, theme_id)
        if theme is None:
            raise NotFoundError("Theme not found")
        return theme

    # === 등록 (Registration) ===

    async def _register(self, db: AsyncSession, manifest: ThemeManifest) -> Theme:
        return await theme_repository.create(
            db,
            {
                **_manifest_values(manifest),
                "theme_id": manifest.id,
                "settings": {},
                "is_active": False,
                "status": STATUS_ENABLED,
            },
        )

    async def _mark_error(self, db: AsyncSession, theme_id: str) -> None:
        theme: Theme | None = await theme_repository.get_by_theme_id(db, theme_id)
        if theme is not None and theme.status != STATUS_ERROR:
            theme.status = STATUS_ERROR
            await db.flush()

    async def init(self, db: AsyncSession) -> list[Theme]:
        """테마 폴더를 스캔해 등록합니다 (앱 시작 시 실행).

        Create the themes folder, install the bundled default theme if
        missing, then register every folder with a valid manifest. Known
        themes get their metadata refreshed; a folder whose manifest broke
        marks its row as `error`. The default theme becomes active when no
        theme is.

        Returns:
            list[Theme]: 스캔에서 확인된 테마 (Themes found by the scan)
        """
        self.themes_dir.mkdir(parents=True, exist_ok=True)
        install_bundled(settings.DEFAULT_THEME, self.themes_dir)

        found: list[Theme] = []
        for folder in sorted(self.themes_dir.iterdir()):
            # 점으로 시작하는 폴더는 설치 중인 스테이징 폴더 — Skip staging dirs
            if not folder.is_dir() or folder.name.startswith("."):
                continue
            if find_manifest(folder) is None:
                continue
            try:
                manifest: ThemeManifest = load_manifest(folder)
            except ManifestError as exc:
                logger.warning("Skipping theme folder %s: %s", folder.name, exc)
                await self._mark_error(db, folder.name)
                continue
            if manifest.id != folder.name:
                logger.warning("Skipping theme folder %s: manifest id is '%s'", folder.name, manifest.id)
                continue

            theme: Theme | None = await theme_repository.get_by_theme_id(db, manifest.id)
            if theme is None:
                theme = await self._register(db, manifest)
                logger.info("Registered theme %s", manifest.id)
            else:
                for field, value in _manifest_values(manifest).items():
                    setattr(theme, field, value)
                if theme.status == STATUS_ERROR:
                    theme.status = STATUS_ENABLED
            found.append(theme)
        await db.flush()

        if await theme_repository.get_active(db) is None:
            default: Theme | None = await theme_repository.get_by_theme_id(db, settings.DEFAULT_THEME)
            if default is not None:
                await theme_repository.set_active(db, default.id)
                logger.info("Activated default theme %s", default.theme_id)
        return found

    # === 조회 (Queries) ===

    async def list_themes(self, db: AsyncSession) -> list[ThemeResponse]:
        """활성 테마 먼저, 그다음 이름순 (Active first, then by name)."""
        return [self._to_response(t) for t in await theme_repository.list_ordered(db)]

    async def get_theme(self, db: AsyncSession, theme_id: str) -> ThemeDetailResponse:
        return self._to_detail(await self._get_or_404(db, theme_id))

    async def get_record(self, db: AsyncSession, theme_id: str) -> Theme:
        return await self._get_or_404(db, theme_id)

    async def get_active_record(self, db: AsyncSession) -> Theme:
        """활성 테마 — 없으면 기본 테마, 그것도 없으면 404."""
        theme: Theme | None = await theme_repository.get_active(db)
        if theme is None:
            theme = await theme_repository.get_by_theme_id(db, settings.DEFAULT_THEME)
        if theme is None:
            raise NotFoundError("No active theme")
        return theme

    async def get_active(self, db: AsyncSession) -> ThemeDetailResponse:
        return self._to_detail(await self.get_active_record(db))

    async def get_renderable(self, db: AsyncSession, theme_id: str) -> Theme:
        """렌더링 가능한 테마 — 활성화된(enabled) 테마만, 템플릿 지연 로드.

        Return an enabled theme with its templates loaded. Unknown or
        disabled themes are 404.
        """
        theme: Theme = await self._get_or_404(db, theme_id)
        if theme.status != STATUS_ENABLED:
            raise NotFoundError("Theme not found")
        try:
            template_registry.ensure_loaded(theme.theme_id, self.theme_dir)
        except ThemeError as exc:
            logger.error("Theme %s cannot be rendered: %s", theme.theme_id, exc)
            raise NotFoundError("Theme templates are unavailable") from exc
        return theme

    # === 상태 변경 (State changes) ===

    async def activate(self, db: AsyncSession, theme_id: str) -> ThemeResponse:
        """테마 활성화 — 템플릿을 먼저 로드해 검증한 뒤 플래그 전환.

        Activate a theme. Its templates are loaded into the registry first, so
        a theme with missing or broken templates is rejected and the current
        active theme stays. The flag switch runs in the caller's transaction.

        Raises:
            NotFoundError: 테마 없음 (Unknown theme)
            BadRequestError: 비활성 상태 또는 템플릿 오류 (Not enabled or broken templates)
        """
        theme: Theme = await self._get_or_404(db, theme_id)
        if theme.status != STATUS_ENABLED:
            raise BadRequestError("Only enabled themes can be activated")

        try:
            template_registry.load(theme.theme_id, self.theme_dir(theme.theme_id))
        except ThemeError as exc:
            raise BadRequestError(str(exc)) from exc

        await theme_repository.set_active(db, theme.id)
        await db.refresh(theme)
        logger.info("Activated theme %s", theme.theme_id)
        return self._to_response(theme)

    async def enable(self, db: AsyncSession, theme_id: str) -> ThemeResponse:
        """테마 사용 설정 — 매니페스트를 다시 읽어 검증 (Re-reads the manifest)."""
        theme: Theme = await self._get_or_404(db, theme_id)
        try:
            manifest: ThemeManifest = load_manifest(self.theme_dir(theme_id))
        except ManifestError as exc:
            raise BadRequestError(str(exc)) from exc
        for field, value in _manifest_values(manifest).items():
            setattr(theme, field, value)
        theme.status = STATUS_ENABLED
        await db.flush()
        return self._to_response(theme)

    async def disable(self, db: AsyncSession, theme_id: str) -> ThemeResponse:
        theme: Theme = await self._get_or_404(db, theme_id)
        if theme.is_active:
            raise BadRequestError("The active theme cannot be disabled")
        theme.status = STATUS_DISABLED
        await db.flush()
        template_registry.unload(theme_id)
        return self._to_response(theme)

    # === 설정 (Settings) ===

    async def get_settings(self, db: AsyncSession, theme_id: str) -> ThemeSettingsResponse:
        theme: Theme = await self._get_or_404(db, theme_id)
        return ThemeSettingsResponse(theme_id=theme.theme_id, settings=self.merged_settings(theme))

    async def update_settings(
        self,
        db: AsyncSession,
        theme_id: str,
        values: dict[str, Any],
    ) -> ThemeSettingsResponse:
        """설정 저장 — 스키마 검증 후 기본값 위에 병합해 저장.

        Validate `values` against the manifest schema and store them merged
        over the previously saved values and the defaults.
        """
        theme: Theme = await self._get_or_404(db, theme_id)
        manifest: ThemeManifest = self.manifest_of(theme)
        # 스키마에서 빠진 이전 값은 버림 — Drop stored keys the schema no longer has
        known: dict[str, Any] = manifest.defaults()
        stored: dict[str, Any] = {k: v for k, v in (theme.settings or {}).items() if k in known}
        try:
            merged: dict[str, Any] = manifest.validate_values({**stored, **values})
        except ThemeError as exc:
            raise BadRequestError(str(exc)) from exc

        theme.settings = merged
        await db.flush()
        return ThemeSettingsResponse(theme_id=theme.theme_id, settings=merged)

    async def get_schema(self, db: AsyncSession, theme_id: str) -> ThemeSchemaResponse:
        theme: Theme = await self._get_or_404(db, theme_id)
        manifest: ThemeManifest = self.manifest_of(theme)
        return ThemeSchemaResponse(
            theme_id=theme.theme_id,
            groups=[group.model_dump(mode="json") for group in manifest.settings],
            defaults=manifest.defaults(),
        )

    async def get_locales(self, db: AsyncSession, theme_id: str) -> ThemeLocalesResponse:
        theme: Theme = await self._get_or_404(db, theme_id)
        return ThemeLocalesResponse(
            theme_id=theme.theme_id,
            default_locale=translation_service.default_locale(theme.theme_id),
            locales=translation_service.available_locales(theme.theme_id),
        )

    # === 설치/삭제 (Install and delete) ===

    async def install(self, db: AsyncSession, data: bytes) -> ThemeInstallResponse:
        """ZIP 테마 설치.

        Install a theme from ZIP bytes. The archive is checked and validated
        in a staging folder and only then moved into place. The new theme is
        registered enabled and inactive.

        Raises:
            DuplicateError: 같은 ID의 테마 행 또는 폴더가 존재 (409)
            BadRequestError: 안전하지 않은 아카이브, 매니페스트/템플릿 오류 (400)
        """
        try:
            with staged_archive(data, self.themes_dir) as staged:
                theme_id: str = staged.manifest.id
                if await theme_repository.get_by_theme_id(db, theme_id) is not None:
                    raise DuplicateError(f"Theme '{theme_id}' is already installed")
                staged.move_into(self.themes_dir)
                manifest: ThemeManifest = staged.manifest
                templates: list[str] = staged.templates
        except DuplicateThemeError as exc:
            raise DuplicateError(str(exc)) from exc
        except ThemeError as exc:
            raise BadRequestError(str(exc)) from exc

        theme: Theme = await self._register(db, manifest)
        translation_service.clear_cache(theme_id)
        logger.info("Installed theme %s (%d templates)", theme_id, len(templates))
        return ThemeInstallResponse(theme=self._to_response(theme), templates=templates)

    async def delete(self, db: AsyncSession, theme_id: str) -> None:
        """테마 삭제 — 기본 테마와 활성 테마는 삭제 불가.

        Remove the row, the folder, the registry entry and the translation
        cache of a theme.
        """
        theme: Theme = await self._get_or_404(db, theme_id)
        if theme.theme_id == settings.DEFAULT_THEME:
            raise BadRequestError("The default theme cannot be deleted")
        if theme.is_active:
            raise BadRequestError("The active theme cannot be deleted")

        await theme_repository.delete(db, theme.id)
        folder: Path = self.theme_dir(theme_id)
        if folder.exists():
            shutil.rmtree(folder)
        template_registry.unload(theme_id)
        translation_service.clear_cache(theme_id)
        logger.info("Deleted theme %s", theme_id)


# 싱글턴 인스턴스 — Singleton instance
theme_service: ThemeService = ThemeService()
