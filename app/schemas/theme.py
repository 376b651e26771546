"""테마 관련 Pydantic 요청/응답 스키마 정의.

Theme request/response schemas. Installation arrives as a multipart ZIP
upload, so there is no create schema.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel


class ThemeResponse(BaseModel):
    """테마 목록/상세 응답 스키마.

    Attributes:
        theme_id: 테마 폴더 ID (Folder id from theme.yaml)
        is_active: 현재 활성 테마 여부 (Whether this is the active theme)
        status: enabled / disabled / error
        features: 매니페스트 기능 플래그 (Manifest feature flags)
    """

    id: str
    theme_id: str
    name: str
    version: str | None
    author: str | None
    author_url: str | None
    description: str | None
    screenshot: str | None
    is_active: bool
    status: str
    template_engine: str
    features: dict[str, bool]
    created_at: datetime
    updated_at: datetime


class ThemeDetailResponse(ThemeResponse):
    """설정 값과 매니페스트 스냅샷을 포함한 상세 응답."""

    config: dict[str, Any]  # theme.yaml 스냅샷 (Manifest snapshot)
    settings: dict[str, Any]  # 기본값 위에 병합된 저장 값 (Stored values over defaults)


class ThemeSettingsUpdate(BaseModel):
    """설정 저장 요청 — 스키마에 없는 키는 400 (Unknown keys are rejected)."""

    settings: dict[str, Any]


class ThemeSettingsResponse(BaseModel):
    theme_id: str
    settings: dict[str, Any]


class ThemeSchemaResponse(BaseModel):
    """설정 스키마 — 그룹과 항목 (Setting groups with their typed items)."""

    theme_id: str
    groups: list[dict[str, Any]]
    defaults: dict[str, Any]


class ThemeLocalesResponse(BaseModel):
    theme_id: str
    default_locale: str
    locales: list[str]


class ThemeInstallResponse(BaseModel):
    theme: ThemeResponse
    templates: list[str]  # 검증된 템플릿 이름 (Validated template names)
