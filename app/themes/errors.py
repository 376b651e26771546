"""테마 서브시스템 도메인 예외.

Theme subsystem domain exceptions. These never carry HTTP status codes;
the theme service translates them to BadRequestError / NotFoundError.
"""


class ThemeError(Exception):
    """테마 관련 오류의 기반 클래스 (Base class for theme failures)."""


class ManifestError(ThemeError):
    """theme.yaml이 없거나 형식이 잘못됨 (Missing or invalid manifest)."""


class SettingsValidationError(ThemeError):
    """설정 값이 스키마와 맞지 않음 (Submitted settings violate the schema)."""


class TemplateLoadError(ThemeError):
    """필수 템플릿 누락 또는 컴파일 실패 (Required template missing or broken)."""


class TemplateNotFoundError(ThemeError):
    """레지스트리에 (theme_id, name) 쌍이 없음 (Unregistered template)."""

    def __init__(self, theme_id: str, name: str) -> None:
        super().__init__(f"Template '{name}' is not loaded for theme '{theme_id}'")
        self.theme_id: str = theme_id
        self.name: str = name


class ArchiveError(ThemeError):
    """ZIP 아카이브가 손상되었거나 테마 구조가 아님 (Unreadable or malformed archive)."""


class DuplicateThemeError(ThemeError):
    """같은 id의 테마가 이미 설치됨 (A theme with this id is already installed)."""


class UnsafeArchiveError(ArchiveError):
    """ZIP 항목이 스테이징 디렉토리를 벗어남 (Archive entry escapes the staging dir)."""
