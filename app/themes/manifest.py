"""테마 매니페스트 — theme.yaml 파싱과 설정 스키마.

Theme manifest — theme.yaml parsing into pydantic models.

Setting items are a tagged union on `type`; each variant validates its own
default when the manifest is loaded, so a theme with a broken settings schema
never reaches the database.

Example theme.yaml:
    id: default
    name: Default Theme
    settings:
      - group: appearance
        items:
          - name: primaryColor
            type: color
            defaultValue: "#6366f1"
"""

import re
from pathlib import Path
from typing import Annotated, Any, Literal, Union

import yaml
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from app.themes.errors import ManifestError, SettingsValidationError

# 매니페스트 파일 이름 — Accepted manifest file names, in lookup order
MANIFEST_FILENAMES: tuple[str, ...] = ("theme.yaml", "theme.yml")

THEME_ID_PATTERN: str = r"^[a-z0-9][a-z0-9_-]*$"
_COLOR_RE: re.Pattern[str] = re.compile(r"^#([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")

# defaultValue(원본 형식)와 default 모두 허용 — Accept both spellings
_DEFAULT_ALIAS = AliasChoices("default", "defaultValue")


class ThemeAuthor(BaseModel):
    name: str | None = None
    website: str | None = None
    email: str | None = None


class SelectOption(BaseModel):
    label: str | None = None
    value: str

    @field_validator("value", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        # YAML은 `value: 12`를 int로 읽음 — YAML reads bare numbers as int
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class _SettingItemBase(BaseModel):
    """설정 항목 공통 필드 (Fields shared by every setting variant)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = Field(min_length=1)
    label: str | None = None
    description: str | None = None

    def check(self, value: Any) -> Any:
        """값 검증 후 저장할 값을 반환 — Validate a submitted value."""
        raise NotImplementedError


class TextSetting(_SettingItemBase):
    type: Literal["text", "textarea"]
    default: str = Field("", validation_alias=_DEFAULT_ALIAS)

    def check(self, value: Any) -> Any:
        if not isinstance(value, str):
            raise ValueError("must be a string")
        return value


class SwitchSetting(_SettingItemBase):
    type: Literal["switch"]
    default: bool = Field(False, validation_alias=_DEFAULT_ALIAS)

    def check(self, value: Any) -> Any:
        if not isinstance(value, bool):
            raise ValueError("must be a boolean")
        return value


class SelectSetting(_SettingItemBase):
    type: Literal["select"]
    options: list[SelectOption] = Field(min_length=1)
    default: str | None = Field(None, validation_alias=_DEFAULT_ALIAS)

    @model_validator(mode="after")
    def _default_in_options(self) -> "SelectSetting":
        values: list[str] = [option.value for option in self.options]
        if self.default is None:
            self.default = values[0]
        elif self.default not in values:
            raise ValueError(f"default '{self.default}' is not one of {values}")
        return self

    def check(self, value: Any) -> Any:
        if value not in [option.value for option in self.options]:
            raise ValueError("is not one of the allowed options")
        return value


class ColorSetting(_SettingItemBase):
    type: Literal["color"]
    default: str = Field("#000000", validation_alias=_DEFAULT_ALIAS)

    @field_validator("default")
    @classmethod
    def _is_color(cls, value: str) -> str:
        if not _COLOR_RE.match(value):
            raise ValueError(f"'{value}' is not a #rgb or #rrggbb color")
        return value

    def check(self, value: Any) -> Any:
        if not isinstance(value, str) or not _COLOR_RE.match(value):
            raise ValueError("must be a #rgb or #rrggbb color")
        return value


class NumberSetting(_SettingItemBase):
    type: Literal["number"]
    default: int | float = Field(0, validation_alias=_DEFAULT_ALIAS)
    min: int | float | None = None
    max: int | float | None = None

    @model_validator(mode="before")
    @classmethod
    def _lift_validation(cls, data: Any) -> Any:
        # `validation: {min, max}` 형식도 허용 — Also accept a nested validation map
        if isinstance(data, dict) and isinstance(data.get("validation"), dict):
            data = dict(data)
            for key in ("min", "max"):
                data.setdefault(key, data["validation"].get(key))
        return data

    @model_validator(mode="after")
    def _default_in_range(self) -> "NumberSetting":
        if isinstance(self.default, bool):
            raise ValueError("default must be a number")
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError("min is greater than max")
        self._check_range(self.default)
        return self

    def _check_range(self, value: int | float) -> None:
        if self.min is not None and value < self.min:
            raise ValueError(f"{value} is below the minimum {self.min}")
        if self.max is not None and value > self.max:
            raise ValueError(f"{value} is above the maximum {self.max}")

    def check(self, value: Any) -> Any:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("must be a number")
        self._check_range(value)
        return value


SettingItem = Annotated[
    Union[TextSetting, SwitchSetting, SelectSetting, ColorSetting, NumberSetting],
    Field(discriminator="type"),
]


class SettingGroup(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    group: str = Field("general", validation_alias=AliasChoices("group", "name"))
    label: str | None = None
    items: list[SettingItem] = Field(default_factory=list)


class I18nConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    default_locale: str = Field("en", alias="defaultLocale")
    supported_locales: list[str] = Field(default_factory=list, alias="supportedLocales")


class ThemeFeatures(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    dark_mode: bool = Field(True, alias="darkMode")
    responsive: bool = True
    pwa: bool = False
    comments: bool = True
    search: bool = True


class ThemeManifest(BaseModel):
    """theme.yaml 전체 구조 (Parsed theme.yaml)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(pattern=THEME_ID_PATTERN, max_length=100)
    name: str | None = None
    version: str | None = None
    author: ThemeAuthor | None = None
    description: str | None = None
    screenshot: str | None = None
    requires: str | None = None
    website: str | None = None
    repo: str | None = None
    settings: list[SettingGroup] = Field(default_factory=list)
    i18n: I18nConfig = Field(default_factory=I18nConfig)
    features: ThemeFeatures = Field(default_factory=ThemeFeatures)

    @field_validator("version", "requires", mode="before")
    @classmethod
    def _version_as_str(cls, value: Any) -> Any:
        # `version: 1.0` 은 YAML에서 float — YAML reads 1.0 as a float
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @model_validator(mode="after")
    def _unique_setting_names(self) -> "ThemeManifest":
        seen: set[str] = set()
        for item in self.items():
            if item.name in seen:
                raise ValueError(f"duplicate setting name '{item.name}'")
            seen.add(item.name)
        return self

    @property
    def display_name(self) -> str:
        return self.name or self.id

    def items(self) -> list[_SettingItemBase]:
        """모든 그룹의 설정 항목 — Every setting item across groups."""
        return [item for group in self.settings for item in group.items]

    def defaults(self) -> dict[str, Any]:
        """{name: default} — 스키마 기본값 (Schema defaults)."""
        return {item.name: item.default for item in self.items()}

    def validate_values(self, values: dict[str, Any]) -> dict[str, Any]:
        """제출된 설정 값을 검증하고 기본값 위에 병합합니다.

        Validate submitted setting values against the schema and return them
        merged over the defaults.

        Raises:
            SettingsValidationError: 알 수 없는 키 또는 잘못된 타입
                                     (Unknown key or value of the wrong type)
        """
        schema: dict[str, _SettingItemBase] = {item.name: item for item in self.items()}
        merged: dict[str, Any] = self.defaults()
        errors: list[str] = []

        for key, value in values.items():
            item: _SettingItemBase | None = schema.get(key)
            if item is None:
                errors.append(f"{key}: unknown setting")
                continue
            try:
                merged[key] = item.check(value)
            except ValueError as exc:
                errors.append(f"{key}: {exc}")

        if errors:
            raise SettingsValidationError("; ".join(errors))
        return merged

    def snapshot(self) -> dict[str, Any]:
        """DB 저장용 JSON 스냅샷 (JSON-safe dict stored in themes.config)."""
        return self.model_dump(mode="json", by_alias=True)


def find_manifest(theme_dir: Path) -> Path | None:
    """테마 폴더에서 매니페스트 파일을 찾습니다 (theme.yaml, theme.yml)."""
    for filename in MANIFEST_FILENAMES:
        candidate: Path = theme_dir / filename
        if candidate.is_file():
            return candidate
    return None


def parse_manifest(data: Any) -> ThemeManifest:
    """딕셔너리를 매니페스트로 변환 — Validate an already-loaded mapping."""
    if not isinstance(data, dict):
        raise ManifestError("Theme manifest must be a mapping")
    if not data.get("id"):
        raise ManifestError("Theme manifest is missing the required 'id'")
    try:
        return ThemeManifest.model_validate(data)
    except ValidationError as exc:
        raise ManifestError(f"Invalid theme manifest: {exc}") from exc


def load_manifest(theme_dir: Path) -> ThemeManifest:
    """테마 폴더의 theme.yaml을 읽어 검증합니다.

    Read and validate the manifest of a theme folder.

    Raises:
        ManifestError: 파일 없음, YAML 오류, 스키마 위반
                       (Missing file, YAML syntax error or schema violation)
    """
    path: Path | None = find_manifest(theme_dir)
    if path is None:
        raise ManifestError(f"No theme.yaml found in {theme_dir.name}")
    try:
        with open(path, encoding="utf-8") as f:
            data: Any = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ManifestError(f"Malformed YAML in {path.name}: {exc}") from exc
    return parse_manifest(data)


def manifest_from_snapshot(snapshot: dict[str, Any] | None, theme_id: str) -> ThemeManifest:
    """DB에 저장된 스냅샷 복원 — Rebuild a manifest from themes.config."""
    if not snapshot:
        return ThemeManifest(id=theme_id)
    return parse_manifest(snapshot)
