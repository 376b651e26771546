"""번역 서비스 — 테마 로케일 파일 조회와 폴백.

Translation Service — Theme message lookup with locale fallback.

Lookup order for a key:
    1. 요청 로케일 (exact locale, e.g. zh-CN)
    2. 기본 언어 (base language, e.g. zh)
    3. 테마 기본 로케일 (the theme's i18n.defaultLocale)
    4. 키 자체 (the key itself)

A requested locale the theme neither ships nor declares is resolved to the
theme default before lookup, so only known locales are ever cached.
"""

import logging
import re
import threading
from pathlib import Path
from typing import Any

from app.config import settings
from app.themes.errors import ManifestError
from app.themes.i18n import base_language, list_locales, load_locale, normalize_locale
from app.themes.manifest import I18nConfig, load_manifest

logger = logging.getLogger(__name__)

# {0}, {1} ... 위치 인자 — Positional placeholders
_PLACEHOLDER_RE: re.Pattern[str] = re.compile(r"\{(\d+)\}")

FALLBACK_LOCALE: str = "en"


def format_message(template: str, args: tuple[Any, ...]) -> str:
    """`{n}` 자리표시자를 인자로 치환 — 범위 밖 인덱스는 그대로 둠."""
    if not args:
        return template

    def _replace(match: re.Match[str]) -> str:
        index: int = int(match.group(1))
        return str(args[index]) if index < len(args) else match.group(0)

    return _PLACEHOLDER_RE.sub(_replace, template)


class TranslationService:
    """테마별 번역 캐시와 조회를 담당하는 서비스.

    Service holding per-(theme, locale) translation caches. Each cached dict
    is already merged with its fallbacks, so a lookup is a single dict get.
    """

    def __init__(self) -> None:
        self._cache: dict[tuple[str, str], dict[str, str]] = {}
        self._configs: dict[str, I18nConfig] = {}
        self._known: dict[str, frozenset[str]] = {}
        self._lock: threading.Lock = threading.Lock()

    def _i18n_dir(self, theme_id: str) -> Path:
        return settings.THEMES_DIR / theme_id / "i18n"

    def _i18n_config(self, theme_id: str) -> I18nConfig:
        cached: I18nConfig | None = self._configs.get(theme_id)
        if cached is not None:
            return cached
        try:
            config: I18nConfig = load_manifest(settings.THEMES_DIR / theme_id).i18n
        except ManifestError as exc:
            logger.warning("Using '%s' as default locale for %s: %s", FALLBACK_LOCALE, theme_id, exc)
            config = I18nConfig(default_locale=FALLBACK_LOCALE)
        with self._lock:
            self._configs[theme_id] = config
        return config

    def default_locale(self, theme_id: str) -> str:
        """테마 기본 로케일 — 매니페스트를 읽을 수 없으면 'en'."""
        return normalize_locale(self._i18n_config(theme_id).default_locale)

    def _known_locales(self, theme_id: str) -> frozenset[str]:
        """번들 파일이 있거나 매니페스트가 선언한 로케일 (Shipped or declared locales)."""
        cached: frozenset[str] | None = self._known.get(theme_id)
        if cached is not None:
            return cached
        declared: list[str] = [normalize_locale(loc) for loc in self._i18n_config(theme_id).supported_locales]
        known: frozenset[str] = frozenset(self.available_locales(theme_id)) | frozenset(declared)
        with self._lock:
            self._known[theme_id] = known
        return known

    def resolve_locale(self, theme_id: str, locale: str | None) -> str:
        """요청 로케일을 테마가 지원하는 로케일로 해석합니다.

        Map a requested locale onto one the theme knows: the exact locale,
        then its base language, then the theme default. Anything else the
        visitor sends collapses to the default, so the cache only ever holds
        known locales.

        Example:
            >>> translation_service.resolve_locale("default", "zh_CN")
            'zh-CN'
            >>> translation_service.resolve_locale("default", "klingon")
            'en'
        """
        default: str = self.default_locale(theme_id)
        if not locale:
            return default
        known: frozenset[str] = self._known_locales(theme_id)
        requested: str = normalize_locale(locale)
        if requested in known:
            return requested
        base: str | None = base_language(requested)
        if base is not None and base in known:
            return base
        return default

    def get_translations(self, theme_id: str, locale: str | None = None) -> dict[str, str]:
        """폴백이 병합된 번역 사전을 반환합니다 (캐시됨).

        Return the translations for a locale with the base-language and
        default-locale messages filling in missing keys. Cached per
        (theme, resolved locale).

        Args:
            theme_id: 테마 ID (Theme folder id)
            locale: 로케일 — None이면 테마 기본 로케일 (Defaults to the theme default)

        Returns:
            dict[str, str]: {키: 메시지} (Merged key → message mapping)
        """
        default: str = self.default_locale(theme_id)
        requested: str = self.resolve_locale(theme_id, locale)
        cache_key: tuple[str, str] = (theme_id, requested)

        cached: dict[str, str] | None = self._cache.get(cache_key)
        if cached is not None:
            return cached

        i18n_dir: Path = self._i18n_dir(theme_id)
        merged: dict[str, str] = dict(load_locale(i18n_dir, default, default))
        base: str | None = base_language(requested)
        if base is not None and base != default:
            merged.update(load_locale(i18n_dir, base, default))
        if requested != default:
            merged.update(load_locale(i18n_dir, requested, default))

        with self._lock:
            self._cache[cache_key] = merged
        logger.debug("Cached %d messages for %s/%s", len(merged), theme_id, requested)
        return merged

    def translate(self, theme_id: str, locale: str | None, key: str, *args: Any) -> str:
        """키를 번역하고 `{0}` 자리표시자를 치환합니다.

        Translate `key`, falling back to the key itself when no locale has it.

        Example:
            >>> translation_service.translate("default", "zh-CN", "post.views", 12)
            '12 次浏览'
        """
        message: str = self.get_translations(theme_id, locale).get(key, key)
        return format_message(message, args)

    def available_locales(self, theme_id: str) -> list[str]:
        """i18n 폴더에서 찾은 로케일 목록 (Locales with a messages file)."""
        return list_locales(self._i18n_dir(theme_id), self.default_locale(theme_id))

    def clear_cache(self, theme_id: str) -> None:
        with self._lock:
            for cache_key in [k for k in self._cache if k[0] == theme_id]:
                del self._cache[cache_key]
            self._configs.pop(theme_id, None)
            self._known.pop(theme_id, None)
        logger.info("Cleared translation cache for theme %s", theme_id)

    def clear_all_caches(self) -> None:
        with self._lock:
            self._cache.clear()
            self._configs.clear()
            self._known.clear()
        logger.info("Cleared all translation caches")

    def reload(self, theme_id: str) -> list[str]:
        """캐시를 비우고 기본 로케일을 다시 읽습니다.

        Drop the theme's cache and warm the default locale again.

        Returns:
            list[str]: 사용 가능한 로케일 (Available locales after reload)
        """
        self.clear_cache(theme_id)
        self.get_translations(theme_id)
        return self.available_locales(theme_id)


# 싱글턴 인스턴스 — Singleton instance
translation_service: TranslationService = TranslationService()
