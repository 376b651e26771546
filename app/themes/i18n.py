"""테마 번역 파일 — .properties 파서와 로케일 파일 탐색.

Theme locale files — A `.properties` parser and locale file lookup.

Layout inside a theme:
    i18n/messages.properties        기본 로케일 (default locale)
    i18n/messages_en.properties
    i18n/messages_zh_CN.properties  또는 messages_zh-CN.properties

Parsing follows the java.util.Properties text format: `key=value`,
`key: value` or `key value`, `#`/`!` comment lines, backslash line
continuation and `\\uXXXX` escapes.
"""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_BUNDLE: str = "messages.properties"
_PREFIX: str = "messages_"
_SUFFIX: str = ".properties"

_ESCAPES: dict[str, str] = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


def _logical_lines(text: str) -> list[str]:
    """물리 줄을 논리 줄로 합칩니다 — Join backslash-continued lines."""
    lines: list[str] = []
    buffer: str | None = None

    for raw in text.splitlines():
        line: str = raw.lstrip() if buffer is not None else raw
        if buffer is None:
            stripped: str = line.lstrip()
            if not stripped or stripped[0] in "#!":
                continue
            line = stripped

        # 끝의 백슬래시 개수가 홀수면 다음 줄로 이어짐 — Odd trailing backslashes continue
        trailing: int = len(line) - len(line.rstrip("\\"))
        if trailing % 2 == 1:
            buffer = (buffer or "") + line[:-1]
            continue

        lines.append((buffer or "") + line)
        buffer = None

    if buffer is not None:
        lines.append(buffer)
    return lines


def _unescape(text: str) -> str:
    out: list[str] = []
    i: int = 0
    while i < len(text):
        char: str = text[i]
        if char != "\\" or i + 1 >= len(text):
            out.append(char)
            i += 1
            continue
        nxt: str = text[i + 1]
        if nxt == "u" and i + 6 <= len(text):
            try:
                out.append(chr(int(text[i + 2:i + 6], 16)))
                i += 6
                continue
            except ValueError:
                pass
        out.append(_ESCAPES.get(nxt, nxt))
        i += 2
    return "".join(out)


def _split_key_value(line: str) -> tuple[str, str]:
    """첫 번째 이스케이프되지 않은 구분자에서 키/값 분리."""
    i: int = 0
    while i < len(line):
        char: str = line[i]
        if char == "\\":
            i += 2
            continue
        if char in "=: \t\f":
            break
        i += 1

    key: str = line[:i]
    rest: str = line[i:].lstrip(" \t\f")
    if rest[:1] in ("=", ":"):
        rest = rest[1:].lstrip(" \t\f")
    return key, rest


def parse_properties(text: str) -> dict[str, str]:
    """.properties 텍스트를 딕셔너리로 파싱합니다.

    Parse `.properties` text into a dict. Later duplicates win.

    Example:
        >>> parse_properties("greeting = Hello, {0}!\\n# comment\\nbye: Bye")
        {'greeting': 'Hello, {0}!', 'bye': 'Bye'}
    """
    result: dict[str, str] = {}
    for line in _logical_lines(text):
        key, value = _split_key_value(line)
        result[_unescape(key)] = _unescape(value)
    return result


def load_properties(path: Path) -> dict[str, str]:
    """UTF-8 .properties 파일 로드 (Load a UTF-8 properties file)."""
    return parse_properties(path.read_text(encoding="utf-8"))


def normalize_locale(locale: str) -> str:
    """`zh_CN` → `zh-CN` 형식으로 통일 (Normalize separators to '-')."""
    return locale.strip().replace("_", "-")


def base_language(locale: str) -> str | None:
    """`zh-CN` → `zh`; 지역 코드가 없으면 None."""
    normalized: str = normalize_locale(locale)
    if "-" not in normalized:
        return None
    return normalized.split("-", 1)[0]


def locale_file(i18n_dir: Path, locale: str) -> Path | None:
    """로케일 전용 파일 — `-`, `_` 구분자 모두 시도 (Try both separators)."""
    normalized: str = normalize_locale(locale)
    for candidate in (
        normalized,
        normalized.replace("-", "_"),
        locale,
    ):
        path: Path = i18n_dir / f"{_PREFIX}{candidate}{_SUFFIX}"
        if path.is_file():
            return path
    return None


def load_locale(i18n_dir: Path, locale: str, default_locale: str) -> dict[str, str]:
    """한 로케일의 번역 (폴백 없음) — Translations of exactly one locale.

    `messages.properties` stands in for the default locale when that locale
    has no dedicated file.
    """
    if not i18n_dir.is_dir():
        return {}
    path: Path | None = locale_file(i18n_dir, locale)
    if path is None and normalize_locale(locale) == normalize_locale(default_locale):
        default_path: Path = i18n_dir / DEFAULT_BUNDLE
        path = default_path if default_path.is_file() else None
    if path is None:
        return {}
    try:
        translations: dict[str, str] = load_properties(path)
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Failed to read %s: %s", path, exc)
        return {}
    logger.debug("Loaded %d messages from %s", len(translations), path.name)
    return translations


def list_locales(i18n_dir: Path, default_locale: str) -> list[str]:
    """사용 가능한 로케일 목록 — 파일이 없으면 기본 로케일만."""
    locales: set[str] = set()
    if i18n_dir.is_dir():
        for path in i18n_dir.glob(f"*{_SUFFIX}"):
            name: str = path.name
            if name == DEFAULT_BUNDLE:
                locales.add(normalize_locale(default_locale))
            elif name.startswith(_PREFIX):
                locales.add(normalize_locale(name[len(_PREFIX):-len(_SUFFIX)]))
    if not locales:
        locales.add(normalize_locale(default_locale))
    return sorted(locales)
