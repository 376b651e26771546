"""템플릿 레지스트리 — (theme_id, template_name) → 컴파일된 Jinja2 템플릿.

Template registry — Maps (theme_id, template_name) to compiled Jinja2 templates.

A theme is loaded once (activation, first render or startup preload): every
`*.html` under its `templates/` folder is read into memory, an Environment
with a DictLoader is built over those sources, and each template is compiled.
`{% extends %}` / `{% include %}` therefore resolve from memory and `get()`
never touches the filesystem.
"""

import logging
import threading
from pathlib import Path
from typing import Any, Callable

from jinja2 import DictLoader, Environment, Template, TemplateError, select_autoescape

from app.themes.errors import TemplateLoadError, TemplateNotFoundError

logger = logging.getLogger(__name__)

# 필수 템플릿 — Templates every theme must ship
REQUIRED_TEMPLATES: tuple[str, ...] = ("layout.html", "index.html", "post.html")


def read_template_sources(templates_dir: Path) -> dict[str, str]:
    """templates/ 아래 모든 *.html 소스 — {relative/posix/name.html: source}."""
    if not templates_dir.is_dir():
        raise TemplateLoadError(f"Template directory not found: {templates_dir.parent.name}/templates")
    sources: dict[str, str] = {}
    for path in sorted(templates_dir.rglob("*.html")):
        if not path.is_file():
            continue
        name: str = path.relative_to(templates_dir).as_posix()
        try:
            sources[name] = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise TemplateLoadError(f"Template '{name}' could not be read: {exc}") from exc
    return sources


def compile_templates(sources: dict[str, str]) -> dict[str, Template]:
    """필수 템플릿을 확인하고 모든 템플릿을 컴파일합니다.

    Check the required templates exist and compile every source.

    Raises:
        TemplateLoadError: 필수 템플릿 누락 또는 문법 오류
                           (Missing required template or syntax error)
    """
    missing: list[str] = [name for name in REQUIRED_TEMPLATES if name not in sources]
    if missing:
        raise TemplateLoadError(f"Missing required templates: {', '.join(missing)}")

    env: Environment = Environment(
        loader=DictLoader(sources),
        autoescape=select_autoescape(["html", "xml"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    compiled: dict[str, Template] = {}
    for name in sources:
        try:
            compiled[name] = env.get_template(name)
        except TemplateError as exc:
            raise TemplateLoadError(f"Template '{name}' failed to compile: {exc}") from exc
    return compiled


class TemplateRegistry:
    """테마별 컴파일된 템플릿 저장소.

    In-memory store of compiled templates per theme. Loading is all or
    nothing: a theme whose templates fail validation leaves no entry.
    """

    def __init__(self) -> None:
        self._templates: dict[str, dict[str, Template]] = {}
        self._lock: threading.Lock = threading.Lock()

    def load(self, theme_id: str, theme_dir: Path) -> list[str]:
        """테마 폴더의 템플릿을 로드하고 등록합니다.

        Load, validate and register the templates of `theme_dir`. Replaces any
        previous entry for the theme only after the new set compiled.

        Returns:
            list[str]: 등록된 템플릿 이름 (Registered template names)
        """
        compiled: dict[str, Template] = compile_templates(
            read_template_sources(theme_dir / "templates")
        )
        with self._lock:
            self._templates[theme_id] = compiled
        logger.info("Loaded %d templates for theme %s", len(compiled), theme_id)
        return sorted(compiled)

    def get(self, theme_id: str, name: str) -> Template:
        """등록된 템플릿 반환 — 없으면 TemplateNotFoundError."""
        templates: dict[str, Template] | None = self._templates.get(theme_id)
        if templates is None or name not in templates:
            raise TemplateNotFoundError(theme_id, name)
        return templates[name]

    def render(self, theme_id: str, name: str, context: dict[str, Any]) -> str:
        return self.get(theme_id, name).render(**context)

    def is_loaded(self, theme_id: str) -> bool:
        return theme_id in self._templates

    def names(self, theme_id: str) -> list[str]:
        return sorted(self._templates.get(theme_id, {}))

    def unload(self, theme_id: str) -> None:
        with self._lock:
            self._templates.pop(theme_id, None)

    def clear(self) -> None:
        with self._lock:
            self._templates.clear()

    def ensure_loaded(self, theme_id: str, resolve_dir: Callable[[str], Path]) -> None:
        """미로드 테마를 지연 로드 — Load on first use (first render)."""
        if not self.is_loaded(theme_id):
            self.load(theme_id, resolve_dir(theme_id))


# 싱글턴 인스턴스 — Singleton instance
template_registry: TemplateRegistry = TemplateRegistry()
