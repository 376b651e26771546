"""테마 설치/레지스트리 테스트 — ZIP 검증, 원자적 이동, 템플릿 컴파일.

Theme installer and registry tests — Archive safety checks, staged
extraction, atomic move and template compilation.
"""

import io
import stat
import zipfile
from pathlib import Path

import pytest

from app.themes.errors import (
    ArchiveError,
    DuplicateThemeError,
    ManifestError,
    TemplateLoadError,
    TemplateNotFoundError,
    UnsafeArchiveError,
)
from app.themes.installer import STAGING_PREFIX, install_bundled, staged_archive
from app.themes.registry import REQUIRED_TEMPLATES, TemplateRegistry, compile_templates
from tests.conftest import MINIMAL_TEMPLATES, theme_files, theme_zip, write_theme


def symlink_zip() -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for relative, content in theme_files("linked").items():
            archive.writestr(relative, content)
        info = zipfile.ZipInfo("templates/evil.html")
        info.external_attr = (stat.S_IFLNK | 0o777) << 16
        archive.writestr(info, "/etc/passwd")
    return buffer.getvalue()


def leftovers(themes_dir: Path) -> list[str]:
    return [p.name for p in themes_dir.iterdir() if p.name.startswith(STAGING_PREFIX)]


class TestRegistry:
    """템플릿 레지스트리 테스트."""

    def test_load_and_render(self, tmp_path: Path):
        root = write_theme(tmp_path, "demo")
        registry = TemplateRegistry()

        names = registry.load("demo", root)

        assert names == sorted(MINIMAL_TEMPLATES)
        html = registry.render("demo", "index.html", {"posts": [{"title": "<b>Hi</b>"}]})
        assert "<h2>&lt;b&gt;Hi&lt;/b&gt;</h2>" in html

    def test_missing_required_template(self):
        sources = {k: v for k, v in MINIMAL_TEMPLATES.items() if k != "post.html"}
        with pytest.raises(TemplateLoadError, match="post.html"):
            compile_templates(sources)

    def test_syntax_error(self):
        sources = {**MINIMAL_TEMPLATES, "index.html": "{% for x in %}"}
        with pytest.raises(TemplateLoadError, match="index.html"):
            compile_templates(sources)

    def test_missing_templates_dir(self, tmp_path: Path):
        with pytest.raises(TemplateLoadError):
            TemplateRegistry().load("empty", tmp_path)

    def test_failed_reload_keeps_previous(self, tmp_path: Path):
        root = write_theme(tmp_path, "demo")
        registry = TemplateRegistry()
        registry.load("demo", root)

        (root / "templates" / "post.html").unlink()
        with pytest.raises(TemplateLoadError):
            registry.load("demo", root)
        assert registry.names("demo") == sorted(REQUIRED_TEMPLATES)

    def test_get_unknown(self):
        registry = TemplateRegistry()
        with pytest.raises(TemplateNotFoundError):
            registry.get("ghost", "index.html")

    def test_nested_include(self, tmp_path: Path):
        templates = {
            **MINIMAL_TEMPLATES,
            "index.html": '{% extends "layout.html" %}{% block content %}{% include "parts/hello.html" %}{% endblock %}',
            "parts/hello.html": "hello {{ name }}",
        }
        root = write_theme(tmp_path, "demo", theme_files("demo", templates))
        registry = TemplateRegistry()
        registry.load("demo", root)

        assert "parts/hello.html" in registry.names("demo")
        assert "hello world" in registry.render("demo", "index.html", {"name": "world"})

    def test_unload(self, tmp_path: Path):
        registry = TemplateRegistry()
        registry.load("demo", write_theme(tmp_path, "demo"))
        registry.unload("demo")
        assert not registry.is_loaded("demo")


class TestStagedArchive:
    """ZIP 스테이징 테스트."""

    def test_valid_archive_moves_into_place(self, tmp_path: Path):
        with staged_archive(theme_zip(theme_files("fresh")), tmp_path) as staged:
            assert staged.manifest.id == "fresh"
            assert staged.templates == sorted(MINIMAL_TEMPLATES)
            target = staged.move_into(tmp_path)

        assert target == tmp_path / "fresh"
        assert (target / "theme.yaml").is_file()
        assert leftovers(tmp_path) == []

    def test_single_top_level_folder(self, tmp_path: Path):
        with staged_archive(theme_zip(theme_files("nested"), prefix="nested-1.0/"), tmp_path) as staged:
            staged.move_into(tmp_path)
        assert (tmp_path / "nested" / "templates" / "index.html").is_file()

    def test_not_a_zip(self, tmp_path: Path):
        with pytest.raises(ArchiveError, match="not a valid ZIP"):
            with staged_archive(b"plain text", tmp_path):
                pass
        assert leftovers(tmp_path) == []

    def test_missing_manifest(self, tmp_path: Path):
        data = theme_zip({f"templates/{k}": v for k, v in MINIMAL_TEMPLATES.items()})
        with pytest.raises(ArchiveError, match="theme.yaml not found"):
            with staged_archive(data, tmp_path):
                pass

    @pytest.mark.parametrize("entry", ["../escape.txt", "templates/../../escape.txt", "/etc/evil", "C:/evil.txt"])
    def test_rejects_unsafe_paths(self, tmp_path: Path, entry: str):
        data = theme_zip({**theme_files("bad"), entry: "x"})
        with pytest.raises(UnsafeArchiveError):
            with staged_archive(data, tmp_path):
                pass
        assert not (tmp_path / "escape.txt").exists()
        assert leftovers(tmp_path) == []

    def test_rejects_symlink(self, tmp_path: Path):
        with pytest.raises(UnsafeArchiveError, match="Symbolic link"):
            with staged_archive(symlink_zip(), tmp_path):
                pass

    def test_invalid_manifest(self, tmp_path: Path):
        files = {**theme_files("bad"), "theme.yaml": "name: missing id\n"}
        with pytest.raises(ManifestError):
            with staged_archive(theme_zip(files), tmp_path):
                pass

    def test_broken_template(self, tmp_path: Path):
        files = theme_files("broken", {**MINIMAL_TEMPLATES, "post.html": "{% if %}"})
        with pytest.raises(TemplateLoadError):
            with staged_archive(theme_zip(files), tmp_path):
                pass
        assert not (tmp_path / "broken").exists()

    def test_existing_folder(self, tmp_path: Path):
        write_theme(tmp_path, "taken")
        with pytest.raises(DuplicateThemeError):
            with staged_archive(theme_zip(theme_files("taken")), tmp_path) as staged:
                staged.move_into(tmp_path)
        assert leftovers(tmp_path) == []


class TestBundled:
    """번들 테마 복사 테스트."""

    def test_copies_once(self, tmp_path: Path):
        assert install_bundled("default", tmp_path) is True
        assert (tmp_path / "default" / "theme.yaml").is_file()
        assert install_bundled("default", tmp_path) is False

    def test_unknown_bundle(self, tmp_path: Path):
        assert install_bundled("nonexistent", tmp_path) is False
