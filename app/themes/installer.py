"""테마 설치 — ZIP 스테이징 추출과 번들 테마 복사.

Theme installation — Staged ZIP extraction and bundled theme copying.

Install flow:
    1. 테마 디렉토리 아래 임시 스테이징 폴더 생성 (staging dir under THEMES_DIR)
    2. 모든 항목 경로 검사 — 하나라도 벗어나면 전체 거부 (whole-archive check)
    3. 추출 후 매니페스트와 템플릿 검증 (validate manifest and templates)
    4. os.replace로 최종 위치에 원자적 이동 (atomic move into place)
    5. 어떤 경우든 스테이징 폴더 삭제 (staging removed in every case)
"""

import io
import logging
import os
import re
import shutil
import stat
import tempfile
import zipfile
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from app.themes.errors import ArchiveError, DuplicateThemeError, UnsafeArchiveError
from app.themes.manifest import ThemeManifest, find_manifest, load_manifest
from app.themes.registry import compile_templates, read_template_sources

logger = logging.getLogger(__name__)

# 스테이징 폴더 접두사 — 스캔 시 점(.)으로 시작하는 폴더는 무시됨
STAGING_PREFIX: str = ".staging-"

# 압축 해제 총 크기 상한 — Upper bound on the uncompressed archive size
MAX_UNCOMPRESSED_SIZE: int = 100 * 1024 * 1024

# 번들 테마 위치 — Themes shipped inside the package
BUNDLED_THEMES_DIR: Path = Path(__file__).resolve().parent / "bundled"

_DRIVE_RE: re.Pattern[str] = re.compile(r"^[A-Za-z]:")
_IGNORED_ROOT_ENTRIES: frozenset[str] = frozenset({"__MACOSX", ".DS_Store"})


@dataclass
class StagedTheme:
    """검증이 끝난 스테이징 테마 (A validated theme waiting in staging)."""

    root: Path
    manifest: ThemeManifest
    templates: list[str]

    def move_into(self, themes_dir: Path) -> Path:
        """테마 폴더를 최종 위치로 원자적으로 이동합니다.

        Atomically move the staged folder to THEMES_DIR/<id>.

        Raises:
            DuplicateThemeError: 대상 폴더가 이미 존재 (Target folder exists)
        """
        target: Path = themes_dir / self.manifest.id
        if target.exists():
            raise DuplicateThemeError(f"Theme folder '{self.manifest.id}' already exists")
        os.replace(self.root, target)
        return target


def _is_symlink(info: zipfile.ZipInfo) -> bool:
    return stat.S_ISLNK(info.external_attr >> 16)


def check_entries(archive: zipfile.ZipFile, staging: Path) -> None:
    """모든 항목이 스테이징 디렉토리 안으로 풀리는지 확인합니다.

    Verify every entry resolves to a descendant of `staging`. Absolute paths,
    `..` escapes and symlink entries reject the whole archive.

    Raises:
        UnsafeArchiveError: 안전하지 않은 항목 발견 (First offending entry)
    """
    root: Path = staging.resolve()
    total: int = 0

    for info in archive.infolist():
        name: str = info.filename
        if name.startswith(("/", "\\")) or _DRIVE_RE.match(name):
            raise UnsafeArchiveError(f"Absolute path in archive: {name}")
        if _is_symlink(info):
            raise UnsafeArchiveError(f"Symbolic link in archive: {name}")
        target: Path = (root / name.replace("\\", "/")).resolve()
        if target != root and not target.is_relative_to(root):
            raise UnsafeArchiveError(f"Path escapes the theme directory: {name}")
        total += info.file_size
        if total > MAX_UNCOMPRESSED_SIZE:
            raise UnsafeArchiveError("Archive is too large when extracted")


def _locate_root(staging: Path) -> Path:
    """매니페스트 위치 — 아카이브 루트 또는 단일 최상위 폴더.

    The manifest sits either at the archive root or inside its single
    top-level folder.
    """
    if find_manifest(staging) is not None:
        return staging
    entries: list[Path] = [p for p in staging.iterdir() if p.name not in _IGNORED_ROOT_ENTRIES]
    if len(entries) == 1 and entries[0].is_dir() and find_manifest(entries[0]) is not None:
        return entries[0]
    raise ArchiveError("theme.yaml not found at the archive root or in its single top-level folder")


@contextmanager
def staged_archive(data: bytes, themes_dir: Path) -> Iterator[StagedTheme]:
    """ZIP 바이트를 스테이징 폴더에 풀고 검증된 테마를 돌려줍니다.

    Extract `data` into a fresh staging directory under `themes_dir`,
    validate the manifest and templates, and yield the staged theme. The
    staging directory is removed when the block exits, whatever happens.

    Raises:
        ArchiveError: ZIP이 아니거나 매니페스트 위치가 잘못됨
        UnsafeArchiveError: 경로 탈출/심볼릭 링크/절대 경로
        ManifestError: 매니페스트 스키마 위반
        TemplateLoadError: 필수 템플릿 누락 또는 컴파일 실패
    """
    themes_dir.mkdir(parents=True, exist_ok=True)
    staging: Path = Path(tempfile.mkdtemp(prefix=STAGING_PREFIX, dir=themes_dir))
    try:
        try:
            archive: zipfile.ZipFile = zipfile.ZipFile(io.BytesIO(data))
        except zipfile.BadZipFile as exc:
            raise ArchiveError("Uploaded file is not a valid ZIP archive") from exc

        with archive:
            check_entries(archive, staging)
            archive.extractall(staging)

        root: Path = _locate_root(staging)
        manifest: ThemeManifest = load_manifest(root)
        templates: list[str] = sorted(compile_templates(read_template_sources(root / "templates")))
        yield StagedTheme(root=root, manifest=manifest, templates=templates)
    finally:
        shutil.rmtree(staging, ignore_errors=True)


def install_bundled(theme_id: str, themes_dir: Path) -> bool:
    """번들 테마가 없으면 복사합니다 — Copy a bundled theme if missing.

    Returns:
        bool: 새로 설치했는지 여부 (Whether the theme was copied)
    """
    target: Path = themes_dir / theme_id
    if target.exists():
        return False
    source: Path = BUNDLED_THEMES_DIR / theme_id
    if not source.is_dir():
        logger.warning("Bundled theme %s is not shipped with this build", theme_id)
        return False
    themes_dir.mkdir(parents=True, exist_ok=True)
    shutil.copytree(source, target)
    logger.info("Installed bundled theme %s into %s", theme_id, themes_dir)
    return True
