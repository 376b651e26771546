"""테스트 인프라 — SQLite 인메모리 DB, 세션, httpx 클라이언트 픽스처.

Test infrastructure — In-memory SQLite (aiosqlite) database, session and
httpx client fixtures. Every test gets a fresh schema; themes and uploads
live under the test's tmp_path.
"""

import io
import zipfile
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from app.config import settings
from app.database import Base, get_db
from app.main import app
from app.models import *  # noqa: F401,F403 — register all models with metadata
from app.models.user import User
from app.services.translation_service import translation_service
from app.themes.registry import template_registry
from app.utils.jwt import create_access_token
from app.utils.password import hash_password

TEST_DATABASE_URL = "sqlite+aiosqlite://"


# ---------------------------------------------------------------------------
# 파일 시스템 격리 — Themes and uploads under tmp_path
# ---------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> dict[str, Path]:
    """테마/업로드 폴더를 임시 경로로 바꾸고 전역 캐시를 비웁니다."""
    themes_dir = tmp_path / "themes"
    upload_dir = tmp_path / "uploads"
    monkeypatch.setattr(settings, "THEMES_DIR", themes_dir)
    monkeypatch.setattr(settings, "UPLOAD_DIR", upload_dir)
    monkeypatch.setattr(settings, "STOCK_API_TOKEN", "")
    template_registry.clear()
    translation_service.clear_all_caches()
    yield {"themes": themes_dir, "uploads": upload_dir}
    template_registry.clear()
    translation_service.clear_all_caches()


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진 — 테스트마다 새 인메모리 스키마."""
    eng = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 세션을 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼 픽스처: 테스트용 사용자
# ---------------------------------------------------------------------------
async def make_user(
    db: AsyncSession,
    username: str,
    password: str,
    role: str,
    status: str = "active",
) -> User:
    """테스트 사용자를 생성합니다."""
    user = User(
        username=username,
        password_hash=hash_password(password),
        email=f"{username}@test.com",
        nickname=username.title(),
        role=role,
        status=status,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def admin_user(db: AsyncSession) -> User:
    return await make_user(db, "admin", "admin123!", "admin")


@pytest_asyncio.fixture
async def author_user(db: AsyncSession) -> User:
    return await make_user(db, "author", "author123!", "author")


@pytest_asyncio.fixture
async def subscriber_user(db: AsyncSession) -> User:
    return await make_user(db, "reader", "reader123!", "subscriber")


def make_token(user: User) -> str:
    """테스트용 JWT 액세스 토큰을 생성합니다."""
    return create_access_token({"sub": str(user.id), "role": user.role})


@pytest.fixture
def admin_token(admin_user: User) -> str:
    return make_token(admin_user)


@pytest.fixture
def author_token(author_user: User) -> str:
    return make_token(author_user)


@pytest.fixture
def subscriber_token(subscriber_user: User) -> str:
    return make_token(subscriber_user)


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


# ---------------------------------------------------------------------------
# 헬퍼: 테스트용 테마 폴더와 ZIP
# ---------------------------------------------------------------------------
MINIMAL_TEMPLATES: dict[str, str] = {
    "layout.html": "<html><body>{% block content %}{% endblock %}</body></html>",
    "index.html": (
        '{% extends "layout.html" %}{% block content %}'
        "{% for post in posts %}<h2>{{ post.title }}</h2>{% endfor %}"
        "{% endblock %}"
    ),
    "post.html": '{% extends "layout.html" %}{% block content %}<h1>{{ post.title }}</h1>{% endblock %}',
}


def theme_manifest(theme_id: str, **extra) -> str:
    """최소 theme.yaml 텍스트 (Minimal manifest with one text setting)."""
    lines = [
        f"id: {theme_id}",
        f"name: {theme_id.title()} Theme",
        'version: "1.0.0"',
        "settings:",
        "  - group: general",
        "    items:",
        "      - name: siteName",
        "        type: text",
        "        defaultValue: Test Site",
    ]
    lines += [f"{key}: {value}" for key, value in extra.items()]
    return "\n".join(lines) + "\n"


def theme_files(theme_id: str, templates: dict[str, str] | None = None) -> dict[str, str]:
    """테마 파일 구성 — {상대 경로: 내용} (Relative path → content)."""
    files = {"theme.yaml": theme_manifest(theme_id)}
    for name, source in (templates if templates is not None else MINIMAL_TEMPLATES).items():
        files[f"templates/{name}"] = source
    return files


def write_theme(themes_dir: Path, theme_id: str, files: dict[str, str] | None = None) -> Path:
    """테마 폴더를 디스크에 작성합니다 (Write a theme folder)."""
    root = themes_dir / theme_id
    for relative, content in (files if files is not None else theme_files(theme_id)).items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


def theme_zip(files: dict[str, str], prefix: str = "") -> bytes:
    """파일 구성을 ZIP 바이트로 묶습니다 (Pack files into ZIP bytes)."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for relative, content in files.items():
            archive.writestr(f"{prefix}{relative}", content)
    return buffer.getvalue()
