"""테마 페이지 라우터 — 서버 렌더링 HTML과 테마 정적 파일.

Theme Page Router — Server-rendered theme pages, theme static files and
screenshots. Unknown or disabled themes answer with a plain 404 page.
"""

import html
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import FileResponse, HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_optional_user
from app.database import get_db
from app.models.theme import Theme
from app.models.user import User
from app.services.theme_render_service import theme_render_service
from app.services.theme_service import theme_service
from app.utils.exceptions import NotFoundError
from app.utils.pagination import MAX_PER_PAGE

logger = logging.getLogger(__name__)

router: APIRouter = APIRouter()

Lang = Annotated[str | None, Query(max_length=20, description="로케일 (예: en, zh-CN)")]


def _not_found_page(detail: str) -> HTMLResponse:
    body: str = (
        "<!DOCTYPE html><html><head><meta charset=\"utf-8\"><title>404 Not Found</title></head>"
        f"<body><h1>404 Not Found</h1><p>{html.escape(detail)}</p></body></html>"
    )
    return HTMLResponse(body, status_code=404)


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def render_home(
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User | None, Depends(get_optional_user)],
    page: Annotated[int, Query(ge=1)] = 1,
    size: Annotated[int | None, Query(ge=1, le=MAX_PER_PAGE)] = None,
    lang: Lang = None,
) -> HTMLResponse:
    """활성 테마의 목록 페이지 (Index of the active theme)."""
    try:
        theme: Theme = await theme_service.get_active_record(db)
        body: str = await theme_render_service.render_index(
            db, theme.theme_id, page, size, lang, user, base_url="/"
        )
    except NotFoundError as exc:
        return _not_found_page(exc.detail)
    return HTMLResponse(body)


@router.get("/themes/{theme_id}", response_class=HTMLResponse)
async def render_theme_index(
    theme_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User | None, Depends(get_optional_user)],
    page: Annotated[int, Query(ge=1)] = 1,
    size: Annotated[int | None, Query(ge=1, le=MAX_PER_PAGE)] = None,
    lang: Lang = None,
) -> HTMLResponse:
    """테마 목록 페이지 (index.html)."""
    try:
        body: str = await theme_render_service.render_index(db, theme_id, page, size, lang, user)
    except NotFoundError as exc:
        return _not_found_page(exc.detail)
    return HTMLResponse(body)


@router.get("/themes/{theme_id}/preview", response_class=HTMLResponse)
async def render_theme_preview(
    theme_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User | None, Depends(get_optional_user)],
    lang: Lang = None,
) -> HTMLResponse:
    """테마 미리보기 — 최신 게시글 5개 (Latest 5 posts, preview banner)."""
    try:
        body: str = await theme_render_service.render_preview(db, theme_id, lang, user)
    except NotFoundError as exc:
        return _not_found_page(exc.detail)
    return HTMLResponse(body)


@router.get("/themes/{theme_id}/posts/{slug}", response_class=HTMLResponse)
async def render_theme_post(
    theme_id: str,
    slug: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User | None, Depends(get_optional_user)],
    lang: Lang = None,
) -> HTMLResponse:
    """게시글 상세 페이지 (post.html) — 조회수 1 증가."""
    try:
        body: str = await theme_render_service.render_post(db, theme_id, slug, lang, user)
    except NotFoundError as exc:
        return _not_found_page(exc.detail)
    await db.commit()
    return HTMLResponse(body)


@router.get("/themes/{theme_id}/static/{path:path}")
async def theme_static_file(
    theme_id: str,
    path: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> FileResponse:
    """테마 static/ 폴더의 파일 — 폴더 밖 경로는 404."""
    theme: Theme = await theme_service.get_record(db, theme_id)
    return FileResponse(theme_service.static_file(theme.theme_id, path))


@router.get("/themes/{theme_id}/screenshot")
async def theme_screenshot(
    theme_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> FileResponse:
    theme: Theme = await theme_service.get_record(db, theme_id)
    return FileResponse(theme_service.screenshot_file(theme))
