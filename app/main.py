"""FastAPI 애플리케이션 엔트리포인트 — 미들웨어, 라우터, 수명주기 등록.

FastAPI application entry point — Middleware, routers and lifespan.

Startup:
    1. 로깅 설정 (Configure logging)
    2. 테마 폴더 스캔 및 등록, 기본 테마 보장 (Scan and register themes)
    3. 활성 테마 템플릿 미리 로드 (Preload the active theme's templates)
    4. 뉴스/주식 수집 스케줄러 시작 (Start the fetch scheduler)
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.config import settings
from app.database import async_session
from app.fetchers.scheduler import FixedRateScheduler, create_scheduler
from app.middleware.axiom_logging import AxiomLoggingMiddleware
from app.services.theme_service import theme_service
from app.themes.errors import ThemeError
from app.themes.registry import template_registry
from app.utils.exceptions import NotFoundError
from app.utils.logging import setup_logging

logger = logging.getLogger("app.main")


async def _init_themes() -> None:
    """테마 등록과 활성 테마 템플릿 로드 (Register themes, preload the active one).

    Without any usable theme the app still starts; `/` then serves the 404 page.
    """
    async with async_session() as db:
        await theme_service.init(db)
        await db.commit()
        try:
            active = await theme_service.get_active_record(db)
        except NotFoundError:
            logger.warning("No usable theme found (DEFAULT_THEME=%s); pages will return 404",
                           settings.DEFAULT_THEME)
            return
    try:
        template_registry.load(active.theme_id, theme_service.theme_dir(active.theme_id))
    except ThemeError as exc:
        logger.error("Active theme %s failed to load: %s", active.theme_id, exc)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    setup_logging()
    await _init_themes()

    scheduler: FixedRateScheduler | None = None
    if settings.FETCHERS_ENABLED:
        scheduler = create_scheduler()
        scheduler.start()
    try:
        yield
    finally:
        if scheduler is not None:
            await scheduler.stop()


app: FastAPI = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Axiom API 로깅 미들웨어 — Axiom API request/response logging
# CORS보다 먼저 등록하여 모든 요청을 캡처 (Registered before CORS to capture all requests)
app.add_middleware(AxiomLoggingMiddleware)

# CORS 미들웨어 — Cross-Origin Resource Sharing middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """서버 상태 확인 엔드포인트.

    Health check endpoint for load balancers and monitoring.
    """
    return {"status": "ok"}


# 업로드 파일 정적 서빙 — Uploaded files served from UPLOAD_DIR
settings.UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
app.mount(settings.UPLOAD_URL_PREFIX, StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")


# ---------------------------------------------------------------------------
# 라우터 등록 — Router registration
# ---------------------------------------------------------------------------
# auth_router: 로그인/가입/토큰 (Login, register, token refresh)
# admin_router: 관리 콘솔 API (Admin console, author/admin roles)
# public_router: 공개 읽기 API (Public read API, no authentication)
# themes_router: 서버 렌더링 테마 페이지 (Server-rendered theme pages)
from app.api.auth import router as auth_router  # noqa: E402
from app.api.admin import admin_router  # noqa: E402
from app.api.public import public_router  # noqa: E402
from app.api.themes import router as themes_router  # noqa: E402

app.include_router(auth_router, prefix="/api/v1/auth", tags=["Auth"])
app.include_router(admin_router, prefix="/api/v1/admin")
app.include_router(public_router, prefix="/api/v1/public")
app.include_router(themes_router, tags=["Theme Pages"])
