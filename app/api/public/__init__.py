"""공개 API 라우터 패키지 — 방문자용 조회 엔드포인트 통합.

Public API Router package — Read endpoints for site visitors, plus comment
submission by members and guests. No authentication required.
"""

from fastapi import APIRouter

from app.api.public.comments import router as comments_router
from app.api.public.pages import router as pages_router
from app.api.public.posts import router as posts_router
from app.api.public.taxonomy import categories_router, tags_router
from app.api.public.widgets import news_router, stocks_router, tools_router

public_router: APIRouter = APIRouter()

public_router.include_router(posts_router, prefix="/posts", tags=["Public Posts"])
public_router.include_router(categories_router, prefix="/categories", tags=["Public Categories"])
public_router.include_router(tags_router, prefix="/tags", tags=["Public Tags"])
public_router.include_router(comments_router, prefix="/comments", tags=["Public Comments"])
public_router.include_router(pages_router, prefix="/pages", tags=["Public Pages"])
public_router.include_router(tools_router, prefix="/external-tools", tags=["Public External Tools"])
public_router.include_router(news_router, prefix="/news", tags=["Public News"])
public_router.include_router(stocks_router, prefix="/stocks", tags=["Public Stocks"])
