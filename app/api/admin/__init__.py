"""관리자 API 라우터 패키지 — 모든 관리자 엔드포인트 통합.

Admin API Router package — Aggregates all management endpoints into a
single router for inclusion in the FastAPI application.

Included routers:
    - users: 사용자 관리 (User management, admin)
    - posts / categories / tags: 콘텐츠 관리 (Content, author+)
    - comments: 댓글 검토 (Comment moderation, author+)
    - pages: 독립 페이지 관리 (Standalone pages, author+)
    - attachments: 파일 업로드 (Uploads, author+)
    - external-tools / news / stocks: 사이드바 위젯 (Sidebar widgets, admin)
    - themes: 테마 관리 (Theme management, admin)
"""

from fastapi import APIRouter

# 콘텐츠 라우터 임포트 — Content routers
from app.api.admin.users import router as users_router
from app.api.admin.posts import router as posts_router
from app.api.admin.categories import router as categories_router
from app.api.admin.tags import router as tags_router
from app.api.admin.comments import router as comments_router
from app.api.admin.pages import router as pages_router
from app.api.admin.attachments import router as attachments_router

# 위젯 라우터 임포트 — Widget routers
from app.api.admin.tools import router as tools_router
from app.api.admin.news import router as news_router
from app.api.admin.stocks import router as stocks_router

# 테마 라우터 임포트 — Theme router
from app.api.admin.themes import router as themes_router

admin_router: APIRouter = APIRouter()

# ---------------------------------------------------------------------------
# 콘텐츠 라우터 등록 — Register content routers
# ---------------------------------------------------------------------------
admin_router.include_router(users_router, prefix="/users", tags=["Admin Users"])
admin_router.include_router(posts_router, prefix="/posts", tags=["Admin Posts"])
admin_router.include_router(categories_router, prefix="/categories", tags=["Admin Categories"])
admin_router.include_router(tags_router, prefix="/tags", tags=["Admin Tags"])
admin_router.include_router(comments_router, prefix="/comments", tags=["Admin Comments"])
admin_router.include_router(pages_router, prefix="/pages", tags=["Admin Pages"])
admin_router.include_router(attachments_router, prefix="/attachments", tags=["Admin Attachments"])

# ---------------------------------------------------------------------------
# 위젯 라우터 등록 — Register widget routers
# ---------------------------------------------------------------------------
admin_router.include_router(tools_router, prefix="/external-tools", tags=["Admin External Tools"])
admin_router.include_router(news_router, prefix="/news", tags=["Admin News"])
admin_router.include_router(stocks_router, prefix="/stocks", tags=["Admin Stocks"])

# ---------------------------------------------------------------------------
# 테마 라우터 등록 — Register theme router
# ---------------------------------------------------------------------------
admin_router.include_router(themes_router, prefix="/themes", tags=["Admin Themes"])
