"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for Alembic migrations and
relationship resolution.

Modules:
    user: 사용자 및 리프레시 토큰 (Users and refresh tokens)
    blog: 카테고리, 태그, 게시글, 댓글, 페이지 (Categories, tags, posts, comments, pages)
    attachment: 첨부파일 (Uploaded file metadata)
    widget: 외부 도구, 뉴스, 주식 (External tools, news, stocks)
    theme: 테마 등록 정보 (Installed themes)
"""

from app.models.user import User, RefreshToken
from app.models.blog import Category, Tag, Post, Comment, Page, post_tags
from app.models.attachment import Attachment
from app.models.widget import ExternalTool, News, Stock
from app.models.theme import Theme

__all__ = [
    "User", "RefreshToken",
    "Category", "Tag", "Post", "Comment", "Page", "post_tags",
    "Attachment",
    "ExternalTool", "News", "Stock",
    "Theme",
]
