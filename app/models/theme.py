"""테마 모델 — 설치된 테마의 등록 정보.

Theme model — Registry row for an installed theme folder.
The manifest snapshot (config) and the user's setting values (settings) are
stored as JSON; the folder under THEMES_DIR remains the source of templates.
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Index, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Theme(Base):
    """테마 테이블.

    Theme table. At most one row has is_active=True at any time, enforced by a
    partial unique index; activation locks the rows and flips the flag inside
    a single transaction.

    Attributes:
        theme_id: 테마 폴더 이름 (Folder id, unique)
        name / version / author / author_url / description / screenshot: 매니페스트 정보
        config: theme.yaml 스냅샷 (Parsed manifest snapshot)
        settings: 사용자 설정 값 (Saved setting values)
        is_active: 현재 사이트 테마 여부 (Whether this is the site theme)
        status: 상태 (enabled / disabled / error)
        template_engine: 템플릿 엔진 이름 (Template engine, "jinja2")
    """

    __tablename__ = "themes"
    __table_args__ = (
        # 활성 테마는 최대 1개 — At most one active row
        Index(
            "uq_themes_single_active", "is_active", unique=True,
            postgresql_where=text("is_active"), sqlite_where=text("is_active"),
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    theme_id: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    version: Mapped[str | None] = mapped_column(String(50), nullable=True)
    author: Mapped[str | None] = mapped_column(String(200), nullable=True)
    author_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    screenshot: Mapped[str | None] = mapped_column(String(255), nullable=True)
    config: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    settings: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="enabled", nullable=False)
    template_engine: Mapped[str] = mapped_column(String(20), default="jinja2", nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))
