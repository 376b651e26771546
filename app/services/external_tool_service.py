"""외부 도구 서비스 — 사이드바 외부 링크 위젯.

External Tool Service — CRUD for the sidebar external-link widget and the
one-time seeding of default tools.
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.widget import ExternalTool
from app.repositories.widget_repository import external_tool_repository
from app.schemas.widget import ExternalToolCreate, ExternalToolResponse, ExternalToolUpdate
from app.utils.exceptions import NotFoundError
from app.utils.pagination import Page, PageParams, build_page

logger = logging.getLogger(__name__)

# 기본 도구 — (name, description, url, icon, icon_bg_color, category)
DEFAULT_TOOLS: list[tuple[str, str, str, str, str, str]] = [
    ("Notion", "All-in-one workspace for notes, docs and projects", "https://www.notion.so", "notion", "#000000", "productivity"),
    ("Baidu", "China's largest search engine", "https://www.baidu.com", "baidu", "#2932E1", "search"),
    ("Google", "The world's largest search engine", "https://www.google.com", "google", "#4285F4", "search"),
    ("GitHub", "The world's largest code hosting platform", "https://github.com", "github", "#24292E", "development"),
    ("Stack Overflow", "Q&A community for programmers", "https://stackoverflow.com", "stackoverflow", "#F48024", "development"),
    ("Bilibili", "Video community for young audiences", "https://www.bilibili.com", "bilibili", "#FB7299", "entertainment"),
    ("YouTube", "The world's largest video sharing platform", "https://www.youtube.com", "youtube", "#FF0000", "entertainment"),
    ("X (Twitter)", "Global social media platform", "https://x.com", "twitter", "#1DA1F2", "social"),
]


class ExternalToolService:
    """외부 도구 비즈니스 로직 서비스 (External tool business logic)."""

    def _to_response(self, tool: ExternalTool) -> ExternalToolResponse:
        return ExternalToolResponse(
            id=str(tool.id),
            name=tool.name,
            description=tool.description,
            url=tool.url,
            icon=tool.icon,
            icon_bg_color=tool.icon_bg_color,
            category=tool.category,
            display_order=tool.display_order,
            is_active=tool.is_active,
            created_at=tool.created_at,
        )

    async def _get_or_404(self, db: AsyncSession, tool_id: UUID) -> ExternalTool:
        tool: ExternalTool | None = await external_tool_repository.get_by_id(db, tool_id)
        if tool is None:
            raise NotFoundError("External tool not found")
        return tool

    async def create_tool(self, db: AsyncSession, data: ExternalToolCreate) -> ExternalToolResponse:
        tool: ExternalTool = await external_tool_repository.create(db, data.model_dump())
        return self._to_response(tool)

    async def get_tool(self, db: AsyncSession, tool_id: UUID) -> ExternalToolResponse:
        return self._to_response(await self._get_or_404(db, tool_id))

    async def list_active(self, db: AsyncSession) -> list[ExternalToolResponse]:
        """활성 도구 — 표시 순서, 생성 순 (Active tools by display order)."""
        return [self._to_response(t) for t in await external_tool_repository.list_active(db)]

    async def list_tools(self, db: AsyncSession, params: PageParams) -> Page[ExternalToolResponse]:
        tools, total = await external_tool_repository.get_paginated(
            db, external_tool_repository.list_query(), params.page, params.per_page
        )
        return build_page([self._to_response(t) for t in tools], total, params)

    async def list_by_category(self, db: AsyncSession, category: str) -> list[ExternalToolResponse]:
        return [self._to_response(t) for t in await external_tool_repository.list_by_category(db, category)]

    async def search(self, db: AsyncSession, keyword: str) -> list[ExternalToolResponse]:
        return [self._to_response(t) for t in await external_tool_repository.search(db, keyword)]

    async def update_tool(
        self,
        db: AsyncSession,
        tool_id: UUID,
        data: ExternalToolUpdate,
    ) -> ExternalToolResponse:
        await self._get_or_404(db, tool_id)
        tool: ExternalTool | None = await external_tool_repository.update(
            db, tool_id, data.model_dump(exclude_unset=True)
        )
        return self._to_response(tool)

    async def delete_tool(self, db: AsyncSession, tool_id: UUID) -> None:
        await self._get_or_404(db, tool_id)
        await external_tool_repository.delete(db, tool_id)

    async def initialize_defaults(self, db: AsyncSession) -> int:
        """테이블이 비어 있을 때만 기본 도구를 생성합니다 (멱등).

        Seed the default tools when the table is empty. Idempotent.

        Returns:
            int: 생성된 도구 수 (Number of tools created, 0 when already seeded)
        """
        if await external_tool_repository.count(db) > 0:
            return 0

        for order, (name, description, url, icon, color, category) in enumerate(DEFAULT_TOOLS, start=1):
            await external_tool_repository.create(
                db,
                {
                    "name": name,
                    "description": description,
                    "url": url,
                    "icon": icon,
                    "icon_bg_color": color,
                    "category": category,
                    "display_order": order,
                    "is_active": True,
                },
            )
        logger.info("Initialized %d default external tools", len(DEFAULT_TOOLS))
        return len(DEFAULT_TOOLS)


# 싱글턴 인스턴스 — Singleton instance
external_tool_service: ExternalToolService = ExternalToolService()
