"""테마 레포지토리 — 테마 조회와 활성 테마 전환.

Theme Repository — Theme lookups and the active-flag switch.
"""

from uuid import UUID

from sqlalchemy import Select, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.theme import Theme
from app.repositories.base import BaseRepository


class ThemeRepository(BaseRepository[Theme]):
    """테마 테이블 레포지토리 (Repository for the themes table)."""

    def __init__(self) -> None:
        super().__init__(Theme)

    async def get_by_theme_id(self, db: AsyncSession, theme_id: str) -> Theme | None:
        return await self.get_one_by(db, "theme_id", theme_id)

    async def get_active(self, db: AsyncSession) -> Theme | None:
        result = await db.execute(select(Theme).where(Theme.is_active.is_(True)))
        return result.scalars().first()

    async def list_ordered(self, db: AsyncSession) -> list[Theme]:
        """활성 테마 먼저, 그다음 이름순 (Active theme first, then by name)."""
        query: Select = select(Theme).order_by(Theme.is_active.desc(), Theme.name.asc())
        return list((await db.execute(query)).scalars().all())

    async def set_active(self, db: AsyncSession, record_id: UUID) -> None:
        """활성 플래그 전환 — 행 잠금 후 모든 행 해제, 대상만 설정.

        Lock the theme rows (SELECT ... FOR UPDATE), clear every active flag
        and set it on one row. A concurrent activation waits on the lock and
        then sees this one's result. Everything runs in the caller's
        transaction; the router commits it.
        """
        await db.execute(select(Theme.id).with_for_update())
        await db.execute(
            update(Theme)
            .where(Theme.is_active.is_(True), Theme.id != record_id)
            .values(is_active=False)
            .execution_options(synchronize_session="fetch")
        )
        await db.execute(
            update(Theme)
            .where(Theme.id == record_id)
            .values(is_active=True)
            .execution_options(synchronize_session="fetch")
        )
        await db.flush()


# 싱글턴 인스턴스 — Singleton instance
theme_repository: ThemeRepository = ThemeRepository()
