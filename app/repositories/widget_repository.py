"""위젯 레포지토리 — 외부 도구, 뉴스, 주식 쿼리.

Widget Repositories — Queries for external tools, news and stock quotes.
"""

from sqlalchemy import Select, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from app.models.widget import ExternalTool, News, Stock
from app.repositories.base import BaseRepository


class ExternalToolRepository(BaseRepository[ExternalTool]):
    """외부 도구 테이블 레포지토리 (Repository for the external_tools table)."""

    def __init__(self) -> None:
        super().__init__(ExternalTool)

    def _active(self) -> Select:
        return (
            select(ExternalTool)
            .where(ExternalTool.is_active.is_(True))
            .order_by(ExternalTool.display_order.asc(), ExternalTool.created_at.asc())
        )

    async def list_active(self, db: AsyncSession) -> list[ExternalTool]:
        """활성 도구 — 표시 순서, 생성 순 (Active tools by display order)."""
        return list((await db.execute(self._active())).scalars().all())

    def list_query(self) -> Select:
        return select(ExternalTool).order_by(
            ExternalTool.display_order.asc(), ExternalTool.created_at.asc()
        )

    async def list_by_category(self, db: AsyncSession, category: str) -> list[ExternalTool]:
        result = await db.execute(self._active().where(ExternalTool.category == category))
        return list(result.scalars().all())

    async def search(self, db: AsyncSession, keyword: str) -> list[ExternalTool]:
        """이름 또는 설명 검색 (활성만) — Search name or description, active only."""
        pattern: str = f"%{keyword}%"
        result = await db.execute(
            self._active().where(
                or_(ExternalTool.name.ilike(pattern), ExternalTool.description.ilike(pattern))
            )
        )
        return list(result.scalars().all())


class NewsRepository(BaseRepository[News]):
    """뉴스 테이블 레포지토리 (Repository for the news table)."""

    def __init__(self) -> None:
        super().__init__(News)

    def list_query(self, category: str | None = None) -> Select:
        """발행일 내림차순 목록 — Newest published first."""
        query: Select = select(News)
        if category is not None:
            query = query.where(News.category == category)
        return query.order_by(News.published_at.desc())

    async def hot(self, db: AsyncSession, limit: int) -> list[News]:
        """핫 뉴스 — is_hot, hot_score 내림차순."""
        result = await db.execute(
            select(News)
            .where(News.is_hot.is_(True))
            .order_by(News.hot_score.desc(), News.published_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    def search_query(self, keyword: str) -> Select:
        pattern: str = f"%{keyword}%"
        return (
            select(News)
            .where(or_(News.title.ilike(pattern), News.summary.ilike(pattern)))
            .order_by(News.published_at.desc())
        )

    async def get_by_title_and_source(self, db: AsyncSession, title: str, source: str) -> News | None:
        result = await db.execute(select(News).where(News.title == title, News.source == source))
        return result.scalars().first()

    async def titles_for_source(self, db: AsyncSession, source: str) -> set[str]:
        """출처별 저장된 제목 집합 — Titles already stored for a source."""
        result = await db.execute(select(News.title).where(News.source == source))
        return set(result.scalars().all())

    async def increment_views(self, db: AsyncSession, news: News) -> None:
        await db.execute(
            update(News)
            .where(News.id == news.id)
            .values(view_count=News.view_count + 1, updated_at=News.updated_at)
            .execution_options(synchronize_session=False)
        )
        set_committed_value(news, "view_count", (news.view_count or 0) + 1)


class StockRepository(BaseRepository[Stock]):
    """주식 테이블 레포지토리 (Repository for the stocks table)."""

    def __init__(self) -> None:
        super().__init__(Stock)

    async def get_by_symbol(self, db: AsyncSession, symbol: str) -> Stock | None:
        return await self.get_one_by(db, "symbol", symbol)

    def list_query(self) -> Select:
        return select(Stock).order_by(Stock.symbol.asc())

    async def hot(self, db: AsyncSession, limit: int) -> list[Stock]:
        """인기 종목 — hot_rank 오름차순 (Rank 1 first)."""
        result = await db.execute(
            select(Stock)
            .where(Stock.is_hot.is_(True))
            .order_by(Stock.hot_rank.asc(), Stock.symbol.asc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def by_market(self, db: AsyncSession, market: str) -> list[Stock]:
        result = await db.execute(
            select(Stock).where(Stock.market == market).order_by(Stock.symbol.asc())
        )
        return list(result.scalars().all())

    async def search(self, db: AsyncSession, keyword: str) -> list[Stock]:
        """종목 코드, 이름, 중문 이름 검색 — Search symbol, name or name_cn."""
        pattern: str = f"%{keyword}%"
        result = await db.execute(
            select(Stock)
            .where(
                or_(
                    Stock.symbol.ilike(pattern),
                    Stock.name.ilike(pattern),
                    Stock.name_cn.ilike(pattern),
                )
            )
            .order_by(Stock.symbol.asc())
        )
        return list(result.scalars().all())

    async def gainers(self, db: AsyncSession, limit: int) -> list[Stock]:
        """상승 종목 — 등락률 내림차순 (Top gainers)."""
        result = await db.execute(
            select(Stock)
            .where(Stock.change_percent > 0)
            .order_by(Stock.change_percent.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def losers(self, db: AsyncSession, limit: int) -> list[Stock]:
        """하락 종목 — 등락률 오름차순 (Top losers)."""
        result = await db.execute(
            select(Stock)
            .where(Stock.change_percent < 0)
            .order_by(Stock.change_percent.asc())
            .limit(limit)
        )
        return list(result.scalars().all())


# 싱글턴 인스턴스 — Singleton instances
external_tool_repository: ExternalToolRepository = ExternalToolRepository()
news_repository: NewsRepository = NewsRepository()
stock_repository: StockRepository = StockRepository()
