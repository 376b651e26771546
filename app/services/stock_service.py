"""주식 서비스 — 주식 시세 위젯 CRUD와 시세 갱신.

Stock Service — CRUD, ranking queries and price updates for the stock
quote widget. app.fetchers.stock_fetcher writes through `upsert`.
"""

from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.widget import Stock
from app.repositories.widget_repository import stock_repository
from app.schemas.widget import StockPriceUpdate, StockResponse, StockUpsert
from app.utils.exceptions import NotFoundError
from app.utils.pagination import Page, PageParams, build_page


def price_change(price: float, prev_close: float | None) -> tuple[float, float] | None:
    """전일 종가 대비 등락폭과 등락률 (소수 둘째 자리) — None if unknown.

    Example:
        >>> price_change(110.0, 100.0)
        (10.0, 10.0)
    """
    if prev_close is None or prev_close <= 0:
        return None
    amount: float = round(price - prev_close, 2)
    return amount, round(amount / prev_close * 100, 2)


class StockService:
    """주식 비즈니스 로직 서비스 (Stock business logic)."""

    def _to_response(self, stock: Stock) -> StockResponse:
        return StockResponse(
            id=str(stock.id),
            symbol=stock.symbol,
            name=stock.name,
            name_cn=stock.name_cn,
            market=stock.market,
            price=stock.price,
            change_amount=stock.change_amount,
            change_percent=stock.change_percent,
            high=stock.high,
            low=stock.low,
            open=stock.open,
            prev_close=stock.prev_close,
            volume=stock.volume,
            market_cap=stock.market_cap,
            pe_ratio=stock.pe_ratio,
            is_hot=stock.is_hot,
            hot_rank=stock.hot_rank,
            last_updated=stock.last_updated,
        )

    def to_responses(self, items: list[Stock]) -> list[StockResponse]:
        return [self._to_response(s) for s in items]

    async def _get_or_404(self, db: AsyncSession, stock_id: UUID) -> Stock:
        stock: Stock | None = await stock_repository.get_by_id(db, stock_id)
        if stock is None:
            raise NotFoundError("Stock not found")
        return stock

    async def upsert(self, db: AsyncSession, symbol: str, values: dict[str, Any]) -> Stock:
        """종목 코드 기준 생성 또는 갱신 — Create or update keyed by symbol.

        None values leave the stored column unchanged on update.
        """
        values = {**values, "last_updated": datetime.now(timezone.utc)}
        stock: Stock | None = await stock_repository.get_by_symbol(db, symbol)
        if stock is None:
            return await stock_repository.create(db, {**values, "symbol": symbol})
        for field, value in values.items():
            if value is not None:
                setattr(stock, field, value)
        await db.flush()
        return stock

    async def save_stock(self, db: AsyncSession, data: StockUpsert) -> StockResponse:
        values: dict[str, Any] = data.model_dump(exclude={"symbol"})
        return self._to_response(await self.upsert(db, data.symbol, values))

    async def get_stock(self, db: AsyncSession, stock_id: UUID) -> StockResponse:
        return self._to_response(await self._get_or_404(db, stock_id))

    async def get_by_symbol(self, db: AsyncSession, symbol: str) -> StockResponse:
        stock: Stock | None = await stock_repository.get_by_symbol(db, symbol)
        if stock is None:
            raise NotFoundError("Stock not found")
        return self._to_response(stock)

    async def list_stocks(self, db: AsyncSession, params: PageParams) -> Page[StockResponse]:
        items, total = await stock_repository.get_paginated(
            db, stock_repository.list_query(), params.page, params.per_page
        )
        return build_page(self.to_responses(list(items)), total, params)

    async def hot_stocks(self, db: AsyncSession, limit: int = 10) -> list[StockResponse]:
        return self.to_responses(await stock_repository.hot(db, limit))

    async def by_market(self, db: AsyncSession, market: str) -> list[StockResponse]:
        return self.to_responses(await stock_repository.by_market(db, market))

    async def search(self, db: AsyncSession, keyword: str) -> list[StockResponse]:
        return self.to_responses(await stock_repository.search(db, keyword))

    async def gainers(self, db: AsyncSession, limit: int = 10) -> list[StockResponse]:
        return self.to_responses(await stock_repository.gainers(db, limit))

    async def losers(self, db: AsyncSession, limit: int = 10) -> list[StockResponse]:
        return self.to_responses(await stock_repository.losers(db, limit))

    async def update_price(self, db: AsyncSession, stock_id: UUID, data: StockPriceUpdate) -> StockResponse:
        """시세 갱신 — 전일 종가가 있으면 등락폭/등락률 재계산.

        Update the price. Change amount and percent are recomputed from the
        previous close (given or stored) when one is known.
        """
        stock: Stock = await self._get_or_404(db, stock_id)
        update_data: dict[str, Any] = data.model_dump(exclude_unset=True, exclude_none=True)
        for field, value in update_data.items():
            setattr(stock, field, value)

        change: tuple[float, float] | None = price_change(stock.price, stock.prev_close)
        if change is not None:
            stock.change_amount, stock.change_percent = change
        stock.last_updated = datetime.now(timezone.utc)

        await db.flush()
        return self._to_response(stock)

    async def set_hot(
        self,
        db: AsyncSession,
        stock_id: UUID,
        is_hot: bool,
        hot_rank: int | None = None,
    ) -> StockResponse:
        stock: Stock = await self._get_or_404(db, stock_id)
        stock.is_hot = is_hot
        if hot_rank is not None:
            stock.hot_rank = hot_rank
        await db.flush()
        return self._to_response(stock)

    async def delete_stock(self, db: AsyncSession, stock_id: UUID) -> None:
        await self._get_or_404(db, stock_id)
        await stock_repository.delete(db, stock_id)


# 싱글턴 인스턴스 — Singleton instance
stock_service: StockService = StockService()
