"""공개 위젯 라우터 — 외부 도구, 핫 뉴스, 주식 시세.

Public Widget Routers — Read endpoints behind the sidebar widgets.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.widget import (
    MARKET_PATTERN,
    NEWS_CATEGORY_PATTERN,
    TOOL_CATEGORY_PATTERN,
    ExternalToolResponse,
    NewsResponse,
    StockResponse,
)
from app.services.external_tool_service import external_tool_service
from app.services.news_service import news_service
from app.services.stock_service import stock_service
from app.utils.pagination import Page, PageParams, page_params

tools_router: APIRouter = APIRouter()
news_router: APIRouter = APIRouter()
stocks_router: APIRouter = APIRouter()

# 순위 목록 크기 — Size of hot / gainer / loser lists
Limit = Annotated[int, Query(ge=1, le=50, description="최대 항목 수 (Max items)")]


# === 외부 도구 (External tools) ===

@tools_router.get("/", response_model=list[ExternalToolResponse])
async def list_active_tools(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[ExternalToolResponse]:
    """활성 도구 — 표시 순서 (Active tools by display order)."""
    return await external_tool_service.list_active(db)


@tools_router.get("/search", response_model=list[ExternalToolResponse])
async def search_tools(
    db: Annotated[AsyncSession, Depends(get_db)],
    keyword: Annotated[str, Query(min_length=1, description="이름/설명 검색어")],
) -> list[ExternalToolResponse]:
    return await external_tool_service.search(db, keyword)


@tools_router.get("/category/{category}", response_model=list[ExternalToolResponse])
async def list_tools_by_category(
    category: Annotated[str, Path(pattern=TOOL_CATEGORY_PATTERN)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[ExternalToolResponse]:
    return await external_tool_service.list_by_category(db, category)


# === 뉴스 (News) ===

@news_router.get("/", response_model=Page[NewsResponse])
async def list_news(
    db: Annotated[AsyncSession, Depends(get_db)],
    params: Annotated[PageParams, Depends(page_params)],
    category: Annotated[str | None, Query(pattern=NEWS_CATEGORY_PATTERN, description="분류 필터")] = None,
) -> Page[NewsResponse]:
    """최신 뉴스 목록 — 발행일 내림차순 (Newest first)."""
    return await news_service.list_news(db, params, category)


@news_router.get("/hot", response_model=list[NewsResponse])
async def hot_news(
    db: Annotated[AsyncSession, Depends(get_db)],
    limit: Limit = 10,
) -> list[NewsResponse]:
    return await news_service.hot_news(db, limit)


@news_router.get("/search", response_model=Page[NewsResponse])
async def search_news(
    db: Annotated[AsyncSession, Depends(get_db)],
    params: Annotated[PageParams, Depends(page_params)],
    keyword: Annotated[str, Query(min_length=1, description="제목/요약 검색어")],
) -> Page[NewsResponse]:
    return await news_service.search(db, keyword, params)


@news_router.get("/{news_id}", response_model=NewsResponse)
async def get_news(
    news_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> NewsResponse:
    """뉴스 상세 — 조회수 1 증가."""
    result: NewsResponse = await news_service.get_news(db, news_id, count_view=True)
    await db.commit()
    return result


# === 주식 (Stocks) ===

@stocks_router.get("/", response_model=Page[StockResponse])
async def list_stocks(
    db: Annotated[AsyncSession, Depends(get_db)],
    params: Annotated[PageParams, Depends(page_params)],
) -> Page[StockResponse]:
    return await stock_service.list_stocks(db, params)


@stocks_router.get("/hot", response_model=list[StockResponse])
async def hot_stocks(
    db: Annotated[AsyncSession, Depends(get_db)],
    limit: Limit = 10,
) -> list[StockResponse]:
    """인기 종목 — 순위 오름차순 (Hot stocks by rank)."""
    return await stock_service.hot_stocks(db, limit)


@stocks_router.get("/gainers", response_model=list[StockResponse])
async def top_gainers(
    db: Annotated[AsyncSession, Depends(get_db)],
    limit: Limit = 10,
) -> list[StockResponse]:
    return await stock_service.gainers(db, limit)


@stocks_router.get("/losers", response_model=list[StockResponse])
async def top_losers(
    db: Annotated[AsyncSession, Depends(get_db)],
    limit: Limit = 10,
) -> list[StockResponse]:
    return await stock_service.losers(db, limit)


@stocks_router.get("/search", response_model=list[StockResponse])
async def search_stocks(
    db: Annotated[AsyncSession, Depends(get_db)],
    keyword: Annotated[str, Query(min_length=1, description="코드/이름 검색어")],
) -> list[StockResponse]:
    return await stock_service.search(db, keyword)


@stocks_router.get("/market/{market}", response_model=list[StockResponse])
async def stocks_by_market(
    market: Annotated[str, Path(pattern=MARKET_PATTERN)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[StockResponse]:
    return await stock_service.by_market(db, market)


@stocks_router.get("/{symbol}", response_model=StockResponse)
async def get_stock(
    symbol: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> StockResponse:
    return await stock_service.get_by_symbol(db, symbol)
