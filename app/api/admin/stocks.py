"""관리자 주식 라우터 — 종목 upsert, 시세 갱신, 핫 표시, 수동 수집.

Admin Stock Router — Stock management and the manual fetch trigger.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin
from app.database import get_db
from app.fetchers.stock_fetcher import fetch_stocks
from app.models.user import User
from app.models.widget import Stock
from app.schemas.common import MessageResponse
from app.schemas.widget import StockHotUpdate, StockPriceUpdate, StockResponse, StockUpsert
from app.services.stock_service import stock_service
from app.utils.pagination import Page, PageParams, page_params

router: APIRouter = APIRouter()


@router.get("/", response_model=Page[StockResponse])
async def list_stocks(
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_admin)],
    params: Annotated[PageParams, Depends(page_params)],
) -> Page[StockResponse]:
    return await stock_service.list_stocks(db, params)


@router.post("/fetch", response_model=list[StockResponse])
async def fetch_stock_quotes(
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_admin)],
) -> list[StockResponse]:
    """시세 수동 갱신 — API 토큰이 없으면 시뮬레이션 시세."""
    stocks: list[Stock] = await fetch_stocks(db)
    await db.commit()
    return stock_service.to_responses(stocks)


@router.get("/{stock_id}", response_model=StockResponse)
async def get_stock(
    stock_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_admin)],
) -> StockResponse:
    return await stock_service.get_stock(db, stock_id)


@router.post("/", response_model=StockResponse)
async def save_stock(
    data: StockUpsert,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_admin)],
) -> StockResponse:
    """종목 생성 또는 갱신 — symbol 기준 upsert."""
    result: StockResponse = await stock_service.save_stock(db, data)
    await db.commit()
    return result


@router.patch("/{stock_id}/price", response_model=StockResponse)
async def update_stock_price(
    stock_id: UUID,
    data: StockPriceUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_admin)],
) -> StockResponse:
    """시세 갱신 — 전일 종가 기준 등락폭/등락률 재계산."""
    result: StockResponse = await stock_service.update_price(db, stock_id, data)
    await db.commit()
    return result


@router.patch("/{stock_id}/hot", response_model=StockResponse)
async def set_stock_hot(
    stock_id: UUID,
    data: StockHotUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_admin)],
) -> StockResponse:
    result: StockResponse = await stock_service.set_hot(db, stock_id, data.is_hot, data.hot_rank)
    await db.commit()
    return result


@router.delete("/{stock_id}", response_model=MessageResponse)
async def delete_stock(
    stock_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_admin)],
) -> dict[str, str]:
    await stock_service.delete_stock(db, stock_id)
    await db.commit()
    return {"message": "Stock deleted successfully"}
