"""관리자 뉴스 라우터 — 뉴스 CRUD, 핫 표시, 수동 수집.

Admin News Router — News management and the manual fetch trigger.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin
from app.database import get_db
from app.fetchers.news_fetcher import fetch_hot_news
from app.models.user import User
from app.models.widget import News
from app.schemas.common import MessageResponse
from app.schemas.widget import NewsCreate, NewsHotUpdate, NewsResponse, NewsUpdate
from app.services.news_service import news_service
from app.utils.pagination import Page, PageParams, page_params

router: APIRouter = APIRouter()


@router.get("/", response_model=Page[NewsResponse])
async def list_news(
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_admin)],
    params: Annotated[PageParams, Depends(page_params)],
) -> Page[NewsResponse]:
    return await news_service.list_news(db, params)


@router.post("/fetch", response_model=list[NewsResponse])
async def fetch_news(
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_admin)],
) -> list[NewsResponse]:
    """HackerNews 수동 수집 — 실패 시 샘플 뉴스.

    Run the news fetcher now. Returns the stored stories, or the sample
    items when HackerNews was unreachable or had nothing new.
    """
    items: list[News] = await fetch_hot_news(db)
    await db.commit()
    return news_service.to_responses(items)


@router.get("/{news_id}", response_model=NewsResponse)
async def get_news(
    news_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_admin)],
) -> NewsResponse:
    return await news_service.get_news(db, news_id)


@router.post("/", response_model=NewsResponse, status_code=201)
async def create_news(
    data: NewsCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_admin)],
) -> NewsResponse:
    result: NewsResponse = await news_service.create_news(db, data)
    await db.commit()
    return result


@router.put("/{news_id}", response_model=NewsResponse)
async def update_news(
    news_id: UUID,
    data: NewsUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_admin)],
) -> NewsResponse:
    result: NewsResponse = await news_service.update_news(db, news_id, data)
    await db.commit()
    return result


@router.patch("/{news_id}/hot", response_model=NewsResponse)
async def set_news_hot(
    news_id: UUID,
    data: NewsHotUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_admin)],
) -> NewsResponse:
    result: NewsResponse = await news_service.set_hot(db, news_id, data.is_hot, data.hot_score)
    await db.commit()
    return result


@router.delete("/{news_id}", response_model=MessageResponse)
async def delete_news(
    news_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[User, Depends(require_admin)],
) -> dict[str, str]:
    await news_service.delete_news(db, news_id)
    await db.commit()
    return {"message": "News deleted successfully"}
