"""페이지네이션 유틸리티 모듈.

Pagination utility module for SQLAlchemy async queries.
Provides a generic paginate function, a query-parameter dependency, and a
Page response model for consistent pagination across all list endpoints.
"""

import math
from typing import Any, Generic, Sequence, TypeVar

from fastapi import Query
from pydantic import BaseModel
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")

# 페이지당 최대 항목 수 — Hard cap on per_page
MAX_PER_PAGE: int = 100


class Page(BaseModel, Generic[T]):
    """페이지네이션 결과 모델.

    Pagination result model for typed responses.
    Contains the paginated items and metadata for client-side pagination controls.

    Attributes:
        items: 현재 페이지 항목 목록 (Items for the current page)
        total: 전체 항목 수 (Total count across all pages)
        page: 현재 페이지 번호 (Current page number, 1-based)
        per_page: 페이지당 항목 수 (Items per page)
        pages: 전체 페이지 수 (Total number of pages)
    """

    items: list[T]  # 현재 페이지 항목 목록 (Paginated items)
    total: int  # 전체 항목 수 (Total item count)
    page: int  # 현재 페이지 번호 — 1부터 시작 (Current page, 1-indexed)
    per_page: int  # 페이지당 항목 수 (Items per page)
    pages: int  # 전체 페이지 수 (Total pages, computed: ceil(total/per_page))


class PageParams(BaseModel):
    """페이지 요청 파라미터 — Validated page/per_page pair."""

    page: int = 1
    per_page: int = 20


def page_params(
    page: int = Query(1, ge=1, description="1부터 시작하는 페이지 번호 (1-based page)"),
    per_page: int = Query(20, ge=1, le=MAX_PER_PAGE, description="페이지당 항목 수 (Items per page)"),
) -> PageParams:
    """FastAPI 의존성 — 쿼리스트링에서 페이지 파라미터를 읽습니다.

    FastAPI dependency reading ?page=&per_page= from the query string.
    """
    return PageParams(page=page, per_page=per_page)


def total_pages(total: int, per_page: int) -> int:
    """전체 페이지 수 — ceil(total / per_page), 항목이 없으면 0."""
    if per_page <= 0:
        return 0
    return math.ceil(total / per_page)


def build_page(items: list[T], total: int, params: PageParams) -> Page[T]:
    """항목과 개수로 Page 응답을 만듭니다.

    Assemble a Page response from already-converted items and the total count.
    """
    return Page(
        items=items,
        total=total,
        page=params.page,
        per_page=params.per_page,
        pages=total_pages(total, params.per_page),
    )


async def paginate(
    db: AsyncSession,
    query: Select[Any],
    page: int = 1,
    per_page: int = 20,
) -> tuple[Sequence[Any], int]:
    """SQLAlchemy 쿼리에 대한 페이지네이션을 수행합니다.

    Execute a paginated SQLAlchemy query, returning items and total count.
    Runs two queries: one for the total count (via subquery) and one for
    the actual page of results with OFFSET/LIMIT.

    Args:
        db: 비동기 DB 세션 (Async database session)
        query: SQLAlchemy Select 쿼리 (Base query to paginate)
        page: 요청 페이지 번호, 1부터 시작 (Page number, 1-indexed, default: 1)
        per_page: 페이지당 항목 수 (Items per page, default: 20)

    Returns:
        tuple[Sequence[Any], int]: (항목 목록, 전체 개수) 튜플
            (Tuple of paginated items and total count)
    """
    # 전체 개수 조회 — 서브쿼리로 감싸서 COUNT 실행 (Count total via subquery)
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total: int = (await db.execute(count_query)).scalar() or 0

    # 페이지 항목 조회 — OFFSET/LIMIT 적용 (Fetch page items with offset/limit)
    offset: int = (page - 1) * per_page
    result = await db.execute(query.offset(offset).limit(per_page))
    items: Sequence[Any] = result.scalars().unique().all()

    return items, total
