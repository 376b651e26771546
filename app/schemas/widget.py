"""위젯 Pydantic 스키마 — 외부 도구, 뉴스, 주식 시세.

Sidebar widget request/response schemas: external tool links, hot news and
stock quotes.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from app.schemas.common import reject_null

TOOL_CATEGORY_PATTERN: str = (
    r"^(productivity|search|social|development|entertainment|finance|news|other)$"
)
NEWS_CATEGORY_PATTERN: str = (
    r"^(technology|finance|politics|sports|entertainment|health|science|world|domestic|other)$"
)
MARKET_PATTERN: str = r"^(SH|SZ|HK|US|OTHER)$"


# === 외부 도구 (External tool) 스키마 ===

class ExternalToolCreate(BaseModel):
    """외부 도구 링크 생성 요청 스키마.

    Attributes:
        name: 도구 이름 (Tool name)
        url: 링크 URL (Target URL)
        icon: 아이콘 이름 (Icon identifier)
        icon_bg_color: 아이콘 배경색 (Icon background color)
        category: 분류 (productivity, search, ... other)
        display_order: 표시 순서 (Ascending display order)
    """

    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)
    url: str = Field(min_length=1, max_length=500)
    icon: str | None = Field(None, max_length=100)
    icon_bg_color: str | None = Field(None, max_length=20)
    category: str = Field("other", pattern=TOOL_CATEGORY_PATTERN)
    display_order: int = 0
    is_active: bool = True


class ExternalToolUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)
    url: str | None = Field(None, min_length=1, max_length=500)
    icon: str | None = Field(None, max_length=100)
    icon_bg_color: str | None = Field(None, max_length=20)
    category: str | None = Field(None, pattern=TOOL_CATEGORY_PATTERN)
    display_order: int | None = None
    is_active: bool | None = None

    @field_validator("name", "url", "category", "display_order", "is_active")
    @classmethod
    def _not_null(cls, value: Any) -> Any:
        return reject_null(value)


class ExternalToolResponse(BaseModel):
    id: str
    name: str
    description: str | None
    url: str
    icon: str | None
    icon_bg_color: str | None
    category: str
    display_order: int
    is_active: bool
    created_at: datetime


# === 뉴스 (News) 스키마 ===

class NewsCreate(BaseModel):
    title: str = Field(min_length=1, max_length=300)
    summary: str | None = Field(None, max_length=1000)
    content: str | None = None
    source: str | None = Field(None, max_length=100)
    source_url: str | None = Field(None, max_length=1000)
    thumbnail: str | None = Field(None, max_length=500)
    category: str = Field("other", pattern=NEWS_CATEGORY_PATTERN)
    is_hot: bool = False
    hot_score: int = 0
    published_at: datetime | None = None  # 비어 있으면 현재 시각 (Defaults to now)


class NewsUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=300)
    summary: str | None = Field(None, max_length=1000)
    content: str | None = None
    source: str | None = Field(None, max_length=100)
    source_url: str | None = Field(None, max_length=1000)
    thumbnail: str | None = Field(None, max_length=500)
    category: str | None = Field(None, pattern=NEWS_CATEGORY_PATTERN)
    is_hot: bool | None = None
    hot_score: int | None = None
    published_at: datetime | None = None

    @field_validator("title", "category", "is_hot", "hot_score")
    @classmethod
    def _not_null(cls, value: Any) -> Any:
        return reject_null(value)


class NewsHotUpdate(BaseModel):
    is_hot: bool
    hot_score: int | None = None


class NewsResponse(BaseModel):
    id: str
    title: str
    summary: str | None
    content: str | None
    source: str | None
    source_url: str | None
    thumbnail: str | None
    category: str
    view_count: int
    is_hot: bool
    hot_score: int
    published_at: datetime
    created_at: datetime


# === 주식 (Stock) 스키마 ===

class StockUpsert(BaseModel):
    """종목 생성/갱신 요청 — symbol 기준 upsert (Upsert keyed by symbol)."""

    symbol: str = Field(min_length=1, max_length=20)
    name: str = Field(min_length=1, max_length=100)
    name_cn: str | None = Field(None, max_length=100)
    market: str = Field("OTHER", pattern=MARKET_PATTERN)
    price: float = Field(0.0, ge=0)
    change_amount: float = 0.0
    change_percent: float = 0.0
    high: float | None = None
    low: float | None = None
    open: float | None = None
    prev_close: float | None = None
    volume: int = Field(0, ge=0)
    market_cap: float | None = None
    pe_ratio: float | None = None
    is_hot: bool = False
    hot_rank: int | None = None


class StockPriceUpdate(BaseModel):
    """시세 갱신 — prev_close가 있으면 등락폭/등락률 재계산.

    Price update. Change amount and percent are recomputed from prev_close
    when one is known.
    """

    price: float = Field(ge=0)
    prev_close: float | None = Field(None, ge=0)
    high: float | None = None
    low: float | None = None
    open: float | None = None
    volume: int | None = Field(None, ge=0)


class StockHotUpdate(BaseModel):
    is_hot: bool
    hot_rank: int | None = None


class StockResponse(BaseModel):
    id: str
    symbol: str
    name: str
    name_cn: str | None
    market: str
    price: float
    change_amount: float
    change_percent: float
    high: float | None
    low: float | None
    open: float | None
    prev_close: float | None
    volume: int
    market_cap: float | None
    pe_ratio: float | None
    is_hot: bool
    hot_rank: int | None
    last_updated: datetime | None
