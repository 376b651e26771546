"""사이드바 위젯 모델 — 외부 도구, 뉴스, 주식 시세.

Sidebar widget models — External tool links, hot news and stock quotes.

Tables:
    - external_tools: 외부 도구 바로가기 (Shortcut links to external sites)
    - news: 뉴스 기사 (News items, fetched from HackerNews or fallback data)
    - stocks: 주식 시세 (Stock quotes, fetched from a quote API or simulated)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import BigInteger, Boolean, DateTime, Float, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class ExternalTool(Base):
    """외부 도구 모델 — display_order 오름차순으로 노출.

    External tool shortcut, shown ordered by display_order.
    """

    __tablename__ = "external_tools"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    url: Mapped[str] = mapped_column(String(500), nullable=False)
    # 아이콘 키 — Icon key understood by the frontend (e.g. "github")
    icon: Mapped[str | None] = mapped_column(String(100), nullable=True)
    icon_bg_color: Mapped[str | None] = mapped_column(String(20), nullable=True)
    # 분류 — productivity, search, social, development, entertainment, finance, news, other
    category: Mapped[str] = mapped_column(String(20), default="other", nullable=False)
    display_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))


class News(Base):
    """뉴스 모델 — 핫 뉴스 위젯 항목.

    News item. is_hot/hot_score drive the "hot" sidebar ordering.
    """

    __tablename__ = "news"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    summary: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    # 출처 — Source name ("Hacker News", ...)
    source: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    source_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    thumbnail: Mapped[str | None] = mapped_column(String(500), nullable=True)
    # 분류 — technology, finance, politics, sports, entertainment, health, science, world, domestic, other
    category: Mapped[str] = mapped_column(String(20), default="other", nullable=False)
    view_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_hot: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    hot_score: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    published_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))


class Stock(Base):
    """주식 시세 모델 — symbol 기준 upsert.

    Stock quote, upserted by symbol.

    Attributes:
        symbol: 종목 코드 (Ticker, unique)
        name / name_cn: 영문/중문 이름 (English / Chinese name)
        market: 시장 (SH, SZ, HK, US, OTHER)
        price, change_amount, change_percent, high, low, open, prev_close: 시세 (Quote values)
        volume, market_cap, pe_ratio: 거래량/시가총액/PER
        is_hot, hot_rank: 인기 종목 여부와 순위 (Hot flag and rank, 1 = top)
        last_updated: 마지막 시세 갱신 (Last quote refresh)
    """

    __tablename__ = "stocks"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    symbol: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    name_cn: Mapped[str | None] = mapped_column(String(100), nullable=True)
    market: Mapped[str] = mapped_column(String(10), default="OTHER", nullable=False, index=True)
    price: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    change_amount: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    change_percent: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    high: Mapped[float | None] = mapped_column(Float, nullable=True)
    low: Mapped[float | None] = mapped_column(Float, nullable=True)
    open: Mapped[float | None] = mapped_column(Float, nullable=True)
    prev_close: Mapped[float | None] = mapped_column(Float, nullable=True)
    volume: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)
    market_cap: Mapped[float | None] = mapped_column(Float, nullable=True)
    pe_ratio: Mapped[float | None] = mapped_column(Float, nullable=True)
    is_hot: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    hot_rank: Mapped[int | None] = mapped_column(Integer, nullable=True)
    last_updated: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))
