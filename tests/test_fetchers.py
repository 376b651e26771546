"""페처 테스트 — HackerNews 뉴스 수집과 주식 시세 갱신.

Fetcher tests — HackerNews collection and stock quote refresh, with the
network replaced by httpx.MockTransport.
"""

from datetime import date

import httpx
import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.fetchers.news_fetcher import HACKER_NEWS_SOURCE, SAMPLE_NEWS, fetch_hot_news, load_sample_news
from app.fetchers.stock_fetcher import (
    FALLBACK_STOCKS,
    fetch_stocks,
    infer_market,
    parse_quote,
    simulate_quote,
    stable_hash,
)
from app.models.widget import News, Stock


def hacker_news_transport(items: dict[int, dict | None], story_ids: list[int] | None = None) -> httpx.MockTransport:
    """topstories와 item 응답을 흉내내는 전송 계층 (None item → 500)."""
    ids = story_ids if story_ids is not None else list(items)

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path.endswith("/topstories.json"):
            return httpx.Response(200, json=ids)
        story_id = int(path.rsplit("/", 1)[-1].removesuffix(".json"))
        item = items.get(story_id)
        if item is None:
            return httpx.Response(500)
        return httpx.Response(200, json=item)

    return httpx.MockTransport(handler)


async def count(db: AsyncSession, model) -> int:
    return (await db.execute(select(func.count()).select_from(model))).scalar_one()


class TestNewsFetcher:
    """뉴스 페처 테스트."""

    async def test_stores_new_stories(self, db: AsyncSession):
        transport = hacker_news_transport({
            1: {"id": 1, "title": "Show HN: A tiny database", "score": 150, "url": "https://db.example"},
            2: None,
            3: {"id": 3, "score": 10},
            4: {"id": 4, "title": "Ask HN: Favorite books?", "score": 40},
        })

        stored = await fetch_hot_news(db, transport=transport)

        assert [n.title for n in stored] == ["Show HN: A tiny database", "Ask HN: Favorite books?"]
        first, second = stored
        assert first.source == HACKER_NEWS_SOURCE
        assert first.is_hot is True
        assert first.hot_score == 150
        assert first.summary == "From Hacker News - Score: 150"
        assert first.content == "Read full article at: https://db.example"
        assert second.is_hot is False
        assert second.content == "Read full article at: N/A"

    async def test_respects_fetch_limit(self, db: AsyncSession, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr(settings, "NEWS_FETCH_LIMIT", 3)
        transport = hacker_news_transport({i: {"id": i, "title": f"Story {i}", "score": i} for i in range(1, 11)})

        stored = await fetch_hot_news(db, transport=transport)
        assert len(stored) == 3
        assert await count(db, News) == 3

    async def test_known_titles_fall_back_to_samples(self, db: AsyncSession):
        items = {1: {"id": 1, "title": "Same story", "score": 5}}
        await fetch_hot_news(db, transport=hacker_news_transport(items))

        second = await fetch_hot_news(db, transport=hacker_news_transport(items))
        assert len(second) == len(SAMPLE_NEWS)
        assert all(n.is_hot for n in second)

    async def test_story_list_failure_uses_samples(self, db: AsyncSession):
        transport = httpx.MockTransport(lambda request: httpx.Response(503))

        stored = await fetch_hot_news(db, transport=transport)
        assert len(stored) == len(SAMPLE_NEWS)
        assert await count(db, News) == len(SAMPLE_NEWS)

    async def test_samples_are_dated_and_not_duplicated(self, db: AsyncSession):
        first = await load_sample_news(db, today=date(2024, 5, 1))
        second = await load_sample_news(db, today=date(2024, 5, 1))

        assert first[0].title.endswith("(2024-05-01)")
        assert [n.id for n in second] == [n.id for n in first]
        assert all(50 <= n.hot_score < 150 for n in second)
        assert await count(db, News) == len(SAMPLE_NEWS)


class TestStockParsing:
    """시세 파싱 테스트."""

    @pytest.mark.parametrize(
        ("symbol", "market"),
        [("00700", "HK"), ("600519", "SH"), ("000858", "SZ"), ("300750", "SZ"), ("AAPL", "US"), ("BRK.B", "OTHER")],
    )
    def test_infer_market(self, symbol: str, market: str):
        assert infer_market(symbol) == market

    def test_parse_quote_derives_change(self):
        values = parse_quote("600519", {"name": "Moutai", "now": "1648", "yestClose": 1600, "vol": "1200"})
        assert values["price"] == 1648.0
        assert values["prev_close"] == 1600.0
        assert values["change_amount"] == 48.0
        assert values["change_percent"] == 3.0
        assert values["volume"] == 1200
        assert values["market"] == "SH"
        assert values["name"] == "Moutai"

    def test_parse_quote_prefers_given_change(self):
        values = parse_quote("000001", {"price": 10, "preClose": 9, "change": 0.5, "pctChg": 5.55})
        assert values["change_amount"] == 0.5
        assert values["change_percent"] == 5.55
        assert values["name"] == "000001"

    def test_parse_quote_without_price(self):
        assert parse_quote("000001", {"name": "Ping An Bank"}) is None

    def test_simulated_base_is_stable(self):
        first = simulate_quote("600519", "贵州茅台", "Kweichow Moutai", "SH")
        second = simulate_quote("600519", "贵州茅台", "Kweichow Moutai", "SH")
        assert first["prev_close"] == second["prev_close"] == float(stable_hash("600519") % 1990 + 10)
        assert -5 <= first["change_percent"] <= 5

    def test_simulated_other_market_base(self):
        assert simulate_quote("X1", "X", "X", "OTHER")["prev_close"] == 100.0


class TestStockFetcher:
    """주식 페처 테스트."""

    async def test_without_token_uses_simulated_quotes(self, db: AsyncSession):
        stocks = await fetch_stocks(db)

        assert len(stocks) == len(FALLBACK_STOCKS)
        assert all(s.is_hot and 1 <= s.hot_rank <= 20 for s in stocks)
        assert {s.market for s in stocks} == {"SH", "SZ", "HK", "US"}

    async def test_simulated_refresh_updates_in_place(self, db: AsyncSession):
        first = await fetch_stocks(db)
        ranks = {s.symbol: s.hot_rank for s in first}

        second = await fetch_stocks(db)
        assert await count(db, Stock) == len(FALLBACK_STOCKS)
        assert {s.symbol: s.hot_rank for s in second} == ranks

    async def test_api_quotes_with_token(self, db: AsyncSession, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr(settings, "STOCK_API_TOKEN", "secret")
        seen_tokens: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen_tokens.append(request.url.params["token"])
            if request.url.path.endswith("/600519"):
                return httpx.Response(200, json=[{"name": "贵州茅台", "price": 1700, "preClose": 1690}])
            return httpx.Response(404)

        stocks = await fetch_stocks(db, transport=httpx.MockTransport(handler))

        assert [s.symbol for s in stocks] == ["600519"]
        assert stocks[0].price == 1700.0
        assert stocks[0].change_amount == 10.0
        assert set(seen_tokens) == {"secret"}

    async def test_api_failure_falls_back(self, db: AsyncSession, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr(settings, "STOCK_API_TOKEN", "secret")
        transport = httpx.MockTransport(lambda request: httpx.Response(502))

        stocks = await fetch_stocks(db, transport=transport)
        assert len(stocks) == len(FALLBACK_STOCKS)
