"""위젯 API 테스트 — 외부 도구, 뉴스, 주식.

Widget API tests — External tools, hot news and stock quotes, through the
admin and public routers.
"""

from httpx import AsyncClient

from app.services.external_tool_service import DEFAULT_TOOLS
from app.services.stock_service import price_change
from tests.conftest import auth_header

ADMIN_TOOLS = "/api/v1/admin/external-tools/"
PUBLIC_TOOLS = "/api/v1/public/external-tools/"
ADMIN_NEWS = "/api/v1/admin/news/"
PUBLIC_NEWS = "/api/v1/public/news/"
ADMIN_STOCKS = "/api/v1/admin/stocks/"
PUBLIC_STOCKS = "/api/v1/public/stocks/"


async def create_stock(client: AsyncClient, token: str, **overrides) -> dict:
    payload = {"symbol": "AAPL", "name": "Apple Inc.", "market": "US", "price": 100.0}
    payload.update(overrides)
    res = await client.post(ADMIN_STOCKS, json=payload, headers=auth_header(token))
    assert res.status_code == 200, res.text
    return res.json()


class TestExternalTools:
    """외부 도구 테스트."""

    async def test_initialize_is_idempotent(self, client: AsyncClient, admin_token):
        first = await client.post(f"{ADMIN_TOOLS}initialize", headers=auth_header(admin_token))
        assert first.status_code == 200
        assert first.json()["message"] == f"Initialized {len(DEFAULT_TOOLS)} default tools"

        second = await client.post(f"{ADMIN_TOOLS}initialize", headers=auth_header(admin_token))
        assert second.json()["message"] == "Initialized 0 default tools"

        listed = await client.get(ADMIN_TOOLS, headers=auth_header(admin_token))
        assert listed.json()["total"] == len(DEFAULT_TOOLS)

    async def test_public_lists_active_by_display_order(self, client: AsyncClient, admin_token):
        await client.post(ADMIN_TOOLS, json={"name": "Second", "url": "https://b.example", "display_order": 2},
                          headers=auth_header(admin_token))
        await client.post(ADMIN_TOOLS, json={"name": "First", "url": "https://a.example", "display_order": 1},
                          headers=auth_header(admin_token))
        hidden = await client.post(ADMIN_TOOLS, json={"name": "Hidden", "url": "https://c.example"},
                                   headers=auth_header(admin_token))
        await client.put(f"{ADMIN_TOOLS}{hidden.json()['id']}", json={"is_active": False},
                         headers=auth_header(admin_token))

        res = await client.get(PUBLIC_TOOLS)
        assert res.status_code == 200
        assert [t["name"] for t in res.json()] == ["First", "Second"]

    async def test_search_and_category(self, client: AsyncClient, admin_token):
        await client.post(f"{ADMIN_TOOLS}initialize", headers=auth_header(admin_token))

        found = await client.get(f"{PUBLIC_TOOLS}search", params={"keyword": "git"})
        assert [t["name"] for t in found.json()] == ["GitHub"]

        search = await client.get(f"{PUBLIC_TOOLS}category/search")
        assert {t["name"] for t in search.json()} == {"Baidu", "Google"}

        invalid = await client.get(f"{PUBLIC_TOOLS}category/unknown")
        assert invalid.status_code == 422

    async def test_admin_required(self, client: AsyncClient, author_token):
        res = await client.post(f"{ADMIN_TOOLS}initialize", headers=auth_header(author_token))
        assert res.status_code == 403

    async def test_delete(self, client: AsyncClient, admin_token):
        created = await client.post(ADMIN_TOOLS, json={"name": "Temp", "url": "https://t.example"},
                                    headers=auth_header(admin_token))
        tool_id = created.json()["id"]

        res = await client.delete(f"{ADMIN_TOOLS}{tool_id}", headers=auth_header(admin_token))
        assert res.status_code == 200

        missing = await client.get(f"{ADMIN_TOOLS}{tool_id}", headers=auth_header(admin_token))
        assert missing.status_code == 404


class TestNews:
    """뉴스 테스트."""

    async def test_create_defaults_published_at(self, client: AsyncClient, admin_token):
        res = await client.post(ADMIN_NEWS, json={"title": "Launch", "category": "technology"},
                                headers=auth_header(admin_token))
        assert res.status_code == 201
        data = res.json()
        assert data["published_at"] is not None
        assert data["view_count"] == 0
        assert data["is_hot"] is False

    async def test_public_list_newest_first_with_category(self, client: AsyncClient, admin_token):
        await client.post(ADMIN_NEWS, json={"title": "Old", "category": "technology",
                                            "published_at": "2024-01-01T00:00:00Z"},
                          headers=auth_header(admin_token))
        await client.post(ADMIN_NEWS, json={"title": "New", "category": "technology",
                                            "published_at": "2024-06-01T00:00:00Z"},
                          headers=auth_header(admin_token))
        await client.post(ADMIN_NEWS, json={"title": "Match", "category": "sports",
                                            "published_at": "2024-03-01T00:00:00Z"},
                          headers=auth_header(admin_token))

        res = await client.get(PUBLIC_NEWS)
        assert [n["title"] for n in res.json()["items"]] == ["New", "Match", "Old"]

        tech = await client.get(PUBLIC_NEWS, params={"category": "technology"})
        assert tech.json()["total"] == 2

    async def test_hot_orders_by_score(self, client: AsyncClient, admin_token):
        low = await client.post(ADMIN_NEWS, json={"title": "Low"}, headers=auth_header(admin_token))
        await client.post(ADMIN_NEWS, json={"title": "High", "is_hot": True, "hot_score": 90},
                          headers=auth_header(admin_token))
        await client.post(ADMIN_NEWS, json={"title": "Cold"}, headers=auth_header(admin_token))
        res = await client.patch(f"{ADMIN_NEWS}{low.json()['id']}/hot", json={"is_hot": True, "hot_score": 10},
                                 headers=auth_header(admin_token))
        assert res.status_code == 200

        hot = await client.get(f"{PUBLIC_NEWS}hot")
        assert [n["title"] for n in hot.json()] == ["High", "Low"]

    async def test_search_title_or_summary(self, client: AsyncClient, admin_token):
        await client.post(ADMIN_NEWS, json={"title": "Python 3.13", "summary": "release"},
                          headers=auth_header(admin_token))
        await client.post(ADMIN_NEWS, json={"title": "Weather", "summary": "python spotted in park"},
                          headers=auth_header(admin_token))
        await client.post(ADMIN_NEWS, json={"title": "Other"}, headers=auth_header(admin_token))

        res = await client.get(f"{PUBLIC_NEWS}search", params={"keyword": "python"})
        assert res.json()["total"] == 2

    async def test_public_detail_counts_views(self, client: AsyncClient, admin_token):
        created = await client.post(ADMIN_NEWS, json={"title": "Read me"}, headers=auth_header(admin_token))
        news_id = created.json()["id"]

        await client.get(f"{PUBLIC_NEWS}{news_id}")
        res = await client.get(f"{PUBLIC_NEWS}{news_id}")
        assert res.json()["view_count"] == 2

        admin_view = await client.get(f"{ADMIN_NEWS}{news_id}", headers=auth_header(admin_token))
        assert admin_view.json()["view_count"] == 2

    async def test_delete(self, client: AsyncClient, admin_token):
        created = await client.post(ADMIN_NEWS, json={"title": "Temp"}, headers=auth_header(admin_token))
        res = await client.delete(f"{ADMIN_NEWS}{created.json()['id']}", headers=auth_header(admin_token))
        assert res.status_code == 200
        assert (await client.get(f"{PUBLIC_NEWS}{created.json()['id']}")).status_code == 404


class TestStocks:
    """주식 테스트."""

    def test_price_change(self):
        assert price_change(110.0, 100.0) == (10.0, 10.0)
        assert price_change(95.5, 100.0) == (-4.5, -4.5)
        assert price_change(10.0, None) is None
        assert price_change(10.0, 0.0) is None

    async def test_upsert_by_symbol(self, client: AsyncClient, admin_token):
        first = await create_stock(client, admin_token)
        second = await create_stock(client, admin_token, price=120.0, name_cn="苹果")
        assert second["id"] == first["id"]
        assert second["price"] == 120.0
        assert second["name_cn"] == "苹果"

        listed = await client.get(PUBLIC_STOCKS)
        assert listed.json()["total"] == 1

    async def test_update_price_recomputes_change(self, client: AsyncClient, admin_token):
        stock = await create_stock(client, admin_token, prev_close=100.0)
        res = await client.patch(f"{ADMIN_STOCKS}{stock['id']}/price", json={"price": 90.0},
                                 headers=auth_header(admin_token))
        assert res.status_code == 200
        data = res.json()
        assert data["change_amount"] == -10.0
        assert data["change_percent"] == -10.0

    async def test_gainers_and_losers(self, client: AsyncClient, admin_token):
        await create_stock(client, admin_token, symbol="UP1", change_percent=1.5)
        await create_stock(client, admin_token, symbol="UP2", change_percent=4.0)
        await create_stock(client, admin_token, symbol="DOWN", change_percent=-2.0)
        await create_stock(client, admin_token, symbol="FLAT", change_percent=0.0)

        gainers = await client.get(f"{PUBLIC_STOCKS}gainers")
        assert [s["symbol"] for s in gainers.json()] == ["UP2", "UP1"]

        losers = await client.get(f"{PUBLIC_STOCKS}losers")
        assert [s["symbol"] for s in losers.json()] == ["DOWN"]

    async def test_hot_by_rank(self, client: AsyncClient, admin_token):
        await create_stock(client, admin_token, symbol="B", is_hot=True, hot_rank=2)
        await create_stock(client, admin_token, symbol="A", is_hot=True, hot_rank=1)
        await create_stock(client, admin_token, symbol="C")

        res = await client.get(f"{PUBLIC_STOCKS}hot")
        assert [s["symbol"] for s in res.json()] == ["A", "B"]

    async def test_market_and_search(self, client: AsyncClient, admin_token):
        await create_stock(client, admin_token, symbol="600519", name="Kweichow Moutai", market="SH")
        await create_stock(client, admin_token, symbol="AAPL", name="Apple Inc.", market="US")

        sh = await client.get(f"{PUBLIC_STOCKS}market/SH")
        assert [s["symbol"] for s in sh.json()] == ["600519"]

        found = await client.get(f"{PUBLIC_STOCKS}search", params={"keyword": "apple"})
        assert [s["symbol"] for s in found.json()] == ["AAPL"]

        invalid = await client.get(f"{PUBLIC_STOCKS}market/XX")
        assert invalid.status_code == 422

    async def test_get_by_symbol(self, client: AsyncClient, admin_token):
        await create_stock(client, admin_token)
        res = await client.get(f"{PUBLIC_STOCKS}AAPL")
        assert res.status_code == 200
        assert res.json()["name"] == "Apple Inc."

        missing = await client.get(f"{PUBLIC_STOCKS}NOPE")
        assert missing.status_code == 404

    async def test_set_hot_and_delete(self, client: AsyncClient, admin_token):
        stock = await create_stock(client, admin_token)
        res = await client.patch(f"{ADMIN_STOCKS}{stock['id']}/hot", json={"is_hot": True, "hot_rank": 3},
                                 headers=auth_header(admin_token))
        assert res.json()["is_hot"] is True
        assert res.json()["hot_rank"] == 3

        deleted = await client.delete(f"{ADMIN_STOCKS}{stock['id']}", headers=auth_header(admin_token))
        assert deleted.status_code == 200
        assert (await client.get(f"{PUBLIC_STOCKS}AAPL")).status_code == 404
