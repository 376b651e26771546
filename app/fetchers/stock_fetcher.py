"""주식 시세 페처 — 시세 API 조회 또는 시뮬레이션.

Stock quote fetcher — Reads real-time quotes for popular A-share symbols
when an API token is configured. Without a token, or when nothing could be
fetched, it upserts simulated quotes for a fixed list of popular stocks.
"""

import logging
import random
import re
import zlib
from typing import Any

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.widget import Stock
from app.repositories.widget_repository import stock_repository
from app.services.stock_service import price_change, stock_service

logger = logging.getLogger(__name__)

# 시세 API 조회 대상 A주 종목 — A-share symbols queried from the quote API
POPULAR_SYMBOLS: tuple[str, ...] = (
    "000001", "600519", "601318", "000858", "300750",
    "000333", "601012", "002594", "600036", "600000",
    "000002", "601166", "600276", "600030", "601398",
)

# 시뮬레이션 종목 — (symbol, name_cn, name, market)
FALLBACK_STOCKS: list[tuple[str, str, str, str]] = [
    ("600519", "贵州茅台", "Kweichow Moutai", "SH"),
    ("601318", "中国平安", "Ping An Insurance", "SH"),
    ("000858", "五粮液", "Wuliangye", "SZ"),
    ("300750", "宁德时代", "CATL", "SZ"),
    ("000333", "美的集团", "Midea Group", "SZ"),
    ("601012", "隆基绿能", "LONGi Green Energy", "SH"),
    ("002594", "比亚迪", "BYD", "SZ"),
    ("600036", "招商银行", "CMB", "SH"),
    ("00700", "腾讯控股", "Tencent", "HK"),
    ("09988", "阿里巴巴", "Alibaba", "HK"),
    ("03690", "美团", "Meituan", "HK"),
    ("09888", "百度集团", "Baidu", "HK"),
    ("AAPL", "苹果", "Apple Inc.", "US"),
    ("GOOGL", "谷歌", "Alphabet Inc.", "US"),
    ("MSFT", "微软", "Microsoft", "US"),
    ("TSLA", "特斯拉", "Tesla Inc.", "US"),
    ("NVDA", "英伟达", "NVIDIA", "US"),
    ("META", "Meta", "Meta Platforms", "US"),
]

# API 응답 필드 별칭 — 앞에 있는 키가 우선 (First present alias wins)
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "price": ("price", "now", "trade"),
    "high": ("high", "max"),
    "low": ("low", "min"),
    "open": ("open", "todayStart"),
    "prev_close": ("preClose", "yestClose", "prevClose"),
    "volume": ("volume", "vol", "tradedVol"),
    "change_amount": ("change", "updown"),
    "change_percent": ("pctChg", "percent", "updownPercent"),
}

_US_SYMBOL_RE: re.Pattern[str] = re.compile(r"^[A-Z]+$")


def infer_market(symbol: str) -> str:
    """종목 코드로 시장을 추정합니다.

    Example:
        >>> infer_market("00700"), infer_market("600519"), infer_market("AAPL")
        ('HK', 'SH', 'US')
    """
    if symbol.isdigit():
        if len(symbol) == 5 and symbol.startswith("0"):
            return "HK"
        if len(symbol) == 6 and symbol.startswith("6"):
            return "SH"
        if len(symbol) == 6 and symbol[0] in "03":
            return "SZ"
        return "OTHER"
    if _US_SYMBOL_RE.match(symbol):
        return "US"
    return "OTHER"


def stable_hash(symbol: str) -> int:
    """프로세스와 무관하게 같은 값을 내는 해시 (CRC32)."""
    return zlib.crc32(symbol.encode("utf-8"))


def _first(data: dict[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        value: Any = data.get(key)
        if value is not None and value != "":
            return value
    return None


def _decimal(value: Any) -> float | None:
    if value is None:
        return None
    try:
        return round(float(value), 2)
    except (TypeError, ValueError):
        return None


def parse_quote(symbol: str, data: dict[str, Any]) -> dict[str, Any] | None:
    """API 응답을 Stock 컬럼 값으로 변환 — 가격이 없으면 None.

    Map a quote payload to Stock columns. Change and percent are derived
    from the previous close when the payload omits them.
    """
    values: dict[str, Any] = {field: _decimal(_first(data, keys)) for field, keys in FIELD_ALIASES.items()}
    price: float | None = values["price"]
    if price is None:
        return None

    derived: tuple[float, float] | None = price_change(price, values["prev_close"])
    if derived is not None:
        if values["change_amount"] is None:
            values["change_amount"] = derived[0]
        if values["change_percent"] is None:
            values["change_percent"] = derived[1]

    code: str = str(data.get("code") or symbol)
    values.update(
        name=str(data.get("name") or symbol),
        market=infer_market(code if code.isdigit() else symbol),
        change_amount=values["change_amount"] or 0.0,
        change_percent=values["change_percent"] or 0.0,
        volume=int(values["volume"] or 0),
    )
    return values


def simulate_quote(symbol: str, name_cn: str, name: str, market: str) -> dict[str, Any]:
    """시뮬레이션 시세 — 기준가는 종목 코드 해시로 고정, 등락은 ±5% 난수.

    Simulated quote. The base price is stable per symbol; the change is
    uniform in (-5 %, 5 %).
    """
    digest: int = stable_hash(symbol)
    if market in ("SH", "SZ"):
        base: float = float(digest % 1990 + 10)
    elif market in ("HK", "US"):
        base = float(digest % 450 + 50)
    else:
        base = 100.0

    percent: float = round(random.uniform(-5, 5), 2)
    price: float = round(base + base * percent / 100, 2)
    return {
        "name": name,
        "name_cn": name_cn,
        "market": market,
        "price": price,
        "change_amount": round(price - base, 2),
        "change_percent": percent,
        "high": round(price * 1.02, 2),
        "low": round(price * 0.98, 2),
        "open": round(base * (1 + random.uniform(-0.01, 0.01)), 2),
        "prev_close": base,
        "volume": int(10_000_000 + random.random() * 100_000_000),
        "market_cap": round(price * (1_000_000_000 + random.random() * 10_000_000_000), 2),
        "pe_ratio": round(random.uniform(5, 55), 2),
    }


async def _save(db: AsyncSession, symbol: str, values: dict[str, Any]) -> Stock:
    """종목 upsert — 새 종목은 인기 종목(순위 1~20 난수)으로 등록."""
    if await stock_repository.get_by_symbol(db, symbol) is None:
        values = {**values, "is_hot": True, "hot_rank": random.randint(1, 20)}
    return await stock_service.upsert(db, symbol, values)


async def fetch_from_api(
    db: AsyncSession,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[Stock]:
    """시세 API에서 인기 A주 시세를 조회합니다 — 실패한 종목은 건너뜀."""
    stocks: list[Stock] = []
    async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS, transport=transport) as client:
        for symbol in POPULAR_SYMBOLS:
            try:
                response: httpx.Response = await client.get(
                    f"{settings.STOCK_API_URL}/{symbol}",
                    params={"token": settings.STOCK_API_TOKEN},
                )
                response.raise_for_status()
                data: Any = response.json()
            except (httpx.HTTPError, ValueError) as exc:
                logger.warning("Quote request for %s failed: %s", symbol, exc)
                continue

            if isinstance(data, list):
                data = data[0] if data else None
            if not isinstance(data, dict):
                logger.warning("Unexpected quote payload for %s", symbol)
                continue
            values: dict[str, Any] | None = parse_quote(symbol, data)
            if values is None:
                logger.warning("Quote for %s has no price", symbol)
                continue
            stocks.append(await _save(db, symbol, values))
    return stocks


async def load_simulated_stocks(db: AsyncSession) -> list[Stock]:
    stocks: list[Stock] = [
        await _save(db, symbol, simulate_quote(symbol, name_cn, name, market))
        for symbol, name_cn, name, market in FALLBACK_STOCKS
    ]
    logger.info("Updated %d simulated stock quotes", len(stocks))
    return stocks


async def fetch_stocks(
    db: AsyncSession,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[Stock]:
    """주식 시세를 갱신합니다.

    Refresh stock quotes from the API when STOCK_API_TOKEN is set, otherwise
    (or when the API yields nothing) from simulated prices.

    Args:
        db: 비동기 DB 세션 (Async database session, caller commits)
        transport: httpx 전송 계층 — 테스트용 (Optional transport, used by tests)
    """
    if settings.STOCK_API_TOKEN:
        stocks: list[Stock] = await fetch_from_api(db, transport)
        if stocks:
            logger.info("Fetched %d stock quotes from the API", len(stocks))
            return stocks
        logger.warning("Quote API returned nothing, using simulated prices")
    return await load_simulated_stocks(db)
