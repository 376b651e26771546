"""핫 뉴스 페처 — HackerNews 인기 기사 수집.

Hot news fetcher — Pulls top stories from the HackerNews API and stores the
new ones. Any failure of the story list, or a run that yields nothing new,
falls back to a fixed set of sample items dated today.
"""

import logging
import random
from datetime import date, datetime, timezone
from typing import Any

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.widget import News
from app.repositories.widget_repository import news_repository

logger = logging.getLogger(__name__)

HACKER_NEWS_SOURCE: str = "Hacker News"

# 한 번의 실행에서 확인할 최대 기사 수 — Story ids inspected per run
MAX_SCANNED_STORIES: int = 100

SAMPLE_CONTENT: str = "Today's trending story. Open the full article for more details."

# 샘플 뉴스 — (title, summary, category, source)
SAMPLE_NEWS: list[tuple[str, str, str, str]] = [
    ("Tech giants unveil new AI products", "A breakthrough in artificial intelligence as major tech companies race to release new products", "technology", "Tech Daily"),
    ("Global markets swing as investors watch the Fed", "Market analysis: volatile trading today, caution advised", "finance", "Finance Watch"),
    ("EV sales hit a record high", "The new energy sector keeps growing as electric vehicle adoption climbs", "technology", "Auto Home"),
    ("Key consensus reached on international trade deal", "New progress in economic cooperation as several countries sign a trade framework", "world", "Xinhua"),
    ("A-share market review", "Today's moves in the Shanghai and Shenzhen indices and tomorrow's outlook", "finance", "Securities Times"),
    ("Latest from the semiconductor supply chain", "Domestic chip research reaches milestones as several projects enter mass production", "technology", "Tech News"),
    ("New housing policies announced", "Several cities lift purchase limits, bringing changes to the property market", "finance", "Economic Daily"),
    ("Sports highlights", "Recaps of major sporting events and previews of upcoming fixtures", "sports", "Sports Channel"),
]


def _story_values(item: dict[str, Any]) -> dict[str, Any]:
    """HackerNews 아이템 → News 컬럼 값 (Map an HN item to News columns)."""
    score: int = int(item.get("score") or 0)
    url: str | None = item.get("url")
    return {
        "title": item["title"],
        "summary": f"From Hacker News - Score: {score}",
        "content": f"Read full article at: {url or 'N/A'}",
        "source": HACKER_NEWS_SOURCE,
        "source_url": url,
        "category": "technology",
        "is_hot": score > 100,
        "hot_score": score,
        "published_at": datetime.now(timezone.utc),
    }


async def _fetch_story_ids(client: httpx.AsyncClient) -> list[int]:
    response: httpx.Response = await client.get(f"{settings.HACKER_NEWS_API_URL}/topstories.json")
    response.raise_for_status()
    story_ids: Any = response.json()
    if not isinstance(story_ids, list):
        raise ValueError("topstories.json did not return a list")
    return story_ids


async def _fetch_item(client: httpx.AsyncClient, story_id: int) -> dict[str, Any] | None:
    """단일 기사 조회 — 실패하면 None (A failing item is skipped)."""
    try:
        response: httpx.Response = await client.get(f"{settings.HACKER_NEWS_API_URL}/item/{story_id}.json")
        response.raise_for_status()
        item: Any = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("Skipping Hacker News item %s: %s", story_id, exc)
        return None
    return item if isinstance(item, dict) else None


async def load_sample_news(db: AsyncSession, today: date | None = None) -> list[News]:
    """오늘 날짜의 샘플 뉴스를 저장합니다 — 이미 있으면 시각/점수만 갱신.

    Store the sample items titled "<title> (YYYY-MM-DD)". Items already
    present for today only get `published_at` and `hot_score` refreshed.
    """
    day: str = (today or date.today()).isoformat()
    now: datetime = datetime.now(timezone.utc)
    items: list[News] = []

    for title, summary, category, source in SAMPLE_NEWS:
        dated_title: str = f"{title} ({day})"
        hot_score: int = random.randint(50, 149)
        existing: News | None = await news_repository.get_by_title_and_source(db, dated_title, source)
        if existing is not None:
            existing.published_at = now
            existing.hot_score = hot_score
            items.append(existing)
            continue
        items.append(
            await news_repository.create(
                db,
                {
                    "title": dated_title,
                    "summary": summary,
                    "content": SAMPLE_CONTENT,
                    "source": source,
                    "category": category,
                    "is_hot": True,
                    "hot_score": hot_score,
                    "published_at": now,
                },
            )
        )

    await db.flush()
    logger.info("Loaded %d sample news items for %s", len(items), day)
    return items


async def fetch_hot_news(
    db: AsyncSession,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[News]:
    """HackerNews 인기 기사를 수집합니다.

    Fetch top HackerNews stories and insert up to NEWS_FETCH_LIMIT new ones.

    Args:
        db: 비동기 DB 세션 (Async database session, caller commits)
        transport: httpx 전송 계층 — 테스트용 (Optional transport, used by tests)

    Returns:
        list[News]: 새로 저장된 기사 또는 샘플 뉴스 (New stories, or the sample items)
    """
    fetched: list[News] = []
    try:
        async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS, transport=transport) as client:
            story_ids: list[int] = await _fetch_story_ids(client)
            known_titles: set[str] = await news_repository.titles_for_source(db, HACKER_NEWS_SOURCE)

            for story_id in story_ids[:MAX_SCANNED_STORIES]:
                if len(fetched) >= settings.NEWS_FETCH_LIMIT:
                    break
                item: dict[str, Any] | None = await _fetch_item(client, story_id)
                if item is None:
                    continue
                title: str | None = item.get("title")
                if not title or title in known_titles:
                    continue
                fetched.append(await news_repository.create(db, _story_values(item)))
                known_titles.add(title)
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("Hacker News fetch failed, using sample news: %s", exc)
        return await load_sample_news(db)

    if not fetched:
        logger.info("No new Hacker News stories, using sample news")
        return await load_sample_news(db)

    logger.info("Fetched %d new Hacker News stories", len(fetched))
    return fetched
