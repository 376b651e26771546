"""고정 주기 스케줄러 — asyncio 태스크 기반 주기 작업 실행.

Fixed-rate scheduler — Runs registered coroutine jobs on asyncio tasks.
The period is measured from the scheduled start of the previous run; a run
that overruns starts the next one immediately, and runs of one job never
overlap.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from app.config import settings
from app.database import async_session
from app.fetchers.news_fetcher import fetch_hot_news
from app.fetchers.stock_fetcher import fetch_stocks

logger = logging.getLogger(__name__)

JobFunc = Callable[[], Awaitable[object]]


@dataclass
class ScheduledJob:
    """등록된 주기 작업 (A registered periodic job)."""

    name: str
    func: JobFunc
    interval: float
    initial_delay: float = 0.0


class FixedRateScheduler:
    """asyncio 고정 주기 스케줄러 (Fixed-rate asyncio scheduler)."""

    def __init__(self) -> None:
        self._jobs: list[ScheduledJob] = []
        self._tasks: list[asyncio.Task] = []

    @property
    def jobs(self) -> list[ScheduledJob]:
        return list(self._jobs)

    @property
    def running(self) -> bool:
        return bool(self._tasks)

    def add_job(self, name: str, func: JobFunc, interval: float, initial_delay: float = 0.0) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._jobs.append(ScheduledJob(name, func, interval, initial_delay))

    async def _run(self, job: ScheduledJob) -> None:
        loop: asyncio.AbstractEventLoop = asyncio.get_running_loop()
        await asyncio.sleep(job.initial_delay)
        next_run: float = loop.time()

        while True:
            try:
                await job.func()
            except Exception:
                # 작업 실패는 기록만 하고 다음 주기 계속 — Keep the job alive
                logger.exception("Scheduled job %s failed", job.name)

            next_run += job.interval
            delay: float = next_run - loop.time()
            if delay > 0:
                await asyncio.sleep(delay)
            else:
                next_run = loop.time()

    def start(self) -> None:
        if self._tasks:
            return
        for job in self._jobs:
            self._tasks.append(asyncio.create_task(self._run(job), name=f"job:{job.name}"))
        logger.info("Scheduler started with %d jobs", len(self._jobs))

    async def stop(self) -> None:
        tasks: list[asyncio.Task] = self._tasks
        self._tasks = []
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        logger.info("Scheduler stopped")


async def run_news_fetch() -> None:
    """뉴스 수집 작업 — 자체 세션을 열고 커밋합니다."""
    async with async_session() as db:
        await fetch_hot_news(db)
        await db.commit()


async def run_stock_fetch() -> None:
    """주식 수집 작업 — 자체 세션을 열고 커밋합니다."""
    async with async_session() as db:
        await fetch_stocks(db)
        await db.commit()


def create_scheduler() -> FixedRateScheduler:
    """설정된 주기로 뉴스/주식 작업을 등록한 스케줄러 생성."""
    scheduler: FixedRateScheduler = FixedRateScheduler()
    scheduler.add_job(
        "news",
        run_news_fetch,
        settings.NEWS_FETCH_INTERVAL_SECONDS,
        settings.NEWS_FETCH_INITIAL_DELAY_SECONDS,
    )
    scheduler.add_job(
        "stocks",
        run_stock_fetch,
        settings.STOCK_FETCH_INTERVAL_SECONDS,
        settings.STOCK_FETCH_INITIAL_DELAY_SECONDS,
    )
    return scheduler
