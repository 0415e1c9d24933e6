"""
Publication scheduler — in-process asyncio timers in the school timezone.

Jobs:
  publish    every PUBLISH_INTERVAL_SECONDS   scheduled → published sweep
  generate   weekdays at SCHEDULE_GENERATION_HOUR   tasks from active schedules
  reading    weekdays at READING_GENERATION_HOUR    daily reading
  sessions   every SESSION_SWEEP_INTERVAL_SECONDS   drop idle chat sessions

Single-instance only: running several processes duplicates generation and
publication side effects.
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, Optional
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from app.config import Settings, settings as default_settings
from app.services.ai_client import AIGateway
from app.services.content_generator import ContentGenerator
from app.services.stores import (
    ChatSessionStore,
    ContentStore,
    ReadingStore,
    ScheduleStore,
    SqlChatSessionStore,
    SqlContentStore,
    SqlReadingStore,
    SqlScheduleStore,
)
from app.timeutils import iso_week_number, next_fire_time, seconds_until, to_local, weekday_name

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Jobs
# ─────────────────────────────────────────────────────────────────────────────

def process_scheduled_publications(
    content_store: ContentStore,
    reading_store: ReadingStore,
    now: datetime,
) -> int:
    """Publish every scheduled item and unpublished reading that is due.

    Idempotent: already published rows never match the queries, so
    overlapping or repeated calls only ever publish each row once.
    """
    published = 0

    items = content_store.find_due_scheduled(now)
    if items:
        logger.info("Publishing %d tasks/notices", len(items))
    for item in items:
        item.state = "published"
        content_store.save(item)
        logger.info("Published [%s]: %s", item.kind, item.title)
        published += 1

    readings = reading_store.find_due_unpublished(now)
    if readings:
        logger.info("Publishing %d readings", len(readings))
    for reading in readings:
        reading.published = True
        reading_store.save(reading)
        logger.info("Published [reading]: %s", reading.title)
        published += 1

    return published


async def generate_from_schedules(
    schedule_store: ScheduleStore,
    generator: ContentGenerator,
    now: datetime,
    tz: ZoneInfo,
    timeout: Optional[float] = None,
) -> int:
    """Run every active schedule matching today's weekday and ISO week.

    A failing schedule is logged and skipped; the others still run.
    Returns the number of tasks generated.
    """
    local = to_local(now, tz)
    day = weekday_name(local)
    week = iso_week_number(local)
    schedules = schedule_store.find_active(day, week)
    logger.info("Found %d active schedules for %s (week %d)", len(schedules), day, week)

    generated = 0
    for schedule in schedules:
        try:
            task = await asyncio.wait_for(
                generator.generate_task(schedule.subject, schedule.topic, week, schedule.owner_id),
                timeout=timeout,
            )
        except Exception:
            logger.exception("Failed to generate task for schedule %s", schedule.name)
            continue
        schedule.generated_count = (schedule.generated_count or 0) + 1
        schedule_store.save(schedule)
        generated += 1
        logger.info("Generated task from schedule %s: %s", schedule.name, task.title)
    return generated


def purge_expired_sessions(session_store: ChatSessionStore, now: datetime, ttl: timedelta) -> int:
    removed = session_store.delete_idle_since(now - ttl)
    if removed:
        logger.info("Removed %d idle chat sessions", removed)
    return removed


# ─────────────────────────────────────────────────────────────────────────────
# Timer-driven runner
# ─────────────────────────────────────────────────────────────────────────────

class PublicationScheduler:
    def __init__(
        self,
        session_factory: Callable[[], Session],
        gateway: AIGateway,
        settings: Settings = default_settings,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.session_factory = session_factory
        self.gateway = gateway
        self.settings = settings
        self.clock = clock
        self.tz = ZoneInfo(settings.TIMEZONE)
        self._tasks: dict[str, asyncio.Task] = {}

    @property
    def generation_timeout(self) -> float:
        """Upper bound for one generation call across all providers."""
        cfg = self.settings
        attempts = cfg.AI_MAX_ATTEMPTS
        backoff = cfg.AI_RETRY_DELAY_SECONDS * sum(range(1, attempts))
        providers = max(self.gateway.provider_count, 1)
        return (cfg.AI_TIMEOUT_SECONDS * attempts + backoff) * providers + 5.0

    def _generator(self, db: Session) -> ContentGenerator:
        return ContentGenerator(
            self.gateway,
            content_store=SqlContentStore(db),
            reading_store=SqlReadingStore(db),
            settings=self.settings,
            clock=self.clock,
        )

    # ── Single runs ───────────────────────────────────────────────────────────

    def run_publications_once(self) -> int:
        with self.session_factory() as db:
            return process_scheduled_publications(SqlContentStore(db), SqlReadingStore(db), self.clock())

    async def run_generation_once(self) -> int:
        logger.info("Running scheduled AI task generation")
        with self.session_factory() as db:
            return await generate_from_schedules(
                SqlScheduleStore(db),
                self._generator(db),
                self.clock(),
                self.tz,
                timeout=self.generation_timeout,
            )

    async def run_reading_once(self) -> None:
        logger.info("Generating daily reading")
        with self.session_factory() as db:
            reading = await asyncio.wait_for(
                self._generator(db).generate_daily_reading(),
                timeout=self.generation_timeout,
            )
            logger.info("Reading ready: %s", reading.title)

    def run_session_sweep_once(self) -> int:
        with self.session_factory() as db:
            return purge_expired_sessions(
                SqlChatSessionStore(db),
                self.clock(),
                timedelta(hours=self.settings.CHAT_SESSION_TTL_HOURS),
            )

    # ── Loops ─────────────────────────────────────────────────────────────────

    async def _every(self, name: str, interval: float, job: Callable[[], Awaitable[object]]) -> None:
        while True:
            try:
                await job()
            except Exception:
                logger.exception("Scheduler job %s failed", name)
            await asyncio.sleep(interval)

    def _next_daily_target(self, hour: int, after: Optional[datetime] = None) -> datetime:
        """Next weekday slot strictly after both the clock and the slot that last ran.

        asyncio.sleep can wake a little before the wall-clock target, so the
        clock alone could hand back the slot that just fired.
        """
        now = self.clock()
        if after is not None and now <= after:
            now = after
        return next_fire_time(now, self.tz, hour)

    async def _daily(self, name: str, hour: int, job: Callable[[], Awaitable[object]]) -> None:
        target: Optional[datetime] = None
        while True:
            target = self._next_daily_target(hour, after=target)
            await asyncio.sleep(seconds_until(self.clock(), target))
            try:
                await job()
            except Exception:
                logger.exception("Scheduler job %s failed", name)

    def start(self) -> None:
        if self._tasks:
            return
        cfg = self.settings

        async def publish():
            self.run_publications_once()

        async def sweep():
            self.run_session_sweep_once()

        self._tasks = {
            "publish": asyncio.create_task(self._every("publish", cfg.PUBLISH_INTERVAL_SECONDS, publish)),
            "generate": asyncio.create_task(
                self._daily("generate", cfg.SCHEDULE_GENERATION_HOUR, self.run_generation_once)
            ),
            "reading": asyncio.create_task(
                self._daily("reading", cfg.READING_GENERATION_HOUR, self.run_reading_once)
            ),
            "sessions": asyncio.create_task(
                self._every("sessions", cfg.SESSION_SWEEP_INTERVAL_SECONDS, sweep)
            ),
        }
        logger.info(
            "Scheduler started (%s): publish every %ss, generation %02d:00 Mon-Fri, reading %02d:00 Mon-Fri",
            cfg.TIMEZONE,
            cfg.PUBLISH_INTERVAL_SECONDS,
            cfg.SCHEDULE_GENERATION_HOUR,
            cfg.READING_GENERATION_HOUR,
        )

    async def stop(self) -> None:
        for name, task in self._tasks.items():
            task.cancel()
            logger.info("Stopped job: %s", name)
        await asyncio.gather(*self._tasks.values(), return_exceptions=True)
        self._tasks = {}
