"""Tests for the publication sweep, schedule-driven generation and session purge."""

import asyncio
import sys
import os
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from app.config import Settings
from app.models.chat_session import ChatSession
from app.models.content_item import ContentItem
from app.models.reading import Reading
from app.models.schedule import Schedule
from app.services.ai_client import AIGateway
from app.services.content_generator import ContentGenerator
from app.services.scheduler import (
    PublicationScheduler,
    generate_from_schedules,
    process_scheduled_publications,
    purge_expired_sessions,
)
from app.services.stores import SqlContentStore

MX = ZoneInfo("America/Mexico_City")
NOW = datetime(2024, 3, 13, 18, 0, tzinfo=timezone.utc)  # Wednesday 12:00 local, ISO week 11


def task(title, state, publish_at, **kwargs):
    return ContentItem(kind="task", title=title, state=state, publish_at=publish_at, **kwargs)


class TestPublicationSweep:
    def test_publishes_only_due_scheduled_items(self, content_store, reading_store):
        due = content_store.create(task("Vencida", "scheduled", NOW - timedelta(minutes=5)))
        future = content_store.create(task("Futura", "scheduled", NOW + timedelta(hours=1)))
        draft = content_store.create(task("Borrador", "draft", NOW - timedelta(days=1)))
        reading = reading_store.create(
            Reading(title="Lectura", body="<p>...</p>", topic="Convivencia", publish_at=NOW - timedelta(minutes=1))
        )

        assert process_scheduled_publications(content_store, reading_store, NOW) == 2

        assert content_store.get(due.id).state == "published"
        assert content_store.get(due.id).is_published is True
        assert content_store.get(future.id).state == "scheduled"
        assert content_store.get(draft.id).state == "draft"
        assert reading_store.latest_published(NOW).id == reading.id

    def test_sweep_is_idempotent(self, content_store, reading_store):
        content_store.create(task("Vencida", "scheduled", NOW - timedelta(minutes=5)))
        assert process_scheduled_publications(content_store, reading_store, NOW) == 1
        assert process_scheduled_publications(content_store, reading_store, NOW) == 0
        assert content_store.count("published") == 1

    def test_published_listing_hides_future_items(self, content_store, reading_store):
        content_store.create(task("Futura", "scheduled", NOW + timedelta(hours=1), week_number=11))
        content_store.create(task("Vieja", "published", NOW - timedelta(days=2), week_number=11))
        content_store.create(task("Nueva", "published", NOW - timedelta(days=1), week_number=11))
        content_store.create(task("Otra semana", "published", NOW - timedelta(days=1), week_number=10))

        process_scheduled_publications(content_store, reading_store, NOW)
        titles = [i.title for i in content_store.find_published(NOW, week_number=11)]
        assert titles == ["Nueva", "Vieja"]


class TestScheduleGeneration:
    def _schedule(self, schedule_store, subject, **kwargs):
        fields = {"name": subject, "topic": "fracciones", "week_number": 11, "year": 2024}
        fields.update(kwargs)
        return schedule_store.create(Schedule(subject=subject, **fields))

    def test_failing_schedule_does_not_block_others(self, db, schedule_store, mock_gateway):
        broken = self._schedule(schedule_store, "Matemáticas")  # not a campo formativo
        good = self._schedule(schedule_store, "Saberes y Pensamiento Científico")
        self._schedule(schedule_store, "Lenguajes", active=False)
        self._schedule(schedule_store, "Lenguajes", week_number=12)
        self._schedule(schedule_store, "Lenguajes", active_days=["monday"])

        content_store = SqlContentStore(db)
        gen = ContentGenerator(mock_gateway, content_store=content_store, clock=lambda: NOW)
        generated = asyncio.run(generate_from_schedules(schedule_store, gen, NOW, MX))

        assert generated == 1
        assert schedule_store.get(good.id).generated_count == 1
        assert schedule_store.get(broken.id).generated_count == 0
        items = content_store.list_page(1, 10)[0]
        assert [i.subject for i in items] == ["Saberes y Pensamiento Científico"]
        assert items[0].state == "scheduled"
        assert items[0].week_number == 11

    def test_no_matching_schedules(self, db, schedule_store, mock_gateway):
        self._schedule(schedule_store, "Lenguajes", active_days=["friday"])
        gen = ContentGenerator(mock_gateway, content_store=SqlContentStore(db), clock=lambda: NOW)
        assert asyncio.run(generate_from_schedules(schedule_store, gen, NOW, MX)) == 0


class TestSessionPurge:
    def test_removes_only_idle_sessions(self, chat_store):
        chat_store.save(ChatSession(id="old", started_at=NOW, last_activity_at=NOW - timedelta(hours=30)))
        chat_store.save(ChatSession(id="fresh", started_at=NOW, last_activity_at=NOW - timedelta(hours=1)))

        assert purge_expired_sessions(chat_store, NOW, timedelta(hours=24)) == 1
        assert chat_store.get("old") is None
        assert chat_store.get("fresh") is not None


class TestPublicationScheduler:
    def test_generation_timeout_covers_retries(self):
        scheduler = PublicationScheduler(lambda: None, AIGateway([]), settings=Settings())
        # (30s x 3 attempts + 1s + 2s backoff) x 1 + 5s slack
        assert scheduler.generation_timeout == 98.0

    def test_run_publications_once_uses_own_session(self, session_factory):
        with session_factory() as db:
            SqlContentStore(db).create(task("Vencida", "scheduled", NOW - timedelta(minutes=1)))

        scheduler = PublicationScheduler(session_factory, AIGateway([]), clock=lambda: NOW)
        assert scheduler.run_publications_once() == 1
        assert scheduler.run_publications_once() == 0

    def test_start_and_stop(self, session_factory):
        scheduler = PublicationScheduler(session_factory, AIGateway([]), clock=lambda: NOW)

        async def scenario():
            scheduler.start()
            assert set(scheduler._tasks) == {"publish", "generate", "reading", "sessions"}
            await asyncio.sleep(0)
            await scheduler.stop()

        asyncio.run(scenario())
        assert scheduler._tasks == {}

    def test_daily_target_never_repeats_a_slot(self, session_factory):
        # Sleep woke half a second before the Wednesday 12:00 slot.
        early = datetime(2024, 3, 13, 17, 59, 59, 500000, tzinfo=timezone.utc)
        scheduler = PublicationScheduler(session_factory, AIGateway([]), clock=lambda: early)

        first = scheduler._next_daily_target(12)
        assert first == datetime(2024, 3, 13, 12, 0, tzinfo=MX)
        assert scheduler._next_daily_target(12, after=first) == datetime(2024, 3, 14, 12, 0, tzinfo=MX)

    def test_daily_target_friday_slot_rolls_to_monday(self, session_factory):
        just_after = datetime(2024, 3, 15, 18, 0, 1, tzinfo=timezone.utc)  # Friday 12:00:01 local
        scheduler = PublicationScheduler(session_factory, AIGateway([]), clock=lambda: just_after)
        friday = datetime(2024, 3, 15, 12, 0, tzinfo=MX)
        assert scheduler._next_daily_target(12, after=friday) == datetime(2024, 3, 18, 12, 0, tzinfo=MX)
