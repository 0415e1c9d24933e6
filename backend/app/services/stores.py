"""Store interfaces and their SQLAlchemy implementations.

Services depend on the Protocols; each Sql* class wraps one ORM Session and
is the only place that knows about column names and query shapes.
"""

from datetime import datetime
from typing import Optional, Protocol

from sqlalchemy.orm import Session

from app.models.chat_session import ChatSession
from app.models.content_item import ContentItem
from app.models.reading import Reading
from app.models.schedule import Schedule


# ─────────────────────────────────────────────────────────────────────────────
# Interfaces
# ─────────────────────────────────────────────────────────────────────────────

class ContentStore(Protocol):
    def create(self, item: ContentItem) -> ContentItem: ...
    def get(self, item_id: str) -> Optional[ContentItem]: ...
    def save(self, item: ContentItem) -> ContentItem: ...
    def delete(self, item_id: str) -> bool: ...
    def find_due_scheduled(self, now: datetime) -> list[ContentItem]: ...
    def find_published(self, now: datetime, week_number: Optional[int] = None, limit: int = 50) -> list[ContentItem]: ...
    def list_page(self, page: int, limit: int, kind: Optional[str] = None) -> tuple[list[ContentItem], int]: ...
    def count(self, state: Optional[str] = None) -> int: ...


class ReadingStore(Protocol):
    def create(self, reading: Reading) -> Reading: ...
    def save(self, reading: Reading) -> Reading: ...
    def find_due_unpublished(self, now: datetime) -> list[Reading]: ...
    def find_first_between(self, start: datetime, end: datetime) -> Optional[Reading]: ...
    def latest_published(self, now: datetime) -> Optional[Reading]: ...


class ScheduleStore(Protocol):
    def create(self, schedule: Schedule) -> Schedule: ...
    def get(self, schedule_id: str) -> Optional[Schedule]: ...
    def save(self, schedule: Schedule) -> Schedule: ...
    def list_all(self) -> list[Schedule]: ...
    def find_active(self, day_name: str, week_number: int) -> list[Schedule]: ...
    def count_active(self) -> int: ...


class ChatSessionStore(Protocol):
    def get(self, session_id: str) -> Optional[ChatSession]: ...
    def save(self, session: ChatSession) -> ChatSession: ...
    def delete(self, session_id: str) -> bool: ...
    def delete_idle_since(self, cutoff: datetime) -> int: ...


# ─────────────────────────────────────────────────────────────────────────────
# SQLAlchemy implementations
# ─────────────────────────────────────────────────────────────────────────────

class _SqlStore:
    def __init__(self, db: Session):
        self.db = db

    def _commit(self, obj):
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def _delete(self, obj) -> bool:
        if obj is None:
            return False
        self.db.delete(obj)
        self.db.commit()
        return True


class SqlContentStore(_SqlStore):
    def create(self, item: ContentItem) -> ContentItem:
        return self._commit(item)

    def get(self, item_id: str) -> Optional[ContentItem]:
        return self.db.query(ContentItem).filter(ContentItem.id == item_id).first()

    def save(self, item: ContentItem) -> ContentItem:
        return self._commit(item)

    def delete(self, item_id: str) -> bool:
        return self._delete(self.get(item_id))

    def find_due_scheduled(self, now: datetime) -> list[ContentItem]:
        return (
            self.db.query(ContentItem)
            .filter(ContentItem.state == "scheduled", ContentItem.publish_at <= now)
            .order_by(ContentItem.publish_at.asc())
            .all()
        )

    def find_published(
        self,
        now: datetime,
        week_number: Optional[int] = None,
        limit: int = 50,
    ) -> list[ContentItem]:
        query = self.db.query(ContentItem).filter(
            ContentItem.state == "published",
            ContentItem.publish_at <= now,
        )
        if week_number is not None:
            query = query.filter(ContentItem.week_number == week_number)
        return query.order_by(ContentItem.publish_at.desc()).limit(limit).all()

    def list_page(self, page: int, limit: int, kind: Optional[str] = None) -> tuple[list[ContentItem], int]:
        query = self.db.query(ContentItem)
        if kind:
            query = query.filter(ContentItem.kind == kind)
        total = query.count()
        items = (
            query.order_by(ContentItem.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return items, total

    def count(self, state: Optional[str] = None) -> int:
        query = self.db.query(ContentItem)
        if state:
            query = query.filter(ContentItem.state == state)
        return query.count()


class SqlReadingStore(_SqlStore):
    def create(self, reading: Reading) -> Reading:
        return self._commit(reading)

    def save(self, reading: Reading) -> Reading:
        return self._commit(reading)

    def find_due_unpublished(self, now: datetime) -> list[Reading]:
        return (
            self.db.query(Reading)
            .filter(Reading.published.is_(False), Reading.publish_at <= now)
            .order_by(Reading.publish_at.asc())
            .all()
        )

    def find_first_between(self, start: datetime, end: datetime) -> Optional[Reading]:
        return (
            self.db.query(Reading)
            .filter(Reading.publish_at >= start, Reading.publish_at < end)
            .order_by(Reading.created_at.asc())
            .first()
        )

    def latest_published(self, now: datetime) -> Optional[Reading]:
        return (
            self.db.query(Reading)
            .filter(Reading.published.is_(True), Reading.publish_at <= now)
            .order_by(Reading.publish_at.desc())
            .first()
        )


class SqlScheduleStore(_SqlStore):
    def create(self, schedule: Schedule) -> Schedule:
        return self._commit(schedule)

    def get(self, schedule_id: str) -> Optional[Schedule]:
        return self.db.query(Schedule).filter(Schedule.id == schedule_id).first()

    def save(self, schedule: Schedule) -> Schedule:
        return self._commit(schedule)

    def list_all(self) -> list[Schedule]:
        return self.db.query(Schedule).order_by(Schedule.created_at.desc()).all()

    def find_active(self, day_name: str, week_number: int) -> list[Schedule]:
        # Active days live in a JSON column, so the day filter runs in Python.
        candidates = (
            self.db.query(Schedule)
            .filter(Schedule.active.is_(True), Schedule.week_number == week_number)
            .order_by(Schedule.created_at.asc())
            .all()
        )
        return [s for s in candidates if day_name in s.active_days]

    def count_active(self) -> int:
        return self.db.query(Schedule).filter(Schedule.active.is_(True)).count()


class SqlChatSessionStore(_SqlStore):
    def get(self, session_id: str) -> Optional[ChatSession]:
        return self.db.query(ChatSession).filter(ChatSession.id == session_id).first()

    def save(self, session: ChatSession) -> ChatSession:
        return self._commit(session)

    def delete(self, session_id: str) -> bool:
        return self._delete(self.get(session_id))

    def delete_idle_since(self, cutoff: datetime) -> int:
        stale = self.db.query(ChatSession).filter(ChatSession.last_activity_at < cutoff).all()
        for session in stale:
            self.db.delete(session)
        self.db.commit()
        return len(stale)
