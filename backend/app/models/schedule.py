"""Schedule model — recurring rule that drives automatic task generation."""

import json
import uuid

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text

from app.database import Base, UTCDateTime, utcnow

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday")


class Schedule(Base):
    __tablename__ = "schedules"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    subject = Column(String(100), nullable=False)
    topic = Column(String(500), nullable=False)
    week_number = Column(Integer, nullable=False, index=True)
    year = Column(Integer, nullable=False)
    active_days_json = Column(Text, nullable=False, default=json.dumps(list(WEEKDAYS)))
    publish_time = Column(String(5), nullable=False, default="13:00")  # HH:MM local
    active = Column(Boolean, nullable=False, default=True, index=True)
    generated_count = Column(Integer, nullable=False, default=0)
    owner_id = Column(String(36), ForeignKey("users.id"), nullable=True)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)

    @property
    def active_days(self) -> list[str]:
        return json.loads(self.active_days_json or "[]")

    @active_days.setter
    def active_days(self, value: list[str]):
        self.active_days_json = json.dumps(list(value))
