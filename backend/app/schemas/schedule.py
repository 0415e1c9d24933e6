"""Schedule request/response schemas."""

from typing import Literal, Optional
from pydantic import BaseModel, Field

from app.models.schedule import Schedule

Weekday = Literal["monday", "tuesday", "wednesday", "thursday", "friday"]


class ScheduleCreate(BaseModel):
    subject: str
    topic: str = Field(min_length=1)
    week_number: int = Field(ge=1, le=53)
    name: Optional[str] = None
    year: Optional[int] = None
    active_days: list[Weekday] = ["monday", "tuesday", "wednesday", "thursday", "friday"]
    publish_time: str = Field(default="13:00", pattern=r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$")


class ScheduleUpdate(BaseModel):
    name: Optional[str] = None
    subject: Optional[str] = None
    topic: Optional[str] = None
    week_number: Optional[int] = Field(default=None, ge=1, le=53)
    year: Optional[int] = None
    active_days: Optional[list[Weekday]] = None
    publish_time: Optional[str] = Field(default=None, pattern=r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$")
    active: Optional[bool] = None


class ScheduleResponse(BaseModel):
    id: str
    name: str
    subject: str
    topic: str
    week_number: int
    year: int
    active_days: list[str]
    publish_time: str
    active: bool
    generated_count: int
    owner_id: Optional[str]
    created_at: str

    @classmethod
    def from_schedule(cls, schedule: Schedule) -> "ScheduleResponse":
        return cls(
            id=schedule.id,
            name=schedule.name,
            subject=schedule.subject,
            topic=schedule.topic,
            week_number=schedule.week_number,
            year=schedule.year,
            active_days=schedule.active_days,
            publish_time=schedule.publish_time,
            active=schedule.active,
            generated_count=schedule.generated_count,
            owner_id=schedule.owner_id,
            created_at=schedule.created_at.isoformat(),
        )


class StatsResponse(BaseModel):
    success: bool = True
    total_tasks: int
    published_tasks: int
    pending_tasks: int
    active_schedules: int
    total_users: int
