"""Admin router — content and schedule management for teachers and admins."""

import math
from datetime import datetime, timezone
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.database import get_db, utcnow
from app.middleware.auth import get_current_user
from app.models.content_item import SUBJECTS, ContentItem
from app.models.schedule import Schedule
from app.models.user import User
from app.routers.deps import get_content_store, get_reading_store, get_schedule_store
from app.schemas.content import (
    ContentCreate,
    ContentPageResponse,
    ContentResponse,
    ContentUpdate,
)
from app.schemas.schedule import (
    ScheduleCreate,
    ScheduleResponse,
    ScheduleUpdate,
    StatsResponse,
)
from app.services.scheduler import process_scheduled_publications
from app.services.stores import SqlContentStore, SqlReadingStore, SqlScheduleStore

router = APIRouter(prefix="/api/admin", tags=["admin"])


def _parse_iso(value: str) -> datetime:
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Fecha inválida: {value}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _publication_state(state: str, publish_at: datetime) -> str:
    """Published content must already be due; future dates wait for the sweep."""
    if state == "published" and publish_at > utcnow():
        return "scheduled"
    return state


def _check_subject(subject: Optional[str]):
    if subject is not None and subject not in SUBJECTS:
        raise HTTPException(status_code=400, detail=f"Campo formativo desconocido: {subject}")


# ── Content ──────────────────────────────────────────────────────────────────

@router.get("/content", response_model=ContentPageResponse)
def list_content(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    kind: Optional[Literal["task", "notice"]] = None,
    content_store: SqlContentStore = Depends(get_content_store),
    current_user: User = Depends(get_current_user),
):
    """All content regardless of state, newest first."""
    items, total = content_store.list_page(page, limit, kind)
    return ContentPageResponse(
        items=[ContentResponse.from_item(i) for i in items],
        total=total,
        page=page,
        pages=math.ceil(total / limit) if total else 0,
    )


@router.post("/content", response_model=ContentResponse, status_code=201)
def create_content(
    req: ContentCreate,
    content_store: SqlContentStore = Depends(get_content_store),
    current_user: User = Depends(get_current_user),
):
    """Create a task or notice. `state` decides whether it shows up immediately."""
    _check_subject(req.subject)
    publish_at = _parse_iso(req.publish_at) if req.publish_at else utcnow()
    item = ContentItem(
        kind=req.kind,
        title=req.title,
        body=req.body,
        subject=req.subject,
        learning_objective=req.learning_objective,
        instructions=[s.model_dump() for s in req.instructions],
        materials=req.materials,
        attachments=[a.model_dump() for a in req.attachments],
        duration=req.duration,
        collaborative=req.collaborative,
        week_number=req.week_number,
        publish_at=publish_at,
        state=_publication_state(req.state, publish_at),
        created_by=current_user.id,
    )
    return ContentResponse.from_item(content_store.create(item))


@router.put("/content/{item_id}", response_model=ContentResponse)
def update_content(
    item_id: str,
    req: ContentUpdate,
    content_store: SqlContentStore = Depends(get_content_store),
    current_user: User = Depends(get_current_user),
):
    item = content_store.get(item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Contenido no encontrado")

    # Null means "leave unchanged"; every stored column keeps a value.
    updates = req.model_dump(exclude_unset=True, exclude_none=True)
    _check_subject(updates.get("subject"))
    if "publish_at" in updates:
        updates["publish_at"] = _parse_iso(updates["publish_at"])
    for field, value in updates.items():
        setattr(item, field, value)
    item.state = _publication_state(item.state, item.publish_at)
    return ContentResponse.from_item(content_store.save(item))


@router.delete("/content/{item_id}")
def delete_content(
    item_id: str,
    content_store: SqlContentStore = Depends(get_content_store),
    current_user: User = Depends(get_current_user),
):
    if not content_store.delete(item_id):
        raise HTTPException(status_code=404, detail="Contenido no encontrado")
    return {"success": True, "message": "Contenido eliminado"}


# ── Schedules ────────────────────────────────────────────────────────────────

@router.get("/schedules", response_model=list[ScheduleResponse])
def list_schedules(
    schedule_store: SqlScheduleStore = Depends(get_schedule_store),
    current_user: User = Depends(get_current_user),
):
    return [ScheduleResponse.from_schedule(s) for s in schedule_store.list_all()]


@router.post("/schedules", response_model=ScheduleResponse, status_code=201)
def create_schedule(
    req: ScheduleCreate,
    schedule_store: SqlScheduleStore = Depends(get_schedule_store),
    current_user: User = Depends(get_current_user),
):
    _check_subject(req.subject)
    schedule = Schedule(
        name=req.name or f"{req.subject} - Semana {req.week_number}",
        subject=req.subject,
        topic=req.topic.strip(),
        week_number=req.week_number,
        year=req.year or utcnow().year,
        active_days=req.active_days,
        publish_time=req.publish_time,
        active=True,
        owner_id=current_user.id,
    )
    return ScheduleResponse.from_schedule(schedule_store.create(schedule))


@router.put("/schedules/{schedule_id}", response_model=ScheduleResponse)
def update_schedule(
    schedule_id: str,
    req: ScheduleUpdate,
    schedule_store: SqlScheduleStore = Depends(get_schedule_store),
    current_user: User = Depends(get_current_user),
):
    schedule = schedule_store.get(schedule_id)
    if not schedule:
        raise HTTPException(status_code=404, detail="Programación no encontrada")

    updates = req.model_dump(exclude_unset=True)
    _check_subject(updates.get("subject"))
    for field, value in updates.items():
        if value is not None:
            setattr(schedule, field, value)
    return ScheduleResponse.from_schedule(schedule_store.save(schedule))


# ── Dashboard ────────────────────────────────────────────────────────────────

@router.get("/stats", response_model=StatsResponse)
def stats(
    db: Session = Depends(get_db),
    content_store: SqlContentStore = Depends(get_content_store),
    schedule_store: SqlScheduleStore = Depends(get_schedule_store),
    current_user: User = Depends(get_current_user),
):
    return StatsResponse(
        total_tasks=content_store.count(),
        published_tasks=content_store.count("published"),
        pending_tasks=content_store.count("scheduled"),
        active_schedules=schedule_store.count_active(),
        total_users=db.query(User).count(),
    )


@router.get("/trigger-scheduler")
def trigger_scheduler(
    content_store: SqlContentStore = Depends(get_content_store),
    reading_store: SqlReadingStore = Depends(get_reading_store),
    current_user: User = Depends(get_current_user),
):
    """Run the publication sweep now instead of waiting for the next tick."""
    published = process_scheduled_publications(content_store, reading_store, utcnow())
    return {"success": True, "published": published, "message": "Scheduler ejecutado"}
