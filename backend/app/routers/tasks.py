"""Tasks router — students read published tasks, teachers generate and publish them."""

from typing import Optional
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, HTTPException

from app.config import settings
from app.database import utcnow
from app.middleware.auth import get_current_user
from app.models.user import User
from app.routers.deps import get_content_store, get_generator, get_reading_store
from app.schemas.content import ContentListResponse, ContentResponse, TaskGenerateRequest
from app.services.content_generator import ContentGenerator
from app.services.scheduler import process_scheduled_publications
from app.services.stores import SqlContentStore, SqlReadingStore
from app.timeutils import iso_week_number, to_local

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


@router.get("", response_model=ContentListResponse)
def list_tasks(
    week: Optional[int] = None,
    content_store: SqlContentStore = Depends(get_content_store),
    reading_store: SqlReadingStore = Depends(get_reading_store),
):
    """Published tasks and notices, newest first.

    Due items are published first, so students never wait for the next
    scheduler tick to see content whose time has come.
    """
    now = utcnow()
    process_scheduled_publications(content_store, reading_store, now)
    items = content_store.find_published(now, week_number=week)
    return ContentListResponse(count=len(items), tasks=[ContentResponse.from_item(i) for i in items])


@router.get("/{item_id}", response_model=ContentResponse)
def get_task(item_id: str, content_store: SqlContentStore = Depends(get_content_store)):
    item = content_store.get(item_id)
    if not item or not item.is_published or item.publish_at > utcnow():
        raise HTTPException(status_code=404, detail="Tarea no disponible")
    return ContentResponse.from_item(item)


@router.post("/generate", response_model=ContentResponse, status_code=201)
async def generate_task(
    req: TaskGenerateRequest,
    generator: ContentGenerator = Depends(get_generator),
    current_user: User = Depends(get_current_user),
):
    """Generate a task with AI; it is scheduled for the next school day at 13:00."""
    week = req.week_number or iso_week_number(to_local(utcnow(), ZoneInfo(settings.TIMEZONE)))
    item = await generator.generate_task(req.subject, req.topic, week, current_user.id)
    return ContentResponse.from_item(item)


@router.put("/{item_id}/publish", response_model=ContentResponse)
def publish_task(
    item_id: str,
    generator: ContentGenerator = Depends(get_generator),
    current_user: User = Depends(get_current_user),
):
    return ContentResponse.from_item(generator.publish_now(item_id))


@router.delete("/{item_id}")
def delete_task(
    item_id: str,
    content_store: SqlContentStore = Depends(get_content_store),
    current_user: User = Depends(get_current_user),
):
    if not content_store.delete(item_id):
        raise HTTPException(status_code=404, detail="Tarea no encontrada")
    return {"success": True, "message": "Tarea eliminada"}
