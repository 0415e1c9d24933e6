"""Readings router — the daily reflective reading."""

from fastapi import APIRouter, Depends, HTTPException

from app.database import utcnow
from app.middleware.auth import get_current_user
from app.models.user import User
from app.routers.deps import get_content_store, get_generator, get_reading_store
from app.schemas.reading import ReadingEnvelope, ReadingResponse
from app.services.content_generator import ContentGenerator
from app.services.scheduler import process_scheduled_publications
from app.services.stores import SqlContentStore, SqlReadingStore

router = APIRouter(prefix="/api/readings", tags=["readings"])


@router.get("/today", response_model=ReadingEnvelope)
def get_today(
    content_store: SqlContentStore = Depends(get_content_store),
    reading_store: SqlReadingStore = Depends(get_reading_store),
):
    """Most recent published reading; publishes anything already due first."""
    now = utcnow()
    process_scheduled_publications(content_store, reading_store, now)
    reading = reading_store.latest_published(now)
    if not reading:
        raise HTTPException(status_code=404, detail="No hay lectura disponible por el momento.")
    return ReadingEnvelope(reading=ReadingResponse.from_reading(reading))


@router.post("/generate-daily", response_model=ReadingEnvelope)
async def generate_daily(
    generator: ContentGenerator = Depends(get_generator),
    current_user: User = Depends(get_current_user),
):
    """Generate today's reading on demand. Returns the existing one if already generated."""
    reading = await generator.generate_daily_reading()
    return ReadingEnvelope(reading=ReadingResponse.from_reading(reading))
