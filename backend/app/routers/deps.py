"""Shared router dependencies wiring stores and services to a request's DB session."""

from fastapi import Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.services.ai_client import AIGateway, get_gateway
from app.services.content_generator import ContentGenerator
from app.services.stores import SqlContentStore, SqlReadingStore, SqlScheduleStore


def get_content_store(db: Session = Depends(get_db)) -> SqlContentStore:
    return SqlContentStore(db)


def get_reading_store(db: Session = Depends(get_db)) -> SqlReadingStore:
    return SqlReadingStore(db)


def get_schedule_store(db: Session = Depends(get_db)) -> SqlScheduleStore:
    return SqlScheduleStore(db)


def get_generator(
    db: Session = Depends(get_db),
    gateway: AIGateway = Depends(get_gateway),
) -> ContentGenerator:
    return ContentGenerator(
        gateway,
        content_store=SqlContentStore(db),
        reading_store=SqlReadingStore(db),
    )
