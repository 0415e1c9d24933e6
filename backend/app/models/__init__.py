"""SQLAlchemy ORM models."""

from app.models.user import User
from app.models.content_item import ContentItem
from app.models.reading import Reading
from app.models.schedule import Schedule
from app.models.chat_session import ChatSession

__all__ = [
    "User",
    "ContentItem",
    "Reading",
    "Schedule",
    "ChatSession",
]
