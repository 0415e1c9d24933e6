"""Reading model — the daily reflective reading."""

import uuid

from sqlalchemy import Boolean, Column, Integer, String, Text

from app.database import Base, UTCDateTime, utcnow


class Reading(Base):
    __tablename__ = "readings"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(500), nullable=False)
    body = Column(Text, nullable=False)  # HTML subset: p, h3, b, i, ul, li
    author = Column(String(255), nullable=False, default="Equipo UNIVERSO EDU")
    estimated_minutes = Column(Integer, nullable=False, default=15)
    topic = Column(String(500), nullable=False)
    publish_at = Column(UTCDateTime, nullable=False, index=True)
    published = Column(Boolean, nullable=False, default=False)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)
