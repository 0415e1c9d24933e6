"""Chat session model — anonymous conversational memory for the EDU chatbot."""

import json
import uuid

from sqlalchemy import Boolean, Column, String, Text

from app.database import Base, UTCDateTime, utcnow

DEFAULT_SUBJECT = "General"


class ChatSession(Base):
    __tablename__ = "chat_sessions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    messages_json = Column(Text, nullable=False, default="[]")  # [{role, content, timestamp}]
    subject = Column(String(100), nullable=False, default=DEFAULT_SUBJECT)
    active = Column(Boolean, nullable=False, default=True)
    started_at = Column(UTCDateTime, nullable=False, default=utcnow)
    last_activity_at = Column(UTCDateTime, nullable=False, default=utcnow, index=True)

    @property
    def messages(self) -> list[dict]:
        return json.loads(self.messages_json or "[]")

    @messages.setter
    def messages(self, value: list[dict]):
        self.messages_json = json.dumps(value, ensure_ascii=False)
