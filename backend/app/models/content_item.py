"""Content item model — tasks and notices shown to students."""

import json
import uuid

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text

from app.database import Base, UTCDateTime, utcnow

# Campos formativos of the Nueva Escuela Mexicana curriculum.
SUBJECTS = (
    "Lenguajes",
    "Saberes y Pensamiento Científico",
    "Ética, Naturaleza y Sociedades",
    "De lo Humano y lo Comunitario",
)


class ContentItem(Base):
    __tablename__ = "content_items"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    kind = Column(String(20), nullable=False, default="task")  # task | notice
    title = Column(String(500), nullable=False)
    body = Column(Text, nullable=True)
    subject = Column(String(100), nullable=True)  # None for most notices
    learning_objective = Column(Text, nullable=True)
    thematic_axis = Column(String(255), nullable=True)
    instructions_json = Column(Text, nullable=False, default="[]")  # [{step, text}]
    materials_json = Column(Text, nullable=False, default="[]")
    attachments_json = Column(Text, nullable=False, default="[]")  # [{kind, url, title}]
    duration = Column(Integer, nullable=True)  # minutes
    collaborative = Column(Boolean, nullable=False, default=False)
    difficulty = Column(String(50), nullable=True)
    week_number = Column(Integer, nullable=True, index=True)
    publish_at = Column(UTCDateTime, nullable=False, default=utcnow, index=True)
    # draft | scheduled | published. The only publication flag; is_published derives from it.
    state = Column(String(20), nullable=False, default="draft", index=True)
    created_by = Column(String(36), ForeignKey("users.id"), nullable=True)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)

    @property
    def is_published(self) -> bool:
        return self.state == "published"

    @property
    def instructions(self) -> list[dict]:
        return json.loads(self.instructions_json or "[]")

    @instructions.setter
    def instructions(self, value: list[dict]):
        self.instructions_json = json.dumps(value, ensure_ascii=False)

    @property
    def materials(self) -> list[str]:
        return json.loads(self.materials_json or "[]")

    @materials.setter
    def materials(self, value: list[str]):
        self.materials_json = json.dumps(value, ensure_ascii=False)

    @property
    def attachments(self) -> list[dict]:
        return json.loads(self.attachments_json or "[]")

    @attachments.setter
    def attachments(self, value: list[dict]):
        self.attachments_json = json.dumps(value, ensure_ascii=False)
