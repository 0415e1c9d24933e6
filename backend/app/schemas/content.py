"""Task / notice request/response schemas."""

from typing import Literal, Optional
from pydantic import BaseModel, Field

from app.models.content_item import ContentItem


class InstructionStep(BaseModel):
    step: int
    text: str


class Attachment(BaseModel):
    kind: Literal["video", "image", "file"]
    url: str
    title: Optional[str] = None


class ContentCreate(BaseModel):
    kind: Literal["task", "notice"] = "task"
    title: str = Field(min_length=1)
    body: Optional[str] = None
    subject: Optional[str] = None
    learning_objective: Optional[str] = None
    instructions: list[InstructionStep] = []
    materials: list[str] = []
    attachments: list[Attachment] = []
    duration: Optional[int] = None
    collaborative: bool = False
    week_number: Optional[int] = None
    publish_at: Optional[str] = None  # ISO 8601; defaults to now
    state: Literal["draft", "scheduled", "published"] = "published"


class ContentUpdate(BaseModel):
    title: Optional[str] = None
    body: Optional[str] = None
    subject: Optional[str] = None
    learning_objective: Optional[str] = None
    instructions: Optional[list[InstructionStep]] = None
    materials: Optional[list[str]] = None
    attachments: Optional[list[Attachment]] = None
    duration: Optional[int] = None
    collaborative: Optional[bool] = None
    week_number: Optional[int] = None
    publish_at: Optional[str] = None
    state: Optional[Literal["draft", "scheduled", "published"]] = None


class TaskGenerateRequest(BaseModel):
    subject: str
    topic: str
    week_number: Optional[int] = None


class ContentResponse(BaseModel):
    id: str
    kind: str
    title: str
    body: Optional[str]
    subject: Optional[str]
    learning_objective: Optional[str]
    thematic_axis: Optional[str]
    instructions: list[InstructionStep]
    materials: list[str]
    attachments: list[Attachment]
    duration: Optional[int]
    collaborative: bool
    week_number: Optional[int]
    publish_at: str
    state: str
    is_published: bool
    created_by: Optional[str]
    created_at: str

    @classmethod
    def from_item(cls, item: ContentItem) -> "ContentResponse":
        return cls(
            id=item.id,
            kind=item.kind,
            title=item.title,
            body=item.body,
            subject=item.subject,
            learning_objective=item.learning_objective,
            thematic_axis=item.thematic_axis,
            instructions=item.instructions,
            materials=item.materials,
            attachments=item.attachments,
            duration=item.duration,
            collaborative=item.collaborative,
            week_number=item.week_number,
            publish_at=item.publish_at.isoformat(),
            state=item.state,
            is_published=item.is_published,
            created_by=item.created_by,
            created_at=item.created_at.isoformat(),
        )


class ContentListResponse(BaseModel):
    success: bool = True
    count: int
    tasks: list[ContentResponse]


class ContentPageResponse(BaseModel):
    success: bool = True
    items: list[ContentResponse]
    total: int
    page: int
    pages: int
