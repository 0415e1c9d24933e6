"""Daily reading schemas."""

from pydantic import BaseModel

from app.models.reading import Reading


class ReadingResponse(BaseModel):
    id: str
    title: str
    body: str
    author: str
    estimated_minutes: int
    topic: str
    publish_at: str
    published: bool

    @classmethod
    def from_reading(cls, reading: Reading) -> "ReadingResponse":
        return cls(
            id=reading.id,
            title=reading.title,
            body=reading.body,
            author=reading.author,
            estimated_minutes=reading.estimated_minutes,
            topic=reading.topic,
            publish_at=reading.publish_at.isoformat(),
            published=reading.published,
        )


class ReadingEnvelope(BaseModel):
    success: bool = True
    reading: ReadingResponse
