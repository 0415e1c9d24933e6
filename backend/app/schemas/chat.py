"""Chatbot request/response schemas."""

from typing import Optional
from pydantic import BaseModel


class ChatMessageRequest(BaseModel):
    message: str
    session_id: Optional[str] = None
    subject: Optional[str] = None


class ChatMessageResponse(BaseModel):
    success: bool = True
    session_id: str
    response: str
    message_count: int
    subject: str
    ai_provider: str


class ChatSessionCreate(BaseModel):
    subject: Optional[str] = None


class ChatMessage(BaseModel):
    role: str
    content: str
    timestamp: Optional[str] = None


class ChatSessionResponse(BaseModel):
    success: bool = True
    session_id: str
    subject: str
    messages: list[ChatMessage]
    started_at: str
    message_count: int
