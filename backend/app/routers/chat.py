"""Chat router — public EDU chatbot endpoints for anonymous students."""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.agents.chatbot import ChatbotService
from app.agents.personas import ERROR_REPLY
from app.config import settings
from app.database import get_db
from app.errors import ValidationError
from app.middleware.rate_limit import limiter
from app.schemas.chat import (
    ChatMessage,
    ChatMessageRequest,
    ChatMessageResponse,
    ChatSessionCreate,
    ChatSessionResponse,
)
from app.services.ai_client import AIGateway, get_gateway
from app.services.stores import SqlChatSessionStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chat", tags=["chat"])


def get_chatbot(
    db: Session = Depends(get_db),
    gateway: AIGateway = Depends(get_gateway),
) -> ChatbotService:
    return ChatbotService(SqlChatSessionStore(db), gateway)


def _session_response(session) -> ChatSessionResponse:
    messages = session.messages
    return ChatSessionResponse(
        session_id=session.id,
        subject=session.subject,
        messages=[ChatMessage(**m) for m in messages],
        started_at=session.started_at.isoformat(),
        message_count=len(messages),
    )


@router.post("/message", response_model=ChatMessageResponse)
@limiter.limit(settings.CHAT_RATE_LIMIT)
async def send_message(
    request: Request,
    body: ChatMessageRequest,
    chatbot: ChatbotService = Depends(get_chatbot),
):
    """Send a message to the pedagogical chatbot."""
    if not body.message.strip():
        return JSONResponse(status_code=400, content={"success": False, "error": "El mensaje no puede estar vacío"})
    try:
        result = await chatbot.chat(body.session_id, body.message, body.subject)
    except ValidationError as e:
        return JSONResponse(status_code=400, content={"success": False, "error": str(e)})
    except Exception:
        logger.exception("Chat error")
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "Error al procesar tu mensaje. Por favor intenta de nuevo.",
                "response": ERROR_REPLY,
            },
        )
    return ChatMessageResponse(**result)


@router.post("/session", response_model=ChatSessionResponse, status_code=201)
def create_session(
    body: ChatSessionCreate,
    chatbot: ChatbotService = Depends(get_chatbot),
):
    """Start a new session seeded with the welcome message."""
    return _session_response(chatbot.create_session(body.subject))


@router.get("/history/{session_id}", response_model=ChatSessionResponse)
def get_history(session_id: str, chatbot: ChatbotService = Depends(get_chatbot)):
    """Get chat history for a session. NotFoundError maps to 404."""
    return _session_response(chatbot.get_history(session_id))


@router.delete("/session/{session_id}")
def clear_session(session_id: str, chatbot: ChatbotService = Depends(get_chatbot)):
    chatbot.clear_session(session_id)
    return {"success": True, "message": "Sesión eliminada"}


@router.get("/status")
def chat_status(chatbot: ChatbotService = Depends(get_chatbot)):
    return {"success": True, **chatbot.status()}
