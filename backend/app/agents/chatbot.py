"""
EDU chatbot — session memory, subject tracking and prompt assembly.

Flow per turn:  load/create session → detect subject → append user turn →
                system prompt (persona + name/subject context) + last N turns →
                AI gateway → append reply → persist
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from app.agents.context import detect_subject, extract_student_name
from app.agents.personas import WELCOME_MESSAGE, build_system_prompt
from app.config import Settings, settings as default_settings
from app.errors import NotFoundError, ValidationError
from app.models.chat_session import DEFAULT_SUBJECT, ChatSession
from app.services.ai_client import AIGateway
from app.services.stores import ChatSessionStore

logger = logging.getLogger(__name__)

CHAT_TEMPERATURE = 0.8
CHAT_MAX_TOKENS = 400


class ChatbotService:
    def __init__(
        self,
        store: ChatSessionStore,
        gateway: AIGateway,
        settings: Settings = default_settings,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.store = store
        self.gateway = gateway
        self.settings = settings
        self.clock = clock
        self.ttl = timedelta(hours=settings.CHAT_SESSION_TTL_HOURS)

    def _message(self, role: str, content: str) -> dict:
        return {"role": role, "content": content, "timestamp": self.clock().isoformat()}

    def _load(self, session_id: Optional[str]) -> Optional[ChatSession]:
        """Fetch a live session. Sessions idle past the TTL count as gone."""
        if not session_id:
            return None
        session = self.store.get(session_id)
        if session and self.clock() - session.last_activity_at > self.ttl:
            logger.info("Chat session %s expired, starting fresh", session_id)
            self.store.delete(session_id)
            return None
        return session

    def create_session(self, subject: Optional[str] = None) -> ChatSession:
        now = self.clock()
        session = ChatSession(
            id=str(uuid.uuid4()),
            subject=subject or DEFAULT_SUBJECT,
            active=True,
            started_at=now,
            last_activity_at=now,
        )
        session.messages = [self._message("assistant", WELCOME_MESSAGE)]
        return self.store.save(session)

    async def chat(
        self,
        session_id: Optional[str],
        message: str,
        subject_hint: Optional[str] = None,
    ) -> dict:
        text = (message or "").strip()
        if not text:
            raise ValidationError("El mensaje no puede estar vacío")
        text = text[: self.settings.CHAT_MAX_MESSAGE_LENGTH]

        detected = detect_subject(text)
        session = self._load(session_id)
        if session is None:
            now = self.clock()
            session = ChatSession(
                id=session_id or str(uuid.uuid4()),
                subject=detected or subject_hint or DEFAULT_SUBJECT,
                active=True,
                started_at=now,
                last_activity_at=now,
            )
            session.messages = []

        if detected and detected != DEFAULT_SUBJECT:
            session.subject = detected

        messages = session.messages
        messages.append(self._message("user", text))

        window = [
            {"role": m["role"], "content": m["content"]}
            for m in messages[-self.settings.CHAT_HISTORY_WINDOW:]
        ]
        system_prompt = build_system_prompt(extract_student_name(messages), session.subject)

        reply = await self.gateway.chat(
            [{"role": "system", "content": system_prompt}, *window],
            temperature=CHAT_TEMPERATURE,
            max_tokens=CHAT_MAX_TOKENS,
        )

        messages.append(self._message("assistant", reply))
        session.messages = messages
        session.last_activity_at = self.clock()
        session = self.store.save(session)

        return {
            "session_id": session.id,
            "response": reply,
            "message_count": len(messages),
            "subject": session.subject,
            "ai_provider": self.gateway.status()["active_provider"],
        }

    def get_history(self, session_id: str) -> ChatSession:
        session = self._load(session_id)
        if not session:
            raise NotFoundError("Sesión no encontrada")
        return session

    def clear_session(self, session_id: str) -> bool:
        return self.store.delete(session_id)

    def status(self) -> dict:
        return {
            **self.gateway.status(),
            "features": {
                "interaction_mode": "hybrid",
                "socratic_method": True,
                "agent_mode": True,
                "memory_enabled": True,
                "subject_detection": True,
                "max_history_messages": self.settings.CHAT_HISTORY_WINDOW,
            },
        }
