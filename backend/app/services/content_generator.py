"""Content generation — AI-synthesised tasks and daily readings."""

import json
import logging
import random
import re
from datetime import datetime, timezone
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from app.agents.prompts import (
    READING_SYSTEM,
    READING_TOPICS,
    TASK_GENERATOR_SYSTEM,
    reading_user_prompt,
    task_user_prompt,
)
from app.config import Settings, settings as default_settings
from app.errors import GenerationParseError, NotFoundError, ValidationError
from app.models.content_item import SUBJECTS, ContentItem
from app.models.reading import Reading
from app.services.ai_client import AIGateway
from app.services.stores import ContentStore, ReadingStore
from app.timeutils import at_local_time, day_bounds, next_publish_date

logger = logging.getLogger(__name__)

TASK_TEMPERATURE = 0.7
TASK_MAX_TOKENS = 800
READING_TEMPERATURE = 0.85
READING_MAX_TOKENS = 4000


def extract_json_object(text: str) -> Optional[str]:
    """First balanced {...} substring of text, or None.

    Braces inside JSON string literals are ignored, so prose or code fences
    around the object do not matter.
    """
    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start:i + 1]
    return None


def parse_json_payload(raw: str) -> dict:
    candidate = extract_json_object(raw or "")
    if candidate is None:
        raise GenerationParseError("No JSON found in response", raw_response=raw)
    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise GenerationParseError(f"Invalid JSON in response: {e}", raw_response=raw) from e
    if not isinstance(data, dict):
        raise GenerationParseError("JSON payload is not an object", raw_response=raw)
    return data


def _parse_duration(value) -> Optional[int]:
    """Minutes from 45, "45" or "45 minutos"."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    match = re.search(r"\d+", str(value))
    return int(match.group()) if match else None


def _normalise_instructions(value) -> list[dict]:
    steps = []
    for i, entry in enumerate(value or [], start=1):
        if isinstance(entry, dict):
            text = str(entry.get("text", "")).strip()
            step = entry.get("step", i)
        else:
            text = str(entry).strip()
            step = i
        if text:
            steps.append({"step": int(step) if str(step).isdigit() else i, "text": text})
    return sorted(steps, key=lambda s: s["step"])


class ContentGenerator:
    def __init__(
        self,
        gateway: AIGateway,
        content_store: Optional[ContentStore] = None,
        reading_store: Optional[ReadingStore] = None,
        settings: Settings = default_settings,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
        rng: Optional[random.Random] = None,
    ):
        self.gateway = gateway
        self.content_store = content_store
        self.reading_store = reading_store
        self.settings = settings
        self.tz = ZoneInfo(settings.TIMEZONE)
        self.clock = clock
        self.rng = rng or random.Random()

    # ── Tasks ─────────────────────────────────────────────────────────────────

    def get_next_publish_date(self) -> datetime:
        return next_publish_date(self.clock(), self.tz, self.settings.TASK_PUBLISH_HOUR)

    async def generate_task(
        self,
        subject: str,
        topic: str,
        week_number: int,
        author_id: Optional[str] = None,
    ) -> ContentItem:
        """Generate a project task and persist it as scheduled for the next school day."""
        if subject not in SUBJECTS:
            raise ValidationError(f"Unknown subject: {subject!r}")
        if not topic or not topic.strip():
            raise ValidationError("Topic is required")

        raw = await self.gateway.chat(
            [
                {"role": "system", "content": TASK_GENERATOR_SYSTEM},
                {"role": "user", "content": task_user_prompt(subject, topic.strip())},
            ],
            temperature=TASK_TEMPERATURE,
            max_tokens=TASK_MAX_TOKENS,
        )

        try:
            data = parse_json_payload(raw)
        except GenerationParseError:
            logger.error("Failed to parse task JSON for %s / %s", subject, topic)
            raise

        title = str(data.get("title") or "").strip()
        if not title:
            raise GenerationParseError("Generated task has no title", raw_response=raw)

        item = ContentItem(
            kind="task",
            title=title,
            body=data.get("description"),
            subject=subject,
            learning_objective=data.get("learningObjective"),
            thematic_axis=data.get("ejeArticulador"),
            instructions=_normalise_instructions(data.get("instructions")),
            materials=[str(m) for m in data.get("materials") or []],
            duration=_parse_duration(data.get("duration")),
            collaborative=bool(data.get("isCollaborative", False)),
            difficulty="básico",
            week_number=week_number,
            publish_at=self.get_next_publish_date(),
            state="scheduled",
            created_by=author_id,
        )
        item = self.content_store.create(item)
        logger.info("Generated task %s: %s (publishes %s)", item.id, item.title, item.publish_at.isoformat())
        return item

    def publish_now(self, item_id: str) -> ContentItem:
        """Manual publish: any state goes straight to published."""
        item = self.content_store.get(item_id)
        if not item:
            raise NotFoundError("Content not found")
        item.state = "published"
        item.publish_at = self.clock()
        return self.content_store.save(item)

    # ── Readings ──────────────────────────────────────────────────────────────

    async def generate_daily_reading(self) -> Reading:
        """Return today's reading, generating it first if none exists yet."""
        now = self.clock()
        start, end = day_bounds(now, self.tz)
        existing = self.reading_store.find_first_between(start, end)
        if existing:
            logger.info("Reading for today already exists: %s", existing.title)
            return existing

        topic = self.rng.choice(READING_TOPICS)
        logger.info("Generating daily reading: %s", topic)
        raw = await self.gateway.chat(
            [
                {"role": "system", "content": READING_SYSTEM},
                {"role": "user", "content": reading_user_prompt(topic)},
            ],
            temperature=READING_TEMPERATURE,
            max_tokens=READING_MAX_TOKENS,
        )

        data = parse_json_payload(raw)
        title = str(data.get("title") or "").strip()
        body = str(data.get("content") or "").strip()
        if not title or not body:
            raise GenerationParseError("Generated reading is missing title or content", raw_response=raw)

        reading = Reading(
            title=title,
            body=body,
            author=data.get("author") or "Equipo UNIVERSO EDU",
            topic=data.get("topic") or "Convivencia Escolar",
            estimated_minutes=self.settings.READING_MINUTES,
            publish_at=at_local_time(
                now, self.tz, self.settings.READING_PUBLISH_HOUR, self.settings.READING_PUBLISH_MINUTE
            ),
            published=False,
        )
        reading = self.reading_store.create(reading)
        logger.info("Daily reading generated: %s", reading.title)
        return reading
