"""Tests for AI task and reading generation."""

import asyncio
import json
import random
import sys
import os
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from app.errors import GenerationParseError, NotFoundError, ValidationError
from app.models.content_item import ContentItem
from app.models.reading import Reading
from app.services.content_generator import (
    READING_MAX_TOKENS,
    READING_TEMPERATURE,
    TASK_MAX_TOKENS,
    TASK_TEMPERATURE,
    ContentGenerator,
    extract_json_object,
    parse_json_payload,
)
from fakes import StaticGateway

MX = ZoneInfo("America/Mexico_City")
FRIDAY_AFTERNOON = datetime(2024, 3, 15, 20, 0, tzinfo=timezone.utc)  # 14:00 local

TASK_JSON = {
    "title": "Detectives de Fracciones",
    "description": "Ayuda a Doña Lupita a repartir tortillas.",
    "learningObjective": "Comparar fracciones",
    "instructions": [
        {"step": 2, "text": "Reparte las tortillas"},
        {"step": 1, "text": "Dibuja el comal"},
    ],
    "materials": ["Hojas", "Colores"],
    "duration": "45 minutos",
    "isCollaborative": False,
    "ejeArticulador": "Pensamiento Crítico",
}


def generator(gateway, content_store=None, reading_store=None, now=FRIDAY_AFTERNOON):
    return ContentGenerator(
        gateway,
        content_store=content_store,
        reading_store=reading_store,
        clock=lambda: now,
        rng=random.Random(3),
    )


class TestJsonExtraction:
    def test_prose_around_object(self):
        assert extract_json_object('Claro, aquí está: {"a": 1} ¡Suerte!') == '{"a": 1}'

    def test_code_fence(self):
        text = '```json\n{"a": {"b": [1, 2]}}\n```'
        assert json.loads(extract_json_object(text)) == {"a": {"b": [1, 2]}}

    def test_braces_inside_strings(self):
        text = 'x {"t": "usa } y { sin miedo", "n": "\\"}"} y'
        assert json.loads(extract_json_object(text)) == {"t": "usa } y { sin miedo", "n": '"}'}

    def test_first_object_only(self):
        assert extract_json_object('{"a": 1} {"b": 2}') == '{"a": 1}'

    def test_no_object(self):
        assert extract_json_object("No puedo ayudarte con eso.") is None

    def test_unbalanced(self):
        assert extract_json_object('{"a": 1') is None

    def test_parse_error_keeps_raw_response(self):
        with pytest.raises(GenerationParseError) as exc:
            parse_json_payload("sin json")
        assert exc.value.raw_response == "sin json"


class TestGenerateTask:
    def test_task_is_scheduled_for_next_school_day(self, content_store):
        gateway = StaticGateway("Aquí tienes:\n```json\n" + json.dumps(TASK_JSON) + "\n```")
        item = asyncio.run(
            generator(gateway, content_store).generate_task("Saberes y Pensamiento Científico", "fracciones", 11, None)
        )
        assert item.state == "scheduled"
        assert item.is_published is False
        assert item.publish_at == datetime(2024, 3, 18, 13, 0, tzinfo=MX)
        assert item.title == "Detectives de Fracciones"
        assert item.body == TASK_JSON["description"]
        assert item.thematic_axis == "Pensamiento Crítico"
        assert item.instructions == [
            {"step": 1, "text": "Dibuja el comal"},
            {"step": 2, "text": "Reparte las tortillas"},
        ]
        assert item.materials == ["Hojas", "Colores"]
        assert item.duration == 45
        assert item.collaborative is False
        assert item.week_number == 11
        assert content_store.count("scheduled") == 1

        request = gateway.requests[0]
        assert request["temperature"] == TASK_TEMPERATURE
        assert request["max_tokens"] == TASK_MAX_TOKENS
        assert 'formativo "Saberes y Pensamiento Científico"' in request["messages"][1]["content"]

    def test_mock_generation_round_trip(self, content_store, mock_gateway):
        item = asyncio.run(generator(mock_gateway, content_store).generate_task("Lenguajes", "Los cuentos", 11))
        assert item.title == "Explorando Los cuentos"
        assert item.duration == 30
        assert len(item.instructions) == 3

    def test_unparseable_response_persists_nothing(self, db, content_store):
        gateway = StaticGateway("Lo siento, hoy no puedo generar actividades.")
        with pytest.raises(GenerationParseError):
            asyncio.run(generator(gateway, content_store).generate_task("Lenguajes", "cuentos", 11))
        assert db.query(ContentItem).count() == 0

    def test_unknown_subject(self, content_store):
        with pytest.raises(ValidationError):
            asyncio.run(generator(StaticGateway(), content_store).generate_task("Matemáticas", "x", 11))

    def test_blank_topic(self, content_store):
        with pytest.raises(ValidationError):
            asyncio.run(generator(StaticGateway(), content_store).generate_task("Lenguajes", "  ", 11))

    def test_publish_now(self, content_store):
        draft = content_store.create(ContentItem(kind="notice", title="Junta", state="draft"))
        item = generator(StaticGateway(), content_store).publish_now(draft.id)
        assert item.state == "published"
        assert item.publish_at == FRIDAY_AFTERNOON

    def test_publish_now_missing(self, content_store):
        with pytest.raises(NotFoundError):
            generator(StaticGateway(), content_store).publish_now("missing")


class TestDailyReading:
    def test_reading_generated_once_per_day(self, db, reading_store, mock_gateway):
        now = datetime(2024, 3, 13, 19, 0, tzinfo=timezone.utc)  # 13:00 local

        async def scenario():
            gen = generator(mock_gateway, reading_store=reading_store, now=now)
            return await gen.generate_daily_reading(), await gen.generate_daily_reading()

        first, second = asyncio.run(scenario())
        assert first.id == second.id
        assert db.query(Reading).count() == 1
        assert first.published is False
        assert first.estimated_minutes == 15
        assert first.publish_at == datetime(2024, 3, 13, 13, 30, tzinfo=MX)

    def test_reading_request_parameters(self, reading_store):
        payload = {"title": "La cadena de bondad", "content": "<p>Había una vez...</p>", "author": "Rosa Pérez"}
        gateway = StaticGateway(json.dumps(payload))
        reading = asyncio.run(generator(gateway, reading_store=reading_store).generate_daily_reading())
        assert reading.author == "Rosa Pérez"
        assert reading.topic == "Convivencia Escolar"
        assert gateway.requests[0]["temperature"] == READING_TEMPERATURE
        assert gateway.requests[0]["max_tokens"] == READING_MAX_TOKENS

    def test_reading_without_content_rejected(self, db, reading_store):
        gateway = StaticGateway(json.dumps({"title": "Sin cuerpo"}))
        with pytest.raises(GenerationParseError):
            asyncio.run(generator(gateway, reading_store=reading_store).generate_daily_reading())
        assert db.query(Reading).count() == 0
