"""Rule-based responder used when no AI provider is reachable.

Replies are canned Spanish messages picked by keyword rules over the latest
user turn. Structured-generation prompts get a valid JSON payload instead so
the generation pipeline keeps working offline.
"""

import json
import random
import re
from typing import Optional

from app.agents.context import extract_student_name, find_name

TASK_GENERATION_MARKERS = ("diseño curricular", "JSON")
READING_GENERATION_MARKER = "Lectura del Día"

_SUBJECT_RE = re.compile(r'formativo "([^"]+)"', re.IGNORECASE)
_TOPIC_RES = (
    re.compile(r'tema "([^"]+)"', re.IGNORECASE),
    re.compile(r'sobre "([^"]+)"', re.IGNORECASE),
)
_GREETING_RE = re.compile(r"^(hola|hi|hey|buenos días|buenas tardes|buenas noches)", re.IGNORECASE)
_NAME_RECALL_PHRASES = ("mi nombre", "como me llamo", "cómo me llamo", "sabes mi nombre")
_LOW_INFORMATION = ("nada", "no", "no sé", "no se", "ayuda")

GENERIC_PROMPTS = (
    "¡Interesante pregunta! 🌟 Para ayudarte mejor, cuéntame: ¿qué es lo que ya sabes sobre este tema?",
    "¡Vamos a explorarlo juntos! 🔍 ¿Puedes darme un ejemplo de lo que estás viendo en clase?",
    "¡Excelente curiosidad! 📚 ¿Qué es lo que más se te dificulta de este tema?",
    "Pensemos paso a paso. ✨ ¿Cuál crees que es el primer paso para resolver esto?",
)

# (keywords, reply) checked in order against the lowercased user turn.
KEYWORD_REPLIES = (
    (
        ("fraccion", "fracción", "quebrado"),
        "Las fracciones representan partes de un todo 🍕. ¿Qué operación necesitas hacer con ellas? "
        "¿Sumar, restar, o encontrar equivalencias? Cuéntame el problema y te haré preguntas para que "
        "tú mismo encuentres la solución.",
    ),
    (
        ("mcm", "mcd", "mínimo común", "máximo común"),
        "¡Buen tema! Para encontrar el MCM o MCD, primero necesitas descomponer los números. "
        "¿Con qué números estás trabajando? Te guiaré con preguntas para que descubras el procedimiento. 🔢",
    ),
    (
        ("matemát", "número", "suma", "resta", "multiplica", "divide"),
        "¡Las matemáticas son fascinantes! 🔢 Cuéntame más sobre el problema que estás resolviendo. "
        "¿Qué operación necesitas hacer? Te ayudaré a pensar paso a paso sin darte la respuesta directa.",
    ),
    (
        ("español", "lectura", "escrib", "gramática"),
        "¡El español es muy rico! 📚 ¿Estás trabajando con un texto, aprendiendo gramática o practicando "
        "escritura? Cuéntame más para guiarte con preguntas.",
    ),
    (
        ("ciencia", "natura", "experiment"),
        "¡Ser científico es emocionante! 🔬 ¿Qué fenómeno o tema estás explorando? Te ayudaré a formar "
        "hipótesis y pensar como investigador.",
    ),
    (
        ("historia", "independencia", "revolución"),
        "¡La historia nos enseña mucho! 📜 ¿Qué época o evento estás estudiando? Te haré preguntas para "
        "que conectes los hechos y entiendas el porqué de las cosas.",
    ),
)


def _latest_user_text(messages: list[dict]) -> str:
    for m in reversed(messages):
        if m.get("role") == "user":
            return (m.get("content") or "").strip().lower()
    return ""


def _system_text(messages: list[dict]) -> str:
    return "\n".join(m.get("content") or "" for m in messages if m.get("role") == "system")


def _first_user_text(messages: list[dict]) -> str:
    return next((m.get("content") or "" for m in messages if m.get("role") == "user"), "")


class MockResponder:
    """Deterministic stand-in for a chat-completion provider."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def respond(self, messages: list[dict]) -> str:
        system = _system_text(messages)
        if READING_GENERATION_MARKER in system:
            return self.reading_response(_first_user_text(messages))
        if any(marker in system for marker in TASK_GENERATION_MARKERS):
            prompt = _first_user_text(messages)
            subject_match = _SUBJECT_RE.search(prompt)
            topic_match = next((m for m in (r.search(prompt) for r in _TOPIC_RES) if m), None)
            return self.task_response(
                subject_match.group(1) if subject_match else "General",
                topic_match.group(1) if topic_match else "Aprendizaje",
            )
        return self.chat_response(messages)

    def chat_response(self, messages: list[dict]) -> str:
        text = _latest_user_text(messages)

        name = find_name(text)
        if name:
            return (
                f"¡Hola {name}! 👋 ¡Qué gusto conocerte! Soy EDU, tu compañero de aprendizaje. "
                "¿En qué tema te gustaría que trabajemos hoy? 📚"
            )

        if any(phrase in text for phrase in _NAME_RECALL_PHRASES):
            known = extract_student_name(messages)
            if known:
                return f"¡Claro que te recuerdo, {known}! 😊 ¿En qué puedo ayudarte?"
            return "Hmm, no recuerdo que me hayas dicho tu nombre todavía. 🤔 ¿Cómo te llamas?"

        if _GREETING_RE.match(text):
            return (
                "¡Hola! 👋 Soy EDU, tu compañero de aprendizaje. Estoy aquí para ayudarte a entender "
                "mejor tus tareas sin darte las respuestas directamente. ¿Qué tema te gustaría explorar? 📚"
            )

        if "gracias" in text:
            return "¡De nada! 😊 Me alegra poder ayudarte. ¿Hay algo más que quieras aprender?"

        for keywords, reply in KEYWORD_REPLIES:
            if any(k in text for k in keywords):
                return reply

        if text in _LOW_INFORMATION or len(text) < 5:
            return (
                "¡No te desanimes! 💪 A veces los temas nuevos toman tiempo. ¿Qué parte específica no "
                "entiendes? Podemos ir paso a paso juntos."
            )

        return self.rng.choice(GENERIC_PROMPTS)

    def task_response(self, subject: str, topic: str) -> str:
        return json.dumps({
            "title": f"Explorando {topic}",
            "description": (
                f"Una actividad práctica para descubrir conceptos sobre {topic} de manera divertida "
                f"y significativa en el campo de {subject}."
            ),
            "learningObjective": (
                f"Desarrollar comprensión y habilidades relacionadas con {topic} a través de la "
                "exploración y el descubrimiento."
            ),
            "instructions": [
                {"step": 1, "text": "Reúne los materiales necesarios en tu espacio de trabajo."},
                {"step": 2, "text": f"Investiga o recuerda lo que sabes sobre {topic}."},
                {"step": 3, "text": "Realiza un dibujo o esquema que represente tu aprendizaje."},
            ],
            "materials": ["Cuaderno", "Lápices de colores", "Materiales reciclados"],
            "duration": 30,
            "isCollaborative": True,
            "ejeArticulador": "Pensamiento Crítico",
        }, ensure_ascii=False)

    def reading_response(self, prompt: str) -> str:
        topic_match = next((m for m in (r.search(prompt) for r in _TOPIC_RES) if m), None)
        if topic_match is None:
            topic_match = re.search(r'"([^"]+)"', prompt)
        title = topic_match.group(1) if topic_match else "Juntos somos más fuertes"
        content = (
            f"<h3>{title}</h3>"
            "<p>Hoy no pudimos preparar la lectura completa, pero te invitamos a pensar en cómo "
            "tratamos a nuestros compañeros todos los días.</p>"
            "<h3>Para reflexionar</h3>"
            "<ul><li>¿Cómo te sentirías si alguien te dejara fuera del juego?</li>"
            "<li>¿Qué puedes hacer cuando ves que alguien está siendo molestado?</li>"
            "<li>¿A qué adulto de confianza podrías pedirle ayuda?</li></ul>"
        )
        return json.dumps({
            "title": title,
            "content": content,
            "author": "Equipo UNIVERSO EDU",
            "topic": "Convivencia Escolar",
        }, ensure_ascii=False)
