"""Tests for name and subject extraction over conversation text."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from app.agents.context import detect_subject, extract_student_name, find_name
from app.agents.personas import EDU_SYSTEM_PROMPT, build_system_prompt


class TestNameExtraction:
    def test_find_name_capitalises(self):
        assert find_name("hola, me llamo ANA") == "Ana"
        assert find_name("Mi nombre es luis") == "Luis"
        assert find_name("soy pedro") == "Pedro"

    def test_no_match(self):
        assert find_name("quiero aprender fracciones") is None
        assert find_name("") is None

    def test_last_introduction_wins(self):
        messages = [
            {"role": "user", "content": "me llamo Ana"},
            {"role": "assistant", "content": "¡Hola Ana! soy EDU"},
            {"role": "user", "content": "perdón, en realidad me llamo Sofía"},
        ]
        assert extract_student_name(messages) == "Sofía"

    def test_assistant_turns_ignored(self):
        messages = [
            {"role": "assistant", "content": "Soy EDU, tu compañero"},
            {"role": "user", "content": "¿qué es una fracción?"},
        ]
        assert extract_student_name(messages) is None


class TestSubjectDetection:
    def test_math_keywords(self):
        assert detect_subject("Ayúdame con esta SUMA") == "Saberes y Pensamiento Científico"

    def test_language_keywords(self):
        assert detect_subject("tengo que escribir un cuento") == "Lenguajes"

    def test_history_keywords(self):
        assert detect_subject("¿cuándo fue la independencia?") == "Ética, Naturaleza y Sociedades"

    def test_first_subject_in_table_wins(self):
        # "lectura" (Lenguajes) and "número" (Saberes) both match.
        assert detect_subject("una lectura sobre un número") == "Lenguajes"

    def test_no_match(self):
        assert detect_subject("hola") is None


class TestSystemPrompt:
    def test_plain_persona_without_context(self):
        assert build_system_prompt(None, "General") == EDU_SYSTEM_PROMPT

    def test_context_lines(self):
        prompt = build_system_prompt("Ana", "Lenguajes")
        assert "El estudiante se llama: Ana" in prompt
        assert "Tema actual: Lenguajes" in prompt
