"""Pattern-based context extraction over raw conversation text.

Best-effort keyword and regex matching only. Nothing here raises on
non-matching input; lookups simply return None.
"""

import re
from typing import Optional

# Spanish self-introductions: "me llamo Ana", "mi nombre es Ana", "soy Ana".
NAME_PATTERN = re.compile(r"(?:me llamo|mi nombre es|soy) (\w+)", re.IGNORECASE)

# Order matters: the first subject with a matching keyword wins.
SUBJECT_KEYWORDS: dict[str, tuple[str, ...]] = {
    "Lenguajes": (
        "español", "lectura", "escribir", "cuento", "poema", "gramática", "ortografía", "acento", "verbo",
    ),
    "Saberes y Pensamiento Científico": (
        "matemát", "número", "suma", "resta", "multiplica", "divide", "fracción", "mcm", "mcd",
        "ciencia", "experimento",
    ),
    "Ética, Naturaleza y Sociedades": (
        "historia", "geografía", "independencia", "revolución", "méxico", "estado", "país", "civismo",
    ),
    "De lo Humano y lo Comunitario": (
        "arte", "música", "dibujo", "deporte", "familia", "comunidad",
    ),
}


def find_name(text: str) -> Optional[str]:
    """Name introduced in a single message, capitalised."""
    match = NAME_PATTERN.search(text or "")
    if not match:
        return None
    name = match.group(1)
    return name[:1].upper() + name[1:].lower()


def extract_student_name(messages: list[dict]) -> Optional[str]:
    """Most recent self-introduction across every user turn in the history."""
    name = None
    for msg in messages:
        if msg.get("role") != "user":
            continue
        found = find_name(msg.get("content") or "")
        if found:
            name = found
    return name


def detect_subject(text: str) -> Optional[str]:
    lowered = (text or "").lower()
    for subject, keywords in SUBJECT_KEYWORDS.items():
        if any(keyword in lowered for keyword in keywords):
            return subject
    return None
