"""Keyword-frequency language guess for the chat assistant.

Best effort only.  Each vocabulary entry counts once if it appears
anywhere in the lower-cased text (substring match, so "hi" also fires
inside "this").
"""

from typing import Dict, Tuple

SPANISH = "es"
ENGLISH = "en"
PORTUGUESE = "pt"

_VOCABULARY: Dict[str, Tuple[str, ...]] = {
    PORTUGUESE: (
        "olá", "oi", "obrigado", "obrigada", "sim", "não", "por favor",
        "muito", "tudo", "bem", "você", "está", "página", "preciso",
        "gostaria", "quero",
    ),
    SPANISH: (
        "hola", "gracias", "sí", "no", "por favor", "mucho", "necesito",
        "quiero", "página", "web", "letrero", "diseño",
    ),
    ENGLISH: (
        "hello", "hi", "thanks", "yes", "no", "please", "need", "want",
        "website", "sign", "logo", "design",
    ),
}


def keyword_counts(text: str) -> Dict[str, int]:
    lowered = (text or "").lower()
    return {
        language: sum(1 for word in words if word in lowered)
        for language, words in _VOCABULARY.items()
    }


def detect_language(text: str) -> str:
    """Return ``"es"``, ``"en"`` or ``"pt"``; ties and empty input give Spanish."""
    counts = keyword_counts(text)
    pt, es, en = counts[PORTUGUESE], counts[SPANISH], counts[ENGLISH]
    if pt > es and pt > en:
        return PORTUGUESE
    if en > es:
        return ENGLISH
    return SPANISH


def ui_language(language: str) -> str:
    """Language tag safe to persist or show: only Spanish and English exist."""
    return ENGLISH if language == ENGLISH else SPANISH
