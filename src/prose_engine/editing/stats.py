"""Word/character counts shown alongside the editor."""

from __future__ import annotations

import math
from dataclasses import dataclass

from prose_engine.runtime.config import DEFAULT_WORDS_PER_MINUTE


@dataclass(frozen=True, slots=True)
class DocumentStats:
    words: int
    characters: int
    reading_minutes: int


def compute_stats(text: str, *, words_per_minute: int = DEFAULT_WORDS_PER_MINUTE) -> DocumentStats:
    words = len(text.split())
    return DocumentStats(
        words=words,
        characters=len(text),
        reading_minutes=math.ceil(words / words_per_minute),
    )
