"""Dataclasses describing analyzer suggestions."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Optional

from prose_engine.buffer import Span

CONTEXT_RADIUS = 20


class SuggestionKind(str, Enum):
    GRAMMAR = "grammar"
    SPELLING = "spelling"
    STYLE = "style"
    TONE = "tone"
    OTHER = "other"

    @classmethod
    def parse(cls, value: object) -> "SuggestionKind":
        """Map an analyzer ``type`` onto a kind; unknown values become ``OTHER``."""

        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.OTHER


@dataclass(frozen=True, slots=True)
class RawSuggestion:
    """One analyzer entry after contract parsing, before offset validation."""

    kind: SuggestionKind
    message: str
    replacement: str
    # Offsets stay unchecked here; SuggestionSet.replace_all validates them.
    start: Any
    end: Any


@dataclass(frozen=True, slots=True)
class Suggestion:
    """A validated suggestion bound to the buffer version of its set."""

    id: str
    kind: SuggestionKind
    message: str
    replacement: str
    span: Span
    original: str = ""
    context: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Suggestion id cannot be empty")

    @classmethod
    def from_raw(
        cls, raw: RawSuggestion, span: Span, text: str, *, id: Optional[str] = None
    ) -> "Suggestion":
        window = Span(
            max(0, span.start - CONTEXT_RADIUS),
            min(len(text), span.end + CONTEXT_RADIUS),
        )
        return cls(
            id=id or str(uuid.uuid4()),
            kind=raw.kind,
            message=raw.message,
            replacement=raw.replacement,
            span=span,
            original=span.slice(text),
            context=window.slice(text),
        )

    @property
    def start(self) -> int:
        return self.span.start

    @property
    def end(self) -> int:
        return self.span.end

    def moved(self, span: Span) -> "Suggestion":
        return replace(self, span=span)

    @property
    def sort_key(self) -> tuple[int, int]:
        # Outer spans first when two share a start offset.
        return (self.span.start, -self.span.end)


__all__ = ["SuggestionKind", "RawSuggestion", "Suggestion", "CONTEXT_RADIUS"]
