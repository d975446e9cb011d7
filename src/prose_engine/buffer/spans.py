"""Half-open character spans and their translation across edits.

Every component that moves offsets around (suggestion sets, the edit
reconciler, caret handling) goes through the primitives here:

``validate`` -- bounds check against a buffer length
``overlaps`` -- half-open interval intersection
``translate_after_replacement`` -- re-derive a span after an edit, or ``None``
``translate_caret`` -- re-derive a caret offset after an edit
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class Span:
    """``[start, end)`` over one buffer version."""

    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    def shifted(self, delta: int) -> "Span":
        return Span(self.start + delta, self.end + delta)

    def contains_offset(self, offset: int) -> bool:
        """True when ``offset`` lies strictly inside the span."""

        return self.start < offset < self.end

    def slice(self, text: str) -> str:
        return text[self.start : self.end]


def validate(span: Span, buffer_length: int) -> bool:
    return 0 <= span.start <= span.end <= buffer_length


def overlaps(a: Span, b: Span) -> bool:
    return a.start < b.end and b.start < a.end


def length_delta(edit: Span, replacement_length: int) -> int:
    return replacement_length - edit.length


def translate_after_replacement(
    span: Span, edit: Span, replacement_length: int
) -> Optional[Span]:
    """Return ``span`` as it reads after ``edit`` was replaced.

    Spans ending at or before the edit are untouched, spans starting at or
    after its end are shifted by the length delta, and anything touching the
    replaced region yields ``None``.
    """

    if span.end <= edit.start:
        return span
    if span.start >= edit.end:
        return span.shifted(length_delta(edit, replacement_length))
    return None


def translate_caret(offset: int, edit: Span, replacement_length: int) -> int:
    """Return the caret offset after ``edit`` was replaced.

    A caret strictly inside the replaced region lands at the end of the
    inserted text.
    """

    if offset <= edit.start:
        return offset
    if offset >= edit.end:
        return offset + length_delta(edit, replacement_length)
    return edit.start + replacement_length


def minimal_edit(before: str, after: str) -> tuple[Span, str]:
    """Smallest ``(span over before, inserted text)`` turning ``before`` into ``after``."""

    limit = min(len(before), len(after))
    prefix = 0
    while prefix < limit and before[prefix] == after[prefix]:
        prefix += 1

    suffix = 0
    while (
        suffix < limit - prefix
        and before[len(before) - 1 - suffix] == after[len(after) - 1 - suffix]
    ):
        suffix += 1

    span = Span(prefix, len(before) - suffix)
    return span, after[prefix : len(after) - suffix]


__all__ = [
    "Span",
    "validate",
    "overlaps",
    "length_delta",
    "translate_after_replacement",
    "translate_caret",
    "minimal_edit",
]
