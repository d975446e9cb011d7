"""Project a buffer and its suggestions into non-overlapping highlight segments.

Decorations are presentation only: segment boundaries are absolute buffer
offsets, so a caret offset means the same character before and after any
re-projection.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from prose_engine.buffer import TextBuffer, overlaps
from prose_engine.runtime import telemetry
from prose_engine.suggestions import Suggestion, SuggestionKind, SuggestionSet


@dataclass(frozen=True, slots=True)
class Segment:
    start: int
    end: int
    text: str
    suggestion: Optional[Suggestion] = None

    @property
    def decoration(self) -> Optional[SuggestionKind]:
        return self.suggestion.kind if self.suggestion else None


class Projection:
    """Restartable view over the segments covering ``[0, len(buffer))``.

    Every iteration re-walks the accepted spans and yields fresh segments.
    Suppressed suggestions stay in the set; they just do not render this pass.
    """

    def __init__(self, buffer: TextBuffer, suggestions: SuggestionSet) -> None:
        self.buffer = buffer
        if suggestions.version != buffer.version:
            telemetry.record_event(
                "render.version_mismatch",
                level="warning",
                data={"set_version": suggestions.version, "version": buffer.version},
            )
            candidates: List[Suggestion] = []
        else:
            candidates = suggestions.ordered()

        accepted: List[Suggestion] = []
        suppressed: List[Suggestion] = []
        for item in candidates:
            if item.span.is_empty or any(overlaps(item.span, kept.span) for kept in accepted):
                suppressed.append(item)
            else:
                accepted.append(item)
        self.accepted: Tuple[Suggestion, ...] = tuple(accepted)
        self.suppressed: Tuple[Suggestion, ...] = tuple(suppressed)

    def __iter__(self) -> Iterator[Segment]:
        text = self.buffer.text
        cursor = 0
        for item in self.accepted:
            if item.span.start > cursor:
                yield Segment(cursor, item.span.start, text[cursor : item.span.start])
            yield Segment(item.span.start, item.span.end, item.span.slice(text), item)
            cursor = item.span.end
        if cursor < len(text):
            yield Segment(cursor, len(text), text[cursor:])

    def segments(self) -> List[Segment]:
        return list(self)

    def locate(self, offset: int) -> Tuple[int, int]:
        """Map a buffer offset to ``(segment index, offset inside segment)``.

        Offsets on a boundary belong to the segment that starts there; the end
        of the buffer belongs to the last segment.
        """

        if offset < 0 or offset > len(self.buffer):
            raise ValueError(f"Offset {offset} outside buffer of length {len(self.buffer)}")
        segments = self.segments()
        if not segments:
            return (0, 0)
        starts = [segment.start for segment in segments]
        index = min(bisect_right(starts, offset) - 1, len(segments) - 1)
        return (index, offset - segments[index].start)

    def offset_at(self, index: int, inner: int) -> int:
        """Inverse of ``locate``."""

        segments = self.segments()
        if not segments:
            if index == 0 and inner == 0:
                return 0
            raise IndexError("Empty projection has no segments")
        segment = segments[index]
        if inner < 0 or inner > segment.end - segment.start:
            raise ValueError(f"Inner offset {inner} outside segment {index}")
        return segment.start + inner

    def suggestion_at(self, offset: int) -> Optional[Suggestion]:
        for item in self.accepted:
            if item.span.start <= offset < item.span.end:
                return item
        return None


def project(buffer: TextBuffer, suggestions: SuggestionSet) -> Projection:
    return Projection(buffer, suggestions)


__all__ = ["Projection", "Segment", "project"]
