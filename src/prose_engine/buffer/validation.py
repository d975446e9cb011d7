"""Validation helpers shared across buffer services."""

from __future__ import annotations

from typing import Any

from prose_engine.errors import SpanValidationError

from .document import TextBuffer
from .spans import Span, validate


def coerce_span(start: Any, end: Any) -> Span:
    if isinstance(start, bool) or isinstance(end, bool):
        raise SpanValidationError("Span offsets must be integers", start=start, end=end)
    if not isinstance(start, int) or not isinstance(end, int):
        raise SpanValidationError("Span offsets must be integers", start=start, end=end)
    return Span(start, end)


def ensure_span(buffer: TextBuffer, span: Span) -> Span:
    if not validate(span, len(buffer)):
        raise SpanValidationError(
            f"Span [{span.start}, {span.end}) out of range for length {len(buffer)}",
            start=span.start,
            end=span.end,
        )
    return span

