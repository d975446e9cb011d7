"""Buffer versions, caret state and the character-span offset model."""

from .document import TextBuffer
from .spans import (
    Span,
    length_delta,
    minimal_edit,
    overlaps,
    translate_after_replacement,
    translate_caret,
    validate,
)
from .state import Caret
from .sync import BufferMirror, BufferSync
from .validation import coerce_span, ensure_span

__all__ = [
    "TextBuffer",
    "Caret",
    "Span",
    "validate",
    "overlaps",
    "length_delta",
    "minimal_edit",
    "translate_after_replacement",
    "translate_caret",
    "BufferMirror",
    "BufferSync",
    "coerce_span",
    "ensure_span",
]
