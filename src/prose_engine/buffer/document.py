"""Versioned text storage for prose_engine buffers."""

from __future__ import annotations

from dataclasses import dataclass

from .spans import Span


@dataclass(frozen=True, slots=True)
class TextBuffer:
    """One immutable version of the document text.

    Edits never mutate a buffer; ``replace`` returns the next version.
    """

    text: str = ""
    version: int = 0

    @classmethod
    def from_text(cls, text: str, *, version: int = 0) -> "TextBuffer":
        return cls(text=text, version=version)

    def __len__(self) -> int:
        return len(self.text)

    def slice(self, span: Span) -> str:
        return self.text[span.start : span.end]

    def replace(self, span: Span, replacement: str) -> "TextBuffer":
        """Return the next version with ``span`` replaced by ``replacement``."""

        updated = self.text[: span.start] + replacement + self.text[span.end :]
        return TextBuffer(text=updated, version=self.version + 1)

    @property
    def is_blank(self) -> bool:
        return not self.text.strip()
