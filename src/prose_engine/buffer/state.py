"""Caret and selection state tied to a buffer version."""

from __future__ import annotations

from dataclasses import dataclass

from .spans import Span, translate_caret


@dataclass(frozen=True, slots=True)
class Caret:
    """Selection endpoints; collapsed when ``anchor == focus``."""

    anchor: int = 0
    focus: int = 0

    @classmethod
    def at(cls, offset: int) -> "Caret":
        return cls(offset, offset)

    @property
    def collapsed(self) -> bool:
        return self.anchor == self.focus

    @property
    def start(self) -> int:
        return min(self.anchor, self.focus)

    @property
    def end(self) -> int:
        return max(self.anchor, self.focus)

    def translated(self, edit: Span, replacement_length: int) -> "Caret":
        """Re-derive both endpoints after ``edit``.

        A non-collapsed selection survives only if neither endpoint was inside
        the replaced region; otherwise it collapses onto the translated focus.
        """

        anchor = translate_caret(self.anchor, edit, replacement_length)
        focus = translate_caret(self.focus, edit, replacement_length)
        if self.collapsed:
            return Caret(focus, focus)
        if edit.contains_offset(self.anchor) or edit.contains_offset(self.focus):
            return Caret(focus, focus)
        return Caret(anchor, focus)

    def clamped(self, length: int) -> "Caret":
        return Caret(max(0, min(self.anchor, length)), max(0, min(self.focus, length)))
