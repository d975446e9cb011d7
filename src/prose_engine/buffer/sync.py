"""Adapter boundary types for syncing sessions with host widgets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from .state import Caret


@dataclass(slots=True)
class BufferMirror:
    """Host-friendly snapshot describing what the widget should show."""

    text: str
    version: int
    caret: Caret
    attributes: dict[str, str] = field(default_factory=dict)


class BufferSync(Protocol):
    """How a widget exchanges plain text and caret state with a session."""

    def pull_buffer(self) -> BufferMirror:
        """Return the latest snapshot the host should render."""
        ...

    def push_host_edit(self, mirror: BufferMirror) -> None:
        """Submit an edit made directly in the widget (IME, paste, typing)."""
        ...
