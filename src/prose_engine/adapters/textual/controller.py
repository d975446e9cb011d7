"""Minimal Textual adapter that wires an EditorSession into UI callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from prose_engine.analyzer import AnalysisOutcome
from prose_engine.buffer import BufferMirror, Caret
from prose_engine.editing import EditorSession, Notification
from prose_engine.render import Projection
from prose_engine.suggestions import Suggestion


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class SessionHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_view: Callable[[Projection, Caret], None]
    update_status: Callable[[str], None] = _noop
    notify: Callable[[Notification], None] = _noop
    # Optional realtime log callback a host may use to surface debug lines
    log: Callable[[str], None] = _noop


class EditorAdapter:
    """Bridges key events and timer ticks to an ``EditorSession``.

    Also satisfies ``BufferSync`` for hosts that own the text widget.
    """

    def __init__(self, session: EditorSession, hooks: SessionHooks) -> None:
        self.session = session
        self.hooks = hooks
        session.notify = self._handle_notification
        self._refresh()

    def handle_key(self, key: str, *, text: Optional[str] = None) -> bool:
        """Translate a Textual key into a session operation; True if consumed."""

        self._log_state("key ->", key=key, text=text)
        handler = self._key_handlers().get(key)
        if handler is not None:
            consumed = handler()
        elif text and text.isprintable():
            consumed = self.session.insert_text(text)
        else:
            consumed = False
        if consumed:
            self._refresh()
        return consumed

    def process_timeouts(self) -> List[AnalysisOutcome]:
        """Forward the periodic tick and re-render when analyses land."""

        outcomes = self.session.tick()
        for outcome in outcomes:
            self._log_state("analysis ->", state=outcome.state.value, for_version=outcome.version)
        if outcomes:
            self._refresh()
        else:
            self.hooks.update_status(self._status_line())
        return outcomes

    def target_suggestion(self) -> Optional[Suggestion]:
        """Suggestion under the caret, just before it, or the next one after it."""

        projection = self.session.projection()
        focus = self.session.caret.focus
        found = projection.suggestion_at(focus)
        if found is None and focus > 0:
            found = projection.suggestion_at(focus - 1)
        if found is None:
            found = next((s for s in projection.accepted if s.start >= focus), None)
        return found

    def pull_buffer(self) -> BufferMirror:
        return self.session.mirror()

    def push_host_edit(self, mirror: BufferMirror) -> None:
        """Accept text edited directly in the widget (paste, IME composition)."""

        if self.session.sync_text(mirror.text, mirror.caret):
            self._refresh()

    def apply_target(self) -> bool:
        target = self.target_suggestion()
        if target is None:
            return False
        return self.session.apply_suggestion(target)

    def dismiss_target(self) -> bool:
        target = self.target_suggestion()
        if target is None:
            return False
        return self.session.dismiss(target.id)

    def _key_handlers(self) -> Dict[str, Callable[[], bool]]:
        session = self.session
        return {
            "backspace": session.delete_backward,
            "enter": lambda: session.insert_text("\n"),
            "left": lambda: self._move(-1),
            "right": lambda: self._move(1),
            "home": lambda: self._jump(0),
            "end": lambda: self._jump(len(session.buffer)),
            "tab": self.apply_target,
            "ctrl+d": self.dismiss_target,
            "ctrl+s": session.save,
        }

    def _move(self, delta: int) -> bool:
        self.session.set_caret(self.session.caret.focus + delta)
        return True

    def _jump(self, offset: int) -> bool:
        self.session.set_caret(offset)
        return True

    def _handle_notification(self, notification: Notification) -> None:
        self._log_state("notify ->", level=notification.level, message=notification.message)
        self.hooks.notify(notification)

    def _refresh(self) -> None:
        snap = self.session.snapshot()
        self.hooks.update_view(self.session.projection(), snap.caret)
        self.hooks.update_status(self._status_line())

    def _status_line(self) -> str:
        stats = self.session.stats()
        return (
            f"{self.session.status.capitalize()} | {stats.words} words | "
            f"{stats.characters} characters | ~{stats.reading_minutes} min read | "
            f"{len(self.session.suggestions)} suggestions"
        )

    def _log_state(self, prefix: str, **fields: object) -> None:
        snap = self.session.snapshot()
        snapshot: Dict[str, object] = {
            "version": snap.buffer.version,
            "caret": (snap.caret.anchor, snap.caret.focus),
            "suggestions": len(snap.suggestions),
            "analyzer": self.session.analyzer.state.value,
        }
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix] + [f"{key}={value!r}" for key, value in snapshot.items()]
        self.hooks.log(" ".join(parts))


__all__ = ["EditorAdapter", "SessionHooks"]
