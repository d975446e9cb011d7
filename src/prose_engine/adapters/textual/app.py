"""Terminal demo: a scratch document with live analyzer suggestions."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.widgets import Footer, Header, Static

from prose_engine.buffer import Caret, TextBuffer
from prose_engine.editing import EditorSession, InMemoryDocumentStore, Notification
from prose_engine.render import Projection
from prose_engine.runtime import EngineSettings, telemetry
from prose_engine.suggestions import SuggestionKind

from .controller import EditorAdapter, SessionHooks

KIND_STYLES = {
    SuggestionKind.GRAMMAR: "underline rgb(239,68,68)",
    SuggestionKind.STYLE: "underline rgb(59,130,246)",
    SuggestionKind.SPELLING: "underline rgb(147,51,234)",
    SuggestionKind.TONE: "underline rgb(245,158,11)",
    SuggestionKind.OTHER: "underline rgb(245,158,11)",
}

DEMO_DOCUMENT_ID = "scratch"
TICK_SECONDS = 0.1


def render_projection(projection: Projection, caret: Caret) -> Text:
    """Build styled text from projected segments and mark the caret."""

    rendered = Text()
    for segment in projection:
        rendered.append(segment.text, style=KIND_STYLES.get(segment.decoration, ""))
    if not caret.collapsed:
        rendered.stylize("reverse", caret.start, caret.end)
    elif caret.focus < len(rendered.plain):
        rendered.stylize("reverse", caret.focus, caret.focus + 1)
    else:
        rendered.append(" ", style="reverse")
    return rendered


class ProseEditorApp(App[None]):
    """Single-document editor.

    Tab applies the suggestion at the caret, Ctrl+D dismisses it and
    Ctrl+S saves to the in-memory store.
    """

    CSS = """
    #document {
        height: 1fr;
        border: round $accent;
        padding: 1 2;
    }

    #suggestion-hint, #stats {
        height: 1;
        padding: 0 1;
    }

    #stats {
        background: $panel;
    }
    """

    BINDINGS = [("ctrl+q", "quit", "Quit")]

    def __init__(self, *, settings: Optional[EngineSettings] = None, initial_text: str = "") -> None:
        super().__init__()
        self.settings = settings or EngineSettings.from_env()
        self.store = InMemoryDocumentStore({DEMO_DOCUMENT_ID: initial_text})
        self.adapter: EditorAdapter | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static(id="document")
        yield Static(id="suggestion-hint")
        yield Static(id="stats")
        yield Footer()

    def on_mount(self) -> None:
        session = EditorSession.open(self.store, DEMO_DOCUMENT_ID, settings=self.settings)
        self.adapter = EditorAdapter(
            session,
            SessionHooks(
                update_view=self._show_document,
                update_status=lambda line: self.query_one("#stats", Static).update(line),
                notify=self._toast,
            ),
        )
        self.set_interval(TICK_SECONDS, self._tick)

    def on_unmount(self) -> None:
        if self.adapter:
            self.adapter.session.close()

    def on_key(self, event: events.Key) -> None:
        if self.adapter and self.adapter.handle_key(event.key, text=event.character):
            event.stop()
            self._show_hint()

    def _tick(self) -> None:
        if self.adapter and self.adapter.process_timeouts():
            self._show_hint()

    def _show_document(self, projection: Projection, caret: Caret) -> None:
        self.query_one("#document", Static).update(render_projection(projection, caret))

    def _show_hint(self) -> None:
        target = self.adapter.target_suggestion() if self.adapter else None
        hint = ""
        if target is not None:
            hint = (
                f"[{target.kind.value}] {target.message}: "
                f"{target.original!r} -> {target.replacement!r} (Tab apply, Ctrl+D dismiss)"
            )
        self.query_one("#suggestion-hint", Static).update(Text(hint))

    def _toast(self, notification: Notification) -> None:
        self.notify(
            notification.message,
            severity="error" if notification.level == "error" else "warning",
        )


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    defaults = EngineSettings.from_env()
    parser = argparse.ArgumentParser(description="Edit a scratch document with live suggestions.")
    parser.add_argument("--analyzer-url", default=defaults.analyzer_url)
    parser.add_argument(
        "--debounce-ms",
        type=int,
        default=defaults.debounce_ms,
        help="Quiet period after the last edit before analysis (default: %(default)s)",
    )
    parser.add_argument("--text", default="", help="Initial document text")
    parser.add_argument(
        "--log-preset",
        choices=telemetry.PRESETS,
        default="production",
        help="Telemetry preset; production writes to a log file (default: %(default)s)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    telemetry.configure(preset=args.log_preset)
    settings = EngineSettings.from_env()
    settings.analyzer_url = args.analyzer_url
    settings.debounce_ms = max(0, args.debounce_ms)
    ProseEditorApp(settings=settings, initial_text=args.text).run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
