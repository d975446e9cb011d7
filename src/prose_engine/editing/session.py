"""Editor session owning one buffer, its suggestion set and the caret."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Union

from prose_engine.analyzer import (
    AnalysisOutcome,
    AnalyzerClient,
    AnalyzerState,
    HttpAnalyzerTransport,
)
from prose_engine.buffer import BufferMirror, Caret, Span, TextBuffer, minimal_edit
from prose_engine.errors import (
    ContractError,
    ProseEngineError,
    SpanValidationError,
    StaleSuggestion,
    StorageError,
    TransportError,
)
from prose_engine.render import Projection, project
from prose_engine.runtime import EngineSettings, telemetry
from prose_engine.suggestions import Suggestion, SuggestionSet

from .reconciler import ReconcileResult, apply_suggestion, apply_text_edit
from .stats import DocumentStats, compute_stats
from .storage import DocumentStore


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    """The triple the render path reads; always internally consistent."""

    buffer: TextBuffer
    suggestions: SuggestionSet
    caret: Caret


@dataclass(frozen=True, slots=True)
class Notification:
    """Transient, dismissible message for the host UI."""

    level: str
    message: str
    source: str
    error: Optional[Exception] = None


def _noop_notify(_notification: Notification) -> None:  # pragma: no cover - default hook
    return None


class EditorSession:
    """Session-scoped state and the entry points hosts call.

    All mutations replace ``_snapshot`` in a single assignment. Errors from
    the analyzer, stale applies and storage failures are turned into
    notifications; none of them propagate out of the session.
    """

    def __init__(
        self,
        buffer: Optional[TextBuffer] = None,
        *,
        analyzer: Optional[AnalyzerClient] = None,
        store: Optional[DocumentStore] = None,
        document_id: Optional[str] = None,
        settings: Optional[EngineSettings] = None,
        notify: Callable[[Notification], None] = _noop_notify,
        logger_name: str | None = None,
    ) -> None:
        self.settings = settings or EngineSettings()
        self._logger_name = logger_name or "prose_engine.editing"
        self.analyzer = analyzer or AnalyzerClient(
            HttpAnalyzerTransport(
                self.settings.analyzer_url, timeout_s=self.settings.analyzer_timeout_s
            ),
            debounce_ms=self.settings.debounce_ms,
            min_chars=self.settings.min_analysis_chars,
        )
        self.store = store
        self.document_id = document_id
        self.notify = notify
        self.dirty = False
        initial = buffer if buffer is not None else TextBuffer()
        self._snapshot = SessionSnapshot(
            buffer=initial,
            suggestions=SuggestionSet.empty(initial.version),
            caret=Caret.at(len(initial)),
        )
        if not initial.is_blank:
            self.analyzer.note_edit(initial.version, initial.text)

    @classmethod
    def open(
        cls,
        store: DocumentStore,
        document_id: str,
        **kwargs: object,
    ) -> "EditorSession":
        """Load ``document_id`` from ``store``; raises ``StorageError`` if missing."""

        content = store.load(document_id)
        return cls(
            TextBuffer.from_text(content),
            store=store,
            document_id=document_id,
            **kwargs,  # type: ignore[arg-type]
        )

    # -- read side -----------------------------------------------------

    def snapshot(self) -> SessionSnapshot:
        return self._snapshot

    @property
    def buffer(self) -> TextBuffer:
        return self._snapshot.buffer

    @property
    def suggestions(self) -> SuggestionSet:
        return self._snapshot.suggestions

    @property
    def caret(self) -> Caret:
        return self._snapshot.caret

    @property
    def status(self) -> str:
        return "processing" if self.analyzer.state is AnalyzerState.PENDING else "ready"

    def projection(self) -> Projection:
        snap = self._snapshot
        return project(snap.buffer, snap.suggestions)

    def stats(self) -> DocumentStats:
        return compute_stats(
            self._snapshot.buffer.text, words_per_minute=self.settings.words_per_minute
        )

    def mirror(self) -> BufferMirror:
        snap = self._snapshot
        return BufferMirror(
            text=snap.buffer.text,
            version=snap.buffer.version,
            caret=snap.caret,
            attributes={"status": self.status, "suggestions": str(len(snap.suggestions))},
        )

    # -- edits -----------------------------------------------------------

    def set_caret(self, anchor: int, focus: Optional[int] = None) -> Caret:
        caret = Caret(anchor, anchor if focus is None else focus).clamped(len(self.buffer))
        snap = self._snapshot
        self._snapshot = SessionSnapshot(snap.buffer, snap.suggestions, caret)
        return caret

    def apply_text_edit(
        self, edit: Span, text: str, *, caret: Optional[Caret] = None
    ) -> bool:
        snap = self._snapshot
        try:
            result = apply_text_edit(
                snap.buffer,
                snap.suggestions,
                snap.caret,
                edit,
                text,
                caret_after=caret,
                logger_name=self._logger_name,
            )
        except SpanValidationError as exc:
            self._notify("warning", f"Ignored edit outside the document: {exc}", "editing", exc)
            return False
        self._commit(result)
        return True

    def insert_text(self, text: str) -> bool:
        """Type ``text`` over the selection, leaving the caret after it."""

        caret = self.caret
        end = caret.start + len(text)
        return self.apply_text_edit(Span(caret.start, caret.end), text, caret=Caret.at(end))

    def delete_backward(self) -> bool:
        caret = self.caret
        if not caret.collapsed:
            return self.apply_text_edit(
                Span(caret.start, caret.end), "", caret=Caret.at(caret.start)
            )
        if caret.focus == 0:
            return False
        start = caret.focus - 1
        return self.apply_text_edit(Span(start, caret.focus), "", caret=Caret.at(start))

    def sync_text(self, new_text: str, caret: Optional[Caret] = None) -> bool:
        """Accept the widget's full text and derive the minimal edit from it."""

        current = self.buffer.text
        if new_text == current:
            if caret is not None:
                self.set_caret(caret.anchor, caret.focus)
            return False
        edit, inserted = minimal_edit(current, new_text)
        return self.apply_text_edit(edit, inserted, caret=caret)

    # -- suggestions ------------------------------------------------------

    def apply_suggestion(self, suggestion: Union[str, Suggestion]) -> bool:
        snap = self._snapshot
        if isinstance(suggestion, Suggestion):
            suggestion_id, target = suggestion.id, suggestion
        else:
            suggestion_id, target = suggestion, snap.suggestions.get(suggestion)
        try:
            if target is None:
                raise StaleSuggestion(
                    f"Suggestion '{suggestion_id}' is not part of the current set",
                    suggestion_id=suggestion_id,
                    set_version=snap.suggestions.version,
                    buffer_version=snap.buffer.version,
                )
            result = apply_suggestion(
                snap.buffer,
                snap.suggestions,
                snap.caret,
                target,
                logger_name=self._logger_name,
            )
        except (StaleSuggestion, SpanValidationError) as exc:
            telemetry.record_event(
                "editing.stale_suggestion",
                level="warning",
                data={"suggestion": suggestion_id, "version": snap.buffer.version},
                logger_name=self._logger_name,
            )
            self._notify(
                "warning",
                "That suggestion no longer matches the text; waiting for fresh suggestions.",
                "editing",
                exc,
            )
            return False
        self._commit(result)
        return True

    def dismiss(self, suggestion_id: str) -> bool:
        snap = self._snapshot
        remaining = snap.suggestions.remove(suggestion_id)
        if remaining is snap.suggestions:
            return False
        self._snapshot = SessionSnapshot(snap.buffer, remaining, snap.caret)
        return True

    # -- analyzer ---------------------------------------------------------

    def tick(self, *, now: Optional[float] = None) -> List[AnalysisOutcome]:
        """Drive the debounce timer and fold finished analyses into the session."""

        outcomes = self.analyzer.poll(self._snapshot.buffer, now=now)
        self._absorb(outcomes)
        return outcomes

    def request_analysis(self) -> List[AnalysisOutcome]:
        outcomes = self.analyzer.flush(self._snapshot.buffer)
        self._absorb(outcomes)
        return outcomes

    def close(self) -> None:
        self.analyzer.shutdown()

    # -- persistence --------------------------------------------------------

    def save(self) -> bool:
        """Persist the current text; failures keep the local state and mark it dirty."""

        if self.store is None or not self.document_id:
            return False
        try:
            self.store.save(self.document_id, self._snapshot.buffer.text)
        except StorageError as exc:
            self.dirty = True
            telemetry.record_event(
                "storage.save_failed",
                level="warning",
                data={"document": self.document_id, "error": str(exc)},
                logger_name=self._logger_name,
            )
            self._notify("error", "Failed to save document; changes kept locally.", "storage", exc)
            return False
        self.dirty = False
        return True

    # -- internals ----------------------------------------------------------

    def _commit(self, result: ReconcileResult) -> None:
        self._snapshot = SessionSnapshot(result.buffer, result.suggestions, result.caret)
        self.dirty = True
        self.analyzer.note_edit(result.buffer.version, result.buffer.text)

    def _absorb(self, outcomes: List[AnalysisOutcome]) -> None:
        for outcome in outcomes:
            if outcome.applied and outcome.suggestions is not None:
                snap = self._snapshot
                if outcome.suggestions.version != snap.buffer.version:
                    continue
                self._snapshot = SessionSnapshot(snap.buffer, outcome.suggestions, snap.caret)
                if self.settings.autosave:
                    self.save()
            elif isinstance(outcome.error, (ContractError, TransportError)):
                self._notify("error", "Failed to analyze text", "analyzer", outcome.error)

    def _notify(
        self, level: str, message: str, source: str, error: Optional[ProseEngineError] = None
    ) -> None:
        self.notify(Notification(level=level, message=message, source=source, error=error))


__all__ = ["EditorSession", "Notification", "SessionSnapshot"]
