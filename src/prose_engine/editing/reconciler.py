"""Atomic buffer transformations: suggestion application and free-text edits.

Both entry points take the current ``(buffer, suggestions, caret)`` triple
and return a new one. Nothing is mutated, so a caller that swaps the triple
in one assignment never exposes a half-applied edit.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from prose_engine.buffer import Caret, Span, TextBuffer, ensure_span
from prose_engine.errors import StaleSuggestion
from prose_engine.runtime import telemetry
from prose_engine.suggestions import Suggestion, SuggestionSet


@dataclass(frozen=True, slots=True)
class ReconcileResult:
    buffer: TextBuffer
    suggestions: SuggestionSet
    caret: Caret
    edit: Span
    inserted: str
    label: str


def apply_suggestion(
    buffer: TextBuffer,
    suggestions: SuggestionSet,
    caret: Caret,
    suggestion: Suggestion,
    *,
    logger_name: str | None = None,
) -> ReconcileResult:
    """Replace ``suggestion``'s span with its replacement text.

    Raises ``StaleSuggestion`` without touching anything when the set was not
    computed for ``buffer.version`` or no longer holds ``suggestion``.
    """

    if suggestions.version != buffer.version:
        raise StaleSuggestion(
            f"Suggestion set is for version {suggestions.version}, buffer is at {buffer.version}",
            suggestion_id=suggestion.id,
            set_version=suggestions.version,
            buffer_version=buffer.version,
        )
    if suggestions.get(suggestion.id) != suggestion:
        raise StaleSuggestion(
            f"Suggestion '{suggestion.id}' is not part of the current set",
            suggestion_id=suggestion.id,
            set_version=suggestions.version,
            buffer_version=buffer.version,
        )

    edit = ensure_span(buffer, suggestion.span)
    with telemetry.span(
        "editing::apply_suggestion",
        logger_name=logger_name,
        component="editing",
        metadata={"suggestion": suggestion.id, "version": buffer.version},
    ):
        return _reconcile(
            buffer,
            suggestions.remove(suggestion.id),
            caret,
            edit,
            suggestion.replacement,
            label="apply_suggestion",
        )


def apply_text_edit(
    buffer: TextBuffer,
    suggestions: SuggestionSet,
    caret: Caret,
    edit: Span,
    text: str,
    *,
    caret_after: Optional[Caret] = None,
    logger_name: str | None = None,
) -> ReconcileResult:
    """Route a user edit through the same translation path as suggestions.

    ``edit`` is the minimal span the keystroke replaced and ``text`` what it
    inserted (empty for deletions). ``caret_after`` lets the host report
    where its widget put the caret (clamped to the new text); otherwise the
    caret is translated.
    A suggestion set that does not match ``buffer`` is discarded rather than
    translated.
    """

    edit = ensure_span(buffer, edit)
    if suggestions.version != buffer.version:
        telemetry.record_event(
            "editing.discard_set",
            level="debug",
            data={"set_version": suggestions.version, "version": buffer.version},
            logger_name=logger_name,
        )
        suggestions = SuggestionSet.empty(buffer.version)

    with telemetry.span(
        "editing::text_edit",
        logger_name=logger_name,
        component="editing",
        metadata={"version": buffer.version, "start": edit.start, "end": edit.end},
    ):
        result = _reconcile(buffer, suggestions, caret, edit, text, label="text_edit")
        if caret_after is None:
            return result
        return ReconcileResult(
            buffer=result.buffer,
            suggestions=result.suggestions,
            caret=caret_after.clamped(len(result.buffer)),
            edit=result.edit,
            inserted=result.inserted,
            label=result.label,
        )


def _reconcile(
    buffer: TextBuffer,
    suggestions: SuggestionSet,
    caret: Caret,
    edit: Span,
    text: str,
    *,
    label: str,
) -> ReconcileResult:
    updated = buffer.replace(edit, text)
    return ReconcileResult(
        buffer=updated,
        suggestions=suggestions.translate_all(edit, len(text)),
        caret=caret.translated(edit, len(text)).clamped(len(updated)),
        edit=edit,
        inserted=text,
        label=label,
    )


__all__ = ["ReconcileResult", "apply_suggestion", "apply_text_edit"]
