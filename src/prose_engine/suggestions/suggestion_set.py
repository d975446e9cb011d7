"""Version-tagged collection of the suggestions for one buffer version."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Optional, Sequence

from prose_engine.buffer import Span, TextBuffer, coerce_span, ensure_span
from prose_engine.buffer.spans import translate_after_replacement
from prose_engine.errors import SpanValidationError, StaleResponse
from prose_engine.runtime.telemetry import record_event, span

from .models import RawSuggestion, Suggestion


@dataclass(frozen=True, slots=True)
class RejectedSuggestion:
    """Diagnostic kept for an analyzer entry whose span failed validation."""

    raw: RawSuggestion
    reason: str


class SuggestionSet:
    """Immutable mapping of suggestion id to suggestion, valid for one version.

    Every operation returns a new set. A set never outlives its buffer
    version: edits either go through ``translate_all`` or discard the set.
    """

    __slots__ = ("_items", "_version", "_rejected")

    def __init__(
        self,
        suggestions: Iterable[Suggestion] = (),
        *,
        version: int,
        rejected: Sequence[RejectedSuggestion] = (),
    ) -> None:
        items: Dict[str, Suggestion] = {}
        for suggestion in suggestions:
            if suggestion.id in items:
                raise ValueError(f"Duplicate suggestion id '{suggestion.id}'")
            items[suggestion.id] = suggestion
        self._items = items
        self._version = version
        self._rejected = tuple(rejected)

    @classmethod
    def empty(cls, version: int) -> "SuggestionSet":
        return cls((), version=version)

    @classmethod
    def replace_all(
        cls,
        buffer: TextBuffer,
        version: int,
        raw_suggestions: Iterable[RawSuggestion],
        *,
        logger_name: str | None = None,
    ) -> "SuggestionSet":
        """Build the set for an analyzer batch computed against ``version``.

        Raises ``StaleResponse`` if ``buffer`` has moved past ``version``.
        Entries whose span is malformed or out of range are dropped and kept
        as ``rejected`` diagnostics.
        """

        if buffer.version != version:
            raise StaleResponse(
                f"Batch for version {version} arrived at version {buffer.version}",
                version=version,
                current_version=buffer.version,
            )

        with span(
            "suggestions::replace_all",
            logger_name=logger_name,
            component="suggestions",
            metadata={"version": version},
        ) as handle:
            accepted: list[Suggestion] = []
            rejected: list[RejectedSuggestion] = []
            for raw in raw_suggestions:
                try:
                    checked = ensure_span(buffer, coerce_span(raw.start, raw.end))
                except SpanValidationError as exc:
                    rejected.append(RejectedSuggestion(raw=raw, reason=str(exc)))
                    record_event(
                        "suggestions.rejected",
                        level="warning",
                        data={
                            "version": version,
                            "start": raw.start,
                            "end": raw.end,
                            "reason": str(exc),
                        },
                        logger_name=logger_name,
                    )
                    continue
                accepted.append(Suggestion.from_raw(raw, checked, buffer.text))

            handle.add_metadata("accepted", len(accepted))
            replaced = cls(accepted, version=version, rejected=rejected)
            record_event(
                "suggestions.replaced",
                data={"version": version, "accepted": len(accepted), "rejected": len(rejected)},
                logger_name=logger_name,
            )
            return replaced

    @property
    def version(self) -> int:
        return self._version

    @property
    def rejected(self) -> tuple[RejectedSuggestion, ...]:
        return self._rejected

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, suggestion_id: object) -> bool:
        return suggestion_id in self._items

    def __iter__(self) -> Iterator[Suggestion]:
        return iter(self.ordered())

    def get(self, suggestion_id: str) -> Optional[Suggestion]:
        return self._items.get(suggestion_id)

    def ordered(self) -> list[Suggestion]:
        """Suggestions by ``start`` ascending, longer span first on ties."""

        return sorted(self._items.values(), key=lambda item: item.sort_key)

    def remove(self, suggestion_id: str) -> "SuggestionSet":
        if suggestion_id not in self._items:
            return self
        remaining = (item for key, item in self._items.items() if key != suggestion_id)
        return SuggestionSet(remaining, version=self._version)

    def translate_all(self, edit: Span, replacement_length: int) -> "SuggestionSet":
        """Carry the set across one edit; the result is tagged ``version + 1``.

        Suggestions whose span touches the edited region are dropped.
        """

        moved: list[Suggestion] = []
        for item in self._items.values():
            translated = translate_after_replacement(item.span, edit, replacement_length)
            if translated is None:
                continue
            moved.append(item if translated == item.span else item.moved(translated))
        return SuggestionSet(moved, version=self._version + 1)

    def at_offset(self, offset: int) -> Optional[Suggestion]:
        """First suggestion (in render order) whose span covers ``offset``."""

        for item in self.ordered():
            if item.span.start <= offset < item.span.end:
                return item
        return None

    def __repr__(self) -> str:
        return f"SuggestionSet(version={self._version}, size={len(self._items)})"


__all__ = ["SuggestionSet", "RejectedSuggestion"]
