import pytest

from prose_engine.buffer import Span, TextBuffer
from prose_engine.errors import StaleResponse
from prose_engine.suggestions import RawSuggestion, SuggestionKind, SuggestionSet


def make_raw(
    start: object, end: object, replacement: str = "x", kind: str = "grammar"
) -> RawSuggestion:
    return RawSuggestion(
        kind=SuggestionKind.parse(kind),
        message=f"fix {start}-{end}",
        replacement=replacement,
        start=start,
        end=end,
    )


def make_set(text: str, *spans: tuple[int, int], version: int = 0) -> SuggestionSet:
    buffer = TextBuffer.from_text(text, version=version)
    return SuggestionSet.replace_all(buffer, version, [make_raw(s, e) for s, e in spans])


def test_replace_all_drops_invalid_spans_and_keeps_batch() -> None:
    buffer = TextBuffer.from_text("Teh cat sat")
    raw = [
        make_raw(0, 3, "The", "spelling"),
        make_raw(4, 7, "dog"),
        make_raw(5, 99),
        make_raw("a", 3),
        make_raw(3, 1),
    ]

    suggestions = SuggestionSet.replace_all(buffer, 0, raw)

    assert len(suggestions) == 2
    assert len(suggestions.rejected) == 3
    assert suggestions.version == 0
    first = suggestions.ordered()[0]
    assert first.kind is SuggestionKind.SPELLING
    assert first.original == "Teh"
    assert first.context == "Teh cat sat"


def test_replace_all_assigns_unique_ids() -> None:
    suggestions = make_set("one two three", (0, 3), (4, 7), (8, 13))

    ids = {item.id for item in suggestions}

    assert len(ids) == 3
    for suggestion_id in ids:
        assert suggestion_id in suggestions


def test_replace_all_rejects_stale_batch() -> None:
    buffer = TextBuffer.from_text("Teh cat sat", version=5)

    with pytest.raises(StaleResponse) as excinfo:
        SuggestionSet.replace_all(buffer, 3, [make_raw(0, 3)])

    assert excinfo.value.version == 3
    assert excinfo.value.current_version == 5


def test_remove_twice_is_noop() -> None:
    suggestions = make_set("Teh cat sat", (0, 3), (4, 7))
    target = suggestions.ordered()[0]

    once = suggestions.remove(target.id)
    twice = once.remove(target.id)

    assert len(once) == 1
    assert twice is once
    assert target.id not in twice
    assert len(suggestions) == 2


def test_translate_all_drops_overlapping_and_bumps_version() -> None:
    suggestions = make_set("Hello brave new world", (0, 5), (6, 11), (16, 21))

    moved = suggestions.translate_all(Span(8, 10), 0)

    assert moved.version == suggestions.version + 1
    assert [item.span for item in moved.ordered()] == [Span(0, 5), Span(14, 19)]


def test_ordering_puts_outer_span_first_on_ties() -> None:
    suggestions = make_set("abcdefghij", (3, 4), (0, 5), (0, 8))

    assert [item.span for item in suggestions.ordered()] == [
        Span(0, 8),
        Span(0, 5),
        Span(3, 4),
    ]


def test_unknown_kind_maps_to_other() -> None:
    assert SuggestionKind.parse("clarity") is SuggestionKind.OTHER
    assert SuggestionKind.parse(None) is SuggestionKind.OTHER
    assert SuggestionKind.parse(" Tone ") is SuggestionKind.TONE


def test_at_offset_finds_covering_suggestion() -> None:
    suggestions = make_set("Teh cat sat", (0, 3), (4, 7))

    found = suggestions.at_offset(5)

    assert found is not None and found.span == Span(4, 7)
    assert suggestions.at_offset(3) is None
