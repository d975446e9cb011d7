from typing import Any, Callable

from prose_engine.analyzer import AnalyzerClient, AnalyzerState
from prose_engine.buffer import TextBuffer
from prose_engine.errors import ContractError, StaleResponse, TransportError


def make_payload(*entries: tuple[int, int, str]) -> dict[str, Any]:
    return {
        "suggestions": [
            {"type": "spelling", "message": "typo", "replacement": r, "start": s, "end": e}
            for s, e, r in entries
        ]
    }


def test_debounce_waits_for_quiet_period(make_client: Callable[..., AnalyzerClient], manual_executor, clock) -> None:
    client = make_client(manual_executor)
    buffer = TextBuffer.from_text("Teh cat")

    client.note_edit(0, buffer.text)
    clock.advance(0.4)
    assert client.poll(buffer) == []
    assert manual_executor.calls == []

    clock.advance(0.2)
    client.poll(buffer)

    assert len(manual_executor.calls) == 1
    assert client.state is AnalyzerState.PENDING


def test_new_edit_restarts_debounce_window(make_client, manual_executor, clock) -> None:
    client = make_client(manual_executor)

    client.note_edit(0, "Teh")
    clock.advance(0.3)
    client.note_edit(1, "Teh ")
    buffer = TextBuffer.from_text("Teh ", version=1)
    clock.advance(0.3)
    client.poll(buffer)
    assert manual_executor.calls == []

    clock.advance(0.25)
    client.poll(buffer)

    assert len(manual_executor.calls) == 1
    assert manual_executor.calls[0][2] == ("Teh ",)


def test_successful_response_builds_set_for_version(make_client, manual_executor) -> None:
    client = make_client(manual_executor)
    buffer = TextBuffer.from_text("Teh cat")
    client.note_edit(0, buffer.text)
    client.flush(buffer)

    manual_executor.complete(0, make_payload((0, 3, "The"), (4, 40, "dog")))
    outcomes = client.poll(buffer)

    assert len(outcomes) == 1
    outcome = outcomes[0]
    assert outcome.applied
    assert outcome.suggestions is not None
    assert outcome.suggestions.version == 0
    assert len(outcome.suggestions) == 1
    assert len(outcome.suggestions.rejected) == 1
    assert client.state is AnalyzerState.APPLYING


def test_superseded_response_is_stale_even_if_it_arrives_first(make_client, manual_executor, clock) -> None:
    client = make_client(manual_executor)
    first = TextBuffer.from_text("Teh cat")
    client.note_edit(0, first.text)
    client.flush(first)

    second = TextBuffer.from_text("Teh cat sat", version=1)
    client.note_edit(1, second.text)
    client.flush(second)
    assert len(manual_executor.calls) == 2

    manual_executor.complete(0, make_payload((0, 3, "The")))
    stale = client.poll(second)
    assert [outcome.state for outcome in stale] == [AnalyzerState.STALE]
    assert isinstance(stale[0].error, StaleResponse)
    assert client.state is AnalyzerState.PENDING

    manual_executor.complete(1, make_payload((0, 3, "The"), (8, 11, "sits")))
    fresh = client.poll(second)
    assert fresh[0].applied
    assert fresh[0].suggestions is not None and len(fresh[0].suggestions) == 2


def test_repeat_flush_supersedes_previous_request(make_client, manual_executor) -> None:
    client = make_client(manual_executor)
    buffer = TextBuffer.from_text("Teh cat")
    client.flush(buffer)
    client.flush(buffer)

    manual_executor.complete(1, make_payload((0, 3, "The")))
    manual_executor.complete(0, make_payload((4, 7, "dog")))
    outcomes = client.poll(buffer)

    states = sorted(outcome.state.value for outcome in outcomes)
    assert states == ["applying", "stale"]
    applied = next(outcome for outcome in outcomes if outcome.applied)
    assert applied.suggestions is not None
    assert [s.replacement for s in applied.suggestions] == ["The"]


def test_response_for_older_buffer_version_is_stale(make_client, manual_executor) -> None:
    client = make_client(manual_executor)
    at_v3 = TextBuffer.from_text("Teh cat", version=3)
    client.note_edit(3, at_v3.text)
    client.flush(at_v3)

    manual_executor.complete(0, make_payload((0, 3, "The")))
    at_v5 = TextBuffer.from_text("Teh cats", version=5)
    outcomes = client.poll(at_v5)

    assert outcomes[0].state is AnalyzerState.STALE
    assert outcomes[0].suggestions is None
    assert client.state is AnalyzerState.STALE


def test_transport_failure_is_reported(make_client, manual_executor) -> None:
    client = make_client(manual_executor)
    buffer = TextBuffer.from_text("Teh cat")
    client.flush(buffer)

    manual_executor.fail(0, TransportError("down", status=500))
    outcomes = client.poll(buffer)

    assert outcomes[0].state is AnalyzerState.FAILED
    assert isinstance(outcomes[0].error, TransportError)
    assert client.state is AnalyzerState.FAILED


def test_unexpected_exception_becomes_transport_error(make_client, manual_executor) -> None:
    client = make_client(manual_executor)
    buffer = TextBuffer.from_text("Teh cat")
    client.flush(buffer)

    manual_executor.fail(0, RuntimeError("boom"))
    outcomes = client.poll(buffer)

    assert isinstance(outcomes[0].error, TransportError)


def test_malformed_payload_is_contract_failure(make_client, manual_executor) -> None:
    client = make_client(manual_executor)
    buffer = TextBuffer.from_text("Teh cat")
    client.flush(buffer)

    manual_executor.complete(0, {"suggestions": "oops"})
    outcomes = client.poll(buffer)

    assert outcomes[0].state is AnalyzerState.FAILED
    assert isinstance(outcomes[0].error, ContractError)


def test_blank_text_clears_without_request(make_client, manual_executor, transport) -> None:
    client = make_client(manual_executor)
    buffer = TextBuffer.from_text("   \n", version=2)
    client.note_edit(2, buffer.text)

    outcomes = client.flush(buffer)

    assert manual_executor.calls == []
    assert transport.requests == []
    assert outcomes[0].applied
    assert outcomes[0].suggestions is not None
    assert outcomes[0].suggestions.version == 2
    assert len(outcomes[0].suggestions) == 0


def test_immediate_executor_resolves_in_same_poll(make_client, immediate_executor, transport) -> None:
    transport.responses["Teh cat"] = make_payload((0, 3, "The"))
    client = make_client(immediate_executor)
    buffer = TextBuffer.from_text("Teh cat")

    outcomes = client.flush(buffer)

    assert transport.requests == ["Teh cat"]
    assert outcomes[0].applied
    assert client.inflight_count == 0


def test_superseded_queued_request_is_cancelled(make_client, queued_executor) -> None:
    client = make_client(queued_executor)
    buffer = TextBuffer.from_text("Teh cat")
    client.flush(buffer)
    client.flush(buffer)

    first, second = (call[0] for call in queued_executor.calls)
    assert first.cancelled()
    assert not second.cancelled()

    outcomes = client.poll(buffer)

    assert [outcome.state for outcome in outcomes] == [AnalyzerState.STALE]
    assert client.state is AnalyzerState.PENDING
    assert client.inflight_count == 1
