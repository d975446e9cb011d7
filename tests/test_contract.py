from typing import Any, Optional

import pytest
import requests

from prose_engine.analyzer import HttpAnalyzerTransport, build_request, parse_response
from prose_engine.errors import ContractError, TransportError
from prose_engine.suggestions import SuggestionKind


def make_entry(**overrides: Any) -> dict[str, Any]:
    entry: dict[str, Any] = {
        "type": "grammar",
        "message": "Incorrect verb tense",
        "replacement": "went",
        "start": 5,
        "end": 8,
    }
    entry.update(overrides)
    return entry


class FakeResponse:
    def __init__(self, status_code: int, body: Any = None) -> None:
        self.status_code = status_code
        self._body = body

    def json(self) -> Any:
        if self._body is None:
            raise ValueError("no json")
        return self._body


class FakeHttpSession:
    def __init__(self, response: Optional[FakeResponse] = None, error: Optional[Exception] = None) -> None:
        self.response = response
        self.error = error
        self.posts: list[dict[str, Any]] = []

    def post(self, url: str, *, json: Any, timeout: Any) -> FakeResponse:
        self.posts.append({"url": url, "json": json, "timeout": timeout})
        if self.error is not None:
            raise self.error
        assert self.response is not None
        return self.response

    def close(self) -> None:
        pass


def make_transport(session: FakeHttpSession) -> HttpAnalyzerTransport:
    return HttpAnalyzerTransport("http://analyzer.test/api/analyze-text", session=session)  # type: ignore[arg-type]


def test_parse_response_reads_entries() -> None:
    parsed = parse_response({"suggestions": [make_entry(), make_entry(type="clarity")]})

    assert len(parsed) == 2
    assert parsed[0].kind is SuggestionKind.GRAMMAR
    assert (parsed[0].start, parsed[0].end) == (5, 8)
    assert parsed[1].kind is SuggestionKind.OTHER


def test_parse_response_passes_offsets_through_unchecked() -> None:
    parsed = parse_response({"suggestions": [make_entry(start="5", end=-1)]})

    assert parsed[0].start == "5"
    assert parsed[0].end == -1


@pytest.mark.parametrize(
    "payload",
    [
        None,
        [],
        {},
        {"suggestions": "none"},
        {"suggestions": [42]},
        {"suggestions": [{"type": "grammar", "message": "m", "replacement": "r", "start": 1}]},
        {"suggestions": [make_entry(message=None)]},
    ],
)
def test_parse_response_rejects_contract_violations(payload: Any) -> None:
    with pytest.raises(ContractError):
        parse_response(payload)


def test_build_request_shape() -> None:
    assert build_request("Teh cat") == {"text": "Teh cat"}


def test_http_transport_posts_text_and_returns_body() -> None:
    session = FakeHttpSession(FakeResponse(200, {"suggestions": []}))
    transport = make_transport(session)

    assert transport.analyze("Teh cat") == {"suggestions": []}
    assert session.posts[0]["json"] == {"text": "Teh cat"}
    assert session.posts[0]["timeout"] is None


@pytest.mark.parametrize("status", [400, 500])
def test_http_transport_maps_failure_statuses(status: int) -> None:
    session = FakeHttpSession(FakeResponse(status, {"error": "Text is required"}))

    with pytest.raises(TransportError) as excinfo:
        make_transport(session).analyze("")

    assert excinfo.value.status == status
    assert excinfo.value.retryable is False
    assert "Text is required" in str(excinfo.value)


def test_http_transport_wraps_connection_errors() -> None:
    session = FakeHttpSession(error=requests.ConnectionError("refused"))

    with pytest.raises(TransportError) as excinfo:
        make_transport(session).analyze("Teh cat")

    assert excinfo.value.status is None


def test_http_transport_non_json_body_is_contract_error() -> None:
    session = FakeHttpSession(FakeResponse(200, None))

    with pytest.raises(ContractError):
        make_transport(session).analyze("Teh cat")
