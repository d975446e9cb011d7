"""Parsing for the analyzer request/response contract.

Request: ``{"text": str}``.
Response: ``{"suggestions": [{"type", "message", "replacement", "start", "end"}]}``.
"""

from __future__ import annotations

from typing import Any, Mapping

from prose_engine.errors import ContractError
from prose_engine.suggestions import RawSuggestion, SuggestionKind

REQUIRED_FIELDS = ("type", "message", "replacement", "start", "end")


def build_request(text: str) -> dict[str, str]:
    return {"text": text}


def parse_response(payload: Any) -> list[RawSuggestion]:
    """Turn a decoded response body into raw suggestions.

    Shape problems fail the whole batch with ``ContractError``. Offsets are
    passed through untouched; range checks belong to the suggestion set.
    """

    if not isinstance(payload, Mapping):
        raise ContractError("Analyzer response is not an object", payload=payload)
    entries = payload.get("suggestions")
    if not isinstance(entries, list):
        raise ContractError("Analyzer response 'suggestions' is not a list", payload=payload)

    parsed: list[RawSuggestion] = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, Mapping):
            raise ContractError(f"Suggestion #{index} is not an object", payload=payload)
        missing = [name for name in REQUIRED_FIELDS if name not in entry]
        if missing:
            raise ContractError(
                f"Suggestion #{index} is missing {', '.join(missing)}", payload=payload
            )
        message, replacement = entry["message"], entry["replacement"]
        if not isinstance(message, str) or not isinstance(replacement, str):
            raise ContractError(
                f"Suggestion #{index} has non-string message/replacement",
                payload=payload,
            )
        parsed.append(
            RawSuggestion(
                kind=SuggestionKind.parse(entry["type"]),
                message=message,
                replacement=replacement,
                start=entry["start"],
                end=entry["end"],
            )
        )
    return parsed


__all__ = ["REQUIRED_FIELDS", "build_request", "parse_response"]
