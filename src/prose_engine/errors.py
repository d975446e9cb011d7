"""Error taxonomy shared by the analyzer client, suggestion set and editor."""

from __future__ import annotations

from typing import Any, Optional


class ProseEngineError(RuntimeError):
    """Base class for every recoverable engine error."""


class SpanValidationError(ProseEngineError):
    """An analyzer span does not fit the buffer version it claims to describe."""

    def __init__(self, message: str, *, start: Any = None, end: Any = None) -> None:
        super().__init__(message)
        self.start = start
        self.end = end


class ContractError(ProseEngineError):
    """The analyzer response does not match the request/response contract."""

    def __init__(self, message: str, *, payload: Any = None) -> None:
        super().__init__(message)
        self.payload = payload


class StaleResponse(ProseEngineError):
    """An analyzer result arrived for a request that is no longer current."""

    def __init__(self, message: str, *, version: int, current_version: int) -> None:
        super().__init__(message)
        self.version = version
        self.current_version = current_version


class StaleSuggestion(ProseEngineError):
    """A suggestion was applied against a buffer version it was not computed for."""

    def __init__(
        self,
        message: str,
        *,
        suggestion_id: str,
        set_version: int,
        buffer_version: int,
    ) -> None:
        super().__init__(message)
        self.suggestion_id = suggestion_id
        self.set_version = set_version
        self.buffer_version = buffer_version


class TransportError(ProseEngineError):
    """The analyzer could not be reached or answered with a failure status."""

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.retryable = retryable


class StorageError(ProseEngineError):
    """Raised by document stores on save/load failures."""

    def __init__(self, message: str, *, document_id: str, not_found: bool = False) -> None:
        super().__init__(message)
        self.document_id = document_id
        self.not_found = not_found


__all__ = [
    "ProseEngineError",
    "SpanValidationError",
    "ContractError",
    "StaleResponse",
    "StaleSuggestion",
    "TransportError",
    "StorageError",
]
