"""Transports that carry analysis requests to the remote analyzer."""

from __future__ import annotations

from typing import Any, Optional, Protocol

import requests

from prose_engine.errors import ContractError, TransportError

from .contract import build_request


class AnalyzerTransport(Protocol):
    """Blocking ``Analyze(text)`` call returning the decoded response body."""

    def analyze(self, text: str) -> Any:
        ...


class HttpAnalyzerTransport:
    """POSTs ``{"text": ...}`` as JSON and returns the decoded body."""

    def __init__(
        self,
        url: str,
        *,
        timeout_s: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.url = url
        self.timeout_s = timeout_s
        self._session = session or requests.Session()

    def analyze(self, text: str) -> Any:
        try:
            resp = self._session.post(
                self.url, json=build_request(text), timeout=self.timeout_s
            )
        except requests.Timeout as exc:
            raise TransportError(f"Analyzer timed out: {exc}", retryable=True) from exc
        except requests.RequestException as exc:
            raise TransportError(f"Analyzer unreachable: {exc}", retryable=True) from exc

        if resp.status_code >= 400:
            raise TransportError(
                _error_message(resp), status=resp.status_code, retryable=False
            )

        try:
            return resp.json()
        except ValueError as exc:
            raise ContractError("Analyzer returned a non-JSON body") from exc

    def close(self) -> None:
        self._session.close()


def _error_message(resp: requests.Response) -> str:
    detail = ""
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and isinstance(body.get("error"), str):
        detail = body["error"]
    if resp.status_code == 400:
        return f"Analyzer rejected the request: {detail or 'bad request'}"
    return f"Analyzer failed with HTTP {resp.status_code}: {detail or 'upstream error'}"


__all__ = ["AnalyzerTransport", "HttpAnalyzerTransport"]
