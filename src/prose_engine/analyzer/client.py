"""Debounced analyzer client with version-checked result delivery.

States: ``idle -> pending -> (applying | stale | failed)``. Only the most
recently dispatched request is live; anything older is marked stale and its
result is dropped when it lands, whatever order responses arrive in.
"""

from __future__ import annotations

import time
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from prose_engine.buffer import TextBuffer
from prose_engine.errors import (
    ContractError,
    ProseEngineError,
    StaleResponse,
    TransportError,
)
from prose_engine.runtime import telemetry
from prose_engine.runtime.config import DEFAULT_DEBOUNCE_MS
from prose_engine.suggestions import SuggestionSet

from .contract import parse_response
from .transport import AnalyzerTransport


class AnalyzerState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    APPLYING = "applying"
    STALE = "stale"
    FAILED = "failed"


@dataclass
class PendingAnalysis:
    """Armed debounce timer for the latest edit."""

    deadline: float
    version: int
    text: str
    generation: int


@dataclass
class AnalysisTicket:
    """A dispatched request and the buffer version it was computed against."""

    generation: int
    version: int
    future: "Future[object]"
    stale: bool = False


@dataclass(slots=True)
class AnalysisOutcome:
    """Result handed back to the session for one resolved request."""

    state: AnalyzerState
    version: int
    suggestions: Optional[SuggestionSet] = None
    error: Optional[ProseEngineError] = None

    @property
    def applied(self) -> bool:
        return self.state is AnalyzerState.APPLYING and self.suggestions is not None


class AnalyzerClient:
    """Owns the debounce timer and the in-flight analyzer requests.

    The client never mutates session state. ``poll`` returns outcomes; the
    caller commits the ones marked ``applying``. Network calls run on
    ``executor``; completion is only observed from ``poll`` so results are
    applied on the caller's thread.
    """

    def __init__(
        self,
        transport: AnalyzerTransport,
        *,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
        executor: Optional[Executor] = None,
        clock: Callable[[], float] = time.monotonic,
        min_chars: int = 1,
        logger_name: str | None = None,
    ) -> None:
        if debounce_ms < 0:
            raise ValueError("debounce_ms cannot be negative")
        self.transport = transport
        self.debounce_ms = debounce_ms
        self.min_chars = min_chars
        self._clock = clock
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=2, thread_name_prefix="prose-analyzer"
        )
        self._logger_name = logger_name or "prose_engine.analyzer"
        self._timer: Optional[PendingAnalysis] = None
        self._inflight: List[AnalysisTicket] = []
        self._live: Optional[AnalysisTicket] = None
        self._generation = 0
        self._last_state = AnalyzerState.IDLE

    @property
    def state(self) -> AnalyzerState:
        if self._live is not None:
            return AnalyzerState.PENDING
        return self._last_state

    @property
    def scheduled(self) -> bool:
        return self._timer is not None

    @property
    def inflight_count(self) -> int:
        return len(self._inflight)

    def note_edit(self, version: int, text: str, *, now: Optional[float] = None) -> None:
        """Restart the debounce window for ``version`` and supersede the live request."""

        self._supersede_live("edit")
        self._generation += 1
        current = self._clock() if now is None else now
        self._timer = PendingAnalysis(
            deadline=current + self.debounce_ms / 1000.0,
            version=version,
            text=text,
            generation=self._generation,
        )
        telemetry.record_event(
            "analyzer.scheduled",
            level="debug",
            data={"version": version, "generation": self._generation},
            logger_name=self._logger_name,
        )

    def poll(
        self, buffer: TextBuffer, *, now: Optional[float] = None
    ) -> List[AnalysisOutcome]:
        """Fire a due debounce timer and collect every finished request."""

        outcomes: List[AnalysisOutcome] = []
        current = self._clock() if now is None else now
        timer = self._timer
        if timer is not None and timer.deadline <= current:
            self._timer = None
            cleared = self._dispatch(timer, buffer)
            if cleared is not None:
                outcomes.append(cleared)

        finished = [ticket for ticket in self._inflight if ticket.future.done()]
        for ticket in finished:
            self._inflight.remove(ticket)
            outcomes.append(self._resolve(ticket, buffer))
        return outcomes

    def flush(self, buffer: TextBuffer) -> List[AnalysisOutcome]:
        """Skip the rest of the debounce window and poll immediately."""

        if self._timer is None:
            self._timer = PendingAnalysis(
                deadline=0.0,
                version=buffer.version,
                text=buffer.text,
                generation=self._generation,
            )
        else:
            self._timer.deadline = 0.0
        return self.poll(buffer, now=self._clock())

    def shutdown(self) -> None:
        self._timer = None
        self._supersede_live("shutdown")
        if self._owns_executor:
            self._executor.shutdown(wait=False)

    def _supersede_live(self, reason: str) -> None:
        live = self._live
        if live is None:
            return
        live.stale = True
        # Only succeeds while the call is still queued on the executor.
        live.future.cancel()
        self._live = None
        telemetry.record_event(
            "analyzer.superseded",
            level="debug",
            data={"version": live.version, "generation": live.generation, "reason": reason},
            logger_name=self._logger_name,
        )

    def _dispatch(
        self, timer: PendingAnalysis, buffer: TextBuffer
    ) -> Optional[AnalysisOutcome]:
        if timer.version != buffer.version:
            # A newer edit skipped note_edit; nothing current to analyze.
            self._last_state = AnalyzerState.STALE
            return None

        self._supersede_live("dispatch")
        if len(timer.text.strip()) < self.min_chars:
            self._last_state = AnalyzerState.APPLYING
            return AnalysisOutcome(
                state=AnalyzerState.APPLYING,
                version=timer.version,
                suggestions=SuggestionSet.empty(timer.version),
            )

        future = self._executor.submit(self.transport.analyze, timer.text)
        ticket = AnalysisTicket(
            generation=timer.generation, version=timer.version, future=future
        )
        self._inflight.append(ticket)
        self._live = ticket
        telemetry.record_event(
            "analyzer.dispatched",
            data={"version": ticket.version, "chars": len(timer.text)},
            logger_name=self._logger_name,
        )
        return None

    def _resolve(self, ticket: AnalysisTicket, buffer: TextBuffer) -> AnalysisOutcome:
        is_live = ticket is self._live
        if is_live:
            self._live = None

        if ticket.stale or not is_live:
            return self._stale(
                ticket,
                StaleResponse(
                    "Response superseded by a newer request",
                    version=ticket.version,
                    current_version=buffer.version,
                ),
            )

        with telemetry.span(
            "analyzer::resolve",
            logger_name=self._logger_name,
            component="analyzer",
            metadata={"version": ticket.version},
        ):
            try:
                payload = ticket.future.result()
                raw = parse_response(payload)
                suggestions = SuggestionSet.replace_all(
                    buffer, ticket.version, raw, logger_name=self._logger_name
                )
            except StaleResponse as exc:
                return self._stale(ticket, exc)
            except (ContractError, TransportError) as exc:
                return self._failed(ticket, exc)
            except Exception as exc:
                return self._failed(ticket, TransportError(f"Analyzer call failed: {exc}"))

        self._last_state = AnalyzerState.APPLYING
        telemetry.record_event(
            "analyzer.applied",
            data={"version": ticket.version, "count": len(suggestions)},
            logger_name=self._logger_name,
        )
        return AnalysisOutcome(
            state=AnalyzerState.APPLYING, version=ticket.version, suggestions=suggestions
        )

    def _stale(self, ticket: AnalysisTicket, error: StaleResponse) -> AnalysisOutcome:
        if self._live is None:
            self._last_state = AnalyzerState.STALE
        telemetry.record_event(
            "analyzer.stale",
            level="debug",
            data={"version": ticket.version, "current_version": error.current_version},
            logger_name=self._logger_name,
        )
        return AnalysisOutcome(state=AnalyzerState.STALE, version=ticket.version, error=error)

    def _failed(self, ticket: AnalysisTicket, error: ProseEngineError) -> AnalysisOutcome:
        if self._live is None:
            self._last_state = AnalyzerState.FAILED
        telemetry.record_event(
            "analyzer.failed",
            level="warning",
            data={"version": ticket.version, "error": str(error)},
            logger_name=self._logger_name,
        )
        return AnalysisOutcome(state=AnalyzerState.FAILED, version=ticket.version, error=error)


__all__ = [
    "AnalysisOutcome",
    "AnalysisTicket",
    "AnalyzerClient",
    "AnalyzerState",
    "PendingAnalysis",
]
