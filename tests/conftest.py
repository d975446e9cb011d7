from __future__ import annotations

from concurrent.futures import Future
from typing import Any, Callable, Dict, List, Tuple

import pytest

from prose_engine.analyzer import AnalyzerClient


class FakeClock:
    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


class ManualExecutor:
    """Executor whose futures are resolved explicitly by the test.

    Futures start out running, like a request already on the wire; pass
    ``start=False`` to leave them queued so they can still be cancelled.
    """

    def __init__(self, *, start: bool = True) -> None:
        self.start = start
        self.calls: List[Tuple["Future[Any]", Callable[..., Any], Tuple[Any, ...]]] = []

    def submit(self, fn: Callable[..., Any], *args: Any) -> "Future[Any]":
        future: "Future[Any]" = Future()
        if self.start:
            future.set_running_or_notify_cancel()
        self.calls.append((future, fn, args))
        return future

    def complete(self, index: int, payload: Any) -> None:
        self.calls[index][0].set_result(payload)

    def fail(self, index: int, exc: BaseException) -> None:
        self.calls[index][0].set_exception(exc)

    def run(self, index: int) -> None:
        future, fn, args = self.calls[index]
        try:
            future.set_result(fn(*args))
        except Exception as exc:
            future.set_exception(exc)

    def shutdown(self, wait: bool = True) -> None:
        del wait


class ImmediateExecutor(ManualExecutor):
    """Runs every submitted call synchronously."""

    def submit(self, fn: Callable[..., Any], *args: Any) -> "Future[Any]":
        future = super().submit(fn, *args)
        self.run(len(self.calls) - 1)
        return future


class FakeTransport:
    """Returns canned payloads keyed by request text, or a default."""

    def __init__(self, default: Any = None) -> None:
        self.default = default if default is not None else {"suggestions": []}
        self.responses: Dict[str, Any] = {}
        self.requests: List[str] = []

    def analyze(self, text: str) -> Any:
        self.requests.append(text)
        result = self.responses.get(text, self.default)
        if isinstance(result, BaseException):
            raise result
        return result


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def manual_executor() -> ManualExecutor:
    return ManualExecutor()


@pytest.fixture
def queued_executor() -> ManualExecutor:
    return ManualExecutor(start=False)


@pytest.fixture
def immediate_executor() -> ImmediateExecutor:
    return ImmediateExecutor()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def make_client(clock: FakeClock, transport: FakeTransport) -> Callable[..., AnalyzerClient]:
    def factory(executor: Any, *, debounce_ms: int = 500) -> AnalyzerClient:
        return AnalyzerClient(
            transport, debounce_ms=debounce_ms, executor=executor, clock=clock
        )

    return factory
