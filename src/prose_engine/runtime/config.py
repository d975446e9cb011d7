"""Environment-driven settings for the engine."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

ENV_PREFIX = "PROSE_ENGINE_"

DEFAULT_ANALYZER_URL = "http://localhost:3001/api/analyze-text"
DEFAULT_DEBOUNCE_MS = 500
DEFAULT_WORDS_PER_MINUTE = 200


def env_value(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def env_flag(name: str, default: bool) -> bool:
    raw = env_value(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, fallback: int) -> int:
    raw = env_value(name)
    if raw is None:
        return fallback
    try:
        return int(raw)
    except ValueError:
        return fallback


def _env_float(name: str) -> Optional[float]:
    raw = env_value(name)
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        return None


@dataclass(slots=True)
class EngineSettings:
    """Tunables shared by the analyzer client and the editor session."""

    analyzer_url: str = DEFAULT_ANALYZER_URL
    debounce_ms: int = DEFAULT_DEBOUNCE_MS
    # None leaves the timeout to the transport library.
    analyzer_timeout_s: Optional[float] = None
    words_per_minute: int = DEFAULT_WORDS_PER_MINUTE
    min_analysis_chars: int = 1
    # Save after every successful analysis when a store is attached.
    autosave: bool = True

    def __post_init__(self) -> None:
        if self.debounce_ms < 0:
            raise ValueError("debounce_ms cannot be negative")
        if self.words_per_minute <= 0:
            raise ValueError("words_per_minute must be positive")

    @classmethod
    def from_env(cls) -> "EngineSettings":
        debounce = _env_int("DEBOUNCE_MS", DEFAULT_DEBOUNCE_MS)
        wpm = _env_int("WORDS_PER_MINUTE", DEFAULT_WORDS_PER_MINUTE)
        return cls(
            analyzer_url=env_value("ANALYZER_URL") or DEFAULT_ANALYZER_URL,
            debounce_ms=debounce if debounce >= 0 else DEFAULT_DEBOUNCE_MS,
            analyzer_timeout_s=_env_float("ANALYZER_TIMEOUT"),
            words_per_minute=wpm if wpm > 0 else DEFAULT_WORDS_PER_MINUTE,
            autosave=env_flag("AUTOSAVE", True),
        )


__all__ = ["EngineSettings", "ENV_PREFIX", "env_flag", "env_value"]
