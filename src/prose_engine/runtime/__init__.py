"""Runtime services: telemetry and configuration."""

from . import telemetry
from .config import EngineSettings

__all__ = ["EngineSettings", "telemetry"]
