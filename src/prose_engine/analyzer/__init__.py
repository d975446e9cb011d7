"""Analyzer contract, transport and the debounced client."""

from .client import (
    AnalysisOutcome,
    AnalysisTicket,
    AnalyzerClient,
    AnalyzerState,
    PendingAnalysis,
)
from .contract import REQUIRED_FIELDS, build_request, parse_response
from .transport import AnalyzerTransport, HttpAnalyzerTransport

__all__ = [
    "AnalysisOutcome",
    "AnalysisTicket",
    "AnalyzerClient",
    "AnalyzerState",
    "AnalyzerTransport",
    "HttpAnalyzerTransport",
    "PendingAnalysis",
    "REQUIRED_FIELDS",
    "build_request",
    "parse_response",
]
