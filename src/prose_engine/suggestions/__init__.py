"""Suggestion types and the version-tagged suggestion set."""

from .models import CONTEXT_RADIUS, RawSuggestion, Suggestion, SuggestionKind
from .suggestion_set import RejectedSuggestion, SuggestionSet

__all__ = [
    "CONTEXT_RADIUS",
    "RawSuggestion",
    "RejectedSuggestion",
    "Suggestion",
    "SuggestionKind",
    "SuggestionSet",
]
