"""Edit reconciliation, the editor session and its collaborators."""

from .reconciler import ReconcileResult, apply_suggestion, apply_text_edit
from .session import EditorSession, Notification, SessionSnapshot
from .stats import DocumentStats, compute_stats
from .storage import DocumentStore, InMemoryDocumentStore

__all__ = [
    "DocumentStats",
    "DocumentStore",
    "EditorSession",
    "InMemoryDocumentStore",
    "Notification",
    "ReconcileResult",
    "SessionSnapshot",
    "apply_suggestion",
    "apply_text_edit",
    "compute_stats",
]
