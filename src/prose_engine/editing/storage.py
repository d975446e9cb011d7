"""Document persistence collaborator used by the editor session."""

from __future__ import annotations

from typing import Dict, Protocol

from prose_engine.errors import StorageError


class DocumentStore(Protocol):
    """Row store keyed by document id.

    ``save`` raises ``StorageError`` on failure; ``load`` raises it with
    ``not_found=True`` for unknown ids.
    """

    def save(self, document_id: str, content: str) -> None:
        ...

    def load(self, document_id: str) -> str:
        ...


class InMemoryDocumentStore:
    """Process-local store, mainly for tests and the demo app."""

    def __init__(self, documents: Dict[str, str] | None = None) -> None:
        self._documents: Dict[str, str] = dict(documents or {})
        self.save_count = 0

    def save(self, document_id: str, content: str) -> None:
        if not document_id:
            raise StorageError("Document id cannot be empty", document_id=document_id)
        self._documents[document_id] = content
        self.save_count += 1

    def load(self, document_id: str) -> str:
        try:
            return self._documents[document_id]
        except KeyError as exc:
            raise StorageError(
                f"Document '{document_id}' not found",
                document_id=document_id,
                not_found=True,
            ) from exc


__all__ = ["DocumentStore", "InMemoryDocumentStore"]
