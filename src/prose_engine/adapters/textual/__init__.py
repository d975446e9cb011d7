"""Textual adapter for the writing-assistant engine."""

from .controller import EditorAdapter, SessionHooks

__all__ = ["EditorAdapter", "SessionHooks"]
