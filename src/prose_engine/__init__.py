"""UI-agnostic suggestion and positional-text reconciliation engine."""

__all__ = [
    "adapters",
    "analyzer",
    "buffer",
    "editing",
    "errors",
    "render",
    "runtime",
    "suggestions",
]

__version__ = "0.1.0"
