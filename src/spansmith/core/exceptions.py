"""Exception hierarchy for the highlighting pipeline."""

from __future__ import annotations


class HighlightingError(RuntimeError):
    """Base exception for code highlighting failures."""


class ClassificationError(HighlightingError):
    """Raised when the classifier cannot produce events for a code block."""


class ProtocolViolationError(HighlightingError):
    """Raised when a highlight event stream breaks the nesting or coverage contract."""


class QueryResolutionError(HighlightingError):
    """Raised when a call-scoped query reference cannot be resolved to a path."""


def exception_messages(exc: BaseException) -> list[str]:
    """Return the first line of every message along an exception chain."""
    messages: list[str] = []
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        lines = str(current).strip().splitlines()
        if lines and lines[0].strip():
            messages.append(lines[0].strip())
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the innermost message of an exception chain."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None


__all__ = [
    "ClassificationError",
    "HighlightingError",
    "ProtocolViolationError",
    "QueryResolutionError",
    "exception_hint",
    "exception_messages",
]
