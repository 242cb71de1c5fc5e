"""Highlight events emitted by classifiers.

A classifier describes a code block as a flat stream of three event kinds:

``HighlightStart``
: opens a named highlight scope.

``HighlightSource``
: a half-open ``[start, end)`` range of the source text. Offsets index the
  Python string, so slicing never re-encodes the payload.

``HighlightEnd``
: closes the innermost open scope.

The stream is well-nested and its source ranges cover the text exactly once,
in order. Foreign classifiers (for instance native bindings) usually hand back
plain mappings; :func:`coerce_event` turns those into the typed events.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from .exceptions import ProtocolViolationError


class HighlightEventType(Enum):
    """Discriminant of a highlight event."""

    START = "start"
    SOURCE = "source"
    END = "end"


@dataclass(frozen=True, slots=True)
class HighlightStart:
    """Open a highlight scope named ``highlight``."""

    highlight: str

    @property
    def type(self) -> HighlightEventType:
        return HighlightEventType.START


@dataclass(frozen=True, slots=True)
class HighlightSource:
    """Source span ``[start, end)`` of the normalized text."""

    start: int
    end: int

    @property
    def type(self) -> HighlightEventType:
        return HighlightEventType.SOURCE


@dataclass(frozen=True, slots=True)
class HighlightEnd:
    """Close the innermost open scope."""

    @property
    def type(self) -> HighlightEventType:
        return HighlightEventType.END


HighlightEvent = Union[HighlightStart, HighlightSource, HighlightEnd]

# Native bindings number the variants in declaration order.
_ORDINAL_TYPES = {
    0: HighlightEventType.START,
    1: HighlightEventType.SOURCE,
    2: HighlightEventType.END,
}


def _event_type(raw: Any) -> HighlightEventType:
    if isinstance(raw, HighlightEventType):
        return raw
    if isinstance(raw, bool):
        raise ProtocolViolationError(f"Unknown highlight event type: {raw!r}")
    if isinstance(raw, int) and raw in _ORDINAL_TYPES:
        return _ORDINAL_TYPES[raw]
    if isinstance(raw, str):
        try:
            return HighlightEventType(raw.strip().lower())
        except ValueError:
            pass
    raise ProtocolViolationError(f"Unknown highlight event type: {raw!r}")


def coerce_event(value: HighlightEvent | Mapping[str, Any]) -> HighlightEvent:
    """Return a typed highlight event from an event or its mapping form."""
    if isinstance(value, (HighlightStart, HighlightSource, HighlightEnd)):
        return value
    if not isinstance(value, Mapping):
        raise ProtocolViolationError(f"Unsupported highlight event: {value!r}")

    kind = _event_type(value.get("type"))
    if kind is HighlightEventType.START:
        highlight = value.get("highlight")
        if not isinstance(highlight, str):
            raise ProtocolViolationError("Start event without a highlight name")
        return HighlightStart(highlight)
    if kind is HighlightEventType.END:
        return HighlightEnd()

    span = value.get("range")
    if not isinstance(span, Mapping):
        span = value
    start, end = span.get("start"), span.get("end")
    if not isinstance(start, int) or not isinstance(end, int):
        raise ProtocolViolationError("Source event without an integer range")
    return HighlightSource(start, end)


__all__ = [
    "HighlightEnd",
    "HighlightEvent",
    "HighlightEventType",
    "HighlightSource",
    "HighlightStart",
    "coerce_event",
]
