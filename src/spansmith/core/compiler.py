"""Replay highlight events into compiled nodes.

The compiler walks a classifier's event stream once. ``Start`` and ``End``
events maintain a :class:`~spansmith.core.stack.HighlightStack`; every
``Source`` event becomes exactly one node whose class is the innermost scope
visible since the last reset marker. Streams that break the nesting or
coverage contract abort the call with :class:`ProtocolViolationError` so no
partially highlighted block ever reaches the document.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from .events import HighlightEnd, HighlightEvent, HighlightSource, HighlightStart, coerce_event
from .exceptions import ProtocolViolationError
from .nodes import CompiledNode, SpanNode, TextNode
from .stack import RESET_HIGHLIGHT, HighlightStack


def compile_events(
    events: Iterable[HighlightEvent | Mapping[str, Any]],
    source: str,
    *,
    mapping: Mapping[str, str] | None = None,
    wrap_plain: bool = True,
) -> list[CompiledNode]:
    """Compile an event stream over ``source`` into nodes.

    ``mapping`` renames highlights as they are opened; the reset marker is
    never renamed. Plain text is wrapped in a class-less :class:`SpanNode`
    unless ``wrap_plain`` is false, in which case a :class:`TextNode` is used.
    """
    renames = mapping or {}
    stack = HighlightStack()
    nodes: list[CompiledNode] = []
    cursor = 0

    for raw_event in events:
        event = coerce_event(raw_event)

        if isinstance(event, HighlightStart):
            if event.highlight == RESET_HIGHLIGHT:
                stack.push_reset()
            else:
                stack.push(renames.get(event.highlight, event.highlight))
            continue

        if isinstance(event, HighlightEnd):
            stack.pop()
            continue

        _check_range(event, cursor, len(source))
        cursor = event.end
        if event.start == event.end:
            continue

        text = source[event.start : event.end]
        visible = stack.visible()
        if visible:
            nodes.append(SpanNode(text, highlight=visible[-1], scopes=tuple(visible)))
        elif wrap_plain:
            nodes.append(SpanNode(text))
        else:
            nodes.append(TextNode(text))

    if len(stack):
        raise ProtocolViolationError(f"Highlight stream ended with {len(stack)} open scope(s)")
    if cursor != len(source):
        raise ProtocolViolationError(
            f"Highlight stream covers {cursor} of {len(source)} source characters"
        )
    return nodes


def _check_range(event: HighlightSource, cursor: int, length: int) -> None:
    if event.end < event.start or event.end > length:
        raise ProtocolViolationError(
            f"Source range [{event.start}, {event.end}) is outside [0, {length})"
        )
    if event.start != cursor:
        kind = "overlaps" if event.start < cursor else "leaves a gap after"
        raise ProtocolViolationError(
            f"Source range [{event.start}, {event.end}) {kind} offset {cursor}"
        )


def trim_trailing_newline(nodes: Sequence[CompiledNode]) -> list[CompiledNode]:
    """Drop the final node when it only carries a single newline."""
    trimmed = list(nodes)
    if trimmed and trimmed[-1].text == "\n":
        trimmed.pop()
    return trimmed


__all__ = ["compile_events", "trim_trailing_newline"]
