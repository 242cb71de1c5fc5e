"""Open-scope stack and visible highlight resolution."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Union

from .exceptions import ProtocolViolationError


RESET_HIGHLIGHT = "none"
"""Highlight name classifiers push to hide every scope opened before it."""


class ResetMarker(Enum):
    """Stack entry that hides the scopes below it without closing them."""

    RESET = RESET_HIGHLIGHT

    def __repr__(self) -> str:
        return "RESET"


RESET = ResetMarker.RESET


@dataclass(frozen=True, slots=True)
class Scope:
    """A named highlight scope on the stack."""

    name: str


StackEntry = Union[Scope, ResetMarker]


def stack_entry(highlight: str | StackEntry) -> StackEntry:
    """Convert a raw highlight name into a stack entry."""
    if isinstance(highlight, (Scope, ResetMarker)):
        return highlight
    if highlight == RESET_HIGHLIGHT:
        return RESET
    return Scope(highlight)


def resolve_visible(stack: Iterable[str | StackEntry]) -> list[str]:
    """Return the scopes visible since the most recent reset, outer to inner.

    The stack is read from the top down and stops at the first reset marker.
    Repeated names are kept once, at their outermost position.
    """
    visible: list[str] = []
    for entry in reversed([stack_entry(item) for item in stack]):
        if entry is RESET:
            break
        visible.insert(0, entry.name)
    return list(dict.fromkeys(visible))


class HighlightStack:
    """Stack of open scopes maintained while replaying an event stream."""

    __slots__ = ("_entries",)

    def __init__(self, entries: Iterable[str | StackEntry] = ()) -> None:
        self._entries: list[StackEntry] = [stack_entry(item) for item in entries]

    def push(self, name: str) -> None:
        self._entries.append(Scope(name))

    def push_reset(self) -> None:
        self._entries.append(RESET)

    def pop(self) -> StackEntry:
        if not self._entries:
            raise ProtocolViolationError("Highlight end event without a matching start")
        return self._entries.pop()

    def visible(self) -> list[str]:
        return resolve_visible(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[StackEntry]:
        return iter(self._entries)

    def __repr__(self) -> str:
        return f"HighlightStack({self._entries!r})"


__all__ = [
    "RESET",
    "RESET_HIGHLIGHT",
    "HighlightStack",
    "ResetMarker",
    "Scope",
    "StackEntry",
    "resolve_visible",
    "stack_entry",
]
