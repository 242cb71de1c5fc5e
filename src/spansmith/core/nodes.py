"""Compiled nodes spliced into the document in place of code text."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True, slots=True)
class TextNode:
    """Bare text leaf."""

    text: str


@dataclass(frozen=True, slots=True)
class SpanNode:
    """Element wrapping a single text leaf.

    ``highlight`` is the rendered class (the innermost visible scope) or
    ``None`` for a plain wrapper. ``scopes`` keeps every visible scope from
    outer to inner.
    """

    text: str
    highlight: str | None = None
    scopes: tuple[str, ...] = ()


CompiledNode = Union[TextNode, SpanNode]


def joined_text(nodes: Iterable[CompiledNode]) -> str:
    """Concatenate the text carried by ``nodes``."""
    return "".join(node.text for node in nodes)


__all__ = ["CompiledNode", "SpanNode", "TextNode", "joined_text"]
