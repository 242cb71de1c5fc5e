"""Core primitives of the highlighting pipeline."""

from __future__ import annotations

from .codeblock import compile_code_block
from .compiler import compile_events, trim_trailing_newline
from .config import HighlightConfig, load_config
from .events import (
    HighlightEnd,
    HighlightEvent,
    HighlightEventType,
    HighlightSource,
    HighlightStart,
    coerce_event,
)
from .exceptions import (
    ClassificationError,
    HighlightingError,
    ProtocolViolationError,
    QueryResolutionError,
)
from .lifecycle import HighlighterLifecycle
from .nodes import CompiledNode, SpanNode, TextNode
from .normalize import normalize_indentation
from .stack import RESET, RESET_HIGHLIGHT, HighlightStack, Scope, resolve_visible


__all__ = [
    "RESET",
    "RESET_HIGHLIGHT",
    "ClassificationError",
    "CompiledNode",
    "HighlightConfig",
    "HighlightEnd",
    "HighlightEvent",
    "HighlightEventType",
    "HighlightSource",
    "HighlightStack",
    "HighlightStart",
    "HighlighterLifecycle",
    "HighlightingError",
    "ProtocolViolationError",
    "QueryResolutionError",
    "Scope",
    "SpanNode",
    "TextNode",
    "coerce_event",
    "compile_code_block",
    "compile_events",
    "load_config",
    "normalize_indentation",
    "resolve_visible",
    "trim_trailing_newline",
]
