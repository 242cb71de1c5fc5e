"""Render syntax-highlighted code blocks inside HTML documents."""

from __future__ import annotations

from spansmith.adapters.classifiers import (
    Classifier,
    ClassifierFactory,
    PygmentsClassifier,
    pygments_classifier_factory,
)
from spansmith.adapters.html import HtmlHighlighter
from spansmith.core.codeblock import compile_code_block
from spansmith.core.compiler import compile_events, trim_trailing_newline
from spansmith.core.config import HighlightConfig, load_config
from spansmith.core.context import DocumentState, HighlightContext
from spansmith.core.diagnostics import DiagnosticEmitter, LoggingEmitter, NullEmitter
from spansmith.core.events import HighlightEnd, HighlightEvent, HighlightSource, HighlightStart
from spansmith.core.exceptions import (
    ClassificationError,
    HighlightingError,
    ProtocolViolationError,
    QueryResolutionError,
)
from spansmith.core.lifecycle import HighlighterLifecycle
from spansmith.core.nodes import CompiledNode, SpanNode, TextNode
from spansmith.core.normalize import normalize_indentation
from spansmith.core.rules import renders
from spansmith.core.stack import resolve_visible
from spansmith.version import get_version


__version__ = get_version()

__all__ = [
    "ClassificationError",
    "Classifier",
    "ClassifierFactory",
    "CompiledNode",
    "DiagnosticEmitter",
    "DocumentState",
    "HighlightConfig",
    "HighlightContext",
    "HighlightEnd",
    "HighlightEvent",
    "HighlightSource",
    "HighlightStart",
    "HighlighterLifecycle",
    "HighlightingError",
    "HtmlHighlighter",
    "LoggingEmitter",
    "NullEmitter",
    "ProtocolViolationError",
    "PygmentsClassifier",
    "QueryResolutionError",
    "SpanNode",
    "TextNode",
    "__version__",
    "compile_code_block",
    "compile_events",
    "load_config",
    "normalize_indentation",
    "pygments_classifier_factory",
    "renders",
    "resolve_visible",
    "trim_trailing_newline",
]
