"""Context primitives shared by document handlers."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .config import HighlightConfig
from .diagnostics import DiagnosticEmitter, NullEmitter
from .lifecycle import HighlighterLifecycle


EnterHook = Callable[[Any], bool]
LeaveHook = Callable[[Any], None]
QueryResolver = Callable[[str], "Path | str | None"]


@dataclass(slots=True)
class DocumentState:
    """Outcome of highlighting the code blocks of one document."""

    highlighted: int = 0
    skipped: int = 0
    failed: int = 0
    languages: list[str] = field(default_factory=list)
    failures: list[dict[str, Any]] = field(default_factory=list)

    def record_highlight(self, language: str) -> None:
        self.highlighted += 1
        if language not in self.languages:
            self.languages.append(language)

    def record_skip(self) -> None:
        self.skipped += 1

    def record_failure(self, language: str, reason: str | None) -> None:
        self.failed += 1
        self.failures.append({"language": language, "reason": reason})


@dataclass
class HighlightContext:
    """Shared context passed to every handler during a document walk."""

    config: HighlightConfig
    lifecycle: HighlighterLifecycle
    document: Any
    state: DocumentState = field(default_factory=DocumentState)
    emitter: DiagnosticEmitter = field(default_factory=NullEmitter)
    enter: EnterHook | None = None
    leave: LeaveHook | None = None
    resolve_query_path: QueryResolver | None = None

    _processed_nodes: set[int] = field(default_factory=set, init=False)
    _skip_children: set[int] = field(default_factory=set, init=False)

    def mark_processed(self, node: Any) -> None:
        """Flag a node as already transformed."""
        self._processed_nodes.add(id(node))

    def is_processed(self, node: Any) -> bool:
        return id(node) in self._processed_nodes

    def suppress_children(self, node: Any) -> None:
        """Prevent the walker from visiting the children of ``node``."""
        self._skip_children.add(id(node))

    def should_skip_children(self, node: Any) -> bool:
        return id(node) in self._skip_children


__all__ = ["DocumentState", "EnterHook", "HighlightContext", "LeaveHook", "QueryResolver"]
