"""Classifier interfaces consumed by the highlighting core."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from spansmith.core.events import HighlightEvent


@runtime_checkable
class Classifier(Protocol):
    """Grammar-based classifier turning source text into highlight events."""

    def highlight(
        self, source: str, language: str
    ) -> Sequence[HighlightEvent | Mapping[str, Any]]: ...


class ClassifierFactory(Protocol):
    """Build a classifier from grammar sources and ordered query sources."""

    def __call__(
        self, grammar_paths: Sequence[Path], query_paths: Sequence[Path]
    ) -> Classifier: ...


__all__ = ["Classifier", "ClassifierFactory"]
