from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any

import pytest

from spansmith.core.events import HighlightEvent


class StaticClassifier:
    """Classifier returning a fixed event stream and recording its calls."""

    def __init__(self, events: Sequence[HighlightEvent | Mapping[str, Any]] = ()) -> None:
        self.events = list(events)
        self.calls: list[tuple[str, str]] = []

    def highlight(self, source: str, language: str) -> list[Any]:
        self.calls.append((source, language))
        return list(self.events)


class RecordingEmitter:
    debug_enabled = False

    def __init__(self) -> None:
        self.warnings: list[str] = []
        self.errors: list[str] = []
        self.events: list[tuple[str, dict[str, Any]]] = []

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        self.warnings.append(message)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        self.errors.append(message)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        self.events.append((name, dict(payload)))

    def names(self) -> list[str]:
        return [name for name, _ in self.events]


@pytest.fixture
def emitter() -> RecordingEmitter:
    return RecordingEmitter()


@pytest.fixture
def static_classifier() -> Callable[..., StaticClassifier]:
    """Build classifiers replaying a fixed event stream."""
    return StaticClassifier


@pytest.fixture
def write_query(tmp_path: Path) -> Callable[..., Path]:
    """Write ``<root>/<language>/highlights.yml`` and return the query root."""

    def _write(language: str, body: str, root: str = "queries") -> Path:
        directory = tmp_path / root / language
        directory.mkdir(parents=True, exist_ok=True)
        (directory / "highlights.yml").write_text(body, encoding="utf-8")
        return tmp_path / root

    return _write
