"""Pygments-backed classifier producing highlight event streams."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
import logging
from pathlib import Path
from threading import Lock

from pygments.lexer import Lexer
from pygments.lexers import ClassNotFound, get_lexer_by_name, load_lexer_from_file

from spansmith.core.events import HighlightEnd, HighlightEvent, HighlightSource, HighlightStart
from spansmith.core.exceptions import ClassificationError
from spansmith.core.stack import RESET_HIGHLIGHT

from .queries import HIGHLIGHT_NAMES, QueryTable, load_query_table


logger = logging.getLogger(__name__)

GRAMMAR_CLASS_NAME = "CustomLexer"
MAX_INJECTION_DEPTH = 8


def _iter_grammar_files(paths: Iterable[Path]) -> Iterable[Path]:
    for path in paths:
        if path.is_dir():
            yield from sorted(path.glob("*.py"))
        elif path.suffix == ".py" and path.is_file():
            yield path


def load_grammar_lexers(paths: Sequence[Path]) -> dict[str, Lexer]:
    """Load custom lexers keyed by their aliases and file stem.

    Grammar files define a ``CustomLexer`` class. A file that fails to load is
    logged and skipped so the remaining grammars stay usable.
    """
    lexers: dict[str, Lexer] = {}
    for path in _iter_grammar_files(Path(item) for item in paths):
        try:
            lexer = load_lexer_from_file(str(path), GRAMMAR_CLASS_NAME, stripnl=False)
        except (ClassNotFound, OSError) as exc:
            logger.warning("Failed to load grammar %s: %s", path, exc)
            continue
        for alias in (path.stem, *getattr(lexer, "aliases", ())):
            lexers.setdefault(alias.lower(), lexer)
    return lexers


class PygmentsClassifier:
    """Classify source text with Pygments lexers and YAML query tables."""

    def __init__(
        self,
        grammar_paths: Sequence[Path] = (),
        query_paths: Sequence[Path] = (),
        *,
        highlight_names: Iterable[str] | None = None,
    ) -> None:
        self.grammar_paths = tuple(Path(path) for path in grammar_paths)
        self.query_paths = tuple(Path(path) for path in query_paths)
        self.highlight_names = frozenset(highlight_names or HIGHLIGHT_NAMES)
        self._grammars = load_grammar_lexers(self.grammar_paths)
        self._lexers: dict[str, Lexer] = {}
        self._tables: dict[str, QueryTable] = {}
        self._lock = Lock()

    def __repr__(self) -> str:
        return (
            f"PygmentsClassifier(grammar_paths={list(self.grammar_paths)!r}, "
            f"query_paths={list(self.query_paths)!r})"
        )

    @property
    def languages(self) -> list[str]:
        """Languages provided by the loaded grammar files."""
        return sorted(self._grammars)

    def lexer_for(self, language: str) -> Lexer:
        """Return the lexer registered for ``language``."""
        key = language.strip().lower()
        with self._lock:
            lexer = self._lexers.get(key)
            if lexer is not None:
                return lexer
            lexer = self._grammars.get(key)
            if lexer is None:
                try:
                    lexer = get_lexer_by_name(key, stripnl=False)
                except ClassNotFound as exc:
                    raise ClassificationError(f"Unknown language {language}") from exc
            self._lexers[key] = lexer
            return lexer

    def supports(self, language: str) -> bool:
        """Return whether a lexer is available for ``language``."""
        try:
            self.lexer_for(language)
        except ClassificationError:
            return False
        return True

    def table_for(self, language: str) -> QueryTable:
        """Return the merged query table for ``language``."""
        key = language.strip().lower()
        with self._lock:
            table = self._tables.get(key)
            if table is None:
                table = load_query_table(key, self.query_paths, recognized=self.highlight_names)
                self._tables[key] = table
            return table

    def highlight(self, source: str, language: str) -> list[HighlightEvent]:
        """Return the highlight events describing ``source``."""
        return list(self._classify(source, language, offset=0, depth=0))

    def _classify(
        self, source: str, language: str, *, offset: int, depth: int
    ) -> Iterable[HighlightEvent]:
        lexer = self.lexer_for(language)
        table = self.table_for(language)

        try:
            tokens = list(lexer.get_tokens_unprocessed(source))
        except Exception as exc:
            raise ClassificationError(f"Pygments failed to lex {language} source") from exc

        # Some lexers report indices relative to a sub-match; positions follow the values.
        position = offset
        for _, ttype, value in tokens:
            if not value:
                continue
            start = position
            position += len(value)
            highlight = table.highlight_for(ttype)
            injected = table.injection_for(ttype)

            if highlight is not None:
                yield HighlightStart(highlight)
            if injected is not None and depth < MAX_INJECTION_DEPTH and self.supports(injected):
                yield HighlightStart(RESET_HIGHLIGHT)
                yield from self._classify(value, injected, offset=start, depth=depth + 1)
                yield HighlightEnd()
            else:
                yield HighlightSource(start, start + len(value))
            if highlight is not None:
                yield HighlightEnd()


def pygments_classifier_factory(
    grammar_paths: Sequence[Path], query_paths: Sequence[Path]
) -> PygmentsClassifier:
    """Classifier factory used by default by the lifecycle policy."""
    return PygmentsClassifier(grammar_paths, query_paths)


__all__ = [
    "GRAMMAR_CLASS_NAME",
    "MAX_INJECTION_DEPTH",
    "PygmentsClassifier",
    "load_grammar_lexers",
    "pygments_classifier_factory",
]
