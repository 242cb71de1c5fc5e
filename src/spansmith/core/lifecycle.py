"""Ownership and reuse policy for classifier instances.

Building a classifier loads grammars and compiles queries, so one shared
instance serves every code block that only needs the base sources. A block
that brings its own query sources gets a transient classifier built from the
base sources followed by the extra ones, which lets the extra queries extend
or override the base. Transient classifiers are dropped after the call unless
``cache_transient`` is enabled, in which case they are kept under the sorted
set of extra sources.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path
from threading import Lock
from typing import TYPE_CHECKING

from .diagnostics import DiagnosticEmitter, NullEmitter


if TYPE_CHECKING:  # pragma: no cover - typing only
    from spansmith.adapters.classifiers.base import Classifier, ClassifierFactory


CacheKey = tuple[str, ...]


def transient_cache_key(extra_query_paths: Iterable[Path | str]) -> CacheKey:
    """Return the cache key identifying an ordered list of call-scoped query sources.

    Order is kept since later sources override earlier ones. Repeats are dropped.
    """
    return tuple(dict.fromkeys(str(path) for path in extra_query_paths))


class HighlighterLifecycle:
    """Decide whether a call reuses the shared classifier or builds its own."""

    def __init__(
        self,
        factory: ClassifierFactory,
        grammar_paths: Sequence[Path] = (),
        query_paths: Sequence[Path] = (),
        *,
        cache_transient: bool = False,
        serialize: bool = False,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.factory = factory
        self.grammar_paths = tuple(Path(path) for path in grammar_paths)
        self.query_paths = tuple(Path(path) for path in query_paths)
        self.cache_transient = cache_transient
        self.serialize = serialize
        self.emitter = emitter or NullEmitter()

        self._shared: Classifier | None = None
        self._transient: dict[CacheKey, Classifier] = {}
        self._build_lock = Lock()
        self._access_lock = Lock()

    @property
    def shared(self) -> Classifier:
        """Classifier built from the base sources, created on first use."""
        with self._build_lock:
            if self._shared is None:
                self._shared = self.factory(self.grammar_paths, self.query_paths)
            return self._shared

    def resolve(self, extra_query_paths: Iterable[Path | str] = ()) -> Classifier:
        """Return the classifier serving a call with ``extra_query_paths``."""
        extra = tuple(dict.fromkeys(Path(path) for path in extra_query_paths))
        if not extra:
            return self.shared

        key = transient_cache_key(extra)
        if self.cache_transient:
            with self._build_lock:
                cached = self._transient.get(key)
            if cached is not None:
                return cached

        classifier = self.factory(self.grammar_paths, self.query_paths + extra)
        self.emitter.event(
            "highlighter_transient",
            {"query_paths": list(key), "cached": self.cache_transient},
        )
        if self.cache_transient:
            with self._build_lock:
                classifier = self._transient.setdefault(key, classifier)
        return classifier

    @contextmanager
    def acquire(self, extra_query_paths: Iterable[Path | str] = ()) -> Iterator[Classifier]:
        """Yield the classifier for one call, serialized when configured."""
        classifier = self.resolve(extra_query_paths)
        if not self.serialize:
            yield classifier
            return
        with self._access_lock:
            yield classifier

    def clear(self) -> None:
        """Forget the shared classifier and every cached transient one."""
        with self._build_lock:
            self._shared = None
            self._transient.clear()

    @property
    def cached_keys(self) -> list[CacheKey]:
        """Keys of the call-scoped classifiers currently cached."""
        with self._build_lock:
            return sorted(self._transient)


__all__ = ["CacheKey", "HighlighterLifecycle", "transient_cache_key"]
