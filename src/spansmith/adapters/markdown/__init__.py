"""Markdown conversion utilities for spansmith."""

from __future__ import annotations

from collections.abc import Iterable
from threading import Lock

import markdown


__all__ = [
    "DEFAULT_MARKDOWN_EXTENSIONS",
    "MarkdownConversionError",
    "render_markdown",
]


# No Pygments-based extension: fenced blocks must stay <pre><code class="language-*">.
DEFAULT_MARKDOWN_EXTENSIONS = ["fenced_code", "attr_list", "tables"]


class MarkdownConversionError(Exception):
    """Raised when Markdown cannot be converted into HTML."""


_MARKDOWN_CACHE: dict[tuple[str, ...], tuple[markdown.Markdown, Lock]] = {}
_MARKDOWN_CACHE_GUARD = Lock()


def _processor(extensions: tuple[str, ...]) -> tuple[markdown.Markdown, Lock]:
    with _MARKDOWN_CACHE_GUARD:
        entry = _MARKDOWN_CACHE.get(extensions)
        if entry is None:
            try:
                processor = markdown.Markdown(extensions=list(extensions))
            except (ImportError, AttributeError, TypeError, ValueError) as exc:
                raise MarkdownConversionError(
                    f"Failed to load Markdown extensions: {', '.join(extensions)}"
                ) from exc
            entry = (processor, Lock())
            _MARKDOWN_CACHE[extensions] = entry
        return entry


def render_markdown(text: str, extensions: Iterable[str] | None = None) -> str:
    """Convert Markdown text into HTML."""
    selected = tuple(DEFAULT_MARKDOWN_EXTENSIONS if extensions is None else extensions)
    processor, lock = _processor(selected)
    with lock:
        try:
            return processor.reset().convert(text)
        except Exception as exc:  # pragma: no cover - markdown internals
            raise MarkdownConversionError("Failed to convert Markdown to HTML") from exc
