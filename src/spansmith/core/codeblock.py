"""Compile a raw code block into highlighted nodes."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import logging
from pathlib import Path

from .compiler import compile_events, trim_trailing_newline
from .exceptions import ClassificationError, HighlightingError
from .lifecycle import HighlighterLifecycle
from .nodes import CompiledNode
from .normalize import normalize_indentation


logger = logging.getLogger(__name__)


def compile_code_block(
    raw_text: str,
    language: str,
    extra_query_paths: Iterable[Path | str] = (),
    *,
    lifecycle: HighlighterLifecycle,
    mapping: Mapping[str, str] | None = None,
    wrap_plain: bool = True,
) -> list[CompiledNode]:
    """Normalise, classify, compile and trim a single code block.

    Raises :class:`ClassificationError` when the classifier cannot be built or
    fails, and :class:`~spansmith.core.exceptions.ProtocolViolationError` when
    its event stream is malformed.
    """
    source, offset = normalize_indentation(raw_text)
    if not source:
        return []

    try:
        with lifecycle.acquire(extra_query_paths) as classifier:
            events = list(classifier.highlight(source, language))
    except HighlightingError:
        raise
    except Exception as exc:
        raise ClassificationError(f"Failed to classify {language} source") from exc

    logger.debug(
        "classified %s block: %d events, %d chars, indent offset %d",
        language,
        len(events),
        len(source),
        offset,
    )
    nodes = compile_events(events, source, mapping=mapping, wrap_plain=wrap_plain)
    return trim_trailing_newline(nodes)


__all__ = ["compile_code_block"]
