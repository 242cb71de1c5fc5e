"""Code block handler splicing highlighted spans into the document."""

from __future__ import annotations

from collections.abc import Sequence
import logging
from pathlib import Path

from bs4.element import NavigableString, PreformattedString, Tag

from spansmith.core.codeblock import compile_code_block
from spansmith.core.context import HighlightContext
from spansmith.core.exceptions import (
    ClassificationError,
    ProtocolViolationError,
    QueryResolutionError,
    exception_hint,
)
from spansmith.core.nodes import CompiledNode, SpanNode
from spansmith.core.rules import renders

from ._helpers import coerce_attribute, extract_language, gather_classes, parse_meta


logger = logging.getLogger(__name__)


def _code_text(element: Tag) -> str | None:
    """Return the text of ``element`` when its only child is plain text."""
    if len(element.contents) != 1:
        return None
    child = element.contents[0]
    if not isinstance(child, NavigableString) or isinstance(child, PreformattedString):
        return None
    return str(child)


def _block_meta(element: Tag, context: HighlightContext) -> dict[str, str | bool]:
    meta = parse_meta(coerce_attribute(element.get(context.config.meta_attribute)))
    direct = coerce_attribute(element.get("query"))
    if direct and "query" not in meta:
        meta["query"] = direct
    return meta


def resolve_query_reference(name: str, context: HighlightContext) -> Path:
    """Resolve a ``query=<name>`` meta reference to a query directory."""
    resolved: Path | str | None = None
    if context.resolve_query_path is not None:
        resolved = context.resolve_query_path(name)
    if resolved is None:
        resolved = context.config.resolve_query_alias(name)
    if resolved is None:
        raise QueryResolutionError(f"No query source registered for '{name}'")
    return Path(resolved)


def _extra_query_paths(meta: dict[str, str | bool], context: HighlightContext) -> list[Path]:
    query = meta.get("query")
    if not isinstance(query, str):
        return []
    try:
        return [resolve_query_reference(query, context)]
    except QueryResolutionError as exc:
        context.emitter.warning(str(exc))
        context.emitter.event("query_unresolved", {"query": query})
        return []


def _render_nodes(
    nodes: Sequence[CompiledNode], context: HighlightContext
) -> list[Tag | NavigableString]:
    config = context.config
    rendered: list[Tag | NavigableString] = []
    for node in nodes:
        if not isinstance(node, SpanNode):
            rendered.append(NavigableString(node.text))
            continue
        span = context.document.new_tag("span")
        if node.highlight is not None:
            names = node.scopes if config.class_mode == "all" else (node.highlight,)
            span["class"] = [f"{config.class_prefix}{name}" for name in names]
        span.string = node.text
        rendered.append(span)
    return rendered


@renders("code", priority=40, name="highlighted_code_blocks", nestable=False)
def render_code_block(element: Tag, context: HighlightContext) -> None:
    """Replace the text of ``<pre><code class="language-*">`` with highlighted spans."""
    parent = element.parent
    if parent is None or parent.name != "pre":
        return

    language = extract_language(gather_classes(element.get("class")))
    if language is None:
        return

    extra_query_paths = _extra_query_paths(_block_meta(element, context), context)

    raw_text = _code_text(element)
    if raw_text is None:
        context.state.record_skip()
        return

    if context.enter is not None and not context.enter(element):
        context.state.record_skip()
        return

    try:
        nodes = compile_code_block(
            raw_text,
            language,
            extra_query_paths,
            lifecycle=context.lifecycle,
            mapping=context.config.highlight_mapping,
            wrap_plain=context.config.wrap_plain,
        )
    except (ClassificationError, ProtocolViolationError) as exc:
        reason = exception_hint(exc)
        context.state.record_failure(language, reason)
        context.emitter.warning(f"Failed to highlight {language} code block", exc)
        context.emitter.event("code_block_failed", {"language": language, "reason": reason})
        return

    element.clear()
    for child in _render_nodes(nodes, context):
        element.append(child)
    context.state.record_highlight(language)
    logger.debug("highlighted %s block into %d nodes", language, len(nodes))

    if context.leave is not None:
        context.leave(element)


__all__ = ["render_code_block", "resolve_query_reference"]
