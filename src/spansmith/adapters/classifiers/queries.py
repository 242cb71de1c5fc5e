"""Highlight query tables for the Pygments classifier.

A query table maps Pygments token types to highlight names (``highlights``)
and to embedded languages (``injections``). Query directories hold one YAML
file per language::

    queries/
      python/
        highlights.yml

with the following shape::

    extends: true            # merge over earlier tables instead of replacing
    highlights:
      Token.Name.Builtin: function.builtin
      Token.Literal.String.Doc: none
    injections:
      Token.Literal.String.Double: sql

Directories apply in order, so call-scoped directories appended after the
base ones can extend or override them.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pygments.token import Token, _TokenType, string_to_tokentype
import yaml

from spansmith.core.exceptions import ClassificationError
from spansmith.core.stack import RESET_HIGHLIGHT


HIGHLIGHT_NAMES: frozenset[str] = frozenset(
    {
        "attribute",
        "boolean",
        "carriage-return",
        "comment",
        "comment.documentation",
        "constant",
        "constant.builtin",
        "constructor",
        "constructor.builtin",
        "embedded",
        "error",
        "escape",
        "function",
        "function.builtin",
        "function.call",
        "keyword",
        "markup",
        "markup.bold",
        "markup.heading",
        "markup.italic",
        "markup.link",
        "markup.link.url",
        "markup.list",
        "markup.list.checked",
        "markup.list.numbered",
        "markup.list.unchecked",
        "markup.list.unnumbered",
        "markup.quote",
        "markup.raw",
        "markup.raw.block",
        "markup.raw.inline",
        "markup.strikethrough",
        "module",
        "number",
        "operator",
        "property",
        "property.builtin",
        "punctuation",
        "punctuation.bracket",
        "punctuation.delimiter",
        "punctuation.special",
        "string",
        "string.escape",
        "string.regexp",
        "string.special",
        "string.special.symbol",
        "tag",
        "type",
        "type.builtin",
        "variable",
        "variable.builtin",
        "variable.member",
        "variable.parameter",
    }
)
"""Highlight names recognised by default."""


DEFAULT_HIGHLIGHTS: dict[_TokenType, str] = {
    Token.Keyword: "keyword",
    Token.Keyword.Constant: "constant.builtin",
    Token.Keyword.Type: "type.builtin",
    Token.Name.Attribute: "attribute",
    Token.Name.Builtin: "function.builtin",
    Token.Name.Builtin.Pseudo: "variable.builtin",
    Token.Name.Class: "type",
    Token.Name.Constant: "constant",
    Token.Name.Decorator: "attribute",
    Token.Name.Entity: "constant",
    Token.Name.Exception: "type",
    Token.Name.Function: "function",
    Token.Name.Function.Magic: "function.builtin",
    Token.Name.Namespace: "module",
    Token.Name.Property: "property",
    Token.Name.Tag: "tag",
    Token.Name.Variable: "variable",
    Token.Name.Variable.Magic: "variable.builtin",
    Token.Literal.String: "string",
    Token.Literal.String.Doc: "comment.documentation",
    Token.Literal.String.Escape: "string.escape",
    Token.Literal.String.Regex: "string.regexp",
    Token.Literal.String.Symbol: "string.special.symbol",
    Token.Literal.Number: "number",
    Token.Comment: "comment",
    Token.Operator: "operator",
    Token.Operator.Word: "keyword",
    Token.Punctuation: "punctuation",
    Token.Generic.Deleted: "markup.strikethrough",
    Token.Generic.Emph: "markup.italic",
    Token.Generic.Heading: "markup.heading",
    Token.Generic.Strong: "markup.bold",
    Token.Generic.Subheading: "markup.heading",
    Token.Error: "error",
}


_QUERY_FILENAMES = ("highlights.yml", "highlights.yaml")


def resolve_highlight_name(name: str, recognized: Iterable[str]) -> str | None:
    """Return the longest recognised dotted prefix of ``name``.

    ``function.method`` falls back to ``function`` when only the latter is
    recognised. The reset marker is always accepted.
    """
    if name == RESET_HIGHLIGHT:
        return name
    known = recognized if isinstance(recognized, (set, frozenset)) else set(recognized)
    parts = name.split(".")
    while parts:
        candidate = ".".join(parts)
        if candidate in known:
            return candidate
        parts.pop()
    return None


@dataclass(slots=True)
class QueryTable:
    """Token type lookups for one language."""

    highlights: dict[_TokenType, str] = field(default_factory=dict)
    injections: dict[_TokenType, str] = field(default_factory=dict)

    def highlight_for(self, ttype: _TokenType) -> str | None:
        """Return the highlight of the most specific mapped ancestor."""
        return _lookup(self.highlights, ttype)

    def injection_for(self, ttype: _TokenType) -> str | None:
        """Return the language injected for the most specific mapped ancestor."""
        return _lookup(self.injections, ttype)

    def merged(self, other: QueryTable) -> QueryTable:
        return QueryTable(
            highlights={**self.highlights, **other.highlights},
            injections={**self.injections, **other.injections},
        )


def _lookup(table: Mapping[_TokenType, str], ttype: _TokenType) -> str | None:
    current: _TokenType | None = ttype
    while current is not None:
        value = table.get(current)
        if value is not None:
            return value
        current = current.parent
    return None


def _token_type(raw: Any, origin: Path) -> _TokenType:
    if not isinstance(raw, str) or not raw.strip():
        raise ClassificationError(f"Invalid token type {raw!r} in {origin}")
    return string_to_tokentype(raw.strip())


def _table(raw: Any, origin: Path, section: str) -> dict[str, str]:
    if raw is None:
        return {}
    if not isinstance(raw, Mapping) or not all(
        isinstance(value, str) for value in raw.values()
    ):
        raise ClassificationError(f"'{section}' in {origin} must map token types to names")
    return dict(raw)


def parse_query_file(
    path: Path, recognized: Iterable[str] = HIGHLIGHT_NAMES
) -> tuple[QueryTable, bool]:
    """Parse a query file, returning its table and whether it extends."""
    try:
        payload = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ClassificationError(f"Failed to read highlight query {path}") from exc
    if not isinstance(payload, Mapping):
        raise ClassificationError(f"Highlight query {path} must be a mapping")

    known = frozenset(recognized)
    table = QueryTable()
    for token, name in _table(payload.get("highlights"), path, "highlights").items():
        resolved = resolve_highlight_name(name, known)
        if resolved is not None:
            table.highlights[_token_type(token, path)] = resolved
    for token, language in _table(payload.get("injections"), path, "injections").items():
        table.injections[_token_type(token, path)] = language
    return table, bool(payload.get("extends", False))


def find_query_file(query_dir: Path, language: str) -> Path | None:
    """Return the query file for ``language`` inside ``query_dir``."""
    for filename in _QUERY_FILENAMES:
        candidate = query_dir / language / filename
        if candidate.is_file():
            return candidate
    return None


def load_query_table(
    language: str,
    query_dirs: Sequence[Path],
    *,
    base: QueryTable | None = None,
    recognized: Iterable[str] = HIGHLIGHT_NAMES,
) -> QueryTable:
    """Fold the query files found for ``language`` over ``base``."""
    table = base if base is not None else QueryTable(highlights=dict(DEFAULT_HIGHLIGHTS))
    known = frozenset(recognized)
    for query_dir in query_dirs:
        path = find_query_file(Path(query_dir), language)
        if path is None:
            continue
        overlay, extends = parse_query_file(path, known)
        table = table.merged(overlay) if extends else overlay
    return table


__all__ = [
    "DEFAULT_HIGHLIGHTS",
    "HIGHLIGHT_NAMES",
    "QueryTable",
    "find_query_file",
    "load_query_table",
    "parse_query_file",
    "resolve_highlight_name",
]
