"""Configuration model for the code highlighter.

HighlightConfig

`grammar_paths` (`list[Path]`)
: Grammar sources loaded once for the shared classifier. With the Pygments
  classifier these are lexer modules (or directories of them).

`query_paths` (`list[Path]`)
: Base query directories. Each holds one `<language>/highlights.yml` file per
  language it customises.

`query_aliases` (`dict[str, Path]`)
: Names accepted by the `query=<name>` code block meta attribute, mapped to
  extra query directories applied to that block only.

`highlight_mapping` (`dict[str, str]`)
: Renames highlight scopes before they are rendered (`"keyword": "kw"`).

`class_prefix` (`str`)
: Prefix prepended to every rendered class name.

`class_mode` (`"innermost" | "all"`)
: Render only the innermost visible scope (default) or every visible scope.

`wrap_plain` (`bool`)
: Wrap unhighlighted text in a class-less `span` so every fragment offers the
  same styling hook. When `False` plain text is spliced as bare text.

`meta_attribute` (`str`)
: Attribute of the `<code>` element holding space-delimited `key=value` meta.

`cache_transient` (`bool`)
: Keep call-scoped classifiers keyed by their extra query sources instead of
  rebuilding them for every block.

`serialize_access` (`bool`)
: Serialize classifier access for classifiers that are not reentrant.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
import yaml


class HighlightConfig(BaseModel):
    """Settings driving code block highlighting."""

    model_config = ConfigDict(extra="forbid")

    grammar_paths: list[Path] = Field(default_factory=list)
    query_paths: list[Path] = Field(default_factory=list)
    query_aliases: dict[str, Path] = Field(default_factory=dict)
    highlight_mapping: dict[str, str] = Field(default_factory=dict)
    class_prefix: str = ""
    class_mode: Literal["innermost", "all"] = "innermost"
    wrap_plain: bool = True
    meta_attribute: str = "data-meta"
    cache_transient: bool = False
    serialize_access: bool = False

    @field_validator("highlight_mapping")
    @classmethod
    def _reject_reset_rename(cls, value: dict[str, str]) -> dict[str, str]:
        if "none" in value:
            msg = "the 'none' reset marker cannot be renamed"
            raise ValueError(msg)
        return value

    def resolve_query_alias(self, name: str) -> Path | None:
        """Return the query directory registered under ``name``."""
        return self.query_aliases.get(name)


def load_config(path: Path | str) -> HighlightConfig:
    """Read a :class:`HighlightConfig` from a YAML file.

    Settings may sit at the top level or under a ``spansmith`` key. Relative
    paths are resolved against the file's directory.
    """
    source = Path(path)
    payload: Any = yaml.safe_load(source.read_text(encoding="utf-8")) or {}
    if isinstance(payload, dict) and isinstance(payload.get("spansmith"), dict):
        payload = payload["spansmith"]
    config = HighlightConfig.model_validate(payload)

    root = source.parent
    config.grammar_paths = [_anchor(root, item) for item in config.grammar_paths]
    config.query_paths = [_anchor(root, item) for item in config.query_paths]
    config.query_aliases = {
        name: _anchor(root, item) for name, item in config.query_aliases.items()
    }
    return config


def _anchor(root: Path, path: Path) -> Path:
    return path if path.is_absolute() else root / path


__all__ = ["HighlightConfig", "load_config"]
