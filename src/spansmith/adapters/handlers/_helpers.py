"""Internal helpers shared across handler modules."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, cast


LANGUAGE_PREFIX = "language-"


def coerce_attribute(value: Any) -> str | None:
    """Normalise a BeautifulSoup attribute value to a string when possible."""
    if isinstance(value, str):
        return value
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError:
            return None
    if isinstance(value, Iterable):
        parts = [item for item in value if isinstance(item, str)]
        return " ".join(parts) if parts else None
    return None


def gather_classes(value: Any) -> list[str]:
    """Return a list of classes extracted from a BeautifulSoup attribute."""
    if isinstance(value, str):
        return value.split()
    if isinstance(value, Iterable) and not isinstance(value, (bytes, bytearray)):
        return [cast(str, item) for item in value if isinstance(item, str)]
    return []


def extract_language(classes: Iterable[str]) -> str | None:
    """Return the language named by the first ``language-*`` class."""
    for cls in classes:
        if cls.startswith(LANGUAGE_PREFIX) and len(cls) > len(LANGUAGE_PREFIX):
            return cls[len(LANGUAGE_PREFIX) :]
    return None


def parse_meta(meta: Any) -> dict[str, str | bool]:
    """Parse space-delimited ``key=value`` tokens from a code block meta string.

    Keys without a value map to ``True`` and double quotes are stripped from
    values. A value ends at the next ``=`` (``a=b=c`` gives ``b``). Non-string
    input yields an empty mapping.
    """
    if not isinstance(meta, str):
        return {}
    entries: dict[str, str | bool] = {}
    for token in meta.split():
        key, _, rest = token.partition("=")
        if not key:
            continue
        value = rest.split("=", 1)[0]
        entries[key] = value.replace('"', "") if value else True
    return entries


__all__ = [
    "LANGUAGE_PREFIX",
    "coerce_attribute",
    "extract_language",
    "gather_classes",
    "parse_meta",
]
