"""Document handlers registered on the HTML highlighter."""

from __future__ import annotations

from . import code
from ._helpers import extract_language, gather_classes, parse_meta


__all__ = ["code", "extract_language", "gather_classes", "parse_meta"]
