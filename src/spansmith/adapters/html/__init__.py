"""HTML document adapter."""

from __future__ import annotations

from .renderer import HtmlHighlighter


__all__ = ["HtmlHighlighter"]
