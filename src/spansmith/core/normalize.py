"""Indentation normalisation for code extracted from HTML."""

from __future__ import annotations


def _indentation(line: str) -> int:
    """Column of the first non-whitespace character, or the line length."""
    return len(line) - len(line.lstrip())


def normalize_indentation(raw: str) -> tuple[str, int]:
    """Strip boundary blank lines and the block-level indentation of ``raw``.

    The first non-blank line sets the reference ``offset``. Lines indented
    deeper lose exactly ``offset`` characters; shallower lines only lose their
    own leading whitespace, so content is never cut. The result always ends
    with a single newline. Returns the text and the offset.
    """
    lines = raw.split("\n")

    start = 0
    while start < len(lines) and not lines[start].strip():
        start += 1
    end = len(lines)
    while end > start and not lines[end - 1].strip():
        end -= 1

    lines = lines[start:end]
    if not lines:
        return "", 0

    offset = _indentation(lines[0])
    stripped: list[str] = []
    for line in lines:
        indent = _indentation(line)
        stripped.append(line[offset:] if indent > offset else line[indent:])
    stripped.append("")

    return "\n".join(stripped), offset


__all__ = ["normalize_indentation"]
