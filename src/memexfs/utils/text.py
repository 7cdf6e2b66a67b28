"""Text helpers: line splitting, tokenization and numbered-line rendering."""

from __future__ import annotations

import re
from typing import List, Sequence

# Letters and digits from any script; underscore is a separator.
TOKEN_PATTERN = re.compile(r"[^\W_]+")


def split_lines(text: str) -> List[str]:
    """Split text into lines on ``\\n``, dropping a trailing ``\\r`` from each.

    A final newline does not produce an extra empty line.
    """
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def tokenize(line: str) -> List[str]:
    """Lowercase a line and return its alphanumeric runs in order."""
    return TOKEN_PATTERN.findall(line.lower())


def is_single_token(text: str) -> bool:
    """Return True when ``text`` is exactly one alphanumeric run."""
    return TOKEN_PATTERN.fullmatch(text) is not None


def format_numbered_lines(lines: Sequence[str], *, first_line: int = 1) -> str:
    """Render lines with right-aligned numbers and two spaces of padding.

    The number column is at least three characters wide.
    """
    if not lines:
        return ""
    last = first_line + len(lines) - 1
    width = max(3, len(str(last)))
    return "\n".join(
        f"{number:>{width}}  {line}" for number, line in enumerate(lines, start=first_line)
    )
