"""Utility helpers for working with files and path patterns."""

from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Iterator, Optional, Sequence


def iter_document_paths(
    inputs: Iterable[Path], extensions: Sequence[str] = (".md",)
) -> Iterator[Path]:
    """Yield document paths from input paths, descending into directories."""
    suffixes = {ext.lower() for ext in extensions}
    for item in inputs:
        if item.is_dir():
            yield from iter_document_paths(
                sorted(child for child in item.rglob("*") if child.is_file()), extensions
            )
        elif item.is_file() and item.suffix.lower() in suffixes:
            yield item


def _translate_glob(pattern: str) -> str:
    """Translate a shell glob into a regular expression body.

    ``*`` and ``?`` stay inside one path segment, ``**`` spans segments and
    ``**/`` may also match no directory at all. Raises ValueError on an
    unclosed ``[`` or ``{``.
    """
    parts: list[str] = []
    depth = 0
    i, n = 0, len(pattern)
    while i < n:
        char = pattern[i]
        if char == "*":
            if pattern.startswith("**", i):
                segment_start = i == 0 or pattern[i - 1] == "/"
                i += 2
                while i < n and pattern[i] == "*":
                    i += 1
                if segment_start and i < n and pattern[i] == "/":
                    parts.append("(?:.*/)?")
                    i += 1
                else:
                    parts.append(".*")
                continue
            parts.append("[^/]*")
        elif char == "?":
            parts.append("[^/]")
        elif char == "[":
            j = i + 1
            if j < n and pattern[j] in "!^":
                j += 1
            if j < n and pattern[j] == "]":
                j += 1
            end = pattern.find("]", j)
            if end == -1:
                raise ValueError(f"unclosed character class in {pattern!r}")
            body = pattern[i + 1 : end]
            negate = body[:1] in ("!", "^")
            if negate:
                body = body[1:]
            body = body.replace("\\", "\\\\").replace("[", "\\[")
            parts.append(f"[{'^' if negate else ''}{body}]")
            i = end
        elif char == "{":
            depth += 1
            parts.append("(?:")
        elif char == "," and depth:
            parts.append("|")
        elif char == "}" and depth:
            depth -= 1
            parts.append(")")
        elif char == "\\" and i + 1 < n:
            i += 1
            parts.append(re.escape(pattern[i]))
        else:
            parts.append(re.escape(char))
        i += 1
    if depth:
        raise ValueError(f"unclosed brace in {pattern!r}")
    return "".join(parts)


@lru_cache(maxsize=256)
def compile_glob(pattern: str) -> Optional[re.Pattern[str]]:
    """Compile a glob, returning None when it is malformed."""
    try:
        return re.compile(f"(?s:{_translate_glob(pattern)})")
    except (ValueError, re.error):
        return None


def glob_match(pattern: str, path: str) -> bool:
    """Return True when ``path`` matches ``pattern`` in full.

    Malformed patterns match nothing.
    """
    compiled = compile_glob(pattern)
    if compiled is None:
        return False
    return compiled.fullmatch(path) is not None
