"""Core MemexFS data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from memexfs.utils.text import format_numbered_lines, split_lines

# (document path, 1-indexed line number)
Location = Tuple[str, int]


@dataclass(slots=True, frozen=True)
class SearchResult:
    """A single grep match."""

    path: str
    line: int
    content: str

    def to_dict(self) -> Dict[str, Any]:
        return {"path": self.path, "line": self.line, "content": self.content}


@dataclass(slots=True)
class Document:
    """One document's raw lines plus a lowercase mirror for case-insensitive scans."""

    path: str
    lines: List[str]
    lines_lower: List[str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.lines_lower = [line.lower() for line in self.lines]

    @classmethod
    def from_text(cls, path: str, text: str) -> "Document":
        return cls(path=path, lines=split_lines(text))

    @property
    def total_lines(self) -> int:
        return len(self.lines)

    def read(self, offset: Optional[int] = None, limit: Optional[int] = None) -> str:
        """Return numbered lines starting at 1-indexed ``offset``.

        An offset past the end yields an empty string. ``limit`` caps the
        number of lines; None reads to the end of the document.
        """
        start = max((offset or 1) - 1, 0)
        if start >= len(self.lines):
            return ""
        end = len(self.lines) if limit is None else min(start + max(limit, 0), len(self.lines))
        return format_numbered_lines(self.lines[start:end], first_line=start + 1)
