"""Token inverted index over document lines."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from memexfs.models import Location
from memexfs.utils.text import tokenize


class InvertedIndex:
    """Maps each lowercase token to the (path, line) locations containing it.

    Line numbers are 1-indexed. A token repeated on one line is recorded once.
    """

    def __init__(self) -> None:
        self._index: Dict[str, List[Location]] = {}

    def add_document(self, path: str, lines: Sequence[str]) -> None:
        for line_number, line in enumerate(lines, start=1):
            # dict.fromkeys keeps first-seen order while dropping repeats
            for token in dict.fromkeys(tokenize(line)):
                self._index.setdefault(token, []).append((path, line_number))

    def lookup(self, token: str) -> Optional[List[Location]]:
        """Exact token lookup; returns None when the token is not indexed."""
        return self._index.get(token.lower())

    def find_containing(self, substring: str) -> List[Location]:
        """Return sorted, de-duplicated locations of every token containing ``substring``."""
        seen: set[Location] = set()
        for token, locations in self._index.items():
            if substring in token:
                seen.update(locations)
        return sorted(seen)

    def token_count(self) -> int:
        return len(self._index)
