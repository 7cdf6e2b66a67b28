"""Grep dispatcher: picks a matching strategy and runs it against the store."""

from __future__ import annotations

import logging
import time
from typing import Callable, Dict, Iterable, List, Optional

import regex

from memexfs.errors import InvalidPattern, InvalidRegex, RegexTimeout
from memexfs.index.storage import DocumentStore
from memexfs.models import Location, SearchResult
from memexfs.utils.files import glob_match
from memexfs.utils.text import is_single_token

LOGGER = logging.getLogger(__name__)

MAX_RESULTS = 100
MIN_INDEX_TOKEN_LENGTH = 3
# Seconds of regex matching allowed per grep call
REGEX_TIMEOUT = 2.0
REGEX_METACHARACTERS = frozenset("|*+?()[]{}\\^$.")


def has_regex_metacharacters(pattern: str) -> bool:
    return any(char in REGEX_METACHARACTERS for char in pattern)


def _sort_key(result: SearchResult) -> tuple[str, int]:
    return (result.path, result.line)


class SearchEngine:
    """Runs grep queries over a fully built DocumentStore.

    Strategy order:

    * patterns with regex metacharacters compile as a case-insensitive regex
      and scan every line;
    * a single alphanumeric run of at least three characters resolves through
      the inverted index, matching every token that contains it;
    * anything else is a case-insensitive substring scan over the lowercase
      line mirrors.

    Scanning stops as soon as ``max_results`` matches are collected. Regex
    matching shares one ``regex_timeout`` budget per call. Results are
    returned sorted by path then line number.
    """

    def __init__(
        self,
        store: DocumentStore,
        *,
        max_results: int = MAX_RESULTS,
        regex_timeout: float = REGEX_TIMEOUT,
    ) -> None:
        self.store = store
        self.max_results = max_results
        self.regex_timeout = regex_timeout

    def search(self, pattern: str, glob: Optional[str] = None) -> List[SearchResult]:
        if not pattern:
            raise InvalidPattern()

        if has_regex_metacharacters(pattern):
            strategy = "regex"
            results = self._search_regex(pattern, glob)
        else:
            pattern_lower = pattern.lower()
            if len(pattern_lower) >= MIN_INDEX_TOKEN_LENGTH and is_single_token(pattern_lower):
                strategy = "index"
                results = self._search_index(pattern_lower, glob)
            else:
                strategy = "scan"
                results = self._search_scan(pattern_lower, glob)

        results.sort(key=_sort_key)
        LOGGER.debug(
            "grep %r (glob=%r) via %s: %d results", pattern, glob, strategy, len(results)
        )
        return results

    def _path_filter(self, glob: Optional[str]) -> Callable[[str], bool]:
        if glob is None:
            return lambda path: True
        cache: Dict[str, bool] = {}

        def accept(path: str) -> bool:
            if path not in cache:
                cache[path] = glob_match(glob, path)
            return cache[path]

        return accept

    def _search_index(self, pattern_lower: str, glob: Optional[str]) -> List[SearchResult]:
        # Substring-over-tokens is authoritative: "arch" must reach "archive".
        locations = self.store.index.find_containing(pattern_lower)
        return self._materialize(locations, self._path_filter(glob))

    def _materialize(
        self, locations: Iterable[Location], accept: Callable[[str], bool]
    ) -> List[SearchResult]:
        results: List[SearchResult] = []
        for path, line_number in locations:
            if len(results) >= self.max_results:
                break
            if not accept(path):
                continue
            document = self.store.get_document(path)
            if document is None or line_number > document.total_lines:
                continue
            results.append(SearchResult(path, line_number, document.lines[line_number - 1]))
        return results

    def _search_scan(self, pattern_lower: str, glob: Optional[str]) -> List[SearchResult]:
        return self._scan_lines(lambda _, lower: pattern_lower in lower, glob)

    def _search_regex(self, pattern: str, glob: Optional[str]) -> List[SearchResult]:
        try:
            compiled = regex.compile(pattern, flags=regex.IGNORECASE)
        except (regex.error, OverflowError, RecursionError) as exc:
            raise InvalidRegex(str(exc)) from exc

        deadline = time.monotonic() + self.regex_timeout

        def matches(line: str, _: str) -> bool:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise RegexTimeout(self.regex_timeout)
            return compiled.search(line, timeout=remaining) is not None

        try:
            return self._scan_lines(matches, glob)
        except TimeoutError as exc:
            raise RegexTimeout(self.regex_timeout) from exc

    def _scan_lines(
        self, matches: Callable[[str, str], bool], glob: Optional[str]
    ) -> List[SearchResult]:
        """Walk documents in path order, testing each (raw, lowercase) line pair."""
        accept = self._path_filter(glob)
        results: List[SearchResult] = []
        for document in self.store.iter_documents():
            if len(results) >= self.max_results:
                break
            if not accept(document.path):
                continue
            for index, (line, lower) in enumerate(zip(document.lines, document.lines_lower)):
                if matches(line, lower):
                    results.append(SearchResult(document.path, index + 1, line))
                    if len(results) >= self.max_results:
                        break
        return results
