"""Tests for the grep dispatcher."""

from __future__ import annotations

import time
from typing import List, Tuple
from unittest.mock import patch

import pytest

from memexfs.errors import InvalidPattern, InvalidRegex, RegexTimeout
from memexfs.index.search import (
    MAX_RESULTS,
    SearchEngine,
    has_regex_metacharacters,
)
from memexfs.index.storage import DocumentStore

KB_DOCS = [
    (
        "account/password-reset.md",
        "# Password Reset\n\n## How to reset your password\n\n1. Go to Settings\n2. Click Reset Password",
    ),
    (
        "billing/refund.md",
        "# Refunds\n\nTo request a refund, contact support.\n\nRefunds are processed within 5 business days.",
    ),
]


def make_engine(docs: List[Tuple[str, str]], **kwargs) -> SearchEngine:
    store = DocumentStore()
    store.load_documents(docs)
    return SearchEngine(store, **kwargs)


@pytest.fixture
def engine() -> SearchEngine:
    return make_engine(KB_DOCS)


class TestHasRegexMetacharacters:
    """Test metacharacter detection."""

    @pytest.mark.parametrize("pattern", ["reset|refund", "https?://", "a.b", "^#", "x{2}", "\\d"])
    def test_detects(self, pattern: str) -> None:
        assert has_regex_metacharacters(pattern)

    @pytest.mark.parametrize("pattern", ["refund", "hackathon in sekoya", "e-mail", "50%"])
    def test_plain(self, pattern: str) -> None:
        assert not has_regex_metacharacters(pattern)


class TestSearchBasics:
    """Test pattern validation and result shape."""

    def test_empty_pattern_rejected(self, engine: SearchEngine) -> None:
        with pytest.raises(InvalidPattern, match="empty search pattern"):
            engine.search("")

    def test_grep_simple(self, engine: SearchEngine) -> None:
        results = engine.search("password")

        assert results
        assert any(r.path == "account/password-reset.md" for r in results)

    def test_case_insensitive(self, engine: SearchEngine) -> None:
        upper = engine.search("PASSWORD")
        lower = engine.search("password")

        assert upper == lower
        assert upper

    def test_content_is_raw_line(self, engine: SearchEngine) -> None:
        results = engine.search("refunds")

        assert [(r.line, r.content) for r in results] == [
            (1, "# Refunds"),
            (5, "Refunds are processed within 5 business days."),
        ]

    def test_results_sorted_by_path_then_line(self, engine: SearchEngine) -> None:
        results = engine.search("re")

        keys = [(r.path, r.line) for r in results]
        assert keys == sorted(keys)

    def test_no_match(self, engine: SearchEngine) -> None:
        assert engine.search("zebra") == []


class TestIndexStrategy:
    """Single alphanumeric patterns resolve through the index."""

    def test_uses_find_containing(self, engine: SearchEngine) -> None:
        with patch.object(
            engine.store.index, "find_containing", wraps=engine.store.index.find_containing
        ) as spy:
            engine.search("Refund")

        spy.assert_called_once_with("refund")

    def test_substring_in_token(self) -> None:
        """'arch' is found inside 'archive'."""
        engine = make_engine([("test.md", "This is an archive of data")])

        results = engine.search("arch")

        assert len(results) == 1
        assert results[0].path == "test.md"

    def test_numeric_substring_in_compound_token(self) -> None:
        engine = make_engine(
            [
                ("org.md", "Company registered as SE559571232301 in Sweden"),
                ("other.md", "Reference number 559571 standalone"),
                ("unrelated.md", "No match here"),
            ]
        )

        results = engine.search("559571")

        assert [r.path for r in results] == ["org.md", "other.md"]

    def test_line_with_several_matching_tokens_once(self) -> None:
        engine = make_engine([("doc.md", "arch and architecture\nnothing")])

        results = engine.search("arch")

        assert [(r.path, r.line) for r in results] == [("doc.md", 1)]

    def test_cap_enforced(self) -> None:
        docs = [(f"doc_{i}.md", "keyword match here\nkeyword match again") for i in range(200)]
        engine = make_engine(docs)

        results = engine.search("keyword")

        assert len(results) == MAX_RESULTS

    def test_cap_keeps_lowest_paths(self) -> None:
        docs = [(f"doc_{i:03d}.md", "keyword") for i in range(150)]
        engine = make_engine(docs)

        results = engine.search("keyword")

        assert results[0].path == "doc_000.md"
        assert results[-1].path == "doc_099.md"

    def test_glob_filters_candidates(self, engine: SearchEngine) -> None:
        results = engine.search("refund", glob="billing/**/*.md")

        assert results
        assert all(r.path.startswith("billing/") for r in results)

    def test_glob_applied_before_cap(self) -> None:
        docs = [(f"a/doc_{i:03d}.md", "keyword") for i in range(150)]
        docs.append(("b/last.md", "keyword"))
        engine = make_engine(docs)

        results = engine.search("keyword", glob="b/*.md")

        assert [r.path for r in results] == ["b/last.md"]


class TestScanStrategy:
    """Short or multi-word patterns scan the lowercase lines."""

    def test_phrase_requires_contiguous_match(self) -> None:
        engine = make_engine(
            [
                ("a.md", "hackathon in sekoya was great"),
                ("b.md", "The sekoya hackathon event"),
                ("c.md", "No match here"),
            ]
        )

        results = engine.search("hackathon in sekoya")

        assert len(results) == 1
        assert results[0].path == "a.md"

    def test_phrase_case_insensitive(self) -> None:
        engine = make_engine([("a.md", "Hackathon In Sekoya")])

        assert len(engine.search("hackathon in SEKOYA")) == 1

    def test_short_pattern_scans(self, engine: SearchEngine) -> None:
        with patch.object(engine.store.index, "find_containing") as spy:
            results = engine.search("5 ")

        spy.assert_not_called()
        assert [(r.path, r.line) for r in results] == [("billing/refund.md", 5)]

    def test_punctuated_literal(self) -> None:
        engine = make_engine([("a.md", "send an e-mail"), ("b.md", "email us")])

        results = engine.search("e-mail")

        assert [r.path for r in results] == ["a.md"]

    def test_scan_cap(self) -> None:
        docs = [(f"doc_{i}.md", "two words\ntwo words") for i in range(80)]
        engine = make_engine(docs)

        assert len(engine.search("two words")) == MAX_RESULTS

    def test_scan_glob(self, engine: SearchEngine) -> None:
        results = engine.search("to", glob="account/*")

        assert results
        assert all(r.path == "account/password-reset.md" for r in results)


class TestRegexStrategy:
    """Patterns with metacharacters compile as regexes."""

    def test_alternation(self, engine: SearchEngine) -> None:
        results = engine.search("reset|refund")

        assert len(results) >= 2
        assert {r.path for r in results} == {"account/password-reset.md", "billing/refund.md"}

    def test_case_insensitive(self, engine: SearchEngine) -> None:
        results = engine.search("^# REFUNDS$")

        assert [(r.path, r.line) for r in results] == [("billing/refund.md", 1)]

    def test_searches_anywhere_in_line(self) -> None:
        engine = make_engine([("links.md", "see https://example.com for more\nno link")])

        results = engine.search("https?://")

        assert [r.line for r in results] == [1]

    def test_invalid_regex(self, engine: SearchEngine) -> None:
        with pytest.raises(InvalidRegex, match="invalid regex"):
            engine.search("(unclosed")

    def test_oversized_repeat_count(self, engine: SearchEngine) -> None:
        with pytest.raises(InvalidRegex, match="invalid regex"):
            engine.search("a{4294967296}")

    def test_deeply_nested_groups(self, engine: SearchEngine) -> None:
        with pytest.raises(InvalidRegex, match="invalid regex"):
            engine.search("(" * 5000 + "x" + ")" * 5000)

    def test_backtracking_pattern_is_bounded(self) -> None:
        """Nested quantifiers on a near-miss line finish within the time budget."""
        engine = make_engine([("slow.md", "a" * 30 + "b")], regex_timeout=0.5)

        started = time.monotonic()
        try:
            results = engine.search("(a+)+$")
        except RegexTimeout:
            results = []

        assert results == []
        assert time.monotonic() - started < 5

    def test_exhausted_budget_raises_timeout(self, engine: SearchEngine) -> None:
        engine.regex_timeout = 0.0

        with pytest.raises(RegexTimeout, match="timed out"):
            engine.search("re.*")

    def test_regex_glob(self, engine: SearchEngine) -> None:
        results = engine.search("re.*", glob="billing/*.md")

        assert results
        assert all(r.path == "billing/refund.md" for r in results)

    def test_regex_cap(self) -> None:
        docs = [(f"doc_{i}.md", "alpha\nalpha") for i in range(60)]
        engine = make_engine(docs)

        assert len(engine.search("alph.")) == MAX_RESULTS


class TestSearchBehaviour:
    """Cross-strategy properties."""

    def test_malformed_glob_matches_nothing(self, engine: SearchEngine) -> None:
        assert engine.search("refund", glob="billing/[oops") == []

    def test_rebuild_is_deterministic(self) -> None:
        first = make_engine(KB_DOCS)
        second = make_engine(list(reversed(KB_DOCS)))

        for pattern in ("refund", "re", "reset|refund", "to request"):
            assert first.search(pattern) == second.search(pattern)

    def test_custom_max_results(self) -> None:
        docs = [(f"doc_{i}.md", "keyword") for i in range(10)]
        engine = make_engine(docs, max_results=3)

        assert len(engine.search("keyword")) == 3
