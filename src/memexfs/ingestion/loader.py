"""Collect (path, text) pairs from a directory tree."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence, Tuple

from memexfs.utils.files import iter_document_paths

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class LoadStats:
    loaded: int = 0
    skipped: int = 0
    failed: int = 0
    processed_files: list[Path] = field(default_factory=list)

    def increment(self, status: str, path: Path) -> None:
        if status == "loaded":
            self.loaded += 1
        elif status == "skipped":
            self.skipped += 1
        else:
            self.failed += 1
        self.processed_files.append(path)


def collect_documents(
    root: Path, *, extensions: Sequence[str] = (".md",)
) -> Tuple[List[Tuple[str, str]], LoadStats]:
    """Gather documents under ``root`` keyed by their POSIX path relative to it.

    Files that are not valid UTF-8 are skipped; files that cannot be opened
    count as failed. Pairs come back sorted by path.
    """
    stats = LoadStats()
    documents: List[Tuple[str, str]] = []
    root = Path(root)
    if not root.is_dir():
        LOGGER.warning("Document root %s is not a directory", root)
        return documents, stats

    for path in iter_document_paths([root], extensions):
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            LOGGER.warning("Skipping %s: not valid UTF-8 (%s)", path, exc)
            stats.increment("skipped", path)
            continue
        except OSError as exc:
            LOGGER.error("Failed to read %s: %s", path, exc)
            stats.increment("failed", path)
            continue
        documents.append((path.relative_to(root).as_posix(), text))
        stats.increment("loaded", path)

    documents.sort(key=lambda pair: pair[0])
    return documents, stats
