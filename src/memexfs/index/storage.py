"""In-memory document store with its inverted index and virtual directories."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from memexfs.index.inverted import InvertedIndex
from memexfs.models import Document

LOGGER = logging.getLogger(__name__)

_ROOT_ALIASES = frozenset({"", ".", "/"})


class DocumentStore:
    """Owns every Document by path plus the index built from all of them.

    The store is filled once through ``load_documents`` and only read afterwards.
    """

    def __init__(self) -> None:
        self._docs: Dict[str, Document] = {}
        self._index = InvertedIndex()

    def load_documents(self, documents: Iterable[Tuple[str, str]]) -> None:
        # Later duplicates replace earlier ones before anything is indexed,
        # so each stored document is indexed exactly once.
        latest: Dict[str, str] = {}
        for path, text in documents:
            if path in latest:
                LOGGER.debug("Duplicate path %s, keeping last content", path)
            latest[path] = text

        for path, text in latest.items():
            document = Document.from_text(path, text)
            self._index.add_document(path, document.lines)
            self._docs[path] = document

        LOGGER.info(
            "Loaded %d documents (%d distinct tokens)",
            len(self._docs),
            self._index.token_count(),
        )

    @property
    def index(self) -> InvertedIndex:
        return self._index

    def get_document(self, path: str) -> Optional[Document]:
        return self._docs.get(path)

    def document_count(self) -> int:
        return len(self._docs)

    def token_count(self) -> int:
        return self._index.token_count()

    def paths(self) -> List[str]:
        """Return all stored paths in lexicographic order."""
        return sorted(self._docs)

    def iter_documents(self) -> Iterator[Document]:
        for path in self.paths():
            yield self._docs[path]

    def ls(self, directory: str = "") -> List[str]:
        """List the immediate children of a virtual directory.

        Subdirectories carry a trailing ``/``. Entries are sorted together,
        not grouped by kind.
        """
        if directory in _ROOT_ALIASES:
            prefix = ""
        elif directory.endswith("/"):
            prefix = directory
        else:
            prefix = f"{directory}/"

        entries: set[str] = set()
        for path in self._docs:
            if not path.startswith(prefix):
                continue
            rest = path[len(prefix) :]
            head, sep, _ = rest.partition("/")
            entries.add(f"{head}/" if sep else rest)
        return sorted(entries)
