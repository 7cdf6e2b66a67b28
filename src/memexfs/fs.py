"""MemexFS facade: the grep/read/ls tool backend over an in-memory corpus."""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from pydantic import ValidationError

from memexfs.errors import (
    DocumentNotFound,
    InvalidParameters,
    MalformedInputError,
    NoDocumentsError,
    UnknownOperation,
)
from memexfs.index.search import MAX_RESULTS, REGEX_TIMEOUT, SearchEngine
from memexfs.index.storage import DocumentStore
from memexfs.ingestion.loader import collect_documents
from memexfs.models import SearchResult
from memexfs.tools import PARAMS_BY_TOOL, TOOL_DEFINITIONS, GrepParams, LsParams, ReadParams

LOGGER = logging.getLogger(__name__)

ToolParams = Union[Mapping[str, Any], str, None]


def _validate_pairs(documents: Iterable[Any]) -> List[Tuple[str, str]]:
    if isinstance(documents, (str, bytes, Mapping)):
        raise MalformedInputError("expected a sequence of (path, text) pairs")
    try:
        items = list(documents)
    except TypeError as exc:
        raise MalformedInputError("expected a sequence of (path, text) pairs") from exc

    pairs: List[Tuple[str, str]] = []
    for position, item in enumerate(items):
        if not isinstance(item, (list, tuple)) or len(item) != 2:
            raise MalformedInputError(f"entry {position} is not a (path, text) pair")
        path, text = item
        if not isinstance(path, str) or not isinstance(text, str):
            raise MalformedInputError(f"entry {position} must hold two strings")
        pairs.append((path, text))
    return pairs


class MemexFS:
    """Read-only knowledge base exposing ``grep``, ``read`` and ``ls``.

    Built once from ``(path, text)`` pairs; never mutated afterwards, so one
    instance may be shared between threads. To pick up new documents build a
    new instance and swap the reference.
    """

    def __init__(
        self,
        documents: Iterable[Tuple[str, str]],
        *,
        max_results: int = MAX_RESULTS,
        regex_timeout: float = REGEX_TIMEOUT,
    ) -> None:
        pairs = _validate_pairs(documents)
        if not pairs:
            raise NoDocumentsError()
        self._store = DocumentStore()
        self._store.load_documents(pairs)
        self._engine = SearchEngine(
            self._store, max_results=max_results, regex_timeout=regex_timeout
        )

    @classmethod
    def from_json(cls, payload: str, *, max_results: int = MAX_RESULTS) -> "MemexFS":
        """Build from a JSON array of ``[path, text]`` pairs."""
        try:
            documents = json.loads(payload)
        except (TypeError, ValueError) as exc:
            raise MalformedInputError(f"invalid documents JSON: {exc}") from exc
        if not isinstance(documents, list):
            raise MalformedInputError("documents JSON must be an array of [path, text] pairs")
        return cls(documents, max_results=max_results)

    @classmethod
    def from_directory(
        cls,
        root: Path,
        *,
        extensions: Sequence[str] = (".md",),
        max_results: int = MAX_RESULTS,
    ) -> "MemexFS":
        documents, stats = collect_documents(Path(root), extensions=extensions)
        LOGGER.info(
            "Collected %d documents from %s (skipped: %d, failed: %d)",
            stats.loaded,
            root,
            stats.skipped,
            stats.failed,
        )
        return cls(documents, max_results=max_results)

    @property
    def store(self) -> DocumentStore:
        return self._store

    def grep(self, pattern: str, glob: Optional[str] = None) -> List[SearchResult]:
        return self._engine.search(pattern, glob or None)

    def read(self, path: str, offset: Optional[int] = None, limit: Optional[int] = None) -> str:
        document = self._store.get_document(path)
        if document is None:
            raise DocumentNotFound(path)
        return document.read(offset, limit)

    def ls(self, path: str = "") -> List[str]:
        return self._store.ls(path)

    def call(self, name: str, params: ToolParams = None) -> Any:
        """Dispatch a tool call by name with its JSON-shaped arguments."""
        model = PARAMS_BY_TOOL.get(name)
        if model is None:
            raise UnknownOperation(name)

        if isinstance(params, str):
            try:
                params = json.loads(params)
            except ValueError as exc:
                raise InvalidParameters(f"invalid arguments for {name}: {exc}") from exc
        try:
            arguments = model.model_validate(params if params is not None else {})
        except ValidationError as exc:
            raise InvalidParameters(f"invalid arguments for {name}: {exc}") from exc

        if isinstance(arguments, GrepParams):
            return [result.to_dict() for result in self.grep(arguments.pattern, arguments.glob)]
        if isinstance(arguments, ReadParams):
            return self.read(arguments.path, arguments.offset, arguments.limit)
        if isinstance(arguments, LsParams):
            return self.ls(arguments.path)
        raise UnknownOperation(name)

    def tool_definitions(self) -> List[Dict[str, Any]]:
        return copy.deepcopy(TOOL_DEFINITIONS)

    def tool_definitions_json(self) -> str:
        return json.dumps(TOOL_DEFINITIONS, separators=(",", ":"))

    def document_count(self) -> int:
        return self._store.document_count()

    def token_count(self) -> int:
        return self._store.token_count()
