"""MemexFS - read-only grep/read/ls over an in-memory knowledge base."""

from memexfs.errors import (
    ConstructionError,
    DocumentNotFound,
    InvalidParameters,
    InvalidPattern,
    InvalidRegex,
    MalformedInputError,
    MemexError,
    NoDocumentsError,
    RegexTimeout,
    UnknownOperation,
)
from memexfs.fs import MemexFS
from memexfs.models import Document, SearchResult
from memexfs.tools import TOOL_DEFINITIONS

__version__ = "0.1.0"

__all__ = [
    "ConstructionError",
    "Document",
    "DocumentNotFound",
    "InvalidParameters",
    "InvalidPattern",
    "InvalidRegex",
    "MalformedInputError",
    "MemexError",
    "MemexFS",
    "NoDocumentsError",
    "RegexTimeout",
    "SearchResult",
    "TOOL_DEFINITIONS",
    "UnknownOperation",
]
