"""Error types raised by MemexFS operations."""

from __future__ import annotations


class MemexError(Exception):
    """Base class for every failure reported to a MemexFS caller."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ConstructionError(MemexError):
    """The document set could not be turned into a store."""


class NoDocumentsError(ConstructionError):
    def __init__(self) -> None:
        super().__init__("no documents provided")


class MalformedInputError(ConstructionError):
    """Input pairs were not (path, text) strings, or the JSON payload was invalid."""


class InvalidPattern(MemexError):
    def __init__(self, message: str = "empty search pattern") -> None:
        super().__init__(message)


class InvalidRegex(MemexError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"invalid regex: {detail}")
        self.detail = detail


class RegexTimeout(MemexError):
    def __init__(self, seconds: float) -> None:
        super().__init__(f"regex search timed out after {seconds:g}s")
        self.seconds = seconds


class DocumentNotFound(MemexError):
    def __init__(self, path: str) -> None:
        super().__init__(f"document not found: {path}")
        self.path = path


class UnknownOperation(MemexError):
    def __init__(self, name: str) -> None:
        super().__init__(f"unknown tool: {name}")
        self.name = name


class InvalidParameters(MemexError):
    """Tool arguments failed validation."""
