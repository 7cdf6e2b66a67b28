"""Tool schema published to agents and the argument models behind it."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

TOOL_DEFINITIONS: List[Dict[str, Any]] = [
    {
        "name": "grep",
        "description": (
            "Search for a pattern across all documents. Returns matching file paths, "
            "line numbers, and content. Use this to find relevant documents before reading them."
        ),
        "parameters": {
            "pattern": {"type": "string", "description": "Search pattern (supports regex)"},
            "glob": {
                "type": "string",
                "description": "Optional file pattern filter, e.g. 'billing/**/*.md'",
            },
        },
        "required": ["pattern"],
    },
    {
        "name": "read",
        "description": (
            "Read the contents of a document. Returns the full document or a specific line "
            "range. Use this after grep to get the full context of a matching document."
        ),
        "parameters": {
            "path": {
                "type": "string",
                "description": "Document path relative to the knowledge base root",
            },
            "offset": {
                "type": "number",
                "description": "Line number to start reading from (1-indexed)",
            },
            "limit": {"type": "number", "description": "Number of lines to return"},
        },
        "required": ["path"],
    },
    {
        "name": "ls",
        "description": (
            "List the contents of a directory. Returns immediate children: file names and "
            "subdirectory names (with trailing '/'). Use this to explore the document "
            "structure before grepping or reading."
        ),
        "parameters": {
            "path": {
                "type": "string",
                "description": (
                    "Directory path to list, e.g. 'account' or 'billing/invoices'. "
                    "Use empty string or '.' for root."
                ),
            },
        },
        "required": ["path"],
    },
]


class _ToolParams(BaseModel):
    model_config = ConfigDict(extra="ignore")


class GrepParams(_ToolParams):
    pattern: str
    glob: Optional[str] = None


class ReadParams(_ToolParams):
    path: str
    offset: Optional[int] = Field(default=None, ge=0)
    limit: Optional[int] = Field(default=None, ge=0)


class LsParams(_ToolParams):
    path: str


PARAMS_BY_TOOL: Dict[str, type[_ToolParams]] = {
    "grep": GrepParams,
    "read": ReadParams,
    "ls": LsParams,
}
