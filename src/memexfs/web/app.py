"""FastAPI application exposing the MemexFS tools over HTTP."""

from __future__ import annotations

import asyncio
import logging
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import Body, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from memexfs.config import AppConfig
from memexfs.errors import (
    ConstructionError,
    DocumentNotFound,
    MemexError,
    UnknownOperation,
)
from memexfs.fs import MemexFS
from memexfs.models import SearchResult
from memexfs.tools import GrepParams, LsParams, ReadParams

LOGGER = logging.getLogger(__name__)

app = FastAPI(title="MemexFS", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

_fs: MemexFS | None = None
_fs_lock = threading.Lock()


class ReloadPayload(BaseModel):
    root: str | None = None


def _build_filesystem(root: Path | None) -> MemexFS:
    config = AppConfig(root=root if root is not None else AppConfig().root)
    resolved_root = config.resolve_root(Path.cwd())
    return MemexFS.from_directory(
        resolved_root, extensions=config.extensions, max_results=config.max_results
    )


def set_filesystem(fs: MemexFS | None) -> None:
    """Swap in a fully built filesystem; in-flight requests keep the old one."""
    global _fs
    with _fs_lock:
        _fs = fs


def get_filesystem() -> MemexFS:
    global _fs
    with _fs_lock:
        if _fs is None:
            try:
                _fs = _build_filesystem(None)
            except ConstructionError as exc:
                raise HTTPException(
                    status_code=503, detail=f"No documents loaded: {exc}"
                ) from exc
        return _fs


def _http_error(exc: MemexError) -> HTTPException:
    if isinstance(exc, (DocumentNotFound, UnknownOperation)):
        return HTTPException(status_code=404, detail=str(exc))
    return HTTPException(status_code=400, detail=str(exc))


@app.on_event("startup")
async def startup_event() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")


@app.get("/tools")
async def list_tools() -> List[Dict[str, Any]]:
    return get_filesystem().tool_definitions()


@app.get("/stats")
async def stats() -> Dict[str, int]:
    fs = get_filesystem()
    return {"document_count": fs.document_count(), "token_count": fs.token_count()}


@app.post("/grep")
async def grep(payload: GrepParams) -> Dict[str, List[SearchResult]]:
    try:
        results = get_filesystem().grep(payload.pattern, payload.glob)
    except MemexError as exc:
        raise _http_error(exc) from exc
    return {"results": results}


@app.post("/read")
async def read(payload: ReadParams) -> Dict[str, str]:
    try:
        content = get_filesystem().read(payload.path, payload.offset, payload.limit)
    except MemexError as exc:
        raise _http_error(exc) from exc
    return {"content": content}


@app.post("/ls")
async def ls(payload: LsParams) -> Dict[str, List[str]]:
    return {"entries": get_filesystem().ls(payload.path)}


@app.post("/call/{name}")
async def call_tool(
    name: str, params: Optional[Dict[str, Any]] = Body(default=None)
) -> Dict[str, Any]:
    try:
        result = get_filesystem().call(name, params or {})
    except MemexError as exc:
        raise _http_error(exc) from exc
    return {"result": result}


@app.post("/reload")
async def reload_documents(payload: ReloadPayload | None = None) -> Dict[str, Any]:
    root = Path(payload.root).expanduser() if payload is not None and payload.root else None
    try:
        fs = await asyncio.to_thread(_build_filesystem, root)
    except ConstructionError as exc:
        LOGGER.error("Reload failed: %s", exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    set_filesystem(fs)
    return {"status": "ok", "document_count": fs.document_count()}
