"""Command line interface for MemexFS."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from memexfs.config import AppConfig
from memexfs.errors import ConstructionError, MemexError
from memexfs.fs import MemexFS
from memexfs.tools import TOOL_DEFINITIONS
from memexfs.web.app import app as web_app
from memexfs.web.app import set_filesystem

console = Console()
app = typer.Typer(help="MemexFS - grep, read and ls over a knowledge base of text documents")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _load_filesystem(root: Optional[Path]) -> MemexFS:
    config = AppConfig(root=root if root is not None else AppConfig().root)
    resolved_root = config.resolve_root(Path.cwd())
    if not resolved_root.is_dir():
        raise typer.BadParameter(f"Document root not found: {resolved_root}")
    try:
        return MemexFS.from_directory(
            resolved_root, extensions=config.extensions, max_results=config.max_results
        )
    except ConstructionError as exc:
        console.print(f"[yellow]No documents loaded from {resolved_root}: {exc}[/yellow]")
        raise typer.Exit(code=1) from exc


def _fail(exc: MemexError) -> NoReturn:
    console.print(f"[red]Error:[/red] {escape(str(exc))}")
    raise typer.Exit(code=1)


@app.command()
def grep(
    pattern: str = typer.Argument(..., help="Search pattern (regex when it has metacharacters)"),
    glob: Optional[str] = typer.Option(None, "--glob", "-g", help="Filter paths, e.g. 'billing/**/*.md'"),
    root: Path = typer.Option(None, "--root", help="Document root directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Search every document for a pattern."""
    _setup_logging(verbose)
    fs = _load_filesystem(root)
    try:
        results = fs.grep(pattern, glob)
    except MemexError as exc:
        _fail(exc)

    if not results:
        console.print("[yellow]No matches found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Path")
    table.add_column("Line", justify="right")
    table.add_column("Content")

    for result in results:
        table.add_row(result.path, str(result.line), result.content[:180])

    console.print(table)


@app.command()
def read(
    path: str = typer.Argument(..., help="Document path relative to the root"),
    offset: Optional[int] = typer.Option(None, help="First line to show (1-indexed)"),
    limit: Optional[int] = typer.Option(None, help="Number of lines to show"),
    root: Path = typer.Option(None, "--root", help="Document root directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Print a document, or a line range of it, with line numbers."""
    _setup_logging(verbose)
    fs = _load_filesystem(root)
    try:
        content = fs.read(path, offset, limit)
    except MemexError as exc:
        _fail(exc)
    console.print(content, markup=False, highlight=False)


@app.command()
def ls(
    path: str = typer.Argument("", help="Directory to list; empty or '.' for the root"),
    root: Path = typer.Option(None, "--root", help="Document root directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """List the immediate children of a virtual directory."""
    _setup_logging(verbose)
    fs = _load_filesystem(root)
    entries = fs.ls(path)
    if not entries:
        console.print("[yellow]Empty directory.[/yellow]")
        return
    for entry in entries:
        console.print(entry, markup=False, highlight=False)


@app.command()
def tools() -> None:
    """Print the tool definitions offered to agents."""
    typer.echo(json.dumps(TOOL_DEFINITIONS, indent=2))


@app.command()
def stats(
    root: Path = typer.Option(None, "--root", help="Document root directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Show document and token counts."""
    _setup_logging(verbose)
    fs = _load_filesystem(root)
    console.print(f"Documents: {fs.document_count()}, tokens: {fs.token_count()}")


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", help="Host interface"),
    port: int = typer.Option(8000, help="Server port"),
    root: Path = typer.Option(None, "--root", help="Document root directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Serve the tools over HTTP."""
    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover - optional extra
        raise typer.BadParameter(
            "uvicorn is not installed. Install the web extras with \"python -m pip install '.[web]'\""
        ) from exc

    _setup_logging(verbose)
    fs = _load_filesystem(root)
    set_filesystem(fs)

    console.print(
        f"Starting web interface on http://{host}:{port} ({fs.document_count()} documents)"
    )
    uvicorn.run(
        web_app,
        host=host,
        port=port,
        reload=False,
        log_level="info",
    )
