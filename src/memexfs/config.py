"""Application configuration defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from memexfs.index.search import MAX_RESULTS

ROOT_ENV_VAR = "MEMEXFS_ROOT"


def _get_default_root() -> Path:
    """Pick the document root from the environment or the working directory."""
    env_root = os.environ.get(ROOT_ENV_VAR)
    if env_root:
        return Path(env_root).expanduser()

    # A local docs/ folder wins over the bare working directory
    local_docs = Path("docs")
    if local_docs.is_dir():
        return local_docs

    return Path(".")


@dataclass(slots=True)
class AppConfig:
    root: Path | None = None
    extensions: tuple[str, ...] = (".md",)
    max_results: int = MAX_RESULTS

    def __post_init__(self) -> None:
        if self.root is None:
            self.root = _get_default_root()

    def resolve_root(self, base_dir: Path | None = None) -> Path:
        if self.root is None:
            self.root = _get_default_root()
        if Path(self.root).is_absolute() or base_dir is None:
            return Path(self.root)
        return base_dir / self.root
