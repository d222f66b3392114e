"""Helper utilities for constructing temporary repositories in tests."""

from __future__ import annotations

import json
import textwrap
from pathlib import Path
from typing import Any, Mapping

from repodock.analyzer import RepositoryAnalyzer
from repodock.config import RepodockConfig
from repodock.models import Analysis


class RepoBuilder:
    """Utility for writing files into a throwaway repository and analyzing it."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "repo"
        self.root.mkdir()

    def write(self, files: Mapping[str, str]) -> "RepoBuilder":
        """Write `path -> contents` entries into the repository."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")
        return self

    def write_json(self, relative: str, payload: Any) -> "RepoBuilder":
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        return self

    def mkdir(self, *relatives: str) -> "RepoBuilder":
        for relative in relatives:
            (self.root / relative).mkdir(parents=True, exist_ok=True)
        return self

    def analyze(self, config: RepodockConfig | None = None) -> Analysis:
        """Return a fresh analysis of the repository contents."""
        return RepositoryAnalyzer(config=config).analyze(self.root)

    def path(self) -> Path:
        """Return the repository root path."""
        return self.root


__all__ = ["RepoBuilder"]
