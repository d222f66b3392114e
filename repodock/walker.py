"""Depth-first repository walking shared by the analyzers."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, List, Set

from .config import DEFAULT_LARGE_FILE_THRESHOLD
from .logging import get_logger

EXCLUDED_DIRS = frozenset(
    {
        "node_modules",
        ".git",
        "dist",
        "build",
        ".next",
        "target",
    }
)

SENSITIVE_FILE_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern)
    for pattern in (
        r"\.env$",
        r"\.key$",
        r"\.pem$",
        r"id_rsa$",
        r"id_dsa$",
        r"\.keystore$",
        r"\.jks$",
        r"\.pfx$",
        r"\.p12$",
        r"\.crt$",
        r"\.csr$",
        r"\.der$",
        r"^credentials\.json$",
        r"\.sublime-project$",
        r"\.sublime-workspace$",
        r"\.htpasswd$",
    )
)

logger = get_logger("walker")


@dataclass
class WalkResult:
    """Aggregated facts gathered during a single pass over the tree."""

    total_files: int = 0
    sensitive_files: List[str] = field(default_factory=list)
    large_files: List[str] = field(default_factory=list)


def is_sensitive_filename(name: str) -> bool:
    return any(pattern.search(name) for pattern in SENSITIVE_FILE_PATTERNS)


def iter_files(root: Path, excluded: Iterable[str] = EXCLUDED_DIRS) -> Iterator[Path]:
    """Yield regular files below ``root`` depth-first, skipping excluded directories.

    Symlinked directories are followed once; a directory whose real path was
    already visited is not entered again, so cyclic links terminate.
    """
    excluded_set = set(excluded)
    visited: Set[str] = set()

    def _on_error(exc: OSError) -> None:
        logger.warning("Skipping unreadable directory %s: %s", exc.filename, exc.strerror)

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error, followlinks=True):
        real = os.path.realpath(dirpath)
        if real in visited:
            dirnames[:] = []
            continue
        visited.add(real)

        dirnames[:] = sorted(name for name in dirnames if name not in excluded_set)
        current_dir = Path(dirpath)
        for filename in sorted(filenames):
            path = current_dir / filename
            if path.is_file():
                yield path


def walk_repository(
    root: Path,
    *,
    extra_excludes: Iterable[str] = (),
    large_file_threshold: int = DEFAULT_LARGE_FILE_THRESHOLD,
) -> WalkResult:
    """Count files and collect sensitive/large file paths in one traversal."""
    result = WalkResult()
    excluded = EXCLUDED_DIRS.union(extra_excludes)
    for path in iter_files(root, excluded):
        result.total_files += 1
        rel_path = path.relative_to(root).as_posix()
        if is_sensitive_filename(path.name):
            result.sensitive_files.append(rel_path)
        try:
            size = path.stat().st_size
        except OSError as exc:
            logger.debug("Could not stat %s: %s", rel_path, exc)
            continue
        if size > large_file_threshold:
            result.large_files.append(rel_path)
    return result


__all__ = [
    "EXCLUDED_DIRS",
    "SENSITIVE_FILE_PATTERNS",
    "WalkResult",
    "is_sensitive_filename",
    "iter_files",
    "walk_repository",
]
