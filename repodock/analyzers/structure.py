"""Conventional directory layout detection."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Tuple

from ..models import StructureInfo
from .base import Analyzer, RepoContext

# Field name -> directories, any of which sets the flag.
STRUCTURE_DIRECTORIES: Mapping[str, Tuple[str, ...]] = {
    "src": ("src",),
    "app": ("app",),
    "public": ("public",),
    "static": ("static",),
    "config": ("config",),
    "tests": ("tests", "__tests__", "test"),
    "docs": ("docs",),
    "logs": ("logs",),
    "tmp": ("tmp",),
    "pages": ("pages",),
    "components": ("components",),
    "views": ("views",),
    "controllers": ("controllers",),
    "models": ("models",),
    "routes": ("routes",),
    "middleware": ("middleware",),
    "utils": ("utils", "lib"),
    "assets": ("assets",),
}


class StructureAnalyzer(Analyzer):
    """Flags which conventional directories exist at the repository root."""

    name = "structure"

    def analyze(self, context: RepoContext) -> Dict[str, Any]:
        flags = {
            field_name: any(context.exists(directory) for directory in directories)
            for field_name, directories in STRUCTURE_DIRECTORIES.items()
        }
        return {"structure": StructureInfo(**flags)}
