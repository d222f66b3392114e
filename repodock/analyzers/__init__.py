"""Analyzer implementations and discovery utilities."""

from __future__ import annotations

from typing import Callable, Dict, List, Sequence, Set

from .base import Analyzer, RepoContext
from .dependencies import DependencyAnalyzer, PackageAnalyzer
from .entrypoints import EntryPointAnalyzer
from .files import FilesAnalyzer
from .inventory import InventoryAnalyzer
from .project_type import DETECTION_RULES, ProjectTypeAnalyzer, detect_project_type
from .structure import StructureAnalyzer
from .tooling import ToolingAnalyzer

_BUILTIN_FACTORIES: Dict[str, Callable[[], Analyzer]] = {
    "project_type": ProjectTypeAnalyzer,
    "inventory": InventoryAnalyzer,
    "files": FilesAnalyzer,
    "package": PackageAnalyzer,
    "structure": StructureAnalyzer,
    "dependencies": DependencyAnalyzer,
    "entrypoints": EntryPointAnalyzer,
    "tooling": ToolingAnalyzer,
}


def discover_analyzers(enabled: Sequence[str] | None = None) -> List[Analyzer]:
    """Return instantiated analyzers in a stable order, honoring optional enabled names."""

    enabled_set: Set[str] | None = None
    if enabled is not None:
        enabled_set = {name.lower() for name in enabled}
        unknown = enabled_set.difference(_BUILTIN_FACTORIES)
        if unknown:
            missing = ", ".join(sorted(unknown))
            raise ValueError(f"Unknown analyzers requested: {missing}")

    analyzers: List[Analyzer] = []
    for name, factory in _BUILTIN_FACTORIES.items():
        if enabled_set is not None and name not in enabled_set:
            continue
        instance = factory()
        if not isinstance(instance, Analyzer):
            raise TypeError(f"Analyzer factory for '{name}' did not return an Analyzer instance")
        analyzers.append(instance)
    return analyzers


__all__ = [
    "Analyzer",
    "DETECTION_RULES",
    "RepoContext",
    "detect_project_type",
    "discover_analyzers",
]
