"""Base classes and shared context for analyzer plugins."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Mapping, Optional

from ..config import RepodockConfig, default_config
from ..logging import get_logger
from ..models import DependencyBuckets
from .keywords import DependencyCategorizer
from .utils import load_all_dependencies, load_package_json

logger = get_logger("analyzers")


@dataclass
class RepoContext:
    """Per-analysis view of the repository root; never shared across calls."""

    root: Path
    config: RepodockConfig = field(default_factory=default_config)

    def exists(self, relative: str) -> bool:
        return (self.root / relative).exists()

    def is_dir(self, relative: str) -> bool:
        return (self.root / relative).is_dir()

    @cached_property
    def root_entries(self) -> FrozenSet[str]:
        try:
            return frozenset(entry.name for entry in self.root.iterdir())
        except OSError as exc:
            logger.warning("Could not list %s: %s", self.root, exc)
            return frozenset()

    @cached_property
    def package_json(self) -> Optional[Dict[str, Any]]:
        return load_package_json(self.root)

    @cached_property
    def dependency_names(self) -> List[str]:
        return load_all_dependencies(self.root)

    @cached_property
    def categorizer(self) -> DependencyCategorizer:
        return DependencyCategorizer.with_overrides(self.config.keywords)

    @cached_property
    def dependency_buckets(self) -> DependencyBuckets:
        return self.categorizer.categorize(self.dependency_names)


class Analyzer(ABC):
    """Contract for analyzers that contribute fields to an Analysis."""

    name: str = "analyzer"

    @abstractmethod
    def analyze(self, context: RepoContext) -> Mapping[str, Any]:
        """Return a mapping of Analysis field names to values."""
