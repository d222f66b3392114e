"""Manifest and dependency analyzers."""

from __future__ import annotations

import json
from typing import Any, Dict, Tuple

from ..logging import get_logger
from ..models import PackageInfo
from .base import Analyzer, RepoContext
from .utils import read_text

logger = get_logger("analyzers.dependencies")

MANIFEST_CANDIDATES: Tuple[str, ...] = (
    "package.json",
    "requirements.txt",
    "setup.py",
    "pyproject.toml",
    "pom.xml",
    "build.gradle",
    "composer.json",
    "go.mod",
    "Gemfile",
    "Cargo.toml",
    "pubspec.yaml",
)


def _non_empty_mapping(value: Any) -> bool:
    return isinstance(value, dict) and len(value) > 0


def analyze_package(context: RepoContext) -> PackageInfo:
    """Return the first readable manifest; malformed package.json is skipped."""
    for candidate in MANIFEST_CANDIDATES:
        text = read_text(context.root, candidate)
        if text is None:
            continue
        if candidate != "package.json":
            return PackageInfo(exists=True, path=candidate, content=text)
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as exc:
            logger.warning("Error parsing package.json, treating it as absent: %s", exc)
            continue
        if not isinstance(parsed, dict):
            logger.warning("package.json does not contain an object, treating it as absent")
            continue
        return PackageInfo(
            exists=True,
            path=candidate,
            content=parsed,
            has_scripts=_non_empty_mapping(parsed.get("scripts")),
            has_dependencies=_non_empty_mapping(parsed.get("dependencies")),
            has_dev_dependencies=_non_empty_mapping(parsed.get("devDependencies")),
        )
    return PackageInfo()


class PackageAnalyzer(Analyzer):
    """Locates the primary dependency manifest."""

    name = "package"

    def analyze(self, context: RepoContext) -> Dict[str, Any]:
        return {"package": analyze_package(context)}


class DependencyAnalyzer(Analyzer):
    """Buckets dependency names from every manifest by keyword."""

    name = "dependencies"

    def analyze(self, context: RepoContext) -> Dict[str, Any]:
        buckets = context.dependency_buckets
        logger.debug(
            "Categorized %d dependencies", len(context.dependency_names)
        )
        return {"dependencies": buckets}
