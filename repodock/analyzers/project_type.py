"""Ordered, first-match-wins project type detection."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Tuple

from ..logging import get_logger
from ..models import ProjectType
from .base import Analyzer, RepoContext

logger = get_logger("analyzers.project_type")


@dataclass(frozen=True)
class Refinement:
    """Narrows an ecosystem to a framework when its marker paths are present.

    ``all_of`` must all exist; when ``any_of`` is non-empty, at least one of
    those must exist too.
    """

    project_type: ProjectType
    all_of: Tuple[str, ...] = ()
    any_of: Tuple[str, ...] = ()

    def matches(self, exists: Callable[[str], bool]) -> bool:
        if not all(exists(path) for path in self.all_of):
            return False
        if self.any_of and not any(exists(path) for path in self.any_of):
            return False
        return True


@dataclass(frozen=True)
class DetectionRule:
    """One ecosystem entry in the detection decision list."""

    fallback: ProjectType
    markers: Tuple[str, ...] = ()
    suffixes: Tuple[str, ...] = ()
    refinements: Tuple[Refinement, ...] = ()

    def applies(self, exists: Callable[[str], bool], root_names: Iterable[str]) -> bool:
        if any(exists(marker) for marker in self.markers):
            return True
        if self.suffixes:
            return any(name.endswith(self.suffixes) for name in root_names)
        return False

    def resolve(self, exists: Callable[[str], bool]) -> ProjectType:
        for refinement in self.refinements:
            if refinement.matches(exists):
                return refinement.project_type
        return self.fallback


# Evaluated top to bottom; earlier ecosystems win when marker files overlap.
DETECTION_RULES: Tuple[DetectionRule, ...] = (
    DetectionRule(
        fallback=ProjectType.NODEJS,
        markers=("package.json",),
        refinements=(
            Refinement(ProjectType.ANGULAR, all_of=("angular.json",)),
            Refinement(ProjectType.VUE, all_of=("vue.config.js",)),
            Refinement(ProjectType.NEXTJS, all_of=("next.config.js",)),
            Refinement(ProjectType.NUXT, all_of=("nuxt.config.js",)),
            Refinement(ProjectType.REACT, all_of=("src", "public")),
            Refinement(ProjectType.EXPRESS, any_of=("app.js", "server.js")),
        ),
    ),
    DetectionRule(
        fallback=ProjectType.PYTHON,
        markers=("requirements.txt", "setup.py"),
        refinements=(
            Refinement(ProjectType.DJANGO, all_of=("manage.py",)),
            Refinement(ProjectType.FLASK, all_of=("app.py",)),
        ),
    ),
    DetectionRule(
        fallback=ProjectType.JAVA,
        markers=("pom.xml", "build.gradle"),
        refinements=(Refinement(ProjectType.SPRING, all_of=("src/main/java",)),),
    ),
    DetectionRule(
        fallback=ProjectType.PHP,
        markers=("composer.json",),
        refinements=(Refinement(ProjectType.LARAVEL, all_of=("artisan",)),),
    ),
    DetectionRule(fallback=ProjectType.GO, markers=("go.mod",)),
    DetectionRule(fallback=ProjectType.RUBY, markers=("Gemfile",)),
    DetectionRule(fallback=ProjectType.RUST, markers=("Cargo.toml",)),
    DetectionRule(fallback=ProjectType.FLUTTER, markers=("pubspec.yaml",)),
    DetectionRule(fallback=ProjectType.DOTNET, suffixes=(".csproj", ".vbproj", ".fsproj")),
)


def detect_project_type(
    root: Path,
    rules: Tuple[DetectionRule, ...] = DETECTION_RULES,
    *,
    root_names: Iterable[str] | None = None,
) -> ProjectType:
    """Return the first matching ecosystem for ``root`` or ``unknown``."""

    def _exists(relative: str) -> bool:
        return (root / relative).exists()

    if root_names is None:
        try:
            root_names = [entry.name for entry in root.iterdir()]
        except OSError as exc:
            logger.warning("Error detecting project type for %s: %s", root, exc)
            return ProjectType.UNKNOWN
    names = list(root_names)

    for rule in rules:
        if rule.applies(_exists, names):
            return rule.resolve(_exists)
    return ProjectType.UNKNOWN


class ProjectTypeAnalyzer(Analyzer):
    """Classifies the repository into a single ProjectType."""

    name = "project_type"

    def analyze(self, context: RepoContext) -> Dict[str, Any]:
        project_type = detect_project_type(context.root, root_names=context.root_entries)
        logger.debug("Detected project type %s", project_type.value)
        return {"project_type": project_type}
