"""Dependency manifest, lockfile and package health rules."""

from __future__ import annotations

from typing import List, Mapping, Optional

from ..analyzers.utils import parse_pyproject, parse_requirements
from ..models import Analysis, PackageInfo, Severity
from .base import Finding, RuleGroup

DEPENDENCY = RuleGroup("dependency")

# Package name -> suggested replacement.
DEPRECATED_PACKAGES: Mapping[str, str] = {
    "request": "the built-in fetch API, axios or got",
    "moment": "date-fns, Day.js or Luxon",
    "node-sass": "sass (Dart Sass)",
    "tslint": "ESLint with typescript-eslint",
    "pycrypto": "pycryptodome",
    "nose": "pytest",
}

# Manifests whose ecosystem has a conventional lockfile.
LOCKED_MANIFESTS = frozenset(
    {
        "package.json",
        "pyproject.toml",
        "composer.json",
        "Gemfile",
        "Cargo.toml",
        "go.mod",
        "pubspec.yaml",
    }
)


def manifest_dependency_names(package: PackageInfo) -> List[str]:
    """Declared dependency names readable from the manifest content alone."""
    if not package.exists:
        return []
    if package.is_json:
        names: List[str] = []
        for key in ("dependencies", "devDependencies"):
            section = package.manifest_value(key)
            if isinstance(section, Mapping):
                names.extend(name for name in section if name not in names)
        return names
    if not isinstance(package.content, str):
        return []
    if package.path == "requirements.txt":
        return parse_requirements(package.content)
    if package.path == "pyproject.toml":
        return parse_pyproject(package.content)
    return []


@DEPENDENCY.rule("manifest-missing")
def manifest_missing(analysis: Analysis) -> Optional[Finding]:
    if analysis.package.exists:
        return None
    return Finding(
        Severity.MEDIUM,
        "No dependency manifest",
        "No package.json, requirements.txt, pom.xml or similar manifest was found.",
        "Declare dependencies in the ecosystem's manifest file.",
    )


@DEPENDENCY.rule("lockfile-missing")
def lockfile_missing(analysis: Analysis) -> Optional[Finding]:
    if not analysis.package.exists or analysis.lockfiles:
        return None
    if analysis.package.path not in LOCKED_MANIFESTS:
        return None
    return Finding(
        Severity.LOW,
        "No lockfile committed",
        f"{analysis.package.path} exists without a matching lockfile.",
        "Commit the lockfile so builds install the same dependency versions.",
    )


@DEPENDENCY.rule("no-test-framework")
def no_test_framework(analysis: Analysis) -> Optional[Finding]:
    if analysis.dependencies.testing:
        return None
    return Finding(
        Severity.MEDIUM,
        "No test framework detected",
        None,
        "Add a test framework and a test script so changes can be verified.",
    )


@DEPENDENCY.rule("deprecated-dependencies")
def deprecated_dependencies(analysis: Analysis) -> Optional[Finding]:
    found = [
        name
        for name in manifest_dependency_names(analysis.package)
        if name.lower() in DEPRECATED_PACKAGES
    ]
    if not found:
        return None
    suggestions = "; ".join(f"{name} -> {DEPRECATED_PACKAGES[name.lower()]}" for name in found)
    return Finding(
        Severity.LOW,
        "Deprecated dependencies",
        f"Deprecated packages in use: {', '.join(found)}",
        f"Replace them: {suggestions}.",
    )
