"""Shared helper utilities for analyzer implementations."""

from __future__ import annotations

import json
import re
import tomllib
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Set

import yaml

from ..logging import get_logger

logger = get_logger("analyzers.utils")

_REQUIREMENT_SPLIT = re.compile(r"[<>=!~;\[\s@]")


def read_text(root: Path, relative: str) -> Optional[str]:
    """Return file text, or None when it is missing or unreadable."""
    path = root / relative
    if not path.is_file():
        return None
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        logger.warning("Error reading %s: %s", relative, exc)
        return None


def exists(root: Path, relative: str) -> bool:
    return (root / relative).exists()


# Node.js dependency helpers


def load_package_json(root: Path) -> Optional[Dict[str, Any]]:
    """Return the parsed package.json mapping, or None when absent or malformed."""
    text = read_text(root, "package.json")
    if text is None:
        return None
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        logger.warning("Malformed package.json: %s", exc)
        return None
    return data if isinstance(data, dict) else None


def load_node_dependencies(root: Path) -> Dict[str, List[str]]:
    """Return Node.js dependencies separated into runtime/dev lists."""
    data = load_package_json(root) or {}

    def _extract(key: str) -> List[str]:
        deps = data.get(key, {})
        if isinstance(deps, dict):
            return [str(name) for name in deps.keys()]
        return []

    return {
        "dependencies": _extract("dependencies"),
        "devDependencies": _extract("devDependencies"),
    }


def detect_node_package_manager(lockfiles: Set[str]) -> str:
    """Infer the preferred Node package manager based on lockfiles."""
    if "pnpm-lock.yaml" in lockfiles:
        return "pnpm"
    if "yarn.lock" in lockfiles:
        return "yarn"
    return "npm"


def build_node_script_command(script: str, manager: str) -> str:
    manager = manager.lower()
    if manager == "pnpm":
        return f"pnpm {script}"
    if manager == "yarn":
        return f"yarn {script}"
    if script in {"start", "test"}:
        return f"npm {script}"
    return f"npm run {script}"


# Python dependency helpers


def load_python_dependencies(root: Path) -> List[str]:
    """Collect Python dependencies from requirements.txt, pyproject.toml and Pipfile."""
    deps: List[str] = []

    requirements = read_text(root, "requirements.txt")
    if requirements is not None:
        deps.extend(parse_requirements(requirements))

    pyproject = read_text(root, "pyproject.toml")
    if pyproject is not None:
        deps.extend(parse_pyproject(pyproject))

    pipfile = read_text(root, "Pipfile")
    if pipfile is not None:
        deps.extend(_parse_pipfile(pipfile))

    return _unique(deps)


def _requirement_name(spec: str) -> str:
    return _REQUIREMENT_SPLIT.split(spec.strip(), 1)[0].strip()


def parse_requirements(text: str) -> List[str]:
    packages: List[str] = []
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith(("#", "-")):
            continue
        name = _requirement_name(stripped)
        if name:
            packages.append(name)
    return packages


def parse_pyproject(text: str) -> List[str]:
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        logger.warning("Malformed pyproject.toml: %s", exc)
        return []

    dependencies: List[Any] = []
    project = data.get("project")
    if isinstance(project, dict):
        required = project.get("dependencies")
        if isinstance(required, list):
            dependencies.extend(required)
        optional = project.get("optional-dependencies")
        if isinstance(optional, dict):
            for values in optional.values():
                if isinstance(values, list):
                    dependencies.extend(values)

    tool = data.get("tool")
    poetry = tool.get("poetry", {}) if isinstance(tool, dict) else {}
    if isinstance(poetry, dict):
        for section in ("dependencies", "dev-dependencies"):
            entries = poetry.get(section)
            if isinstance(entries, dict):
                dependencies.extend(str(name) for name in entries.keys())

    packages: List[str] = []
    for dep in dependencies:
        if isinstance(dep, str):
            name = _requirement_name(dep)
            if name and name.lower() != "python":
                packages.append(name)
    return packages


def _parse_pipfile(text: str) -> List[str]:
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        logger.warning("Malformed Pipfile: %s", exc)
        return []
    packages: List[str] = []
    for section in ("packages", "dev-packages"):
        entries = data.get(section)
        if isinstance(entries, dict):
            packages.extend(str(name) for name in entries.keys())
    return packages


# Java dependency helpers


def load_java_dependencies(root: Path) -> List[str]:
    """Collect Java dependencies from pom.xml and build.gradle files."""
    deps: List[str] = []
    pom = read_text(root, "pom.xml")
    if pom is not None:
        deps.extend(_parse_pom_dependencies(pom))

    for gradle_file in ("build.gradle", "build.gradle.kts"):
        content = read_text(root, gradle_file)
        if content is not None:
            deps.extend(_parse_gradle_dependencies(content))

    return _unique(deps)


def _parse_pom_dependencies(text: str) -> List[str]:
    deps: List[str] = []
    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        logger.warning("Malformed pom.xml: %s", exc)
        return deps

    namespace = _detect_xml_namespace(root)
    tag = f"{{{namespace}}}dependency" if namespace else "dependency"
    group_tag = f"{{{namespace}}}groupId" if namespace else "groupId"
    artifact_tag = f"{{{namespace}}}artifactId" if namespace else "artifactId"

    for dep in root.iter(tag):
        group = dep.findtext(group_tag, default="")
        artifact = dep.findtext(artifact_tag, default="")
        if group and artifact:
            deps.append(f"{group}:{artifact}")
    return deps


def _detect_xml_namespace(element: ET.Element) -> str | None:
    match = re.match(r"\{(.+)}", element.tag)
    return match.group(1) if match else None


def _parse_gradle_dependencies(content: str) -> List[str]:
    deps: List[str] = []
    pattern = re.compile(r"['\"]([\w\-.]+:[\w\-.]+)(?::[\w\-.]+)?['\"]")
    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("//"):
            continue
        if any(token in line for token in ("implementation", "api", "compile", "runtimeOnly", "testImplementation")):
            match = pattern.search(line)
            if match:
                deps.append(match.group(1))
    return deps


# Other ecosystems


def load_composer_dependencies(root: Path) -> List[str]:
    text = read_text(root, "composer.json")
    if text is None:
        return []
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        logger.warning("Malformed composer.json: %s", exc)
        return []
    if not isinstance(data, dict):
        return []
    names: List[str] = []
    for key in ("require", "require-dev"):
        section = data.get(key)
        if isinstance(section, dict):
            names.extend(str(name) for name in section.keys() if name != "php")
    return names


def load_gemfile_dependencies(root: Path) -> List[str]:
    text = read_text(root, "Gemfile")
    if text is None:
        return []
    return re.findall(r"^\s*gem\s+['\"]([^'\"]+)['\"]", text, re.MULTILINE)


def load_go_dependencies(root: Path) -> List[str]:
    text = read_text(root, "go.mod")
    if text is None:
        return []
    deps: List[str] = []
    in_block = False
    for raw in text.splitlines():
        line = raw.split("//", 1)[0].strip()
        if not line:
            continue
        if line.startswith("require ("):
            in_block = True
            continue
        if in_block:
            if line == ")":
                in_block = False
                continue
            deps.append(line.split()[0])
        elif line.startswith("require "):
            parts = line.split()
            if len(parts) >= 2:
                deps.append(parts[1])
    return deps


def load_cargo_dependencies(root: Path) -> List[str]:
    text = read_text(root, "Cargo.toml")
    if text is None:
        return []
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        logger.warning("Malformed Cargo.toml: %s", exc)
        return []
    names: List[str] = []
    for section in ("dependencies", "dev-dependencies", "build-dependencies"):
        entries = data.get(section)
        if isinstance(entries, dict):
            names.extend(str(name) for name in entries.keys())
    return names


def load_pubspec_dependencies(root: Path) -> List[str]:
    text = read_text(root, "pubspec.yaml")
    if text is None:
        return []
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        logger.warning("Malformed pubspec.yaml: %s", exc)
        return []
    if not isinstance(data, dict):
        return []
    names: List[str] = []
    for section in ("dependencies", "dev_dependencies"):
        entries = data.get(section)
        if isinstance(entries, dict):
            names.extend(str(name) for name in entries.keys() if name != "flutter")
    return names


def load_all_dependencies(root: Path) -> List[str]:
    """Return dependency names from every recognised manifest, package.json first."""
    node = load_node_dependencies(root)
    names: List[str] = list(node["dependencies"]) + list(node["devDependencies"])
    names.extend(load_python_dependencies(root))
    names.extend(load_java_dependencies(root))
    names.extend(load_composer_dependencies(root))
    names.extend(load_gemfile_dependencies(root))
    names.extend(load_go_dependencies(root))
    names.extend(load_cargo_dependencies(root))
    names.extend(load_pubspec_dependencies(root))
    return _unique(names)


def _unique(items: Sequence[str]) -> List[str]:
    seen: Set[str] = set()
    ordered: List[str] = []
    for item in items:
        if item and item not in seen:
            seen.add(item)
            ordered.append(item)
    return ordered
