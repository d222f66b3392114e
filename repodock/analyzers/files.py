"""Inspection of deployment, documentation and environment files at the root."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..logging import get_logger
from ..models import (
    ArtifactInfo,
    DockerignoreInfo,
    EnvFile,
    EnvInfo,
    GitignoreInfo,
    LicenseInfo,
    ReadmeInfo,
)
from .base import Analyzer, RepoContext
from .utils import read_text

logger = get_logger("analyzers.files")

DOCKERFILE_CANDIDATES: Tuple[str, ...] = ("Dockerfile", "Dockerfile.dev", "Dockerfile.prod")
COMPOSE_CANDIDATES: Tuple[str, ...] = (
    "docker-compose.yml",
    "docker-compose.yaml",
    "docker-compose.override.yml",
    "compose.yml",
    "compose.yaml",
)
README_CANDIDATES: Tuple[str, ...] = ("README.md", "README", "Readme.md", "readme.md", "README.txt")
ENV_CANDIDATES: Tuple[str, ...] = (
    ".env",
    ".env.local",
    ".env.development",
    ".env.production",
    ".env.example",
)
LICENSE_CANDIDATES: Tuple[str, ...] = ("LICENSE", "LICENSE.md", "LICENSE.txt", "COPYING")
LOCKFILE_CANDIDATES: Tuple[str, ...] = (
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "poetry.lock",
    "Pipfile.lock",
    "composer.lock",
    "Gemfile.lock",
    "Cargo.lock",
    "go.sum",
    "pubspec.lock",
)

DOCKERFILE_INSTRUCTIONS: Tuple[str, ...] = ("FROM", "WORKDIR", "COPY", "RUN", "CMD")


def validate_dockerfile(content: str) -> bool:
    """Smoke test: at least one core instruction token appears."""
    return any(token in content for token in DOCKERFILE_INSTRUCTIONS)


def validate_compose(content: str) -> bool:
    """Smoke test: a ``services:`` or ``version:`` line is present."""
    return any("services:" in line or "version:" in line for line in content.splitlines())


def _first_readable(root: Path, candidates: Sequence[str]) -> Optional[Tuple[str, str]]:
    for candidate in candidates:
        content = read_text(root, candidate)
        if content is not None:
            return candidate, content
    return None


def analyze_dockerfile(root: Path) -> ArtifactInfo:
    found = _first_readable(root, DOCKERFILE_CANDIDATES)
    if found is None:
        return ArtifactInfo()
    path, content = found
    return ArtifactInfo(exists=True, path=path, content=content, is_valid=validate_dockerfile(content))


def analyze_compose(root: Path) -> ArtifactInfo:
    found = _first_readable(root, COMPOSE_CANDIDATES)
    if found is None:
        return ArtifactInfo()
    path, content = found
    return ArtifactInfo(exists=True, path=path, content=content, is_valid=validate_compose(content))


def analyze_readme(root: Path) -> ReadmeInfo:
    found = _first_readable(root, README_CANDIDATES)
    if found is None:
        return ReadmeInfo()
    path, content = found
    lower = content.lower()
    return ReadmeInfo(
        exists=True,
        path=path,
        content=content,
        is_valid=bool(content.strip()),
        has_docker_info="docker" in lower,
        has_installation="install" in lower,
        has_usage="usage" in lower or "how to" in lower,
    )


def analyze_gitignore(root: Path) -> GitignoreInfo:
    content = read_text(root, ".gitignore")
    if content is None:
        return GitignoreInfo()
    return GitignoreInfo(
        exists=True,
        content=content,
        has_node_modules="node_modules" in content,
        has_env_files=".env" in content,
        has_logs="logs" in content,
        has_build="build" in content or "dist" in content,
    )


def analyze_env_files(root: Path) -> EnvInfo:
    files: List[EnvFile] = []
    for candidate in ENV_CANDIDATES:
        content = read_text(root, candidate)
        if content is None:
            continue
        lower = content.lower()
        files.append(
            EnvFile(
                path=candidate,
                content=content,
                has_database_url="database" in lower or "db_" in lower,
                has_api_keys="api" in lower or "key" in lower,
                has_port="port" in lower,
            )
        )
    return EnvInfo(files=tuple(files))


def analyze_dockerignore(root: Path) -> DockerignoreInfo:
    content = read_text(root, ".dockerignore")
    if content is None:
        return DockerignoreInfo()
    return DockerignoreInfo(exists=True, content=content)


def analyze_license(root: Path) -> LicenseInfo:
    for candidate in LICENSE_CANDIDATES:
        if (root / candidate).is_file():
            return LicenseInfo(exists=True, path=candidate)
    return LicenseInfo()


class FilesAnalyzer(Analyzer):
    """Reports presence, content and validity of well-known root files."""

    name = "files"

    def analyze(self, context: RepoContext) -> Dict[str, Any]:
        root = context.root
        return {
            "dockerfile": analyze_dockerfile(root),
            "compose": analyze_compose(root),
            "readme": analyze_readme(root),
            "gitignore": analyze_gitignore(root),
            "env": analyze_env_files(root),
            "dockerignore": analyze_dockerignore(root),
            "license": analyze_license(root),
            "lockfiles": tuple(name for name in LOCKFILE_CANDIDATES if context.exists(name)),
        }
