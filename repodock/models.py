"""Core data models shared across repodock components."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple


class ProjectType(str, Enum):
    """Closed set of ecosystems the analyzer can recognise."""

    NODEJS = "nodejs"
    REACT = "react"
    VUE = "vue"
    ANGULAR = "angular"
    NEXTJS = "nextjs"
    NUXT = "nuxt"
    EXPRESS = "express"
    PYTHON = "python"
    DJANGO = "django"
    FLASK = "flask"
    JAVA = "java"
    SPRING = "spring"
    PHP = "php"
    LARAVEL = "laravel"
    GO = "go"
    RUBY = "ruby"
    RUST = "rust"
    DOTNET = "dotnet"
    FLUTTER = "flutter"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


NODE_TYPES = frozenset(
    {
        ProjectType.NODEJS,
        ProjectType.REACT,
        ProjectType.VUE,
        ProjectType.ANGULAR,
        ProjectType.NEXTJS,
        ProjectType.NUXT,
        ProjectType.EXPRESS,
    }
)
PYTHON_TYPES = frozenset({ProjectType.PYTHON, ProjectType.DJANGO, ProjectType.FLASK})
JAVA_TYPES = frozenset({ProjectType.JAVA, ProjectType.SPRING})
PHP_TYPES = frozenset({ProjectType.PHP, ProjectType.LARAVEL})


class Severity(str, Enum):
    """Issue severity levels, ordered from most to least severe."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    def __str__(self) -> str:
        return self.value


_SEVERITY_RANK = {
    Severity.CRITICAL: 0,
    Severity.HIGH: 1,
    Severity.MEDIUM: 2,
    Severity.LOW: 3,
}


@dataclass(frozen=True)
class ArtifactInfo:
    """Presence and content of a Dockerfile or compose file."""

    exists: bool = False
    path: Optional[str] = None
    content: Optional[str] = None
    is_valid: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "exists": self.exists,
            "path": self.path,
            "content": self.content,
            "isValid": self.is_valid,
        }


@dataclass(frozen=True)
class ReadmeInfo:
    """Presence and coarse content signals for the project README."""

    exists: bool = False
    path: Optional[str] = None
    content: Optional[str] = None
    is_valid: bool = False
    has_docker_info: bool = False
    has_installation: bool = False
    has_usage: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "exists": self.exists,
            "path": self.path,
            "content": self.content,
            "isValid": self.is_valid,
            "hasDockerInfo": self.has_docker_info,
            "hasInstallation": self.has_installation,
            "hasUsage": self.has_usage,
        }


@dataclass(frozen=True)
class GitignoreInfo:
    exists: bool = False
    content: Optional[str] = None
    has_node_modules: bool = False
    has_env_files: bool = False
    has_logs: bool = False
    has_build: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "exists": self.exists,
            "content": self.content,
            "hasNodeModules": self.has_node_modules,
            "hasEnvFiles": self.has_env_files,
            "hasLogs": self.has_logs,
            "hasBuild": self.has_build,
        }


@dataclass(frozen=True)
class EnvFile:
    path: str
    content: str
    has_database_url: bool = False
    has_api_keys: bool = False
    has_port: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "content": self.content,
            "hasDatabaseUrl": self.has_database_url,
            "hasApiKeys": self.has_api_keys,
            "hasPort": self.has_port,
        }


@dataclass(frozen=True)
class EnvInfo:
    files: Tuple[EnvFile, ...] = ()

    @property
    def exists(self) -> bool:
        return bool(self.files)

    @property
    def count(self) -> int:
        return len(self.files)

    def paths(self) -> Tuple[str, ...]:
        return tuple(env_file.path for env_file in self.files)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "exists": self.exists,
            "files": [env_file.to_dict() for env_file in self.files],
            "count": self.count,
        }


@dataclass(frozen=True)
class PackageInfo:
    """The first dependency manifest found at the repository root.

    ``content`` holds the parsed mapping for ``package.json`` and the raw
    text for every other manifest. Treat it as read-only.
    """

    exists: bool = False
    path: Optional[str] = None
    content: Any = None
    has_scripts: bool = False
    has_dependencies: bool = False
    has_dev_dependencies: bool = False

    @property
    def is_json(self) -> bool:
        return isinstance(self.content, Mapping)

    def manifest_value(self, key: str) -> Any:
        """Return a top-level manifest field, or None for text manifests."""
        if isinstance(self.content, Mapping):
            return self.content.get(key)
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "exists": self.exists,
            "path": self.path,
            "content": copy.deepcopy(self.content),
            "hasScripts": self.has_scripts,
            "hasDependencies": self.has_dependencies,
            "hasDevDependencies": self.has_dev_dependencies,
        }


@dataclass(frozen=True)
class StructureInfo:
    """Conventional directories present at the repository root."""

    src: bool = False
    app: bool = False
    public: bool = False
    static: bool = False
    config: bool = False
    tests: bool = False
    docs: bool = False
    logs: bool = False
    tmp: bool = False
    pages: bool = False
    components: bool = False
    views: bool = False
    controllers: bool = False
    models: bool = False
    routes: bool = False
    middleware: bool = False
    utils: bool = False
    assets: bool = False

    def to_dict(self) -> Dict[str, bool]:
        return {item.name: getattr(self, item.name) for item in fields(self)}


@dataclass(frozen=True)
class DependencyBuckets:
    database: Tuple[str, ...] = ()
    web_framework: Tuple[str, ...] = ()
    testing: Tuple[str, ...] = ()
    build_tools: Tuple[str, ...] = ()
    utilities: Tuple[str, ...] = ()

    def is_empty(self) -> bool:
        return not any(
            (self.database, self.web_framework, self.testing, self.build_tools, self.utilities)
        )

    def to_dict(self) -> Dict[str, list]:
        return {
            "database": list(self.database),
            "webFramework": list(self.web_framework),
            "testing": list(self.testing),
            "buildTools": list(self.build_tools),
            "utilities": list(self.utilities),
        }


@dataclass(frozen=True)
class DockerignoreInfo:
    exists: bool = False
    content: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"exists": self.exists, "content": self.content}


@dataclass(frozen=True)
class LicenseInfo:
    exists: bool = False
    path: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"exists": self.exists, "path": self.path}


@dataclass(frozen=True)
class Analysis:
    """Immutable description of one repository snapshot."""

    project_type: ProjectType
    total_files: int = 0
    dockerfile: ArtifactInfo = field(default_factory=ArtifactInfo)
    compose: ArtifactInfo = field(default_factory=ArtifactInfo)
    readme: ReadmeInfo = field(default_factory=ReadmeInfo)
    gitignore: GitignoreInfo = field(default_factory=GitignoreInfo)
    env: EnvInfo = field(default_factory=EnvInfo)
    package: PackageInfo = field(default_factory=PackageInfo)
    structure: StructureInfo = field(default_factory=StructureInfo)
    dependencies: DependencyBuckets = field(default_factory=DependencyBuckets)
    entry_points: Tuple[str, ...] = ()
    ports: Tuple[int, ...] = ()
    database: Tuple[str, ...] = ()
    frameworks: Tuple[str, ...] = ()
    build_tools: Tuple[str, ...] = ()
    test_framework: Tuple[str, ...] = ()
    linter: Tuple[str, ...] = ()
    ci: Tuple[str, ...] = ()
    dockerignore: DockerignoreInfo = field(default_factory=DockerignoreInfo)
    license: LicenseInfo = field(default_factory=LicenseInfo)
    lockfiles: Tuple[str, ...] = ()
    sensitive_files: Tuple[str, ...] = ()
    large_files: Tuple[str, ...] = ()

    @property
    def primary_port(self) -> int:
        return self.ports[0] if self.ports else 3000

    def to_dict(self) -> Dict[str, Any]:
        return {
            "projectType": self.project_type.value,
            "totalFiles": self.total_files,
            "dockerfile": self.dockerfile.to_dict(),
            "compose": self.compose.to_dict(),
            "readme": self.readme.to_dict(),
            "gitignore": self.gitignore.to_dict(),
            "env": self.env.to_dict(),
            "package": self.package.to_dict(),
            "structure": self.structure.to_dict(),
            "dependencies": self.dependencies.to_dict(),
            "entryPoints": list(self.entry_points),
            "ports": list(self.ports),
            "database": list(self.database),
            "frameworks": list(self.frameworks),
            "buildTools": list(self.build_tools),
            "testFramework": list(self.test_framework),
            "linter": list(self.linter),
            "ci": list(self.ci),
            "dockerignore": self.dockerignore.to_dict(),
            "license": self.license.to_dict(),
            "lockfiles": list(self.lockfiles),
            "sensitiveFiles": list(self.sensitive_files),
            "largeFiles": list(self.large_files),
        }


@dataclass(frozen=True)
class GeneratedFiles:
    """Artifacts synthesised for kinds the analysis reported absent."""

    dockerfile: Optional[str] = None
    compose: Optional[str] = None
    readme: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "dockerfile": self.dockerfile,
            "compose": self.compose,
            "readme": self.readme,
        }


@dataclass(frozen=True)
class Issue:
    """Single best-practice or security finding."""

    type: str
    severity: Severity
    title: str
    description: Optional[str] = None
    recommendation: Optional[str] = None
    rule: Optional[str] = None

    @property
    def message(self) -> str:
        return self.title

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "type": self.type,
            "severity": self.severity.value,
            "title": self.title,
            "message": self.title,
        }
        if self.description is not None:
            payload["description"] = self.description
        if self.recommendation is not None:
            payload["recommendation"] = self.recommendation
        if self.rule is not None:
            payload["rule"] = self.rule
        return payload


__all__ = [
    "Analysis",
    "ArtifactInfo",
    "DependencyBuckets",
    "DockerignoreInfo",
    "EnvFile",
    "EnvInfo",
    "GeneratedFiles",
    "GitignoreInfo",
    "Issue",
    "JAVA_TYPES",
    "LicenseInfo",
    "NODE_TYPES",
    "PHP_TYPES",
    "PYTHON_TYPES",
    "PackageInfo",
    "ProjectType",
    "ReadmeInfo",
    "Severity",
    "StructureInfo",
]
