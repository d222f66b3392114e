"""Repository hygiene rules: conventions, missing files and environment setup."""

from __future__ import annotations

from typing import List, Optional, Tuple

from ..models import (
    JAVA_TYPES,
    NODE_TYPES,
    PYTHON_TYPES,
    Analysis,
    ProjectType,
    Severity,
)
from .base import Finding, RuleGroup

BEST_PRACTICE = RuleGroup("best-practice")
MISSING_FILE = RuleGroup("missing-file")
ENVIRONMENT = RuleGroup("environment")

COMMON_GITIGNORE_PATTERNS: Tuple[str, ...] = (".env", ".DS_Store", "*.log")
NODE_GITIGNORE_PATTERNS: Tuple[str, ...] = (
    "node_modules/",
    "dist/",
    "coverage/",
    "npm-debug.log*",
)
PYTHON_GITIGNORE_PATTERNS: Tuple[str, ...] = (
    "__pycache__/",
    "*.py[cod]",
    "venv/",
    ".pytest_cache/",
)
JAVA_GITIGNORE_PATTERNS: Tuple[str, ...] = ("target/", "*.class", "hs_err_pid*")
GO_GITIGNORE_PATTERNS: Tuple[str, ...] = ("*.exe", "*.test", "vendor/")
RUST_GITIGNORE_PATTERNS: Tuple[str, ...] = ("target/",)


def gitignore_patterns(project_type: ProjectType) -> Tuple[str, ...]:
    """Patterns a .gitignore for ``project_type`` is expected to contain."""
    if project_type in NODE_TYPES:
        extra = NODE_GITIGNORE_PATTERNS
    elif project_type in PYTHON_TYPES:
        extra = PYTHON_GITIGNORE_PATTERNS
    elif project_type in JAVA_TYPES:
        extra = JAVA_GITIGNORE_PATTERNS
    elif project_type is ProjectType.GO:
        extra = GO_GITIGNORE_PATTERNS
    elif project_type is ProjectType.RUST:
        extra = RUST_GITIGNORE_PATTERNS
    else:
        extra = ()
    return COMMON_GITIGNORE_PATTERNS + extra


def missing_gitignore_patterns(content: str, project_type: ProjectType) -> List[str]:
    return [
        pattern
        for pattern in gitignore_patterns(project_type)
        if pattern.rstrip("/") not in content
    ]


@BEST_PRACTICE.rule("gitignore-missing")
def gitignore_missing(analysis: Analysis) -> Optional[Finding]:
    if analysis.gitignore.exists:
        return None
    return Finding(
        Severity.MEDIUM,
        "Missing .gitignore",
        "Without a .gitignore, dependencies, build output and secrets are easy to commit.",
        "Add a .gitignore suited to the project's ecosystem.",
    )


@BEST_PRACTICE.rule("gitignore-patterns")
def gitignore_missing_patterns(analysis: Analysis) -> Optional[Finding]:
    if not analysis.gitignore.exists:
        return None
    missing = missing_gitignore_patterns(analysis.gitignore.content or "", analysis.project_type)
    if not missing:
        return None
    return Finding(
        Severity.LOW,
        ".gitignore is missing important patterns",
        f"Your .gitignore is missing patterns for: {', '.join(missing)}",
        "Add these patterns to your .gitignore file.",
    )


@BEST_PRACTICE.rule("no-source-dir")
def no_source_dir(analysis: Analysis) -> Optional[Finding]:
    if analysis.structure.src or analysis.structure.app:
        return None
    return Finding(
        Severity.LOW,
        "No source directory",
        "Code lives at the repository root instead of src/ or app/.",
        "Group application code under src/ or app/.",
    )


@BEST_PRACTICE.rule("no-linter")
def no_linter(analysis: Analysis) -> Optional[Finding]:
    if analysis.linter:
        return None
    return Finding(
        Severity.LOW,
        "No linter configured",
        None,
        "Add a linter configuration such as ESLint, flake8 or pylint.",
    )


@BEST_PRACTICE.rule("no-ci")
def no_ci(analysis: Analysis) -> Optional[Finding]:
    if analysis.ci:
        return None
    return Finding(
        Severity.LOW,
        "No CI config",
        "No GitHub Actions, GitLab CI, Travis, Jenkins or Azure Pipelines configuration found.",
        "Add a CI workflow that runs tests and builds the image.",
    )


@MISSING_FILE.rule("dockerfile-missing")
def dockerfile_missing(analysis: Analysis) -> Optional[Finding]:
    if analysis.dockerfile.exists:
        return None
    return Finding(
        Severity.MEDIUM,
        "Missing Dockerfile",
        "The project cannot be built as a container image.",
        "Use the generated Dockerfile as a starting point.",
    )


@MISSING_FILE.rule("compose-missing")
def compose_missing(analysis: Analysis) -> Optional[Finding]:
    if analysis.compose.exists:
        return None
    return Finding(
        Severity.LOW,
        "Missing docker-compose file",
        None,
        "Use the generated docker-compose.yml to run the app with its services locally.",
    )


@MISSING_FILE.rule("dockerignore-missing")
def dockerignore_missing(analysis: Analysis) -> Optional[Finding]:
    if not analysis.dockerfile.exists or analysis.dockerignore.exists:
        return None
    return Finding(
        Severity.MEDIUM,
        "Missing .dockerignore",
        "The whole repository, including .git and local dependencies, is sent as build context.",
        "Add a .dockerignore excluding .git, dependency folders, build output and env files.",
    )


@MISSING_FILE.rule("license-missing")
def license_missing(analysis: Analysis) -> Optional[Finding]:
    if analysis.license.exists:
        return None
    return Finding(
        Severity.LOW,
        "Missing LICENSE",
        None,
        "Add a LICENSE file stating how the code may be used.",
    )


@ENVIRONMENT.rule("env-example-missing")
def env_example_missing(analysis: Analysis) -> Optional[Finding]:
    if ".env.example" in analysis.env.paths():
        return None
    return Finding(
        Severity.LOW,
        ".env.example file is missing",
        "An .env.example file tells other developers which variables are needed.",
        "Create an .env.example with placeholder values for every required variable.",
    )


@ENVIRONMENT.rule("env-production-committed")
def env_production_committed(analysis: Analysis) -> Optional[Finding]:
    if ".env.production" not in analysis.env.paths():
        return None
    return Finding(
        Severity.HIGH,
        "Production environment file committed",
        ".env.production is tracked in the repository.",
        "Inject production configuration from the deployment platform instead.",
    )


@ENVIRONMENT.rule("gitignore-no-node-modules")
def gitignore_no_node_modules(analysis: Analysis) -> Optional[Finding]:
    if analysis.project_type not in NODE_TYPES or not analysis.gitignore.exists:
        return None
    if analysis.gitignore.has_node_modules:
        return None
    return Finding(
        Severity.MEDIUM,
        "node_modules not ignored",
        "The .gitignore does not exclude node_modules.",
        "Add node_modules/ to .gitignore.",
    )
