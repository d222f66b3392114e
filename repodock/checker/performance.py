"""Image size and build speed rules."""

from __future__ import annotations

import re
from typing import Optional

from ..models import Analysis, ProjectType, Severity
from .base import Finding, RuleGroup, dockerfile_instructions, instructions_named

PERFORMANCE = RuleGroup("performance")

# Ecosystems whose build toolchain does not belong in the runtime image.
MULTI_STAGE_TYPES = frozenset(
    {
        ProjectType.REACT,
        ProjectType.VUE,
        ProjectType.ANGULAR,
        ProjectType.NEXTJS,
        ProjectType.NUXT,
        ProjectType.JAVA,
        ProjectType.SPRING,
        ProjectType.GO,
        ProjectType.RUST,
        ProjectType.DOTNET,
    }
)

_NPM_INSTALL = re.compile(r"\bnpm\s+(install|i)\b")


@PERFORMANCE.rule("large-files")
def large_files(analysis: Analysis) -> Optional[Finding]:
    if not analysis.large_files:
        return None
    return Finding(
        Severity.MEDIUM,
        "Large files in repository",
        f"Files over the size threshold: {', '.join(analysis.large_files)}",
        "Move large binaries to Git LFS or external storage, or add them to .gitignore.",
    )


@PERFORMANCE.rule("dockerfile-single-stage")
def single_stage(analysis: Analysis) -> Optional[Finding]:
    if not analysis.dockerfile.exists or analysis.project_type not in MULTI_STAGE_TYPES:
        return None
    instructions = dockerfile_instructions(analysis.dockerfile.content)
    if len(instructions_named(instructions, "FROM")) != 1:
        return None
    return Finding(
        Severity.LOW,
        "Single-stage Dockerfile",
        f"A {analysis.project_type.value} image built in one stage ships its build toolchain.",
        "Split the Dockerfile into a build stage and a slim runtime stage.",
    )


@PERFORMANCE.rule("dockerfile-apt-cache")
def apt_cache(analysis: Analysis) -> Optional[Finding]:
    if not analysis.dockerfile.exists:
        return None
    runs = instructions_named(dockerfile_instructions(analysis.dockerfile.content), "RUN")
    leaky = [
        command
        for command in runs
        if "apt-get install" in command and "/var/lib/apt/lists" not in command
    ]
    if not leaky:
        return None
    return Finding(
        Severity.LOW,
        "apt cache left in image",
        "apt-get install runs without removing /var/lib/apt/lists in the same layer.",
        "Append `&& rm -rf /var/lib/apt/lists/*` to the install command.",
    )


@PERFORMANCE.rule("dockerfile-npm-install")
def npm_install(analysis: Analysis) -> Optional[Finding]:
    if not analysis.dockerfile.exists:
        return None
    runs = instructions_named(dockerfile_instructions(analysis.dockerfile.content), "RUN")
    if not any(_NPM_INSTALL.search(command) for command in runs):
        return None
    return Finding(
        Severity.LOW,
        "npm install used in Dockerfile",
        "npm install may update the lockfile and produce non-reproducible images.",
        "Commit package-lock.json and use `npm ci`.",
    )
