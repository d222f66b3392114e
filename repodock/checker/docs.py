"""README presence and content rules."""

from __future__ import annotations

from typing import Optional

from ..models import Analysis, Severity
from .base import Finding, RuleGroup

README = RuleGroup("readme")

MIN_README_CHARS = 200


@README.rule("readme-missing")
def readme_missing(analysis: Analysis) -> Optional[Finding]:
    if analysis.readme.exists:
        return None
    return Finding(
        Severity.HIGH,
        "Missing README",
        "The repository has no README describing what it is or how to run it.",
        "Add a README.md covering purpose, installation and usage.",
    )


@README.rule("readme-too-short")
def readme_too_short(analysis: Analysis) -> Optional[Finding]:
    if not analysis.readme.exists:
        return None
    visible = "".join((analysis.readme.content or "").split())
    if len(visible) >= MIN_README_CHARS:
        return None
    return Finding(
        Severity.LOW,
        "README is very short",
        f"{analysis.readme.path} has {len(visible)} non-blank characters.",
        "Expand the README with setup, usage and configuration details.",
    )


@README.rule("readme-no-installation")
def readme_no_installation(analysis: Analysis) -> Optional[Finding]:
    if not analysis.readme.exists or analysis.readme.has_installation:
        return None
    return Finding(
        Severity.LOW,
        "README lacks installation instructions",
        None,
        "Add an Installation section listing prerequisites and setup commands.",
    )


@README.rule("readme-no-usage")
def readme_no_usage(analysis: Analysis) -> Optional[Finding]:
    if not analysis.readme.exists or analysis.readme.has_usage:
        return None
    return Finding(
        Severity.LOW,
        "README lacks usage instructions",
        None,
        "Add a Usage section showing how to run the project.",
    )


@README.rule("readme-no-docker-info")
def readme_no_docker_info(analysis: Analysis) -> Optional[Finding]:
    if not (analysis.readme.exists and analysis.dockerfile.exists):
        return None
    if analysis.readme.has_docker_info:
        return None
    return Finding(
        Severity.LOW,
        "README does not mention Docker",
        "A Dockerfile exists but the README never explains how to use it.",
        "Document how to build and run the container image.",
    )
