"""Dockerfile and compose content rules."""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Set, Tuple

import yaml

from ..models import Analysis, Severity
from .base import Finding, RuleGroup, dockerfile_instructions, instructions_named

DOCKERFILE = RuleGroup("dockerfile")
COMPOSE = RuleGroup("compose")

_URL_SOURCE = re.compile(r"^(https?|git)://", re.IGNORECASE)


def _dockerfile(analysis: Analysis) -> Optional[List[Tuple[str, str]]]:
    if not analysis.dockerfile.exists:
        return None
    return dockerfile_instructions(analysis.dockerfile.content)


def _base_images(instructions: List[Tuple[str, str]]) -> List[str]:
    images: List[str] = []
    for arguments in instructions_named(instructions, "FROM"):
        tokens = [token for token in arguments.split() if not token.startswith("--")]
        if tokens:
            images.append(tokens[0])
    return images


def _stage_names(instructions: List[Tuple[str, str]]) -> Set[str]:
    names: Set[str] = set()
    for arguments in instructions_named(instructions, "FROM"):
        tokens = arguments.split()
        lowered = [token.lower() for token in tokens]
        if "as" in lowered:
            index = lowered.index("as")
            if index + 1 < len(tokens):
                names.add(tokens[index + 1].lower())
    return names


def is_unpinned(image: str) -> bool:
    """True for images with no tag or digest, or tagged ``latest``."""
    if image.lower() == "scratch" or "$" in image or "@" in image:
        return False
    last_segment = image.rsplit("/", 1)[-1]
    if ":" not in last_segment:
        return True
    return last_segment.rsplit(":", 1)[1].lower() == "latest"


@DOCKERFILE.rule("dockerfile-missing-from")
def missing_from(analysis: Analysis) -> Optional[Finding]:
    instructions = _dockerfile(analysis)
    if instructions is None or instructions_named(instructions, "FROM"):
        return None
    return Finding(
        Severity.CRITICAL,
        "Dockerfile has no FROM instruction",
        f"{analysis.dockerfile.path} does not declare a base image.",
        "Start the Dockerfile with a FROM instruction naming a pinned base image.",
    )


@DOCKERFILE.rule("dockerfile-root-user")
def root_user(analysis: Analysis) -> Optional[Finding]:
    instructions = _dockerfile(analysis)
    if not instructions:
        return None
    users = [arguments.split(":")[0].strip() for arguments in instructions_named(instructions, "USER")]
    if not users or users[-1] not in {"root", "0"}:
        return None
    return Finding(
        Severity.HIGH,
        "Container runs as root",
        "The final USER instruction switches to root.",
        "Create an unprivileged user and switch to it with USER before the run command.",
    )


@DOCKERFILE.rule("dockerfile-no-user")
def no_user(analysis: Analysis) -> Optional[Finding]:
    instructions = _dockerfile(analysis)
    if not instructions or instructions_named(instructions, "USER"):
        return None
    return Finding(
        Severity.MEDIUM,
        "Dockerfile does not set a USER",
        "Without a USER instruction the container process runs as root.",
        "Add a non-root user and a USER instruction.",
    )


@DOCKERFILE.rule("dockerfile-unpinned-base")
def unpinned_base(analysis: Analysis) -> Optional[Finding]:
    instructions = _dockerfile(analysis)
    if not instructions:
        return None
    stages = _stage_names(instructions)
    unpinned = [
        image
        for image in _base_images(instructions)
        if image.lower() not in stages and is_unpinned(image)
    ]
    if not unpinned:
        return None
    return Finding(
        Severity.MEDIUM,
        "Base image is not pinned",
        f"Unpinned base images: {', '.join(unpinned)}",
        "Pin base images to an explicit version tag or digest for reproducible builds.",
    )


@DOCKERFILE.rule("dockerfile-no-healthcheck")
def no_healthcheck(analysis: Analysis) -> Optional[Finding]:
    instructions = _dockerfile(analysis)
    if not instructions or instructions_named(instructions, "HEALTHCHECK"):
        return None
    return Finding(
        Severity.LOW,
        "Dockerfile has no HEALTHCHECK",
        None,
        "Add a HEALTHCHECK so orchestrators can detect an unhealthy container.",
    )


@DOCKERFILE.rule("dockerfile-no-expose")
def no_expose(analysis: Analysis) -> Optional[Finding]:
    instructions = _dockerfile(analysis)
    if not instructions or instructions_named(instructions, "EXPOSE"):
        return None
    return Finding(
        Severity.LOW,
        "Dockerfile does not EXPOSE a port",
        None,
        f"Document the listening port with EXPOSE {analysis.primary_port}.",
    )


@DOCKERFILE.rule("dockerfile-add-instead-of-copy")
def add_instead_of_copy(analysis: Analysis) -> Optional[Finding]:
    instructions = _dockerfile(analysis)
    if not instructions:
        return None
    for arguments in instructions_named(instructions, "ADD"):
        sources = [token for token in arguments.split() if not token.startswith("--")][:-1]
        if any(not _URL_SOURCE.match(source) for source in sources):
            return Finding(
                Severity.LOW,
                "ADD used for local files",
                "ADD also extracts archives and fetches URLs, which makes local copies less predictable.",
                "Use COPY for files from the build context.",
            )
    return None


def _compose_data(analysis: Analysis) -> Optional[Dict[str, Any]]:
    try:
        data = yaml.safe_load(analysis.compose.content or "")
    except yaml.YAMLError:
        return None
    return data if isinstance(data, dict) else None


def _compose_services(analysis: Analysis) -> Dict[str, Any]:
    data = _compose_data(analysis)
    services = data.get("services") if data else None
    return services if isinstance(services, dict) else {}


@COMPOSE.rule("compose-invalid")
def compose_invalid(analysis: Analysis) -> Optional[Finding]:
    if not analysis.compose.exists or analysis.compose.is_valid:
        return None
    return Finding(
        Severity.HIGH,
        "Compose file looks invalid",
        f"{analysis.compose.path} has neither a services nor a version key.",
        "Define the application under a top-level services key.",
    )


@COMPOSE.rule("compose-obsolete-version")
def compose_obsolete_version(analysis: Analysis) -> Optional[Finding]:
    if not analysis.compose.exists:
        return None
    data = _compose_data(analysis)
    if not data or "version" not in data:
        return None
    return Finding(
        Severity.LOW,
        "Compose file declares an obsolete version",
        "The top-level version key is ignored by Compose v2.",
        "Remove the version key.",
    )


@COMPOSE.rule("compose-no-restart")
def compose_no_restart(analysis: Analysis) -> Optional[Finding]:
    if not analysis.compose.exists:
        return None
    missing = [
        name
        for name, service in _compose_services(analysis).items()
        if isinstance(service, dict) and "restart" not in service
    ]
    if not missing:
        return None
    return Finding(
        Severity.LOW,
        "Services without a restart policy",
        f"No restart policy for: {', '.join(missing)}",
        "Set restart: unless-stopped on long-running services.",
    )


@COMPOSE.rule("compose-no-healthcheck")
def compose_no_healthcheck(analysis: Analysis) -> Optional[Finding]:
    if not analysis.compose.exists:
        return None
    missing = [
        name
        for name, service in _compose_services(analysis).items()
        if isinstance(service, dict) and "healthcheck" not in service
    ]
    if not missing:
        return None
    return Finding(
        Severity.LOW,
        "Services without a healthcheck",
        f"No healthcheck for: {', '.join(missing)}",
        "Add healthchecks so depends_on can wait for healthy services.",
    )
