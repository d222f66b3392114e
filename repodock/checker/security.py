"""Secrets and sensitive-file rules."""

from __future__ import annotations

import re
import shlex
from typing import Any, Iterator, List, Optional, Tuple

import yaml

from ..models import Analysis, Severity
from .base import Finding, RuleGroup, dockerfile_instructions

SECURITY = RuleGroup("security")

SECRET_NAME = re.compile(r"PASSWORD|PASSWD|SECRET|TOKEN|API_KEY|APIKEY", re.IGNORECASE)
EXAMPLE_ENV_FILES = frozenset({".env.example"})


@SECURITY.rule("env-file-committed")
def env_file_committed(analysis: Analysis) -> Optional[Finding]:
    if not analysis.env.exists:
        return None
    return Finding(
        Severity.CRITICAL,
        "`.env` file found",
        f"Environment files in the repository: {', '.join(analysis.env.paths())}. "
        "They often contain API keys and database credentials.",
        "Remove real env files from version control and keep placeholders in .env.example.",
    )


@SECURITY.rule("env-api-keys")
def env_api_keys(analysis: Analysis) -> Optional[Finding]:
    offending = [
        env_file.path
        for env_file in analysis.env.files
        if env_file.has_api_keys and env_file.path not in EXAMPLE_ENV_FILES
    ]
    if not offending:
        return None
    return Finding(
        Severity.HIGH,
        "API keys in environment files",
        f"Possible API keys in: {', '.join(offending)}",
        "Rotate the keys and load them from a secret manager or CI variables.",
    )


@SECURITY.rule("env-not-ignored")
def env_not_ignored(analysis: Analysis) -> Optional[Finding]:
    if not analysis.env.exists or analysis.gitignore.has_env_files:
        return None
    return Finding(
        Severity.HIGH,
        "Environment files not in .gitignore",
        "Nothing stops env files from being committed again.",
        "Add .env and .env.* (keeping !.env.example) to .gitignore.",
    )


@SECURITY.rule("sensitive-files")
def sensitive_files(analysis: Analysis) -> Optional[Finding]:
    if not analysis.sensitive_files:
        return None
    return Finding(
        Severity.HIGH,
        "Sensitive files committed",
        f"Keys or credentials found: {', '.join(analysis.sensitive_files)}",
        "Remove them from the repository history and add them to .gitignore.",
    )


def _env_assignments(keyword: str, arguments: str) -> Iterator[Tuple[str, Optional[str]]]:
    try:
        tokens = shlex.split(arguments)
    except ValueError:
        tokens = arguments.split()
    if keyword == "ENV" and tokens and "=" not in tokens[0]:
        # Legacy ``ENV KEY value`` form.
        yield tokens[0], " ".join(tokens[1:]) or None
        return
    for token in tokens:
        name, sep, value = token.partition("=")
        yield name, value if sep else None


@SECURITY.rule("dockerfile-secrets")
def dockerfile_secrets(analysis: Analysis) -> Optional[Finding]:
    if not analysis.dockerfile.exists:
        return None
    names: List[str] = []
    for keyword, arguments in dockerfile_instructions(analysis.dockerfile.content):
        if keyword not in {"ENV", "ARG"}:
            continue
        for name, value in _env_assignments(keyword, arguments):
            if value and SECRET_NAME.search(name) and name not in names:
                names.append(name)
    if not names:
        return None
    return Finding(
        Severity.HIGH,
        "Secrets baked into the Dockerfile",
        f"Values assigned to: {', '.join(names)}",
        "Pass secrets at runtime or use BuildKit secret mounts instead of ENV/ARG defaults.",
    )


def _environment_items(environment: Any) -> Iterator[Tuple[str, Any]]:
    if isinstance(environment, dict):
        yield from ((str(key), value) for key, value in environment.items())
    elif isinstance(environment, list):
        for entry in environment:
            name, sep, value = str(entry).partition("=")
            yield name, value if sep else None


def _is_literal(value: Any) -> bool:
    if value is None:
        return False
    text = str(value).strip()
    return bool(text) and not text.startswith("$")


@SECURITY.rule("compose-hardcoded-credentials")
def compose_hardcoded_credentials(analysis: Analysis) -> Optional[Finding]:
    if not analysis.compose.exists:
        return None
    try:
        data = yaml.safe_load(analysis.compose.content or "")
    except yaml.YAMLError:
        return None
    services = data.get("services") if isinstance(data, dict) else None
    if not isinstance(services, dict):
        return None

    offending: List[str] = []
    for service_name, service in services.items():
        if not isinstance(service, dict):
            continue
        for name, value in _environment_items(service.get("environment")):
            if SECRET_NAME.search(name) and _is_literal(value):
                offending.append(f"{service_name}.{name}")
    if not offending:
        return None
    return Finding(
        Severity.MEDIUM,
        "Hardcoded credentials in compose file",
        f"Literal secrets for: {', '.join(offending)}",
        "Reference variables such as ${DB_PASSWORD} and keep values in an untracked .env file.",
    )
