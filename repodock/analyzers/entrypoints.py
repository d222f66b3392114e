"""Entry point and listening-port detection."""

from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Mapping, Tuple

from ..logging import get_logger
from .base import Analyzer, RepoContext
from .utils import read_text

logger = get_logger("analyzers.entrypoints")

ENTRY_POINT_CANDIDATES: Tuple[str, ...] = (
    "app.js",
    "server.js",
    "index.js",
    "main.js",
    "start.js",
    "app.py",
    "main.py",
    "server.py",
    "manage.py",
    "app.php",
    "index.php",
    "main.php",
    "main.go",
    "server.go",
    "app.rb",
    "main.rb",
    "server.rb",
)

PORT_SOURCE_FILES: Tuple[str, ...] = (
    "app.js",
    "server.js",
    "index.js",
    "main.js",
    "app.py",
    "main.py",
    "server.py",
)

# Tried in order against each script; the first pattern that matches wins.
_SCRIPT_PORT_PATTERNS: Tuple[re.Pattern[str], ...] = (
    re.compile(r"port\s*=\s*(\d+)", re.IGNORECASE),
    re.compile(r"-p\s+(\d+)"),
    re.compile(r"--port\s+(\d+)"),
)
# Matches any identifier ending in "port"; false positives are accepted.
_SOURCE_PORT_PATTERN = re.compile(r"port\s*[:=]\s*(\d+)", re.IGNORECASE)


def ports_from_scripts(scripts: Mapping[str, Any]) -> List[int]:
    ports: List[int] = []
    for command in scripts.values():
        if not isinstance(command, str):
            continue
        for pattern in _SCRIPT_PORT_PATTERNS:
            match = pattern.search(command)
            if match:
                ports.append(int(match.group(1)))
                break
    return ports


def ports_from_source(text: str) -> List[int]:
    return [int(value) for value in _SOURCE_PORT_PATTERN.findall(text)]


def _dedupe(values: Iterable[int]) -> List[int]:
    ordered: List[int] = []
    for value in values:
        if value not in ordered:
            ordered.append(value)
    return ordered


class EntryPointAnalyzer(Analyzer):
    """Finds root entry files and scrapes candidate ports."""

    name = "entrypoints"

    def analyze(self, context: RepoContext) -> Dict[str, Any]:
        entry_points = tuple(name for name in ENTRY_POINT_CANDIDATES if context.exists(name))
        return {
            "entry_points": entry_points,
            "ports": self.detect_ports(context),
        }

    def detect_ports(self, context: RepoContext) -> Tuple[int, ...]:
        found: List[int] = []

        package = context.package_json or {}
        scripts = package.get("scripts")
        if isinstance(scripts, dict):
            found.extend(ports_from_scripts(scripts))

        for filename in PORT_SOURCE_FILES:
            text = read_text(context.root, filename)
            if text is None:
                continue
            found.extend(ports_from_source(text))

        ports = _dedupe(found)
        if not ports:
            return tuple(context.config.default_ports)
        logger.debug("Detected ports %s", ports)
        return tuple(ports)
