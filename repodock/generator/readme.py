"""README builder driven by the analysis record."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Tuple

from ..analyzers.utils import build_node_script_command, detect_node_package_manager
from ..models import Analysis, NODE_TYPES, PYTHON_TYPES, StructureInfo
from ..postproc.lint import MarkdownLinter
from .common import (
    DATABASE_URLS,
    health_path_for,
    profile_for,
    project_metadata,
    render,
    resolve_database,
)

DEPENDENCY_GROUP_TITLES: Tuple[Tuple[str, str], ...] = (
    ("web_framework", "Web framework"),
    ("database", "Database"),
    ("testing", "Testing"),
    ("build_tools", "Build tools"),
    ("utilities", "Utilities"),
)

_RUNTIMES: Mapping[str, str] = {
    "Node.js": "Node.js 18+",
    "Python": "Python 3.11+",
    "Java": "JDK 17+",
    "PHP": "PHP 8.2+ and Composer",
    "Go": "Go 1.21+",
    "Ruby": "Ruby 3.2+ and Bundler",
    "Rust": "Rust (stable) and Cargo",
    ".NET": ".NET 8 SDK",
    "Flutter": "Flutter SDK (stable)",
}

CLOUD_TARGETS: Tuple[str, ...] = (
    "AWS ECS or EKS",
    "Google Cloud Run",
    "Azure Container Instances",
    "Heroku Container Registry",
    "DigitalOcean App Platform",
)


@dataclass(frozen=True)
class ScriptRow:
    name: str
    command: str
    body: str


@dataclass(frozen=True)
class DependencyGroup:
    title: str
    names: Tuple[str, ...]


def _slug(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


def script_rows(analysis: Analysis) -> List[ScriptRow]:
    if not analysis.package.has_scripts:
        return []
    scripts = analysis.package.manifest_value("scripts")
    if not isinstance(scripts, Mapping):
        return []
    manager = detect_node_package_manager(set(analysis.lockfiles))
    return [
        ScriptRow(
            name=name,
            command=build_node_script_command(name, manager),
            body=str(body).replace("|", "\\|"),
        )
        for name, body in scripts.items()
    ]


def development_commands(analysis: Analysis) -> List[str]:
    profile = profile_for(analysis)
    if analysis.project_type in NODE_TYPES:
        manager = detect_node_package_manager(set(analysis.lockfiles))
        scripts = analysis.package.manifest_value("scripts")
        scripts = scripts if isinstance(scripts, Mapping) else {}
        run_script = "dev" if "dev" in scripts else "start"
        return [f"{manager} install", build_node_script_command(run_script, manager)]
    if analysis.project_type in PYTHON_TYPES:
        install = (
            profile.install_command
            if analysis.package.path == "requirements.txt"
            else "pip install -e ."
        )
        commands = ["python -m venv .venv", "source .venv/bin/activate", install]
        if "manage.py" in analysis.entry_points:
            commands.append("python manage.py runserver")
        else:
            entry = next(
                (name for name in analysis.entry_points if name in profile.entry_candidates),
                profile.default_entry,
            )
            commands.append(f"python {entry}")
        return commands
    commands = [command for command in (profile.install_command, profile.run_command) if command]
    return commands or ["docker compose up --build"]


def structure_listing(structure: StructureInfo) -> List[str]:
    return [name for name, present in structure.to_dict().items() if present]


def environment_variables(analysis: Analysis) -> List[Tuple[str, str]]:
    variables = list(profile_for(analysis).environment)
    variables.append(("PORT", str(analysis.primary_port)))
    database = resolve_database(analysis)
    if database:
        variables.append(("DATABASE_URL", DATABASE_URLS[database]))
    return variables


def dependency_groups(analysis: Analysis) -> List[DependencyGroup]:
    groups: List[DependencyGroup] = []
    for attribute, title in DEPENDENCY_GROUP_TITLES:
        names = getattr(analysis.dependencies, attribute)
        if names:
            groups.append(DependencyGroup(title=title, names=tuple(names)))
    return groups


def readme_context(analysis: Analysis) -> Dict[str, Any]:
    metadata = project_metadata(analysis)
    profile = profile_for(analysis)
    testing = analysis.dependencies.testing

    if analysis.license.exists:
        license_text = f"See [{analysis.license.path}]({analysis.license.path}) for details."
    else:
        license_text = "Add a license file to describe how this project may be used."

    return {
        "name": metadata.name,
        "description": metadata.description,
        "directory": _slug(metadata.name) if metadata.has_name else "<repository-directory>",
        "runtime": _RUNTIMES.get(profile.name),
        "port": analysis.primary_port,
        "project_type": analysis.project_type.value,
        "frameworks": list(analysis.frameworks),
        "databases": list(analysis.database),
        "health_path": health_path_for(analysis),
        "image": (_slug(metadata.name) if metadata.has_name else "") or "app",
        "cloud_targets": CLOUD_TARGETS,
        "bundled_database": resolve_database(analysis),
        "dev_commands": development_commands(analysis),
        "scripts": script_rows(analysis),
        "structure": structure_listing(analysis.structure),
        "env_vars": environment_variables(analysis),
        "test_frameworks": list(testing),
        "test_command": _test_command(analysis) if testing else None,
        "dependency_groups": dependency_groups(analysis),
        "license_text": license_text,
    }


def _test_command(analysis: Analysis) -> str:
    if analysis.project_type in NODE_TYPES:
        manager = detect_node_package_manager(set(analysis.lockfiles))
        return build_node_script_command("test", manager)
    return profile_for(analysis).test_command or "docker compose run --rm app test"


def build_readme(analysis: Analysis) -> str:
    return MarkdownLinter().lint(render("readme.md.j2", **readme_context(analysis)))
