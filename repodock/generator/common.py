"""Shared helpers for artifact builders: templates, profiles and manifest metadata."""

from __future__ import annotations

import json
import re
import tomllib
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

import yaml
from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..models import Analysis, ProjectType

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

DEFAULT_PROJECT_NAME = "Your Project"
DEFAULT_DESCRIPTION = "Description of your project"


@lru_cache(maxsize=1)
def template_env() -> Environment:
    loader = FileSystemLoader(str(TEMPLATES_DIR))
    return Environment(
        loader=loader,
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )


def render(template_name: str, **context: Any) -> str:
    return template_env().get_template(template_name).render(**context)


def exec_form(args: Sequence[str]) -> str:
    """Render a JSON exec-form argument list for CMD/ENTRYPOINT/HEALTHCHECK."""
    return json.dumps(list(args))


@dataclass(frozen=True)
class EcosystemProfile:
    """Per-ecosystem parameters shared by the Dockerfile, compose and README builders."""

    name: str
    entry_candidates: Tuple[str, ...]
    default_entry: str
    health_probe: str
    environment: Tuple[Tuple[str, str], ...] = ()
    install_command: str = ""
    run_command: str = ""
    test_command: str = ""
    health_path: str = "/health"

    def health_test(self, port: int, path: Optional[str] = None) -> list[str]:
        url = f"http://localhost:{port}{path or self.health_path}"
        if self.health_probe == "wget":
            return ["CMD", "wget", "--no-verbose", "--tries=1", "--spider", url]
        return ["CMD", "curl", "-f", url]


_NODE = EcosystemProfile(
    name="Node.js",
    entry_candidates=("app.js", "server.js", "index.js", "main.js"),
    default_entry="app.js",
    health_probe="wget",
    environment=(("NODE_ENV", "production"),),
    install_command="npm install",
    run_command="npm start",
    test_command="npm test",
)
_PYTHON = EcosystemProfile(
    name="Python",
    entry_candidates=("app.py", "main.py", "server.py", "manage.py"),
    default_entry="app.py",
    health_probe="curl",
    environment=(("PYTHONUNBUFFERED", "1"),),
    install_command="pip install -r requirements.txt",
    run_command="python app.py",
    test_command="pytest",
)
_JAVA = EcosystemProfile(
    name="Java",
    entry_candidates=(),
    default_entry="app.jar",
    health_probe="curl",
    install_command="mvn dependency:resolve",
    run_command="mvn spring-boot:run",
    test_command="mvn test",
)
_PHP = EcosystemProfile(
    name="PHP",
    entry_candidates=("index.php", "app.php", "main.php"),
    default_entry="index.php",
    health_probe="curl",
    install_command="composer install",
    run_command="php -S 0.0.0.0:8000 -t public",
    test_command="vendor/bin/phpunit",
)
_GO = EcosystemProfile(
    name="Go",
    entry_candidates=("main.go", "server.go"),
    default_entry="main.go",
    health_probe="wget",
    install_command="go mod download",
    run_command="go run .",
    test_command="go test ./...",
)
_RUBY = EcosystemProfile(
    name="Ruby",
    entry_candidates=("app.rb", "main.rb", "server.rb"),
    default_entry="config.ru",
    health_probe="wget",
    environment=(("RACK_ENV", "production"),),
    install_command="bundle install",
    run_command="bundle exec rackup",
    test_command="bundle exec rspec",
)
_RUST = EcosystemProfile(
    name="Rust",
    entry_candidates=(),
    default_entry="app",
    health_probe="curl",
    install_command="cargo fetch",
    run_command="cargo run --release",
    test_command="cargo test",
)
_DOTNET = EcosystemProfile(
    name=".NET",
    entry_candidates=(),
    default_entry="app.dll",
    health_probe="curl",
    environment=(("ASPNETCORE_ENVIRONMENT", "Production"),),
    install_command="dotnet restore",
    run_command="dotnet run",
    test_command="dotnet test",
)
_FLUTTER = EcosystemProfile(
    name="Flutter",
    entry_candidates=(),
    default_entry="index.html",
    health_probe="wget",
    install_command="flutter pub get",
    run_command="flutter run -d web-server",
    test_command="flutter test",
)
_GENERIC = EcosystemProfile(
    name="Generic",
    entry_candidates=(
        "app.js",
        "server.js",
        "index.js",
        "main.js",
        "app.py",
        "main.py",
        "server.py",
        "app.rb",
        "main.rb",
        "index.php",
    ),
    default_entry="",
    health_probe="curl",
)

ECOSYSTEM_PROFILES: Mapping[ProjectType, EcosystemProfile] = {
    ProjectType.NODEJS: _NODE,
    ProjectType.REACT: _NODE,
    ProjectType.VUE: _NODE,
    ProjectType.ANGULAR: _NODE,
    ProjectType.NEXTJS: _NODE,
    ProjectType.NUXT: _NODE,
    ProjectType.EXPRESS: _NODE,
    ProjectType.PYTHON: _PYTHON,
    ProjectType.DJANGO: _PYTHON,
    ProjectType.FLASK: _PYTHON,
    ProjectType.JAVA: _JAVA,
    ProjectType.SPRING: _JAVA,
    ProjectType.PHP: _PHP,
    ProjectType.LARAVEL: _PHP,
    ProjectType.GO: _GO,
    ProjectType.RUBY: _RUBY,
    ProjectType.RUST: _RUST,
    ProjectType.DOTNET: _DOTNET,
    ProjectType.FLUTTER: _FLUTTER,
    ProjectType.UNKNOWN: _GENERIC,
}


def profile_for(analysis: Analysis) -> EcosystemProfile:
    return ECOSYSTEM_PROFILES.get(analysis.project_type, _GENERIC)


def health_path_for(analysis: Analysis) -> str:
    if analysis.project_type is ProjectType.SPRING:
        return "/actuator/health"
    return profile_for(analysis).health_path


def select_entry_point(analysis: Analysis, candidates: Sequence[str], default: str) -> str:
    """Pick the first detected entry point that belongs to ``candidates``."""
    for entry in analysis.entry_points:
        if entry in candidates:
            return entry
    return default


def service_name(analysis: Analysis) -> str:
    name = analysis.package.manifest_value("name") if analysis.package.exists else None
    if isinstance(name, str) and name:
        return re.sub(r"[^a-zA-Z0-9]", "_", name)
    return "app"


# Database services bundled into compose files, keyed by kind.
DATABASE_KINDS: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("mysql", "mariadb"), "mysql"),
    (("mongo",), "mongodb"),
    (("redis",), "redis"),
)


def resolve_database(analysis: Analysis) -> Optional[str]:
    """Return the bundled database kind chosen by the first detected database."""
    if not analysis.database:
        return None
    first = analysis.database[0].lower()
    for keywords, kind in DATABASE_KINDS:
        if any(keyword in first for keyword in keywords):
            return kind
    return "postgres"


DATABASE_URLS: Mapping[str, str] = {
    "postgres": "postgresql://appuser:apppassword@db:5432/app",
    "mysql": "mysql://appuser:apppassword@db:3306/app",
    "mongodb": "mongodb://admin:password@db:27017/app?authSource=admin",
    "redis": "redis://db:6379/0",
}


@dataclass(frozen=True)
class ProjectMetadata:
    name: str
    description: str
    has_name: bool


def project_metadata(analysis: Analysis) -> ProjectMetadata:
    """Extract a display name and description from the primary manifest."""
    data = _manifest_mapping(analysis)
    name = _first_str(data, ("name",))
    description = _first_str(data, ("description",))
    return ProjectMetadata(
        name=name or DEFAULT_PROJECT_NAME,
        description=description or DEFAULT_DESCRIPTION,
        has_name=bool(name),
    )


def crate_name(analysis: Analysis) -> Optional[str]:
    if analysis.package.path != "Cargo.toml":
        return None
    return _first_str(_manifest_mapping(analysis), ("name",))


def _manifest_mapping(analysis: Analysis) -> Dict[str, Any]:
    package = analysis.package
    if not package.exists:
        return {}
    if isinstance(package.content, Mapping):
        return dict(package.content)
    if not isinstance(package.content, str):
        return {}

    text = package.content
    path = package.path or ""
    try:
        if path in {"pyproject.toml", "Cargo.toml"}:
            data = tomllib.loads(text)
            for section in (("project",), ("package",), ("tool", "poetry")):
                current: Any = data
                for key in section:
                    current = current.get(key, {}) if isinstance(current, dict) else {}
                if isinstance(current, dict) and current:
                    return current
            return {}
        if path == "composer.json":
            loaded = json.loads(text)
            return loaded if isinstance(loaded, dict) else {}
        if path == "pubspec.yaml":
            loaded = yaml.safe_load(text)
            return loaded if isinstance(loaded, dict) else {}
    except (tomllib.TOMLDecodeError, json.JSONDecodeError, yaml.YAMLError):
        return {}
    return {}


def _first_str(data: Mapping[str, Any], keys: Sequence[str]) -> Optional[str]:
    for key in keys:
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None
