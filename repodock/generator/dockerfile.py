"""Per-ecosystem Dockerfile builders."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Any, Callable, Dict, List, Mapping

from ..analyzers.utils import build_node_script_command, detect_node_package_manager
from ..models import Analysis, ProjectType
from .common import (
    crate_name,
    exec_form,
    health_path_for,
    profile_for,
    render,
    select_entry_point,
)

DockerfileBuilder = Callable[[Analysis], str]

# Node project types that compile assets before they can be served.
NODE_BUILD_TYPES = frozenset(
    {
        ProjectType.REACT,
        ProjectType.VUE,
        ProjectType.ANGULAR,
        ProjectType.NEXTJS,
        ProjectType.NUXT,
    }
)

_NODE_LOCKFILES = {
    "npm": "package-lock.json",
    "yarn": "yarn.lock",
    "pnpm": "pnpm-lock.yaml",
}


def _base_context(analysis: Analysis) -> Dict[str, Any]:
    port = analysis.primary_port
    profile = profile_for(analysis)
    return {
        "project_type": analysis.project_type.value,
        "port": port,
        "health_command": exec_form(profile.health_test(port, health_path_for(analysis))[1:]),
    }


def node_install_command(manager: str, *, has_lockfile: bool, production: bool) -> str:
    if manager == "pnpm":
        command = "pnpm install --frozen-lockfile" if has_lockfile else "pnpm install"
        return f"{command} --prod" if production else command
    if manager == "yarn":
        command = "yarn install --frozen-lockfile" if has_lockfile else "yarn install"
        return f"{command} --production" if production else command
    command = "npm ci" if has_lockfile else "npm install"
    return f"{command} --omit=dev" if production else command


def build_node_dockerfile(analysis: Analysis) -> str:
    lockfiles = set(analysis.lockfiles)
    manager = detect_node_package_manager(lockfiles)
    lockfile = _NODE_LOCKFILES[manager]
    has_lockfile = lockfile in lockfiles

    scripts = analysis.package.manifest_value("scripts")
    scripts = scripts if isinstance(scripts, Mapping) else {}
    has_build = analysis.project_type in NODE_BUILD_TYPES or "build" in scripts
    standalone = analysis.project_type is ProjectType.NEXTJS

    profile = profile_for(analysis)
    if standalone:
        entry = "server.js"
    else:
        entry = select_entry_point(analysis, profile.entry_candidates, profile.default_entry)

    manifest_files = ["package.json"] + ([lockfile] if has_lockfile else [])
    context = _base_context(analysis)
    context.update(
        manifest_files=manifest_files,
        package_manager=manager,
        install_command=node_install_command(
            manager, has_lockfile=has_lockfile, production=not has_build
        ),
        build_command=build_node_script_command("build", manager),
        has_build=has_build,
        standalone=standalone,
        command=exec_form(["node", entry]),
    )
    return render("dockerfile/node.j2", **context)


def build_python_dockerfile(analysis: Analysis) -> str:
    profile = profile_for(analysis)
    django = analysis.project_type is ProjectType.DJANGO
    port = analysis.primary_port

    if django:
        command = ["gunicorn", "--bind", f"0.0.0.0:{port}", "wsgi:application"]
    else:
        entry = select_entry_point(analysis, profile.entry_candidates, profile.default_entry)
        command = ["python", entry]

    context = _base_context(analysis)
    context.update(
        has_requirements=analysis.package.path == "requirements.txt",
        extra_packages=["gunicorn"] if django else [],
        collect_static=django,
        command=exec_form(command),
    )
    return render("dockerfile/python.j2", **context)


def build_java_dockerfile(analysis: Analysis) -> str:
    gradle = analysis.package.path == "build.gradle"
    command = ["java", "-jar", "app.jar"]
    context = _base_context(analysis)
    if analysis.project_type is ProjectType.SPRING:
        command.append(f"--server.port={analysis.primary_port}")
    context.update(
        build_system="gradle" if gradle else "maven",
        artifact_glob="build/libs/*.jar" if gradle else "target/*.jar",
        command=exec_form(command),
    )
    return render("dockerfile/java.j2", **context)


def build_php_dockerfile(analysis: Analysis) -> str:
    lock = ["composer.lock"] if "composer.lock" in analysis.lockfiles else []
    context = _base_context(analysis)
    context.update(
        manifest_files=["composer.json"] + lock,
        document_root="/var/www/html/public"
        if analysis.project_type is ProjectType.LARAVEL or analysis.structure.public
        else None,
    )
    return render("dockerfile/php.j2", **context)


def build_go_dockerfile(analysis: Analysis) -> str:
    profile = profile_for(analysis)
    entry = select_entry_point(analysis, profile.entry_candidates, profile.default_entry)
    binary = PurePosixPath(entry).stem
    go_sum = ["go.sum"] if "go.sum" in analysis.lockfiles else []
    context = _base_context(analysis)
    context.update(
        manifest_files=["go.mod"] + go_sum,
        binary=binary,
        command=exec_form([f"./{binary}"]),
    )
    return render("dockerfile/go.j2", **context)


def build_ruby_dockerfile(analysis: Analysis) -> str:
    profile = profile_for(analysis)
    entry = select_entry_point(analysis, profile.entry_candidates, "")
    port = analysis.primary_port
    if entry:
        command = ["bundle", "exec", "ruby", entry]
    else:
        command = ["bundle", "exec", "rackup", "--host", "0.0.0.0", "--port", str(port)]
    lock = ["Gemfile.lock"] if "Gemfile.lock" in analysis.lockfiles else []
    context = _base_context(analysis)
    context.update(manifest_files=["Gemfile"] + lock, command=exec_form(command))
    return render("dockerfile/ruby.j2", **context)


def build_rust_dockerfile(analysis: Analysis) -> str:
    binary = crate_name(analysis) or profile_for(analysis).default_entry
    lock = ["Cargo.lock"] if "Cargo.lock" in analysis.lockfiles else []
    context = _base_context(analysis)
    context.update(
        manifest_files=["Cargo.toml"] + lock,
        binary=binary,
        command=exec_form([binary]),
    )
    return render("dockerfile/rust.j2", **context)


def build_dotnet_dockerfile(analysis: Analysis) -> str:
    context = _base_context(analysis)
    context.update(command=exec_form(["dotnet", profile_for(analysis).default_entry]))
    return render("dockerfile/dotnet.j2", **context)


def build_flutter_dockerfile(analysis: Analysis) -> str:
    context = _base_context(analysis)
    context.update(has_lockfile="pubspec.lock" in analysis.lockfiles)
    return render("dockerfile/flutter.j2", **context)


# Interpreters used when an unknown project still exposes a recognisable entry file.
_GENERIC_RUNTIMES: Mapping[str, tuple] = {
    ".js": ("node", ["nodejs"]),
    ".py": ("python3", ["python3"]),
    ".rb": ("ruby", ["ruby"]),
    ".php": ("php", ["php-cli"]),
}


def build_generic_dockerfile(analysis: Analysis) -> str:
    profile = profile_for(analysis)
    entry = select_entry_point(analysis, profile.entry_candidates, profile.default_entry)
    runtime_packages: List[str] = []
    if entry:
        interpreter, runtime_packages = _GENERIC_RUNTIMES[PurePosixPath(entry).suffix]
        command = [interpreter, entry]
    else:
        command = ["sh", "-c", "echo 'Configure the start command for this project' && sleep infinity"]
    context = _base_context(analysis)
    context.update(runtime_packages=runtime_packages, command=exec_form(command))
    return render("dockerfile/generic.j2", **context)


DOCKERFILE_BUILDERS: Mapping[ProjectType, DockerfileBuilder] = {
    ProjectType.NODEJS: build_node_dockerfile,
    ProjectType.REACT: build_node_dockerfile,
    ProjectType.VUE: build_node_dockerfile,
    ProjectType.ANGULAR: build_node_dockerfile,
    ProjectType.NEXTJS: build_node_dockerfile,
    ProjectType.NUXT: build_node_dockerfile,
    ProjectType.EXPRESS: build_node_dockerfile,
    ProjectType.PYTHON: build_python_dockerfile,
    ProjectType.DJANGO: build_python_dockerfile,
    ProjectType.FLASK: build_python_dockerfile,
    ProjectType.JAVA: build_java_dockerfile,
    ProjectType.SPRING: build_java_dockerfile,
    ProjectType.PHP: build_php_dockerfile,
    ProjectType.LARAVEL: build_php_dockerfile,
    ProjectType.GO: build_go_dockerfile,
    ProjectType.RUBY: build_ruby_dockerfile,
    ProjectType.RUST: build_rust_dockerfile,
    ProjectType.DOTNET: build_dotnet_dockerfile,
    ProjectType.FLUTTER: build_flutter_dockerfile,
}


def build_dockerfile(analysis: Analysis) -> str:
    builder = DOCKERFILE_BUILDERS.get(analysis.project_type, build_generic_dockerfile)
    return builder(analysis)
