"""Tests for ordered project type detection."""

from __future__ import annotations

import pytest

from repodock.analyzers import DETECTION_RULES, detect_project_type
from repodock.models import ProjectType
from tests._fixtures.repo_builder import RepoBuilder


@pytest.mark.parametrize(
    ("files", "dirs", "expected"),
    [
        ({"package.json": "{}"}, (), ProjectType.NODEJS),
        ({"package.json": "{}", "angular.json": "{}"}, (), ProjectType.ANGULAR),
        ({"package.json": "{}", "vue.config.js": ""}, (), ProjectType.VUE),
        ({"package.json": "{}", "next.config.js": ""}, (), ProjectType.NEXTJS),
        ({"package.json": "{}", "nuxt.config.js": ""}, (), ProjectType.NUXT),
        ({"package.json": "{}"}, ("src", "public"), ProjectType.REACT),
        ({"package.json": "{}", "server.js": ""}, (), ProjectType.EXPRESS),
        ({"requirements.txt": "requests\n"}, (), ProjectType.PYTHON),
        ({"setup.py": "", "manage.py": ""}, (), ProjectType.DJANGO),
        ({"requirements.txt": "flask\n", "app.py": ""}, (), ProjectType.FLASK),
        ({"pom.xml": "<project/>"}, (), ProjectType.JAVA),
        ({"build.gradle": ""}, ("src/main/java",), ProjectType.SPRING),
        ({"composer.json": "{}"}, (), ProjectType.PHP),
        ({"composer.json": "{}", "artisan": ""}, (), ProjectType.LARAVEL),
        ({"go.mod": "module demo\n"}, (), ProjectType.GO),
        ({"Gemfile": ""}, (), ProjectType.RUBY),
        ({"Cargo.toml": ""}, (), ProjectType.RUST),
        ({"pubspec.yaml": "name: demo\n"}, (), ProjectType.FLUTTER),
        ({"Demo.csproj": "<Project/>"}, (), ProjectType.DOTNET),
        ({"notes.txt": "hello"}, (), ProjectType.UNKNOWN),
    ],
)
def test_detects_project_type(
    repo_builder: RepoBuilder, files: dict, dirs: tuple, expected: ProjectType
) -> None:
    repo_builder.write(files).mkdir(*dirs)
    assert detect_project_type(repo_builder.path()) is expected


def test_node_markers_win_over_python(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"package.json": "{}", "requirements.txt": "flask\n", "app.py": ""})
    assert detect_project_type(repo_builder.path()) is ProjectType.NODEJS


def test_framework_refinement_order_within_node(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"package.json": "{}", "angular.json": "{}", "next.config.js": ""})
    repo_builder.mkdir("src", "public")
    assert detect_project_type(repo_builder.path()) is ProjectType.ANGULAR


def test_empty_directory_is_unknown(repo_builder: RepoBuilder) -> None:
    assert detect_project_type(repo_builder.path()) is ProjectType.UNKNOWN


def test_unreadable_root_is_unknown(tmp_path) -> None:
    assert detect_project_type(tmp_path / "missing") is ProjectType.UNKNOWN


def test_custom_rules_can_be_supplied(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"go.mod": "module demo\n", "Cargo.toml": ""})
    rust_first = tuple(rule for rule in DETECTION_RULES if rule.fallback is ProjectType.RUST)
    assert detect_project_type(repo_builder.path(), rust_first) is ProjectType.RUST
    assert detect_project_type(repo_builder.path()) is ProjectType.GO


def test_detection_is_deterministic(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"package.json": '{"name": "demo"}', "yarn.lock": ""})
    first = repo_builder.analyze()
    second = repo_builder.analyze()
    assert first == second
    assert first.to_dict() == second.to_dict()
