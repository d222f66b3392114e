from __future__ import annotations

from typing import Callable

from repodock.generator.readme import build_readme, script_rows
from repodock.models import (
    Analysis,
    DependencyBuckets,
    LicenseInfo,
    PackageInfo,
    ProjectType,
    StructureInfo,
)


def _node_package(**content: object) -> PackageInfo:
    payload = {"name": "demo-svc", "description": "A small demo service."}
    payload.update(content)
    return PackageInfo(
        exists=True,
        path="package.json",
        content=payload,
        has_scripts="scripts" in payload,
    )


def test_readme_mentions_project_and_port(make_analysis: Callable[..., Analysis]) -> None:
    readme = build_readme(make_analysis(package=_node_package(), ports=(4000,)))

    assert readme.startswith("# demo-svc\n\nA small demo service.\n")
    assert "cd demo-svc" in readme
    assert "http://localhost:4000" in readme
    assert "## Quick Start with Docker" in readme
    assert "docker compose up --build" in readme
    assert "- Node.js 18+" in readme


def test_readme_defaults_without_manifest_name(make_analysis: Callable[..., Analysis]) -> None:
    readme = build_readme(make_analysis(project_type=ProjectType.GO, ports=(8080,)))

    assert readme.startswith("# Your Project\n")
    assert "cd <repository-directory>" in readme
    assert "go run ." in readme


def test_optional_sections_are_omitted(make_analysis: Callable[..., Analysis]) -> None:
    readme = build_readme(make_analysis())

    assert "## Available Scripts" not in readme
    assert "## Project Structure" not in readme
    assert "## Testing" not in readme
    assert "## Dependencies" not in readme
    assert "## Environment Variables" in readme
    assert "Add a license file" in readme


def test_optional_sections_render_when_detected(make_analysis: Callable[..., Analysis]) -> None:
    analysis = make_analysis(
        package=_node_package(scripts={"dev": "vite", "test": "vitest run"}),
        lockfiles=("yarn.lock",),
        structure=StructureInfo(src=True, tests=True),
        dependencies=DependencyBuckets(web_framework=("express",), testing=("vitest",)),
        database=("pg",),
        license=LicenseInfo(exists=True, path="LICENSE"),
    )
    readme = build_readme(analysis)

    assert "| `dev` | `yarn dev` | `vite` |" in readme
    assert "src/\ntests/\n" in readme
    assert "Tests use vitest." in readme
    assert "yarn test" in readme
    assert "- **Web framework:** express" in readme
    assert "DATABASE_URL=postgresql://" in readme
    assert "See [LICENSE](LICENSE)" in readme
    assert "yarn install\nyarn dev\n" in readme


def test_script_bodies_escape_table_pipes(make_analysis: Callable[..., Analysis]) -> None:
    analysis = make_analysis(package=_node_package(scripts={"lint": "eslint . || true"}))
    rows = script_rows(analysis)
    assert [row.body for row in rows] == ["eslint . \\|\\| true"]
    assert rows[0].command == "npm run lint"


def test_python_readme_uses_detected_entry(make_analysis: Callable[..., Analysis]) -> None:
    analysis = make_analysis(
        project_type=ProjectType.FLASK,
        package=PackageInfo(exists=True, path="requirements.txt", content="flask\n"),
        entry_points=("main.py",),
    )
    readme = build_readme(analysis)

    assert "pip install -r requirements.txt" in readme
    assert "python main.py" in readme
    assert "- Python 3.11+" in readme


def test_readme_is_normalised(make_analysis: Callable[..., Analysis]) -> None:
    readme = build_readme(make_analysis(package=_node_package()))

    assert "\n\n\n" not in readme
    assert readme.endswith("\n") and not readme.endswith("\n\n")
    assert all(line == line.rstrip() for line in readme.splitlines())
    assert readme.count("```") % 2 == 0


def test_readme_operational_sections(make_analysis: Callable[..., Analysis]) -> None:
    readme = build_readme(make_analysis(package=_node_package()))

    assert "## Project Information" in readme
    assert "- **Type:** nodejs" in readme
    assert "- **Frameworks:** None detected" in readme
    assert "- **Port:** 3000" in readme
    assert "## Health Checks" in readme
    assert "http://localhost:3000/health" in readme
    assert "## Deployment" in readme
    assert "docker push yourusername/demo-svc" in readme
    assert "- Google Cloud Run" in readme
    assert "## Troubleshooting" in readme
    assert "lsof -ti:3000 | xargs kill -9" in readme
    assert "docker build --no-cache ." in readme
    assert "docker compose logs db" not in readme
    assert readme.index("## Troubleshooting") < readme.index("## Contributing")


def test_readme_troubleshoots_bundled_database(make_analysis: Callable[..., Analysis]) -> None:
    readme = build_readme(
        make_analysis(frameworks=("express",), database=("pg",), ports=(4000,))
    )

    assert "- **Frameworks:** express" in readme
    assert "- **Database:** pg" in readme
    assert "docker compose logs db" in readme
    assert "docker push yourusername/app" in readme


def test_spring_readme_health_path(make_analysis: Callable[..., Analysis]) -> None:
    readme = build_readme(make_analysis(project_type=ProjectType.SPRING, ports=(8080,)))

    assert "http://localhost:8080/actuator/health" in readme


def test_ruby_readme_runs_rackup(make_analysis: Callable[..., Analysis]) -> None:
    readme = build_readme(make_analysis(project_type=ProjectType.RUBY, ports=(9292,)))

    assert "bundle install\nbundle exec rackup\n" in readme
    assert "rails server" not in readme
