"""Tests for the entrypoint and port analyzer."""

from __future__ import annotations

from repodock.analyzers.entrypoints import ports_from_scripts, ports_from_source
from repodock.config import RepodockConfig
from tests._fixtures.repo_builder import RepoBuilder


def test_entry_points_follow_candidate_order(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"server.js": "", "app.js": "", "main.go": "", "lib/app.py": ""})
    analysis = repo_builder.analyze()

    assert analysis.entry_points == ("app.js", "server.js", "main.go")


def test_default_ports_when_nothing_detected(repo_builder: RepoBuilder) -> None:
    repo_builder.write_json("package.json", {"name": "demo-svc"})
    analysis = repo_builder.analyze()

    assert analysis.entry_points == ()
    assert analysis.ports == (3000, 8000, 8080)
    assert analysis.primary_port == 3000


def test_configured_default_ports(repo_builder: RepoBuilder) -> None:
    config = RepodockConfig(root=repo_builder.path(), default_ports=[9000])
    assert repo_builder.analyze(config).ports == (9000,)


def test_script_ports_first_pattern_wins() -> None:
    scripts = {
        "start": "PORT=4000 node server.js -p 5000",
        "preview": "vite preview --port 4173",
        "serve": "http-server -p 8081",
        "lint": "eslint .",
        "weird": 42,
    }
    assert ports_from_scripts(scripts) == [4000, 4173, 8081]


def test_source_ports_include_any_identifier_ending_in_port() -> None:
    text = "const port = 5000;\nconst dbPort: 5432\nconfig.PORT=7000\n"
    assert ports_from_source(text) == [5000, 5432, 7000]


def test_ports_are_deduplicated_scripts_first(repo_builder: RepoBuilder) -> None:
    repo_builder.write_json("package.json", {"scripts": {"dev": "next dev -p 4000"}})
    repo_builder.write(
        {
            "server.js": "const port = process.env.PORT || 4000;\napp.listen(port = 4000)\n",
            "app.py": "app.run(port=5000)\n",
        }
    )
    analysis = repo_builder.analyze()

    assert analysis.ports == (4000, 5000)
