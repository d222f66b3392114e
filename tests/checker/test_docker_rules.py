from __future__ import annotations

from textwrap import dedent
from typing import Callable, List

import pytest

from repodock.checker import FileChecker
from repodock.checker.base import dockerfile_instructions
from repodock.checker.docker import is_unpinned
from repodock.models import Analysis, ArtifactInfo, ProjectType


def _with_dockerfile(make_analysis: Callable[..., Analysis], content: str, **overrides) -> Analysis:
    return make_analysis(
        dockerfile=ArtifactInfo(exists=True, path="Dockerfile", content=dedent(content), is_valid=True),
        **overrides,
    )


def _with_compose(make_analysis: Callable[..., Analysis], content: str) -> Analysis:
    return make_analysis(
        compose=ArtifactInfo(
            exists=True, path="docker-compose.yml", content=dedent(content), is_valid=True
        )
    )


def _rules(analysis: Analysis) -> List[str]:
    return [issue.rule for issue in FileChecker().check(analysis)]


def test_instructions_join_continuations_and_skip_comments() -> None:
    content = "# comment\nFROM node:18\nRUN apk add \\\n    curl\nuser app\n"
    assert dockerfile_instructions(content) == [
        ("FROM", "node:18"),
        ("RUN", "apk add curl"),
        ("USER", "app"),
    ]


@pytest.mark.parametrize(
    ("image", "expected"),
    [
        ("node", True),
        ("node:latest", True),
        ("localhost:5000/team/app", True),
        ("node:18-alpine", False),
        ("localhost:5000/team/app:1.2", False),
        ("python@sha256:abc123", False),
        ("scratch", False),
        ("${BASE_IMAGE}", False),
    ],
)
def test_is_unpinned(image: str, expected: bool) -> None:
    assert is_unpinned(image) is expected


def test_bare_dockerfile_findings(make_analysis: Callable[..., Analysis]) -> None:
    analysis = _with_dockerfile(
        make_analysis,
        """
        FROM node
        ADD . /app
        RUN npm install
        CMD ["node", "app.js"]
        """,
    )
    rules = _rules(analysis)

    for expected in (
        "dockerfile-no-user",
        "dockerfile-unpinned-base",
        "dockerfile-no-healthcheck",
        "dockerfile-no-expose",
        "dockerfile-add-instead-of-copy",
        "dockerfile-npm-install",
    ):
        assert expected in rules
    assert "dockerfile-root-user" not in rules
    assert "dockerfile-missing-from" not in rules


def test_missing_from_is_critical(make_analysis: Callable[..., Analysis]) -> None:
    analysis = _with_dockerfile(make_analysis, "RUN echo hi\n")
    issues = [i for i in FileChecker().check(analysis) if i.rule == "dockerfile-missing-from"]
    assert len(issues) == 1
    assert issues[0].severity.value == "critical"
    assert issues[0].type == "dockerfile"


def test_final_root_user_is_flagged(make_analysis: Callable[..., Analysis]) -> None:
    analysis = _with_dockerfile(
        make_analysis,
        """
        FROM debian:12
        USER app
        USER root:root
        """,
    )
    assert "dockerfile-root-user" in _rules(analysis)


def test_stage_aliases_are_not_unpinned(make_analysis: Callable[..., Analysis]) -> None:
    analysis = _with_dockerfile(
        make_analysis,
        """
        FROM golang:1.21 AS build
        FROM build AS test
        FROM --platform=linux/amd64 alpine:3.19
        """,
    )
    assert "dockerfile-unpinned-base" not in _rules(analysis)


def test_add_with_remote_url_is_allowed(make_analysis: Callable[..., Analysis]) -> None:
    analysis = _with_dockerfile(
        make_analysis,
        """
        FROM alpine:3.19
        ADD https://example.com/tool.tar.gz /opt/
        """,
    )
    assert "dockerfile-add-instead-of-copy" not in _rules(analysis)


def test_single_stage_build_for_compiled_ecosystem(make_analysis: Callable[..., Analysis]) -> None:
    content = """
    FROM golang:1.21
    RUN go build -o app .
    """
    go_rules = _rules(_with_dockerfile(make_analysis, content, project_type=ProjectType.GO))
    node_rules = _rules(_with_dockerfile(make_analysis, content))

    assert "dockerfile-single-stage" in go_rules
    assert "dockerfile-single-stage" not in node_rules


def test_apt_cache_rule(make_analysis: Callable[..., Analysis]) -> None:
    leaky = _with_dockerfile(
        make_analysis,
        """
        FROM debian:12
        RUN apt-get update && apt-get install -y curl
        """,
    )
    clean = _with_dockerfile(
        make_analysis,
        """
        FROM debian:12
        RUN apt-get update \\
            && apt-get install -y curl \\
            && rm -rf /var/lib/apt/lists/*
        """,
    )
    assert "dockerfile-apt-cache" in _rules(leaky)
    assert "dockerfile-apt-cache" not in _rules(clean)


def test_compose_rules(make_analysis: Callable[..., Analysis]) -> None:
    analysis = _with_compose(
        make_analysis,
        """
        version: "3.8"
        services:
          web:
            build: .
          db:
            image: postgres:15
            restart: always
            healthcheck:
              test: ["CMD", "pg_isready"]
        """,
    )
    issues = {issue.rule: issue for issue in FileChecker().check(analysis)}

    assert "compose-obsolete-version" in issues
    assert issues["compose-no-restart"].description == "No restart policy for: web"
    assert issues["compose-no-healthcheck"].description == "No healthcheck for: web"
    assert "compose-invalid" not in issues


def test_invalid_compose(make_analysis: Callable[..., Analysis]) -> None:
    analysis = make_analysis(
        compose=ArtifactInfo(exists=True, path="compose.yml", content="foo: bar\n", is_valid=False)
    )
    issues = [i for i in FileChecker().check(analysis) if i.type == "compose"]
    assert [i.rule for i in issues] == ["compose-invalid"]
    assert issues[0].severity.value == "high"
