from __future__ import annotations

from typing import Callable

import pytest
import yaml

from repodock.generator.compose import build_compose, compose_document
from repodock.models import Analysis, PackageInfo, ProjectType


def _demo_package() -> PackageInfo:
    return PackageInfo(exists=True, path="package.json", content={"name": "demo-svc"})


def test_compose_without_database(make_analysis: Callable[..., Analysis]) -> None:
    document = yaml.safe_load(build_compose(make_analysis(package=_demo_package())))

    assert list(document) == ["services", "networks"]
    assert list(document["services"]) == ["demo_svc"]
    app = document["services"]["demo_svc"]
    assert app["build"] == "."
    assert app["ports"] == ["3000:3000"]
    assert "PORT=3000" in app["environment"]
    assert app["volumes"] == [".:/app", "/app/node_modules"]
    assert app["restart"] == "unless-stopped"
    assert "depends_on" not in app
    assert app["healthcheck"]["test"][-1] == "http://localhost:3000/health"
    assert document["networks"] == {"default": {"driver": "bridge"}}


def test_compose_has_no_version_key(make_analysis: Callable[..., Analysis]) -> None:
    assert "version" not in yaml.safe_load(build_compose(make_analysis()))


def test_service_falls_back_to_app_without_name(make_analysis: Callable[..., Analysis]) -> None:
    document = compose_document(make_analysis(project_type=ProjectType.GO, ports=(8080,)))
    assert list(document["services"]) == ["app"]
    assert "volumes" not in document["services"]["app"]


@pytest.mark.parametrize(
    ("detected", "image", "volume"),
    [
        ("pg", "postgres:15-alpine", "postgres_data"),
        ("mysql2", "mysql:8.0", "mysql_data"),
        ("mongoose", "mongo:7", "mongodb_data"),
        ("ioredis", "redis:7-alpine", "redis_data"),
    ],
)
def test_database_service_follows_first_database(
    make_analysis: Callable[..., Analysis], detected: str, image: str, volume: str
) -> None:
    analysis = make_analysis(package=_demo_package(), database=(detected, "sqlite3"))
    document = yaml.safe_load(build_compose(analysis))

    services = document["services"]
    assert list(services) == ["demo_svc", "db"]
    assert services["db"]["image"] == image
    assert services["db"]["restart"] == "unless-stopped"
    assert "healthcheck" in services["db"]
    assert services["demo_svc"]["depends_on"] == {"db": {"condition": "service_healthy"}}
    assert any(entry.startswith("DATABASE_URL=") for entry in services["demo_svc"]["environment"])
    assert document["volumes"] == {volume: {}}


def test_database_passwords_use_variable_substitution(
    make_analysis: Callable[..., Analysis],
) -> None:
    document = compose_document(make_analysis(database=("pg",)))
    password = document["services"]["db"]["environment"]["POSTGRES_PASSWORD"]
    assert password.startswith("${POSTGRES_PASSWORD")


def test_spring_compose_healthcheck_matches_actuator(
    make_analysis: Callable[..., Analysis],
) -> None:
    document = compose_document(make_analysis(project_type=ProjectType.SPRING, ports=(8080,)))
    test = document["services"]["app"]["healthcheck"]["test"]
    assert test == ["CMD", "curl", "-f", "http://localhost:8080/actuator/health"]


def test_nextjs_has_no_source_volume(make_analysis: Callable[..., Analysis]) -> None:
    document = compose_document(make_analysis(project_type=ProjectType.NEXTJS))
    assert "volumes" not in document["services"]["app"]


def test_compose_output_is_stable(make_analysis: Callable[..., Analysis]) -> None:
    analysis = make_analysis(package=_demo_package(), database=("pg",))
    assert build_compose(analysis) == build_compose(analysis)
