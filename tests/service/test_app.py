"""Tests for the FastAPI service mode."""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from repodock.config import RepodockConfig
from repodock.pipeline import Pipeline
from repodock.service import create_app
from tests._fixtures.repo_builder import RepoBuilder


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app())


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_analyze_endpoint(client: TestClient, repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "requirements.txt": "flask==3.0.0\nredis==5.0.0\n",
            "app.py": "app.run(host='0.0.0.0', port=5000)\n",
        }
    )

    response = client.post("/analyze", json={"path": str(repo_builder.path())})

    assert response.status_code == 200
    data = response.json()
    assert data["analysis"]["projectType"] == "flask"
    assert data["analysis"]["ports"] == [5000]
    assert "EXPOSE 5000" in data["generated"]["dockerfile"]
    assert "redis:7-alpine" in data["generated"]["compose"]
    assert {issue["type"] for issue in data["issues"]} >= {"missing-file", "readme"}


def test_missing_repository_returns_404(client: TestClient, tmp_path: Path) -> None:
    response = client.post("/analyze", json={"path": str(tmp_path / "nowhere")})
    assert response.status_code == 404
    assert "not found" in response.json()["detail"]


def test_request_body_is_validated(client: TestClient) -> None:
    response = client.post("/analyze", json={})
    assert response.status_code == 422


def test_pipeline_factory_is_used(repo_builder: RepoBuilder, tmp_path: Path) -> None:
    repo_builder.write({"main.go": "package main\n", "go.mod": "module demo\n"})
    config = RepodockConfig(root=tmp_path, disabled_checks=["readme-missing"])
    client = TestClient(create_app(lambda: Pipeline(config)))

    response = client.post("/analyze", json={"path": str(repo_builder.path())})

    rules = {issue["rule"] for issue in response.json()["issues"]}
    assert "readme-missing" not in rules
    assert "dockerfile-missing" in rules
