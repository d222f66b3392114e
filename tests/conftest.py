from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest

from repodock.models import Analysis, ProjectType
from tests._fixtures.repo_builder import RepoBuilder


@pytest.fixture
def repo_builder(tmp_path: Path) -> RepoBuilder:
    """Provide a reusable repo builder rooted at the pytest tmp_path."""
    return RepoBuilder(tmp_path)


@pytest.fixture
def make_analysis() -> Callable[..., Analysis]:
    """Build Analysis records directly, defaulting to a bare nodejs project on port 3000."""

    def _make(**overrides: Any) -> Analysis:
        values: dict[str, Any] = {"project_type": ProjectType.NODEJS, "ports": (3000,)}
        values.update(overrides)
        return Analysis(**values)

    return _make
