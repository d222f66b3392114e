"""Database, framework, build, test, lint and CI tooling detection."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Tuple

from .base import Analyzer, RepoContext

MarkerTable = Tuple[Tuple[str, str], ...]

DATABASE_CONFIG_FILES: Tuple[str, ...] = ("database.yml", "db.yml", "config/database.yml")

FRAMEWORK_MARKERS: MarkerTable = (
    ("angular.json", "angular"),
    ("vue.config.js", "vue"),
    ("next.config.js", "nextjs"),
    ("nuxt.config.js", "nuxt"),
    ("manage.py", "django"),
    ("artisan", "laravel"),
)

BUILD_TOOL_MARKERS: MarkerTable = (
    ("webpack.config.js", "webpack"),
    ("vite.config.js", "vite"),
    ("rollup.config.js", "rollup"),
    ("tsconfig.json", "typescript"),
    ("babel.config.js", "babel"),
)

TEST_MARKERS: MarkerTable = (
    ("jest.config.js", "jest"),
    ("cypress.json", "cypress"),
    ("pytest.ini", "pytest"),
)

LINTER_MARKERS: MarkerTable = (
    (".eslintrc.js", "eslint"),
    (".eslintrc.json", "eslint"),
    (".prettierrc", "prettier"),
    ("flake8", "flake8"),
    (".flake8", "flake8"),
    ("pylintrc", "pylint"),
    (".pylintrc", "pylint"),
)

CI_MARKERS: MarkerTable = (
    (".github/workflows", "github-actions"),
    (".gitlab-ci.yml", "gitlab-ci"),
    (".travis.yml", "travis-ci"),
    ("Jenkinsfile", "jenkins"),
    ("azure-pipelines.yml", "azure-devops"),
)


def _markers(context: RepoContext, table: MarkerTable, *, unique: bool = False) -> List[str]:
    found: List[str] = []
    for path, label in table:
        if context.exists(path) and not (unique and label in found):
            found.append(label)
    return found


class ToolingAnalyzer(Analyzer):
    """Combines dependency buckets with marker-file checks."""

    name = "tooling"

    def analyze(self, context: RepoContext) -> Dict[str, Any]:
        buckets = context.dependency_buckets

        database: List[str] = list(buckets.database)
        database.extend("database_config" for path in DATABASE_CONFIG_FILES if context.exists(path))

        return {
            "database": tuple(database),
            "frameworks": _join(buckets.web_framework, _markers(context, FRAMEWORK_MARKERS)),
            "build_tools": _join(buckets.build_tools, _markers(context, BUILD_TOOL_MARKERS)),
            "test_framework": _join(buckets.testing, _markers(context, TEST_MARKERS)),
            "linter": tuple(_markers(context, LINTER_MARKERS, unique=True)),
            "ci": tuple(_markers(context, CI_MARKERS)),
        }


def _join(first: Iterable[str], second: Iterable[str]) -> Tuple[str, ...]:
    return tuple(first) + tuple(second)
