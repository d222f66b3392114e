"""Tests for manifest discovery and dependency bucketing."""

from __future__ import annotations

import pytest

from repodock.analyzers.keywords import DependencyCategorizer
from repodock.analyzers.utils import (
    load_all_dependencies,
    load_go_dependencies,
    load_java_dependencies,
    load_python_dependencies,
    parse_pyproject,
    parse_requirements,
)
from repodock.config import RepodockConfig
from repodock.errors import ConfigError
from tests._fixtures.repo_builder import RepoBuilder


def test_package_json_is_parsed_with_flags(repo_builder: RepoBuilder) -> None:
    repo_builder.write_json(
        "package.json",
        {
            "name": "shop",
            "scripts": {"start": "node app.js"},
            "dependencies": {"express": "^4.18.0", "pg": "^8.0.0"},
            "devDependencies": {},
        },
    )
    package = repo_builder.analyze().package

    assert package.exists is True
    assert package.path == "package.json"
    assert package.is_json is True
    assert package.manifest_value("name") == "shop"
    assert package.has_scripts is True
    assert package.has_dependencies is True
    assert package.has_dev_dependencies is False


def test_malformed_package_json_falls_through_to_next_manifest(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"package.json": "{not json", "requirements.txt": "flask==3.0\n"})
    package = repo_builder.analyze().package

    assert package.path == "requirements.txt"
    assert package.content == "flask==3.0\n"
    assert package.is_json is False
    assert package.manifest_value("name") is None


def test_text_manifest_keeps_raw_content(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"go.mod": "module example.com/demo\n"})
    package = repo_builder.analyze().package

    assert package.path == "go.mod"
    assert package.content == "module example.com/demo\n"
    assert package.has_scripts is False


def test_no_manifest(repo_builder: RepoBuilder) -> None:
    assert repo_builder.analyze().package.exists is False


def test_buckets_from_package_json(repo_builder: RepoBuilder) -> None:
    repo_builder.write_json(
        "package.json",
        {
            "dependencies": {"express": "*", "mysql2": "*", "lodash": "*"},
            "devDependencies": {"jest": "*", "webpack": "*"},
        },
    )
    buckets = repo_builder.analyze().dependencies

    assert buckets.web_framework == ("express",)
    assert buckets.database == ("mysql2",)
    assert buckets.utilities == ("lodash",)
    assert buckets.testing == ("jest",)
    assert buckets.build_tools == ("webpack",)


def test_name_may_land_in_several_buckets() -> None:
    buckets = DependencyCategorizer().categorize(["express-mongodb-session"])

    assert buckets.web_framework == ("express-mongodb-session",)
    assert buckets.database == ("express-mongodb-session",)


def test_python_dependencies_from_all_sources(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "requirements.txt": """
            # web
            Flask>=2.0
            -r other.txt
            psycopg2-binary==2.9 ; python_version > "3.8"
            """,
            "pyproject.toml": """
            [project]
            name = "demo"
            dependencies = ["fastapi>=0.100", "pytest[testing]"]
            """,
            "Pipfile": """
            [packages]
            redis = "*"
            """,
        }
    )
    names = load_python_dependencies(repo_builder.path())

    assert names == ["Flask", "psycopg2-binary", "fastapi", "pytest", "redis"]


def test_parse_requirements_skips_options_and_comments() -> None:
    assert parse_requirements("# c\n--index-url x\nrequests\n\ndjango~=4.2\n") == [
        "requests",
        "django",
    ]


def test_java_dependencies_from_pom_and_gradle(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "pom.xml": """
            <project xmlns="http://maven.apache.org/POM/4.0.0">
              <dependencies>
                <dependency>
                  <groupId>org.springframework.boot</groupId>
                  <artifactId>spring-boot-starter-web</artifactId>
                </dependency>
              </dependencies>
            </project>
            """,
            "build.gradle": """
            dependencies {
                testImplementation 'junit:junit:4.13.2'
            }
            """,
        }
    )
    names = load_java_dependencies(repo_builder.path())

    assert names == ["org.springframework.boot:spring-boot-starter-web", "junit:junit"]


def test_go_require_block(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "go.mod": """
            module example.com/demo

            require github.com/lib/pq v1.10.9
            require (
                github.com/gin-gonic/gin v1.9.1 // indirect
            )
            """
        }
    )
    assert load_go_dependencies(repo_builder.path()) == [
        "github.com/lib/pq",
        "github.com/gin-gonic/gin",
    ]


def test_all_dependencies_are_deduplicated(repo_builder: RepoBuilder) -> None:
    repo_builder.write_json("package.json", {"dependencies": {"redis": "*"}})
    repo_builder.write({"requirements.txt": "redis\n"})

    assert load_all_dependencies(repo_builder.path()) == ["redis"]


def test_keyword_overrides_replace_bucket(repo_builder: RepoBuilder) -> None:
    repo_builder.write_json("package.json", {"dependencies": {"knex": "*", "mysql": "*"}})
    config = RepodockConfig(root=repo_builder.path(), keywords={"database": ["knex"]})

    buckets = repo_builder.analyze(config).dependencies

    assert buckets.database == ("knex",)


def test_unknown_keyword_bucket_is_rejected() -> None:
    with pytest.raises(ConfigError):
        DependencyCategorizer.with_overrides({"orm": ["prisma"]})


@pytest.mark.parametrize(
    "pyproject",
    [
        '[project]\noptional-dependencies = ["pytest"]\n',
        '[project]\ndependencies = "flask"\n',
        '[project]\noptional-dependencies = {test = "pytest"}\n',
        '[tool.poetry]\ndependencies = ["x"]\n',
        '[tool.poetry]\ndev-dependencies = "pytest"\n',
    ],
)
def test_oddly_shaped_pyproject_tables_are_ignored(pyproject: str) -> None:
    assert parse_pyproject(pyproject) == []


def test_poetry_tables_contribute_names() -> None:
    text = (
        "[tool.poetry.dependencies]\n"
        'python = "^3.11"\n'
        'django = "*"\n'
        "\n"
        "[tool.poetry.dev-dependencies]\n"
        'pytest = "*"\n'
    )
    assert parse_pyproject(text) == ["django", "pytest"]


def test_oddly_shaped_pyproject_does_not_abort_analysis(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "requirements.txt": "flask\n",
            "pyproject.toml": '[project]\noptional-dependencies = ["pytest"]\n',
        }
    )
    analysis = repo_builder.analyze()

    assert analysis.dependencies.web_framework == ("flask",)
