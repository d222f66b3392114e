"""Keyword tables used to bucket dependency names."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from ..errors import ConfigError
from ..models import DependencyBuckets

BUCKETS: Tuple[str, ...] = (
    "database",
    "web_framework",
    "testing",
    "build_tools",
    "utilities",
)

DEFAULT_KEYWORDS: Mapping[str, Tuple[str, ...]] = {
    "database": (
        "mysql",
        "postgres",
        "mongodb",
        "redis",
        "sqlite",
        "mariadb",
        "oracle",
        "sqlserver",
    ),
    "web_framework": (
        "express",
        "koa",
        "fastify",
        "hapi",
        "django",
        "flask",
        "fastapi",
        "laravel",
        "symfony",
        "spring",
        "gin",
        "echo",
    ),
    "testing": (
        "jest",
        "mocha",
        "chai",
        "cypress",
        "playwright",
        "pytest",
        "unittest",
        "junit",
        "testng",
    ),
    "build_tools": (
        "webpack",
        "vite",
        "rollup",
        "parcel",
        "gulp",
        "grunt",
        "babel",
        "typescript",
    ),
    "utilities": (
        "lodash",
        "moment",
        "axios",
        "request",
        "fs-extra",
        "path",
        "util",
    ),
}


@dataclass(frozen=True)
class DependencyCategorizer:
    """Assigns dependency names to buckets by case-insensitive substring match."""

    keywords: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: dict(DEFAULT_KEYWORDS))

    @classmethod
    def with_overrides(cls, overrides: Mapping[str, Sequence[str]] | None) -> "DependencyCategorizer":
        """Return a categorizer where each overridden bucket replaces its default list."""
        merged: Dict[str, Tuple[str, ...]] = dict(DEFAULT_KEYWORDS)
        for bucket, values in (overrides or {}).items():
            if bucket not in BUCKETS:
                raise ConfigError(f"Unknown dependency bucket: {bucket}")
            merged[bucket] = tuple(value.lower() for value in values)
        return cls(keywords=merged)

    def matches(self, bucket: str, name: str) -> bool:
        lowered = name.lower()
        return any(keyword in lowered for keyword in self.keywords.get(bucket, ()))

    def categorize(self, names: Iterable[str]) -> DependencyBuckets:
        grouped: Dict[str, List[str]] = {bucket: [] for bucket in BUCKETS}
        for name in names:
            for bucket in BUCKETS:
                if self.matches(bucket, name) and name not in grouped[bucket]:
                    grouped[bucket].append(name)
        return DependencyBuckets(**{bucket: tuple(items) for bucket, items in grouped.items()})


__all__ = ["BUCKETS", "DEFAULT_KEYWORDS", "DependencyCategorizer"]
