"""Exception hierarchy shared by the analyzer, generator and checker."""

from __future__ import annotations


class RepodockError(RuntimeError):
    """Base class for repodock failures surfaced to callers."""


class AnalysisError(RepodockError):
    """Raised when a repository root cannot be analyzed at all."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class ValidationError(RepodockError):
    """Raised when the generator or checker receives malformed input."""


class ConfigError(RepodockError):
    """Raised when the configuration file cannot be parsed."""


__all__ = ["AnalysisError", "ConfigError", "RepodockError", "ValidationError"]
