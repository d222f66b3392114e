"""Repository analysis, Docker artifact generation and best-practice checks."""

from .analyzer import RepositoryAnalyzer, analyze
from .checker import FileChecker, check
from .errors import AnalysisError, ConfigError, RepodockError, ValidationError
from .generator import Generator, generate
from .models import Analysis, GeneratedFiles, Issue, ProjectType, Severity
from .pipeline import Pipeline, PipelineResult

__all__ = [
    "Analysis",
    "AnalysisError",
    "ConfigError",
    "FileChecker",
    "GeneratedFiles",
    "Generator",
    "Issue",
    "Pipeline",
    "PipelineResult",
    "ProjectType",
    "RepodockError",
    "RepositoryAnalyzer",
    "Severity",
    "ValidationError",
    "analyze",
    "check",
    "generate",
]
