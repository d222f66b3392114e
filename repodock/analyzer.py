"""Repository analysis entrypoint producing an immutable Analysis."""

from __future__ import annotations

from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from .analyzers import Analyzer, RepoContext, discover_analyzers
from .config import RepodockConfig, default_config
from .errors import AnalysisError
from .logging import get_logger
from .models import Analysis, ProjectType

_ANALYSIS_FIELDS = frozenset(item.name for item in fields(Analysis))


class RepositoryAnalyzer:
    """Runs every analyzer over a directory and assembles the Analysis.

    Individual analyzer failures are logged and leave their fields at the
    default "absent" values. A missing or non-directory root raises
    :class:`AnalysisError`.
    """

    def __init__(
        self,
        analyzers: Optional[Iterable[Analyzer]] = None,
        config: RepodockConfig | None = None,
    ) -> None:
        self._analyzers: List[Analyzer] = (
            list(analyzers) if analyzers is not None else discover_analyzers()
        )
        self.config = config
        self.logger = get_logger("analyzer")

    def analyze(self, path: str | Path) -> Analysis:
        root = Path(path).expanduser()
        if not root.exists():
            raise AnalysisError(f"Repository path not found: {path}", path=str(path))
        if not root.is_dir():
            raise AnalysisError(f"Repository path is not a directory: {path}", path=str(path))
        root = root.resolve()

        self.logger.info("Starting repository analysis for %s", root)
        context = RepoContext(root=root, config=self.config or default_config(root))

        values: Dict[str, Any] = {"project_type": ProjectType.UNKNOWN}
        for analyzer in self._analyzers:
            try:
                contributed = analyzer.analyze(context)
            except (OSError, ValueError) as exc:
                self.logger.warning("Analyzer %s failed: %s", analyzer.name, exc)
                continue
            for key, value in contributed.items():
                if key not in _ANALYSIS_FIELDS:
                    raise TypeError(f"Analyzer {analyzer.name} produced unknown field '{key}'")
                values[key] = value

        analysis = Analysis(**values)
        self.logger.info(
            "Analysis completed: type=%s files=%d dockerfile=%s compose=%s readme=%s",
            analysis.project_type.value,
            analysis.total_files,
            analysis.dockerfile.exists,
            analysis.compose.exists,
            analysis.readme.exists,
        )
        return analysis


def analyze(path: str | Path, config: RepodockConfig | None = None) -> Analysis:
    """Analyze ``path`` with the built-in analyzers."""
    return RepositoryAnalyzer(config=config).analyze(path)


__all__ = ["RepositoryAnalyzer", "analyze"]
