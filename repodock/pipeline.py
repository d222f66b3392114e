"""End-to-end pipeline: analyze, then generate and check concurrently."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from .analyzer import RepositoryAnalyzer
from .checker import FileChecker
from .config import RepodockConfig, load_config
from .generator import Generator
from .logging import get_logger
from .models import Analysis, GeneratedFiles, Issue

logger = get_logger("pipeline")


@dataclass(frozen=True)
class PipelineResult:
    analysis: Analysis
    generated: GeneratedFiles
    issues: List[Issue]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "analysis": self.analysis.to_dict(),
            "generated": self.generated.to_dict(),
            "issues": [issue.to_dict() for issue in self.issues],
        }


class Pipeline:
    """Runs the analyzer, then the generator and checker on the same snapshot.

    When no configuration is supplied, ``.repodock.yml`` is read from the
    analyzed repository if present.
    """

    def __init__(
        self,
        config: RepodockConfig | None = None,
        *,
        analyzer: RepositoryAnalyzer | None = None,
        generator: Generator | None = None,
        checker: FileChecker | None = None,
    ) -> None:
        self.config = config
        self._analyzer = analyzer
        self._generator = generator or Generator()
        self._checker = checker

    def _resolve_config(self, root: Path) -> Optional[RepodockConfig]:
        if self.config is not None:
            return self.config
        if root.is_dir():
            return load_config(root)
        return None

    def analyze(self, path: str | Path) -> Analysis:
        config = self._resolve_config(Path(path).expanduser())
        analyzer = self._analyzer or RepositoryAnalyzer(config=config)
        return analyzer.analyze(path)

    def run(self, path: str | Path) -> PipelineResult:
        root = Path(path).expanduser()
        config = self._resolve_config(root)
        analyzer = self._analyzer or RepositoryAnalyzer(config=config)
        checker = self._checker or FileChecker(config)

        analysis = analyzer.analyze(root)
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="repodock") as executor:
            generated_future = executor.submit(self._generator.generate, analysis)
            issues_future = executor.submit(checker.check, analysis)
            generated = generated_future.result()
            issues = issues_future.result()

        logger.info(
            "Pipeline finished for %s: %d artifact(s) generated, %d issue(s)",
            root,
            sum(1 for value in generated.to_dict().values() if value is not None),
            len(issues),
        )
        return PipelineResult(analysis=analysis, generated=generated, issues=issues)


def run(path: str | Path, config: RepodockConfig | None = None) -> PipelineResult:
    return Pipeline(config).run(path)


__all__ = ["Pipeline", "PipelineResult", "run"]
