"""Whole-tree inventory: file count plus sensitive and oversized files."""

from __future__ import annotations

from typing import Any, Dict

from ..logging import get_logger
from ..walker import walk_repository
from .base import Analyzer, RepoContext

logger = get_logger("analyzers.inventory")


class InventoryAnalyzer(Analyzer):
    name = "inventory"

    def analyze(self, context: RepoContext) -> Dict[str, Any]:
        result = walk_repository(
            context.root,
            extra_excludes=context.config.exclude_dirs,
            large_file_threshold=context.config.large_file_threshold,
        )
        logger.debug("Counted %d files", result.total_files)
        return {
            "total_files": result.total_files,
            "sensitive_files": tuple(result.sensitive_files),
            "large_files": tuple(result.large_files),
        }
