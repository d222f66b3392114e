"""Best-practice and security checks over an analysis record."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from ..config import RepodockConfig
from ..errors import ValidationError
from ..logging import get_logger
from ..models import Analysis, Issue
from .base import Finding, Rule, RuleGroup
from .dependencies import DEPENDENCY
from .docker import COMPOSE, DOCKERFILE
from .docs import README
from .hygiene import BEST_PRACTICE, ENVIRONMENT, MISSING_FILE
from .performance import PERFORMANCE
from .security import SECURITY

logger = get_logger("checker")

RULE_GROUPS: Tuple[RuleGroup, ...] = (
    DOCKERFILE,
    COMPOSE,
    README,
    SECURITY,
    PERFORMANCE,
    BEST_PRACTICE,
    MISSING_FILE,
    ENVIRONMENT,
    DEPENDENCY,
)


def all_rules() -> List[Rule]:
    return [rule for group in RULE_GROUPS for rule in group]


class FileChecker:
    """Runs every enabled rule, group by group, and collects the issues."""

    def __init__(
        self,
        config: Optional[RepodockConfig] = None,
        *,
        disabled: Optional[Iterable[str]] = None,
    ) -> None:
        names = set(disabled or ())
        if config is not None:
            names.update(config.disabled_checks)
        known = {rule.name for rule in all_rules()}
        for name in sorted(names - known):
            logger.warning("Ignoring unknown check in disabled list: %s", name)
        self.disabled = frozenset(names & known)

    @property
    def rules(self) -> Sequence[Rule]:
        return [rule for rule in all_rules() if rule.name not in self.disabled]

    def check(self, analysis: Analysis) -> List[Issue]:
        if not isinstance(analysis, Analysis):
            raise ValidationError(
                f"Expected an Analysis record, got {type(analysis).__name__}"
            )
        issues: List[Issue] = []
        for rule in self.rules:
            issue = rule.evaluate(analysis)
            if issue is not None:
                issues.append(issue)
        logger.debug("Checks produced %d issue(s)", len(issues))
        return issues


def check(analysis: Analysis, config: Optional[RepodockConfig] = None) -> List[Issue]:
    return FileChecker(config).check(analysis)


__all__ = [
    "FileChecker",
    "Finding",
    "RULE_GROUPS",
    "Rule",
    "RuleGroup",
    "all_rules",
    "check",
]
