"""Rule registry primitives for the file checker."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

from ..models import Analysis, Issue, Severity


@dataclass(frozen=True)
class Finding:
    """What a rule reports; the registry turns it into an :class:`Issue`."""

    severity: Severity
    title: str
    description: Optional[str] = None
    recommendation: Optional[str] = None


RuleFunc = Callable[[Analysis], Optional[Finding]]


@dataclass(frozen=True)
class Rule:
    name: str
    group: str
    func: RuleFunc

    def evaluate(self, analysis: Analysis) -> Optional[Issue]:
        finding = self.func(analysis)
        if finding is None:
            return None
        return Issue(
            type=self.group,
            severity=finding.severity,
            title=finding.title,
            description=finding.description,
            recommendation=finding.recommendation,
            rule=self.name,
        )


@dataclass
class RuleGroup:
    """Ordered collection of rules sharing one issue category."""

    name: str
    rules: List[Rule] = field(default_factory=list)

    def rule(self, name: str) -> Callable[[RuleFunc], RuleFunc]:
        def register(func: RuleFunc) -> RuleFunc:
            if any(existing.name == name for existing in self.rules):
                raise ValueError(f"Duplicate rule name: {name}")
            self.rules.append(Rule(name=name, group=self.name, func=func))
            return func

        return register

    def __iter__(self) -> Iterator[Rule]:
        return iter(self.rules)

    def names(self) -> Tuple[str, ...]:
        return tuple(rule.name for rule in self.rules)


# Dockerfile text helpers shared by several groups.

_CONTINUATION = re.compile(r"[ \t]*\\[ \t]*\n[ \t]*")


def dockerfile_instructions(content: Optional[str]) -> List[Tuple[str, str]]:
    """Split Dockerfile text into ``(INSTRUCTION, arguments)`` pairs.

    Comment lines are dropped and backslash continuations are joined.
    """
    if not content:
        return []
    joined = _CONTINUATION.sub(" ", content)
    instructions: List[Tuple[str, str]] = []
    for raw_line in joined.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        keyword, _, arguments = line.partition(" ")
        instructions.append((keyword.upper(), arguments.strip()))
    return instructions


def instructions_named(
    instructions: Sequence[Tuple[str, str]], keyword: str
) -> List[str]:
    return [arguments for name, arguments in instructions if name == keyword]
