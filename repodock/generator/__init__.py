"""Artifact generation for repositories missing Docker or README files."""

from __future__ import annotations

from typing import Callable, Mapping, Optional

from ..errors import ValidationError
from ..logging import get_logger
from ..models import Analysis, GeneratedFiles
from .compose import build_compose, compose_document
from .dockerfile import DOCKERFILE_BUILDERS, build_dockerfile
from .readme import build_readme

logger = get_logger("generator")

ArtifactBuilder = Callable[[Analysis], Optional[str]]


class Generator:
    """Synthesises a Dockerfile, compose file and README for absent artifacts.

    Each builder is a pure function of the analysis, so the same analysis
    always yields the same text. Artifacts the analysis reports as present
    are left as ``None``.
    """

    def __init__(
        self,
        *,
        dockerfile_builder: ArtifactBuilder = build_dockerfile,
        compose_builder: ArtifactBuilder = build_compose,
        readme_builder: ArtifactBuilder = build_readme,
    ) -> None:
        self._builders: Mapping[str, ArtifactBuilder] = {
            "dockerfile": dockerfile_builder,
            "compose": compose_builder,
            "readme": readme_builder,
        }

    def generate(self, analysis: Analysis) -> GeneratedFiles:
        validate_analysis(analysis)
        present = {
            "dockerfile": analysis.dockerfile.exists,
            "compose": analysis.compose.exists,
            "readme": analysis.readme.exists,
        }
        outputs = {}
        for kind, builder in self._builders.items():
            if present[kind]:
                outputs[kind] = None
                continue
            logger.debug("Generating %s for %s project", kind, analysis.project_type.value)
            outputs[kind] = builder(analysis)
        return GeneratedFiles(**outputs)


def validate_analysis(analysis: object) -> None:
    if not isinstance(analysis, Analysis):
        raise ValidationError(
            f"Expected an Analysis record, got {type(analysis).__name__}"
        )
    for port in analysis.ports:
        if isinstance(port, bool) or not isinstance(port, int):
            raise ValidationError(f"Invalid port value: {port!r}")


def generate(analysis: Analysis) -> GeneratedFiles:
    return Generator().generate(analysis)


__all__ = [
    "DOCKERFILE_BUILDERS",
    "Generator",
    "build_compose",
    "build_dockerfile",
    "build_readme",
    "compose_document",
    "generate",
    "validate_analysis",
]
