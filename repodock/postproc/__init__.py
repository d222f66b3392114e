"""Post-processing helpers for generated documents."""

from .lint import MarkdownLinter

__all__ = ["MarkdownLinter"]
