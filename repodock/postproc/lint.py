"""Normalisation pass for generated markdown."""

from __future__ import annotations

from typing import List


class MarkdownLinter:
    """Normalises line endings, heading spacing, blank runs and code fences."""

    def lint(self, markdown: str) -> str:
        lines = markdown.replace("\r\n", "\n").replace("\r", "\n").split("\n")
        cleaned: List[str] = []
        in_code = False

        for line in lines:
            stripped = line.rstrip()
            if stripped.lstrip().startswith("```"):
                in_code = not in_code
                if in_code and cleaned and cleaned[-1] != "":
                    cleaned.append("")
                cleaned.append(stripped)
                continue

            if in_code:
                cleaned.append(stripped)
                continue

            if not stripped:
                if cleaned and cleaned[-1] != "":
                    cleaned.append("")
                continue

            if stripped.startswith("#"):
                if cleaned and cleaned[-1] != "":
                    cleaned.append("")
                cleaned.append(stripped)
                cleaned.append("")
                continue

            if cleaned and cleaned[-1].startswith("```") and not in_code:
                cleaned.append("")
            cleaned.append(stripped)

        if in_code:
            cleaned.append("```")

        while cleaned and cleaned[-1] == "":
            cleaned.pop()
        while cleaned and cleaned[0] == "":
            cleaned.pop(0)

        return "\n".join(cleaned) + "\n"
