from __future__ import annotations

from repodock.postproc import MarkdownLinter


def test_headings_get_surrounding_blank_lines() -> None:
    result = MarkdownLinter().lint("# Title\nIntro text\n## Section\nBody")
    assert result == "# Title\n\nIntro text\n\n## Section\n\nBody\n"


def test_collapses_blank_runs_and_trailing_spaces() -> None:
    result = MarkdownLinter().lint("\n\nFirst   \n\n\n\nSecond\t\n\n")
    assert result == "First\n\nSecond\n"


def test_normalises_crlf() -> None:
    assert MarkdownLinter().lint("a\r\nb\rc") == "a\nb\nc\n"


def test_code_fences_are_separated_and_preserved() -> None:
    source = "Run this:\n```bash\n# not a heading\n\n\nmake build\n```\nDone"
    result = MarkdownLinter().lint(source)
    assert result == "Run this:\n\n```bash\n# not a heading\n\n\nmake build\n```\n\nDone\n"


def test_unterminated_fence_is_closed() -> None:
    result = MarkdownLinter().lint("```\ncode")
    assert result == "```\ncode\n```\n"
