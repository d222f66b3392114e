"""CLI entrypoints for repodock commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict

from .config import load_config
from .errors import RepodockError
from .logging import configure_logging
from .models import GeneratedFiles, Severity
from .pipeline import Pipeline

# Output filenames used when writing generated artifacts to disk.
OUTPUT_FILENAMES: Dict[str, str] = {
    "dockerfile": "Dockerfile",
    "compose": "docker-compose.yml",
    "readme": "README.md",
}


def _add_common_options(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    verbose_kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
        "default": argparse.SUPPRESS if suppress_default else False,
    }
    parser.add_argument("-v", "--verbose", **verbose_kwargs)
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Only log warnings and errors.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=argparse.SUPPRESS if suppress_default else None,
        help="Path to a .repodock.yml file (defaults to the one in the repository).",
    )


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the repository root (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repodock",
        description="Analyze repositories, generate Docker artifacts and report best-practice issues.",
    )
    _add_common_options(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser("analyze", help="Print the repository analysis as JSON.")
    _add_common_options(analyze_parser, suppress_default=True)
    _add_path_argument(analyze_parser)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate a Dockerfile, compose file and README for missing artifacts.",
    )
    _add_common_options(generate_parser, suppress_default=True)
    _add_path_argument(generate_parser)
    generate_parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Write generated files into this directory instead of printing them.",
    )

    check_parser = subparsers.add_parser("check", help="Report best-practice and security issues.")
    _add_common_options(check_parser, suppress_default=True)
    _add_path_argument(check_parser)
    check_parser.add_argument(
        "--fail-on",
        choices=[severity.value for severity in Severity],
        default=None,
        help="Exit with status 1 when an issue at or above this severity is found.",
    )

    run_parser = subparsers.add_parser(
        "run", help="Analyze, generate and check in one pass and print the combined JSON."
    )
    _add_common_options(run_parser, suppress_default=True)
    _add_path_argument(run_parser)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP service.")
    _add_common_options(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="0.0.0.0", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to bind.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for repodock commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), quiet=bool(args.quiet))

    if args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
        return

    try:
        config = load_config(args.config) if args.config is not None else None
        pipeline = Pipeline(config)
        if args.command == "analyze":
            _print_json(pipeline.analyze(args.path).to_dict())
        elif args.command == "generate":
            _generate(pipeline, args.path, args.output_dir)
        elif args.command == "check":
            _check(parser, pipeline, args.path, args.fail_on)
        elif args.command == "run":
            _print_json(pipeline.run(args.path).to_dict())
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except RepodockError as exc:
        parser.exit(1, f"repodock {args.command} failed: {exc}\n")


def _generate(pipeline: Pipeline, path: str, output_dir: Path | None) -> None:
    result = pipeline.run(path)
    if output_dir is None:
        _print_json(result.generated.to_dict())
        return
    for written in write_generated(result.generated, output_dir):
        print(f"Wrote {_relativize(written)}")


def write_generated(generated: GeneratedFiles, output_dir: Path) -> list[Path]:
    """Write non-empty artifacts into ``output_dir``; existing files are left untouched."""
    output_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for kind, content in generated.to_dict().items():
        if content is None:
            continue
        target = output_dir / OUTPUT_FILENAMES[kind]
        if target.exists():
            print(f"Skipped {_relativize(target)} (already exists)", file=sys.stderr)
            continue
        target.write_text(content, encoding="utf-8")
        written.append(target)
    return written


def _check(
    parser: argparse.ArgumentParser,
    pipeline: Pipeline,
    path: str,
    fail_on: str | None,
) -> None:
    issues = pipeline.run(path).issues
    _print_json([issue.to_dict() for issue in issues])
    if fail_on is None:
        return
    threshold = Severity(fail_on).rank
    failing = [issue for issue in issues if issue.severity.rank <= threshold]
    if failing:
        parser.exit(1, f"{len(failing)} issue(s) at or above {fail_on}\n")


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2))


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
