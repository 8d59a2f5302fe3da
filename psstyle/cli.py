"""Command-line entry point for the psstyle linter."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List

from . import __version__
from .engine import run_scan
from .registry import UnknownRuleError, default_registry
from .result import ScanResult, format_findings_text, format_summary_table
from .utils.config import ConfigError, load_config

DEFAULT_PATHS = (".",)
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="psstyle",
        description="Lint PowerShell scripts and the best-practices guide against the style rules.",
    )
    parser.add_argument(
        "paths",
        nargs="*",
        help="Script files or directories to lint (defaults to the current directory).",
    )
    parser.add_argument(
        "--guide",
        dest="guide_paths",
        action="append",
        default=[],
        help="Markdown style guide to check for consistency (repeatable).",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a YAML configuration file (defaults to ./.psstyle.yaml when present).",
    )
    parser.add_argument(
        "--select",
        action="append",
        default=[],
        help="Only run the named rule (repeatable). Overrides the config file.",
    )
    parser.add_argument(
        "--ignore",
        action="append",
        default=[],
        help="Skip the named rule (repeatable). Overrides the config file.",
    )
    parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="json",
        help="Report format (defaults to json).",
    )
    parser.add_argument(
        "--out",
        "--output",
        dest="output_path",
        type=str,
        default=None,
        help="Path to write the report (e.g., artifacts/lint.json).",
    )
    parser.add_argument(
        "--list-rules",
        action="store_true",
        help="List the available rules and exit.",
    )
    parser.add_argument(
        "--fail-on-empty",
        action="store_true",
        help="Fail if no scripts or guide documents were found.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v for info, -vv for debug).",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Do not print the summary table.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def list_rules() -> None:
    registry = default_registry()
    width = max(len(name) for name in registry.names())
    for name in registry.names():
        print(f"{name:<{width}}  {registry.describe(name)}")


def render_report(result: ScanResult, report_format: str) -> str:
    if report_format == "json":
        return json.dumps(result.to_dict(), indent=2)
    return format_findings_text(result)


def write_output(result: ScanResult, output_path: str | None, report_format: str, quiet: bool = False) -> None:
    if not quiet:
        print(format_summary_table(result))

    payload = render_report(result, report_format)
    if output_path:
        output_file = Path(output_path)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(payload + "\n", encoding="utf-8")
        if not quiet:
            print(f"\nReport written to {output_path}")
    elif payload:
        if not quiet:
            print("\nJSON Report" if report_format == "json" else "\nFindings")
        print(payload)


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if args.list_rules:
        list_rules()
        return 0

    try:
        config = load_config(args.config)
    except ConfigError as exc:
        raise SystemExit(f"Invalid configuration: {exc}") from None
    if args.select:
        config.select = [name.lower() for name in args.select]
    if args.ignore:
        config.ignore = [name.lower() for name in args.ignore]

    paths = args.paths or ([] if args.guide_paths else list(DEFAULT_PATHS))
    try:
        result = run_scan(paths, args.guide_paths, config=config)
    except (UnknownRuleError, FileNotFoundError) as exc:
        raise SystemExit(str(exc)) from None

    if args.fail_on_empty and result.files_scanned == 0:
        raise SystemExit("No PowerShell scripts or guide documents found to lint")

    write_output(result, args.output_path, args.format, quiet=args.quiet)
    return result.exit_code()


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
