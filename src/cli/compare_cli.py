# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""CLI for license text matching and template inspection."""

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import TextIO

from rich.console import Console
from rich.logging import RichHandler
from rich.style import Style
from rich.table import Table

from spdxcmp.errors import SpdxCompareError
from spdxcmp.matcher import LicenseTextMatcher
from spdxcmp.template_evaluator import (
    DifferenceDescription,
    VariableRuleStrategy,
    compare_template,
)
from spdxcmp.template_filter import filter_template

logger = logging.getLogger(__name__)

EXIT_MATCH = 0
EXIT_DIFFERENCE = 1
EXIT_ERROR = 2


def configure_logging(level: int = logging.INFO) -> None:
    """Configure application logging with Rich handler.

    Args:
        level: Logging severity threshold.
    """
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser instance.
    """
    parser = argparse.ArgumentParser(prog="spdx-compare")
    parser.add_argument(
        "--log-level",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        default="INFO",
        help="Logging severity threshold.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    match_text_parser = subparsers.add_parser("match-text")
    match_text_parser.add_argument(
        "--reference", required=True, help="Reference license text file."
    )
    match_text_parser.add_argument(
        "--candidate", required=True, help="Candidate license text file."
    )
    _add_format_argument(match_text_parser)

    match_template_parser = subparsers.add_parser("match-template")
    match_template_parser.add_argument(
        "--template", required=True, help="License template file."
    )
    match_template_parser.add_argument(
        "--candidate", required=True, help="Candidate license text file."
    )
    match_template_parser.add_argument(
        "--variable-strategy",
        choices=[strategy.value for strategy in VariableRuleStrategy],
        default=VariableRuleStrategy.OFFSET.value,
        help="How the cursor moves past matched variable text.",
    )
    _add_format_argument(match_template_parser)

    filter_parser = subparsers.add_parser("filter-template")
    filter_parser.add_argument("--template", required=True, help="License template file.")
    filter_parser.add_argument(
        "--include-var-text",
        action="store_true",
        help="Inline the original text of variable rules.",
    )
    filter_parser.add_argument(
        "--include-optional",
        action="store_true",
        help="Keep the content of optional blocks.",
    )
    _add_format_argument(filter_parser)
    return parser


def _add_format_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--format",
        choices=("table", "json"),
        default="table",
        help="Output format.",
    )


def run(argv: list[str], stdout: TextIO, stderr: TextIO) -> int:
    """Run CLI command.

    Args:
        argv: CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code: 0 on a match, 1 on a difference, 2 on errors.
    """
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit:
        logger.warning(f"Argument parsing failed (argv={argv})")
        return EXIT_ERROR
    logging.getLogger().setLevel(args.log_level)
    try:
        if args.command == "match-text":
            return _run_match_text(args=args, stdout=stdout, stderr=stderr)
        if args.command == "match-template":
            return _run_match_template(args=args, stdout=stdout, stderr=stderr)
        if args.command == "filter-template":
            return _run_filter_template(args=args, stdout=stdout, stderr=stderr)
    except SpdxCompareError as exc:
        logger.warning(f"Command failed (command={args.command} error={exc})")
        stderr.write(f"error: {exc}\n")
        return EXIT_ERROR

    logger.warning(f"Unsupported command (command={args.command})")
    stderr.write(f"Unsupported command: {args.command}\n")
    return EXIT_ERROR


def _run_match_text(args: argparse.Namespace, stdout: TextIO, stderr: TextIO) -> int:
    """Run match-text command.

    Args:
        args: Parsed CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code.
    """
    reference = _read_text(Path(args.reference), stderr)
    candidate = _read_text(Path(args.candidate), stderr)
    if reference is None or candidate is None:
        return EXIT_ERROR
    matched = LicenseTextMatcher().match(reference, candidate)
    logger.info(
        f"Text match completed (reference={args.reference} candidate={args.candidate} matched={matched})"
    )
    payload = {
        "reference": args.reference,
        "candidate": args.candidate,
        "matched": matched,
    }
    if args.format == "json":
        _write_json(payload=payload, stdout=stdout)
    else:
        _write_key_values(title="match-text", payload=payload, stdout=stdout)
    return EXIT_MATCH if matched else EXIT_DIFFERENCE


def _run_match_template(
    args: argparse.Namespace, stdout: TextIO, stderr: TextIO
) -> int:
    """Run match-template command.

    Args:
        args: Parsed CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code.
    """
    template = _read_text(Path(args.template), stderr)
    candidate = _read_text(Path(args.candidate), stderr)
    if template is None or candidate is None:
        return EXIT_ERROR
    description = compare_template(
        template,
        candidate,
        strategy=VariableRuleStrategy(args.variable_strategy),
    )
    logger.info(
        f"Template match completed (template={args.template} candidate={args.candidate} "
        f"difference_found={description.difference_found})"
    )
    if args.format == "json":
        _write_json(payload=asdict(description), stdout=stdout)
    else:
        _write_description(description=description, stdout=stdout)
    return EXIT_DIFFERENCE if description.difference_found else EXIT_MATCH


def _run_filter_template(
    args: argparse.Namespace, stdout: TextIO, stderr: TextIO
) -> int:
    """Run filter-template command.

    Args:
        args: Parsed CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code.
    """
    template = _read_text(Path(args.template), stderr)
    if template is None:
        return EXIT_ERROR
    fragments = filter_template(
        template,
        include_var_text=args.include_var_text,
        include_optional=args.include_optional,
    )
    if args.format == "json":
        _write_json(payload={"fragments": fragments}, stdout=stdout)
        return EXIT_MATCH
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    table = Table(show_header=True, show_lines=True, expand=True)
    table.add_column("#", justify="right", ratio=1)
    table.add_column("fragment", ratio=12, overflow="fold")
    for index, fragment in enumerate(fragments, start=1):
        table.add_row(str(index), fragment)
    console.print(table)
    return EXIT_MATCH


def _read_text(path: Path, stderr: TextIO) -> str | None:
    """Read a UTF-8 text file, reporting failures on stderr.

    Args:
        path: File to read.
        stderr: Standard error stream.

    Returns:
        File content, or ``None`` when the file cannot be read.
    """
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning(f"Failed to read input file (path={path} error={exc})")
        stderr.write(f"Failed to read file: {path}\n")
        return None


def _write_json(payload: dict[str, object], stdout: TextIO) -> None:
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    console.print(
        json.dumps(payload, indent=2, sort_keys=True),
        markup=False,
        highlight=False,
        soft_wrap=True,
    )


def _write_key_values(title: str, payload: dict[str, object], stdout: TextIO) -> None:
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    console.rule(title, style=Style(color="cyan"), characters="-")
    table = Table(show_header=True, expand=True)
    table.add_column("field", no_wrap=True)
    table.add_column("value", ratio=4, overflow="fold")
    for key, value in payload.items():
        table.add_row(key, str(value))
    console.print(table)


def _write_description(description: DifferenceDescription, stdout: TextIO) -> None:
    """Write a template comparison outcome as a table.

    Args:
        description: Comparison outcome.
        stdout: Standard output stream.
    """
    _write_key_values(
        title="match-template",
        payload={
            "difference_found": description.difference_found,
            "message": description.message or "-",
        },
        stdout=stdout,
    )
    if not description.differences:
        return
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    table = Table(show_header=True, expand=True)
    table.add_column("line", justify="right")
    table.add_column("column", justify="right")
    table.add_column("length", justify="right")
    for location in description.differences:
        table.add_row(str(location.line), str(location.column), str(location.length))
    console.print(table)


def main() -> None:
    """Run the CLI application and exit."""
    configure_logging()
    exit_code = run(sys.argv[1:], stdout=sys.stdout, stderr=sys.stderr)
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
