from __future__ import annotations

import argparse
import ast
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from .api import parse_file
from .checker import check_statements
from .dump import dump_json
from .errors import Diagnostic
from .grammar import ParseMode
from .lowering import lower_statements


logger = logging.getLogger(__name__)

COMMANDS = ("check", "parse")
LOG_LEVEL_ENV = "TYPEFRONT_LOG_LEVEL"


@dataclass(frozen=True, slots=True)
class CliConfig:
    command: Literal["check", "parse"]
    path: Path
    mode: ParseMode = ParseMode.MODULE
    output: Literal["json", "ast"] = "json"
    log_level: str = "warning"


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="typefront",
        description="Static type checker front-end for Python sources",
        epilog="`typefront PATH` is shorthand for `typefront check PATH`.",
    )
    ap.add_argument(
        "--log-level",
        default=os.getenv(LOG_LEVEL_ENV, "warning"),
        choices=["debug", "info", "warning", "error", "critical"],
        help=f"Logging level (default: ${LOG_LEVEL_ENV} or warning)",
    )
    sub = ap.add_subparsers(dest="command", metavar="{check,parse}")

    check = sub.add_parser("check", help="Check a Python file for type errors")
    check.add_argument("path", type=Path, help="Path to check")

    parse = sub.add_parser("parse", help="Parse a Python file and dump its syntax tree")
    parse.add_argument("path", type=Path, help="Path to parse")
    parse.add_argument(
        "--mode",
        default=ParseMode.MODULE.value,
        choices=[m.value for m in ParseMode],
        help="Grammar entry mode (default: module)",
    )
    parse.add_argument(
        "--format",
        dest="output",
        default="json",
        choices=["json", "ast"],
        help="json: lowered syntax tree; ast: CPython's tree",
    )
    return ap


def parse_args(argv: list[str]) -> CliConfig | None:
    """Build a CliConfig from ``argv``; None when no command or path was given."""
    argv = list(argv)
    # A bare path means `check PATH`.
    first = _first_positional(argv)
    if first is not None and argv[first] not in COMMANDS:
        argv.insert(first, "check")

    args = build_parser().parse_args(argv)
    if args.command is None:
        return None
    return CliConfig(
        command=args.command,
        path=args.path,
        mode=ParseMode(getattr(args, "mode", ParseMode.MODULE.value)),
        output=getattr(args, "output", "json"),
        log_level=args.log_level,
    )


def _first_positional(argv: list[str]) -> int | None:
    i = 0
    while i < len(argv):
        if argv[i] == "--log-level":
            i += 2
        elif argv[i].startswith("-"):
            i += 1
        else:
            return i
    return None


def setup_logging(log_level: str) -> None:
    """Send log records to stderr; stdout carries command output only."""
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level.upper())
    root_logger.handlers.clear()
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    root_logger.addHandler(handler)


def dispatch(config: CliConfig) -> int:
    logger.debug("dispatching %s", config)
    try:
        if config.command == "parse":
            return _run_parse(config)
        return _run_check(config)
    except Diagnostic as e:
        print(str(e), file=sys.stderr)
        return 1


def _run_parse(config: CliConfig) -> int:
    stmts = parse_file(config.path, mode=config.mode)
    print(f"Parsed {len(stmts)} top-level statement(s) from {config.path}")
    if config.output == "ast":
        for st in stmts:
            print(ast.dump(st, include_attributes=True, indent=2))
    else:
        lowered = lower_statements(stmts, file=config.path)
        print(dump_json(lowered))
    return 0


def _run_check(config: CliConfig) -> int:
    print(f"Checking: {config.path}")
    stmts = lower_statements(parse_file(config.path), file=config.path)
    diagnostics = check_statements(stmts)
    for d in diagnostics:
        print(str(d), file=sys.stderr)
    if not diagnostics:
        print("No type errors found.")
    return 1 if diagnostics else 0


def main(argv: list[str] | None = None) -> int:
    config = parse_args(sys.argv[1:] if argv is None else argv)
    if config is None:
        build_parser().print_usage(sys.stderr)
        return 1
    setup_logging(config.log_level)
    return dispatch(config)


if __name__ == "__main__":
    raise SystemExit(main())
