"""hackvm command line entry point."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Sequence

from tabulate import tabulate

from .config import DEFAULT_ENTRY_FUNCTION, DEFAULT_STACK_BASE, TranslatorConfig, default_log_level
from .errors import TranslationError
from .translator import TranslationResult, translate_path

LOG = logging.getLogger("hackvm.cli")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Translate VM code into Hack assembly")
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="A .vm file or a directory of .vm files (default: current directory)",
    )
    parser.add_argument("-o", "--output", type=Path, help="Output .asm file (default: beside the input)")
    parser.add_argument(
        "--entry",
        default=DEFAULT_ENTRY_FUNCTION,
        help=f"Function called by the bootstrap code (default {DEFAULT_ENTRY_FUNCTION})",
    )
    parser.add_argument(
        "--stack-base",
        type=int,
        default=DEFAULT_STACK_BASE,
        help=f"Initial stack pointer (default {DEFAULT_STACK_BASE})",
    )
    parser.add_argument("--no-comments", action="store_true", help="Do not annotate output with VM commands")
    parser.add_argument("--stats", action="store_true", help="Print per-unit command and instruction counts")
    parser.add_argument(
        "--log-level",
        default=default_log_level(),
        help="Logging level (default from HACKVM_LOG, else WARNING)",
    )
    return parser


def format_stats(result: TranslationResult) -> str:
    rows: List[List[object]] = [
        [report.unit, report.commands, report.instructions] for report in result.units
    ]
    rows.append(["(total)", sum(r.commands for r in result.units), result.instructions])
    return tabulate(rows, headers=["unit", "commands", "instructions"], tablefmt="github")


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)
    if not 0 <= args.stack_base <= 0x7FFF:
        parser.error("--stack-base must be within 0..32767")
    config = TranslatorConfig(
        entry_function=args.entry,
        stack_base=args.stack_base,
        annotate=not args.no_comments,
    )
    try:
        out_path, result = translate_path(args.path, args.output, config)
    except TranslationError as exc:
        LOG.debug("translation failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    if args.stats:
        print(format_stats(result))
    print(f"Wrote {out_path}")
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
