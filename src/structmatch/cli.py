"""Command line interface for the structmatch pattern engine."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence

from . import io
from .engine.compiler import compile_pattern
from .engine.driver import match
from .engine.explain import explain_dict, explain_text
from .engine.models import MatchOptions, PatternError, is_failure


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="structmatch", description="Structural pattern matching CLI")
    parser.add_argument("-V", "--version", action="version", version="structmatch 0.1")
    parser.add_argument("-v", "--verbose", action="store_true", default=False)
    sub = parser.add_subparsers(dest="command", required=True)

    match_cmd = sub.add_parser("match", help="match a pattern against JSON inputs")
    match_cmd.add_argument("--pattern", required=True, help="pattern file in JSON notation")
    match_cmd.add_argument("--data", required=True, help=".json document or .jsonl inputs")
    match_cmd.add_argument("--format", choices=["text", "json"], default="text")
    match_cmd.add_argument(
        "--max-depth",
        type=_positive_int,
        default=MatchOptions().max_depth,
        help="rule reference nesting ceiling (default: %(default)s)",
    )
    match_cmd.add_argument("--out", default="-")

    dump = sub.add_parser("dump", help="print the compiled matcher tree")
    dump.add_argument("--pattern", required=True)
    return parser


def _command_match(args: argparse.Namespace) -> int:
    matcher = compile_pattern(io.load_pattern(args.pattern))
    inputs = io.read_inputs(args.data)
    options = MatchOptions(max_depth=args.max_depth)
    outcomes = [match(matcher, item, options) for item in inputs]
    if args.format == "json":
        io.write_json({"results": [explain_dict(outcome) for outcome in outcomes]}, args.out)
    else:
        blocks = []
        for index, outcome in enumerate(outcomes):
            text = explain_text(outcome)
            blocks.append(f"[{index}] {text}" if len(outcomes) > 1 else text)
        io.write_text("\n".join(blocks) + "\n", args.out)
    return 1 if any(is_failure(outcome) for outcome in outcomes) else 0


def _command_dump(args: argparse.Namespace) -> int:
    matcher = compile_pattern(io.load_pattern(args.pattern))
    io.write_text(repr(matcher) + "\n", "-")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        if args.command == "match":
            return _command_match(args)
        if args.command == "dump":
            return _command_dump(args)
    except (PatternError, json.JSONDecodeError, OSError) as exc:
        print(f"structmatch: {exc}", file=sys.stderr)
        return 2
    parser.error(f"unknown command {args.command}")
    return 2


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
