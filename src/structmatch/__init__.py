"""structmatch backtracking pattern matching over nested sequences."""

from collections.abc import Sequence

from .engine.combinators import Array, Choice, Letrec, Reference
from .engine.compiler import REST, Form, choose, compile_pattern, let
from .engine.driver import MatchResult, match, run
from .engine.environment import MISSING, Environment
from .engine.matchers import Constant, Element, Matcher, Rest, Segment, SegmentExact
from .engine.models import (
    Failure,
    FailureReason,
    MatcherKind,
    MatchOptions,
    PatternError,
    flatten,
    is_failure,
)


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point mirroring :func:`structmatch.cli.main`."""

    from .cli import main as cli_main

    return cli_main(argv)


__all__ = [
    "main",
    "match",
    "run",
    "compile_pattern",
    "let",
    "choose",
    "REST",
    "Form",
    "MatchResult",
    "MatchOptions",
    "Environment",
    "MISSING",
    "Matcher",
    "Constant",
    "Element",
    "Segment",
    "SegmentExact",
    "Rest",
    "Array",
    "Choice",
    "Reference",
    "Letrec",
    "Failure",
    "FailureReason",
    "MatcherKind",
    "PatternError",
    "flatten",
    "is_failure",
]
