"""Data models shared across the structmatch engine."""
from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from typing import Any

from .environment import default_max_depth


class PatternError(ValueError):
    """Raised when a pattern literal cannot be compiled."""


class MatcherKind(str, enum.Enum):
    CONSTANT = "constant"
    ELEMENT = "element"
    SEGMENT = "segment"
    ARRAY = "array"
    CHOICE = "choice"
    REFERENCE = "reference"
    REST = "rest"
    LETREC = "letrec"


class FailureReason(str, enum.Enum):
    UNEXPECTED_END = "unexpected-end"
    UNEXPECTED_VALUE = "unexpected-value"
    UNEXPECTED_INPUT = "unexpected-input"
    RESTRICTION_NOT_SATISFIED = "restriction-not-satisfied"
    BINDING_CONFLICT = "binding-conflict"
    INDEX_OUT_OF_RANGE = "index-out-of-range"
    KEEP_TRYING = "keep-trying"
    REFERENCE_NOT_FOUND = "reference-not-found"
    NO_ALTERNATIVE = "no-alternative"
    DEPTH_EXCEEDED = "depth-exceeded"


# Reasons that say "ran out" rather than pointing at an offending value.
_UNINFORMATIVE = frozenset({FailureReason.UNEXPECTED_END, FailureReason.KEEP_TRYING})


@dataclass(frozen=True)
class MatchOptions:
    """Options for a single top-level match.

    max_depth: ceiling on nested rule references before the match reports
        ``depth-exceeded`` instead of recursing further. Defaults to a
        value derived from the interpreter recursion limit.
    """
    max_depth: int = field(default_factory=default_max_depth)


@dataclass(frozen=True)
class Failure:
    """Why a matcher gave up, returned in place of a success payload.

    ``offset`` is relative to the input the reporting matcher received until
    an enclosing array relocates it to a position in its own list, after
    which ``located`` is set. ``cause`` records what a sub-matcher reported
    before this level gave up.
    """
    matcher: MatcherKind
    reason: FailureReason
    fragment: Any = None
    offset: int = 0
    cause: Failure | None = None
    located: bool = False

    def relocate(self, base: int) -> Failure:
        if self.located:
            return self
        return replace(self, offset=base + self.offset, located=True)

    def chain(self) -> list[Failure]:
        return flatten(self)

    @property
    def root(self) -> Failure:
        node = self
        while node.cause is not None:
            node = node.cause
        return node

    def describe(self) -> str:
        return f"{self.matcher.value}: {self.reason.value} at {self.offset} ({self.fragment!r})"


def is_failure(value: object) -> bool:
    return isinstance(value, Failure)


def flatten(failure: Failure | None) -> list[Failure]:
    """Return the cause chain outermost-first."""
    chain: list[Failure] = []
    node = failure
    while node is not None:
        chain.append(node)
        node = node.cause
    return chain


def _rank(failure: Failure) -> tuple[bool, int, int]:
    chain = flatten(failure)
    root = chain[-1]
    return (root.reason not in _UNINFORMATIVE, len(chain), root.offset)


def best_failure(candidates: Iterable[Failure | None]) -> Failure | None:
    """Pick the failure that got furthest; earlier candidates win ties."""
    best: Failure | None = None
    best_rank: tuple[bool, int, int] | None = None
    for candidate in candidates:
        if candidate is None:
            continue
        rank = _rank(candidate)
        if best_rank is None or rank > best_rank:
            best, best_rank = candidate, rank
    return best
