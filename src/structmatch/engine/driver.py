"""Entry points that run a matcher over one input."""
from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .compiler import compile_pattern
from .environment import Environment
from .matchers import Continuation, Matcher
from .models import Failure, FailureReason, MatchOptions, is_failure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchResult:
    """Outcome of a successful :func:`match`."""

    environment: Environment
    consumed: int

    @property
    def bindings(self) -> dict[str, Any]:
        return self.environment.bindings()

    def apply(self, fn: Callable[..., Any]) -> Any:
        return self.environment.apply(fn)

    def __getitem__(self, name: str) -> Any:
        return self.environment.bindings()[name]


def _collect(env: Environment, consumed: int) -> MatchResult:
    return MatchResult(env, consumed)


def run(
    matcher: Matcher,
    data: Any,
    succeed: Continuation,
    options: MatchOptions | None = None,
) -> Any:
    """Match ``data`` as a single item and return the continuation's payload or a Failure."""
    options = options or MatchOptions()
    env = Environment.empty(max_depth=options.max_depth)
    try:
        result = matcher([data], env, succeed)
    except RecursionError:
        logger.debug("match abandoned: interpreter recursion limit reached in %r", matcher)
        return Failure(matcher.kind, FailureReason.DEPTH_EXCEEDED, data, 0)
    if is_failure(result):
        logger.debug("match failed: %s", result.describe())
    else:
        logger.debug("match succeeded with %s", type(result).__name__)
    return result


def match(pattern: Any, data: Any, options: MatchOptions | None = None) -> MatchResult | Failure:
    """Compile ``pattern`` if needed and match it against ``data``.

    Returns a :class:`MatchResult` holding the final environment, or the
    :class:`Failure` that stopped the match.
    """
    matcher = pattern if isinstance(pattern, Matcher) else compile_pattern(pattern)
    return run(matcher, data, _collect, options)
