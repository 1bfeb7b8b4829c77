"""Combinators that assemble primitive matchers into larger patterns."""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, ClassVar

from .environment import Environment
from .matchers import Continuation, Matcher, is_list_shaped
from .models import Failure, FailureReason, MatcherKind, best_failure, is_failure


@dataclass(frozen=True)
class Array(Matcher):
    """Consume one list-shaped item and match ``elements`` against its contents.

    Each element runs on what the previous one left over; the last element's
    continuation checks that the inner list is used up and then hands control
    to the outer continuation with one item consumed.
    """

    elements: tuple[Matcher, ...] = ()

    kind: ClassVar[MatcherKind] = MatcherKind.ARRAY

    def __call__(self, data: Sequence[Any], env: Environment, succeed: Continuation) -> Any:
        if not data:
            return self.fail(FailureReason.UNEXPECTED_END, data)
        items = data[0]
        if not is_list_shaped(items):
            return self.fail(FailureReason.UNEXPECTED_VALUE, items)

        # Failures produced by the outer continuation belong to the caller.
        escaped: dict[int, Failure] = {}
        # Where in ``items`` each failure was first seen, keyed by identity.
        positions: dict[int, tuple[Failure, int]] = {}

        def step(index: int, offset: int, current: Environment) -> Any:
            if index == len(self.elements):
                if offset < len(items):
                    leftover = Failure(
                        self.kind, FailureReason.UNEXPECTED_INPUT, items, offset, located=True
                    )
                    positions[id(leftover)] = (leftover, offset)
                    return leftover
                result = succeed(current, 1)
                if is_failure(result):
                    escaped[id(result)] = result
                return result
            result = self.elements[index](
                items[offset:],
                current,
                lambda next_env, consumed: step(index + 1, offset + consumed, next_env),
            )
            if not is_failure(result) or id(result) in escaped:
                return result
            failed = result.relocate(offset)
            if id(failed) not in positions:
                # A nested array has already placed its failure in its own list.
                positions[id(failed)] = (failed, offset if result.located else failed.offset)
            return failed

        result = step(0, 0, env)
        if not is_failure(result) or id(result) in escaped:
            return result
        if result.matcher is self.kind and result.fragment is items:
            return result
        _, position = positions.get(id(result), (result, result.offset))
        return Failure(
            self.kind, FailureReason.UNEXPECTED_INPUT, items, position, result, located=True
        )


@dataclass(frozen=True)
class Choice(Matcher):
    """Ordered alternation: the first alternative whose whole continuation succeeds wins."""

    alternatives: tuple[Matcher, ...] = ()

    kind: ClassVar[MatcherKind] = MatcherKind.CHOICE

    def __call__(self, data: Sequence[Any], env: Environment, succeed: Continuation) -> Any:
        failures: list[Failure] = []
        for alternative in self.alternatives:
            result = alternative(data, env, succeed)
            if not is_failure(result):
                return result
            failures.append(result)
        return self.fail(FailureReason.NO_ALTERNATIVE, data, 0, best_failure(failures))


@dataclass(frozen=True)
class Reference(Matcher):
    """Run the rule bound to ``name`` in the environment at match time."""

    name: str

    kind: ClassVar[MatcherKind] = MatcherKind.REFERENCE

    def __call__(self, data: Sequence[Any], env: Environment, succeed: Continuation) -> Any:
        target = env.get(self.name)
        if not isinstance(target, Matcher):
            return self.fail(FailureReason.REFERENCE_NOT_FOUND, self.name)
        if env.exhausted:
            return self.fail(FailureReason.DEPTH_EXCEEDED, self.name, 0)
        depth = env.depth
        return target(
            data,
            env.descend(),
            lambda next_env, consumed: succeed(next_env.at_depth(depth), consumed),
        )


@dataclass(frozen=True)
class Letrec(Matcher):
    """Install mutually recursive rules, then match ``body`` with them in scope.

    Rules are compiled ahead of time but only looked up by name when a
    :class:`Reference` runs, so a rule may refer to itself or to rules
    defined after it.
    """

    rules: tuple[tuple[str, Matcher], ...]
    body: Matcher

    kind: ClassVar[MatcherKind] = MatcherKind.LETREC

    def __call__(self, data: Sequence[Any], env: Environment, succeed: Continuation) -> Any:
        scope = env.define_all(dict(self.rules))
        return self.body(
            data,
            scope,
            lambda next_env, consumed: succeed(next_env.scoped_to(env), consumed),
        )

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self.rules]
