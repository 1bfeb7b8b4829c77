"""Primitive matchers.

A matcher is called as ``matcher(data, env, succeed)`` where ``data`` is the
remaining input, ``env`` the current :class:`Environment` and ``succeed`` the
continuation ``succeed(env, consumed)``. Whatever the continuation returns is
passed back unchanged on success; otherwise a :class:`Failure` is returned.
"""
from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, ClassVar

from .environment import MISSING, Environment
from .models import Failure, FailureReason, MatcherKind, best_failure, is_failure

Restriction = Callable[[Any], bool]
Continuation = Callable[[Environment, int], Any]


def is_list_shaped(value: object) -> bool:
    return isinstance(value, (list, tuple))


class Matcher:
    """Base class for every compiled pattern node."""

    kind: ClassVar[MatcherKind]

    def __call__(self, data: Sequence[Any], env: Environment, succeed: Continuation) -> Any:
        raise NotImplementedError

    def fail(
        self,
        reason: FailureReason,
        fragment: Any = None,
        offset: int = 0,
        cause: Failure | None = None,
    ) -> Failure:
        return Failure(self.kind, reason, fragment, offset, cause)


def _allows(restriction: Restriction | None, value: Any) -> bool:
    return restriction is None or bool(restriction(value))


@dataclass(frozen=True)
class Constant(Matcher):
    value: Any

    kind: ClassVar[MatcherKind] = MatcherKind.CONSTANT

    def __call__(self, data: Sequence[Any], env: Environment, succeed: Continuation) -> Any:
        if not data:
            return self.fail(FailureReason.UNEXPECTED_END, data)
        if data[0] == self.value:
            return succeed(env, 1)
        return self.fail(FailureReason.UNEXPECTED_VALUE, (data[0], self.value))


@dataclass(frozen=True)
class Element(Matcher):
    """Match one item and bind it to ``name``."""

    name: str
    restriction: Restriction | None = None

    kind: ClassVar[MatcherKind] = MatcherKind.ELEMENT

    def __call__(self, data: Sequence[Any], env: Environment, succeed: Continuation) -> Any:
        if not data:
            return self.fail(FailureReason.UNEXPECTED_END, data)
        item = data[0]
        if not _allows(self.restriction, item):
            return self.fail(FailureReason.RESTRICTION_NOT_SATISFIED, item)
        bound = env.get(self.name)
        if bound is MISSING:
            return succeed(env.extend(self.name, item), 1)
        if bound == item:
            return succeed(env, 1)
        return self.fail(FailureReason.BINDING_CONFLICT, (item, bound))


@dataclass(frozen=True)
class Segment(Matcher):
    """Match a run of one or more items and bind them to ``name`` as a list.

    Unbound segments grow one item at a time: the shortest run that lets the
    continuation succeed wins. A segment that is already bound must see the
    same items again at the head of the input.
    """

    name: str
    restriction: Restriction | None = None

    kind: ClassVar[MatcherKind] = MatcherKind.SEGMENT

    def __call__(self, data: Sequence[Any], env: Environment, succeed: Continuation) -> Any:
        if not data:
            return self.fail(FailureReason.UNEXPECTED_END, data)
        bound = env.get(self.name)
        if bound is MISSING:
            return self._grow(data, env, succeed)
        return self._replay(bound, data, env, succeed)

    def _grow(self, data: Sequence[Any], env: Environment, succeed: Continuation) -> Any:
        best: Failure | None = None
        for index, item in enumerate(data):
            if not _allows(self.restriction, item):
                return self.fail(FailureReason.RESTRICTION_NOT_SATISFIED, item, index, best)
            result = succeed(env.extend(self.name, list(data[: index + 1])), index + 1)
            if not is_failure(result):
                return result
            best = best_failure([best, result])
        return self.fail(FailureReason.INDEX_OUT_OF_RANGE, data, len(data), best)

    def _replay(self, bound: Any, data: Sequence[Any], env: Environment, succeed: Continuation) -> Any:
        # Segments always cover at least one item, so an empty binding never replays.
        if not is_list_shaped(bound) or not bound:
            return self.fail(FailureReason.BINDING_CONFLICT, (data[0], bound))
        for index, expected in enumerate(bound):
            if index >= len(data):
                return self.fail(FailureReason.UNEXPECTED_END, data, index)
            if data[index] != expected:
                return self.fail(FailureReason.BINDING_CONFLICT, (data[index], expected), index)
            if not _allows(self.restriction, data[index]):
                return self.fail(FailureReason.RESTRICTION_NOT_SATISFIED, data[index], index)
        return succeed(env, len(bound))


@dataclass(frozen=True)
class SegmentExact(Segment):
    """Segment that must own everything that is left of the input."""

    def __call__(self, data: Sequence[Any], env: Environment, succeed: Continuation) -> Any:
        total = len(data)

        def whole(new_env: Environment, consumed: int) -> Any:
            if consumed == total:
                return succeed(new_env, consumed)
            return self.fail(FailureReason.KEEP_TRYING, data, consumed)

        return super().__call__(data, env, whole)


@dataclass(frozen=True)
class Rest(Matcher):
    """Unbound filler: skip zero or more items until the continuation accepts."""

    kind: ClassVar[MatcherKind] = MatcherKind.REST

    def __call__(self, data: Sequence[Any], env: Environment, succeed: Continuation) -> Any:
        best: Failure | None = None
        for consumed in range(len(data) + 1):
            result = succeed(env, consumed)
            if not is_failure(result):
                return result
            best = best_failure([best, result])
        return self.fail(FailureReason.INDEX_OUT_OF_RANGE, data, len(data), best)
