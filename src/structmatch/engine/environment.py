"""Persistent binding environment threaded through a match attempt."""
from __future__ import annotations

import sys
from collections.abc import Callable, Iterator
from typing import Any


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()

# Interpreter frames one rule reference costs in a typical grammar, counting
# the calls on the way down and the chained continuations on the way back.
FRAMES_PER_REFERENCE = 20


def default_max_depth() -> int:
    """Reference nesting ceiling that fits inside the interpreter's recursion limit."""
    return max(1, sys.getrecursionlimit() // FRAMES_PER_REFERENCE)


class Environment:
    """Append-only mapping of pattern variables to matched values.

    Every operation that adds a binding returns a new environment; the
    receiver is never modified, so alternatives explored while backtracking
    cannot see each other's bindings.

    Grammar rules installed by a letrec block live beside the data bindings:
    :meth:`get` sees both, while :meth:`apply` and :meth:`bindings` only
    report data.
    """

    __slots__ = ("_bindings", "_rules", "depth", "max_depth")

    def __init__(
        self,
        bindings: dict[str, Any] | None = None,
        rules: dict[str, Any] | None = None,
        depth: int = 0,
        max_depth: int | None = None,
    ) -> None:
        self._bindings: dict[str, Any] = dict(bindings) if bindings else {}
        self._rules: dict[str, Any] = dict(rules) if rules else {}
        self.depth = depth
        self.max_depth = default_max_depth() if max_depth is None else max_depth

    @classmethod
    def empty(cls, max_depth: int | None = None) -> Environment:
        return cls(max_depth=max_depth)

    def _derive(
        self,
        bindings: dict[str, Any] | None = None,
        rules: dict[str, Any] | None = None,
        depth: int | None = None,
    ) -> Environment:
        env = Environment.__new__(Environment)
        env._bindings = self._bindings if bindings is None else bindings
        env._rules = self._rules if rules is None else rules
        env.depth = self.depth if depth is None else depth
        env.max_depth = self.max_depth
        return env

    def get(self, name: str) -> Any:
        """Return the value bound to ``name`` or :data:`MISSING`."""
        if name in self._bindings:
            return self._bindings[name]
        return self._rules.get(name, MISSING)

    def extend(self, name: str, value: Any) -> Environment:
        bindings = dict(self._bindings)
        bindings[name] = value
        return self._derive(bindings=bindings)

    def define(self, name: str, matcher: Any) -> Environment:
        return self.define_all({name: matcher})

    def define_all(self, rules: dict[str, Any]) -> Environment:
        merged = dict(self._rules)
        merged.update(rules)
        return self._derive(rules=merged)

    def scoped_to(self, outer: Environment) -> Environment:
        """Keep this environment's data bindings but restore the rules of ``outer``."""
        if self._rules is outer._rules:
            return self
        return self._derive(rules=outer._rules)

    def descend(self) -> Environment:
        return self._derive(depth=self.depth + 1)

    def at_depth(self, depth: int) -> Environment:
        if depth == self.depth:
            return self
        return self._derive(depth=depth)

    @property
    def exhausted(self) -> bool:
        return self.depth >= self.max_depth

    def apply(self, fn: Callable[..., Any]) -> Any:
        """Call ``fn`` with the bound values as positional arguments, in binding order."""
        return fn(*self._bindings.values())

    def bindings(self) -> dict[str, Any]:
        return dict(self._bindings)

    def __contains__(self, name: object) -> bool:
        return name in self._bindings

    def __len__(self) -> int:
        return len(self._bindings)

    def __iter__(self) -> Iterator[str]:
        return iter(self._bindings)

    def __repr__(self) -> str:
        return f"Environment({self._bindings!r})"
