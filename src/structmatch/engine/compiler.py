"""Compile plain pattern literals into matcher trees.

A pattern literal is one of:

* an already built :class:`~structmatch.engine.matchers.Matcher`, used as is;
* ``...`` (:data:`REST`), which skips items until the next anchor matches;
* a list or tuple, matched against one list-shaped input item;
* a list starting with :attr:`Form.LETREC`, see :func:`let`;
* a list starting with :attr:`Form.CHOOSE`, see :func:`choose`;
* any other value, matched by equality.
"""
from __future__ import annotations

import enum
import logging
from collections.abc import Mapping, Sequence
from typing import Any, Callable

from .combinators import Array, Choice, Letrec
from .matchers import Constant, Matcher, Rest, is_list_shaped
from .models import PatternError

logger = logging.getLogger(__name__)

REST = Ellipsis


class Form(enum.Enum):
    """Leading tags reserved for special list forms."""

    LETREC = "letrec"
    CHOOSE = "choose"

    def __repr__(self) -> str:
        return f"Form.{self.name}"


class LiteralKind(enum.Enum):
    SCALAR = "scalar"
    MATCHER = "matcher"
    LIST = "list"
    REST = "rest"
    LETREC = "letrec"
    CHOOSE = "choose"


def let(rules: Mapping[str, Any], body: Any) -> list[Any]:
    """Build a letrec literal: ``rules`` maps names to pattern literals."""
    return [Form.LETREC, *rules.items(), body]


def choose(*alternatives: Any) -> list[Any]:
    return [Form.CHOOSE, *alternatives]


def classify(literal: Any) -> LiteralKind:
    if isinstance(literal, Matcher):
        return LiteralKind.MATCHER
    if literal is REST:
        return LiteralKind.REST
    if is_list_shaped(literal):
        if literal and literal[0] is Form.LETREC:
            return LiteralKind.LETREC
        if literal and literal[0] is Form.CHOOSE:
            return LiteralKind.CHOOSE
        return LiteralKind.LIST
    return LiteralKind.SCALAR


def _compile_scalar(literal: Any) -> Matcher:
    return Constant(literal)


def _compile_matcher(literal: Matcher) -> Matcher:
    return literal


def _compile_rest(literal: Any) -> Matcher:
    return Rest()


def _compile_list(literal: Sequence[Any]) -> Matcher:
    return Array(tuple(_compile(item) for item in literal))


def _compile_choose(literal: Sequence[Any]) -> Matcher:
    return Choice(tuple(_compile(item) for item in literal[1:]))


def _rule_pairs(literal: Sequence[Any]) -> list[tuple[str, Any]]:
    middle = list(literal[1:-1])
    if len(middle) == 1 and isinstance(middle[0], Mapping):
        return list(middle[0].items())
    pairs: list[tuple[str, Any]] = []
    for entry in middle:
        if not is_list_shaped(entry) or len(entry) != 2 or not isinstance(entry[0], str):
            raise PatternError(f"letrec rule must be a (name, pattern) pair, got {entry!r}")
        pairs.append((entry[0], entry[1]))
    return pairs


def _compile_letrec(literal: Sequence[Any]) -> Matcher:
    if len(literal) < 2:
        raise PatternError("letrec form needs a body pattern")
    pairs = _rule_pairs(literal)
    names = [name for name, _ in pairs]
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        raise PatternError(f"letrec rules defined more than once: {', '.join(duplicates)}")
    # Rules refer to each other by name, so every rule can be compiled before
    # any of them is bound.
    rules = tuple((name, _compile(pattern)) for name, pattern in pairs)
    return Letrec(rules, _compile(literal[-1]))


_COMPILERS: dict[LiteralKind, Callable[[Any], Matcher]] = {
    LiteralKind.SCALAR: _compile_scalar,
    LiteralKind.MATCHER: _compile_matcher,
    LiteralKind.LIST: _compile_list,
    LiteralKind.REST: _compile_rest,
    LiteralKind.LETREC: _compile_letrec,
    LiteralKind.CHOOSE: _compile_choose,
}


def _compile(literal: Any) -> Matcher:
    return _COMPILERS[classify(literal)](literal)


def compile_pattern(literal: Any) -> Matcher:
    """Translate a pattern literal into a reusable matcher."""
    matcher = _compile(literal)
    logger.debug("compiled %s pattern into %s", classify(literal).value, type(matcher).__name__)
    return matcher
