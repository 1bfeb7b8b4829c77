"""Tests for the top-level driver."""

import copy

import pytest

from structmatch import (
    Element,
    FailureReason,
    MatcherKind,
    MatchOptions,
    MatchResult,
    Reference,
    Segment,
    choose,
    compile_pattern,
    flatten,
    is_failure,
    let,
    match,
    run,
)


@pytest.mark.parametrize(
    "literal",
    ["a", 0, [], ["a", "b", "c"], [["a", "b"], "c"], [1, [2, [3, []]], (4, 5)]],
)
def test_scalar_only_literal_matches_itself(literal: object) -> None:
    result = match(literal, copy.deepcopy(literal))
    assert isinstance(result, MatchResult)
    assert result.consumed == 1
    assert result.bindings == {}


def test_constant_sequence_mismatch() -> None:
    result = match([["a", "b"]], ["a", "c"])
    assert is_failure(result)


def test_builder_style_patterns() -> None:
    assert match([[Element("x"), "b"]], [["value", "b"]]).bindings == {"x": "value"}
    nested = match([["a", Segment("seg")], "c"], [["a", "b", "d"], "c"])
    assert nested["seg"] == ["b", "d"]


def test_scenario_segment_between_constants() -> None:
    result = match(["x", Segment("s"), "y"], ["x", "hello", "world", "y"])
    assert result.consumed == 1
    assert result.bindings == {"s": ["hello", "world"]}


def test_scenario_rest_between_anchors() -> None:
    result = match(["start", ..., "end"], ["start", 1, 2, 3, "end"])
    assert isinstance(result, MatchResult)
    assert result.bindings == {}


def test_scenario_mismatch_diagnostic() -> None:
    result = match(["x", Segment("s"), "y"], ["x", "hello", "oops", "z"])
    deepest = flatten(result)[-1]
    assert deepest.reason is FailureReason.UNEXPECTED_VALUE
    assert deepest.offset == 3


def test_run_returns_continuation_payload() -> None:
    matcher = compile_pattern([Element("x"), Element("y")])
    total = run(matcher, [1, 2], lambda env, consumed: env.apply(lambda x, y: x + y))
    assert total == 3


@pytest.mark.parametrize("value", [0, [], "", None, False])
def test_falsy_payload_is_success(value: object) -> None:
    payload = run(compile_pattern(Element("x")), value, lambda env, consumed: env.get("x"))
    assert payload == value
    assert not is_failure(payload)


def test_repeated_variable_must_agree() -> None:
    assert isinstance(match([Element("x"), Element("x")], ["a", "a"]), MatchResult)
    conflict = match([Element("x"), Element("x")], ["a", "b"])
    assert conflict.root.reason is FailureReason.BINDING_CONFLICT


def test_bindings_keep_insertion_order() -> None:
    result = match([Segment("b"), Element("a")], [1, 2])
    assert list(result.bindings) == ["b", "a"]
    assert result.apply(lambda b, a: (b, a)) == ([1], 2)


def test_apply_destructures_bindings() -> None:
    result = match([Element("first"), Element("second")], ["Hello, ", "World!"])
    assert result.apply(lambda *parts: "".join(parts)) == "Hello, World!"


def test_run_never_raises_on_missing_reference() -> None:
    result = match(["a", Reference("undefined")], ["a", "b"])
    assert result.root.reason is FailureReason.REFERENCE_NOT_FOUND


def test_interpreter_recursion_limit_becomes_failure() -> None:
    grammar = let({"e": choose(Reference("e"), "n")}, Reference("e"))
    result = match(grammar, "n", MatchOptions(max_depth=10**9))
    assert is_failure(result)
    assert result.reason is FailureReason.DEPTH_EXCEEDED
    assert result.matcher is MatcherKind.LETREC


ALTERNATING = let(
    {
        "a": choose([], ["1", Reference("b")]),
        "b": choose([], ["2", Reference("a")]),
    },
    Reference("a"),
)


def _alternating_chain(levels: int) -> list:
    node: list = []
    for level in reversed(range(levels)):
        node = ["1" if level % 2 == 0 else "2", node]
    return node


def test_default_depth_ceiling_is_reachable() -> None:
    ceiling = MatchOptions().max_depth
    result = match(ALTERNATING, _alternating_chain(ceiling - 1))
    assert isinstance(result, MatchResult)


def test_default_depth_ceiling_reports_reference() -> None:
    ceiling = MatchOptions().max_depth
    result = match(ALTERNATING, _alternating_chain(ceiling))
    assert is_failure(result)
    assert result.matcher is not MatcherKind.LETREC
    assert any(
        entry.matcher is MatcherKind.REFERENCE and entry.reason is FailureReason.DEPTH_EXCEEDED
        for entry in flatten(result)
    )
