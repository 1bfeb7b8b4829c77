"""Tests for JSON pattern notation and input loading."""

import json
from pathlib import Path

import pytest

from structmatch import io
from structmatch.engine.combinators import Reference
from structmatch.engine.compiler import REST, Form
from structmatch.engine.driver import MatchResult, match
from structmatch.engine.matchers import Element, Segment, SegmentExact
from structmatch.engine.models import PatternError, is_failure


@pytest.mark.parametrize(
    "node,expected",
    [
        ("...", REST),
        ({"var": "x"}, Element("x")),
        ({"segment": "s"}, Segment("s")),
        ({"segment": "s", "exact": True}, SegmentExact("s")),
        ({"ref": "a"}, Reference("a")),
        ({"const": "..."}, "..."),
        ({"const": {"var": "x"}}, {"var": "x"}),
        ({"choose": ["a", "b"]}, [Form.CHOOSE, "a", "b"]),
        (["a", 1, None], ["a", 1, None]),
        (3.5, 3.5),
    ],
)
def test_pattern_from_json(node: object, expected: object) -> None:
    assert io.pattern_from_json(node) == expected


def test_where_selects_registered_restriction() -> None:
    element = io.pattern_from_json({"var": "n", "where": "integer"})
    assert element.restriction is io.RESTRICTIONS["integer"]
    assert isinstance(match(element, 3), MatchResult)
    assert is_failure(match(element, True))
    assert is_failure(match(element, "3"))


@pytest.mark.parametrize(
    "node",
    [
        {"var": "x", "segment": "y"},
        {"unknown": 1},
        {"var": "x", "extra": 1},
        {"var": ""},
        {"var": "x", "where": "prime"},
        {"choose": "a"},
        {"letrec": {"a": "x"}},
    ],
)
def test_bad_notation(node: dict) -> None:
    with pytest.raises(PatternError):
        io.pattern_from_json(node)


def test_letrec_notation_end_to_end() -> None:
    literal = io.pattern_from_json(
        {
            "letrec": {
                "a": {"choose": [[], ["1", {"ref": "b"}]]},
                "b": {"choose": [[], ["2", {"ref": "a"}]]},
            },
            "body": {"ref": "a"},
        }
    )
    assert literal[0] is Form.LETREC
    assert isinstance(match(literal, ["1", ["2", ["1", []]]]), MatchResult)


def test_read_inputs_json_and_jsonl(tmp_path: Path) -> None:
    single = tmp_path / "one.json"
    single.write_text(json.dumps(["x", [1, 2]]))
    assert io.read_inputs(str(single)) == [["x", [1, 2]]]
    many = tmp_path / "many.jsonl"
    many.write_text('["a"]\n\n["b", 1]\n')
    assert io.read_inputs(str(many)) == [["a"], ["b", 1]]


def test_load_pattern(tmp_path: Path) -> None:
    path = tmp_path / "pattern.json"
    path.write_text(json.dumps(["start", "...", {"var": "last"}]))
    assert io.load_pattern(str(path)) == ["start", REST, Element("last")]


def test_write_json_and_text(tmp_path: Path, capfd: pytest.CaptureFixture[str]) -> None:
    target = tmp_path / "out.json"
    io.write_json({"b": 1, "a": [2]}, str(target))
    assert json.loads(target.read_text()) == {"a": [2], "b": 1}
    io.write_text("hello", "-")
    assert capfd.readouterr().out == "hello\n"
