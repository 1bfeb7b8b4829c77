"""Input/output helpers for the structmatch CLI.

Patterns are stored as JSON using a small notation:

``"..."``
    skip items until the next anchor matches
``{"var": "x", "where": "number"}``
    one item bound to ``x``
``{"segment": "s", "exact": false, "where": "string"}``
    a run of items bound to ``s``
``{"ref": "rule"}``
    a rule of the enclosing letrec
``{"choose": [p1, p2]}``
    ordered alternatives
``{"letrec": {"rule": p}, "body": p}``
    recursive rules plus the pattern to match
``{"const": v}``
    ``v`` matched by equality, even when it looks like notation

Arrays are nested list patterns and other scalars match by equality.
"""
import json
import os
import sys
from collections.abc import Callable
from typing import Any, TextIO

from .engine.combinators import Reference
from .engine.compiler import REST, choose, let
from .engine.matchers import Element, Segment, SegmentExact
from .engine.models import PatternError

REST_TOKEN = "..."

RESTRICTIONS: dict[str, Callable[[Any], bool]] = {
    "string": lambda value: isinstance(value, str),
    "number": lambda value: isinstance(value, (int, float)) and not isinstance(value, bool),
    "integer": lambda value: isinstance(value, int) and not isinstance(value, bool),
    "boolean": lambda value: isinstance(value, bool),
    "list": lambda value: isinstance(value, (list, tuple)),
    "scalar": lambda value: not isinstance(value, (list, tuple, dict)),
}

_NOTATION_KEYS = {
    "var": {"var", "where"},
    "segment": {"segment", "exact", "where"},
    "ref": {"ref"},
    "choose": {"choose"},
    "letrec": {"letrec", "body"},
    "const": {"const"},
}


def _restriction(node: dict[str, Any]) -> Callable[[Any], bool] | None:
    name = node.get("where")
    if name is None:
        return None
    try:
        return RESTRICTIONS[name]
    except KeyError:
        known = ", ".join(sorted(RESTRICTIONS))
        raise PatternError(f"unknown restriction {name!r} (expected one of {known})") from None


def _name(node: dict[str, Any], key: str) -> str:
    value = node[key]
    if not isinstance(value, str) or not value:
        raise PatternError(f"{key!r} needs a non-empty name, got {value!r}")
    return value


def _from_object(node: dict[str, Any]) -> Any:
    tags = [key for key in _NOTATION_KEYS if key in node]
    if len(tags) != 1:
        raise PatternError(f"cannot interpret pattern object with keys {sorted(node)}")
    tag = tags[0]
    extra = set(node) - _NOTATION_KEYS[tag]
    if extra:
        raise PatternError(f"unexpected keys for {tag!r} pattern: {sorted(extra)}")
    if tag == "const":
        return node["const"]
    if tag == "var":
        return Element(_name(node, "var"), _restriction(node))
    if tag == "segment":
        kind = SegmentExact if node.get("exact", False) else Segment
        return kind(_name(node, "segment"), _restriction(node))
    if tag == "ref":
        return Reference(_name(node, "ref"))
    if tag == "choose":
        alternatives = node["choose"]
        if not isinstance(alternatives, list):
            raise PatternError("'choose' expects a list of alternatives")
        return choose(*(pattern_from_json(item) for item in alternatives))
    rules = node["letrec"]
    if not isinstance(rules, dict) or "body" not in node:
        raise PatternError("'letrec' expects an object of rules and a 'body'")
    return let(
        {name: pattern_from_json(rule) for name, rule in rules.items()},
        pattern_from_json(node["body"]),
    )


def pattern_from_json(node: Any) -> Any:
    """Translate decoded JSON into a pattern literal for :func:`compile_pattern`."""
    if isinstance(node, str) and node == REST_TOKEN:
        return REST
    if isinstance(node, list):
        return [pattern_from_json(item) for item in node]
    if isinstance(node, dict):
        return _from_object(node)
    return node


def load_pattern(path: str) -> Any:
    with open(path, encoding="utf-8") as handle:
        return pattern_from_json(json.load(handle))


def _read_jsonl(handle: TextIO) -> list[Any]:
    data: list[Any] = []
    for raw in handle:
        raw = raw.strip()
        if not raw:
            continue
        data.append(json.loads(raw))
    return data


def read_inputs(path: str) -> list[Any]:
    """Read match inputs: one document per ``.json`` file, one per line for ``.jsonl``."""
    _, ext = os.path.splitext(path)
    with open(path, encoding="utf-8") as handle:
        if ext.lower() == ".jsonl":
            return _read_jsonl(handle)
        return [json.load(handle)]


def write_json(obj: Any, path: str) -> None:
    if path == "-":
        json.dump(obj, sys.stdout, indent=2, sort_keys=True)
        sys.stdout.write("\n")
        sys.stdout.flush()
        return
    with open(path, "w", encoding="utf-8") as handle:
        json.dump(obj, handle, indent=2, sort_keys=True)
        handle.write("\n")


def write_text(text: str, path: str) -> None:
    if path == "-":
        sys.stdout.write(text)
        if not text.endswith("\n"):
            sys.stdout.write("\n")
        sys.stdout.flush()
        return
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(text)
