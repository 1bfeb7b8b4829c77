"""Explanation helpers for match outcomes."""
from __future__ import annotations

from typing import Any, Union

from .driver import MatchResult
from .models import Failure, flatten


def _jsonable(value: Any) -> Any:
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    if isinstance(value, dict):
        return {str(key): _jsonable(item) for key, item in value.items()}
    return repr(value)


def _entry(failure: Failure) -> dict[str, object]:
    return {
        "matcher": failure.matcher.value,
        "reason": failure.reason.value,
        "offset": failure.offset,
        "fragment": _jsonable(failure.fragment),
    }


def explain_dict(outcome: Union[MatchResult, Failure]) -> dict[str, object]:
    if isinstance(outcome, MatchResult):
        return {
            "matched": True,
            "consumed": outcome.consumed,
            "bindings": _jsonable(outcome.bindings),
        }
    chain = flatten(outcome)
    return {
        "matched": False,
        "chain": [_entry(failure) for failure in chain],
        "root": _entry(chain[-1]),
    }


def explain_text(outcome: Union[MatchResult, Failure]) -> str:
    if isinstance(outcome, MatchResult):
        return summarize_result(outcome)
    chain = flatten(outcome)
    root = chain[-1]
    lines = [
        f"NO MATCH: {root.reason.value} in {root.matcher.value} at offset {root.offset}",
        "CHAIN:",
    ]
    for depth, failure in enumerate(chain):
        lines.append(f"  {'  ' * depth}{failure.describe()}")
    return "\n".join(lines)


def summarize_result(result: MatchResult) -> str:
    bindings = result.bindings
    lines = [f"MATCH: consumed {result.consumed}, {len(bindings)} binding(s)"]
    for name, value in bindings.items():
        lines.append(f"  {name} = {value!r}")
    return "\n".join(lines)
