#!/usr/bin/env python3
"""
Quick Start Examples: Simplest possible usage of structmatch

This file shows segment variables, skipping with ``...``, recursive grammars
and reading a failure report. Run it from the examples directory.
"""
import sys
sys.path.insert(0, "../src")

from structmatch import Element, Reference, Segment, choose, is_failure, let, match
from structmatch.engine.explain import explain_text

print("=" * 80)
print("QUICK START EXAMPLES")
print("=" * 80)

# ============================================================================
# EXAMPLE 1: Segment variables
# ============================================================================
print("\n" + "=" * 80)
print("EXAMPLE 1: Pull a run of tokens out of a call")
print("=" * 80)

tokens = ["call", "print", "(", "a", ",", "b", ")"]
pattern = ["call", Element("fn"), "(", Segment("args"), ")"]

result = match(pattern, tokens)
print(f"  input:    {tokens}")
print(f"  bindings: {result.bindings}")
print(f"  rewrite:  {result.apply(lambda fn, args: [fn, *args])}")

# ============================================================================
# EXAMPLE 2: Skip anything between anchors
# ============================================================================
print("\n" + "=" * 80)
print("EXAMPLE 2: '...' skips items until the next anchor matches")
print("=" * 80)

log_line = ["2024-05-01", "INFO", "worker", "3", "started", "job", "42"]
result = match([..., "job", Element("job_id")], log_line)
print(f"  job id: {result['job_id']}")

# ============================================================================
# EXAMPLE 3: Recursive grammar over nested lists
# ============================================================================
print("\n" + "=" * 80)
print("EXAMPLE 3: Alternating 1/2 chains")
print("=" * 80)

grammar = let(
    {
        "a": choose([], ["1", Reference("b")]),
        "b": choose([], ["2", Reference("a")]),
    },
    Reference("a"),
)
for tree in (["1", ["2", ["1", []]]], ["1", ["1", []]]):
    outcome = match(grammar, tree)
    print(f"  {tree!s:30s} -> {'no match' if is_failure(outcome) else 'match'}")

# ============================================================================
# EXAMPLE 4: Why did it fail?
# ============================================================================
print("\n" + "=" * 80)
print("EXAMPLE 4: Failure report")
print("=" * 80)

outcome = match(["x", Segment("s"), "y"], ["x", "hello", "oops", "z"])
print(explain_text(outcome))
