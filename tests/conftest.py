"""Test configuration: make ``src`` importable and share continuations."""

from __future__ import annotations

import pathlib
import sys
from typing import Any

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from structmatch.engine.environment import Environment  # noqa: E402
from structmatch.engine.models import Failure, FailureReason, MatcherKind  # noqa: E402


class Recorder:
    """Continuation that records each call and accepts when ``accept_when`` says so."""

    def __init__(self, accept_when: Any = None) -> None:
        self.calls: list[tuple[Environment, int]] = []
        self.accept_when = accept_when

    def __call__(self, env: Environment, consumed: int) -> Any:
        self.calls.append((env, consumed))
        if self.accept_when is None or self.accept_when(env, consumed):
            return (env, consumed)
        return Failure(MatcherKind.CONSTANT, FailureReason.UNEXPECTED_VALUE, "rejected", 0)

    @property
    def consumed(self) -> list[int]:
        return [consumed for _, consumed in self.calls]


@pytest.fixture
def env() -> Environment:
    return Environment.empty()


@pytest.fixture
def accept() -> Recorder:
    return Recorder()


@pytest.fixture
def reject() -> Recorder:
    return Recorder(lambda env, consumed: False)


@pytest.fixture
def recorder() -> type[Recorder]:
    return Recorder
