from __future__ import annotations

from typing import Iterable, List

import pytest

from voltest import bootstrap


class ScriptedRandom:
    """Random source replaying a fixed list of draws.

    Each draw is checked against the requested ``[low, high)`` range so a
    script that drifts out of step with the generator fails loudly.
    """

    def __init__(self, values: Iterable[int]) -> None:
        self._values: List[int] = list(values)
        self.calls: List[tuple] = []

    @property
    def remaining(self) -> int:
        return len(self._values)

    def integers(self, low: int, high: int) -> int:
        self.calls.append((low, high))
        if not self._values:
            raise AssertionError(f"random script exhausted at draw {len(self.calls)} [{low}, {high})")
        value = self._values.pop(0)
        if not low <= value < high:
            raise AssertionError(f"scripted value {value} outside [{low}, {high}) at draw {len(self.calls)}")
        return value


@pytest.fixture(scope="session", autouse=True)
def setup_voltest_registry() -> None:
    """Register built-in test groups once for the entire test session."""

    bootstrap()


@pytest.fixture
def scripted():
    return ScriptedRandom
