"""Random source scaffolding shared by the generators."""
from __future__ import annotations

import time
from typing import Any, Optional, Protocol

import numpy as np


class RandomSource(Protocol):
    """Anything exposing ``numpy.random.Generator.integers`` semantics."""

    def integers(self, low: int, high: int) -> Any:
        ...


def resolve_seed(seed: Optional[int] = None) -> int:
    """Return ``seed`` or, when absent, a time-based one."""

    if seed is None:
        return int(time.time())
    return int(seed)


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    return np.random.default_rng(resolve_seed(seed))


def draw(rng: RandomSource, low: int, high: int) -> int:
    """Uniform integer in ``[low, high)``."""

    return int(rng.integers(low, high))
