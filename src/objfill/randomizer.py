"""
Randomness provider used for counts, sampling and enumeration choice.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


@runtime_checkable
class RandomSource(Protocol):
    """Source of randomness consulted by the filling engine."""

    def next_int(self, low: int, high: int) -> int:
        """Return an integer uniformly drawn from [low, high)."""
        ...

    def next_float(self) -> float:
        """Return a float uniformly drawn from [0.0, 1.0)."""
        ...

    def choose(self, values: Sequence[T]) -> T:
        """Return one element of a non-empty sequence."""
        ...

    def sample(self, values: Sequence[T], count: int) -> list[T]:
        """Return `count` distinct elements, without replacement."""
        ...


class StdRandom:
    """RandomSource backed by `random.Random`; reproducible when seeded."""

    def __init__(self, seed: int | None = None):
        self.seed = seed
        self._random = random.Random(seed)

    def next_int(self, low: int, high: int) -> int:
        if high <= low:
            return low
        return self._random.randrange(low, high)

    def next_float(self) -> float:
        return self._random.random()

    def choose(self, values: Sequence[T]) -> T:
        return self._random.choice(values)

    def sample(self, values: Sequence[T], count: int) -> list[T]:
        return self._random.sample(list(values), count)

    def __repr__(self) -> str:
        return f"StdRandom(seed={self.seed!r})"
