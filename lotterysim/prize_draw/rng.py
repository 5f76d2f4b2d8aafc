"""Injectable random-number sources used by the draw and CPU purchases."""

from __future__ import annotations

import random
from typing import Iterable, Optional, Protocol


class RandomSource(Protocol):
    """Source of uniformly distributed integers.

    Both methods use half-open ranges, so ``upper`` is never returned.
    """

    def next_index(self, upper: int) -> int:
        """Return an integer in ``[0, upper)``."""
        ...

    def next_in_range(self, lower: int, upper: int) -> int:
        """Return an integer in ``[lower, upper)``."""
        ...


class SeededRandomSource:
    """:class:`RandomSource` backed by :class:`random.Random`.

    Not suitable for anything that needs cryptographic randomness.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self.seed = seed
        self._random = random.Random(seed)

    def next_index(self, upper: int) -> int:
        return self.next_in_range(0, upper)

    def next_in_range(self, lower: int, upper: int) -> int:
        if upper <= lower:
            raise ValueError(f"empty range [{lower}, {upper})")
        return self._random.randrange(lower, upper)


class ScriptedRandomSource:
    """:class:`RandomSource` that replays a fixed sequence of values.

    Used to reproduce a draw exactly. Each call consumes the next value and
    checks that it lies inside the requested range.
    """

    def __init__(self, values: Iterable[int]) -> None:
        self._values = list(values)
        self._position = 0

    @property
    def remaining(self) -> int:
        """Number of scripted values not consumed yet."""
        return len(self._values) - self._position

    def next_index(self, upper: int) -> int:
        return self.next_in_range(0, upper)

    def next_in_range(self, lower: int, upper: int) -> int:
        if self._position >= len(self._values):
            raise ValueError("scripted random source is exhausted")
        value = self._values[self._position]
        self._position += 1
        if not lower <= value < upper:
            raise ValueError(
                f"scripted value {value} is outside the requested range [{lower}, {upper})"
            )
        return value


def create_random_source(seed: Optional[int] = None) -> RandomSource:
    """Return the default random source, seeded when ``seed`` is given."""
    return SeededRandomSource(seed)


__all__ = [
    "RandomSource",
    "ScriptedRandomSource",
    "SeededRandomSource",
    "create_random_source",
]
