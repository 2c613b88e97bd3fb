"""Fisher-Yates shuffling over an injectable random source."""

from __future__ import annotations

import random
from collections.abc import Iterable
from typing import Protocol, TypeVar

T = TypeVar("T")


class RandomSource(Protocol):
    def randint(self, a: int, b: int) -> int: ...


def shuffled(items: Iterable[T], rng: RandomSource | None = None) -> list[T]:
    """Return a uniformly shuffled copy of ``items``.

    The input is never modified. Pass a seeded ``random.Random`` as ``rng``
    to get a reproducible permutation.
    """

    source = rng if rng is not None else random
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = source.randint(0, i)
        result[i], result[j] = result[j], result[i]
    return result
