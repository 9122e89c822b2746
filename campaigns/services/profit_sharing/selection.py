"""Unbiased random selection of donors from the eligible pool."""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import TypeVar

_T = TypeVar("_T")

DEFAULT_SELECTED_DONORS = 2


def fisher_yates_shuffle(items: Sequence[_T], rng: random.Random) -> list[_T]:
    """Return a shuffled copy; every permutation is equally likely."""
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randrange(i + 1)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def select_random_donors(
    pool: Sequence[_T],
    count: int = DEFAULT_SELECTED_DONORS,
    *,
    rng: random.Random | None = None,
) -> list[_T]:
    """Draw ``min(len(pool), count)`` donors without replacement.

    When the pool is no larger than ``count`` no draw is needed and the pool is
    returned in its original order. Without an explicit ``rng`` a fresh
    ``random.Random`` is used so concurrent calls share no generator state.
    """
    if count < 0:
        raise ValueError(f"count must be zero or positive, got {count}.")
    if not pool:
        return []
    if len(pool) <= count:
        return list(pool)
    source = rng if rng is not None else random.Random()
    return fisher_yates_shuffle(pool, source)[:count]
