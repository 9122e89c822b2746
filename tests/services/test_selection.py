import itertools
import random
from collections import Counter

import pytest

from campaigns.services.profit_sharing.selection import fisher_yates_shuffle, select_random_donors

# Chi-square critical values at p = 0.001.
CHI2_CRITICAL_DF4 = 18.467
CHI2_CRITICAL_DF5 = 20.515


def _chi_square(observed: Counter, expected: float) -> float:
    return sum((count - expected) ** 2 / expected for count in observed.values())


@pytest.mark.parametrize("pool_size", range(0, 7))
@pytest.mark.parametrize("count", range(0, 5))
def test_selection_size_is_min_of_pool_and_count(pool_size, count):
    pool = [f"donor-{index}" for index in range(pool_size)]

    selected = select_random_donors(pool, count, rng=random.Random(pool_size * 10 + count))

    assert len(selected) == min(pool_size, count)
    assert len(set(selected)) == len(selected)
    assert set(selected) <= set(pool)


def test_empty_pool_returns_empty_list():
    assert select_random_donors([], 2) == []


def test_small_pool_is_returned_in_original_order():
    pool = ["a", "b"]

    selected = select_random_donors(pool, 2)

    assert selected == ["a", "b"]
    assert selected is not pool


def test_shuffle_does_not_mutate_input():
    pool = ["a", "b", "c", "d"]

    select_random_donors(pool, 2, rng=random.Random(3))

    assert pool == ["a", "b", "c", "d"]


def test_same_seed_gives_same_selection():
    pool = [f"donor-{index}" for index in range(10)]

    first = select_random_donors(pool, 2, rng=random.Random(99))
    second = select_random_donors(pool, 2, rng=random.Random(99))

    assert first == second


def test_negative_count_is_rejected():
    with pytest.raises(ValueError):
        select_random_donors(["a"], -1)


def test_every_donor_is_selected_equally_often():
    pool = ["a", "b", "c", "d", "e"]
    rng = random.Random(1234)
    trials = 20_000
    counts: Counter = Counter({donor: 0 for donor in pool})

    for _ in range(trials):
        counts.update(select_random_donors(pool, 2, rng=rng))

    expected = trials * 2 / len(pool)
    assert _chi_square(counts, expected) < CHI2_CRITICAL_DF4


def test_shuffle_permutations_are_uniform():
    items = ["x", "y", "z"]
    rng = random.Random(42)
    trials = 12_000
    counts: Counter = Counter({perm: 0 for perm in itertools.permutations(items)})

    for _ in range(trials):
        counts[tuple(fisher_yates_shuffle(items, rng))] += 1

    assert len(counts) == 6
    assert _chi_square(counts, trials / 6) < CHI2_CRITICAL_DF5
