"""Weighted random selection and bounded retry helpers.

Every random decision in the prediction generator goes through a
``RandomSource``: anything exposing ``random() -> float`` in [0, 1).
``random.Random`` qualifies, and tests can pass a constant source.
"""

from __future__ import annotations

import math
import random
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Generic, Protocol, TypeVar

T = TypeVar("T")


class RandomSource(Protocol):
    def random(self) -> float: ...


@dataclass(frozen=True)
class RetryOutcome(Generic[T]):
    value: T | None
    attempts: int
    accepted: bool


def default_rng() -> RandomSource:
    return random.Random()


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up (-2.5 -> -2)."""

    return int(math.floor(value + 0.5))


def uniform_index(n: int, rng: RandomSource) -> int:
    """Uniform integer in [0, n)."""

    if n <= 0:
        raise ValueError("n must be positive")
    # random() may return values arbitrarily close to 1.0.
    return min(int(rng.random() * n), n - 1)


def uniform_digit(rng: RandomSource) -> int:
    return uniform_index(10, rng)


def uniform_choice(items: Sequence[T], rng: RandomSource) -> T:
    if not items:
        raise ValueError("Cannot choose from an empty sequence")
    return items[uniform_index(len(items), rng)]


def sample_distinct(items: Sequence[T], k: int, rng: RandomSource) -> list[T]:
    """Pick ``k`` distinct items uniformly (partial Fisher-Yates)."""

    pool = list(items)
    if k > len(pool):
        raise ValueError(f"Cannot sample {k} items from {len(pool)}")

    picked: list[T] = []
    for _ in range(k):
        idx = uniform_index(len(pool), rng)
        picked.append(pool.pop(idx))
    return picked


def weighted_choice(candidates: Sequence[tuple[T, float]], rng: RandomSource) -> T:
    """Choose a candidate with probability proportional to its weight.

    Draws ``r`` uniformly in [0, total) and subtracts weights in order until
    ``r`` drops to zero or below. Candidates with non-positive weight are never
    picked unless every weight is non-positive, in which case the choice is
    uniform over all candidates.
    """

    if not candidates:
        raise ValueError("weighted_choice requires at least one candidate")

    total = sum(float(w) for _, w in candidates if w > 0)
    if total <= 0:
        return uniform_choice([c for c, _ in candidates], rng)

    remaining = rng.random() * total
    last_positive: T | None = None
    for candidate, weight in candidates:
        if weight <= 0:
            continue
        last_positive = candidate
        remaining -= float(weight)
        if remaining <= 0:
            return candidate

    # Float accumulation can leave a tiny positive remainder.
    return last_positive  # type: ignore[return-value]


def bounded_retry(
    generate: Callable[[], T],
    accept: Callable[[T], bool],
    max_attempts: int,
) -> RetryOutcome[T]:
    """Call ``generate`` until ``accept`` passes or the budget runs out.

    Returns the first accepted candidate, otherwise the last generated one with
    ``accepted=False``. Never loops more than ``max_attempts`` times.
    """

    candidate: T | None = None
    for attempt in range(1, max(0, int(max_attempts)) + 1):
        candidate = generate()
        if accept(candidate):
            return RetryOutcome(value=candidate, attempts=attempt, accepted=True)
    return RetryOutcome(value=candidate, attempts=max(0, int(max_attempts)), accepted=False)
