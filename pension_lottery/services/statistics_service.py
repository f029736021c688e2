"""Descriptive statistics over a flat numeric series.

Works on any numeric sequence; the combined 6-digit draw values are the usual
input but nothing here depends on that domain except the trend thresholds and
the clamp range of ``predict_next``.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from pension_lottery.services.sampling import RandomSource, default_rng, round_half_up, uniform_index

BOUND_FACTOR = 1.5
TREND_WINDOW = 10
TREND_THRESHOLD = 1000
VALUE_CEILING = 999_999


@dataclass(frozen=True)
class NumberStatistics:
    mean: float
    median: float
    mode: float
    range: float
    standard_deviation: float
    out_of_range_count: int
    out_of_range_ratio: float
    above_upper_bound_count: int
    above_upper_bound_ratio: float
    below_lower_bound_count: int
    below_lower_bound_ratio: float
    lower_bound: float
    upper_bound: float


@dataclass(frozen=True)
class NumberDistribution:
    digit_frequency: dict[int, int]
    # even-valued count / odd-valued count; None when nothing is odd.
    even_odd_ratio: float | None
    prime_count: int


@dataclass(frozen=True)
class NumberPatterns:
    consecutive_digits: int
    repeated_digits: int
    ascending_sequence: bool
    descending_sequence: bool


@dataclass(frozen=True)
class NumberPrediction:
    next_number: int
    confidence: float
    trend: str  # "increasing" | "decreasing" | "stable"


@dataclass(frozen=True)
class NumberAnalysis:
    input: float
    statistics: NumberStatistics
    distribution: NumberDistribution
    patterns: NumberPatterns
    predictions: NumberPrediction


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _valid(numbers: Sequence[Any]) -> list[float]:
    return [n for n in numbers if _is_number(n)]


def is_prime(num: float) -> bool:
    if num != int(num):
        return False
    n = int(num)
    if n < 2:
        return False
    if n == 2:
        return True
    if n % 2 == 0:
        return False
    for i in range(3, math.isqrt(n) + 1, 2):
        if n % i == 0:
            return False
    return True


def get_digits(num: float) -> list[int]:
    """Decimal digits of a number's plain representation (sign and point dropped)."""

    if isinstance(num, float) and num.is_integer():
        num = int(num)
    return [int(ch) for ch in str(num) if ch.isdigit()]


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _population_variance(values: Sequence[float], mean: float) -> float:
    if not values:
        return 0.0
    return sum((v - mean) ** 2 for v in values) / len(values)


def calculate_statistics(numbers: Sequence[Any]) -> NumberStatistics:
    """Mean, median, mode, spread and the 1.5 sigma outlier counts.

    Invalid entries are skipped; the outlier ratios still divide by the full
    ``len(numbers)``.
    """

    n = len(numbers)
    values = _valid(numbers)
    if not values:
        return NumberStatistics(
            mean=0.0,
            median=0.0,
            mode=0.0,
            range=0.0,
            standard_deviation=0.0,
            out_of_range_count=0,
            out_of_range_ratio=0.0,
            above_upper_bound_count=0,
            above_upper_bound_ratio=0.0,
            below_lower_bound_count=0,
            below_lower_bound_ratio=0.0,
            lower_bound=0.0,
            upper_bound=0.0,
        )

    ordered = sorted(values)
    count = len(ordered)
    mean = _mean(values)
    if count % 2 == 0:
        median = (ordered[count // 2 - 1] + ordered[count // 2]) / 2
    else:
        median = ordered[count // 2]

    frequency: dict[float, int] = {}
    for v in values:
        frequency[v] = frequency.get(v, 0) + 1
    mode = ordered[0]
    best = 0
    for key in sorted(frequency):
        if frequency[key] > best:
            best = frequency[key]
            mode = key

    standard_deviation = math.sqrt(_population_variance(values, mean))
    lower_bound = mean - standard_deviation * BOUND_FACTOR
    upper_bound = mean + standard_deviation * BOUND_FACTOR

    below = 0
    above = 0
    for v in values:
        if v < lower_bound:
            below += 1
        elif v > upper_bound:
            above += 1
    out = below + above

    return NumberStatistics(
        mean=mean,
        median=median,
        mode=mode,
        range=ordered[-1] - ordered[0],
        standard_deviation=standard_deviation,
        out_of_range_count=out,
        out_of_range_ratio=out / n,
        above_upper_bound_count=above,
        above_upper_bound_ratio=above / n,
        below_lower_bound_count=below,
        below_lower_bound_ratio=below / n,
        lower_bound=lower_bound,
        upper_bound=upper_bound,
    )


def analyze_distribution(numbers: Sequence[Any]) -> NumberDistribution:
    values = _valid(numbers)
    digit_frequency: dict[int, int] = {}
    even_count = 0
    prime_count = 0

    for num in values:
        for digit in get_digits(num):
            digit_frequency[digit] = digit_frequency.get(digit, 0) + 1
        if num % 2 == 0:
            even_count += 1
        if is_prime(num):
            prime_count += 1

    odd_count = len(values) - even_count
    return NumberDistribution(
        digit_frequency=digit_frequency,
        even_odd_ratio=(even_count / odd_count) if odd_count else None,
        prime_count=prime_count,
    )


def analyze_patterns(numbers: Sequence[Any]) -> NumberPatterns:
    consecutive = 0
    repeated = 0
    ascending = False
    descending = False

    for num in _valid(numbers):
        digits = get_digits(num)
        pairs = list(zip(digits, digits[1:]))

        consecutive += sum(1 for a, b in pairs if abs(a - b) == 1)
        if len(set(digits)) < len(digits):
            repeated += 1
        if all(a < b for a, b in pairs):
            ascending = True
        if all(a > b for a, b in pairs):
            descending = True

    return NumberPatterns(
        consecutive_digits=consecutive,
        repeated_digits=repeated,
        ascending_sequence=ascending,
        descending_sequence=descending,
    )


def predict_next(numbers: Sequence[Any], rng: RandomSource | None = None) -> NumberPrediction:
    """Extrapolate the mean change of the last ten values one step ahead."""

    values = _valid(numbers)
    if len(values) < 2:
        rng = rng or default_rng()
        return NumberPrediction(
            next_number=uniform_index(VALUE_CEILING + 1, rng),
            confidence=0.1,
            trend="stable",
        )

    recent = values[-TREND_WINDOW:]
    changes = [b - a for a, b in zip(recent, recent[1:])]
    avg_change = _mean(changes)

    trend = "stable"
    if avg_change > TREND_THRESHOLD:
        trend = "increasing"
    elif avg_change < -TREND_THRESHOLD:
        trend = "decreasing"

    next_number = int(max(0, min(VALUE_CEILING, round_half_up(values[-1] + avg_change))))
    variance = _population_variance(changes, avg_change)
    confidence = max(0.1, min(0.9, 1 - variance / 1_000_000))

    return NumberPrediction(next_number=next_number, confidence=confidence, trend=trend)


def analyze_numbers(numbers: Sequence[Any], rng: RandomSource | None = None) -> NumberAnalysis:
    values = _valid(numbers)
    return NumberAnalysis(
        input=values[-1] if values else 0,
        statistics=calculate_statistics(numbers),
        distribution=analyze_distribution(numbers),
        patterns=analyze_patterns(numbers),
        predictions=predict_next(numbers, rng),
    )
