"""Distribution of the six-digit sum across draws."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from pension_lottery.services.record_parser import DIGIT_COUNT, DrawRecord


@dataclass(frozen=True)
class DigitSumStatistics:
    avg_sum: float
    median_sum: float
    mode_sum: int
    min_sum: int
    max_sum: int
    std_dev: float


@dataclass(frozen=True)
class DigitSumAnalysis:
    total_records: int
    sum_distribution: dict[int, int]
    statistics: DigitSumStatistics
    # Percentages over all total_records * 6 digits. Not the same metric as the
    # scalar even/odd ratio of the statistics engine.
    even_digit_ratio: float
    odd_digit_ratio: float


def analyze_digit_sum(records: Sequence[DrawRecord]) -> DigitSumAnalysis:
    total = len(records)
    if total == 0:
        return DigitSumAnalysis(
            total_records=0,
            sum_distribution={},
            statistics=DigitSumStatistics(0.0, 0.0, 0, 0, 0, 0.0),
            even_digit_ratio=0.0,
            odd_digit_ratio=0.0,
        )

    sums = [r.digit_sum for r in records]
    distribution: dict[int, int] = {}
    for s in sums:
        distribution[s] = distribution.get(s, 0) + 1
    distribution = dict(sorted(distribution.items()))

    # Ties go to the smallest sum.
    mode_sum = max(distribution.items(), key=lambda kv: (kv[1], -kv[0]))[0]

    ordered = sorted(sums)
    mid = total // 2
    median = (ordered[mid - 1] + ordered[mid]) / 2 if total % 2 == 0 else float(ordered[mid])
    avg = sum(sums) / total
    std_dev = math.sqrt(sum((s - avg) ** 2 for s in sums) / total)

    even_digits = sum(1 for r in records for d in r.digits if d % 2 == 0)
    digit_total = total * DIGIT_COUNT

    return DigitSumAnalysis(
        total_records=total,
        sum_distribution=distribution,
        statistics=DigitSumStatistics(
            avg_sum=avg,
            median_sum=median,
            mode_sum=mode_sum,
            min_sum=ordered[0],
            max_sum=ordered[-1],
            std_dev=std_dev,
        ),
        even_digit_ratio=even_digits / digit_total * 100.0,
        odd_digit_ratio=(digit_total - even_digits) / digit_total * 100.0,
    )
