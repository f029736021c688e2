"""Per-position digit frequency tables."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from pension_lottery.services.record_parser import DIGIT_COUNT, DrawRecord


@dataclass(frozen=True)
class DigitCount:
    digit: int
    count: int
    percentage: float


@dataclass(frozen=True)
class PositionFrequency:
    position: int  # 1..6
    total: int
    digit_frequency: dict[int, int]
    highest: DigitCount
    lowest: DigitCount


def _extreme(frequency: dict[int, int], total: int, *, highest: bool) -> DigitCount:
    best_digit = 0
    best_count = frequency[0]
    for digit in range(1, 10):
        count = frequency[digit]
        if (highest and count > best_count) or (not highest and count < best_count):
            best_digit, best_count = digit, count
    pct = (best_count / total * 100.0) if total else 0.0
    return DigitCount(digit=best_digit, count=best_count, percentage=pct)


def analyze_position_frequency(records: Sequence[DrawRecord]) -> list[PositionFrequency]:
    """Count, for each position, how often each digit 0..9 landed there.

    Ties for the highest/lowest digit go to the smallest digit.
    """

    tables: list[dict[int, int]] = [{d: 0 for d in range(10)} for _ in range(DIGIT_COUNT)]
    for record in records:
        for idx, digit in enumerate(record.digits[:DIGIT_COUNT]):
            tables[idx][digit] += 1

    total = len(records)
    return [
        PositionFrequency(
            position=idx + 1,
            total=total,
            digit_frequency=table,
            highest=_extreme(table, total, highest=True),
            lowest=_extreme(table, total, highest=False),
        )
        for idx, table in enumerate(tables)
    ]
