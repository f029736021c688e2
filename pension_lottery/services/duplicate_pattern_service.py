"""Repeated-digit structure of each draw.

Every draw falls into one bucket:

- ``0``: no digit repeats
- ``1``: exactly one digit appears exactly twice
- ``2``: exactly two digits each appear exactly twice
- ``-1`` ("other"): anything heavier (a triple or more, three repeated digits,
  two digits both appearing three or more times)
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from pension_lottery.services.record_parser import DrawRecord

OTHER_BUCKET = -1
BUCKETS = (OTHER_BUCKET, 0, 1, 2)
INTENSITY_LEVELS = (0, 2, 3, 4, 5, 6)
MAX_PATTERN_EXAMPLES = 5


@dataclass(frozen=True)
class DuplicateClassification:
    bucket: int
    digit_counts: dict[int, int]
    duplicate_digits: tuple[int, ...]
    duplicated_digit: int | None = None
    pattern: str | None = None


@dataclass(frozen=True)
class DigitRanking:
    digit: int
    count: int
    ratio: float


@dataclass(frozen=True)
class DuplicatePatternAnalysis:
    total_records: int
    duplicate_count_distribution: dict[int, int]
    duplicate_count_ratio: dict[int, float]
    single_duplicate_digit_ranking: list[DigitRanking]

    def ranking_count(self, digit: int) -> int:
        for item in self.single_duplicate_digit_ranking:
            if item.digit == digit:
                return item.count
        return 0


@dataclass(frozen=True)
class PatternDetail:
    pattern: str
    count: int
    percentage: float
    examples: list[int]


@dataclass(frozen=True)
class DuplicatePositionAnalysis:
    total_single_duplicates: int
    pattern_details: list[PatternDetail]

    def find(self, pattern: str) -> PatternDetail | None:
        for detail in self.pattern_details:
            if detail.pattern == pattern:
                return detail
        return None


@dataclass(frozen=True)
class DuplicateFrequencyAnalysis:
    total_records: int
    distribution: dict[int, int]
    ratio: dict[int, float]


def _digit_counts(digits: Sequence[int]) -> dict[int, int]:
    counts: dict[int, int] = {}
    for d in digits:
        counts[d] = counts.get(d, 0) + 1
    return counts


def classify_duplicates(digits: Sequence[int]) -> DuplicateClassification:
    counts = _digit_counts(digits)
    duplicates = tuple(sorted(d for d, c in counts.items() if c >= 2))

    is_other = (
        len(duplicates) >= 3
        or (len(duplicates) == 2 and all(counts[d] >= 3 for d in duplicates))
        or (len(duplicates) == 1 and counts[duplicates[0]] >= 3)
    )
    if is_other:
        return DuplicateClassification(bucket=OTHER_BUCKET, digit_counts=counts, duplicate_digits=duplicates)

    if len(duplicates) == 1:
        dup = duplicates[0]
        pattern = "".join("O" if d == dup else "X" for d in digits)
        return DuplicateClassification(
            bucket=1,
            digit_counts=counts,
            duplicate_digits=duplicates,
            duplicated_digit=dup,
            pattern=pattern,
        )

    # A triple plus a pair lands here as bucket 2; only "both >= 3" is "other".
    return DuplicateClassification(bucket=len(duplicates), digit_counts=counts, duplicate_digits=duplicates)


def duplication_intensity(digits: Sequence[int]) -> int:
    """Occurrences of the most repeated digit, 0 when nothing repeats."""

    if not digits:
        return 0
    top = max(_digit_counts(digits).values())
    return top if top >= 2 else 0


def analyze_duplicate_patterns(records: Sequence[DrawRecord]) -> DuplicatePatternAnalysis:
    total = len(records)
    distribution = {b: 0 for b in BUCKETS}
    single_counts: dict[int, int] = {}

    for record in records:
        result = classify_duplicates(record.digits)
        distribution[result.bucket] += 1
        if result.duplicated_digit is not None:
            single_counts[result.duplicated_digit] = single_counts.get(result.duplicated_digit, 0) + 1

    ranking = [
        DigitRanking(digit=d, count=c, ratio=(c / total) if total else 0.0)
        for d, c in sorted(single_counts.items(), key=lambda kv: (-kv[1], kv[0]))
    ]

    return DuplicatePatternAnalysis(
        total_records=total,
        duplicate_count_distribution=distribution,
        duplicate_count_ratio={b: (c / total) if total else 0.0 for b, c in distribution.items()},
        single_duplicate_digit_ranking=ranking,
    )


def analyze_duplicate_position_patterns(records: Sequence[DrawRecord]) -> DuplicatePositionAnalysis:
    counts: dict[str, int] = {}
    examples: dict[str, list[int]] = {}

    for record in records:
        result = classify_duplicates(record.digits)
        if result.pattern is None:
            continue
        counts[result.pattern] = counts.get(result.pattern, 0) + 1
        bucket_examples = examples.setdefault(result.pattern, [])
        if len(bucket_examples) < MAX_PATTERN_EXAMPLES:
            bucket_examples.append(record.round_id)

    total = sum(counts.values())
    details = [
        PatternDetail(
            pattern=pattern,
            count=count,
            percentage=(count / total * 100.0) if total else 0.0,
            examples=examples[pattern],
        )
        for pattern, count in sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
    ]
    return DuplicatePositionAnalysis(total_single_duplicates=total, pattern_details=details)


def analyze_duplicate_frequency(records: Sequence[DrawRecord]) -> DuplicateFrequencyAnalysis:
    total = len(records)
    distribution = {level: 0 for level in INTENSITY_LEVELS}
    for record in records:
        distribution[duplication_intensity(record.digits)] += 1

    return DuplicateFrequencyAnalysis(
        total_records=total,
        distribution=distribution,
        ratio={level: (c / total) if total else 0.0 for level, c in distribution.items()},
    )
