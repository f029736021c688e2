"""Parse stored Pension Lottery rows into draw records.

A stored row holds 14 integers::

    [round_id, group_id, d1, d2, d3, d4, d5, d6, b1, b2, b3, b4, b5, b6]

``d1..d6`` are the winning digits (most significant first) and ``b1..b6`` the
bonus digits drawn alongside them.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from pension_lottery.errors import RecordFormatError, ValidationError

ROW_LENGTH = 14
DIGIT_COUNT = 6
MAX_COMBINED_VALUE = 999_999


@dataclass(frozen=True)
class DrawRecord:
    round_id: int
    group_id: int
    digits: tuple[int, ...]
    bonus_digits: tuple[int, ...] = field(default=())
    is_bonus: bool = False

    @property
    def combined_value(self) -> int:
        return digits_to_value(self.digits)

    @property
    def digit_sum(self) -> int:
        return sum(self.digits)


@dataclass(frozen=True)
class DataSummary:
    total_count: int
    min_number: int
    max_number: int
    avg_number: float
    digit_distribution: dict[int, int]
    even_count: int
    odd_count: int
    even_odd_ratio: float | None


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def digits_to_value(digits: Sequence[int]) -> int:
    """Concatenate digits as a zero padded decimal string and parse it."""

    return int("".join(str(int(d)) for d in digits).zfill(DIGIT_COUNT))


def value_to_digits(value: int) -> tuple[int, ...] | None:
    """Split a combined value back into 6 digits, or None when out of range."""

    if value < 0 or value > MAX_COMBINED_VALUE:
        return None
    return tuple(int(ch) for ch in f"{int(value):06d}")


def validate_row(row: Any) -> list[int]:
    """Shape check for a row about to be appended to storage."""

    if not isinstance(row, (list, tuple)):
        raise ValidationError(
            message=f"Row must be an array of {ROW_LENGTH} integers",
            details={"newData": ["Not an array"]},
        )
    if len(row) != ROW_LENGTH:
        raise ValidationError(
            message=f"Row must contain exactly {ROW_LENGTH} integers (got {len(row)})",
            details={"newData": [f"Length must be {ROW_LENGTH}"]},
        )

    bad = [i for i, v in enumerate(row) if not _is_int(v)]
    if bad:
        raise ValidationError(
            message="Every row element must be an integer",
            details={"newData": [f"Non-numeric elements at positions: {', '.join(str(i) for i in bad)}"]},
        )
    return [int(v) for v in row]


def _parse_digits(row: Sequence[Any], start: int, end: int, index: int) -> tuple[int, ...]:
    chunk = row[start:end]
    if any(not _is_int(d) or d < 0 or d > 9 for d in chunk):
        raise RecordFormatError(
            message=f"Row {index} has digits outside 0..9",
            details={"row": list(row)},
        )
    return tuple(int(d) for d in chunk)


def parse_lottery_data(rows: Iterable[Sequence[Any]], include_bonus: bool = False) -> list[DrawRecord]:
    """Turn stored rows into draw records, keeping the input order.

    With ``include_bonus`` every row also yields a bonus record (same round and
    group, the bonus digits as ``digits``) right after its primary record.
    """

    records: list[DrawRecord] = []
    for index, row in enumerate(rows):
        if not isinstance(row, (list, tuple)) or len(row) < 2 + DIGIT_COUNT:
            raise RecordFormatError(
                message=f"Row {index} is too short to hold a draw",
                details={"row": row if isinstance(row, (list, tuple)) else repr(row)},
            )
        if not _is_int(row[0]) or not _is_int(row[1]):
            raise RecordFormatError(
                message=f"Row {index} has a non-integer round or group",
                details={"row": list(row)},
            )

        digits = _parse_digits(row, 2, 2 + DIGIT_COUNT, index)
        bonus: tuple[int, ...] = ()
        if len(row) >= ROW_LENGTH:
            bonus = _parse_digits(row, 2 + DIGIT_COUNT, ROW_LENGTH, index)

        records.append(DrawRecord(round_id=int(row[0]), group_id=int(row[1]), digits=digits, bonus_digits=bonus))

    return expand_bonus(records) if include_bonus else records


def expand_bonus(records: Iterable[DrawRecord]) -> list[DrawRecord]:
    """Insert a bonus record right after every primary record that has bonus digits."""

    expanded: list[DrawRecord] = []
    for record in records:
        expanded.append(record)
        if not record.is_bonus and record.bonus_digits:
            expanded.append(
                DrawRecord(
                    round_id=record.round_id,
                    group_id=record.group_id,
                    digits=record.bonus_digits,
                    is_bonus=True,
                )
            )
    return expanded


def primary_records(records: Iterable[DrawRecord]) -> list[DrawRecord]:
    return [r for r in records if not r.is_bonus]


def latest_record(records: Iterable[DrawRecord]) -> DrawRecord | None:
    """Most recent primary record (max round id)."""

    primaries = primary_records(records)
    if not primaries:
        return None
    return max(primaries, key=lambda r: r.round_id)


def extract_numbers(records: Iterable[DrawRecord]) -> list[int]:
    return [r.combined_value for r in records]


def get_data_statistics(records: Sequence[DrawRecord]) -> DataSummary:
    numbers = extract_numbers(records)
    total = len(numbers)
    if total == 0:
        return DataSummary(
            total_count=0,
            min_number=0,
            max_number=0,
            avg_number=0.0,
            digit_distribution={},
            even_count=0,
            odd_count=0,
            even_odd_ratio=None,
        )

    digit_distribution: dict[int, int] = {}
    for num in numbers:
        for ch in str(num):
            d = int(ch)
            digit_distribution[d] = digit_distribution.get(d, 0) + 1

    even_count = sum(1 for n in numbers if n % 2 == 0)
    odd_count = total - even_count

    return DataSummary(
        total_count=total,
        min_number=min(numbers),
        max_number=max(numbers),
        avg_number=sum(numbers) / total,
        digit_distribution=digit_distribution,
        even_count=even_count,
        odd_count=odd_count,
        even_odd_ratio=(even_count / odd_count) if odd_count else None,
    )


def get_recent_data(records: Sequence[DrawRecord], count: int = 10) -> list[DrawRecord]:
    """First ``count`` records; stored collections are newest first."""

    if count <= 0:
        return []
    return list(records[:count])


def get_data_by_range(records: Iterable[DrawRecord], start_round: int, end_round: int) -> list[DrawRecord]:
    return [r for r in records if start_round <= r.round_id <= end_round]
