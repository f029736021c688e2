"""Round-over-round comparison, threshold trend labels and per-position digit transitions.

All analyses walk the primary draws in ascending round order; bonus records
are not part of the round sequence.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from pension_lottery.services.record_parser import DIGIT_COUNT, DrawRecord, primary_records

BAND_FACTOR = 1.5


@dataclass(frozen=True)
class RoundDelta:
    previous_round: int
    round_id: int
    previous_value: int
    value: int
    delta: int
    direction: str  # "increase" | "decrease" | "same"


@dataclass(frozen=True)
class RoundComparisonAnalysis:
    total_comparisons: int
    increase_count: int
    decrease_count: int
    same_count: int
    max_increase_streak: int
    max_decrease_streak: int
    max_same_streak: int
    avg_increase: float
    max_increase: int
    avg_decrease: float
    max_decrease: int
    avg_change: float
    std_dev: float
    min_change: int
    max_change: int
    lower_bound: float
    upper_bound: float
    within_range_count: int
    within_range_ratio: float
    out_of_range_count: int
    out_of_range_ratio: float
    comparisons: list[RoundDelta]

    def effective_band(self) -> tuple[float, float]:
        """Intersection of the observed change range and the 1.5 sigma band."""

        return (
            max(float(self.min_change), self.lower_bound),
            min(float(self.max_change), self.upper_bound),
        )


@dataclass(frozen=True)
class TransitionRow:
    total: int
    counts: dict[int, int]
    probabilities: dict[int, float]


@dataclass(frozen=True)
class PositionTransition:
    position: int  # 1..6
    transitions: dict[int, TransitionRow]


@dataclass(frozen=True)
class PositionTransitionAnalysis:
    total_transitions: int
    positions: list[PositionTransition]

    def probability(self, position: int, previous_digit: int, next_digit: int) -> float:
        if position < 1 or position > len(self.positions):
            return 0.0
        row = self.positions[position - 1].transitions.get(previous_digit)
        if row is None:
            return 0.0
        return row.probabilities.get(next_digit, 0.0)


def _chronological(records: Sequence[DrawRecord]) -> list[DrawRecord]:
    return sorted(primary_records(records), key=lambda r: r.round_id)


def _direction(delta: int) -> str:
    if delta > 0:
        return "increase"
    if delta < 0:
        return "decrease"
    return "same"


def _empty_comparison() -> RoundComparisonAnalysis:
    return RoundComparisonAnalysis(
        total_comparisons=0,
        increase_count=0,
        decrease_count=0,
        same_count=0,
        max_increase_streak=0,
        max_decrease_streak=0,
        max_same_streak=0,
        avg_increase=0.0,
        max_increase=0,
        avg_decrease=0.0,
        max_decrease=0,
        avg_change=0.0,
        std_dev=0.0,
        min_change=0,
        max_change=0,
        lower_bound=0.0,
        upper_bound=0.0,
        within_range_count=0,
        within_range_ratio=0.0,
        out_of_range_count=0,
        out_of_range_ratio=0.0,
        comparisons=[],
    )


def analyze_round_comparison(records: Sequence[DrawRecord]) -> RoundComparisonAnalysis:
    ordered = _chronological(records)
    if len(ordered) < 2:
        return _empty_comparison()

    comparisons: list[RoundDelta] = []
    increases: list[int] = []
    decreases: list[int] = []
    max_streak = {"increase": 0, "decrease": 0, "same": 0}
    current_direction: str | None = None
    current_streak = 0

    for prev, cur in zip(ordered, ordered[1:]):
        delta = cur.combined_value - prev.combined_value
        direction = _direction(delta)
        comparisons.append(
            RoundDelta(
                previous_round=prev.round_id,
                round_id=cur.round_id,
                previous_value=prev.combined_value,
                value=cur.combined_value,
                delta=delta,
                direction=direction,
            )
        )

        if direction == "increase":
            increases.append(delta)
        elif direction == "decrease":
            decreases.append(-delta)

        current_streak = current_streak + 1 if direction == current_direction else 1
        current_direction = direction
        max_streak[direction] = max(max_streak[direction], current_streak)

    deltas = [c.delta for c in comparisons]
    n = len(deltas)
    avg_change = sum(deltas) / n
    std_dev = math.sqrt(sum((d - avg_change) ** 2 for d in deltas) / n)
    lower = avg_change - BAND_FACTOR * std_dev
    upper = avg_change + BAND_FACTOR * std_dev
    within = sum(1 for d in deltas if lower <= d <= upper)

    return RoundComparisonAnalysis(
        total_comparisons=n,
        increase_count=len(increases),
        decrease_count=len(decreases),
        same_count=n - len(increases) - len(decreases),
        max_increase_streak=max_streak["increase"],
        max_decrease_streak=max_streak["decrease"],
        max_same_streak=max_streak["same"],
        avg_increase=(sum(increases) / len(increases)) if increases else 0.0,
        max_increase=max(increases) if increases else 0,
        avg_decrease=(sum(decreases) / len(decreases)) if decreases else 0.0,
        max_decrease=max(decreases) if decreases else 0,
        avg_change=avg_change,
        std_dev=std_dev,
        min_change=min(deltas),
        max_change=max(deltas),
        lower_bound=lower,
        upper_bound=upper,
        within_range_count=within,
        within_range_ratio=within / n,
        out_of_range_count=n - within,
        out_of_range_ratio=(n - within) / n,
        comparisons=comparisons,
    )


def analyze_position_transition(records: Sequence[DrawRecord]) -> PositionTransitionAnalysis:
    """Empirical first-order transition table per position.

    ``transitions[prev][next]`` counts how often digit ``next`` followed digit
    ``prev`` at the same position in the next round.
    """

    ordered = _chronological(records)
    counts: list[dict[int, dict[int, int]]] = [{} for _ in range(DIGIT_COUNT)]

    for prev, cur in zip(ordered, ordered[1:]):
        for idx in range(DIGIT_COUNT):
            row = counts[idx].setdefault(prev.digits[idx], {})
            nxt = cur.digits[idx]
            row[nxt] = row.get(nxt, 0) + 1

    positions: list[PositionTransition] = []
    for idx, table in enumerate(counts):
        transitions: dict[int, TransitionRow] = {}
        for prev_digit in sorted(table):
            row = dict(sorted(table[prev_digit].items()))
            total = sum(row.values())
            transitions[prev_digit] = TransitionRow(
                total=total,
                counts=row,
                probabilities={d: c / total for d, c in row.items()},
            )
        positions.append(PositionTransition(position=idx + 1, transitions=transitions))

    return PositionTransitionAnalysis(total_transitions=max(0, len(ordered) - 1), positions=positions)


TREND_THRESHOLD = 10_000


@dataclass(frozen=True)
class TrendPoint:
    round_id: int
    value: int
    change: int
    change_percent: float
    trend: str  # "up" | "down" | "stable"


@dataclass(frozen=True)
class TrendAnalysis:
    threshold: int
    points: list[TrendPoint]
    up_count: int
    down_count: int
    stable_count: int
    avg_change: float
    avg_volatility: float
    max_increase: int
    max_decrease: int
    max_up_streak: int
    max_down_streak: int


def _trend_label(change: int, threshold: int) -> str:
    if change > threshold:
        return "up"
    if change < -threshold:
        return "down"
    return "stable"


def analyze_trend(records: Sequence[DrawRecord], threshold: int = TREND_THRESHOLD) -> TrendAnalysis:
    """Label each round's change as up/down/stable against ``threshold``.

    The first round has no predecessor and counts as a stable point with zero
    change. Averages, extremes and streaks only look at non-zero changes; a
    stable non-zero change breaks the current up or down streak.
    """

    ordered = _chronological(records)
    points: list[TrendPoint] = []
    for index, record in enumerate(ordered):
        change = 0
        percent = 0.0
        if index > 0:
            previous = ordered[index - 1].combined_value
            change = record.combined_value - previous
            percent = (change / previous * 100.0) if previous else 0.0
        points.append(
            TrendPoint(
                round_id=record.round_id,
                value=record.combined_value,
                change=change,
                change_percent=percent,
                trend=_trend_label(change, threshold),
            )
        )

    moved = [p for p in points if p.change != 0]
    max_up = max_down = streak = 0
    current: str | None = None
    for point in moved:
        if point.trend == "stable":
            current, streak = None, 0
            continue
        streak = streak + 1 if point.trend == current else 1
        current = point.trend
        if current == "up":
            max_up = max(max_up, streak)
        else:
            max_down = max(max_down, streak)

    return TrendAnalysis(
        threshold=threshold,
        points=points,
        up_count=sum(1 for p in points if p.trend == "up"),
        down_count=sum(1 for p in points if p.trend == "down"),
        stable_count=sum(1 for p in points if p.trend == "stable"),
        avg_change=(sum(p.change for p in moved) / len(moved)) if moved else 0.0,
        avg_volatility=(sum(abs(p.change) for p in moved) / len(moved)) if moved else 0.0,
        max_increase=max((p.change for p in moved), default=0),
        max_decrease=min((p.change for p in moved), default=0),
        max_up_streak=max_up,
        max_down_streak=max_down,
    )
