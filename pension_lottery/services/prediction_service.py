"""Heuristic next-draw generator.

Samples a 6-digit draw biased by the historical analyses, then nudges it so
that its digit sum and its change from the previous round look like the
history. Draws are independent uniform events; nothing here predicts them.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from pension_lottery.services.digit_sum_service import DigitSumAnalysis, analyze_digit_sum
from pension_lottery.services.duplicate_pattern_service import (
    INTENSITY_LEVELS,
    OTHER_BUCKET,
    DuplicateFrequencyAnalysis,
    DuplicatePatternAnalysis,
    DuplicatePositionAnalysis,
    analyze_duplicate_frequency,
    analyze_duplicate_patterns,
    analyze_duplicate_position_patterns,
    classify_duplicates,
)
from pension_lottery.services.position_frequency_service import PositionFrequency, analyze_position_frequency
from pension_lottery.services.record_parser import (
    DIGIT_COUNT,
    DrawRecord,
    digits_to_value,
    latest_record,
    value_to_digits,
)
from pension_lottery.services.sampling import (
    RandomSource,
    bounded_retry,
    default_rng,
    round_half_up,
    sample_distinct,
    uniform_digit,
    uniform_index,
    weighted_choice,
)
from pension_lottery.services.transition_service import (
    PositionTransitionAnalysis,
    RoundComparisonAnalysis,
    analyze_position_transition,
    analyze_round_comparison,
)

logger = logging.getLogger(__name__)

MAX_SUM_ATTEMPTS = 100
MAX_DELTA_ATTEMPTS = 100
SUM_TOLERANCE = 3
MAX_DIGIT_SUM = 9 * DIGIT_COUNT
PATTERN_PROBABILITY = 0.5
TRANSITION_BOOST = 5
SUM_ASSESSMENT_MARGIN = 5


@dataclass(frozen=True)
class PredictionResult:
    digits: list[int]
    combined_value: int
    digit_sum: int
    target_sum: int | None
    intensity: int | None
    strategy: str  # "random" | "pattern" | "unique" | "duplicate"
    pattern: str | None
    sum_corrected: bool
    delta_adjustment: str  # "none" | "snapped" | "sampled" | "unresolved" | "skipped"


@dataclass(frozen=True)
class PredictionInsight:
    pattern: str | None
    pattern_count: int | None
    pattern_percentage: float | None
    digit_duplicate_probability: float | None
    digit_probabilities: list[float]
    digit_sum: int
    avg_sum: float
    sum_difference: float
    sum_assessment: str  # "below" | "within" | "above"


@dataclass(frozen=True)
class _History:
    positions: list[PositionFrequency]
    digit_sum: DigitSumAnalysis
    duplicates: DuplicatePatternAnalysis
    duplicate_positions: DuplicatePositionAnalysis
    duplicate_frequency: DuplicateFrequencyAnalysis
    comparison: RoundComparisonAnalysis
    transitions: PositionTransitionAnalysis
    latest: DrawRecord | None


def _collect_history(records: Sequence[DrawRecord]) -> _History:
    return _History(
        positions=analyze_position_frequency(records),
        digit_sum=analyze_digit_sum(records),
        duplicates=analyze_duplicate_patterns(records),
        duplicate_positions=analyze_duplicate_position_patterns(records),
        duplicate_frequency=analyze_duplicate_frequency(records),
        comparison=analyze_round_comparison(records),
        transitions=analyze_position_transition(records),
        latest=latest_record(records),
    )


class PredictionService:
    """Generate one heuristic draw from the historical record set."""

    def __init__(
        self,
        rng: RandomSource | None = None,
        max_sum_attempts: int = MAX_SUM_ATTEMPTS,
        max_delta_attempts: int = MAX_DELTA_ATTEMPTS,
    ) -> None:
        self._rng = rng or default_rng()
        self._max_sum_attempts = max_sum_attempts
        self._max_delta_attempts = max_delta_attempts

    def _uniform_digits(self) -> list[int]:
        return [uniform_digit(self._rng) for _ in range(DIGIT_COUNT)]

    def _combined_weight(self, history: _History, index: int, digit: int) -> float:
        freq = history.positions[index].digit_frequency.get(digit, 0)
        probability = 0.0
        if history.latest is not None:
            probability = history.transitions.probability(index + 1, history.latest.digits[index], digit)
        return (freq + 1) * (1 + probability * TRANSITION_BOOST)

    def _pick_for_position(self, history: _History, index: int, excluded: set[int]) -> int:
        candidates = [d for d in range(10) if d not in excluded]
        if not candidates:
            return uniform_digit(self._rng)
        return weighted_choice(
            [(d, self._combined_weight(history, index, d)) for d in candidates],
            self._rng,
        )

    def _pick_intensity(self, history: _History) -> int:
        dist = history.duplicate_frequency.distribution
        return weighted_choice([(level, dist.get(level, 0)) for level in INTENSITY_LEVELS], self._rng)

    def _pattern_digits(self, history: _History) -> tuple[list[int], str]:
        pattern = weighted_choice(
            [(p.pattern, p.count) for p in history.duplicate_positions.pattern_details],
            self._rng,
        )
        duplicate = weighted_choice(
            [(d, history.duplicates.ranking_count(d)) for d in range(10)],
            self._rng,
        )

        digits = [duplicate if ch == "O" else -1 for ch in pattern]
        for index in range(DIGIT_COUNT):
            if digits[index] == -1:
                digits[index] = self._pick_for_position(history, index, {duplicate})
        return digits, pattern

    def _unique_digits(self, history: _History) -> list[int]:
        digits: list[int] = []
        for index in range(DIGIT_COUNT):
            unused = [d for d in range(10) if d not in digits]
            if not unused:
                digits.append(uniform_digit(self._rng))
                continue
            digits.append(self._pick_for_position(history, index, set(digits)))
        return digits

    def _duplicate_digits(self, history: _History, intensity: int) -> list[int]:
        first = history.positions[0].digit_frequency
        duplicate = weighted_choice([(d, first.get(d, 0)) for d in range(10)], self._rng)
        slots = set(sample_distinct(range(DIGIT_COUNT), intensity, self._rng))

        digits: list[int] = []
        for index in range(DIGIT_COUNT):
            if index in slots:
                digits.append(duplicate)
            else:
                digits.append(self._pick_for_position(history, index, {duplicate}))
        return digits

    def _correct_sum(self, digits: list[int], target: int) -> bool:
        """Nudge digits toward ``target``; returns True when a correction ran."""

        def _within(candidate: Sequence[int]) -> bool:
            return abs(sum(candidate) - target) <= SUM_TOLERANCE

        if _within(digits):
            return False

        def _nudge() -> list[int]:
            diff = target - sum(digits)
            for _ in range(min(abs(diff), DIGIT_COUNT)):
                pos = uniform_index(DIGIT_COUNT, self._rng)
                if diff > 0 and digits[pos] < 9:
                    digits[pos] += 1
                elif diff < 0 and digits[pos] > 0:
                    digits[pos] -= 1
            return digits

        outcome = bounded_retry(_nudge, _within, self._max_sum_attempts)
        if not outcome.accepted:
            logger.debug("Sum correction gave up after %s attempts (target=%s)", outcome.attempts, target)
        return True

    def _correct_delta(self, digits: list[int], history: _History) -> tuple[list[int], str]:
        comparison = history.comparison
        if history.latest is None or comparison.total_comparisons == 0:
            return digits, "skipped"

        previous = history.latest.combined_value
        low, high = comparison.effective_band()

        def _in_band(value: int) -> bool:
            return low <= value - previous <= high

        if _in_band(digits_to_value(digits)):
            return digits, "none"

        snapped_value = previous + round_half_up(comparison.avg_change)
        snapped = value_to_digits(snapped_value)
        if snapped is not None and _in_band(snapped_value):
            return list(snapped), "snapped"

        def _sample() -> tuple[int, ...] | None:
            delta = round_half_up(low + self._rng.random() * (high - low))
            return value_to_digits(previous + delta)

        def _accept(candidate: tuple[int, ...] | None) -> bool:
            return candidate is not None and _in_band(digits_to_value(candidate))

        outcome = bounded_retry(_sample, _accept, self._max_delta_attempts)
        if outcome.accepted and outcome.value is not None:
            return list(outcome.value), "sampled"

        logger.debug("Delta correction found no candidate in [%s, %s]", low, high)
        return digits, "unresolved"

    def generate(self, records: Sequence[DrawRecord]) -> PredictionResult:
        if not records:
            digits = self._uniform_digits()
            return PredictionResult(
                digits=digits,
                combined_value=digits_to_value(digits),
                digit_sum=sum(digits),
                target_sum=None,
                intensity=None,
                strategy="random",
                pattern=None,
                sum_corrected=False,
                delta_adjustment="skipped",
            )

        history = _collect_history(records)
        stats = history.digit_sum.statistics
        target_sum = round_half_up((stats.avg_sum + stats.mode_sum) / 2)
        intensity = self._pick_intensity(history)

        pattern: str | None = None
        use_pattern = (
            intensity == 2
            and self._rng.random() < PATTERN_PROBABILITY
            and bool(history.duplicate_positions.pattern_details)
        )
        if use_pattern:
            digits, pattern = self._pattern_digits(history)
            strategy = "pattern"
        elif intensity == 0:
            digits = self._unique_digits(history)
            strategy = "unique"
        else:
            digits = self._duplicate_digits(history, intensity)
            strategy = "duplicate"

        sum_corrected = self._correct_sum(digits, target_sum)

        if not 0 <= sum(digits) <= MAX_DIGIT_SUM:
            digits = self._uniform_digits()

        digits, delta_adjustment = self._correct_delta(digits, history)

        return PredictionResult(
            digits=list(digits),
            combined_value=digits_to_value(digits),
            digit_sum=sum(digits),
            target_sum=target_sum,
            intensity=intensity,
            strategy=strategy,
            pattern=pattern,
            sum_corrected=sum_corrected,
            delta_adjustment=delta_adjustment,
        )


def generate_prediction(records: Sequence[DrawRecord], rng: RandomSource | None = None) -> list[int]:
    return PredictionService(rng=rng).generate(records).digits


def describe_prediction(digits: Sequence[int], records: Sequence[DrawRecord]) -> PredictionInsight:
    """How a generated draw compares with the history it was sampled from.

    The pattern marks the duplicated digit with ``O``, a second duplicated
    digit with ``A`` and everything else with ``X``.
    """

    total = len(records)
    duplicates = analyze_duplicate_patterns(records)
    dist = duplicates.duplicate_count_distribution
    ratio = duplicates.duplicate_count_ratio
    classification = classify_duplicates(digits)
    repeated = classification.duplicate_digits

    pattern: str | None = None
    bucket = classification.bucket
    pattern_count: int | None = None
    pattern_percentage: float | None = None
    digit_probability: float | None = None

    if len(repeated) == 1:
        dup = repeated[0]
        pattern = "".join("O" if d == dup else "X" for d in digits)
        ranked = duplicates.ranking_count(dup)
        if ranked and total:
            digit_probability = ranked / total * 100.0
        if bucket == 1:
            detail = analyze_duplicate_position_patterns(records).find(pattern)
            if detail is not None:
                pattern_count = detail.count
                pattern_percentage = detail.percentage
    elif len(repeated) == 2:
        first, second = repeated
        pattern = "".join("O" if d == first else "A" if d == second else "X" for d in digits)
    elif len(repeated) >= 3:
        pattern = "".join("O" if classification.digit_counts[d] >= 2 else "X" for d in digits)

    if pattern_count is None:
        key = bucket if bucket in dist else OTHER_BUCKET
        pattern_count = dist[key]
        pattern_percentage = ratio[key] * 100.0

    positions = analyze_position_frequency(records)
    probabilities = [
        (positions[i].digit_frequency.get(d, 0) / total * 100.0) if total else 0.0
        for i, d in enumerate(digits[:DIGIT_COUNT])
    ]

    avg_sum = analyze_digit_sum(records).statistics.avg_sum
    digit_sum = sum(digits)
    if digit_sum < avg_sum - SUM_ASSESSMENT_MARGIN:
        assessment = "below"
    elif digit_sum > avg_sum + SUM_ASSESSMENT_MARGIN:
        assessment = "above"
    else:
        assessment = "within"

    return PredictionInsight(
        pattern=pattern,
        pattern_count=pattern_count,
        pattern_percentage=pattern_percentage,
        digit_duplicate_probability=digit_probability,
        digit_probabilities=probabilities,
        digit_sum=digit_sum,
        avg_sum=avg_sum,
        sum_difference=digit_sum - avg_sum,
        sum_assessment=assessment,
    )
