"""Builds the full analysis snapshot for a record collection."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy.orm import Session

from pension_lottery.services.digit_sum_service import DigitSumAnalysis, analyze_digit_sum
from pension_lottery.services.duplicate_pattern_service import (
    DuplicateFrequencyAnalysis,
    DuplicatePatternAnalysis,
    DuplicatePositionAnalysis,
    analyze_duplicate_frequency,
    analyze_duplicate_patterns,
    analyze_duplicate_position_patterns,
)
from pension_lottery.services.lottery_data_service import LotteryDataService, RecordFilter
from pension_lottery.services.position_frequency_service import PositionFrequency, analyze_position_frequency
from pension_lottery.services.record_parser import DataSummary, DrawRecord, extract_numbers, get_data_statistics
from pension_lottery.services.sampling import RandomSource
from pension_lottery.services.statistics_service import NumberAnalysis, analyze_numbers
from pension_lottery.services.transition_service import (
    PositionTransitionAnalysis,
    RoundComparisonAnalysis,
    TrendAnalysis,
    analyze_position_transition,
    analyze_round_comparison,
    analyze_trend,
)


@dataclass(frozen=True)
class AnalysisSnapshot:
    total_records: int
    summary: DataSummary
    numbers: NumberAnalysis
    positions: list[PositionFrequency]
    digit_sum: DigitSumAnalysis
    duplicates: DuplicatePatternAnalysis
    duplicate_positions: DuplicatePositionAnalysis
    duplicate_frequency: DuplicateFrequencyAnalysis
    comparison: RoundComparisonAnalysis
    trend: TrendAnalysis
    transitions: PositionTransitionAnalysis


def chronological_numbers(records: Sequence[DrawRecord]) -> list[int]:
    """Combined values oldest round first (bonus values follow their round).

    Storage keeps rounds newest first; this series is reversed on purpose so
    the trend and ``predict_next`` extrapolate forward in time.
    """

    return extract_numbers(sorted(records, key=lambda r: r.round_id))


def build_snapshot(records: Sequence[DrawRecord], rng: RandomSource | None = None) -> AnalysisSnapshot:
    """Run every analyzer over ``records``. Nothing is cached between calls."""

    return AnalysisSnapshot(
        total_records=len(records),
        summary=get_data_statistics(records),
        numbers=analyze_numbers(chronological_numbers(records), rng),
        positions=analyze_position_frequency(records),
        digit_sum=analyze_digit_sum(records),
        duplicates=analyze_duplicate_patterns(records),
        duplicate_positions=analyze_duplicate_position_patterns(records),
        duplicate_frequency=analyze_duplicate_frequency(records),
        comparison=analyze_round_comparison(records),
        trend=analyze_trend(records),
        transitions=analyze_position_transition(records),
    )


class AnalysisService:
    """Load the current collection and analyze it from scratch."""

    def __init__(self, data_service: LotteryDataService) -> None:
        self._data = data_service

    def records(self, session: Session | None, record_filter: RecordFilter | None = None) -> list[DrawRecord]:
        return self._data.load_records(session, record_filter)

    def snapshot(self, session: Session | None, record_filter: RecordFilter | None = None) -> AnalysisSnapshot:
        return build_snapshot(self.records(session, record_filter))
