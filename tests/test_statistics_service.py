"""tests/test_statistics_service.py"""
import math

import pytest

from conftest import ConstantRandom, make_record
from pension_lottery.services.analysis_service import chronological_numbers
from pension_lottery.services.statistics_service import (
    analyze_distribution,
    analyze_numbers,
    analyze_patterns,
    calculate_statistics,
    get_digits,
    is_prime,
    predict_next,
)


class TestCalculateStatistics:
    def setup_method(self):
        self.stats = calculate_statistics([1, 2, 3, 4, 100])

    def test_central_values(self):
        assert self.stats.mean == pytest.approx(22.0)
        assert self.stats.median == 3
        assert self.stats.range == 99

    def test_mode_tie_goes_to_smallest(self):
        assert self.stats.mode == 1
        assert calculate_statistics([5, 5, 3, 3, 9]).mode == 3

    def test_population_standard_deviation(self):
        assert self.stats.standard_deviation == pytest.approx(math.sqrt(1522.0))

    def test_bounds_and_outliers(self):
        assert self.stats.lower_bound == pytest.approx(22.0 - 1.5 * math.sqrt(1522.0))
        assert self.stats.upper_bound == pytest.approx(22.0 + 1.5 * math.sqrt(1522.0))
        assert self.stats.above_upper_bound_count == 1
        assert self.stats.below_lower_bound_count == 0
        assert self.stats.out_of_range_count == 1
        assert self.stats.out_of_range_ratio == pytest.approx(0.2)

    def test_out_of_range_is_above_plus_below(self):
        stats = calculate_statistics([-500, 1, 2, 3, 4, 5, 500])
        assert stats.out_of_range_count == stats.above_upper_bound_count + stats.below_lower_bound_count
        assert stats.below_lower_bound_count == 1
        assert stats.above_upper_bound_count == 1

    def test_even_median(self):
        assert calculate_statistics([4, 1, 3, 2]).median == pytest.approx(2.5)

    def test_invalid_entries_skipped_but_counted_in_ratios(self):
        stats = calculate_statistics([1, "x", None, float("nan"), 3, True])
        assert stats.mean == pytest.approx(2.0)
        assert stats.out_of_range_count == 0
        assert stats.out_of_range_ratio == 0.0

    def test_empty(self):
        stats = calculate_statistics([])
        assert stats.mean == 0.0
        assert stats.standard_deviation == 0.0
        assert stats.out_of_range_ratio == 0.0


class TestDistribution:
    def test_even_odd_ratio_none_without_odd(self):
        assert analyze_distribution([2, 4, 6]).even_odd_ratio is None

    def test_counts(self):
        dist = analyze_distribution([2, 3, 10])
        assert dist.even_odd_ratio == pytest.approx(2.0)
        assert dist.prime_count == 2
        assert dist.digit_frequency == {2: 1, 3: 1, 1: 1, 0: 1}


class TestPatterns:
    def test_ascending_and_consecutive(self):
        patterns = analyze_patterns([123456])
        assert patterns.ascending_sequence is True
        assert patterns.descending_sequence is False
        assert patterns.consecutive_digits == 5
        assert patterns.repeated_digits == 0

    def test_repeated_digits_counts_numbers(self):
        patterns = analyze_patterns([112, 345, 990])
        assert patterns.repeated_digits == 2
        assert patterns.descending_sequence is False

    def test_descending_any(self):
        assert analyze_patterns([135, 975]).descending_sequence is True


class TestPredictNext:
    def test_too_few_values_is_random(self):
        prediction = predict_next([100], ConstantRandom(0.5))
        assert prediction.next_number == 500_000
        assert prediction.confidence == pytest.approx(0.1)
        assert prediction.trend == "stable"

    def test_increasing(self):
        prediction = predict_next([0, 5000, 10000])
        assert prediction.trend == "increasing"
        assert prediction.next_number == 15000
        assert prediction.confidence == pytest.approx(0.9)

    def test_decreasing_clamps_at_zero(self):
        prediction = predict_next([10000, 5000])
        assert prediction.trend == "decreasing"
        assert prediction.next_number == 0

    def test_clamps_at_ceiling(self):
        assert predict_next([990_000, 999_000]).next_number == 999_999

    def test_stable_small_changes(self):
        prediction = predict_next([500, 700, 600])
        assert prediction.trend == "stable"
        assert prediction.next_number == 650

    def test_only_last_ten_values_used(self):
        values = [0, 900_000] + [100 * i for i in range(10)]
        assert predict_next(values).next_number == 1000

    def test_noisy_changes_lower_confidence(self):
        prediction = predict_next([0, 900_000, 0, 900_000])
        assert 0.1 <= prediction.confidence <= 0.9
        assert prediction.confidence == pytest.approx(0.1)


class TestHelpers:
    def test_is_prime(self):
        assert is_prime(2)
        assert is_prime(97)
        assert not is_prime(1)
        assert not is_prime(91)
        assert not is_prime(2.5)

    def test_get_digits(self):
        assert get_digits(94678) == [9, 4, 6, 7, 8]
        assert get_digits(12.0) == [1, 2]

    def test_analyze_numbers_input_is_last_value(self):
        analysis = analyze_numbers([10, 20, 30])
        assert analysis.input == 30
        assert analysis.statistics.mean == pytest.approx(20.0)


class TestChronologicalNumbers:
    def test_newest_first_input_is_reversed(self):
        records = [make_record(3, "000300"), make_record(2, "000200"), make_record(1, "000100")]
        assert chronological_numbers(records) == [100, 200, 300]

    def test_unordered_input_is_sorted_by_round(self):
        records = [make_record(2, "000200"), make_record(3, "000300"), make_record(1, "000100")]
        assert chronological_numbers(records) == [100, 200, 300]
