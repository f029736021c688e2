"""tests/test_transitions.py"""
import pytest

from conftest import make_record
from pension_lottery.services.record_parser import DrawRecord
from pension_lottery.services.transition_service import (
    analyze_position_transition,
    analyze_round_comparison,
    analyze_trend,
)


class TestRoundComparison:
    def setup_method(self):
        # values 1, 5, 3, 3 -> deltas +4, -2, 0
        self.records = [
            make_record(4, "000003"),
            make_record(3, "000003"),
            make_record(2, "000005"),
            make_record(1, "000001"),
        ]
        self.analysis = analyze_round_comparison(self.records)

    def test_direction_counts(self):
        assert self.analysis.total_comparisons == 3
        assert self.analysis.increase_count == 1
        assert self.analysis.decrease_count == 1
        assert self.analysis.same_count == 1

    def test_magnitudes(self):
        assert self.analysis.avg_increase == pytest.approx(4.0)
        assert self.analysis.max_increase == 4
        assert self.analysis.avg_decrease == pytest.approx(2.0)
        assert self.analysis.max_decrease == 2
        assert self.analysis.min_change == -2
        assert self.analysis.max_change == 4
        assert self.analysis.avg_change == pytest.approx(2 / 3)

    def test_comparisons_in_round_order(self):
        deltas = [(c.previous_round, c.round_id, c.delta) for c in self.analysis.comparisons]
        assert deltas == [(1, 2, 4), (2, 3, -2), (3, 4, 0)]

    def test_input_order_does_not_matter(self):
        assert analyze_round_comparison(list(reversed(self.records))) == self.analysis

    def test_band_counts(self):
        a = self.analysis
        assert a.within_range_count + a.out_of_range_count == a.total_comparisons
        assert a.within_range_ratio + a.out_of_range_ratio == pytest.approx(1.0)
        low, high = a.effective_band()
        assert low == max(-2.0, a.lower_bound)
        assert high == min(4.0, a.upper_bound)

    def test_streaks(self):
        values = ["000001", "000002", "000003", "000004", "000001", "000001", "000001"]
        records = [make_record(i + 1, v) for i, v in enumerate(values)]
        analysis = analyze_round_comparison(records)
        assert analysis.max_increase_streak == 3
        assert analysis.max_decrease_streak == 1
        assert analysis.max_same_streak == 2

    def test_bonus_records_ignored(self):
        bonus = DrawRecord(round_id=2, group_id=1, digits=(9, 9, 9, 9, 9, 9), is_bonus=True)
        analysis = analyze_round_comparison(self.records + [bonus])
        assert analysis == self.analysis

    def test_fewer_than_two_records(self):
        analysis = analyze_round_comparison([make_record(1, "123456")])
        assert analysis.total_comparisons == 0
        assert analysis.comparisons == []
        assert analysis.std_dev == 0.0


class TestPositionTransition:
    def setup_method(self):
        self.records = [
            make_record(1, "000001"),
            make_record(2, "000005"),
            make_record(3, "000003"),
            make_record(4, "000003"),
            make_record(5, "000001"),
            make_record(6, "000003"),
        ]
        self.analysis = analyze_position_transition(self.records)

    def test_total_transitions(self):
        assert self.analysis.total_transitions == 5
        assert len(self.analysis.positions) == 6

    def test_counts_for_last_position(self):
        row = self.analysis.positions[5].transitions
        assert row[1].counts == {5: 1, 3: 1}
        assert row[3].counts == {3: 1, 1: 1}
        assert row[5].counts == {3: 1}

    def test_probabilities(self):
        assert self.analysis.probability(6, 1, 5) == pytest.approx(0.5)
        assert self.analysis.probability(6, 5, 3) == pytest.approx(1.0)
        assert self.analysis.probability(1, 0, 0) == pytest.approx(1.0)

    def test_unknown_transitions_are_zero(self):
        assert self.analysis.probability(6, 9, 9) == 0.0
        assert self.analysis.probability(6, 1, 7) == 0.0
        assert self.analysis.probability(7, 1, 1) == 0.0

    def test_probabilities_sum_to_one(self):
        for position in self.analysis.positions:
            for row in position.transitions.values():
                assert sum(row.probabilities.values()) == pytest.approx(1.0)


class TestTrend:
    def setup_method(self):
        values = ["100000", "120000", "125000", "150000", "170000", "170000", "140000"]
        self.records = [make_record(i + 1, v) for i, v in enumerate(values)]
        self.analysis = analyze_trend(list(reversed(self.records)))

    def test_labels_use_threshold(self):
        assert [p.trend for p in self.analysis.points] == [
            "stable",
            "up",
            "stable",
            "up",
            "up",
            "stable",
            "down",
        ]
        assert [p.round_id for p in self.analysis.points] == [1, 2, 3, 4, 5, 6, 7]

    def test_counts_include_first_round(self):
        assert self.analysis.up_count == 3
        assert self.analysis.down_count == 1
        assert self.analysis.stable_count == 3

    def test_change_percent(self):
        assert self.analysis.points[0].change_percent == 0.0
        assert self.analysis.points[1].change == 20000
        assert self.analysis.points[1].change_percent == pytest.approx(20.0)
        assert self.analysis.points[6].change_percent == pytest.approx(-30000 / 170000 * 100)

    def test_averages_skip_zero_changes(self):
        assert self.analysis.avg_change == pytest.approx(8000.0)
        assert self.analysis.avg_volatility == pytest.approx(20000.0)
        assert self.analysis.max_increase == 25000
        assert self.analysis.max_decrease == -30000

    def test_streaks_reset_on_stable(self):
        assert self.analysis.max_up_streak == 2
        assert self.analysis.max_down_streak == 1

    def test_lower_threshold(self):
        analysis = analyze_trend(self.records, threshold=0)
        assert analysis.up_count == 4
        assert analysis.max_up_streak == 4

    def test_previous_zero_has_zero_percent(self):
        analysis = analyze_trend([make_record(1, "000000"), make_record(2, "000005")])
        assert analysis.points[1].change == 5
        assert analysis.points[1].change_percent == 0.0
        assert analysis.points[1].trend == "stable"

    def test_bonus_records_ignored(self):
        bonus = DrawRecord(round_id=3, group_id=1, digits=(9, 9, 9, 9, 9, 9), is_bonus=True)
        assert analyze_trend(self.records + [bonus]) == analyze_trend(self.records)

    def test_empty(self):
        analysis = analyze_trend([])
        assert analysis.points == []
        assert analysis.avg_change == 0.0
        assert analysis.max_increase == 0
        assert analysis.max_up_streak == 0
