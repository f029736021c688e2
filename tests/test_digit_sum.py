"""tests/test_digit_sum.py"""
import pytest

from conftest import make_record
from pension_lottery.services.digit_sum_service import analyze_digit_sum


class TestDigitSum:
    def setup_method(self):
        # sums: 15, 15, 21, 21, 3
        self.records = [
            make_record(1, "123450"),
            make_record(2, "555000"),
            make_record(3, "123456"),
            make_record(4, "777000"),
            make_record(5, "000111"),
        ]
        self.analysis = analyze_digit_sum(self.records)

    def test_distribution(self):
        assert self.analysis.total_records == 5
        assert self.analysis.sum_distribution == {3: 1, 15: 2, 21: 2}

    def test_statistics(self):
        stats = self.analysis.statistics
        assert stats.avg_sum == pytest.approx(15.0)
        assert stats.median_sum == 15
        assert stats.mode_sum == 15
        assert stats.min_sum == 3
        assert stats.max_sum == 21

    def test_digit_parity_percentages(self):
        even = sum(1 for r in self.records for d in r.digits if d % 2 == 0)
        assert self.analysis.even_digit_ratio == pytest.approx(even / 30 * 100)
        assert self.analysis.even_digit_ratio + self.analysis.odd_digit_ratio == pytest.approx(100.0)

    def test_empty(self):
        analysis = analyze_digit_sum([])
        assert analysis.total_records == 0
        assert analysis.statistics.avg_sum == 0.0
        assert analysis.sum_distribution == {}
