"""tests/test_duplicate_patterns.py"""
import pytest

from conftest import make_record
from pension_lottery.services.duplicate_pattern_service import (
    OTHER_BUCKET,
    analyze_duplicate_frequency,
    analyze_duplicate_patterns,
    analyze_duplicate_position_patterns,
    classify_duplicates,
    duplication_intensity,
)


class TestClassifyDuplicates:
    @pytest.mark.parametrize(
        "digits, bucket",
        [
            ((1, 2, 3, 4, 5, 6), 0),
            ((1, 1, 2, 3, 4, 5), 1),
            ((1, 1, 2, 2, 3, 4), 2),
            ((1, 1, 1, 2, 3, 4), OTHER_BUCKET),
            ((1, 1, 2, 2, 3, 3), OTHER_BUCKET),
            ((1, 1, 1, 2, 2, 2), OTHER_BUCKET),
            ((1, 1, 1, 2, 2, 3), 2),
            ((7, 7, 7, 7, 7, 7), OTHER_BUCKET),
        ],
    )
    def test_buckets(self, digits, bucket):
        assert classify_duplicates(digits).bucket == bucket

    def test_single_duplicate_pattern(self):
        result = classify_duplicates((1, 1, 2, 3, 4, 5))
        assert result.duplicated_digit == 1
        assert result.pattern == "OOXXXX"

    def test_pattern_marks_separated_positions(self):
        assert classify_duplicates((9, 0, 1, 2, 3, 9)).pattern == "OXXXXO"

    def test_no_pattern_outside_single_bucket(self):
        assert classify_duplicates((1, 1, 2, 2, 3, 4)).pattern is None
        assert classify_duplicates((1, 2, 3, 4, 5, 6)).duplicated_digit is None


class TestIntensity:
    def test_levels(self):
        assert duplication_intensity((1, 2, 3, 4, 5, 6)) == 0
        assert duplication_intensity((1, 1, 2, 2, 3, 4)) == 2
        assert duplication_intensity((3, 3, 3, 3, 1, 2)) == 4
        assert duplication_intensity((7, 7, 7, 7, 7, 7)) == 6


class TestAnalyses:
    def setup_method(self):
        self.records = [
            make_record(1, "112345"),
            make_record(2, "123456"),
            make_record(3, "331245"),
            make_record(4, "112233"),
            make_record(5, "111234"),
            make_record(6, "012345"),
            make_record(7, "113456"),
        ]

    def test_bucket_distribution(self):
        analysis = analyze_duplicate_patterns(self.records)
        assert analysis.total_records == 7
        assert analysis.duplicate_count_distribution == {OTHER_BUCKET: 2, 0: 2, 1: 3, 2: 0}
        assert analysis.duplicate_count_ratio[1] == pytest.approx(3 / 7)
        assert sum(analysis.duplicate_count_distribution.values()) == 7

    def test_single_duplicate_ranking(self):
        analysis = analyze_duplicate_patterns(self.records)
        assert [(r.digit, r.count) for r in analysis.single_duplicate_digit_ranking] == [(1, 2), (3, 1)]
        assert analysis.ranking_count(1) == 2
        assert analysis.ranking_count(9) == 0

    def test_position_patterns(self):
        analysis = analyze_duplicate_position_patterns(self.records)
        assert analysis.total_single_duplicates == 3
        detail = analysis.find("OOXXXX")
        assert detail is not None
        assert detail.count == 3
        assert detail.percentage == pytest.approx(100.0)
        assert detail.examples == [1, 3, 7]

    def test_examples_capped_at_five(self):
        records = [make_record(i, "110234") for i in range(1, 9)]
        detail = analyze_duplicate_position_patterns(records).find("OOXXXX")
        assert detail.count == 8
        assert detail.examples == [1, 2, 3, 4, 5]

    def test_frequency_distribution(self):
        analysis = analyze_duplicate_frequency(self.records)
        assert analysis.distribution == {0: 2, 2: 4, 3: 1, 4: 0, 5: 0, 6: 0}
        assert sum(analysis.ratio.values()) == pytest.approx(1.0)

    def test_empty(self):
        analysis = analyze_duplicate_patterns([])
        assert analysis.duplicate_count_ratio[0] == 0.0
        assert analysis.single_duplicate_digit_ranking == []
