"""tests/test_sampling.py"""
import pytest

from conftest import ConstantRandom
from pension_lottery.services.sampling import (
    bounded_retry,
    round_half_up,
    sample_distinct,
    uniform_choice,
    uniform_index,
    weighted_choice,
)


class TestWeightedChoice:
    def test_low_draw_picks_first(self):
        assert weighted_choice([("a", 1), ("b", 3)], ConstantRandom(0.1)) == "a"

    def test_high_draw_picks_second(self):
        assert weighted_choice([("a", 1), ("b", 3)], ConstantRandom(0.5)) == "b"

    def test_zero_weight_never_picked(self):
        for value in (0.0, 0.5, 0.999):
            assert weighted_choice([("a", 0), ("b", 2), ("c", 0)], ConstantRandom(value)) == "b"

    def test_all_zero_weights_fall_back_to_uniform(self):
        candidates = [("a", 0), ("b", 0), ("c", 0)]
        assert weighted_choice(candidates, ConstantRandom(0.0)) == "a"
        assert weighted_choice(candidates, ConstantRandom(0.99)) == "c"

    def test_empty_raises(self):
        with pytest.raises(ValueError):
            weighted_choice([], ConstantRandom(0.5))

    def test_draw_near_one_stays_in_bounds(self):
        assert weighted_choice([("a", 1), ("b", 1)], ConstantRandom(0.9999999999999999)) == "b"


class TestUniform:
    def test_uniform_index_clamps(self):
        assert uniform_index(10, ConstantRandom(0.9999999999999999)) == 9
        assert uniform_index(10, ConstantRandom(0.0)) == 0

    def test_uniform_index_rejects_empty(self):
        with pytest.raises(ValueError):
            uniform_index(0, ConstantRandom(0.5))

    def test_uniform_choice(self):
        assert uniform_choice(["x", "y", "z", "w"], ConstantRandom(0.5)) == "z"

    def test_sample_distinct(self):
        picked = sample_distinct(range(6), 4, ConstantRandom(0.0))
        assert picked == [0, 1, 2, 3]
        assert len(set(sample_distinct(range(6), 6, ConstantRandom(0.7)))) == 6

    def test_sample_distinct_too_many(self):
        with pytest.raises(ValueError):
            sample_distinct([1, 2], 3, ConstantRandom(0.5))


class TestBoundedRetry:
    def test_stops_at_first_accepted(self):
        calls = []

        def generate():
            calls.append(1)
            return len(calls)

        outcome = bounded_retry(generate, lambda v: v == 3, max_attempts=10)
        assert outcome.accepted is True
        assert outcome.value == 3
        assert outcome.attempts == 3
        assert len(calls) == 3

    def test_gives_up_after_budget(self):
        calls = []

        def generate():
            calls.append(1)
            return len(calls)

        outcome = bounded_retry(generate, lambda v: False, max_attempts=5)
        assert outcome.accepted is False
        assert outcome.value == 5
        assert outcome.attempts == 5
        assert len(calls) == 5

    def test_zero_budget(self):
        outcome = bounded_retry(lambda: 1, lambda v: True, max_attempts=0)
        assert outcome.accepted is False
        assert outcome.value is None


class TestRoundHalfUp:
    def test_halves_round_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(-2.5) == -2
        assert round_half_up(1.49) == 1
        assert round_half_up(-1.51) == -2
