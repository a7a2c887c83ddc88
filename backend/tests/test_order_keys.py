"""
TaskBoard Backend — Order Key Arithmetic Tests
================================================

What we test:
    ✅ append: first key 1000, then last + 1000
    ✅ between: midpoint, open ends, strictly inside the interval
    ✅ between rejects empty and inverted ranges and non-finite keys
    ✅ too_close: relative threshold, open ends
    ✅ integer strategy: gap 1, renumbering required when no integer fits
"""

import math
import random

import pytest

from taskboard.exceptions import InvalidRangeError, RebalanceRequiredError
from taskboard.services import order_keys
from taskboard.services.order_keys import (
    FractionalKeyStrategy,
    IntegerKeyStrategy,
    is_strictly_ascending,
)


class TestAppend:

    def test_first_key_in_empty_scope(self):
        assert order_keys.append(None) == 1000.0

    def test_append_after_last(self):
        assert order_keys.append(5000) == 6000.0

    def test_custom_gap(self):
        assert FractionalKeyStrategy(gap=10).append(30) == 40.0

    def test_non_positive_gap_rejected(self):
        with pytest.raises(ValueError):
            FractionalKeyStrategy(gap=0)


class TestBetween:

    def test_midpoint(self):
        assert order_keys.between(1000, 2000) == 1500.0

    def test_prepend_halves_first_key(self):
        assert order_keys.between(None, 1000) == 500.0

    def test_prepend_before_non_positive_key_steps_down(self):
        assert order_keys.between(None, 0) == -1000.0
        assert order_keys.between(None, -500) == -1500.0

    def test_append_adds_gap(self):
        assert order_keys.between(3000, None) == 4000.0

    def test_both_open_gives_initial_key(self):
        assert order_keys.between(None, None) == 1000.0

    def test_equal_neighbours_rejected(self):
        with pytest.raises(InvalidRangeError):
            order_keys.between(1000, 1000)

    def test_inverted_neighbours_rejected(self):
        with pytest.raises(InvalidRangeError) as exc_info:
            order_keys.between(2000, 1000)
        assert exc_info.value.error_code == "invalid_range"

    @pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
    def test_non_finite_keys_rejected(self, bad):
        with pytest.raises(InvalidRangeError):
            order_keys.between(bad, 1000)
        with pytest.raises(InvalidRangeError):
            order_keys.between(1000, bad)

    def test_result_strictly_inside_interval(self):
        rng = random.Random(7)
        for _ in range(500):
            low = rng.uniform(-1e6, 1e6)
            high = low + rng.uniform(1e-3, 1e6)
            key = order_keys.between(low, high)
            assert low < key < high

    def test_repeated_halving_stays_ordered_until_too_close(self):
        low, high = 1000.0, 2000.0
        while not order_keys.too_close(low, high):
            mid = order_keys.between(low, high)
            assert low < mid < high
            high = mid


class TestTooClose:

    def test_neighbours_far_apart(self):
        assert not order_keys.too_close(1000, 2000)

    def test_tiny_interval_is_too_close(self):
        assert order_keys.too_close(1000, 1000.0000000001)

    def test_threshold_is_relative_to_magnitude(self):
        # 1e-7 apart: plenty of room near zero, exhausted near 1e9
        assert not order_keys.too_close(0.5, 0.5 + 1e-7)
        assert order_keys.too_close(1e9, 1e9 + 1e-7)

    def test_open_high_end_always_has_room(self):
        assert not order_keys.too_close(1e12, None)

    def test_open_low_end_measured_from_zero(self):
        assert not order_keys.too_close(None, 1000)
        assert order_keys.too_close(None, 1e-10)

    def test_open_low_end_before_non_positive_key(self):
        assert not order_keys.too_close(None, -5)


class TestIntegerKeys:

    def setup_method(self):
        self.keys = IntegerKeyStrategy()

    def test_append(self):
        assert self.keys.append(None) == 1
        assert self.keys.append(3) == 4

    def test_nth(self):
        assert [self.keys.nth(i) for i in range(3)] == [1, 2, 3]

    def test_between_with_room(self):
        assert self.keys.between(1, 5) == 3

    def test_adjacent_keys_need_renumbering(self):
        assert self.keys.too_close(2, 3)
        with pytest.raises(RebalanceRequiredError):
            self.keys.between(2, 3)

    def test_gap_of_two_still_fits(self):
        assert not self.keys.too_close(2, 4)
        assert self.keys.between(2, 4) == 3

    def test_open_ends(self):
        assert self.keys.between(None, 4) == 2
        assert self.keys.between(None, 1) == 0
        assert self.keys.between(7, None) == 8
        assert not self.keys.too_close(None, 1)


def test_is_strictly_ascending():
    assert is_strictly_ascending([])
    assert is_strictly_ascending([1000, 2000, 2500])
    assert not is_strictly_ascending([1000, 1000])
    assert not is_strictly_ascending([2000, 1000])
