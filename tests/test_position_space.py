from types import SimpleNamespace

import pytest

from menuboard.services.positions.space import (
    MAX_POSITION,
    POSITION_GAP,
    compute_position_between,
    sanitize_position,
)


def at(position):
    return SimpleNamespace(position=position)


class TestSanitizePosition:

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf"), None, "abc"])
    def test_non_finite_or_non_numeric_becomes_zero(self, value):
        assert sanitize_position(value) == 0

    def test_negative_is_clamped(self):
        assert sanitize_position(-42) == 0
        assert sanitize_position(-0.5) == 0

    def test_fraction_is_floored(self):
        assert sanitize_position(15000.9) == 15000
        assert isinstance(sanitize_position(15000.9), int)

    def test_integer_passes_through(self):
        assert sanitize_position(20000) == 20000

    def test_numeric_string_is_accepted(self):
        assert sanitize_position("123.7") == 123

    @pytest.mark.parametrize("value", [1e12, 1e300, 10 ** 20, "9e15", MAX_POSITION + 1])
    def test_values_past_the_column_range_are_capped(self, value):
        assert sanitize_position(value) == MAX_POSITION


class TestComputePositionBetween:

    def test_midpoint_between_neighbors(self):
        assert compute_position_between(at(10000), at(20000)) == 15000

    def test_odd_gap_rounds_toward_previous(self):
        assert compute_position_between(at(10), at(13)) == 11

    def test_empty_group_gets_one_gap(self):
        # no neighbours: 0 .. 2*gap
        assert compute_position_between(None, None) == POSITION_GAP

    def test_tail_insert_leaves_a_gap_after_previous(self):
        assert compute_position_between(at(30000), None) == 30000 + POSITION_GAP

    def test_head_insert_uses_zero_as_lower_bound(self):
        assert compute_position_between(None, at(10000)) == 5000

    def test_gap_of_two_still_fits(self):
        assert compute_position_between(at(100), at(102)) == 101

    @pytest.mark.parametrize("previous, next_", [(at(100), at(101)), (at(100), at(100)), (None, at(1)), (None, at(0))])
    def test_no_room_returns_none(self, previous, next_):
        assert compute_position_between(previous, next_) is None

    def test_tail_insert_stays_inside_the_column_range(self):
        assert compute_position_between(at(MAX_POSITION - 100), None) == MAX_POSITION - 50
        assert compute_position_between(at(MAX_POSITION), None) is None
