"""Tests for the Sink and custom-array parsing."""

import pytest

from algorithms.errors import InvalidInput
from algorithms.operation import compare, mark_final, overwrite, swap
from sink import Sink, parse_custom_array
from sink.sink import NO_HIGHLIGHT


class TestParseCustomArray:
    """Tests for turning user text into values."""

    def test_comma_separated_with_spaces(self):
        assert parse_custom_array("50, 20 ,80,10") == [50, 20, 80, 10]

    def test_sequence_input(self):
        assert parse_custom_array([3, "4", 5]) == [3, 4, 5]

    @pytest.mark.parametrize("text", ["", "   ", "1,,2", "1,abc", "1.5,2", "0,1", "3,-2"])
    def test_rejects_bad_input(self, text):
        with pytest.raises(InvalidInput):
            parse_custom_array(text)

    def test_rejects_booleans(self):
        with pytest.raises(InvalidInput):
            parse_custom_array([True, 2])

    def test_rejects_empty_sequence(self):
        with pytest.raises(InvalidInput):
            parse_custom_array([])

    @pytest.mark.parametrize("values", [5, None, {"a": 1}, 2.5])
    def test_rejects_non_sequence_input(self, values):
        with pytest.raises(InvalidInput):
            parse_custom_array(values)


class TestArraySource:
    """Tests for loading and generating arrays."""

    def test_custom_load_sets_original(self):
        sink = Sink()
        sink.load_custom_array("4,2,9")

        assert sink.current == [4, 2, 9]
        assert sink.original == [4, 2, 9]

    def test_failed_load_keeps_previous_array(self):
        sink = Sink([1, 2, 3])

        with pytest.raises(InvalidInput):
            sink.load_custom_array("1,x")

        assert sink.current == [1, 2, 3]

    def test_random_values_in_range(self):
        sink = Sink()
        values = sink.generate_random(300, seed=11)

        assert len(values) == 300
        assert all(5 <= v < 405 for v in values)
        assert sink.original == values

    def test_random_is_reproducible_with_seed(self):
        assert Sink().generate_random(50, seed=3) == Sink().generate_random(50, seed=3)

    def test_random_custom_bounds(self):
        values = Sink().generate_random(40, max_value=3, min_value=1, seed=0)

        assert set(values) <= {1, 2}

    @pytest.mark.parametrize("size", [0, -5])
    def test_random_rejects_bad_size(self, size):
        with pytest.raises(InvalidInput):
            Sink().generate_random(size)

    def test_random_rejects_empty_range(self):
        with pytest.raises(InvalidInput):
            Sink().generate_random(10, max_value=5, min_value=5)


class TestApply:
    """Tests for applying operations to the display array."""

    def test_compare_highlights_without_mutating(self, sink):
        sink.apply(compare(0, 2))

        assert sink.current == [5, 3, 8, 1]
        assert (sink.highlight_a, sink.highlight_b) == (0, 2)

    def test_swap(self, sink):
        sink.apply(swap(0, 3))

        assert sink.current == [1, 3, 8, 5]
        assert (sink.highlight_a, sink.highlight_b) == (0, 3)

    def test_overwrite_single_highlight(self, sink):
        sink.apply(overwrite(1, 99))

        assert sink.current == [5, 99, 8, 1]
        assert (sink.highlight_a, sink.highlight_b) == (1, NO_HIGHLIGHT)

    def test_mark_final(self, sink):
        sink.apply(mark_final(3))

        assert sink.marked == {3}
        assert (sink.highlight_a, sink.highlight_b) == (3, NO_HIGHLIGHT)

    def test_original_survives_apply(self, sink):
        sink.apply(swap(0, 1))

        assert sink.original == [5, 3, 8, 1]


class TestReset:
    """Tests for reset and highlight clearing."""

    def test_reset_to_original(self, sink):
        sink.apply(swap(0, 1))
        sink.apply(mark_final(1))
        sink.reset_to_original()

        assert sink.current == [5, 3, 8, 1]
        assert sink.marked == set()
        assert sink.highlight_a == NO_HIGHLIGHT

    def test_reset_highlights_keeps_data(self, sink):
        sink.apply(swap(0, 1))
        sink.apply(mark_final(0))
        sink.reset_highlights()

        assert sink.current == [3, 5, 8, 1]
        assert sink.marked == set()
        assert (sink.highlight_a, sink.highlight_b) == (NO_HIGHLIGHT, NO_HIGHLIGHT)


class TestReadOnlyAccess:
    """Snapshots and copies never alias the live array."""

    def test_snapshot_is_detached(self, sink):
        snap = sink.snapshot()
        sink.apply(swap(0, 1))

        assert snap.array == (5, 3, 8, 1)

    def test_array_copy_is_detached(self, sink):
        working = sink.array_copy()
        working[0] = 1000

        assert sink.current[0] == 5

    def test_to_dict(self, sink):
        sink.apply(mark_final(3))
        sink.apply(mark_final(2))
        data = sink.to_dict()

        assert data["array"] == [5, 3, 8, 1]
        assert data["original"] == [5, 3, 8, 1]
        assert data["marked"] == [2, 3]
        assert data["highlight_a"] == 2

    def test_len(self, sink):
        assert len(sink) == 4
