"""Tests for the operation model and log replay."""

import dataclasses

import pytest

from algorithms.operation import (
    OpType,
    Operation,
    compare,
    count_by_type,
    mark_final,
    overwrite,
    replay,
    swap,
)


class TestConstructors:
    """Tests for the operation constructors."""

    def test_compare_carries_both_indices(self):
        """compare(i, j) records i and j and no value."""
        op = compare(2, 5)

        assert op.type == OpType.COMPARE
        assert (op.i, op.j, op.value) == (2, 5, 0)

    def test_overwrite_carries_value(self):
        """overwrite(i, v) has no secondary index."""
        op = overwrite(3, 42)

        assert op.type == OpType.OVERWRITE
        assert op.i == 3
        assert op.j == -1
        assert op.value == 42

    def test_operations_are_immutable(self):
        """A recorded operation cannot be edited after the fact."""
        op = swap(0, 1)

        with pytest.raises(dataclasses.FrozenInstanceError):
            op.i = 4

    def test_equal_operations_compare_equal(self):
        """Operations are plain values."""
        assert mark_final(1) == Operation(OpType.MARK_FINAL, 1)
        assert swap(0, 1) != swap(1, 0)


class TestToDict:
    """Tests for the JSON form of an operation."""

    def test_swap_includes_j(self):
        assert swap(1, 2).to_dict() == {"type": "swap", "i": 1, "j": 2}

    def test_overwrite_includes_value(self):
        assert overwrite(0, 9).to_dict() == {"type": "overwrite", "i": 0, "value": 9}

    def test_mark_final_is_index_only(self):
        assert mark_final(4).to_dict() == {"type": "mark_final", "i": 4}


class TestReplay:
    """Tests for replaying a log against an array."""

    def test_compare_and_mark_do_not_mutate(self):
        """Only SWAP and OVERWRITE change data."""
        log = (compare(0, 1), mark_final(0), mark_final(1))

        assert replay([2, 1], log) == [2, 1]

    def test_swap_then_overwrite(self):
        """Operations apply strictly in order."""
        log = (swap(0, 2), overwrite(1, 7))

        assert replay([1, 2, 3], log) == [3, 7, 1]

    def test_replay_does_not_touch_input(self):
        """replay works on a copy."""
        values = [2, 1]
        replay(values, (swap(0, 1),))

        assert values == [2, 1]

    def test_count_by_type_includes_zero_counts(self):
        """Every OpType is present in the counts, even if unused."""
        counts = count_by_type((compare(0, 1), compare(1, 2), swap(0, 1)))

        assert counts[OpType.COMPARE] == 2
        assert counts[OpType.SWAP] == 1
        assert counts[OpType.OVERWRITE] == 0
        assert counts[OpType.MARK_FINAL] == 0
