"""
Module 03 - Frontier Unit Tests
Tests for core/merkle/frontier.py

Tests:
- expected_weights matches the binary representation
- carry propagation and child ordering
- invariant check
"""
import pytest

from core.crypto.hashing import sha256
from core.merkle.frontier import Frontier, expected_weights
from core.merkle.nodes import NodeArena
from core.schemas.errors import MalformedMergeException


class TestExpectedWeights:
    """Tests for expected_weights()."""

    @pytest.mark.parametrize(
        "count, weights",
        [
            (0, []),
            (1, [1]),
            (2, [2]),
            (3, [1, 2]),
            (4, [4]),
            (5, [1, 4]),
            (6, [2, 4]),
            (7, [1, 2, 4]),
            (12, [4, 8]),
        ],
    )
    def test_known_counts(self, count, weights):
        assert expected_weights(count) == weights

    def test_weights_sum_to_count(self):
        for n in range(200):
            assert sum(expected_weights(n)) == n

    def test_negative_count_raises(self):
        with pytest.raises(ValueError, match="non-negative"):
            expected_weights(-1)


class TestMerge:
    """Tests for Frontier.merge()."""

    def test_first_leaf_has_no_carry(self):
        arena = NodeArena()
        frontier = Frontier()
        leaf = arena.make_leaf(b"1 transaction")

        steps = frontier.merge(arena, leaf)

        assert steps == []
        assert frontier.weights() == [1]
        assert frontier[1] == leaf

    def test_second_leaf_carries_with_earlier_on_left(self):
        arena = NodeArena()
        frontier = Frontier()
        first = arena.make_leaf(b"1 transaction")
        second = arena.make_leaf(b"2 transaction")
        frontier.merge(arena, first)

        steps = frontier.merge(arena, second)

        assert len(steps) == 1
        step = steps[0]
        assert step.weight == 2
        assert step.left == first
        assert step.right == second
        assert frontier.weights() == [2]
        assert frontier[2] == step.parent
        assert arena.digest_of(step.parent) == sha256(
            sha256(b"1 transaction") + sha256(b"2 transaction")
        )

    def test_fourth_leaf_carries_twice(self):
        arena = NodeArena()
        frontier = Frontier()
        leaves = [arena.make_leaf(f"{i} transaction".encode()) for i in range(1, 5)]
        for leaf in leaves[:3]:
            frontier.merge(arena, leaf)

        steps = frontier.merge(arena, leaves[3])

        assert [s.weight for s in steps] == [2, 4]
        assert steps[0].left == leaves[2]
        assert steps[0].right == leaves[3]
        assert steps[1].right == steps[0].parent
        assert frontier.weights() == [4]

    def test_peaks_are_ascending_by_weight(self):
        arena = NodeArena()
        frontier = Frontier()
        for i in range(7):
            frontier.merge(arena, arena.make_leaf(bytes([i])))

        assert frontier.weights() == [1, 2, 4]
        assert frontier.peaks() == [frontier[1], frontier[2], frontier[4]]
        assert list(frontier) == [1, 2, 4]
        assert len(frontier) == 3
        assert 2 in frontier
        assert 8 not in frontier

    def test_copy_is_independent(self):
        arena = NodeArena()
        frontier = Frontier()
        frontier.merge(arena, arena.make_leaf(b"a"))

        snapshot = frontier.copy()
        frontier.merge(arena, arena.make_leaf(b"b"))

        assert snapshot.weights() == [1]
        assert frontier.weights() == [2]


class TestInvariant:
    """Tests for Frontier.check_invariant()."""

    def test_invariant_holds_while_merging(self):
        arena = NodeArena()
        frontier = Frontier()
        for n in range(1, 70):
            frontier.merge(arena, arena.make_leaf(n.to_bytes(2, "big")))
            frontier.check_invariant(n)

    def test_invariant_mismatch_raises(self):
        arena = NodeArena()
        frontier = Frontier()
        frontier.merge(arena, arena.make_leaf(b"a"))

        with pytest.raises(MalformedMergeException) as exc_info:
            frontier.check_invariant(2)
        assert exc_info.value.details["expected"] == [2]
        assert exc_info.value.details["actual"] == [1]
