"""
Module 03 - Frontier
Sparse set of perfect-subtree peaks keyed by power-of-two weight.

Owner: Protocol/Crypto Engineer
Module ID: M03

Appending a leaf works like incrementing a binary counter by one: while a
peak of the carried weight exists, it is merged with the carry and the
weight doubles. After n appends the weights present are exactly the set
bits of n.

Ordering rule: the existing peak holds earlier leaves and becomes the left
child; the carried subtree holds newer leaves and becomes the right child.
Putting the carried subtree on the left instead would reverse leaf order
inside every merged peak; with this rule leaves read left to right in
append order, and two appends give H(H(v1) + H(v2)).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from core.merkle.nodes import NodeArena
from core.schemas.errors import MalformedMergeException


@dataclass(frozen=True)
class MergeStep:
    """One carry: ``left`` and ``right`` combined into ``parent`` of ``weight`` leaves."""
    weight: int
    left: int
    right: int
    parent: int


def expected_weights(leaf_count: int) -> list[int]:
    """
    Powers of two in the binary representation of ``leaf_count``, ascending.

    Example:
        >>> expected_weights(5)
        [1, 4]
    """
    if leaf_count < 0:
        raise ValueError(f"Leaf count must be non-negative, got {leaf_count}")
    weights = []
    bit = 1
    while bit <= leaf_count:
        if leaf_count & bit:
            weights.append(bit)
        bit <<= 1
    return weights


class Frontier:
    """Mapping weight -> peak node index, at most one peak per weight."""

    def __init__(self, peaks: dict[int, int] | None = None) -> None:
        self._peaks: dict[int, int] = dict(peaks or {})

    def __len__(self) -> int:
        return len(self._peaks)

    def __contains__(self, weight: object) -> bool:
        return weight in self._peaks

    def __iter__(self) -> Iterator[int]:
        return iter(self.weights())

    def __getitem__(self, weight: int) -> int:
        return self._peaks[weight]

    def copy(self) -> "Frontier":
        return Frontier(self._peaks)

    def weights(self) -> list[int]:
        """Weights present, ascending."""
        return sorted(self._peaks)

    def peaks(self) -> list[int]:
        """Peak node indices, ascending by weight."""
        return [self._peaks[w] for w in self.weights()]

    def merge(self, arena: NodeArena, leaf: int) -> list[MergeStep]:
        """
        Fold a new leaf into the frontier by carry propagation.

        Args:
            arena: Arena owning the leaf and every peak
            leaf: Index of the freshly built leaf

        Returns:
            The carries performed, smallest weight first
        """
        combine = leaf
        weight = 1
        steps: list[MergeStep] = []

        while weight in self._peaks:
            earlier = self._peaks.pop(weight)
            parent = arena.make_internal(earlier, combine)
            weight *= 2
            steps.append(MergeStep(weight=weight, left=earlier, right=combine, parent=parent))
            combine = parent

        self._peaks[weight] = combine
        return steps

    def check_invariant(self, leaf_count: int) -> None:
        """
        Raise MalformedMergeException unless the weights match ``leaf_count``'s bits.
        """
        expected = expected_weights(leaf_count)
        actual = self.weights()
        if actual != expected:
            raise MalformedMergeException(
                f"Frontier weights {actual} do not match leaf count {leaf_count}",
                details={"expected": expected, "actual": actual, "leaf_count": leaf_count},
            )


__all__ = [
    "Frontier",
    "MergeStep",
    "expected_weights",
]
