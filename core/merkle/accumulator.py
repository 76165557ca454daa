"""
Module 03 - Streaming Merkle Accumulator
Append-only Merkle accumulator with current-root inclusion proofs.

Owner: Protocol/Crypto Engineer
Module ID: M03

This module provides:
- StreamingMerkleAccumulator: append values, read the root, prove inclusion
- LonePeakPolicy: how root rebuild treats an unpaired peak

Append Algorithm:
1. Build a leaf: digest = H(value)
2. Merge it into the frontier by carry propagation (see frontier.py)
3. Rebuild the root from the frontier peaks, ascending by weight:
   pair level[0] with level[1], level[2] with level[3], ...
   An unpaired last element is either promoted unchanged (default) or
   wrapped against the empty-sibling digest H(b"")
4. Swap the new frontier and root in together

Steps 1-3 run inside an arena transaction. If any of them raises, every
parent link they rewrote is restored and every node they created is
released, so earlier handles keep proving against the unchanged root.

Proof Validity:
- Proofs are generated against the current root only
- Rebuild wrappers from the previous append are released when the next
  append commits, so handles to them raise UnreachableNodeException
- Leaf handles stay valid: every rebuild re-parents every peak

Not thread-safe. A single writer must serialize append(); generate_proof()
must not run concurrently with append().
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Optional

from core.crypto.hashing import HashFunction, digest_size, get_hash_function, sha256, to_hex
from core.merkle.events import EventSink, LoggingEventSink, MergeEvent, RootRebuiltEvent
from core.merkle.frontier import Frontier, MergeStep
from core.merkle.merkle_proofs import InclusionProof, ProofStep
from core.merkle.nodes import LeafNode, NodeArena, NodeHandle
from core.schemas.errors import (
    EmptyTreeException,
    MalformedMergeException,
    UnreachableNodeException,
)

if TYPE_CHECKING:
    from core.config.runtime import RuntimeConfig


logger = logging.getLogger(__name__)


class LonePeakPolicy(str, Enum):
    """Root rebuild treatment of an unpaired peak."""
    PROMOTE = "promote"  # Advance unchanged to the next level
    EMPTY_SIBLING = "empty_sibling"  # Wrap as H(peak + H(b""))


class StreamingMerkleAccumulator:
    """
    Append-only Merkle accumulator.

    Example:
        >>> acc = StreamingMerkleAccumulator()
        >>> first = acc.append(b"1 transaction")
        >>> _ = acc.append(b"2 transaction")
        >>> acc.frontier_weights()
        [2]
        >>> len(acc.generate_proof(first))
        2
    """

    def __init__(
        self,
        hash_fn: HashFunction = sha256,
        lone_peak_policy: LonePeakPolicy | str = LonePeakPolicy.PROMOTE,
        event_sink: Optional[EventSink] = None,
    ) -> None:
        width = digest_size(hash_fn)
        if width <= 0:
            raise ValueError("Hash function must produce a non-empty digest")

        self.hash_fn = hash_fn
        self.digest_size = width
        self.lone_peak_policy = LonePeakPolicy(lone_peak_policy)
        self.event_sink = event_sink

        self._arena = NodeArena(hash_fn)
        self._frontier = Frontier()
        self._root: Optional[int] = None
        self._scaffold: list[int] = []
        self._leaf_count = 0

    @classmethod
    def from_config(
        cls,
        config: "RuntimeConfig",
        event_sink: Optional[EventSink] = None,
    ) -> "StreamingMerkleAccumulator":
        """Build an accumulator from a RuntimeConfig."""
        if event_sink is None and config.tree.emit_events:
            event_sink = LoggingEventSink()
        return cls(
            hash_fn=get_hash_function(config.hash.algorithm),
            lone_peak_policy=config.tree.lone_peak_policy,
            event_sink=event_sink,
        )

    # ------------------------------------------------------------------
    # State accessors
    # ------------------------------------------------------------------

    @property
    def leaf_count(self) -> int:
        return self._leaf_count

    def __len__(self) -> int:
        return self._leaf_count

    @property
    def is_empty(self) -> bool:
        return self._root is None

    def frontier_weights(self) -> list[int]:
        """Weights currently present in the frontier, ascending."""
        return self._frontier.weights()

    def peak_digests(self) -> dict[int, bytes]:
        """Frontier peak digests keyed by weight, ascending."""
        return {w: self._arena.digest_of(self._frontier[w]) for w in self._frontier.weights()}

    def current_root(self) -> bytes:
        """
        Return the digest of the current root.

        Raises:
            EmptyTreeException: If nothing has been appended
        """
        if self._root is None:
            raise EmptyTreeException()
        return self._arena.digest_of(self._root)

    @property
    def root_handle(self) -> NodeHandle:
        """Handle to the current root node."""
        if self._root is None:
            raise EmptyTreeException()
        return self._arena.handle(self._root)

    def digest_of(self, handle: NodeHandle) -> bytes:
        return self._arena.digest_of(self._arena.resolve(handle))

    def leaf_value(self, handle: NodeHandle) -> bytes:
        """Return the value stored in the leaf referenced by ``handle``."""
        node = self._arena.get(self._arena.resolve(handle))
        if not isinstance(node, LeafNode):
            raise ValueError(f"Handle {handle.index} does not reference a leaf")
        return node.value

    # ------------------------------------------------------------------
    # Append
    # ------------------------------------------------------------------

    def append(self, value: bytes) -> NodeHandle:
        """
        Append a value and recompute the root.

        Args:
            value: Opaque bytes to append

        Returns:
            Handle to the new leaf, usable with generate_proof()
        """
        self._arena.begin()
        try:
            leaf = self._arena.make_leaf(value)

            frontier = self._frontier.copy()
            merges = frontier.merge(self._arena, leaf)
            frontier.check_invariant(self._leaf_count + 1)

            root, scaffold = self._rebuild_root(frontier)
        except Exception:
            self._arena.rollback()
            logger.warning("append rolled back at leaf count %d", self._leaf_count)
            raise
        self._arena.commit()

        retired = self._scaffold
        self._frontier = frontier
        self._root = root
        self._scaffold = scaffold
        self._leaf_count += 1

        for index in retired:
            self._arena.release(index)

        logger.debug(
            "appended leaf %d: %d merge(s), weights=%s",
            self._leaf_count,
            len(merges),
            frontier.weights(),
        )
        self._emit(merges)
        return self._arena.handle(leaf)

    def extend(self, values: Iterable[bytes]) -> list[NodeHandle]:
        """Append each value in order."""
        return [self.append(value) for value in values]

    def _rebuild_root(self, frontier: Frontier) -> tuple[int, list[int]]:
        """
        Reduce the frontier peaks to a single root.

        Returns:
            The root index and the wrapper nodes created for this rebuild
        """
        level = frontier.peaks()
        if not level:
            raise MalformedMergeException("Cannot rebuild root from an empty frontier")

        for peak in level:
            self._arena.set_parent(peak, None)

        scaffold: list[int] = []
        while len(level) > 1:
            next_level: list[int] = []
            for i in range(0, len(level) - 1, 2):
                parent = self._arena.make_internal(level[i], level[i + 1])
                scaffold.append(parent)
                next_level.append(parent)

            if len(level) % 2 == 1:
                lone = level[-1]
                if self.lone_peak_policy is LonePeakPolicy.PROMOTE:
                    next_level.append(lone)
                else:
                    parent = self._arena.make_internal(lone, None)
                    scaffold.append(parent)
                    next_level.append(parent)

            level = next_level

        return level[0], scaffold

    def _emit(self, merges: list[MergeStep]) -> None:
        if self.event_sink is None:
            return
        for step in merges:
            self.event_sink.emit(MergeEvent(
                weight=step.weight,
                left_digest=to_hex(self._arena.digest_of(step.left)),
                right_digest=to_hex(self._arena.digest_of(step.right)),
                parent_digest=to_hex(self._arena.digest_of(step.parent)),
            ))
        self.event_sink.emit(RootRebuiltEvent(
            leaf_count=self._leaf_count,
            root_digest=to_hex(self.current_root()),
            weights=self._frontier.weights(),
        ))

    # ------------------------------------------------------------------
    # Proofs
    # ------------------------------------------------------------------

    def generate_proof(self, handle: NodeHandle) -> InclusionProof:
        """
        Build an inclusion proof for ``handle`` against the current root.

        Walks parent links from the node to the root, recording the sibling
        digest and side at each level. A wrapper with no right child yields
        an explicit "empty" step.

        Raises:
            EmptyTreeException: If nothing has been appended
            UnreachableNodeException: If the handle is foreign, retired, or
                its parent chain does not reach the current root
        """
        if self._root is None:
            raise EmptyTreeException()

        start = self._arena.resolve(handle)
        current = start
        steps: list[ProofStep] = []

        while current != self._root:
            parent = self._arena.parent_of(current)
            if parent is None or not self._arena.is_live(parent):
                raise UnreachableNodeException(
                    "Parent chain ends before reaching the current root",
                    node_index=start,
                    details={"stopped_at": current},
                )

            sibling = self._arena.sibling(current)
            if sibling is None:
                steps.append(ProofStep(digest=self._arena.empty_sibling_digest, position="empty"))
            else:
                # sibling() has already checked that the parent is internal
                position = "left" if self._arena.get(parent).left == sibling else "right"
                steps.append(ProofStep(digest=self._arena.digest_of(sibling), position=position))
            current = parent

        return InclusionProof(
            leaf=self._arena.digest_of(start),
            steps=steps,
            root=self._arena.digest_of(self._root),
            leaf_count=self._leaf_count,
        )


__all__ = [
    "LonePeakPolicy",
    "StreamingMerkleAccumulator",
]
