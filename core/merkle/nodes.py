"""
Module 03 - Merkle Nodes
Arena-backed tree vertices for the streaming accumulator.

Owner: Protocol/Crypto Engineer
Module ID: M03

This module provides:
- LeafNode / InternalNode: node records with a digest fixed at construction
- NodeHandle: opaque, generation-checked reference handed to callers
- NodeArena: owns every node, addresses them by integer index

Node Rules (Hard Contracts):
1. Leaf digest: H(value)
2. Internal digest: H(left.digest + right.digest), no separator
3. Internal with no right child: H(left.digest + H(b""))
4. A node's digest never changes; only its parent link does
5. Parent links are plain indices, so upward traversal creates no cycles

Slots released by the arena are reused. Every release bumps the slot's
generation, so a handle to a released node never resolves to its successor.

Transactions:
    begin() starts recording every parent rewrite and every new slot.
    rollback() restores the recorded parents and releases the new slots;
    commit() drops the record. An append runs inside one transaction.
"""
from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Optional, Union

from core.crypto.hashing import HashFunction, hash_concat, sha256
from core.schemas.errors import MalformedMergeException, UnreachableNodeException


_ARENA_TOKENS = itertools.count(1)


@dataclass
class LeafNode:
    """A node wrapping one appended value."""
    value: bytes
    digest: bytes
    parent: Optional[int] = None


@dataclass
class InternalNode:
    """A node whose digest is derived from its children's digests."""
    left: int
    right: Optional[int]
    digest: bytes
    parent: Optional[int] = None


Node = Union[LeafNode, InternalNode]


@dataclass(frozen=True)
class NodeHandle:
    """
    Opaque reference to a node inside one accumulator.

    Attributes:
        index: Slot in the owning arena
        generation: Slot generation at the time the handle was issued
        owner: Token of the owning arena
    """
    index: int
    generation: int
    owner: int


class NodeArena:
    """
    Owns the nodes of one accumulator.

    Children are owned top-down through the arena; ``parent`` is a
    non-owning index used only for walking toward the root.
    """

    def __init__(self, hash_fn: HashFunction = sha256) -> None:
        self._hash_fn = hash_fn
        self._nodes: list[Optional[Node]] = []
        self._generations: list[int] = []
        self._free: list[int] = []
        self.token = next(_ARENA_TOKENS)
        self.empty_sibling_digest: bytes = hash_fn(b"")
        # (index, previous parent) pairs and new slots of the open transaction
        self._parent_journal: Optional[list[tuple[int, Optional[int]]]] = None
        self._created: Optional[list[int]] = None

    def __len__(self) -> int:
        return len(self._nodes) - len(self._free)

    def _store(self, node: Node) -> int:
        if self._free:
            index = self._free.pop()
            self._nodes[index] = node
        else:
            index = len(self._nodes)
            self._nodes.append(node)
            self._generations.append(0)
        if self._created is not None:
            self._created.append(index)
        return index

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    @property
    def in_transaction(self) -> bool:
        return self._parent_journal is not None

    def begin(self) -> None:
        """Start recording changes so they can be undone by rollback()."""
        if self.in_transaction:
            raise MalformedMergeException("Arena transaction already open")
        self._parent_journal = []
        self._created = []

    def commit(self) -> None:
        """Keep every change made since begin()."""
        self._parent_journal = None
        self._created = None

    def rollback(self) -> None:
        """
        Undo every change made since begin().

        Parent links are restored newest first, then every node created in
        the transaction is released.
        """
        journal = self._parent_journal or []
        created = self._created or []
        self.commit()

        for index, parent in reversed(journal):
            self.set_parent(index, parent)
        for index in reversed(created):
            self.release(index)

    def is_live(self, index: int) -> bool:
        return 0 <= index < len(self._nodes) and self._nodes[index] is not None

    def get(self, index: int) -> Node:
        """
        Return the node stored at ``index``.

        Raises:
            MalformedMergeException: If the slot is empty or out of range
        """
        if not self.is_live(index):
            raise MalformedMergeException(
                f"No live node at index {index}",
                details={"index": index},
            )
        return self._nodes[index]

    def make_leaf(self, value: bytes) -> int:
        """Create a leaf for ``value``. Digest = H(value)."""
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise TypeError(f"Leaf value must be bytes, got {type(value).__name__}")
        value = bytes(value)
        return self._store(LeafNode(value=value, digest=self._hash_fn(value)))

    def make_internal(self, left: Optional[int], right: Optional[int]) -> int:
        """
        Create an internal node over ``left`` and ``right`` and re-parent them.

        A missing ``right`` child hashes against the empty-sibling digest.

        Raises:
            MalformedMergeException: If ``left`` is missing or either child
                is not a live node
        """
        if left is None:
            raise MalformedMergeException(
                "Internal node requires a left child",
                details={"right": right},
            )
        left_digest = self.get(left).digest
        right_digest = self.get(right).digest if right is not None else self.empty_sibling_digest

        digest = hash_concat(left_digest, right_digest, self._hash_fn)
        index = self._store(InternalNode(left=left, right=right, digest=digest))

        self.set_parent(left, index)
        if right is not None:
            self.set_parent(right, index)
        return index

    def set_parent(self, index: int, parent: Optional[int]) -> None:
        node = self.get(index)
        if self._parent_journal is not None:
            self._parent_journal.append((index, node.parent))
        node.parent = parent

    def parent_of(self, index: int) -> Optional[int]:
        return self.get(index).parent

    def digest_of(self, index: int) -> bytes:
        return self.get(index).digest

    def sibling(self, index: int) -> Optional[int]:
        """
        Return the other child of ``index``'s parent.

        Returns None when the parent has no right child (empty-sibling
        wrapper). Raises MalformedMergeException when ``index`` has no
        parent or its parent does not list it as a child.
        """
        parent_index = self.parent_of(index)
        if parent_index is None:
            raise MalformedMergeException(
                f"Node {index} has no parent, so it has no sibling",
                details={"index": index},
            )
        parent = self.get(parent_index)
        if not isinstance(parent, InternalNode):
            raise MalformedMergeException(
                f"Parent {parent_index} of node {index} is a leaf",
                details={"index": index, "parent": parent_index},
            )
        if parent.left == index:
            return parent.right
        if parent.right == index:
            return parent.left
        raise MalformedMergeException(
            f"Parent {parent_index} does not list node {index} as a child",
            details={"index": index, "parent": parent_index},
        )

    def release(self, index: int) -> None:
        """Free a slot for reuse and invalidate handles that point at it."""
        self.get(index)
        self._nodes[index] = None
        self._generations[index] += 1
        self._free.append(index)

    def handle(self, index: int) -> NodeHandle:
        self.get(index)
        return NodeHandle(index=index, generation=self._generations[index], owner=self.token)

    def resolve(self, handle: NodeHandle) -> int:
        """
        Map a handle back to a live slot index.

        Raises:
            UnreachableNodeException: If the handle belongs to another arena
                or its node has since been released
        """
        if handle.owner != self.token:
            raise UnreachableNodeException(
                "Handle was issued by a different accumulator",
                node_index=handle.index,
            )
        if not self.is_live(handle.index) or self._generations[handle.index] != handle.generation:
            raise UnreachableNodeException(
                "Handle refers to a node retired by a later root rebuild",
                node_index=handle.index,
                details={"generation": handle.generation},
            )
        return handle.index


__all__ = [
    "LeafNode",
    "InternalNode",
    "Node",
    "NodeHandle",
    "NodeArena",
]
