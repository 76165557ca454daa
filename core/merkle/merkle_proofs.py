"""
Module 03 - Inclusion Proofs
Proof objects produced by the streaming accumulator.

Owner: Protocol/Crypto Engineer
Module ID: M03

An inclusion proof lists, bottom-up, the digest needed at each level to
recompute the parent, followed by the root digest. Each step also records
which side the sibling sits on, since the tree is not a complete binary
tree and the side cannot be derived from a leaf index.

Step positions:
- "left":  parent = H(sibling + current)
- "right": parent = H(current + sibling)
- "empty": the parent had no right child; parent = H(current + H(b""))
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from core.crypto.hashing import to_hex


SiblingPosition = Literal["left", "right", "empty"]

_POSITIONS = ("left", "right", "empty")


@dataclass(frozen=True)
class ProofStep:
    """
    One level of an inclusion proof.

    Attributes:
        digest: Sibling digest (the empty-sibling digest for "empty")
        position: Side the sibling sits on relative to the current node
    """
    digest: bytes
    position: SiblingPosition

    def __post_init__(self) -> None:
        """Validate step structure."""
        if self.position not in _POSITIONS:
            raise ValueError(f"Proof step position must be one of {_POSITIONS}, got {self.position!r}")

    def to_dict(self) -> dict[str, str]:
        return {"digest": to_hex(self.digest), "position": self.position}


@dataclass(frozen=True)
class InclusionProof:
    """
    Inclusion proof for one node against the current root.

    Attributes:
        leaf: Digest of the proven node (a leaf for handles from append)
        steps: Sibling steps from the node up to the root
        root: Root digest the proof was generated against
        leaf_count: Number of appends when the proof was generated
    """
    leaf: bytes
    steps: list[ProofStep] = field(default_factory=list)
    root: bytes = b""
    leaf_count: int = 0

    def __post_init__(self) -> None:
        if self.leaf_count < 0:
            raise ValueError(f"Leaf count must be non-negative, got {self.leaf_count}")

    def digests(self) -> list[bytes]:
        """Sibling digests bottom-up followed by the root digest."""
        return [step.digest for step in self.steps] + [self.root]

    @property
    def depth(self) -> int:
        """Number of edges between the proven node and the root."""
        return len(self.steps)

    def __len__(self) -> int:
        return len(self.steps) + 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "leaf": to_hex(self.leaf),
            "steps": [step.to_dict() for step in self.steps],
            "root": to_hex(self.root),
            "leaf_count": self.leaf_count,
        }


__all__ = [
    "SiblingPosition",
    "ProofStep",
    "InclusionProof",
]
