"""
Module 03 - Streaming Merkle Accumulator
Append-only Merkle accumulator with inclusion proofs against the current root.

Owner: Protocol/Crypto Engineer
Module ID: M03

This module provides:
- StreamingMerkleAccumulator: append values, read the current root, prove inclusion
- Frontier: power-of-two peaks maintained by carry propagation
- InclusionProof / ProofStep: bottom-up sibling digests plus the root
- Event models and sinks for observing merges and root rebuilds

Canonical Commitment Rules:
1. Leaf hashing: H(value)
2. Parent hashing: H(left + right), raw digests, no separator
3. Merge ordering: earlier peak on the left, carried subtree on the right
4. Root rebuild: peaks ascending by weight, paired left to right
5. Unpaired peak: promoted unchanged (default) or wrapped with H(b"")

Usage:
    from core.merkle import StreamingMerkleAccumulator

    acc = StreamingMerkleAccumulator()
    handle = acc.append(b"1 transaction")
    acc.append(b"2 transaction")

    root = acc.current_root()
    proof = acc.generate_proof(handle)
    assert proof.root == root
"""
from .accumulator import (
    LonePeakPolicy,
    StreamingMerkleAccumulator,
)

from .events import (
    AccumulatorEvent,
    EventSink,
    LoggingEventSink,
    MergeEvent,
    RecordingEventSink,
    RootRebuiltEvent,
)

from .frontier import (
    Frontier,
    MergeStep,
    expected_weights,
)

from .merkle_proofs import (
    InclusionProof,
    ProofStep,
)

from .nodes import (
    InternalNode,
    LeafNode,
    NodeArena,
    NodeHandle,
)


__all__ = [
    # Accumulator
    "LonePeakPolicy",
    "StreamingMerkleAccumulator",
    # Frontier
    "Frontier",
    "MergeStep",
    "expected_weights",
    # Proofs
    "InclusionProof",
    "ProofStep",
    # Nodes
    "InternalNode",
    "LeafNode",
    "NodeArena",
    "NodeHandle",
    # Events
    "AccumulatorEvent",
    "EventSink",
    "LoggingEventSink",
    "MergeEvent",
    "RecordingEventSink",
    "RootRebuiltEvent",
]
