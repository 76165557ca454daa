"""
Test fixtures package for streamtree tests.

This package provides factory functions and helpers for creating test objects:
- merkle_fixtures.py: value factories, pre-filled accumulators, proof recomputation

Usage:
    from fixtures import make_values, make_accumulator, recompute_root

    def test_something():
        acc, handles = make_accumulator(5)
        proof = acc.generate_proof(handles[0])
        assert recompute_root(proof) == acc.current_root()
"""

from .merkle_fixtures import (
    make_values,
    make_accumulator,
    recompute_root,
    expected_depth,
)

__all__ = [
    "make_values",
    "make_accumulator",
    "recompute_root",
    "expected_depth",
]
