"""
CLI Prove Command

Append every line of a file and print the inclusion proof for one of them.

Usage:
    streamtree prove values.txt --index N [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace

from core.crypto.hashing import to_hex
from core.merkle import InclusionProof
from core.schemas.errors import AccumulatorException
from streamtree_cli.commands.common import (
    EXIT_INVALID_INDEX,
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    build_accumulator,
)


logger = logging.getLogger(__name__)


def print_proof_human(index: int, proof: InclusionProof) -> None:
    print(f"index: {index}")
    print(f"leaf_count: {proof.leaf_count}")
    print(f"leaf: {to_hex(proof.leaf)}")
    print(f"steps ({proof.depth}):")
    for step in proof.steps:
        print(f"  {step.position:<5} {to_hex(step.digest)}")
    print(f"root: {to_hex(proof.root)}")


def prove_cmd(args: Namespace) -> int:
    """
    Execute the prove command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    try:
        accumulator, handles = build_accumulator(args)
    except (FileNotFoundError, AccumulatorException) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if not 0 <= args.index < len(handles):
        print(
            f"Error: index {args.index} out of range for {len(handles)} value(s)",
            file=sys.stderr,
        )
        return EXIT_INVALID_INDEX

    try:
        proof = accumulator.generate_proof(handles[args.index])
    except AccumulatorException as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    logger.info(f"Generated proof of depth {proof.depth} for index {args.index}")

    if args.json:
        data = {"index": args.index, **proof.to_dict()}
        print(json.dumps(data, indent=2))
    else:
        print_proof_human(args.index, proof)
    return EXIT_SUCCESS
