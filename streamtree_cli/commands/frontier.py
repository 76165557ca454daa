"""
CLI Frontier Command

Append every line of a file and print the frontier peaks.

Usage:
    streamtree frontier values.txt [--json]
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace

from core.crypto.hashing import to_hex
from core.schemas.errors import AccumulatorException
from streamtree_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    build_accumulator,
)


def frontier_cmd(args: Namespace) -> int:
    """Execute the frontier command."""
    try:
        accumulator, _ = build_accumulator(args)
    except (FileNotFoundError, AccumulatorException) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    peaks = accumulator.peak_digests()

    if args.json:
        data = {
            "leaf_count": accumulator.leaf_count,
            "peaks": [{"weight": w, "digest": to_hex(d)} for w, d in peaks.items()],
        }
        print(json.dumps(data, indent=2))
    else:
        print(f"leaf_count: {accumulator.leaf_count}")
        if not peaks:
            print("frontier is empty")
        for weight, digest in peaks.items():
            print(f"  {weight:>6} {to_hex(digest)}")
    return EXIT_SUCCESS
