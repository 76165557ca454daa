"""
CLI Root Command

Append every line of a file and print the resulting root.

Usage:
    streamtree root values.txt [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import dataclass, field, asdict

from core.crypto.hashing import to_hex
from core.schemas.errors import AccumulatorException
from streamtree_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    build_accumulator,
)


logger = logging.getLogger(__name__)


@dataclass
class RootSummary:
    """Summary of an accumulation run for CLI output."""
    input: str = ""
    leaf_count: int = 0
    root: str = ""
    weights: list[int] = field(default_factory=list)
    lone_peak_policy: str = ""

    def to_dict(self) -> dict:
        return asdict(self)


def print_summary_human(summary: RootSummary) -> None:
    print(f"input: {summary.input}")
    print(f"leaf_count: {summary.leaf_count}")
    print(f"weights: {summary.weights}")
    print(f"lone_peak_policy: {summary.lone_peak_policy}")
    print(f"root: {summary.root}")


def root_cmd(args: Namespace) -> int:
    """
    Execute the root command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    try:
        accumulator, _ = build_accumulator(args)
        root = accumulator.current_root()
    except (FileNotFoundError, AccumulatorException) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    summary = RootSummary(
        input=args.input,
        leaf_count=accumulator.leaf_count,
        root=to_hex(root),
        weights=accumulator.frontier_weights(),
        lone_peak_policy=accumulator.lone_peak_policy.value,
    )
    logger.info(f"Accumulated {summary.leaf_count} value(s)")

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)
    return EXIT_SUCCESS
