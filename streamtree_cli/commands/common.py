"""
Shared helpers for CLI commands: reading values and building accumulators.
"""

from __future__ import annotations

import sys
from argparse import Namespace
from pathlib import Path

from core.config.runtime import RuntimeConfig
from core.merkle import NodeHandle, StreamingMerkleAccumulator


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_INVALID_INDEX = 2


def read_values(source: str) -> list[bytes]:
    """
    Read one value per line from a file, or from stdin when ``source`` is "-".

    Line endings are stripped; the remaining bytes are appended as-is.
    """
    if source == "-":
        data = sys.stdin.buffer.read()
    else:
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(f"Input file not found: {path}")
        data = path.read_bytes()
    return data.splitlines()


def build_accumulator(
    args: Namespace,
) -> tuple[StreamingMerkleAccumulator, list[NodeHandle]]:
    """Append every value from ``args.input`` to a fresh accumulator."""
    config: RuntimeConfig = getattr(args, "runtime_config", None) or RuntimeConfig()
    accumulator = StreamingMerkleAccumulator.from_config(config)
    handles = accumulator.extend(read_values(args.input))
    return accumulator, handles
