"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m streamtree_cli root <file> [--json]
    python -m streamtree_cli prove <file> --index N [--json]
    python -m streamtree_cli frontier <file> [--json]
    python -m streamtree_cli config --init [--path streamtree.yaml]
    python -m streamtree_cli config --show

Input files hold one value per line; "-" reads from stdin.

Environment Variables:
    STREAMTREE_HASH_ALGORITHM     Hash function (default: sha256)
    STREAMTREE_LONE_PEAK_POLICY   promote or empty_sibling (default: promote)
    STREAMTREE_EMIT_EVENTS        Log merge/rebuild events (default: false)
    STREAMTREE_LOG_LEVEL          Log level (default: INFO)
    STREAMTREE_LOG_FILE           Also log to this file
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from core.schemas.errors import AccumulatorException
from streamtree_cli import __version__
from streamtree_cli.commands import frontier, prove, root
from streamtree_cli.commands.common import EXIT_RUNTIME_ERROR, EXIT_SUCCESS
from streamtree_cli.config import get_default_config_template, load_config


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def _add_input_command(subparsers, name: str, help_text: str, func) -> argparse.ArgumentParser:
    sub = subparsers.add_parser(name, help=help_text, description=help_text)
    sub.add_argument(
        "input",
        type=str,
        help="File with one value per line ('-' for stdin)",
    )
    sub.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )
    sub.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on unexpected errors",
    )
    sub.set_defaults(func=func)
    return sub


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="streamtree",
        description="Streaming Merkle accumulator - compute roots and inclusion proofs.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: ./streamtree.yaml or ~/.config/streamtree/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    _add_input_command(
        subparsers, "root",
        "Append every value and print the current root",
        root.root_cmd,
    )

    prove_parser = _add_input_command(
        subparsers, "prove",
        "Append every value and print the inclusion proof for one of them",
        prove.prove_cmd,
    )
    prove_parser.add_argument(
        "--index", "-i",
        type=int,
        required=True,
        help="0-based index of the value to prove",
    )

    _add_input_command(
        subparsers, "frontier",
        "Append every value and print the frontier peaks",
        frontier.frontier_cmd,
    )

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show the effective configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="streamtree.yaml",
        help="Path for config file written by --init (default: streamtree.yaml)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("You can also use environment variables (STREAMTREE_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.runtime_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    print("Usage: streamtree config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=index out of range)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    try:
        config = load_config(args.config)
    except (FileNotFoundError, AccumulatorException) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    setup_logging(
        level=args.log_level or config.logging.level,
        log_file=config.logging.file,
    )

    # Attach config to args for commands to use
    args.runtime_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
