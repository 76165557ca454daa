"""
streamtree CLI

Command-line interface for the streaming Merkle accumulator.

Usage:
    python -m streamtree_cli root values.txt
    python -m streamtree_cli prove values.txt --index 3
    python -m streamtree_cli frontier values.txt
    python -m streamtree_cli config --init
"""

__version__ = "0.1.0"
