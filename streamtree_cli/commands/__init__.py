"""
CLI command modules.
"""

from streamtree_cli.commands import frontier, prove, root

__all__ = ["frontier", "prove", "root"]
