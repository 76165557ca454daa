"""
Module 02 - Error Taxonomy
File: __init__.py

Purpose: Export the public API for the schemas module.
"""

# Error models and exceptions
from .errors import (
    AccumulatorError,
    AccumulatorException,
    ConfigurationException,
    EmptyTreeException,
    ErrorCodes,
    MalformedMergeException,
    UnreachableNodeException,
)

__all__ = [
    "AccumulatorError",
    "AccumulatorException",
    "ConfigurationException",
    "EmptyTreeException",
    "ErrorCodes",
    "MalformedMergeException",
    "UnreachableNodeException",
]
