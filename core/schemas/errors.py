"""
Module 02 - Error Taxonomy
File: errors.py

Purpose: Standard error taxonomy for the streaming Merkle accumulator.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the accumulator."""

    # Tree state errors
    EMPTY_TREE = "EMPTY_TREE"
    UNREACHABLE_NODE = "UNREACHABLE_NODE"

    # Internal invariant violations
    MALFORMED_MERGE = "MALFORMED_MERGE"

    # Configuration errors
    INVALID_CONFIG = "INVALID_CONFIG"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class AccumulatorError(BaseModel):
    """
    Base error model for structured error communication.

    Used when an error has to cross a boundary as data (CLI JSON output,
    logs) rather than as a raised exception.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.EMPTY_TREE],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "AccumulatorException":
        """Convert this error model to a raised exception."""
        return AccumulatorException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class AccumulatorException(Exception):
    """
    Base exception for all accumulator errors.

    This exception carries structured error information and can be
    converted to/from AccumulatorError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "ACCUMULATOR_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> AccumulatorError:
        """Convert this exception to an AccumulatorError model."""
        return AccumulatorError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class EmptyTreeException(AccumulatorException):
    """Raised when the root or a proof is requested before any append."""

    def __init__(
        self,
        message: str = "Accumulator is empty: no values have been appended",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.EMPTY_TREE,
            details=details,
            retryable=False,
        )


class UnreachableNodeException(AccumulatorException):
    """
    Raised when a handle's parent chain does not end at the current root.

    Covers handles issued by another accumulator, handles to nodes that
    were retired by a later root rebuild, and broken parent chains.
    """

    def __init__(
        self,
        message: str,
        node_index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if node_index is not None:
            full_details["node_index"] = node_index
        super().__init__(
            message=message,
            code=ErrorCodes.UNREACHABLE_NODE,
            details=full_details,
            retryable=False,
        )


class MalformedMergeException(AccumulatorException):
    """Raised on an internal invariant violation in merge or root rebuild."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.MALFORMED_MERGE,
            details=details,
            retryable=False,
        )


class ConfigurationException(AccumulatorException):
    """Raised when a configuration value is invalid."""

    def __init__(
        self,
        message: str,
        field_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if field_path:
            full_details["field_path"] = field_path
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_CONFIG,
            details=full_details,
            retryable=False,
        )
